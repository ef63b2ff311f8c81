"""依赖清单处理模块

拆分说明:
- loader.py: 读取 Depot.toml 与各目录的 Dependencies.toml
- conflicts.py: 跨清单版本冲突检测
- merger.py: 无冲突时合并为一份依赖集
"""

from depot.core.manifest.conflicts import ConflictDetector, ensure_no_conflicts
from depot.core.manifest.loader import ManifestSourceLoader, load_workspace_config
from depot.core.manifest.merger import ManifestMerger

__all__ = [
    "ConflictDetector",
    "ManifestMerger",
    "ManifestSourceLoader",
    "ensure_no_conflicts",
    "load_workspace_config",
]
