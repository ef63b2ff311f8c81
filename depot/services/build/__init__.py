"""构建服务模块

拆分说明:
- renderer.py: 生成 Cargo.toml 文本
- staging.py: 产物目录在稳定目录与隐藏工程之间的搬移
- cargo.py: cargo 命令封装（BuildTool 协议实现）
- orchestrator.py: NEW / EXISTING 两阶段构建编排
"""

from depot.services.build.cargo import CargoTool
from depot.services.build.orchestrator import BuildOrchestrator
from depot.services.build.renderer import render_project_manifest
from depot.services.build.staging import move_dir, stage_artifacts

__all__ = [
    "BuildOrchestrator",
    "CargoTool",
    "move_dir",
    "render_project_manifest",
    "stage_artifacts",
]
