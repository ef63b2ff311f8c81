"""依赖集合并

仅在冲突检测无结果后调用：此时每个依赖名只有一个版本字符串，
按清单名升序后写覆盖前写，版本值与顺序无关；
同版本的多条详细声明，其非版本字段取最后合并的那条。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from depot.core.models import Dependency, ManifestSource

logger = logging.getLogger(__name__)


class ManifestMerger:
    """把各目录依赖集合并为一份"""

    def merge(self, sources: Mapping[str, ManifestSource]) -> dict[str, Dependency]:
        merged: dict[str, Dependency] = {}
        for manifest_id in sorted(sources):
            merged.update(sources[manifest_id].dependencies)
        logger.info("已合并 %d 个清单, 共 %d 个依赖", len(sources), len(merged))
        return merged
