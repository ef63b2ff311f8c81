"""依赖版本冲突检测

一次遍历建立 依赖名 -> [(清单名, 版本)] 索引，再对每个依赖名
两两比较声明它的清单。每个 (依赖, 清单对) 组合至多产生一条记录，
与清单的遍历顺序无关。

版本只做字面比较，不做语义化版本范围求解；
空字符串（未约束）与任何显式版本都视为不同。
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Mapping
from itertools import combinations

from depot.core.exceptions import DependencyConflictError
from depot.core.models import ConflictRecord, ManifestSource

logger = logging.getLogger(__name__)


class ConflictDetector:
    """跨清单依赖版本冲突检测器"""

    def index(self, sources: Mapping[str, ManifestSource]) -> dict[str, list[tuple[str, str]]]:
        """依赖名 -> [(清单名, 解析后版本)]，清单名升序"""
        declared: dict[str, list[tuple[str, str]]] = defaultdict(list)
        for manifest_id in sorted(sources):
            for dep_name, dep in sources[manifest_id].dependencies.items():
                declared[dep_name].append((manifest_id, dep.resolved_version))
        return dict(declared)

    def detect(self, sources: Mapping[str, ManifestSource]) -> list[ConflictRecord]:
        """返回按 (manifest_a, manifest_b, 依赖名) 排序的冲突列表"""
        conflicts: list[ConflictRecord] = []
        for dep_name, declarations in self.index(sources).items():
            if len({version for _, version in declarations}) < 2:
                continue
            for (id_x, ver_x), (id_y, ver_y) in combinations(declarations, 2):
                if ver_x != ver_y:
                    conflicts.append(ConflictRecord.between(dep_name, id_x, ver_x, id_y, ver_y))
        conflicts.sort()
        if conflicts:
            logger.info("检测到 %d 处依赖版本冲突", len(conflicts))
        return conflicts


def ensure_no_conflicts(conflicts: list[ConflictRecord]) -> None:
    """冲突闸门：存在任何冲突即抛 DependencyConflictError"""
    if conflicts:
        raise DependencyConflictError(conflicts)
