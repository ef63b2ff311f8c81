"""冲突检测单元测试"""

from __future__ import annotations

from itertools import permutations
from pathlib import Path

import pytest

from depot.core.exceptions import DependencyConflictError
from depot.core.manifest.conflicts import ConflictDetector, ensure_no_conflicts
from depot.core.models import ConflictRecord, Dependency, ManifestSource


def _sources(layout: dict[str, dict[str, Dependency | str]]) -> dict[str, ManifestSource]:
    """{"lib1": {"foo": "1.0"}} -> {"lib1": ManifestSource(...)}，保持插入顺序"""
    result: dict[str, ManifestSource] = {}
    for manifest_id, deps in layout.items():
        result[manifest_id] = ManifestSource(
            name=manifest_id,
            path=Path(manifest_id) / "Dependencies.toml",
            dependencies={
                k: v if isinstance(v, Dependency) else Dependency.from_version(v)
                for k, v in deps.items()
            },
        )
    return result


class TestConflictDetector:
    def test_equal_versions_no_conflict(self) -> None:
        """场景 A: 相同版本不构成冲突"""
        sources = _sources({"lib1": {"foo": "1.0"}, "lib2": {"foo": "1.0"}})
        assert ConflictDetector().detect(sources) == []

    def test_different_versions_one_record(self) -> None:
        """场景 B: 不同版本恰好一条记录"""
        sources = _sources({"lib1": {"foo": "1.0"}, "lib2": {"foo": "2.0"}})
        assert ConflictDetector().detect(sources) == [
            ConflictRecord(
                name="foo", manifest_a="lib1", manifest_b="lib2",
                version_a="1.0", version_b="2.0",
            ),
        ]

    def test_unconstrained_vs_explicit(self) -> None:
        """场景 C: 未约束版本与显式版本冲突"""
        sources = _sources({"lib1": {"foo": ""}, "lib2": {"foo": "1.0"}})
        [conflict] = ConflictDetector().detect(sources)
        assert (conflict.version_a, conflict.version_b) == ("", "1.0")
        assert "uses the latest available version of foo" in conflict.describe()
        assert '"lib2" requires 1.0 of foo' in conflict.describe()

    def test_detailed_without_version_equals_simple_empty(self) -> None:
        sources = _sources({
            "lib1": {"foo": Dependency(git="https://example.com/foo.git")},
            "lib2": {"foo": ""},
        })
        assert ConflictDetector().detect(sources) == []

    def test_detail_fields_not_compared(self) -> None:
        sources = _sources({
            "lib1": {"foo": Dependency(version="1.0", features=["a"])},
            "lib2": {"foo": Dependency(version="1.0", path="../foo")},
        })
        assert ConflictDetector().detect(sources) == []

    def test_independent_of_iteration_order(self) -> None:
        layout = {
            "c": {"foo": "3.0", "bar": "1"},
            "a": {"foo": "1.0", "bar": "1"},
            "b": {"foo": "1.0", "baz": "x"},
        }
        expected = ConflictDetector().detect(_sources(layout))
        for order in permutations(layout):
            reordered = {k: layout[k] for k in order}
            assert ConflictDetector().detect(_sources(reordered)) == expected
        # a-c 与 b-c 各一条，a-b 版本相同不产生记录
        assert [(c.manifest_a, c.manifest_b) for c in expected] == [("a", "c"), ("b", "c")]

    def test_each_pair_reported_once_and_canonical(self) -> None:
        sources = _sources({
            "zeta": {"foo": "1"},
            "alpha": {"foo": "2"},
            "mid": {"foo": "3"},
        })
        conflicts = ConflictDetector().detect(sources)
        pairs = [(c.name, c.manifest_a, c.manifest_b) for c in conflicts]
        assert len(pairs) == len(set(pairs)) == 3
        assert all(c.manifest_a <= c.manifest_b for c in conflicts)
        assert [c.manifest_a for c in conflicts] == sorted(c.manifest_a for c in conflicts)

    def test_sorted_by_manifest_then_name(self) -> None:
        sources = _sources({
            "lib1": {"foo": "1", "bar": "1"},
            "lib2": {"foo": "2", "bar": "2"},
        })
        assert [c.name for c in ConflictDetector().detect(sources)] == ["bar", "foo"]

    def test_single_manifest_never_conflicts(self) -> None:
        assert ConflictDetector().detect(_sources({"lib1": {"foo": "1"}})) == []

    def test_index(self) -> None:
        sources = _sources({"b": {"foo": "2"}, "a": {"foo": "1", "bar": ""}})
        assert ConflictDetector().index(sources) == {
            "foo": [("a", "1"), ("b", "2")],
            "bar": [("a", "")],
        }


class TestEnsureNoConflicts:
    def test_empty_passes(self) -> None:
        ensure_no_conflicts([])

    def test_raises_with_all_conflicts(self) -> None:
        conflicts = [
            ConflictRecord.between("foo", "a", "1", "b", "2"),
            ConflictRecord.between("bar", "a", "1", "c", ""),
        ]
        with pytest.raises(DependencyConflictError) as exc_info:
            ensure_no_conflicts(conflicts)
        assert exc_info.value.conflicts == conflicts
        assert exc_info.value.code == "DEPENDENCY_CONFLICT"
