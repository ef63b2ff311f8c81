"""测试共享 fixture — 依赖文档生成 + 假构建工具

FakeBuildTool 在磁盘上模拟 `cargo new` / `cargo build`:
  - scaffold_project: 创建 <parent>/<name>/{Cargo.toml, src/lib.rs}
  - build:           在 target/debug/ 下生成各产物目录，并记录构建时看到的状态
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from depot.core.exceptions import ExternalToolError


class FakeBuildTool:
    """BuildTool 协议的测试替身"""

    def __init__(
        self,
        artifact_dirs: tuple[str, ...] = ("deps", "native"),
        *,
        fail_build: bool = False,
        fail_scaffold: bool = False,
    ) -> None:
        self.artifact_dirs = artifact_dirs
        self.fail_build = fail_build
        self.fail_scaffold = fail_scaffold
        self.calls: list[tuple[str, Path]] = []
        self.manifest_seen = ""
        # 构建开始时 target/debug/<dir> 中已有的文件，用于验证产物搬入
        self.staged_seen: dict[str, list[str]] = {}

    def scaffold_project(self, parent: Path, name: str) -> None:
        self.calls.append(("new", parent / name))
        if self.fail_scaffold:
            raise ExternalToolError("cargo new失败 (rc=101)", returncode=101)
        project = parent / name
        (project / "src").mkdir(parents=True)
        (project / "Cargo.toml").write_text(f'[package]\nname = "{name}"\n')
        (project / "src" / "lib.rs").write_text("")

    def build(self, working_dir: Path) -> None:
        self.calls.append(("build", working_dir))
        self.manifest_seen = (working_dir / "Cargo.toml").read_text(encoding="utf-8")
        target = working_dir / "target" / "debug"
        self.staged_seen = {
            d: sorted(p.name for p in (target / d).iterdir()) if (target / d).is_dir() else []
            for d in self.artifact_dirs
        }
        if self.fail_build:
            raise ExternalToolError("cargo build失败 (rc=101)", returncode=101)
        build_no = sum(1 for kind, _ in self.calls if kind == "build")
        for d in self.artifact_dirs:
            (target / d).mkdir(parents=True, exist_ok=True)
            (target / d / f"build{build_no}.rlib").write_text("artifact")


@pytest.fixture()
def fake_tool() -> FakeBuildTool:
    return FakeBuildTool()


@pytest.fixture()
def write_deps(tmp_path: Path) -> Callable[[str, str], Path]:
    """write_deps("lib1", '[dependencies]\\nfoo = "1.0"\\n') -> 目录路径"""

    def _write(dir_name: str, content: str) -> Path:
        d = tmp_path / dir_name
        d.mkdir(parents=True, exist_ok=True)
        (d / "Dependencies.toml").write_text(content, encoding="utf-8")
        return d

    return _write


@pytest.fixture()
def make_tool() -> type[FakeBuildTool]:
    """需要定制失败行为时使用: make_tool(fail_build=True)"""
    return FakeBuildTool
