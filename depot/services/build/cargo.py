"""cargo 命令封装"""

from __future__ import annotations

from pathlib import Path

from depot.utils.shell import CommandExecutor, run_cmd


class CargoTool:
    """BuildTool 协议的 cargo 实现"""

    def __init__(self, executable: str = "cargo", executor: CommandExecutor | None = None) -> None:
        self.executable = executable
        self._executor = executor

    def scaffold_project(self, parent: Path, name: str) -> None:
        run_cmd(
            [self.executable, "new", "--lib", name],
            cwd=parent, label="cargo new", executor=self._executor,
        )

    def build(self, working_dir: Path) -> None:
        run_cmd(
            [self.executable, "build"],
            cwd=working_dir, label="cargo build", executor=self._executor,
        )
