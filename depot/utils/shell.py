"""子进程执行工具 — 统一外部命令调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
构建工具的 stdout / stderr 直接继承当前进程（实时输出，不缓冲不检查），
调用方只关心退出状态；不设超时，挂起的构建需由操作者从外部终止。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from depot.core.exceptions import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    测试时可注入 mock 实现，无需 patch subprocess。
    无法启动命令时应抛出 OSError。
    """

    def execute(self, cmd: list[str], *, cwd: str) -> CommandResult:
        """执行命令并返回结果"""
        ...


class LocalExecutor:
    """本地子进程执行器（默认实现），输出流继承父进程"""

    def execute(self, cmd: list[str], *, cwd: str) -> CommandResult:
        r = subprocess.run(cmd, cwd=cwd, check=False)
        return CommandResult(returncode=r.returncode)


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


def run_cmd(
    cmd: list[str], *, cwd: str | Path,
    label: str = "cmd",
    executor: CommandExecutor | None = None,
) -> CommandResult:
    """执行外部命令，无法启动或返回非零时抛 ExternalToolError

    Args:
        cmd: 命令及参数列表
        cwd: 工作目录
        label: 日志标签
        executor: 不传则使用全局默认执行器
    """
    logger.info("  %s: %s (cwd=%s)", label, shlex.join(cmd), cwd)
    executor = executor or get_executor()
    try:
        r = executor.execute(cmd, cwd=str(cwd))
    except OSError as e:
        raise ExternalToolError(f"{label}失败: 无法启动 {cmd[0]}: {e}") from e
    if not r.success:
        raise ExternalToolError(f"{label}失败 (rc={r.returncode})", returncode=r.returncode)
    return r
