"""领域协议定义

构建编排器只依赖这里的抽象，不直接拼接命令行；
使用 typing.Protocol 而非 ABC，测试替身无需继承即可满足协议。
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class BuildTool(Protocol):
    """外部构建工具协议

    两个操作失败时都应抛出 ExternalToolError。
    """

    def scaffold_project(self, parent: Path, name: str) -> None:
        """在 parent 下创建名为 name 的新工程骨架"""
        ...

    def build(self, working_dir: Path) -> None:
        """以 working_dir 为工作目录执行构建"""
        ...
