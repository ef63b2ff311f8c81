"""产物目录搬移

cargo 要求产物位于 <隐藏工程>/target/debug/ 下，而使用者引用的是
稳定目录 <depot>/deps 等路径。构建前把产物搬进隐藏工程，构建后搬回。

搬移不是事务性的：没有文件锁，同一工作区的并发运行结果未定义。
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from depot.core.exceptions import FilesystemError

logger = logging.getLogger(__name__)


def move_dir(src: Path, dst: Path) -> None:
    """重命名目录，必要时创建 dst 的父目录；任何失败抛 FilesystemError"""
    if not src.is_dir():
        raise FilesystemError(f"产物目录不存在: {src}", src)
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        os.rename(src, dst)
    except OSError as e:
        raise FilesystemError(f"移动目录失败: {src} -> {dst}: {e}", src) from e
    logger.info("  已移动: %s -> %s", src, dst)


def _restore(moved: list[tuple[Path, Path]]) -> None:
    """把已搬入隐藏工程的目录逐个搬回；单个失败不影响其余目录"""
    stranded: list[Path] = []
    for stable, hidden in reversed(moved):
        try:
            move_dir(hidden, stable)
        except FilesystemError as e:
            stranded.append(hidden)
            logger.critical(
                "ARTIFACT RESTORE FAILED: %s 未能移回 %s，请手动恢复: %s",
                hidden, stable, e,
            )
    if stranded:
        raise FilesystemError(
            "ARTIFACT RESTORE FAILED: 以下产物目录仍停留在隐藏工程中，请手动移回: "
            + ", ".join(str(p) for p in stranded),
            stranded[0],
        )


@contextmanager
def stage_artifacts(pairs: list[tuple[Path, Path]]) -> Iterator[None]:
    """进入时 稳定目录 -> 隐藏工程，退出时（无论成功失败）搬回

    Args:
        pairs: [(稳定路径, 隐藏工程内路径)]

    搬入中途失败时，已搬入的目录同样会被搬回。
    """
    moved: list[tuple[Path, Path]] = []
    try:
        for stable, hidden in pairs:
            move_dir(stable, hidden)
            moved.append((stable, hidden))
        yield
    finally:
        _restore(moved)
