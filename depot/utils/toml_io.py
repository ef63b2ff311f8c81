"""TOML 文件统一读写工具

集中管理 Depot.toml / Dependencies.toml 的解析与 Cargo.toml 的序列化：
统一 encoding="utf-8"、解析错误定位到行列、原子写入。
"""

from __future__ import annotations

import logging
import os
import re
import sys
import tempfile
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from depot.core.exceptions import DocumentParseError, FilesystemError

logger = logging.getLogger(__name__)

_LOCATION_RE = re.compile(r"\s*\(at line (\d+), column (\d+)\)$")
_END_RE = re.compile(r"\s*\(at end of document\)$")


def _error_location(
    exc: tomllib.TOMLDecodeError, text: str,
) -> tuple[int | None, int | None, str]:
    """从 TOMLDecodeError 中取出 (行, 列, 描述)，行列从 1 开始"""
    lineno = getattr(exc, "lineno", None)
    colno = getattr(exc, "colno", None)
    if lineno is not None:
        return lineno, colno, getattr(exc, "msg", None) or str(exc)

    message = str(exc)
    m = _LOCATION_RE.search(message)
    if m:
        return int(m.group(1)), int(m.group(2)), message[:m.start()]
    m = _END_RE.search(message)
    if m:
        lines = text.split("\n")
        return len(lines), len(lines[-1]) + 1, message[:m.start()]
    return None, None, message


def parse_toml(text: str, path: str | Path) -> dict[str, Any]:
    """解析 TOML 文本，失败抛 DocumentParseError（带行列位置）"""
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        line, column, message = _error_location(e, text)
        raise DocumentParseError(
            path, f"could not parse input TOML: {message}",
            line=line, column=column,
        ) from e


def load_toml(path: str | Path) -> dict[str, Any]:
    """读取并解析 TOML 文件

    异常:
        FilesystemError: 文件无法读取
        DocumentParseError: 非 UTF-8 编码或 TOML 语法错误
    """
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as e:
        raise FilesystemError(f"读取文件失败: {p}: {e}", p) from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentParseError(p, f"文件不是 UTF-8 编码: {e}") from e
    return parse_toml(text, p)


def dump_toml(data: dict[str, Any]) -> str:
    """序列化为 TOML 文本"""
    return tomli_w.dumps(data)


def _target_mode(path: Path) -> int:
    """覆盖已有文件时沿用其权限，否则按 umask 计算新文件的默认权限"""
    try:
        return path.stat().st_mode & 0o777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏

    父目录必须已存在（由调用方负责创建）；任何 IO 失败转换为 FilesystemError。
    mkstemp 创建的临时文件为 0600，rename 前改为目标权限。
    """
    try:
        fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    except OSError as e:
        raise FilesystemError(f"无法在 {path.parent} 创建临时文件: {e}", path) from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp, _target_mode(path))
        os.replace(tmp, str(path))
    except OSError as e:
        try:
            os.unlink(tmp)
        except OSError:
            # 临时文件清理失败不影响原异常抛出
            pass
        raise FilesystemError(f"写入文件失败: {path}: {e}", path) from e
    logger.debug("已写入: %s", path)
