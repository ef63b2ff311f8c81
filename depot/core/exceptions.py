"""统一异常体系

所有业务异常继承 DepotError，替代散落的 ValueError / RuntimeError / OSError。
CLI 层据此输出友好提示并以非零状态退出；本工具不存在可本地恢复的错误，
任何异常都会中止整次运行。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depot.core.models import ConflictRecord


class DepotError(Exception):
    """depot 基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(DepotError):
    """工作区配置或工具配置缺失、内容无效"""

    code = "CONFIG_ERROR"


class DocumentParseError(DepotError):
    """输入文档格式错误

    line / column 从 1 开始计数；结构错误（类型不符等）无法定位时为 None。
    """

    code = "PARSE_ERROR"

    def __init__(
        self, path: str | Path, message: str,
        *, line: int | None = None, column: int | None = None,
    ) -> None:
        self.path = Path(path)
        self.line = line
        self.column = column
        self.reason = message
        super().__init__(f"{self.location}: {message}")

    @property
    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        if self.column is None:
            return f"{self.path}:{self.line}"
        return f"{self.path}:{self.line}:{self.column}"


class DependencyConflictError(DepotError):
    """多个清单对同一依赖声明了不同版本"""

    code = "DEPENDENCY_CONFLICT"

    def __init__(self, conflicts: list[ConflictRecord]) -> None:
        self.conflicts = list(conflicts)
        super().__init__(f"发现 {len(self.conflicts)} 处依赖版本冲突")


class FilesystemError(DepotError):
    """目录创建、重命名或文件写入失败"""

    code = "FILESYSTEM_ERROR"

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ExternalToolError(DepotError):
    """外部构建工具无法启动或返回非零状态"""

    code = "EXTERNAL_TOOL_ERROR"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
