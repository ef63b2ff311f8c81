"""核心数据模型

所有核心数据类集中定义，加载器 / 冲突检测 / 合并 / 构建编排统一从此处导入。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from depot.core.exceptions import ConfigError

# =========================================================================
# 依赖声明
# =========================================================================

# 详细声明中除 version 外的字段，原样透传到生成清单，永不参与比较
DETAIL_FIELDS = ("path", "git", "branch", "tag", "rev", "features", "optional", "default_features")


@dataclass
class Dependency:
    """单个依赖声明 — 纯版本字符串，或带来源信息的详细记录

    simple=True 表示文档中写的是 `foo = "1.0"`；
    否则是 `foo = { version = "1.0", git = "..." }` 形式。
    """

    version: str | None = None
    path: str | None = None
    git: str | None = None
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None
    features: list[str] | None = None
    optional: bool | None = None
    default_features: bool | None = None
    simple: bool = False

    @classmethod
    def from_version(cls, version: str) -> Dependency:
        return cls(version=version, simple=True)

    @property
    def resolved_version(self) -> str:
        """冲突比较用的版本；空字符串表示未约束（使用最新可用版本）"""
        return self.version or ""

    def to_toml(self) -> str | dict[str, Any]:
        """转换为 TOML 值，None 字段省略"""
        if self.simple:
            return self.version or ""
        table: dict[str, Any] = {}
        if self.version is not None:
            table["version"] = self.version
        for name in DETAIL_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            key = "default-features" if name == "default_features" else name
            table[key] = list(value) if name == "features" else value
        return table


@dataclass
class ManifestSource:
    """一个目录下的依赖清单，以目录名为唯一标识"""

    name: str
    path: Path
    dependencies: dict[str, Dependency] = field(default_factory=dict)


def describe_requirement(dep_name: str, version: str) -> str:
    """把版本要求渲染为用户可读短语"""
    if version == "":
        return f"uses the latest available version of {dep_name}"
    return f"requires {version} of {dep_name}"


@dataclass(frozen=True, order=True)
class ConflictRecord:
    """两个清单对同一依赖声明了不同版本

    不变式: manifest_a <= manifest_b。请通过 between() 构造，
    它负责把两侧按标识排序，版本随标识一起交换。
    """

    manifest_a: str
    manifest_b: str
    name: str
    version_a: str
    version_b: str

    @classmethod
    def between(
        cls, name: str,
        manifest_x: str, version_x: str,
        manifest_y: str, version_y: str,
    ) -> ConflictRecord:
        if manifest_x == manifest_y:
            raise ValueError(f"冲突双方必须是不同清单: {manifest_x}")
        if version_x == version_y:
            raise ValueError(f"{name} 在 {manifest_x}/{manifest_y} 中版本相同，不构成冲突")
        if manifest_x > manifest_y:
            manifest_x, manifest_y = manifest_y, manifest_x
            version_x, version_y = version_y, version_x
        return cls(
            manifest_a=manifest_x, manifest_b=manifest_y, name=name,
            version_a=version_x, version_b=version_y,
        )

    def describe(self) -> str:
        return (
            f'Version mismatch: "{self.manifest_a}" '
            f"{describe_requirement(self.name, self.version_a)}, "
            f'while "{self.manifest_b}" '
            f"{describe_requirement(self.name, self.version_b)}."
        )


# =========================================================================
# 工作区与生成清单
# =========================================================================


@dataclass(frozen=True)
class ProfileSettings:
    """传给构建工具 [profile.dev] 的编译选项"""

    opt_level: int = 3
    debug: bool = False
    debug_assertions: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.opt_level, bool) or not isinstance(self.opt_level, int):
            raise ConfigError(f"opt_level 必须是整数: {self.opt_level!r}")
        if not 0 <= self.opt_level <= 3:
            raise ConfigError(f"opt_level 取值范围为 0-3: {self.opt_level}")
        for name in ("debug", "debug_assertions"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} 必须是布尔值: {getattr(self, name)!r}")


@dataclass(frozen=True)
class WorkspaceConfig:
    """一次运行的工作区配置，启动时确定，运行期间不可变

    working_dir 是相对路径（dirs / out_dir）的解析基准：
    显式传目录参数时为当前目录，否则为 Depot.toml 所在目录。
    """

    name: str
    dirs: tuple[str, ...]
    working_dir: Path
    out_dir: str | None = None
    profile: ProfileSettings = field(default_factory=ProfileSettings)
    cargo_name: str = "cargoproject"
    artifact_dirs: tuple[str, ...] = ("deps", "native")

    def resolve(self, path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.working_dir / p

    @property
    def source_dirs(self) -> list[Path]:
        return [self.resolve(d) for d in self.dirs]

    @property
    def depot_dir(self) -> Path:
        """稳定的工程目录，产物在此供人引用"""
        base = self.resolve(self.out_dir) if self.out_dir else self.working_dir
        return base / self.name

    @property
    def cargo_project_name(self) -> str:
        return f"{self.name}-{self.cargo_name}"

    @property
    def hidden_dir(self) -> Path:
        """由构建工具管理的隐藏工程目录"""
        return self.depot_dir / f".{self.cargo_project_name}"

    @property
    def cargo_toml(self) -> Path:
        return self.hidden_dir / "Cargo.toml"

    def artifact_pairs(self) -> list[tuple[Path, Path]]:
        """[(稳定路径, 隐藏工程内路径)]"""
        target = self.hidden_dir / "target" / "debug"
        return [(self.depot_dir / d, target / d) for d in self.artifact_dirs]


@dataclass
class ProjectManifest:
    """每次运行重新生成的构建清单，只以生成文件的形式落盘"""

    project_name: str
    profile: ProfileSettings
    dependencies: dict[str, Dependency] = field(default_factory=dict)
    crate_type: str = "lib"


# =========================================================================
# 构建结果
# =========================================================================

class BuildMode(str, Enum):
    """构建模式，由隐藏工程的 Cargo.toml 是否已存在决定"""
    NEW = "new"
    EXISTING = "existing"


@dataclass
class BuildReport:
    """一次构建的执行报告"""

    mode: BuildMode
    depot_dir: Path
    manifest_path: Path
    artifact_dirs: list[Path] = field(default_factory=list)
    duration: float = 0.0
