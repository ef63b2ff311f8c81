"""依赖清单加载器

职责:
- 解析工作区根配置 Depot.toml 为 WorkspaceConfig
- 扫描给定目录（仅一层，不递归子目录），把 Dependencies.toml 解析为 ManifestSource

依赖详细记录中无法识别的字段（如 package）记 WARNING 后丢弃，不中止加载。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from depot.core.exceptions import ConfigError, DocumentParseError
from depot.core.models import Dependency, ManifestSource, ProfileSettings, WorkspaceConfig
from depot.utils.toml_io import load_toml

logger = logging.getLogger(__name__)

_STRING_FIELDS = ("version", "path", "git", "branch", "tag", "rev")
_BOOL_FIELDS = {"optional": "optional", "default-features": "default_features",
                "default_features": "default_features"}


def _parse_dependency(doc: Path, name: str, value: Any) -> Dependency:
    """把 [dependencies] 中的一项转换为 Dependency"""
    if isinstance(value, str):
        return Dependency.from_version(value)
    if not isinstance(value, dict):
        raise DocumentParseError(
            doc, f"dependency '{name}' must be a version string or a table, "
            f"got {type(value).__name__}",
        )

    kwargs: dict[str, Any] = {}
    for key, item in value.items():
        if key in _STRING_FIELDS:
            if not isinstance(item, str):
                raise DocumentParseError(doc, f"dependencies.{name}.{key} must be a string")
            kwargs[key] = item
        elif key in _BOOL_FIELDS:
            if not isinstance(item, bool):
                raise DocumentParseError(doc, f"dependencies.{name}.{key} must be a boolean")
            kwargs[_BOOL_FIELDS[key]] = item
        elif key == "features":
            if not isinstance(item, list) or not all(isinstance(f, str) for f in item):
                raise DocumentParseError(
                    doc, f"dependencies.{name}.features must be a list of strings",
                )
            kwargs["features"] = list(item)
        else:
            logger.warning("%s: 忽略 dependencies.%s 的未知字段 '%s'", doc, name, key)
    return Dependency(**kwargs)


class ManifestSourceLoader:
    """按目录加载 Dependencies.toml，以目录名为键"""

    def __init__(self, document_name: str = "Dependencies.toml") -> None:
        self.document_name = document_name

    def load_document(self, doc: Path) -> ManifestSource:
        """解析单个依赖文档"""
        data = load_toml(doc)
        deps = data.get("dependencies")
        source = ManifestSource(name=doc.parent.name, path=doc)
        if deps is None:
            return source
        if not isinstance(deps, dict):
            raise DocumentParseError(doc, "'dependencies' must be a table")
        for name, value in deps.items():
            source.dependencies[name] = _parse_dependency(doc, name, value)
        return source

    def load(self, dirs: list[Path]) -> dict[str, ManifestSource]:
        """扫描目录列表，返回 {目录名: ManifestSource}

        没有依赖文档的目录静默跳过；任一文档解析失败即中止。
        """
        sources: dict[str, ManifestSource] = {}
        for d in dirs:
            doc = d / self.document_name
            if not doc.is_file():
                logger.debug("跳过 %s: 未找到 %s", d, self.document_name)
                continue
            source = self.load_document(doc)
            if source.name in sources:
                logger.warning(
                    "目录名重复: %s (%s 覆盖 %s)",
                    source.name, doc, sources[source.name].path,
                )
            sources[source.name] = source
            logger.info("已加载 %s: %d 个依赖", doc, len(source.dependencies))
        return sources


def _require(doc: Path, table: dict[str, Any], key: str, kind: type, section: str) -> Any:
    value = table.get(key)
    if value is None:
        raise ConfigError(f"{doc}: [{section}] 缺少 '{key}'")
    if not isinstance(value, kind):
        raise ConfigError(f"{doc}: {section}.{key} 类型错误，应为 {kind.__name__}")
    return value


def parse_profile(doc: Path, settings: Any, defaults: ProfileSettings) -> ProfileSettings:
    """解析 [settings] 段，缺省字段取 defaults"""
    if settings is None:
        return defaults
    if not isinstance(settings, dict):
        raise ConfigError(f"{doc}: 'settings' 必须是表")
    return ProfileSettings(
        opt_level=settings.get("opt_level", defaults.opt_level),
        debug=settings.get("debug", defaults.debug),
        debug_assertions=settings.get("debug_assertions", defaults.debug_assertions),
    )


def load_workspace_config(
    path: str | Path,
    *,
    default_profile: ProfileSettings | None = None,
    cargo_name: str = "cargoproject",
    artifact_dirs: tuple[str, ...] = ("deps", "native"),
) -> WorkspaceConfig:
    """读取 Depot.toml，工作目录为其所在目录"""
    doc = Path(path)
    if not doc.is_file():
        raise ConfigError(f"工作区配置不存在: {doc}")
    data = load_toml(doc)

    depot = data.get("depot")
    if not isinstance(depot, dict):
        raise ConfigError(f"{doc}: 缺少 [depot] 段")
    name = _require(doc, depot, "name", str, "depot")
    dirs = _require(doc, depot, "dirs", list, "depot")
    if not all(isinstance(d, str) for d in dirs):
        raise ConfigError(f"{doc}: depot.dirs 必须是字符串列表")
    out_dir = depot.get("out_dir")
    if out_dir is not None and not isinstance(out_dir, str):
        raise ConfigError(f"{doc}: depot.out_dir 类型错误，应为 str")

    profile = parse_profile(doc, data.get("settings"), default_profile or ProfileSettings())
    logger.info("工作区配置已加载: %s (name=%s, %d 个目录)", doc, name, len(dirs))
    return WorkspaceConfig(
        name=name,
        dirs=tuple(dirs),
        working_dir=doc.resolve().parent,
        out_dir=out_dir,
        profile=profile,
        cargo_name=cargo_name,
        artifact_dirs=tuple(artifact_dirs),
    )
