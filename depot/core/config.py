"""集中配置管理

替代散落的 DEFAULT_* 常量（文档文件名、默认工作区名、cargo 可执行文件等），
提供统一的配置入口。支持从 YAML 文件加载 + 编程式覆盖。

工作区本身的配置（Depot.toml）见 depot.core.manifest.loader；
此处只管理工具自身的行为参数。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from depot.core.exceptions import ConfigError
from depot.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".depot.yml"


@dataclass
class Config:
    """depot 全局配置"""

    # 文档
    depot_toml_name: str = "Depot.toml"
    dependencies_toml_name: str = "Dependencies.toml"
    default_depot_name: str = "depot"

    # cargo 工程
    cargo_name: str = "cargoproject"
    cargo_project_type: str = "lib"
    cargo_executable: str = "cargo"
    # 构建前后在稳定目录与隐藏工程 target/debug/ 之间搬移的产物子目录
    artifact_dirs: list[str] = field(default_factory=lambda: ["deps", "native"])

    # 编译选项默认值
    default_opt_level: int = 3
    default_debug: bool = False
    default_debug_assertions: bool = False

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        artifact_dirs = matched.get("artifact_dirs")
        if artifact_dirs is not None and (
            not isinstance(artifact_dirs, list)
            or not artifact_dirs
            or not all(isinstance(d, str) and d for d in artifact_dirs)
        ):
            raise ConfigError(f"{path}: artifact_dirs 必须是非空字符串列表")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
