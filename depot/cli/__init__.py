"""depot 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from depot import __version__
from depot.core.config import DEFAULT_CONFIG_FILE, init_config
from depot.utils.logger import setup_logging

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option(
    "--config", "config_path", envvar="DEPOT_CONFIG", default=DEFAULT_CONFIG_FILE,
    show_default=True, help="工具配置文件（YAML，不存在则使用默认值）",
)
def main(config_path: str) -> None:
    """depot - 多项目工作区依赖聚合与 cargo 构建工具"""
    setup_logging(
        level=os.getenv("DEPOT_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("DEPOT_LOG_JSON", "") == "1",
    )
    init_config(config_path)


# 注册各领域子命令
from depot.cli.build import register_commands as _reg_build  # noqa: E402

_reg_build(main)
