"""构建相关命令：build, check, render"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NoReturn

import click

from depot.core.config import get_config
from depot.core.exceptions import DependencyConflictError, DepotError
from depot.core.models import ConflictRecord
from depot.services.build import CargoTool
from depot.services.depot_service import DepotService, resolve_workspace


def register_commands(main: click.Group) -> None:
    """注册构建相关命令"""
    main.add_command(build)
    main.add_command(check)
    main.add_command(render)


def workspace_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """工作区定位参数，三个命令共用"""
    options = [
        click.argument("depot_toml", required=False),
        click.option("-n", "--name", default=None, help="Depot 工程名称"),
        click.option("-d", "--dir", "dirs", multiple=True,
                     help="包含 Dependencies.toml 的目录（可多次指定）"),
        click.option("-o", "--out-dir", default=None, help="产物输出目录"),
        click.option("--opt-level", type=click.IntRange(0, 3), default=None,
                     help="依赖的优化级别 0-3"),
        click.option("--debug", is_flag=True, help="启用调试信息"),
        click.option("--debug-assertions", is_flag=True, help="启用 debug assertions"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _make_service(
    depot_toml: str | None, name: str | None, dirs: tuple[str, ...],
    out_dir: str | None, opt_level: int | None, debug: bool, debug_assertions: bool,
    cargo: str | None = None,
) -> DepotService:
    cfg = get_config()
    ws = resolve_workspace(
        depot_toml=depot_toml, dirs=dirs, name=name, out_dir=out_dir,
        opt_level=opt_level,
        debug=True if debug else None,
        debug_assertions=True if debug_assertions else None,
        config=cfg,
    )
    tool = CargoTool(executable=cargo or cfg.cargo_executable)
    return DepotService(ws, tool=tool, config=cfg)


def _echo_conflicts(conflicts: list[ConflictRecord]) -> None:
    for c in conflicts:
        click.echo(f"ERROR: {c.describe()}", err=True)
    click.echo(
        "You may be able to resolve these conflicts by modifying their respective "
        f"\"{get_config().dependencies_toml_name}\"'s.",
        err=True,
    )


def _fail(exc: DepotError) -> NoReturn:
    """统一错误出口：打印诊断信息后以非零状态退出"""
    if isinstance(exc, DependencyConflictError):
        _echo_conflicts(exc.conflicts)
        raise SystemExit(1) from exc
    raise click.ClickException(f"[{exc.code}] {exc}") from exc


@click.command(name="build", context_settings={"help_option_names": ["-h", "--help"]})
@workspace_options
@click.option("--cargo", default=None, help="cargo 可执行文件（覆盖配置）")
def build(
    depot_toml: str | None, name: str | None, dirs: tuple[str, ...],
    out_dir: str | None, opt_level: int | None, debug: bool,
    debug_assertions: bool, cargo: str | None,
) -> None:
    """生成 Cargo.toml 并构建全部依赖"""
    try:
        svc = _make_service(
            depot_toml, name, dirs, out_dir, opt_level, debug, debug_assertions, cargo,
        )
        click.echo(f"Generating {svc.workspace.name}'s Cargo.toml.")
        sources = svc.load_sources()
        for source in sources.values():
            click.echo(f"Found {source.path.name} in {source.path.parent}")
        report = svc.orchestrate(svc.plan(sources))
    except DepotError as e:
        _fail(e)
    click.echo(f"Artifacts: {', '.join(str(p) for p in report.artifact_dirs)}")
    click.echo("Build complete.")


@click.command(name="check", context_settings={"help_option_names": ["-h", "--help"]})
@workspace_options
def check(
    depot_toml: str | None, name: str | None, dirs: tuple[str, ...],
    out_dir: str | None, opt_level: int | None, debug: bool, debug_assertions: bool,
) -> None:
    """只检测依赖版本冲突，不生成也不构建"""
    try:
        svc = _make_service(depot_toml, name, dirs, out_dir, opt_level, debug, debug_assertions)
        conflicts = svc.check()
    except DepotError as e:
        _fail(e)
    if conflicts:
        _fail(DependencyConflictError(conflicts))
    click.echo("No dependency conflicts.")


@click.command(name="render", context_settings={"help_option_names": ["-h", "--help"]})
@workspace_options
def render(
    depot_toml: str | None, name: str | None, dirs: tuple[str, ...],
    out_dir: str | None, opt_level: int | None, debug: bool,
    debug_assertions: bool,
) -> None:
    """打印将要生成的 Cargo.toml（不触碰文件系统）"""
    try:
        svc = _make_service(depot_toml, name, dirs, out_dir, opt_level, debug, debug_assertions)
        text = svc.render()
    except DepotError as e:
        _fail(e)
    click.echo(text, nl=False)
