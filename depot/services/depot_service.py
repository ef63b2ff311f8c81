"""depot 流水线服务 — 加载 → 冲突检测（闸门）→ 合并 → 构建编排

WorkspaceConfig 显式贯穿各步骤：冲突检测与合并不依赖当前工作目录，
只有构建编排会触碰文件系统。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from depot.core.config import Config, get_config
from depot.core.manifest import (
    ConflictDetector,
    ManifestMerger,
    ManifestSourceLoader,
    ensure_no_conflicts,
    load_workspace_config,
)
from depot.core.models import (
    BuildReport,
    ConflictRecord,
    ManifestSource,
    ProfileSettings,
    ProjectManifest,
    WorkspaceConfig,
)
from depot.core.protocols import BuildTool
from depot.services.build import BuildOrchestrator, CargoTool, render_project_manifest

logger = logging.getLogger(__name__)


def default_profile(config: Config) -> ProfileSettings:
    return ProfileSettings(
        opt_level=config.default_opt_level,
        debug=config.default_debug,
        debug_assertions=config.default_debug_assertions,
    )


def resolve_workspace(
    *,
    depot_toml: str | None = None,
    dirs: Sequence[str] = (),
    name: str | None = None,
    out_dir: str | None = None,
    opt_level: int | None = None,
    debug: bool | None = None,
    debug_assertions: bool | None = None,
    cwd: Path | None = None,
    config: Config | None = None,
) -> WorkspaceConfig:
    """按 CLI 约定确定本次运行的 WorkspaceConfig

    - 传了 dirs: 完全由参数合成，工作目录为 cwd，out_dir 缺省为 cwd
    - 否则传了 depot_toml: 读取该文件，工作目录为其所在目录
    - 都没有: 读取 cwd 下的 Depot.toml

    编译选项参数（非 None）覆盖文档中的 [settings]。
    """
    cfg = config or get_config()
    cwd = (cwd or Path.cwd()).resolve()
    defaults = default_profile(cfg)

    if dirs:
        ws = WorkspaceConfig(
            name=name or cfg.default_depot_name,
            dirs=tuple(dirs),
            working_dir=cwd,
            out_dir=out_dir or str(cwd),
            profile=defaults,
            cargo_name=cfg.cargo_name,
            artifact_dirs=tuple(cfg.artifact_dirs),
        )
    else:
        path = Path(depot_toml) if depot_toml else cwd / cfg.depot_toml_name
        if not path.is_absolute():
            path = cwd / path
        ws = load_workspace_config(
            path, default_profile=defaults,
            cargo_name=cfg.cargo_name, artifact_dirs=tuple(cfg.artifact_dirs),
        )

    profile = ProfileSettings(
        opt_level=ws.profile.opt_level if opt_level is None else opt_level,
        debug=ws.profile.debug if debug is None else debug,
        debug_assertions=(
            ws.profile.debug_assertions if debug_assertions is None else debug_assertions
        ),
    )
    if profile != ws.profile:
        ws = replace(ws, profile=profile)
    return ws


class DepotService:
    """单个工作区的依赖聚合与构建"""

    def __init__(
        self,
        workspace: WorkspaceConfig,
        *,
        tool: BuildTool | None = None,
        config: Config | None = None,
    ) -> None:
        self.workspace = workspace
        self.config = config or get_config()
        self.tool = tool or CargoTool(executable=self.config.cargo_executable)
        self.loader = ManifestSourceLoader(self.config.dependencies_toml_name)
        self.detector = ConflictDetector()
        self.merger = ManifestMerger()

    # ---- 分步 ----

    def load_sources(self) -> dict[str, ManifestSource]:
        return self.loader.load(self.workspace.source_dirs)

    def detect_conflicts(self, sources: dict[str, ManifestSource]) -> list[ConflictRecord]:
        return self.detector.detect(sources)

    def plan(self, sources: dict[str, ManifestSource]) -> ProjectManifest:
        """冲突闸门 + 合并；存在冲突时抛 DependencyConflictError"""
        ensure_no_conflicts(self.detect_conflicts(sources))
        return ProjectManifest(
            project_name=self.config.cargo_name,
            profile=self.workspace.profile,
            dependencies=self.merger.merge(sources),
            crate_type=self.config.cargo_project_type,
        )

    def orchestrate(self, manifest: ProjectManifest) -> BuildReport:
        return BuildOrchestrator(self.workspace, self.tool).run(manifest)

    # ---- 整体流程 ----

    def check(self) -> list[ConflictRecord]:
        """只加载并检测冲突，不修改文件系统"""
        return self.detect_conflicts(self.load_sources())

    def render(self) -> str:
        """生成 Cargo.toml 文本，不修改文件系统"""
        return render_project_manifest(self.plan(self.load_sources()))

    def build(self) -> BuildReport:
        logger.info("开始构建工作区: %s", self.workspace.name)
        return self.orchestrate(self.plan(self.load_sources()))
