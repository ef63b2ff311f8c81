"""构建产物生命周期编排器

根据隐藏工程中的 Cargo.toml 是否已存在选择模式:

  EXISTING: 覆盖 Cargo.toml → 产物目录搬入隐藏工程 → cargo build → 搬回稳定目录
  NEW:      创建稳定目录 → cargo new → 重命名为隐藏目录 → 写 Cargo.toml
            → cargo build → 产物目录搬出到稳定目录

编排器是唯一修改文件系统的组件。任何目录创建 / 重命名 / 写入失败都会
立即中止，不重试也不回滚之前的步骤；构建失败时 EXISTING 模式仍会
尽力把产物目录搬回（见 staging.stage_artifacts），NEW 模式不做搬出。
"""

from __future__ import annotations

import logging
import os
import time

from depot.core.exceptions import FilesystemError
from depot.core.models import BuildMode, BuildReport, ProjectManifest, WorkspaceConfig
from depot.core.protocols import BuildTool
from depot.services.build.renderer import render_project_manifest
from depot.services.build.staging import move_dir, stage_artifacts
from depot.utils.toml_io import atomic_write

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """NEW / EXISTING 两阶段构建编排"""

    def __init__(self, workspace: WorkspaceConfig, tool: BuildTool) -> None:
        self.workspace = workspace
        self.tool = tool

    def detect_mode(self) -> BuildMode:
        if self.workspace.cargo_toml.is_file():
            return BuildMode.EXISTING
        return BuildMode.NEW

    def run(self, manifest: ProjectManifest) -> BuildReport:
        """生成清单并执行构建，返回构建报告"""
        ws = self.workspace
        mode = self.detect_mode()
        logger.info("构建模式: %s (depot=%s)", mode.value, ws.depot_dir)
        text = render_project_manifest(manifest)

        start = time.monotonic()
        if mode is BuildMode.EXISTING:
            self._run_existing(text)
        else:
            self._run_new(text)
        duration = time.monotonic() - start

        logger.info("构建完成: %s (%.1fs)", ws.name, duration)
        return BuildReport(
            mode=mode,
            depot_dir=ws.depot_dir,
            manifest_path=ws.cargo_toml,
            artifact_dirs=[stable for stable, _ in ws.artifact_pairs()],
            duration=duration,
        )

    def write_manifest(self, text: str) -> None:
        logger.info("写入 Cargo.toml: %s", self.workspace.cargo_toml)
        atomic_write(self.workspace.cargo_toml, text)

    def _run_existing(self, text: str) -> None:
        ws = self.workspace
        self.write_manifest(text)
        with stage_artifacts(ws.artifact_pairs()):
            self.tool.build(ws.hidden_dir)

    def _run_new(self, text: str) -> None:
        ws = self.workspace
        try:
            ws.depot_dir.mkdir(parents=True)
        except OSError as e:
            raise FilesystemError(f"创建目录失败: {ws.depot_dir}: {e}", ws.depot_dir) from e

        self.tool.scaffold_project(ws.depot_dir, ws.cargo_project_name)

        scaffold = ws.depot_dir / ws.cargo_project_name
        try:
            os.rename(scaffold, ws.hidden_dir)
        except OSError as e:
            raise FilesystemError(
                f"重命名工程失败: {scaffold} -> {ws.hidden_dir}: {e}", scaffold,
            ) from e

        self.write_manifest(text)
        self.tool.build(ws.hidden_dir)

        for stable, hidden in ws.artifact_pairs():
            move_dir(hidden, stable)
