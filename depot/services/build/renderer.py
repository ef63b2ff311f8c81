"""Cargo.toml 渲染"""

from __future__ import annotations

from typing import Any

from depot.core.models import ProjectManifest
from depot.utils.toml_io import dump_toml

BANNER = (
    "# ATTENTION: This file is automatically generated. "
    "Don't modify it unless your life is terrible, or you wish it to be so.\n"
)


def manifest_document(manifest: ProjectManifest) -> dict[str, Any]:
    """ProjectManifest -> Cargo.toml 文档结构（依赖按名称排序）"""
    return {
        "package": {
            "name": manifest.project_name,
            "version": "0.0.1",
            "authors": ["automatically generated"],
        },
        "lib": {
            "name": manifest.project_name,
            "crate-type": [manifest.crate_type],
        },
        "profile": {
            "dev": {
                "opt-level": manifest.profile.opt_level,
                "debug": manifest.profile.debug,
                "debug-assertions": manifest.profile.debug_assertions,
            },
        },
        "dependencies": {
            name: manifest.dependencies[name].to_toml()
            for name in sorted(manifest.dependencies)
        },
    }


def render_project_manifest(manifest: ProjectManifest) -> str:
    return BANNER + dump_toml(manifest_document(manifest))
