"""命令行接口测试（click CliRunner）"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from depot.cli import main


@pytest.fixture()
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    # CLI 入口会重置根日志器，测试中保留 pytest 的日志捕获
    monkeypatch.setattr("depot.cli.setup_logging", lambda **_: None)
    return CliRunner()


@pytest.fixture()
def patched_cargo(monkeypatch: pytest.MonkeyPatch, fake_tool):
    """把 CLI 中的 CargoTool 替换为假构建工具"""
    seen: dict[str, str] = {}

    def _factory(executable: str = "cargo"):
        seen["executable"] = executable
        return fake_tool

    monkeypatch.setattr("depot.cli.build.CargoTool", _factory)
    return seen


class TestHelp:
    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, runner: CliRunner, flag: str) -> None:
        result = runner.invoke(main, ["build", flag])
        assert result.exit_code == 0
        assert "--opt-level" in result.output
        assert "--dir" in result.output


class TestBuildCommand:
    def test_build_with_dir_flags(
        self, runner: CliRunner, tmp_path: Path,
        write_deps: Callable[[str, str], Path], fake_tool, patched_cargo,
    ) -> None:
        d1 = write_deps("lib1", '[dependencies]\nfoo = "1.0"\n')
        d2 = write_deps("lib2", '[dependencies]\nfoo = "1.0"\n')
        result = runner.invoke(main, [
            "build", "-d", str(d1), "-d", str(d2), "-n", "game",
            "-o", str(tmp_path / "out"), "--opt-level", "1", "--debug",
        ])
        assert result.exit_code == 0, result.output
        assert "Generating game's Cargo.toml." in result.output
        assert f"Found Dependencies.toml in {d1}" in result.output
        assert "Build complete." in result.output
        assert (tmp_path / "out" / "game" / "deps").is_dir()
        assert "opt-level = 1" in fake_tool.manifest_seen
        assert "debug = true" in fake_tool.manifest_seen
        assert patched_cargo["executable"] == "cargo"

    def test_build_from_depot_toml(
        self, runner: CliRunner, tmp_path: Path,
        write_deps: Callable[[str, str], Path], fake_tool, patched_cargo,
    ) -> None:
        write_deps("lib1", '[dependencies]\nfoo = "1.0"\n')
        doc = tmp_path / "Depot.toml"
        doc.write_text('[depot]\nname = "game"\nout_dir = "out"\ndirs = ["lib1"]\n')
        result = runner.invoke(main, ["build", str(doc), "--cargo", "/opt/cargo"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "out" / "game" / ".game-cargoproject" / "Cargo.toml").is_file()
        assert patched_cargo["executable"] == "/opt/cargo"

    def test_conflicts_abort(
        self, runner: CliRunner, tmp_path: Path,
        write_deps: Callable[[str, str], Path], fake_tool, patched_cargo,
    ) -> None:
        d1 = write_deps("lib1", '[dependencies]\nfoo = ""\n')
        d2 = write_deps("lib2", '[dependencies]\nfoo = "1.0"\n')
        result = runner.invoke(main, ["build", "-d", str(d2), "-d", str(d1), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert (
            'ERROR: Version mismatch: "lib1" uses the latest available version of foo, '
            'while "lib2" requires 1.0 of foo.'
        ) in result.output
        assert "You may be able to resolve these conflicts" in result.output
        assert "Build complete." not in result.output
        assert fake_tool.calls == []

    def test_parse_error_reported(
        self, runner: CliRunner, tmp_path: Path,
        write_deps: Callable[[str, str], Path], patched_cargo,
    ) -> None:
        d1 = write_deps("lib1", "[dependencies]\nfoo = \n")
        result = runner.invoke(main, ["build", "-d", str(d1), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "PARSE_ERROR" in result.output
        assert f"{d1 / 'Dependencies.toml'}:2:" in result.output

    def test_invalid_opt_level(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["build", "-d", str(tmp_path), "--opt-level", "7"])
        assert result.exit_code == 2

    def test_missing_depot_toml(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["build", str(tmp_path / "Depot.toml")])
        assert result.exit_code == 1
        assert "CONFIG_ERROR" in result.output


class TestCheckAndRender:
    def test_check_clean(
        self, runner: CliRunner, write_deps: Callable[[str, str], Path],
    ) -> None:
        d1 = write_deps("lib1", '[dependencies]\nfoo = "1.0"\n')
        result = runner.invoke(main, ["check", "-d", str(d1)])
        assert result.exit_code == 0
        assert "No dependency conflicts." in result.output

    def test_check_conflict(
        self, runner: CliRunner, write_deps: Callable[[str, str], Path],
    ) -> None:
        d1 = write_deps("lib1", '[dependencies]\nfoo = "1.0"\nbar = "1"\n')
        d2 = write_deps("lib2", '[dependencies]\nfoo = "2.0"\nbar = "2"\n')
        result = runner.invoke(main, ["check", "-d", str(d1), "-d", str(d2)])
        assert result.exit_code == 1
        assert result.output.count("ERROR: Version mismatch") == 2

    def test_render_prints_manifest(
        self, runner: CliRunner, tmp_path: Path, write_deps: Callable[[str, str], Path],
    ) -> None:
        d1 = write_deps("lib1", '[dependencies]\nfoo = "1.0"\n')
        result = runner.invoke(main, ["render", "-d", str(d1), "-o", str(tmp_path / "out")])
        assert result.exit_code == 0
        assert result.output.startswith("# ATTENTION")
        assert 'foo = "1.0"' in result.output
        assert not (tmp_path / "out").exists()


class TestConfigOption:
    def test_config_file_sets_cargo(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
        write_deps: Callable[[str, str], Path], patched_cargo,
    ) -> None:
        from depot.core import config as cfgmod
        monkeypatch.setattr(cfgmod, "_current", None)
        cfg = tmp_path / "depot.yml"
        cfg.write_text("cargo_executable: /usr/local/bin/cargo\n")
        d1 = write_deps("lib1", '[dependencies]\nfoo = "1.0"\n')
        result = runner.invoke(main, [
            "--config", str(cfg), "build", "-d", str(d1), "-o", str(tmp_path / "out"),
        ])
        assert result.exit_code == 0, result.output
        assert patched_cargo["executable"] == "/usr/local/bin/cargo"
