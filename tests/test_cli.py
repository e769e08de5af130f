from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import vpclaunch.config
from vpclaunch.cli import app

pytestmark = [pytest.mark.unit, pytest.mark.xdist_group("unit")]

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(vpclaunch.config, "GLOBAL_CONFIG_PATH", tmp_path / "defaults.toml")
    return tmp_path


class TestUp:
    def test_dry_run_prints_instances_and_timing(self):
        result = runner.invoke(app, ["up", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Instance created" in result.output
        assert "time took:" in result.output
        assert "seconds" in result.output

    def test_dry_run_with_explicit_config(self, isolated_config: Path):
        config_file = isolated_config / "custom.toml"
        config_file.write_text('[provision]\nregion = "eu-west-1"\ninstance_type = "t3.nano"\n')

        result = runner.invoke(app, ["up", "--dry-run", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "t3.nano" in result.output

    def test_invalid_zone_policy_fails(self):
        result = runner.invoke(app, ["up", "--dry-run", "--zone-policy", "random"])

        assert result.exit_code == 1
        assert "Unknown zone_policy" in result.output

    def test_missing_config_file_fails(self, isolated_config: Path):
        result = runner.invoke(
            app, ["up", "--dry-run", "--config", str(isolated_config / "nope.toml")],
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_log_file_receives_run_log(self, isolated_config: Path):
        log_file = isolated_config / "logs" / "run.log"

        result = runner.invoke(app, ["up", "--dry-run", "--log-file", str(log_file)])

        assert result.exit_code == 0, result.output
        assert "Provisioning in us-east-2 via local" in log_file.read_text()

    def test_log_level_is_case_insensitive(self, isolated_config: Path):
        log_file = isolated_config / "run.log"

        result = runner.invoke(
            app, ["up", "--dry-run", "--log-level", "debug", "--log-file", str(log_file)],
        )

        assert result.exit_code == 0, result.output

    def test_unknown_log_level_is_a_usage_error(self):
        result = runner.invoke(app, ["up", "--dry-run", "--verbose", "--log-level", "loud"])

        assert result.exit_code == 2
        assert "Invalid value" in result.output
