"""Tests for jobber configuration settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from jobber.configuration.cli import config_app
from jobber.configuration.settings import (
    Settings,
    bootstrap_settings,
    load_settings,
    resolve_settings,
    save_settings,
)
from jobber.errors import InvalidConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("JOBBER_RESOLUTION", "JOBBER_RATE", "JOBBER_FILE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.resolution == 0.25
    assert settings.rate is None
    assert settings.data_file == Path("jobber.dat")


@pytest.mark.parametrize("payload", [{"resolution": 0}, {"resolution": 25}, {"rate": -1}])
def test_invalid_values_are_rejected(payload) -> None:
    with pytest.raises(ValueError):
        Settings.model_validate(payload)


def test_bootstrap_creates_default_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    settings = bootstrap_settings(path=config_path)

    assert config_path.exists()
    data = json.loads(config_path.read_text())
    assert data["resolution"] == 0.25
    assert settings.rate is None


def test_bootstrap_keeps_existing_file_unless_forced(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    save_settings(Settings(rate=50.0), config_path)

    assert bootstrap_settings(path=config_path).rate == 50.0
    assert bootstrap_settings(path=config_path, force=True).rate is None


def test_load_settings_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    save_settings(Settings(resolution=0.5, rate=42.0, data_file=tmp_path / "work.dat"), config_path)

    loaded = load_settings(config_path)

    assert loaded.resolution == 0.5
    assert loaded.rate == 42.0
    assert loaded.data_file == tmp_path / "work.dat"


def test_load_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")


def test_load_invalid_json_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    with pytest.raises(InvalidConfigError):
        load_settings(config_path)


class TestResolveSettings:
    def test_without_file_uses_defaults(self, tmp_path: Path) -> None:
        assert resolve_settings(path=tmp_path / "missing.json") == Settings()

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_path = tmp_path / "config.json"
        save_settings(Settings(rate=10.0), config_path)
        monkeypatch.setenv("JOBBER_RATE", "20")
        monkeypatch.setenv("JOBBER_FILE", str(tmp_path / "env.dat"))

        settings = resolve_settings(path=config_path)

        assert settings.rate == 20.0
        assert settings.data_file == tmp_path / "env.dat"

    def test_explicit_overrides_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JOBBER_RESOLUTION", "0.5")

        settings = resolve_settings(
            path=tmp_path / "missing.json",
            overrides={"resolution": 1.0, "rate": None},
        )

        assert settings.resolution == 1.0
        assert settings.rate is None

    def test_non_numeric_environment_value_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("JOBBER_RESOLUTION", "quarter")

        with pytest.raises(InvalidConfigError):
            resolve_settings(path=tmp_path / "missing.json")

    def test_invalid_override_raises(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidConfigError):
            resolve_settings(path=tmp_path / "missing.json", overrides={"resolution": -1})


class TestConfigCommands:
    @pytest.fixture
    def runner(self) -> CliRunner:
        return CliRunner()

    def test_init_and_show(self, runner: CliRunner, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"

        result = runner.invoke(
            config_app, ["init", "--config-path", str(config_path), "--rate", "35"]
        )
        assert result.exit_code == 0
        assert "Configuration initialized" in result.output

        result = runner.invoke(config_app, ["show", "--config-path", str(config_path)])
        assert result.exit_code == 0
        assert json.loads(result.output)["rate"] == 35.0

    def test_set_updates_value(self, runner: CliRunner, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"

        result = runner.invoke(
            config_app, ["set", "resolution", "0.5", "--config-path", str(config_path)]
        )

        assert result.exit_code == 0
        assert load_settings(config_path).resolution == 0.5

    def test_set_none_clears_rate(self, runner: CliRunner, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"
        save_settings(Settings(rate=30.0), config_path)

        result = runner.invoke(config_app, ["set", "rate", "none", "--config-path", str(config_path)])

        assert result.exit_code == 0
        assert load_settings(config_path).rate is None

    def test_set_rejects_unknown_key(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            config_app, ["set", "colour", "red", "--config-path", str(tmp_path / "config.json")]
        )

        assert result.exit_code == 1

    def test_set_rejects_invalid_value(self, runner: CliRunner, tmp_path: Path) -> None:
        config_path = tmp_path / "config.json"

        result = runner.invoke(config_app, ["set", "resolution", "0", "--config-path", str(config_path)])

        assert result.exit_code == 1
        assert not config_path.exists()

    def test_validate_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(config_app, ["validate", "--config-path", str(tmp_path / "none.json")])

        assert result.exit_code == 1
