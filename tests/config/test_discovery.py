"""Tests for config file discovery and loading."""

from pathlib import Path

import pytest

from refnet.config.discovery import CONFIG_ENV_VAR, find_config, load_config
from refnet.config.models import RefnetConfig


class TestFindConfig:
    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_found_in_start(self, tmp_path: Path) -> None:
        (tmp_path / "refnet.toml").write_text("")
        assert find_config(tmp_path) == (tmp_path / "refnet.toml").resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "refnet.toml").write_text("")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / "refnet.toml").resolve()

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "elsewhere.toml"
        config.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        assert find_config(tmp_path / "ignored") == config

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "refnet.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        assert load_config(cwd=tmp_path) == RefnetConfig()

    def test_sparse_override(self, tmp_path: Path) -> None:
        config = tmp_path / "refnet.toml"
        config.write_text("[simulation]\ninitial_referrers = 50\n")
        loaded = load_config(config)
        assert loaded.simulation.initial_referrers == 50
        assert loaded.simulation.referral_capacity == 10
        assert loaded.network.delimiter == ","
