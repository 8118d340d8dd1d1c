"""Tests for configuration loading."""

import pytest

from storyfeed.config import StoryfeedConfig, load_config, merge_cli_overrides


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in (
        "STORYFEED_APP_URL",
        "STORYFEED_SITE_NAME",
        "STORYFEED_IDENTITY_API_URL",
        "STORYFEED_IDENTITY_TIMEOUT",
        "STORYFEED_FETCH_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_defaults(self):
        config = StoryfeedConfig()
        assert config.app.url == "http://localhost:3000"
        assert config.app.site_name == "Sigle"
        assert config.identity.api_url == "https://core.blockstack.org"
        assert config.identity.timeout == 15
        assert config.storage.timeout == 15

    def test_no_file_gives_defaults(self):
        assert load_config() == StoryfeedConfig()


class TestLoadConfig:
    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[app]\nurl = "https://app.example.com"\n\n[storage]\ntimeout = 3\n')
        config = load_config(path)
        assert config.app.url == "https://app.example.com"
        assert config.storage.timeout == 3
        assert config.identity.timeout == 15

    def test_cwd_file(self, tmp_path):
        (tmp_path / ".storyfeed.toml").write_text('[app]\nsite_name = "Notes"\n')
        assert load_config().app.site_name == "Notes"

    def test_global_config_file(self, tmp_path):
        config_dir = tmp_path / ".config" / "storyfeed"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text('[app]\nsite_name = "Global"\n')
        assert load_config().app.site_name == "Global"

    def test_dotfile_in_global_dir_ignored(self, tmp_path):
        config_dir = tmp_path / ".config" / "storyfeed"
        config_dir.mkdir(parents=True)
        (config_dir / ".storyfeed.toml").write_text('[app]\nsite_name = "Stray"\n')
        assert load_config().app.site_name == "Sigle"

    def test_missing_explicit_path(self, tmp_path):
        assert load_config(tmp_path / "nope.toml") == StoryfeedConfig()

    def test_broken_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[app\nurl = ")
        assert load_config(path) == StoryfeedConfig()


class TestEnvOverrides:
    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text('[app]\nurl = "https://file.example.com"\n')
        monkeypatch.setenv("STORYFEED_APP_URL", "https://env.example.com")
        monkeypatch.setenv("STORYFEED_FETCH_TIMEOUT", "7")
        config = load_config(path)
        assert config.app.url == "https://env.example.com"
        assert config.storage.timeout == 7

    def test_invalid_env_ignored(self, monkeypatch):
        monkeypatch.setenv("STORYFEED_IDENTITY_TIMEOUT", "soon")
        assert load_config().identity.timeout == 15


class TestCliOverrides:
    def test_none_keeps_config(self):
        config = StoryfeedConfig()
        assert merge_cli_overrides(config, app_url=None, timeout=None) == config

    def test_overrides(self):
        config = merge_cli_overrides(
            StoryfeedConfig(),
            app_url="https://app.example.com",
            identity_api_url="https://names.example.com",
            timeout=4,
        )
        assert config.app.url == "https://app.example.com"
        assert config.identity.api_url == "https://names.example.com"
        assert config.storage.timeout == 4
        assert config.identity.timeout == 4

    def test_unknown_keys_ignored(self):
        assert merge_cli_overrides(StoryfeedConfig(), color="red") == StoryfeedConfig()
