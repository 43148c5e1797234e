import pytest

from jobsync.config import ENV_VARS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


def test_defaults_without_files(tmp_path):
    from jobsync.config import load_settings

    settings = load_settings(env_path=str(tmp_path / ".env"), config_path=str(tmp_path / "sync.yaml"))

    assert settings.interval_minutes == 3
    assert settings.page_size == 100
    assert settings.max_retries == 3
    assert settings.brazen_enabled is False


def test_reads_env_file(tmp_path):
    from jobsync.config import load_settings

    env = tmp_path / ".env"
    env.write_text("SJB_API_KEY=sjb-key\nZOHO_CLIENT_ID=zid\nSYNC_INTERVAL_MINUTES=5\n")

    settings = load_settings(env_path=str(env), config_path=str(tmp_path / "sync.yaml"))

    assert settings.sjb_api_key == "sjb-key"
    assert settings.zoho_client_id == "zid"
    assert settings.interval_minutes == 5


def test_yaml_overrides_environment(tmp_path, monkeypatch):
    from jobsync.config import load_settings

    monkeypatch.setenv("SJB_BOARD", "fromenv")
    config = tmp_path / "sync.yaml"
    config.write_text("sjb_board: fromyaml\npage_size: 50\nunknown_key: ignored\n")

    settings = load_settings(env_path=str(tmp_path / ".env"), config_path=str(config))

    assert settings.sjb_board == "fromyaml"
    assert settings.page_size == 50


def test_missing_yaml_is_empty(tmp_path):
    from jobsync.config import load_sync_config

    assert load_sync_config(str(tmp_path / "nope.yaml")) == {}


def test_require_names_missing_variables():
    from jobsync.config import Settings
    from jobsync.errors import ConfigError

    settings = Settings(sjb_api_key="k")
    settings.require("sjb_api_key")

    with pytest.raises(ConfigError, match="ZOHO_REFRESH_TOKEN"):
        settings.require("sjb_api_key", "zoho_refresh_token")


def test_brazen_enabled():
    from jobsync.config import Settings

    assert Settings(brazen_client_id="a", brazen_client_secret="b", brazen_event_id="e").brazen_enabled
