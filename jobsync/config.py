import os
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

from jobsync.errors import ConfigError

ENV_PATH = "config/.env"
SYNC_CONFIG_PATH = "config/sync.yaml"

# Settings field -> environment variable
ENV_VARS = {
    "sjb_board": "SJB_BOARD",
    "sjb_api_key": "SJB_API_KEY",
    "sjb_job_id": "SJB_JOB_ID",
    "zoho_client_id": "ZOHO_CLIENT_ID",
    "zoho_client_secret": "ZOHO_CLIENT_SECRET",
    "zoho_refresh_token": "ZOHO_REFRESH_TOKEN",
    "zoho_accounts_url": "ZOHO_ACCOUNTS_URL",
    "zoho_api_base": "ZOHO_API_BASE",
    "brazen_api_base": "BRAZEN_API_BASE",
    "brazen_client_id": "BRAZEN_CLIENT_ID",
    "brazen_client_secret": "BRAZEN_CLIENT_SECRET",
    "brazen_event_id": "BRAZEN_EVENT_ID",
    "interval_minutes": "SYNC_INTERVAL_MINUTES",
    "log_level": "LOG_LEVEL",
}


class Settings(BaseModel):
    sjb_board: str = "absolutelyamerican"
    sjb_api_key: Optional[str] = None
    sjb_job_id: Optional[str] = None
    zoho_client_id: Optional[str] = None
    zoho_client_secret: Optional[str] = None
    zoho_refresh_token: Optional[str] = None
    zoho_accounts_url: str = "https://accounts.zoho.com"
    zoho_api_base: str = "https://recruit.zoho.com/recruit/v2"
    brazen_api_base: str = "https://api.brazen.com/v1"
    brazen_client_id: Optional[str] = None
    brazen_client_secret: Optional[str] = None
    brazen_event_id: Optional[str] = None
    interval_minutes: float = 3
    page_size: int = 100
    request_timeout: float = 30.0
    max_retries: int = 3
    log_level: str = "INFO"

    @property
    def brazen_enabled(self) -> bool:
        return bool(self.brazen_client_id and self.brazen_client_secret and self.brazen_event_id)

    def require(self, *names: str):
        missing = [ENV_VARS.get(name, name) for name in names if not getattr(self, name)]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")


def load_sync_config(path: str = SYNC_CONFIG_PATH) -> dict:
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}


def load_settings(env_path: str = ENV_PATH, config_path: str = SYNC_CONFIG_PATH) -> Settings:
    """Environment (and config/.env) first, then YAML overrides"""
    load_dotenv(env_path)
    values = {field: os.getenv(var) for field, var in ENV_VARS.items() if os.getenv(var)}
    values.update({k: v for k, v in load_sync_config(config_path).items() if k in Settings.model_fields})
    return Settings(**values)
