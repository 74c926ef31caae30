import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
API_BASE_URL_ENV = "REVIEWDESK_API_BASE_URL"

DEFAULT_CONFIG: dict = {
    "api_base_url": DEFAULT_API_BASE_URL,
    "timeout": 30.0,  # seconds
    "page_size": 20,
    "search_debounce": 0.5,  # seconds between the last search edit and the remote fetch
    "session_store": "file",  # file | sqlite | memory
    "session_path": None,  # None = backend default location
}


def load_config(config_path: str = ".reviewdesk.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewdesk.yml in the current directory
      3. REVIEWDESK_API_BASE_URL for the API base URL
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    env_url = os.environ.get(API_BASE_URL_ENV)
    if env_url:
        config["api_base_url"] = env_url

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["api_base_url"] = str(config["api_base_url"]).rstrip("/")
    return config
