# This project was developed with assistance from AI tools.
"""Record store configuration via pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordStoreSettings(BaseSettings):
    """Record store connection settings -- reads from environment variables."""

    model_config = SettingsConfigDict(extra="ignore")

    RECORD_STORE_BACKEND: Literal["http", "memory"] = "http"
    RECORD_STORE_URL: str = "http://localhost:8090/api"
    RECORD_STORE_APP_ID: str = "loan-portal"
    RECORD_STORE_API_KEY: str = ""
    RECORD_STORE_TIMEOUT: float = 10.0


store_settings = RecordStoreSettings()
