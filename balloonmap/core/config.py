# balloonmap/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Balloon & Hazard Map API", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Feeds
    treasure_base: str = Field(default="https://a.windbornesystems.com/treasure", alias="TREASURE_BASE")
    alerts_base: str = Field(default="https://api.weather.gov/alerts/active", alias="ALERTS_BASE")
    nws_user_agent: str = Field(default="balloon-hazard-dashboard (ops@example.com)", alias="NWS_USER_AGENT")
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")

    # Extraction / display limits (0 = unlimited)
    hours_to_fetch: int = Field(default=24, ge=1, le=24, alias="HOURS_TO_FETCH")
    max_balloons: int | None = Field(default=100, ge=0, alias="MAX_BALLOONS")
    max_alerts: int | None = Field(default=None, ge=0, alias="MAX_ALERTS")

    # Refresh cadence
    balloon_refresh_seconds: float = Field(default=60 * 60, alias="BALLOON_REFRESH_SECONDS")
    alert_refresh_seconds: float = Field(default=30 * 60, alias="ALERT_REFRESH_SECONDS")
    refresh_on_startup: bool = Field(default=True, alias="REFRESH_ON_STARTUP")

    # Fly-to selection stays active for this long
    selection_window_seconds: float = Field(default=2.0, alias="SELECTION_WINDOW_SECONDS")

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[1] / ".env"),  # balloonmap/.env
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

settings = Settings()
