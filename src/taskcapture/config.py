from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    user_timezone: str = "UTC"
    log_level: str = "INFO"
    data_dir: str = "~/.task-capture"

    # Sentry error tracking
    sentry_dsn: str = ""
    sentry_environment: str = "production"

    csv_min_task_length: int = 3

    @property
    def has_sentry(self) -> bool:
        return bool(self.sentry_dsn)

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    @property
    def known_names_path(self) -> Path:
        return self.data_path / "known_names.json"


settings = Settings()
