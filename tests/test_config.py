from pathlib import Path

from taskcapture.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("USER_TIMEZONE", "LOG_LEVEL", "DATA_DIR", "SENTRY_DSN", "CSV_MIN_TASK_LENGTH"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)
        assert settings.user_timezone == "UTC"
        assert settings.log_level == "INFO"
        assert settings.data_dir == "~/.task-capture"
        assert settings.has_sentry is False
        assert settings.csv_min_task_length == 3

    def test_has_sentry(self):
        assert Settings(_env_file=None, sentry_dsn="").has_sentry is False
        assert Settings(_env_file=None, sentry_dsn="https://x@sentry.io/1").has_sentry is True

    def test_known_names_path(self, tmp_path: Path):
        settings = Settings(_env_file=None, data_dir=str(tmp_path))
        assert settings.data_path == tmp_path
        assert settings.known_names_path == tmp_path / "known_names.json"

    def test_data_dir_expands_home(self):
        settings = Settings(_env_file=None, data_dir="~/.task-capture")
        assert "~" not in str(settings.data_path)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("USER_TIMEZONE", "Europe/London")
        monkeypatch.setenv("CSV_MIN_TASK_LENGTH", "5")
        settings = Settings(_env_file=None)
        assert settings.user_timezone == "Europe/London"
        assert settings.csv_min_task_length == 5
