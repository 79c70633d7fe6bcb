from cereal_box.config import Settings
from cereal_box.context import AppContext, LifecycleState


class TestSettings:
    """Environment-driven settings"""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "DATABASE_URL", "APP_VERSION", "FAIL_OPEN", "CONNECT_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.database_url is None
        assert settings.app_version == "unknown"
        assert settings.connect_timeout_seconds == 5.0
        assert settings.fail_open is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/cereal")
        monkeypatch.setenv("APP_VERSION", "1.4.2")
        monkeypatch.setenv("FAIL_OPEN", "false")

        settings = Settings(_env_file=None)

        assert settings.port == 8080
        assert settings.database_url == "postgres://u:p@db/cereal"
        assert settings.app_version == "1.4.2"
        assert settings.fail_open is False


class TestAppContext:
    def test_from_settings_wires_gateway(self):
        settings = Settings(
            _env_file=None,
            database_url="postgres://u:p@db/cereal",
            connect_timeout_seconds=2.5,
        )

        context = AppContext.from_settings(settings)

        assert context.gateway.database_url == "postgresql+asyncpg://u:p@db/cereal"
        assert context.gateway.connect_timeout == 2.5
        assert context.gateway.connected is False
        assert context.counter.gateway is context.gateway
        assert context.state == LifecycleState.STARTING

    def test_from_settings_without_database(self):
        context = AppContext.from_settings(Settings(_env_file=None, database_url=None))

        assert context.gateway.configured is False
