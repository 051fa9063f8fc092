"""Tests for configuration loading, validation and runtime overrides."""

from impoot.config_manager import ConfigManager, DatabaseConfig, config_manager


class TestDatabaseConfig:

    def test_mysql_url_by_default(self):
        db = DatabaseConfig(mysql_user="impoot", mysql_password="pw", mysql_host="db", mysql_database="market")
        assert db.url == "mysql+aiomysql://impoot:pw@db:3306/market?charset=utf8mb4"
        assert not db.is_sqlite

    def test_override_wins(self):
        db = DatabaseConfig(url_override="sqlite+aiosqlite:///./local.db")
        assert db.url == "sqlite+aiosqlite:///./local.db"
        assert db.is_sqlite


class TestConfigManager:

    def test_testing_environment_loaded(self):
        assert config_manager.is_testing()
        assert config_manager.database.is_sqlite

    def test_summary_shape(self):
        summary = config_manager.get_config_summary()
        assert summary["categories"] == ["networking", "minddate", "crew", "lecture"]
        assert summary["marketplace"]["default_commission_rate"] == 15
        assert summary["database"]["sqlite"] is True

    def test_invalid_commission_rate(self):
        manager = ConfigManager(env_file="missing.env")
        manager.marketplace.default_commission_rate = 150
        result = manager.validate_config()
        assert not result["valid"]
        assert any("수수료율" in issue for issue in result["issues"])

    def test_production_warnings(self):
        manager = ConfigManager(env_file="missing.env")
        manager.system.environment = "production"
        manager.system.debug = True
        result = manager.validate_config()
        assert result["valid"]
        assert any("디버그" in warning for warning in result["warnings"])

    def test_runtime_update(self):
        manager = ConfigManager(env_file="missing.env")
        assert manager.update_runtime_config("marketplace", "review_edit_window_hours", 48)
        assert manager.marketplace.review_edit_window_hours == 48
        assert not manager.update_runtime_config("marketplace", "unknown_key", 1)
        assert not manager.update_runtime_config("nowhere", "key", 1)


class TestHealthEndpoints:

    async def test_health(self, client):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json()["status"] == "healthy"
        assert res.json()["environment"] == "testing"

    async def test_config_summary(self, client):
        res = await client.get("/config")
        assert res.json()["database"]["sqlite"] is True
