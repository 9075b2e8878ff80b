"""Environment-driven settings."""
import pytest

from jobly import config


class TestPoolSize:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DB_POOL_MIN", raising=False)
        monkeypatch.delenv("DB_POOL_MAX", raising=False)
        assert config.pool_size() == (1, 10)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MIN", "2")
        monkeypatch.setenv("DB_POOL_MAX", "20")
        min_conn, max_conn = config.pool_size()
        assert (min_conn, max_conn) == (2, 20)
        assert isinstance(min_conn, int) and isinstance(max_conn, int)


class TestSecretKey:
    def test_missing(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            config.secret_key()


class TestCorsOrigins:
    def test_default_allows_all(self, monkeypatch):
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        assert config.cors_origins() == ["*"]

    def test_comma_separated(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        assert config.cors_origins() == ["http://a.test", "http://b.test"]
