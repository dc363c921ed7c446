from pathlib import Path

import pytest

from backend.src.services import config as config_module


@pytest.fixture(autouse=True)
def restore_config_cache():
    """
    Ensure configuration cache is cleared between tests.
    """
    config_module.get_config.cache_clear()
    yield
    config_module.get_config.cache_clear()


def test_get_config_reads_database_path(monkeypatch, tmp_path: Path) -> None:
    db_path = tmp_path / "nested" / "dashboard.db"
    monkeypatch.setenv("DATABASE_PATH", str(db_path))

    cfg = config_module.reload_config()

    assert cfg.database_path == db_path.resolve()
    assert cfg.database_path.parent.is_dir()


def test_get_config_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))
    for key in ("DATABASE_TIMEOUT", "CORS_ORIGINS", "LOG_LEVEL", "SEED_DEMO_BOOKMARKS"):
        monkeypatch.delenv(key, raising=False)

    cfg = config_module.reload_config()

    assert cfg.database_timeout == 5.0
    assert cfg.log_level == "INFO"
    assert cfg.seed_demo_bookmarks is False
    assert "http://localhost:3000" in cfg.cors_origins


def test_cors_origins_are_split_and_trimmed(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))
    monkeypatch.setenv("CORS_ORIGINS", " https://a.example , ,https://b.example")

    cfg = config_module.reload_config()

    assert cfg.cors_origins == ["https://a.example", "https://b.example"]


def test_seed_flag(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))
    monkeypatch.setenv("SEED_DEMO_BOOKMARKS", "true")

    assert config_module.reload_config().seed_demo_bookmarks is True


def test_get_config_rejects_bad_log_level(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValueError):
        config_module.reload_config()


def test_get_config_rejects_non_positive_timeout(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "dashboard.db"))
    monkeypatch.setenv("DATABASE_TIMEOUT", "0")

    with pytest.raises(ValueError):
        config_module.reload_config()
