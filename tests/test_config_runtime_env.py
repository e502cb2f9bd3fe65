from __future__ import annotations

from pathlib import Path

import pytest

from autoquote.core import config as app_config


def test_get_required_env_loads_from_local_env_file(monkeypatch, tmp_path: Path) -> None:
    env_file = tmp_path / ".env.local"
    env_file.write_text(
        "export AUTOQUOTE_DB_KEY='db-from-file'\n$env:AUTOQUOTE_EXTRA=\"extra\"\n# comment\n",
        encoding="utf-8",
    )

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AUTOQUOTE_DB_KEY", raising=False)
    monkeypatch.delenv("AUTOQUOTE_EXTRA", raising=False)
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", False)
    monkeypatch.setattr(app_config, "_iter_env_candidates", lambda: [env_file])

    assert app_config.get_required_env("AUTOQUOTE_DB_KEY") == "db-from-file"
    assert app_config.get_required_env("AUTOQUOTE_EXTRA") == "extra"


def test_get_required_env_does_not_override_process_env(monkeypatch, tmp_path: Path) -> None:
    env_file = tmp_path / ".env.local"
    env_file.write_text("AUTOQUOTE_DB_KEY=from-file\n", encoding="utf-8")

    monkeypatch.setenv("AUTOQUOTE_DB_KEY", "from-process")
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", False)
    monkeypatch.setattr(app_config, "_iter_env_candidates", lambda: [env_file])

    assert app_config.get_required_env("AUTOQUOTE_DB_KEY") == "from-process"


def test_get_required_env_missing_raises(monkeypatch) -> None:
    monkeypatch.delenv("AUTOQUOTE_MISSING", raising=False)
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", False)
    monkeypatch.setattr(app_config, "_iter_env_candidates", lambda: [])

    with pytest.raises(RuntimeError):
        app_config.get_required_env("AUTOQUOTE_MISSING")


def test_load_config_from_yaml(monkeypatch, tmp_path: Path) -> None:
    config_file = tmp_path / "app.yaml"
    config_file.write_text(
        "db:\n"
        "  path: data/quotes.db\n"
        "  allow_sqlite_fallback: true\n"
        "server:\n"
        "  port: 8080\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("AUTOQUOTE_CONFIG_PATH", str(config_file))
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", True)

    config = app_config.load_config()

    assert config.database.path == "data/quotes.db"
    assert config.database.key_env == "AUTOQUOTE_DB_KEY"
    assert config.database.allow_sqlite_fallback is True
    assert config.server.host == "127.0.0.1"
    assert config.server.port == 8080
    assert config.logging.level == "DEBUG"
    assert config.logging.retention_days == 365
