from __future__ import annotations

import pytest

from influxdb_linekit import config as config_module
from influxdb_linekit.config import DatabaseConfig, config_from_env, resolve_config
from influxdb_linekit.exceptions import InfluxDBConfigError


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch) -> None:
    monkeypatch.setattr(config_module, "load_dotenv", lambda: False)
    for key in ("INFLUXDB_URL", "INFLUXDB_HOST", "INFLUXDB_PORT", "INFLUXDB_DB"):
        monkeypatch.delenv(key, raising=False)


def test_config_from_env_reads_url_and_db(monkeypatch) -> None:
    monkeypatch.setenv("INFLUXDB_URL", "https://influx.example.org:8086/")
    monkeypatch.setenv("INFLUXDB_DB", "metrics")

    cfg = config_from_env()

    assert cfg == DatabaseConfig(url="https://influx.example.org:8086", database="metrics")


def test_config_from_env_falls_back_to_host_and_port(monkeypatch) -> None:
    monkeypatch.setenv("INFLUXDB_HOST", "fallback-host")
    monkeypatch.setenv("INFLUXDB_PORT", "9000")

    cfg = config_from_env()

    assert cfg.url == "http://fallback-host:9000"
    assert cfg.database == ""


def test_config_from_env_defaults_to_localhost() -> None:
    assert config_from_env().url == "http://localhost:8086"


def test_resolve_config_supports_alias_keys() -> None:
    cfg = resolve_config({"host": "https://h", "port": 8088, "db": "db"})
    assert cfg == DatabaseConfig(url="https://h:8088", database="db")


def test_resolve_config_prefers_url() -> None:
    cfg = resolve_config({"url": "http://u:1/", "host": "ignored", "database": "db"})
    assert cfg == DatabaseConfig(url="http://u:1", database="db")


def test_resolve_config_requires_database() -> None:
    with pytest.raises(InfluxDBConfigError, match="database is required"):
        resolve_config({"url": "http://u:1"})


def test_resolve_config_dataclass_passthrough() -> None:
    original = DatabaseConfig(url="http://u", database="db")
    assert resolve_config(original) is original
