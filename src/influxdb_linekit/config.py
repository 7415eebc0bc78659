"""Configuration loading for influxdb_linekit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
import os

from dotenv import load_dotenv

from .exceptions import InfluxDBConfigError


DEFAULT_URL = "http://localhost:8086"


def load_env() -> None:
    """Load environment variables from a .env file if present."""
    load_dotenv()


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    database: str


def _url_from_host(host: str, port: Any) -> str:
    if "://" in host:
        return f"{host.rstrip('/')}:{port}"
    return f"http://{host}:{port}"


def config_from_env() -> DatabaseConfig:
    load_env()
    url = os.getenv("INFLUXDB_URL")
    if not url:
        host = os.getenv("INFLUXDB_HOST")
        url = _url_from_host(host, os.getenv("INFLUXDB_PORT", "8086")) if host else DEFAULT_URL
    return DatabaseConfig(
        url=url.rstrip("/"),
        database=os.getenv("INFLUXDB_DB", ""),
    )


def _dict_get(d: Mapping[str, Any], key: str, fallback: Any = None) -> Any:
    if key in d:
        return d[key]
    return fallback


def resolve_config(config: DatabaseConfig | Mapping[str, Any]) -> DatabaseConfig:
    if isinstance(config, DatabaseConfig):
        return config
    url = _dict_get(config, "url")
    if not url:
        host = _dict_get(config, "host")
        url = _url_from_host(host, _dict_get(config, "port", 8086)) if host else DEFAULT_URL
    database = _dict_get(config, "database", _dict_get(config, "db"))
    if not database:
        raise InfluxDBConfigError("database is required in config")
    return DatabaseConfig(url=str(url).rstrip("/"), database=str(database))
