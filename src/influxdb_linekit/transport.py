"""Default InfluxDB 1.x HTTP transport: manage, query and write over requests."""

from __future__ import annotations

from typing import Any, Dict, Optional
import logging

import requests

from .exceptions import InfluxDBTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def manage(url: str, command: str) -> None:
    """Run an administrative statement such as ``CREATE DATABASE``."""
    logger.debug("manage %s: %s", url, command)
    response = _request("POST", f"{url}/query", data={"q": command})
    if response.status_code != 200:
        raise InfluxDBTransportError(
            f"Command failed: {response.status_code} - {response.text}",
            status_code=response.status_code,
        )


def query(url: str, db: str, query_text: str) -> bytes:
    """Run a query and return the raw JSON body."""
    logger.debug("query %s/%s: %s", url, db, query_text)
    response = _request("GET", f"{url}/query", params={"db": db, "q": query_text})
    _check_success(response, "Query")
    return response.content


def write(url: str, db: str, lines: str) -> None:
    """Post line-protocol text to the write endpoint."""
    logger.debug("write %s/%s: %d line(s)", url, db, lines.count("\n") + 1)
    response = _request(
        "POST",
        f"{url}/write",
        params={"db": db},
        data=lines.encode("utf-8"),
        headers={"Content-Type": "application/octet-stream"},
    )
    _check_success(response, "Write")


def _request(
    method: str,
    url: str,
    params: Optional[Dict[str, str]] = None,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    try:
        if method == "GET":
            return requests.get(url, params=params, headers=headers, timeout=DEFAULT_TIMEOUT)
        return requests.post(url, params=params, data=data, headers=headers, timeout=DEFAULT_TIMEOUT)
    except requests.RequestException as exc:
        raise InfluxDBTransportError(str(exc)) from exc


def _check_success(response: requests.Response, what: str) -> None:
    if not 200 <= response.status_code <= 299:
        raise InfluxDBTransportError(
            f"{what} failed: {response.status_code} - {response.text}",
            status_code=response.status_code,
        )
