"""
HTTP access for the occurrence data source.

``ObisSession`` is a ``requests.Session`` that identifies the application,
asks for JSON, applies the configured timeout to every request and retries
the transient failures OBIS produces under load (429 and 5xx on large
pages). Retries and timeouts live here, never in analysis code.

Usage::

    from windfarm_explorer.services.http import get_json

    payload = get_json("https://api.obis.org/v3/occurrence", {"datasetid": uuid})
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from windfarm_explorer import __version__
from windfarm_explorer.config import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,  # get_json raises with the final status
)


def user_agent(settings: Settings) -> str:
    """``windfarm-explorer/0.1.0``, plus ``(contact)`` when one is configured."""
    agent = f"{settings.app_name}/{__version__}"
    return f"{agent} ({settings.contact})" if settings.contact else agent


class ObisSession(requests.Session):
    """Session with the retry adapter mounted and a default timeout."""

    def __init__(self, settings: Settings | None = None, retry: Retry | None = None) -> None:
        super().__init__()
        settings = settings or get_settings()
        self.timeout = settings.obis_timeout
        adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
        self.mount("https://", adapter)
        self.mount("http://", adapter)
        self.headers.update({"User-Agent": user_agent(settings), "Accept": "application/json"})

    def request(  # type: ignore[override]
        self, method: str | bytes, url: str | bytes, **kwargs: Any
    ) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


@lru_cache
def get_session() -> ObisSession:
    """Process-wide session, built from the settings on first use."""
    return ObisSession()


def get_json(url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
    """GET ``url`` and decode the JSON body.

    Raises:
        requests.HTTPError: final response status is 4xx/5xx (after retries).
    """
    resp = get_session().get(url, params=params)
    resp.raise_for_status()
    logger.debug("GET %s %s -> %s", url, params, resp.status_code)
    payload: dict[str, Any] = resp.json()
    return payload
