from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from ..config.loader import CatalogConfig

"""Remote catalog client for the bulk item upload.

Creates one product (with all of its sizes) per call:

    POST {base_url}{create_path}   JSON payload, status "draft"

The created id is read from data.id, data._id or id of the response body.
Rejections are raised as CatalogError carrying the service's "message" when it
sent one.
"""

__all__ = [
    "CatalogError",
    "ItemCreator",
    "CatalogClient",
    "extract_item_id",
]

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog service rejects or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ItemCreator(Protocol):
    """Anything able to create one catalog item and return its id."""

    def create_item(self, payload: dict[str, Any]) -> str | None: ...


def extract_item_id(body: Any) -> str | None:
    """Find the created item id in a creation response body."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict):
        for key in ("id", "_id"):
            if data.get(key) is not None:
                return str(data[key])
    if body.get("id") is not None:
        return str(body["id"])
    return None


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


class CatalogClient:
    """requests based ItemCreator talking to the catalog HTTP API."""

    def __init__(self, config: CatalogConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if config.token:
            self.session.headers["Authorization"] = f"Bearer {config.token}"

    @property
    def create_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/{self.config.create_path.lstrip('/')}"

    def create_item(self, payload: dict[str, Any]) -> str | None:
        """Create one item and return its remote id.

        Raises:
            CatalogError: transport failure or non-2xx response
        """
        try:
            response = self.session.post(
                self.create_url, json=payload, timeout=self.config.timeout_seconds
            )
        except requests.exceptions.RequestException as e:
            raise CatalogError(str(e)) from e

        if not response.ok:
            message = _error_message(response)
            logger.debug("catalog rejected product=%s status=%d message=%s",
                         payload.get("productName"), response.status_code, message)
            raise CatalogError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None
        item_id = extract_item_id(body)
        if item_id is None:
            logger.warning("catalog response for product=%s has no item id", payload.get("productName"))
        return item_id

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> CatalogClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
