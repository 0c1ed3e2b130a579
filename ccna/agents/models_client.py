"""Minimal client for the model listing of an OpenAI-compatible API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from ccna.config import DEFAULT_CONFIG, RequestConfig

LOGGER = logging.getLogger(__name__)


class ModelFetchError(RuntimeError):
    """Raised when the model list cannot be retrieved."""


@dataclass
class Model:
    id: str
    owned_by: Optional[str] = None

    @property
    def label(self) -> str:
        return f"{self.id} ({self.owned_by})" if self.owned_by else self.id


def normalize_base_url(base_url: str) -> str:
    """Canonicalize a base URL so that it ends in exactly one ``/v1``.

    ``https://host/``, ``https://host/v1`` and ``https://host/v1/chat`` all
    become ``https://host/v1``. The URL is not validated.
    """

    normalized = base_url.rstrip("/")
    if "/v1/" in normalized:
        normalized = normalized.split("/v1/", 1)[0]
    elif normalized.endswith("/v1"):
        normalized = normalized[: -len("/v1")]
    return f"{normalized}/v1"


def models_endpoint(base_url: str) -> str:
    return f"{normalize_base_url(base_url)}/models"


def _error_detail(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if body.get("message"):
        return str(body["message"])
    return None


class ModelCatalogClient:
    """Synchronous client wrapper."""

    def __init__(self, config: Optional[RequestConfig] = None) -> None:
        self._config = config or DEFAULT_CONFIG.request

    def fetch_models(self, base_url: str, auth_token: str) -> List[Model]:
        url = models_endpoint(base_url)
        LOGGER.info("Fetching model list from %s", url)
        LOGGER.debug("Base URL as given: %s, normalized: %s", base_url, normalize_base_url(base_url))

        headers = dict(self._config.request_headers)
        headers["Authorization"] = f"Bearer {auth_token}"
        try:
            response = requests.get(url, headers=headers, timeout=self._config.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            detail = _error_detail(exc.response) if exc.response is not None else None
            LOGGER.error("Model list non-2xx: %s", exc)
            raise ModelFetchError(f"Failed to fetch model list: {detail or exc}") from exc
        except requests.RequestException as exc:  # noqa: B904
            raise ModelFetchError(f"Failed to fetch model list: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ModelFetchError("Failed to fetch model list: invalid JSON response") from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        models: List[Model] = []
        for item in data or []:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                continue
            owned_by = item.get("owned_by")
            models.append(Model(id=item["id"], owned_by=owned_by if isinstance(owned_by, str) else None))
        LOGGER.info("Endpoint returned %d models", len(models))
        return models


def fetch_models(base_url: str, auth_token: str, *, config: Optional[RequestConfig] = None) -> List[Model]:
    return ModelCatalogClient(config).fetch_models(base_url, auth_token)
