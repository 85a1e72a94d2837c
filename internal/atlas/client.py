"""Provider directory backed by the MongoDB Atlas Admin API.

Handles:
  - Digest authentication with an Atlas programmatic API key
  - Fetching the instance sizes a cloud provider currently offers
  - Turning every failure (network, HTTP status, bad payload) into
    DirectoryUnavailableError so callers deal with a single error type

No retries happen here. A failed fetch is reported to the caller as-is.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from internal.atlas.types import InvalidNameError, Provider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cloud.mongodb.com"
API_PREFIX = "/api/atlas/v1.0"


class DirectoryUnavailableError(Exception):
    """A provider could not be fetched from the directory."""


class ProviderDirectory(Protocol):
    def get_provider(self, name: str, timeout: Optional[float] = None) -> Provider:
        ...


class AtlasClient:
    """Fetch providers and their instance sizes for one Atlas project."""

    def __init__(
        self,
        group_id: str,
        public_key: str,
        private_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.group_id = group_id
        self._http = httpx.Client(
            base_url=base_url.rstrip("/") + API_PREFIX,
            auth=httpx.DigestAuth(public_key, private_key),
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def get_provider(self, name: str, timeout: Optional[float] = None) -> Provider:
        """Return the provider with the instance sizes Atlas offers for it.

        ``timeout`` overrides the client timeout for this request only, so a
        request deadline also bounds the fetch in flight.

        Raises:
            DirectoryUnavailableError: If the request fails or the response
                does not describe the requested provider.
        """
        path = f"/groups/{self.group_id}/clusters/provider/regions"
        logger.debug("Fetching provider %s from Atlas", name)

        try:
            resp = self._http.get(
                path,
                params={"providers": name},
                timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Atlas returned %s for provider %s", e.response.status_code, name)
            raise DirectoryUnavailableError(
                f"Atlas returned HTTP {e.response.status_code} for provider {name!r}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Error fetching provider %s: %s", name, e)
            raise DirectoryUnavailableError(f"Unable to reach Atlas for provider {name!r}: {e}") from e
        except ValueError as e:
            raise DirectoryUnavailableError(f"Atlas returned invalid JSON for provider {name!r}") from e

        results = payload.get("results") if isinstance(payload, dict) else None
        for entry in results or []:
            if not isinstance(entry, dict) or entry.get("provider") != name:
                continue
            try:
                return Provider.from_dict(entry)
            except (InvalidNameError, AttributeError, TypeError) as e:
                raise DirectoryUnavailableError(
                    f"Atlas returned unusable data for provider {name!r}: {e}"
                ) from e

        raise DirectoryUnavailableError(f"Provider {name!r} not found in Atlas")
