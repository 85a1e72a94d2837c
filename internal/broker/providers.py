"""Provider categories offered by the broker.

The instance sizes of every category except the shared tier are fetched from
the provider directory on each request. Shared-tier (TENANT) clusters come
in a fixed set of sizes and are never looked up.
"""

from typing import Optional

from internal.atlas.client import DirectoryUnavailableError, ProviderDirectory
from internal.atlas.types import Provider
from internal.broker.context import RequestCancelledError, RequestContext, background


SHARED_PROVIDER_NAME = "TENANT"

PROVIDER_NAMES = ("AWS", "GCP", "AZURE", SHARED_PROVIDER_NAME)

SHARED_PROVIDER = Provider.with_sizes(SHARED_PROVIDER_NAME, ("M2", "M5"))


def fetch_provider(
    directory: ProviderDirectory,
    name: str,
    ctx: Optional[RequestContext] = None,
) -> Provider:
    """Return the provider for a category, fetching it unless it is the shared tier.

    The time left before the request deadline bounds the fetch itself.

    Raises:
        RequestCancelledError: If the request was cancelled or its deadline
            passed before or during the fetch.
        DirectoryUnavailableError: If the fetch failed.
    """
    ctx = ctx or background()
    ctx.check()
    if name == SHARED_PROVIDER_NAME:
        return SHARED_PROVIDER

    try:
        return directory.get_provider(name, timeout=ctx.remaining())
    except RequestCancelledError:
        raise
    except DirectoryUnavailableError as e:
        if ctx.expired:
            raise RequestCancelledError(f"request deadline exceeded while fetching {name}") from e
        raise
