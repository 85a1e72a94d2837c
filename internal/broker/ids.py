"""Catalog ID encoding.

Service and plan IDs are pure functions of the lower-cased provider and
instance-size names:

  aosb-cluster-service-<provider>
  aosb-cluster-plan-<provider>-<instance size>

IDs of already provisioned instances are stored by the platform, so the
format must never change. Lookups recompute the IDs of the current
providers and compare, which keeps the encoding the single source of truth.
"""

from typing import Optional, Sequence

from internal.atlas.client import ProviderDirectory
from internal.atlas.types import ID_DELIMITER, InstanceSize, Provider
from internal.broker.context import RequestContext
from internal.broker.errors import InvalidPlanIDError, InvalidServiceIDError
from internal.broker.providers import PROVIDER_NAMES, fetch_provider

# Prepended to service and plan IDs to keep them unique across brokers.
ID_PREFIX = "aosb-cluster"


def service_id_for_provider(provider: Provider) -> str:
    """Return the globally unique service ID for a provider."""
    return ID_DELIMITER.join((ID_PREFIX, "service", provider.name.lower()))


def plan_id_for_instance_size(provider: Provider, instance_size: InstanceSize) -> str:
    """Return the globally unique plan ID for an instance size on a provider."""
    return ID_DELIMITER.join(
        (ID_PREFIX, "plan", provider.name.lower(), instance_size.name.lower())
    )


def find_provider_by_service_id(
    directory: ProviderDirectory,
    service_id: str,
    provider_names: Sequence[str] = PROVIDER_NAMES,
    ctx: Optional[RequestContext] = None,
) -> Provider:
    """Return the provider a service ID was generated from.

    Every category is fetched in order until one matches, so directory
    failures surface even for IDs that would not have matched.

    Raises:
        InvalidServiceIDError: If no provider category produces the ID.
        DirectoryUnavailableError: If a fetch fails.
    """
    for name in provider_names:
        provider = fetch_provider(directory, name, ctx)
        if service_id_for_provider(provider) == service_id:
            return provider

    raise InvalidServiceIDError()


def find_instance_size_by_plan_id(provider: Provider, plan_id: str) -> InstanceSize:
    """Return the instance size of a provider a plan ID was generated from.

    Raises:
        InvalidPlanIDError: If none of the provider's sizes produces the ID.
    """
    for instance_size in provider.instance_sizes:
        if plan_id_for_instance_size(provider, instance_size) == plan_id:
            return instance_size

    raise InvalidPlanIDError()
