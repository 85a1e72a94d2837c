"""Broker: the catalog operations consumed by the service broker protocol layer."""

import logging
from typing import Optional, Sequence, Tuple

from internal.atlas.client import ProviderDirectory
from internal.atlas.types import InstanceSize, Provider
from internal.broker.catalog import Service, build_catalog
from internal.broker.context import RequestContext
from internal.broker.ids import find_instance_size_by_plan_id, find_provider_by_service_id
from internal.broker.providers import PROVIDER_NAMES
from internal.broker.whitelist import Whitelist

logger = logging.getLogger(__name__)


class Broker:
    """Bind a provider directory, the provider categories and the whitelist together."""

    def __init__(
        self,
        directory: ProviderDirectory,
        whitelist: Optional[Whitelist] = None,
        provider_names: Sequence[str] = PROVIDER_NAMES,
    ):
        self.directory = directory
        self.whitelist = whitelist or Whitelist.unset()
        self.provider_names = tuple(provider_names)

    def services(self, ctx: Optional[RequestContext] = None) -> list[Service]:
        """Generate the service catalog presented to consumers of the API."""
        logger.info("Retrieving service catalog")
        return build_catalog(self.directory, self.whitelist, self.provider_names, ctx)

    def catalog_dict(self, ctx: Optional[RequestContext] = None) -> dict:
        return {"services": [s.to_dict() for s in self.services(ctx)]}

    def resolve(
        self,
        service_id: str,
        plan_id: str,
        ctx: Optional[RequestContext] = None,
    ) -> Tuple[Provider, InstanceSize]:
        """Resolve a service ID and plan ID to the provider and instance size they denote.

        Raises:
            InvalidServiceIDError: If the service ID matches no provider.
            InvalidPlanIDError: If the plan ID matches no instance size of that provider.
            DirectoryUnavailableError: If a provider fetch fails.
        """
        provider = find_provider_by_service_id(self.directory, service_id, self.provider_names, ctx)
        instance_size = find_instance_size_by_plan_id(provider, plan_id)
        logger.info("Resolved plan %s to %s/%s", plan_id, provider.name, instance_size.name)
        return provider, instance_size
