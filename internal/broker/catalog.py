"""Service catalog construction.

Flow:
  1. Walk the provider categories in their fixed order.
  2. Use the static shared-tier service for TENANT, fetch every other provider.
  3. Turn each provider into a Service with one plan per instance size.
  4. Apply the whitelist: filter plans, or leave the service out entirely.

Any fetch failure aborts the build. A partial catalog is never returned.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from internal.atlas.client import ProviderDirectory
from internal.atlas.types import Provider
from internal.broker.context import RequestContext
from internal.broker.ids import plan_id_for_instance_size, service_id_for_provider
from internal.broker.providers import PROVIDER_NAMES, SHARED_PROVIDER_NAME, fetch_provider
from internal.broker.whitelist import Rule, Whitelist

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServicePlan:
    id: str
    name: str
    description: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Service:
    """Catalog entry for one provider category."""
    id: str
    name: str
    description: str
    plans: Tuple[ServicePlan, ...] = ()
    bindable: bool = True
    instances_retrievable: bool = False
    bindings_retrievable: bool = False
    plan_updateable: bool = True
    metadata: Optional[Any] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """Render the service in the broker catalog JSON format."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "bindable": self.bindable,
            "instances_retrievable": self.instances_retrievable,
            "bindings_retrievable": self.bindings_retrievable,
            "plan_updateable": self.plan_updateable,
            "metadata": self.metadata,
            "plans": [p.to_dict() for p in self.plans],
        }


# Shared instance sizes are hardcoded. These IDs are referenced by existing
# instances and must stay byte-for-byte identical.
SHARED_SERVICE = Service(
    id="aosb-cluster-service-tenant",
    name="mongodb-atlas-tenant",
    description='Atlas cluster hosted on "TENANT"',
    plans=(
        ServicePlan(
            id="aosb-cluster-plan-tenant-m2",
            name="M2",
            description='Instance size "M2"',
        ),
        ServicePlan(
            id="aosb-cluster-plan-tenant-m5",
            name="M5",
            description='Instance size "M5"',
        ),
    ),
)


def plans_for_provider(provider: Provider) -> Tuple[ServicePlan, ...]:
    """Convert the instance sizes of a provider to service plans."""
    return tuple(
        ServicePlan(
            id=plan_id_for_instance_size(provider, instance_size),
            name=instance_size.name,
            description=f'Instance size "{instance_size.name}"',
        )
        for instance_size in provider.instance_sizes
    )


def service_for_provider(provider: Provider) -> Service:
    # CLI-friendly name, shown in the marketplace of the platform.
    catalog_name = f"mongodb-atlas-{provider.name.lower()}"

    return Service(
        id=service_id_for_provider(provider),
        name=catalog_name,
        description=f'Atlas cluster hosted on "{provider.name}"',
        plans=plans_for_provider(provider),
    )


def apply_whitelist(service: Service, whitelisted_plans: Sequence[str]) -> Service:
    """Return a copy of the service with only the whitelisted plans.

    Surviving plans keep the order of the service, not of the whitelist.
    """
    allowed = set(whitelisted_plans)
    plans = tuple(p for p in service.plans if p.name in allowed)
    return dataclasses.replace(service, plans=plans)


def build_catalog(
    directory: ProviderDirectory,
    whitelist: Optional[Whitelist] = None,
    provider_names: Sequence[str] = PROVIDER_NAMES,
    ctx: Optional[RequestContext] = None,
) -> List[Service]:
    """Build the ordered service catalog.

    Raises:
        DirectoryUnavailableError: If any provider fetch fails or the request
            is cancelled. Nothing is returned in that case.
    """
    whitelist = whitelist or Whitelist.unset()
    services = []

    for name in provider_names:
        provider = fetch_provider(directory, name, ctx)
        if name == SHARED_PROVIDER_NAME:
            svc = SHARED_SERVICE
        else:
            svc = service_for_provider(provider)

        rule = whitelist.rule_for(name)
        if rule is Rule.EXCLUDE:
            logger.debug("Provider %s is not whitelisted, leaving it out", name)
            continue
        if rule is Rule.ALLOW:
            svc = apply_whitelist(svc, whitelist.allowed_plans(name))
            if not svc.plans:
                logger.warning("Whitelist leaves no plans for provider %s", name)

        services.append(svc)

    return services
