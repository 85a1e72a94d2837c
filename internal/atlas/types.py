"""Data types returned by the provider directory.

Provider and instance-size names flow straight into catalog IDs, so they are
validated here, when they enter the process:
  - names must be non-empty
  - provider names must not contain the ID delimiter
  - instance sizes must be unique within a provider, ignoring case
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple


ID_DELIMITER = "-"


class InvalidNameError(ValueError):
    """A provider or instance-size name cannot be encoded into a catalog ID."""


@dataclass(frozen=True)
class InstanceSize:
    """A named tier of compute/storage offered by a provider (e.g. M10)."""
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidNameError(f"instance size name must be a non-empty string, got {self.name!r}")


@dataclass(frozen=True)
class Provider:
    """A cloud provider and the instance sizes it currently offers."""
    name: str
    instance_sizes: Tuple[InstanceSize, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidNameError(f"provider name must be a non-empty string, got {self.name!r}")
        if ID_DELIMITER in self.name:
            raise InvalidNameError(
                f"provider name {self.name!r} must not contain {ID_DELIMITER!r}"
            )

        # Accept any iterable but always store a tuple so the value stays hashable.
        sizes = tuple(self.instance_sizes)
        object.__setattr__(self, "instance_sizes", sizes)

        seen: Dict[str, str] = {}
        for size in sizes:
            key = size.name.lower()
            if key in seen:
                raise InvalidNameError(
                    f"instance sizes {seen[key]!r} and {size.name!r} of provider "
                    f"{self.name!r} collide when lower-cased"
                )
            seen[key] = size.name

    @classmethod
    def with_sizes(cls, name: str, size_names: Iterable[str]) -> "Provider":
        return cls(name=name, instance_sizes=tuple(InstanceSize(n) for n in size_names))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provider":
        """Build a Provider from one entry of the Atlas provider/regions payload.

        Expected shape: {"provider": "AWS", "instanceSizes": [{"name": "M10"}, ...]}
        """
        sizes = data.get("instanceSizes") or []
        return cls.with_sizes(data.get("provider", ""), [s.get("name") for s in sizes])

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "instance_sizes": [s.name for s in self.instance_sizes],
        }
