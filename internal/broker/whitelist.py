"""Plan whitelist: restricts which plans the catalog exposes per provider.

Three cases are kept apart explicitly:
  - no whitelist configured      -> every provider is listed unfiltered
  - provider has an entry        -> only the listed plan names are kept
  - whitelist without an entry   -> the provider is left out of the catalog

An entry with no plans (``AWS: []`` or ``AWS:`` in YAML) keeps the provider
listed with zero plans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

import yaml

logger = logging.getLogger(__name__)


class WhitelistError(ValueError):
    """The whitelist configuration is malformed."""


class Rule(Enum):
    UNFILTERED = "unfiltered"
    ALLOW = "allow"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class Whitelist:
    """Immutable, hashable per-provider plan whitelist.

    ``entries`` holds (provider, plan names) pairs in configuration order and
    is None when no whitelist is configured at all.
    """
    entries: Optional[Tuple[Tuple[str, Tuple[str, ...]], ...]] = None

    @classmethod
    def unset(cls) -> "Whitelist":
        return cls(entries=None)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Optional[Sequence[str]]]) -> "Whitelist":
        if not isinstance(data, Mapping):
            raise WhitelistError(f"whitelist must be a mapping of provider to plan names, got {type(data).__name__}")

        entries = []
        for provider, names in data.items():
            if not isinstance(provider, str):
                raise WhitelistError(f"provider name must be a string, got {provider!r}")
            if names is None:
                names = []
            if isinstance(names, str) or not isinstance(names, (list, tuple)):
                raise WhitelistError(f"plans for {provider} must be a list, got {names!r}")
            for name in names:
                if not isinstance(name, str):
                    raise WhitelistError(f"plan names for {provider} must be strings, got {name!r}")
            entries.append((provider, tuple(names)))
        return cls(entries=tuple(entries))

    @property
    def configured(self) -> bool:
        return self.entries is not None

    @property
    def plans(self) -> Optional[Mapping[str, Tuple[str, ...]]]:
        """Read-only view of provider -> plan names, None when unset."""
        if self.entries is None:
            return None
        return MappingProxyType(dict(self.entries))

    def rule_for(self, provider_name: str) -> Rule:
        if self.entries is None:
            return Rule.UNFILTERED
        if any(provider == provider_name for provider, _ in self.entries):
            return Rule.ALLOW
        return Rule.EXCLUDE

    def allowed_plans(self, provider_name: str) -> Tuple[str, ...]:
        """Return the whitelisted plan names for a provider (empty if none)."""
        for provider, names in self.entries or ():
            if provider == provider_name:
                return names
        return ()

    def to_dict(self) -> Optional[dict]:
        if self.entries is None:
            return None
        return {p: list(names) for p, names in self.entries}


def load_whitelist(path: Optional[str]) -> Whitelist:
    """Load a whitelist from a YAML file. No path means no whitelist.

    Raises:
        WhitelistError: If the file cannot be read or is malformed.
    """
    if not path:
        return Whitelist.unset()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise WhitelistError(f"cannot read whitelist file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise WhitelistError(f"invalid YAML in whitelist file {path}: {e}") from e

    # An empty file is an empty whitelist; any other non-mapping is an error.
    whitelist = Whitelist.from_mapping({} if data is None else data)
    logger.info("Loaded plan whitelist for providers: %s", sorted(whitelist.plans))
    return whitelist
