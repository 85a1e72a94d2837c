"""Broker settings read from the environment.

  ATLAS_BASE_URL          Atlas base URL (default https://cloud.mongodb.com)
  ATLAS_GROUP_ID          Atlas project used to look up providers
  ATLAS_PUBLIC_KEY        Programmatic API key, public part
  ATLAS_PRIVATE_KEY       Programmatic API key, private part
  BROKER_WHITELIST_FILE   YAML plan whitelist (unset: no filtering)
  BROKER_REQUEST_TIMEOUT  Seconds a catalog request may spend fetching (default 30)
  BROKER_HOST / PORT      Listen address (default 0.0.0.0:4000)
  BROKER_LOG_LEVEL        Logging level (default INFO)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from internal.atlas.client import DEFAULT_BASE_URL


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    atlas_group_id: str
    atlas_public_key: str
    atlas_private_key: str
    atlas_base_url: str = DEFAULT_BASE_URL
    whitelist_file: Optional[str] = None
    request_timeout: float = 30.0
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        missing = [k for k in ("ATLAS_GROUP_ID", "ATLAS_PUBLIC_KEY", "ATLAS_PRIVATE_KEY") if not env.get(k)]
        if missing:
            raise SettingsError(f"Missing required environment variables: {', '.join(missing)}")

        try:
            request_timeout = float(env.get("BROKER_REQUEST_TIMEOUT", "30"))
            port = int(env.get("PORT", "4000"))
        except ValueError as e:
            raise SettingsError(f"Invalid numeric setting: {e}") from e

        return cls(
            atlas_group_id=env["ATLAS_GROUP_ID"],
            atlas_public_key=env["ATLAS_PUBLIC_KEY"],
            atlas_private_key=env["ATLAS_PRIVATE_KEY"],
            atlas_base_url=env.get("ATLAS_BASE_URL", DEFAULT_BASE_URL),
            whitelist_file=env.get("BROKER_WHITELIST_FILE") or None,
            request_timeout=request_timeout,
            host=env.get("BROKER_HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("BROKER_LOG_LEVEL", "INFO").upper(),
        )
