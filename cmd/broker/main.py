from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT))

from flask import Flask

from internal.atlas.client import AtlasClient
from internal.broker.broker import Broker
from internal.broker.whitelist import load_whitelist
from internal.config.settings import Settings
from internal.handlers.catalog import catalog_bp

logger = logging.getLogger("atlas-broker")


def build_broker(settings: Settings) -> Broker:
    client = AtlasClient(
        group_id=settings.atlas_group_id,
        public_key=settings.atlas_public_key,
        private_key=settings.atlas_private_key,
        base_url=settings.atlas_base_url,
        timeout=settings.request_timeout,
    )
    return Broker(client, whitelist=load_whitelist(settings.whitelist_file))


def create_app(broker: Optional[Broker] = None, settings: Optional[Settings] = None) -> Flask:
    if broker is None:
        settings = settings or Settings.from_env()
        broker = build_broker(settings)

    app = Flask(__name__)
    app.config["BROKER"] = broker
    app.config["REQUEST_TIMEOUT"] = settings.request_timeout if settings else None
    app.register_blueprint(catalog_bp)
    return app


def run() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings=settings)
    logger.info("Atlas service broker listening on http://%s:%s", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
