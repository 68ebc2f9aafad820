"""API entry point — provisions the schema and starts the Flask app."""

import logging
import sys

from shared.config_loader import load_yaml, section
from api.src.config import ApiConfig
from api.src.db import LogDatabase
from api.src.web import create_app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [API] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    cfg = ApiConfig.from_dict(section(load_yaml(), "api"))
    database = LogDatabase.from_url(cfg.database_url)
    database.init()
    app = create_app(database)
    logging.getLogger(__name__).info("Logging API listening on %s:%d", cfg.host, cfg.port)
    app.run(host=cfg.host, port=cfg.port)


if __name__ == "__main__":
    main()
