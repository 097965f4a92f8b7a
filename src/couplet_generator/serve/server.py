"""Process entry point: load settings once and serve the app with uvicorn."""
from __future__ import annotations
import logging
import socket

import uvicorn

from couplet_generator.common.config import load_settings
from couplet_generator.common.logging_setup import setup_logging
from couplet_generator.serve.fastapi_app import create_app

LOGGER = logging.getLogger("couplet.server")


def local_ip() -> str:
    """Best-effort LAN address for the startup banner."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            # connect() on UDP sends nothing; it only picks the outbound interface.
            s.connect(("10.255.255.255", 1))
            return s.getsockname()[0]
    except OSError:
        return "localhost"


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)

    LOGGER.info("Couplet generator listening on port %s", settings.port)
    LOGGER.info("Local: http://localhost:%s", settings.port)
    LOGGER.info("LAN:   http://%s:%s", local_ip(), settings.port)
    LOGGER.info("DeepSeek key: %s", "configured" if settings.deepseek_api_key else "MISSING")

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
