import logging

import uvicorn

from .config import settings


def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(f"[STARTUP] listening on port {settings.port}")
    uvicorn.run("bobbycar_bridge.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
