"""Entry point: python -m paneo"""

import asyncio
import logging
import sys

import uvicorn

from .config import settings
from .errors import FileManagerError
from .fs.roots import list_roots

logger = logging.getLogger("paneo")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
    try:
        roots = asyncio.run(list_roots())
    except FileManagerError as e:
        logger.error(f"Cannot start: {e}")
        sys.exit(1)
    for root in roots:
        logger.info(f"Serving {root.id} ({root.name}) from {root.path}")

    uvicorn.run(
        "paneo.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
