import logging

import uvicorn

from softadmin.config import settings
from softadmin.models.registry import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME

logger = logging.getLogger("softadmin")


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Serving on http://{settings.host}:{settings.port}")
    logger.info(f"Admin account: {DEFAULT_ADMIN_USERNAME} / {DEFAULT_ADMIN_PASSWORD}")
    logger.info("Other accounts can register and get the user role")
    uvicorn.run("softadmin.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
