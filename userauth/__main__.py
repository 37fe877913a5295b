"""Run the API server: ``python -m userauth``."""

import sys

import uvicorn
from pydantic import ValidationError

from userauth.config import get_settings
from userauth.services.logging_service import configure_logging, get_logger


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        get_logger("main").error(
            "configuration_invalid",
            fields=[".".join(str(loc) for loc in err["loc"]) for err in e.errors()],
            detail=[err["msg"] for err in e.errors()],
        )
        sys.exit(1)

    uvicorn.run(
        "userauth.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
