"""
Run the Contacts API with uvicorn.

    python -m contacts_api

HOST and PORT come from the environment (defaults 0.0.0.0:8080).
"""

import uvicorn

from contacts_api.config import settings


def main() -> None:
    uvicorn.run(
        "contacts_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
