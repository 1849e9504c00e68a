"""Run the broker with uvicorn: `python -m courier`."""

import uvicorn

from courier.api.app import create_app
from courier.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
