"""Process entry point: python -m capture [--port N --database_url URL ...]."""

import uvicorn

from capture.config import Settings
from capture.main import create_app


def main() -> None:
    settings = Settings(_cli_parse_args=True)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
