"""Run the demo service with uvicorn."""

import uvicorn

from crashless import ServiceSettings
from crashless_demo.app import create_app


def main() -> None:
    settings = ServiceSettings(service_name="crashless-demo")
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
        server_header=False,
    )


if __name__ == "__main__":
    main()
