"""Run the application with uvicorn: ``python -m xff_realip``."""

import uvicorn

from xff_realip.configs.config import get_app_config


def main() -> None:
    config = get_app_config()
    uvicorn.run(
        "xff_realip.app:get_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
