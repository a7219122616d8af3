"""uvicorn entry point for the Notekeeper API."""

import uvicorn

from . import config


def run_server(
    host: str = config.HOST,
    port: int = config.PORT,
    reload: bool = config.RELOAD,
):
    """Serve ``api.app:app``. Access logging is left to the structlog request events."""
    uvicorn.run(
        "api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.UVICORN_LOG_LEVEL,
        access_log=False,
    )


def main():
    """Console entry point: ``notekeeper-api``."""
    run_server()


if __name__ == "__main__":
    main()
