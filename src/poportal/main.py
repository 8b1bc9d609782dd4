"""Application entry point for the portal server."""

from poportal.app import App
from poportal.config import Config
from poportal.logging import setup_logging
from poportal.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
