"""Application entry point for the AmarNote server."""

from amarnote.app import App
from amarnote.config import Config
from amarnote.logging import setup_logging
from amarnote.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
