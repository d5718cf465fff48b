"""Application entry point for the Hangar API server."""

from hangar.app import App
from hangar.config import Config
from hangar.logging import setup_logging
from hangar.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
