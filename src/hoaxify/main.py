"""Application entry point for the Hoaxify backend server."""

from hoaxify.app import App
from hoaxify.config import Config
from hoaxify.logging import setup_logging
from hoaxify.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
