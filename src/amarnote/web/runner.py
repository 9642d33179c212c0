"""Uvicorn runner for the AmarNote API."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from amarnote.app import App
from amarnote.config import Config
from amarnote.web.server import create_fastapi_app


def uvicorn_log_config(debug: bool) -> dict:
    """Uvicorn's logging config with shorter formats; access lines only in debug mode."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["default"]["fmt"] = "%(levelprefix)s %(message)s"
    log_config["formatters"]["access"]["fmt"] = '%(levelprefix)s "%(request_line)s" %(status_code)s'
    log_config["loggers"]["uvicorn.access"]["level"] = "INFO" if debug else "WARNING"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=uvicorn_log_config(config.debug),
        log_level="debug" if config.debug else "info",
    )
