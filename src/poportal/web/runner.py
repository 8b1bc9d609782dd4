"""Uvicorn server runner for the portal."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from poportal.app import App
from poportal.config import Config
from poportal.web.server import create_fastapi_app


def build_log_config() -> dict:
    """Uvicorn logging with the client address in access lines and no colors."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["access"]["use_colors"] = False
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    log_config["formatters"]["default"]["use_colors"] = False
    return log_config


def run_server(app: App, config: Config) -> None:
    """Serve the portal behind a TLS-terminating proxy."""
    uvicorn.run(
        create_fastapi_app(app, config),
        host=config.host,
        port=config.port,
        log_config=build_log_config(),
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips=config.forwarded_allow_ips,
        server_header=False,
    )
