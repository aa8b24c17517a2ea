"""The web application and the command that serves it."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

import redis
from dotenv import load_dotenv
from flask import Flask, Response, request
from sqlalchemy.orm import Session

from .config import connect_database, connect_redis
from .handlers import init_routes
from .logs import init_logger

DEFAULT_PORT = "8080"


def create_app(session: Session, logger: logging.Logger) -> Flask:
    """Build the application with request logging and all routes."""
    app = Flask(__name__)

    @app.after_request
    def log_request(response: Response) -> Response:
        uri = request.path
        if request.query_string:
            uri += "?" + request.query_string.decode("latin-1")
        logger.info(
            "request", extra={"fields": {"URI": uri, "status": response.status_code}}
        )
        return response

    @app.get("/")
    def index() -> Response:
        return Response("Server is up and running!", status=200, mimetype="text/plain")

    init_routes(app, session, logger)
    return app


def _fatal(logger: logging.Logger, message: str, err: BaseException) -> NoReturn:
    logger.critical(message, extra={"fields": {"error": str(err)}})
    raise SystemExit(1)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Load settings, connect to the stores and serve the API."""
    parser = argparse.ArgumentParser(
        prog="portalapi", description="Serve the projects portal API."
    )
    parser.parse_args(argv)

    env_file = Path(".env")
    if env_file.is_file():
        load_dotenv(env_file)
    else:
        print(f"failed to load .env file: {env_file} not found", file=sys.stderr)

    logger = init_logger()

    try:
        session = connect_database()
    except Exception as err:  # any driver or connection failure is fatal here
        _fatal(logger, "failed to connect to database", err)

    try:
        connect_redis().ping()
    except (redis.RedisError, ValueError) as err:
        _fatal(logger, "failed to connect to redis store", err)

    app = create_app(session, logger)
    port = os.environ.get("PORT") or DEFAULT_PORT
    try:
        app.run(host="0.0.0.0", port=int(port))
    except (OSError, ValueError) as err:
        _fatal(logger, "server error", err)


if __name__ == "__main__":
    main()