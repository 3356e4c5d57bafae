from flask import Flask

import argparse
import atexit
import logging
from logging.config import dictConfig

from memkv.api import create_app
from memkv.config import Settings
from memkv.datastore import DataStore
from memkv.sweeper import Sweeper

logger = logging.getLogger(__name__)

def configure_logging(level: str = "INFO"):
    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            }
        },
        'handlers': {
            'default': {
                'class': 'logging.StreamHandler',
                'formatter': 'default'
            }
        },
        'root': {
            'level': level,
            'handlers': ['default']
        }
    })

def build(settings: Settings) -> tuple[Flask, Sweeper]:
    """
    Wire store, sweeper and HTTP app together; the sweeper is not started here
    """
    data_store = DataStore(
        max_age=settings.max_age,
        preserve_created_at=settings.preserve_created_at,
        canonicalize_json=settings.canonicalize_json,
    )
    sweeper = Sweeper(data_store, interval=settings.sweep_interval)
    return create_app(data_store), sweeper

def parse_args(settings: Settings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="In-memory key/value store over HTTP.")
    parser.add_argument("--host", type=str, default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port to listen on (default: {settings.port})")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args()

def main():
    settings = Settings()
    args = parse_args(settings)
    configure_logging("DEBUG" if args.debug else settings.log_level)

    app, sweeper = build(settings)
    sweeper.start()
    atexit.register(sweeper.stop, 5.0)

    logger.info(f"Starting memkv on {args.host}:{args.port} with {settings}")
    app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False, threaded=True)

if __name__ == "__main__":
    main()
