"""Main entry point for the trace conclusion worker."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from trace_worker.api import create_fastapi_app
from trace_worker.app import Application
from trace_worker.config import WorkerConfig
from trace_worker.logging_config import setup_logging


def main():
    """Run the worker."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    config = WorkerConfig.from_env()
    setup_logging(config)

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    # Lifespan starts the scheduler and stops it gracefully on shutdown
    app = create_fastapi_app(Application(config))

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
        log_config=None,
    )


if __name__ == "__main__":
    main()
