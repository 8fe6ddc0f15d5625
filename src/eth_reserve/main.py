"""Main module for the ETH reserve tracking service."""
import logging
import subprocess
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from eth_reserve.container import CLOSABLE_PROVIDERS, Container, init_container
from eth_reserve.db.sessions import init_db
from eth_reserve.routers import cron_router, purchases_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging at `level` (Settings.log_level); unknown names mean INFO."""
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(resolved)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create tables at startup; close provider clients on shutdown."""
    container: Container = fastapi_app.state.container
    init_db(container.db_engine())

    yield

    # Close provider resources (e.g. httpx clients)
    for name in CLOSABLE_PROVIDERS:
        provider = getattr(container, name)()
        try:
            await provider.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)


def create_app(container: Container | None = None) -> FastAPI:
    """Build the FastAPI app around a DI container."""
    fastapi_app = FastAPI(
        title="Strategic ETH Reserve",
        description="Daily reserve snapshots and purchase ledger for ETH treasury companies",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.container = container or init_container()
    fastapi_app.include_router(cron_router)
    fastapi_app.include_router(purchases_router)

    @fastapi_app.get("/")
    def health():
        """Return health check status."""
        return {"status": "ok"}

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `start`."""
    configure_logging(app.state.container.settings().log_level)
    uvicorn.run("eth_reserve.main:app", host="127.0.0.1", port=8001)


def run_dev():
    """Run the development server with Postgres running via Docker."""
    configure_logging(app.state.container.settings().log_level)
    project_root = Path(__file__).resolve().parent.parent.parent
    try:
        subprocess.run(
            ["docker", "compose", "up", "-d", "postgres"],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print("Failed to start Postgres:", e.stderr or e.stdout, file=sys.stderr)
        sys.exit(1)
    uvicorn.run("eth_reserve.main:app", host="0.0.0.0", port=8000, reload=True)
