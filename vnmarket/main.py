from contextlib import asynccontextmanager
from pathlib import Path
import asyncio
from typing import Optional

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vnmarket.api.routes import assets_router, health_router, sync_router
from vnmarket.core.config import settings
from vnmarket.core.db import SessionLocal
from vnmarket.core.errors import StorageError
from vnmarket.core.logging import get_logger
from vnmarket.services.sync_service import AssetSyncService


log = get_logger("app")

# Background task handle
_sync_task: Optional[asyncio.Task] = None


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


async def run_asset_sync() -> None:
    """Run one sync cycle with a dedicated session."""
    log.info("Starting scheduled VN assets sync...")
    with SessionLocal() as db:
        try:
            result = await AssetSyncService(db).sync_all_assets()
            log.info(f"Scheduled sync finished: {result.total_synced} assets at {result.timestamp.isoformat()}")
        except StorageError as exc:
            log.exception(f"Scheduled sync failed: {exc}")
        except Exception as exc:
            log.exception(f"Scheduled sync crashed: {exc}")


async def scheduled_sync_task() -> None:
    """Background task that syncs assets at the configured interval."""
    interval = settings.SYNC_INTERVAL_SECONDS
    log.info(f"Scheduled sync task started (interval: {interval}s)")

    # First cycle runs immediately on startup
    while True:
        try:
            await run_asset_sync()
            await asyncio.sleep(interval)
        except asyncio.CancelledError:
            log.info("Scheduled sync task cancelled")
            break
        except Exception as exc:
            log.exception(f"Scheduled sync task error: {exc}")
            # Continue running despite errors
            await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _sync_task

    log.info(f"Starting application in {settings.ENV.upper()} mode")

    try:
        run_migrations()
    except Exception:
        log.exception("Failed to apply migrations on startup")
        raise

    if settings.SYNC_ENABLED:
        log.info("Starting scheduled sync background task...")
        _sync_task = asyncio.create_task(scheduled_sync_task())
    else:
        log.info("Scheduled sync is disabled (SYNC_ENABLED=false)")

    yield

    log.info("Shutting down services...")
    if _sync_task:
        log.info("Cancelling scheduled sync task...")
        _sync_task.cancel()
        try:
            await _sync_task
        except asyncio.CancelledError:
            pass
        _sync_task = None

    log.info("Application shutdown complete")


app = FastAPI(
    title="VN Market Assets Cache",
    description="Local reference-data cache of Vietnamese stocks, indices and funds",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    log.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Asset store unavailable", "error": str(exc)})


app.include_router(assets_router)
app.include_router(sync_router)
app.include_router(health_router)
