from vnmarket.api.routes.assets import router as assets_router
from vnmarket.api.routes.health import router as health_router
from vnmarket.api.routes.sync import router as sync_router

__all__ = ["assets_router", "health_router", "sync_router"]
