import logging
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fleet_admin.config import Settings
from fleet_admin.routers import ambulances, assignments, auth, buses, dashboard, routes, schedules
from fleet_admin.routers.auth import get_current_admin
from fleet_admin.utils.data_manager import CollectionStore
from fleet_admin.utils.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, settings: Settings):
        self.buses_db = CollectionStore("buses", settings.data_dir)
        self.ambulances_db = CollectionStore("ambulances", settings.data_dir)
        self.routes_db = CollectionStore("routes", settings.data_dir)
        self.assignments_db = CollectionStore("assignments", settings.data_dir)
        self.schedules_db = CollectionStore("schedules", settings.data_dir)

    def stores(self):
        return [self.buses_db, self.ambulances_db, self.routes_db, self.assignments_db, self.schedules_db]


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Fleet Admin API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.db = AppState(settings)

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    protected = [Depends(get_current_admin)]
    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(buses.router, prefix="/api/buses", dependencies=protected)
    app.include_router(ambulances.router, prefix="/api/ambulances", dependencies=protected)
    app.include_router(routes.router, prefix="/api/routes", dependencies=protected)
    app.include_router(assignments.router, prefix="/api/assignments", dependencies=protected)
    app.include_router(schedules.router, prefix="/api/schedules", dependencies=protected)
    app.include_router(dashboard.router, prefix="/api/dashboard", dependencies=protected)

    @app.get("/", tags=["Root"])
    async def read_root():
        return {"message": "Welcome to the Fleet Admin API"}

    @app.get("/api/health", tags=["Root"])
    def health(request: Request):
        unreadable = []
        for store in request.app.state.db.stores():
            try:
                store.get_all()
            except StoreUnavailable:
                unreadable.append(store.name)
        if unreadable:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Unreadable collections: {', '.join(unreadable)}",
            )
        return {"status": "ok"}

    if settings.auth_disabled:
        logger.warning("[Auth] Bearer token verification is disabled (FLEET_AUTH_DISABLED)")
    logger.info(f"Fleet Admin API using data directory {settings.data_dir}")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fleet_admin.main:app", host="0.0.0.0", port=8000)
