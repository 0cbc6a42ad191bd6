#pta/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.database import init_db, close_db
from .core.errors import register_exception_handlers
from .core.logging import logger
from .schemas.common import ErrorResponse
from .middleware.request_id import RequestIDMiddleware
from .routes import (
    schools_router,
    classes_router,
    users_router,
    profile_router,
    parents_router,
    students_router,
    payments_router,
    expenses_router,
    reports_router,
    health_router,
)

API_PREFIX = "/api/v1"

ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (401, 403, 404, 409, 422, 503)
}


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="API for tracking PTA membership payments, parents, students and classes",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Include routers
    for router in (
        schools_router,
        classes_router,
        users_router,
        profile_router,
        parents_router,
        students_router,
        payments_router,
        expenses_router,
        reports_router,
    ):
        app.include_router(router, prefix=API_PREFIX, responses=ERROR_RESPONSES)
    app.include_router(health_router)

    @app.on_event("startup")
    async def startup_event():
        # Alembic owns the schema in production; this only fills in missing tables
        if create_tables:
            await init_db()
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()
        logger.info("Application shutdown completed")

    return app
