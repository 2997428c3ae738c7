import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trip_planner.auth import router as auth_router
from trip_planner.config import Settings, configure_logging, load_settings
from trip_planner.database import init_db, init_engine, make_session_factory
from trip_planner.trip.itinerary_api import router as itinerary_router
from trip_planner.trip.trip_api import router as trip_router

logger = logging.getLogger(__name__)


class SettingsCORSMiddleware:
    """CORS configured from the settings loaded at startup.

    Settings only exist once the lifespan has run, so the real middleware is
    built on the first HTTP request.
    """

    def __init__(self, app):
        self.app = app
        self.cors = None

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        if self.cors is None:
            settings = scope["app"].state.settings
            self.cors = CORSMiddleware(
                self.app,
                allow_origins=settings.cors_origins,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )
        await self.cors(scope, receive, send)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: settings are read here, never at import time
        active = settings if settings is not None else load_settings()
        configure_logging(active.log_level)

        engine = init_engine(active.database_url)
        init_db(engine)
        app.state.settings = active
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        logger.info("Trip Planner started")
        yield
        engine.dispose()

    app = FastAPI(
        title="Trip Planner",
        description="Personal trip planning with generated skeleton itineraries",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(SettingsCORSMiddleware)

    app.include_router(auth_router, prefix="/api")
    app.include_router(trip_router, prefix="/api")
    app.include_router(itinerary_router, prefix="/api")

    @app.get("/")
    def root():
        return {
            "message": "Welcome to Trip Planner API",
            "docs": "/docs",
            "redoc": "/redoc"
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
