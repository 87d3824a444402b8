# app/main.py
import logging

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory, init_db
from app.core.errors import (
    AppError,
    PersistenceFailureError,
    TicketNotFoundError,
)
from app.core.logging_config import configure_logging
from app.ticket.routes import router as ticket_router
from app.ticket.services import TicketStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> TicketStore:
    engine = build_engine(settings)
    init_db(engine)
    return TicketStore(
        build_session_factory(engine),
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
        max_retries=settings.PERSISTENCE_MAX_RETRIES,
        retry_delay=settings.PERSISTENCE_RETRY_DELAY,
    )


def create_app(settings: Settings | None = None, store: TicketStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESC,
        version=settings.APP_VERSION,
    )
    app.state.ticket_store = store or build_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],          # GET, POST, PUT, DELETE, OPTIONS...
        allow_headers=["*"],
    )

    @app.exception_handler(TicketNotFoundError)
    def not_found(request: Request, exc: TicketNotFoundError):
        return Response(status_code=404)

    @app.exception_handler(PersistenceFailureError)
    def persistence_failure(request: Request, exc: PersistenceFailureError):
        logger.error(
            "Persistence failure on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.exception_handler(AppError)
    def app_error(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    def request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    # Routers
    app.include_router(ticket_router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()
