# cronos/main.py

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .assistant import SuggestionProvider, get_suggestion_provider
from .config import Settings, get_settings
from .data import seed
from .errors import ConflictError, CronosError
from .logging_config import get_logger, setup_logging
from .repositories import Repositories
from .routers import (
    appointments_routes, assistant_routes, auth_routes, availability_routes,
    catalog_routes, financial_routes,
)
from .storage import Persistence, build_persistence
from .store import AppointmentStore

logger = get_logger(__name__)


def create_app(
    settings: Settings = None,
    persistence: Persistence = None,
    assistant: SuggestionProvider = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    if persistence is None:
        persistence = build_persistence(settings.DATABASE_URL)
    if settings.SEED_DEMO_DATA:
        seed(persistence)

    repos = Repositories(persistence)

    app = FastAPI(title="Cronos")
    app.state.settings = settings
    app.state.repos = repos
    app.state.store = AppointmentStore(repos, default_payment_method=settings.DEFAULT_PAYMENT_METHOD)
    app.state.assistant = assistant or get_suggestion_provider(settings)

    @app.exception_handler(CronosError)
    async def handle_domain_error(request: Request, exc: CronosError):
        body = {"detail": exc.message}
        if isinstance(exc, ConflictError):
            body["conflicting_ids"] = exc.conflicting_ids
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(appointments_routes.router)
    app.include_router(availability_routes.router)
    app.include_router(catalog_routes.clients_router)
    app.include_router(catalog_routes.services_router)
    app.include_router(catalog_routes.providers_router)
    app.include_router(catalog_routes.events_router)
    app.include_router(catalog_routes.form_router)
    app.include_router(catalog_routes.transactions_router)
    app.include_router(financial_routes.router)
    app.include_router(assistant_routes.router)

    logger.info("app_created", database_url=settings.DATABASE_URL.split("@")[-1])
    return app


def run():
    """Serve the API. Nothing is built until uvicorn calls the factory."""
    settings = get_settings()
    uvicorn.run("cronos.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)
