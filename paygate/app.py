import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from paygate.core.config import settings as default_settings
from paygate.core.cors import GatewayCORSMiddleware
from paygate.core.context import GatewayContext, build_context
from paygate.core.logging_config import configure_logging
from paygate.errors import ErrorKind, GatewayError
from paygate.routers import gateway

logger = logging.getLogger(__name__)


def create_app(context: Optional[GatewayContext] = None) -> FastAPI:
    settings = context.settings if context else default_settings
    configure_logging(settings.LOG_LEVEL)

    # --- 1. INITIALISATION DE LA BASE ---
    # Crée les tables dès que le serveur démarre
    context = context or build_context(settings)
    context.create_tables()

    # --- 2. CONFIGURATION DE L'API ---
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=(
            "Passerelle publique de paiement par jeton (TOKEN / NUMBER / AMOUNT). "
            "Les montants (amount, new_balance) sont renvoyés en chaînes décimales "
            "à 2 places, ex. \"40.00\", jamais en nombres flottants."
        ),
        version=settings.VERSION,
    )
    app.state.context = context

    # --- 3. ERREURS -> JSON {"success": false, "error": ...} ---
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.kind.http_status, content=exc.to_dict())

    @app.middleware("http")
    async def unexpected_error_guard(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Gateway function error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content=GatewayError(ErrorKind.INTERNAL_ERROR).to_dict())

    # --- 4. SÉCURITÉ CORS ---
    # La passerelle est appelée depuis n'importe quel site marchand
    app.add_middleware(
        GatewayCORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- 5. INCLUSION DES ROUTEURS ---
    app.include_router(gateway.router)

    # --- 6. TEST DE SANTÉ ---
    @app.get("/")
    def health_check():
        try:
            with context.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            database = "connected"
        except SQLAlchemyError:
            logger.exception("Health check: database unreachable")
            database = "unreachable"
        return {
            "status": "PAYGATE ONLINE" if database == "connected" else "PAYGATE DEGRADED",
            "database": database,
            "version": settings.VERSION,
        }

    return app
