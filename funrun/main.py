import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .admin import router as admin_router
from .auth import TokenSigner, check_password_strength, hash_password
from .config import PORT, Settings
from .envelope import install_error_handlers, success_response
from .mailer import Mailer
from .public import router as public_router
from .state import Registry

logger = logging.getLogger(__name__)


def seed_admin(registry: Registry, email: str, password: str) -> None:
    email = email.strip().lower()
    if not email or not password:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set - no admin can log in")
        return
    weak = check_password_strength(password)
    if weak:
        logger.warning("Seed admin password is weak: %s", weak)
    registry.add_admin(email, hash_password(password))
    logger.info("Seeded admin account %s", email)


def create_app(settings: Optional[Settings] = None, registry: Optional[Registry] = None) -> FastAPI:
    settings = settings or Settings()
    settings.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s API server (env=%s)", settings.event_name, settings.env)
        if not app.state.mailer.configured:
            logger.warning("SMTP credentials not configured - email sending will be disabled")
        yield

    app = FastAPI(title=f"{settings.event_name} registration", lifespan=lifespan)

    app.state.settings = settings
    app.state.registry = registry or Registry()
    app.state.signer = TokenSigner(settings.token_secret, settings.token_expiration_hours)
    app.state.mailer = Mailer(settings)
    seed_admin(app.state.registry, settings.admin_email, settings.admin_password)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    install_error_handlers(app)

    v1 = APIRouter(prefix="/api/v1")
    v1.include_router(public_router)
    v1.include_router(admin_router)
    app.include_router(v1)

    @app.get("/health")
    def health():
        return success_response(200, {"status": "healthy", "participants": len(app.state.registry.participants)})

    return app


if __name__ == "__main__":
    import uvicorn

    from .logs import configure_logging

    configure_logging()
    uvicorn.run(create_app(), host="0.0.0.0", port=PORT, log_level="info")
