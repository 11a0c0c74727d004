"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.firebase import init_firebase_app
from infrastructure.http_client import HttpClient
from infrastructure.identity.firebase_identity import FirebaseIdentityProvider
from infrastructure.storage.firebase_storage import FirebaseStorageProvider
from middleware.request_context import RequestContextMiddleware
from repositories.indexes import ensure_indexes
from routes.admin_routes import router as admin_router
from routes.auth_routes import router as auth_router
from routes.comment_routes import router as comment_router
from routes.health_routes import router as health_router
from routes.misc_routes import router as misc_router
from routes.post_routes import router as post_router
from routes.user_routes import router as user_router
from routes.vote_routes import router as vote_router
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            environment=settings.env,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]

        await ensure_indexes(app.state.db)

        http_client = HttpClient()
        app.state.email_provider = ZeptoMailProvider(
            settings.email, http_client, app_name=settings.app_name
        )

        # Firebase is optional; without it uploads and social sign-in are off
        firebase_app = init_firebase_app(settings.firebase)
        if firebase_app is not None:
            app.state.storage = FirebaseStorageProvider(
                firebase_app, settings.firebase.firebase_storage_bucket or None
            )
            app.state.identity_provider = FirebaseIdentityProvider(firebase_app)
        else:
            app.state.storage = None
            app.state.identity_provider = None

        log.info(
            "app_started",
            env=settings.env,
            db=settings.db.db_name,
            firebase=firebase_app is not None,
            transactions=settings.db.mongodb_transactions,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    for router in (
        auth_router,
        user_router,
        post_router,
        comment_router,
        vote_router,
        misc_router,
        admin_router,
    ):
        app.include_router(router, prefix=settings.api_prefix)
    app.include_router(health_router)

    return app
