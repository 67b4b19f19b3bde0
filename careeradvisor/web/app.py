"""
FastAPI application factory
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse
from starlette.middleware.sessions import SessionMiddleware

from ..accounts import AccountService, SessionStore, UserStore, open_stores
from ..advisor.agent import AdvisorAgent
from ..config import AppConfig
from ..errors import PersistenceFailure
from .routes import router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    users: Optional[UserStore] = None,
    sessions: Optional[SessionStore] = None,
    advisor: Optional[AdvisorAgent] = None,
) -> FastAPI:
    """
    Build the web app from an explicit config.

    Stores and the advisor are created from ``config`` unless passed in,
    which is how tests swap in in-memory stores or a mocked OpenAI client.
    """
    config = config or AppConfig.from_env()

    if users is None or sessions is None:
        default_users, default_sessions = open_stores(config.data_store_url, config.session_ttl_hours)
        if users is None:
            users = default_users
        if sessions is None:
            sessions = default_sessions

    if advisor is None:
        advisor = AdvisorAgent.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        advisor.close()

    app = FastAPI(title="Career Advisor", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.config = config
    app.state.accounts = AccountService(users, sessions)
    app.state.advisor = advisor

    # The signed cookie only carries the opaque token; expiry is enforced by the session store.
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie="careeradvisor_session",
        max_age=int(config.session_ttl_hours * 60 * 60),
        same_site="lax",
        https_only=config.app_env == "production",
    )

    @app.exception_handler(PersistenceFailure)
    async def persistence_failure_handler(request: Request, exc: PersistenceFailure):
        logger.error(f"Store unavailable while serving {request.url.path}: {exc}")
        return HTMLResponse(
            "<p>Something went wrong loading your data. Please try again.</p>",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    app.include_router(router)

    logger.info(
        f"App ready (store={config.data_store_url}, "
        f"advisor={'live' if config.openai_api_key else 'template-only'})"
    )
    return app
