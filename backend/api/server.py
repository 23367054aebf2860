"""
HTTP surface for account authentication.

Routes live under /api/v1/auth. The session gate runs as a dependency on protected
routes; everything else only needs the request-logging middleware.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel

from backend.auth.config import load_auth_config
from backend.auth.cookies import attach_session, clear_session
from backend.auth.errors import AuthError, InternalFault, Result, ValidationError
from backend.auth.gate import GateState, evaluate_session
from backend.auth.service import AuthOutcome, AuthService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/auth"

_auth_service: Optional[AuthService] = None
_auth_service_lock = threading.Lock()


def get_auth_service() -> AuthService:
    """Return the process-wide AuthService (thread-safe lazy init)."""
    global _auth_service
    if _auth_service is not None:
        return _auth_service
    with _auth_service_lock:
        if _auth_service is not None:
            return _auth_service
        from backend.store import build_account_store

        _auth_service = AuthService(load_auth_config(), build_account_store())
        return _auth_service


def reset_auth_service() -> None:
    global _auth_service
    with _auth_service_lock:
        _auth_service = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


app = FastAPI(title="Account authentication service")


@app.on_event("startup")
def _startup_maybe_migrate_db() -> None:
    """
    Optional: upgrade the DB schema when DB_AUTO_MIGRATE=1.

    This should never prevent the server from starting; failures are logged.
    """
    from backend.db.migrate import upgrade_on_startup

    status = upgrade_on_startup()
    if status is not None:
        logger.info("DB schema: %s", status)

    cfg = load_auth_config()
    # Avoid logging secrets; presence flags are fine.
    logger.info(
        "Auth config: environment=%s secure_cookies=%s session_ttl=%ss signing_secret=%s google_client=%s",
        cfg.environment,
        cfg.cookie_secure,
        cfg.session_ttl_seconds,
        "set" if cfg.session_secret else "MISSING",
        "set" if cfg.google_client_id else "unset",
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming HTTP requests."""
    start_time = time.time()
    logger.debug("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception as e:
        process_time = time.time() - start_time
        logger.exception("%s %s - ERROR after %.3fs: %s", request.method, request.url.path, process_time, str(e))
        return JSONResponse(status_code=500, content=InternalFault().to_body())
    process_time = time.time() - start_time
    logger.debug("%s %s - %d (%.3fs)", request.method, request.url.path, response.status_code, process_time)
    return response


@app.exception_handler(AuthError)
async def _auth_error_handler(_request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(_request: Request, _exc: RequestValidationError) -> JSONResponse:
    # Never echo the submitted body back (it may contain a password).
    return JSONResponse(status_code=400, content=ValidationError().to_body())


def require_session(request: Request, service: AuthService = Depends(get_auth_service)) -> str:
    """Gate for protected routes: verified subject goes to `request.state.user_id`."""
    outcome = evaluate_session(service.codec, request.cookies)
    if outcome.state is GateState.FATAL:
        raise InternalFault()
    if not outcome.authorized:
        # IMPORTANT: no `WWW-Authenticate` header; browsers would pop a login modal.
        raise outcome.error
    request.state.user_id = outcome.subject
    return outcome.subject


def _render(result: Result[AuthOutcome], service: AuthService) -> Response:
    if not result.ok:
        return JSONResponse(status_code=result.error.status_code, content=result.error.to_body())

    outcome = result.value
    if outcome.redirect_url:
        resp: Response = RedirectResponse(url=outcome.redirect_url, status_code=outcome.status_code)
    else:
        resp = JSONResponse(status_code=outcome.status_code, content=outcome.body)
    resp.headers["Cache-Control"] = "no-store"
    if outcome.session_token:
        attach_session(resp, service.cfg, outcome.session_token)
    if outcome.clear_session:
        clear_session(resp, service.cfg)
    return resp


@app.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"ok": True}


@app.post(f"{API_PREFIX}/register")
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)) -> Response:
    return _render(service.register(body.name, body.email, body.password), service)


@app.post(f"{API_PREFIX}/login")
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)) -> Response:
    return _render(service.login(body.email, body.password), service)


@app.get(f"{API_PREFIX}/google/callback")
def google_callback(
    code: Optional[str] = Query(None),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    """Without `code`: redirect to Google. With `code`: finish sign-in."""
    return _render(service.oauth_callback(code), service)


@app.post(f"{API_PREFIX}/logout")
def logout(service: AuthService = Depends(get_auth_service)) -> Response:
    return _render(service.logout(), service)


@app.get(f"{API_PREFIX}/me")
def me(
    user_id: str = Depends(require_session),
    service: AuthService = Depends(get_auth_service),
) -> Response:
    return _render(service.current_identity(user_id), service)


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    import uvicorn

    # Configure logging for the application
    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Map Python logging levels to uvicorn log levels
    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    logger.info("Starting auth server on %s:%d (log_level=%s)", host, port, log_level)
    uvicorn.run(app, host=host, port=port, log_level=uvicorn_log_level)
