from __future__ import annotations

from typing import Any, Dict, Optional

from backend.auth.config import AuthConfig

SESSION_COOKIE_NAME = "token"


def _cookie_attributes(cfg: AuthConfig) -> Dict[str, Any]:
    # Set and clear must share these exactly or browsers keep the old cookie.
    return {
        "key": SESSION_COOKIE_NAME,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "strict",
        "path": "/",
    }


def session_cookie_kwargs(cfg: AuthConfig, token: str) -> Dict[str, Any]:
    return {**_cookie_attributes(cfg), "value": token, "max_age": cfg.session_ttl_seconds}


def clear_session_cookie_kwargs(cfg: AuthConfig) -> Dict[str, Any]:
    return {**_cookie_attributes(cfg), "value": "", "max_age": 0}


def attach_session(response: Any, cfg: AuthConfig, token: str) -> None:
    response.set_cookie(**session_cookie_kwargs(cfg, token))


def clear_session(response: Any, cfg: AuthConfig) -> None:
    response.set_cookie(**clear_session_cookie_kwargs(cfg))


def extract_session(cookies: Dict[str, str]) -> Optional[str]:
    value = (cookies.get(SESSION_COOKIE_NAME) or "").strip()
    return value or None
