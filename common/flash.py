"""
Flash Notifications
=====================
Cookie-carried, one-shot user notifications.

Routes that redirect the browser (payment return pages) queue a notification
with `flash()`; the middleware writes it to a short-lived cookie, and the
front-end reads it once via `GET /notifications`.

Categories: success, info, warning, error.
"""

import json
import urllib.parse
from typing import List

from fastapi import Request, Response


FLASH_COOKIE = "_flash"
FLASH_MAX_AGE = 60
CATEGORIES = ("success", "info", "warning", "error")


def flash(request: Request, message: str, category: str = "info"):
    """Queue a notification for the next page the browser loads."""
    if category not in CATEGORIES:
        category = "info"
    pending = getattr(request.state, "flash_messages", None) or []
    pending.append({"text": message, "category": category})
    request.state.flash_messages = pending


def read_flash_cookie(request: Request) -> List[dict]:
    """Decode notifications carried by the incoming cookie."""
    raw = request.cookies.get(FLASH_COOKIE, "")
    if not raw:
        return []
    try:
        messages = json.loads(urllib.parse.unquote(raw))
    except (json.JSONDecodeError, ValueError):
        return []
    if not isinstance(messages, list):
        return []
    return [m for m in messages if isinstance(m, dict) and "text" in m]


async def flash_middleware(request: Request, call_next):
    """Persist queued notifications into the cookie after the route ran."""
    response: Response = await call_next(request)
    pending = getattr(request.state, "flash_messages", None)
    if pending:
        encoded = urllib.parse.quote(json.dumps(pending, ensure_ascii=False))
        response.set_cookie(FLASH_COOKIE, encoded, httponly=True, samesite="lax", max_age=FLASH_MAX_AGE)
    return response
