from datetime import datetime

from fastapi import Request
from fastapi.routing import APIRoute
from starlette.routing import Match


def host(request: Request) -> str:
    """Return the client IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def route_label(request: Request) -> str:
    """
    Describe the request for access logs.

    Uses the summary of the matching API route (e.g. ``Purchase a post``)
    and falls back to ``METHOD path`` for mounts and unknown paths.
    """
    for route in request.app.routes:
        if isinstance(route, APIRoute) and route.matches(request.scope)[0] == Match.FULL:
            return route.summary or route.name
    return f"{request.method} {request.url.path}"


def parse_tags(raw: str | None) -> list[str]:
    """
    Split a comma separated tag string into clean, unique tags.

    Args:
        raw: Raw form value such as ``"sunset, beach,,sunset"``

    Returns:
        list[str]: Tags in first-seen order, blanks removed
    """
    if not raw:
        return []
    tags: list[str] = []
    for part in raw.split(","):
        tag = part.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
