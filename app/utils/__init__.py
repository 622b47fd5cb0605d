"""Utility helper functions."""

from app.utils.helpers import host, parse_tags, route_label, today_str

__all__ = [
    "host",
    "parse_tags",
    "route_label",
    "today_str",
]
