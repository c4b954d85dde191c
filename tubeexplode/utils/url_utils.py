"""Query-string helpers for stream URL assembly."""

from typing import Dict
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def parse_query_parameters(value: str) -> Dict[str, str]:
    """
    Decode ``key=value&...`` pairs from a URL or a bare query string.

    Later duplicates win. Pairs without ``=`` are dropped.
    """
    query = value.split("?", 1)[1] if "?" in value else value
    return dict(parse_qsl(query, keep_blank_values=True))


def set_query_parameter(url: str, name: str, value: str) -> str:
    """Return ``url`` with ``name`` set to ``value``, keeping the other parameters."""
    parts = urlsplit(url)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    params[name] = value
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))
