"""
Optional pre-supplied session cookies.

Cookies come from the TUBEEXPLODE_COOKIES_JSON environment variable or a JSON
file ({"NAME": "value", ...}). Missing or unreadable sources mean no cookies.
"""

import json
import logging
import os
import re
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


def _lenient_parse(text: str, context: str) -> Optional[Dict[str, Any]]:
    """Attempt to parse non-strict JSON and log what was attempted."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(
            f"{context} - JSONDecodeError: {e.msg} at line {e.lineno} column {e.colno} (char {e.pos})"
        )

    # Trailing commas
    fixed = re.sub(r",\s*([\}\]])", r"\1", text)
    # Single quotes
    fixed = fixed.replace("'", '"')
    if fixed != text:
        logger.warning(f"{context} - Retrying after removing trailing commas and single quotes")
        try:
            return json.loads(fixed)
        except json.JSONDecodeError:
            pass

    logger.error(f"{context} - Lenient parsing attempts failed")
    return None


def _as_cookie_dict(parsed: Any, context: str) -> Optional[Dict[str, str]]:
    if not isinstance(parsed, dict):
        logger.error(f"{context} - Expected a JSON object; got {type(parsed).__name__}")
        return None
    return {str(name): str(value) for name, value in parsed.items()}


def _load_from_env() -> Optional[Dict[str, str]]:
    raw = os.getenv("TUBEEXPLODE_COOKIES_JSON")
    if not raw:
        return None
    logger.info("cookies: Using TUBEEXPLODE_COOKIES_JSON environment variable")
    parsed = _lenient_parse(raw, "cookies.env:TUBEEXPLODE_COOKIES_JSON")
    if parsed is None:
        return None
    return _as_cookie_dict(parsed, "cookies.env:TUBEEXPLODE_COOKIES_JSON")


def _load_from_file(path: str) -> Optional[Dict[str, str]]:
    if not os.path.exists(path):
        logger.debug(f"cookies: File not found: {path}")
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"cookies: Could not read {path}: {e}")
        return None

    logger.info(f"cookies: Loading cookies from {path} ({len(content)} bytes)")
    parsed = _lenient_parse(content, f"cookies.file:{path}")
    if parsed is None:
        return None
    return _as_cookie_dict(parsed, f"cookies.file:{path}")


def load_cookies(path: Optional[str] = None) -> Dict[str, str]:
    """Load session cookies from env or file; empty dict when none are configured."""
    cookies = _load_from_env()
    if cookies is not None:
        return cookies

    if path:
        cookies = _load_from_file(path)
        if cookies is not None:
            return cookies

    return {}
