"""
Locating the player script from the watch page or the iframe API.
"""

import re
from typing import Optional

YOUTUBE_BASE_URL = "https://www.youtube.com"

PLAYER_SCRIPT_URL_TEMPLATE = YOUTUBE_BASE_URL + "/s/player/{version}/player_ias.vflset/en_US/base.js"

# /s/player/4fcd6e4a/player_ias.vflset/en_US/base.js
PLAYER_SCRIPT_PATTERN = re.compile(
    r'(?:/s/player/|/player/)([a-zA-Z0-9_-]+)/[^"\'\s]*?(?:base|player_ias(?:\.vflset)?/[a-zA-Z_]+/base)\.js'
)

# iframe_api embeds the version as player\/4fcd6e4a\/
PLAYER_VERSION_PATTERN = re.compile(r'player\\?/([0-9a-fA-F]{8})\\?/')


def extract_player_script_url(html: str) -> Optional[str]:
    """Absolute URL of base.js referenced by a watch page, or None."""
    match = PLAYER_SCRIPT_PATTERN.search(html)
    if not match:
        return None
    path = match.group(0)
    if path.startswith("/player/"):
        path = "/s" + path
    return YOUTUBE_BASE_URL + path


def extract_player_version(iframe_api_content: str) -> Optional[str]:
    """8 hex character player version from the iframe_api response, or None."""
    match = PLAYER_VERSION_PATTERN.search(iframe_api_content)
    return match.group(1) if match else None


def player_script_url_for_version(version: str) -> str:
    return PLAYER_SCRIPT_URL_TEMPLATE.format(version=version)
