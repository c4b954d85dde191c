import re
from typing import Optional
from urllib.parse import unquote

from tubeexplode.exceptions import InvalidVideoIdError

MAX_INPUT_LENGTH = 2048

_VALID_ID = re.compile(r'^[A-Za-z0-9_-]{11}$')

# Tried in order against anything that is not already a bare ID
_URL_PATTERNS = [
    re.compile(r'(?:^|://|www\.)youtube\..+?/watch.*?v=(.*?)(?:&|/|$)'),   # /watch?v=ID
    re.compile(r'youtu\.be/watch.*?v=(.*?)(?:\?|&|/|$)'),                 # youtu.be/watch?v=ID
    re.compile(r'youtu\.be/(.*?)(?:\?|&|/|$)'),                           # youtu.be/ID
    re.compile(r'(?:^|://|www\.)youtube\..+?/embed/(.*?)(?:\?|&|/|$)'),
    re.compile(r'(?:^|://|www\.)youtube\..+?/v/(.*?)(?:\?|&|/|$)'),
    re.compile(r'(?:^|://|www\.)youtube\..+?/shorts/(.*?)(?:\?|&|/|$)'),
    re.compile(r'(?:^|://|www\.)youtube\..+?/live/(.*?)(?:\?|&|/|$)'),
]


def _is_valid_id(value: str) -> bool:
    return _VALID_ID.match(value) is not None


def _normalize(value: Optional[str]) -> Optional[str]:
    if not value or not value.strip() or len(value) > MAX_INPUT_LENGTH:
        return None

    value = value.strip()
    if _is_valid_id(value):
        return value

    for pattern in _URL_PATTERNS:
        match = pattern.search(value)
        if match:
            candidate = unquote(match.group(1))
            if _is_valid_id(candidate):
                return candidate
    return None


class VideoId(str):
    """An 11 character video ID, normalised from a bare ID or any common video URL."""

    @classmethod
    def try_parse(cls, value: Optional[str]) -> Optional["VideoId"]:
        normalized = _normalize(value)
        return cls(normalized) if normalized else None

    @classmethod
    def parse(cls, value: str) -> "VideoId":
        video_id = cls.try_parse(value)
        if video_id is None:
            raise InvalidVideoIdError(f"Invalid YouTube video ID or URL: {value}")
        return video_id

    @classmethod
    def is_valid(cls, value: Optional[str]) -> bool:
        return cls.try_parse(value) is not None
