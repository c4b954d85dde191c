"""
Type definitions for values returned by the stream client.
"""

from typing import TypedDict, Optional


class ResolvedStream(TypedDict, total=False):
    """A stream format with a playable URL, returned by StreamClient.get_stream_urls()"""
    itag: int
    url: str
    mime_type: Optional[str]
    bitrate: Optional[int]
    quality_label: Optional[str]
    deciphered: bool  # True if the signature had to be decrypted
