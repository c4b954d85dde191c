"""
tubeexplode - stream URL resolution without an API key.

Signatures of ciphered streams are decrypted by statically analysing the
platform's player script; no part of that script is ever executed.
"""

import logging

from tubeexplode.cipher import CipherManifest, ManifestCache, PlayerScriptParser
from tubeexplode.exceptions import (
    CipherParseError,
    CipherParseReason,
    StreamUndecryptableError,
    TubeExplodeError,
)
from tubeexplode.internal.video_controller import VideoController
from tubeexplode.streams import StreamClient
from tubeexplode.video_id import VideoId

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CipherManifest",
    "CipherParseError",
    "CipherParseReason",
    "ManifestCache",
    "PlayerScriptParser",
    "StreamClient",
    "StreamUndecryptableError",
    "TubeExplodeError",
    "VideoController",
    "VideoId",
]
