"""
Orchestration between HTTP, the player script parser and the manifest cache.
"""

import logging
from threading import Lock
from typing import Any, Dict, Optional

from tubeexplode.cipher.cache import ManifestCache
from tubeexplode.cipher.manifest import CipherManifest
from tubeexplode.cipher.player_script import PlayerScriptParser
from tubeexplode.config import ClientConfig
from tubeexplode.exceptions import PlayerScriptError, VideoUnavailableError
from tubeexplode.internal.page_parser import (
    YOUTUBE_BASE_URL,
    extract_player_script_url,
    extract_player_version,
    player_script_url_for_version,
)
from tubeexplode.schemas.player_response import PlayerResponse
from tubeexplode.utils.http_utils import RobustHTTPClient

logger = logging.getLogger(__name__)

IFRAME_API_URL = YOUTUBE_BASE_URL + "/iframe_api"
PLAYER_API_URL = YOUTUBE_BASE_URL + "/youtubei/v1/player"

# The only client that serves age-restricted videos without sign-in; its
# stream URLs are ciphered, so it needs the signature timestamp.
TV_EMBEDDED_CLIENT_NAME = "TVHTML5_SIMPLY_EMBEDDED_PLAYER"
TV_EMBEDDED_CLIENT_VERSION = "2.0"


class VideoController:
    """
    Fetches the player script and keeps the resulting CipherManifest for the
    lifetime of this instance.

    Safe to share between threads: concurrent callers of
    get_cipher_manifest() share a single fetch and parse.
    """

    def __init__(
        self,
        http_client: Optional[RobustHTTPClient] = None,
        parser: Optional[PlayerScriptParser] = None,
        cache: Optional[ManifestCache] = None,
        config: Optional[ClientConfig] = None
    ):
        self.http_client = http_client or RobustHTTPClient(config=config)
        self.parser = parser or PlayerScriptParser()
        self.cache = cache or ManifestCache()
        self._player_script_url: Optional[str] = None
        self._url_lock = Lock()

    def remember_player_script_url(self, html: str) -> Optional[str]:
        """Record the base.js URL referenced by a watch page, if any."""
        url = extract_player_script_url(html)
        if url:
            with self._url_lock:
                self._player_script_url = url
        return url

    def resolve_player_script_url(self) -> str:
        """
        URL of the current player script.

        Raises:
            PlayerScriptError: the iframe API does not mention a player version
        """
        with self._url_lock:
            if self._player_script_url:
                return self._player_script_url

        iframe_content = self.http_client.get_text(IFRAME_API_URL, context="[player] iframe_api")
        version = extract_player_version(iframe_content)
        if not version:
            raise PlayerScriptError("Could not extract player version from iframe_api")

        url = player_script_url_for_version(version)
        with self._url_lock:
            self._player_script_url = url
        return url

    def _fetch_and_parse(self) -> CipherManifest:
        script_url = self.resolve_player_script_url()
        logger.info(f"[player] Fetching player script {script_url}")
        player_script = self.http_client.get_text(script_url, context="[player] base.js")
        return self.parser.parse(player_script)

    def get_cipher_manifest(self) -> CipherManifest:
        """Cached manifest, fetching and parsing the player script on first use."""
        return self.cache.get_or_resolve(self._fetch_and_parse)

    def invalidate_cipher_manifest(self) -> None:
        """
        Forget the manifest and player script URL so the next call re-resolves.

        Call after a deciphered URL is rejected or a parse failed, since the
        platform may have deployed a new player mid-session.
        """
        with self._url_lock:
            self._player_script_url = None
        self.cache.invalidate()

    def build_player_request(self, video_id: str, signature_timestamp: str) -> Dict[str, Any]:
        """Player API body for the TV embedded client."""
        return {
            "videoId": video_id,
            "contentCheckOk": True,
            "racyCheckOk": True,
            "context": {
                "client": {
                    "clientName": TV_EMBEDDED_CLIENT_NAME,
                    "clientVersion": TV_EMBEDDED_CLIENT_VERSION,
                    "hl": "en",
                    "gl": "US",
                },
                "thirdParty": {
                    "embedUrl": YOUTUBE_BASE_URL,
                },
            },
            "playbackContext": {
                "contentPlaybackContext": {
                    "signatureTimestamp": signature_timestamp,
                },
            },
        }

    def get_player_response(self, video_id: str) -> PlayerResponse:
        """
        Player response for ``video_id`` requested with the manifest's signature timestamp.

        Raises:
            VideoUnavailableError: the video is not playable
        """
        manifest = self.get_cipher_manifest()
        body = self.build_player_request(video_id, manifest.signature_timestamp)
        data = self.http_client.post_json(PLAYER_API_URL, body, context=f"[player] {video_id}")
        response = PlayerResponse.model_validate(data)

        status = response.playabilityStatus
        if status is None or not status.is_playable:
            reason = (status.reason if status else None) or "Unknown error"
            raise VideoUnavailableError(f"Video '{video_id}' is unavailable: {reason}")
        return response
