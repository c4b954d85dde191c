"""
Stream URL assembly.

Ciphered formats come with a ``signatureCipher`` query string instead of a
URL: ``url`` is the media URL, ``s`` the encrypted signature and ``sp`` the
query parameter the decrypted signature must be written to.
"""

import logging
from typing import List, Optional

from tubeexplode.cipher.manifest import CipherManifest
from tubeexplode.exceptions import CipherParseError, StreamUndecryptableError
from tubeexplode.internal.video_controller import VideoController
from tubeexplode.schemas.player_response import PlayerResponse, StreamFormat
from tubeexplode.schemas.type_defs import ResolvedStream
from tubeexplode.utils.url_utils import parse_query_parameters, set_query_parameter
from tubeexplode.video_id import VideoId

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE_PARAMETER = "sig"


class StreamClient:
    """Resolves playable stream URLs for a video."""

    def __init__(self, controller: Optional[VideoController] = None):
        self.controller = controller or VideoController()

    def resolve_format_url(self, stream_format: StreamFormat, manifest: Optional[CipherManifest] = None) -> Optional[str]:
        """
        Playable URL for one format, deciphering its signature if needed.

        Returns None for formats that carry neither a URL nor cipher data.

        Raises:
            StreamUndecryptableError: cipher data is incomplete or the player
                script could not be parsed
        """
        if stream_format.url:
            return stream_format.url
        if not stream_format.requires_decryption:
            return None

        params = parse_query_parameters(stream_format.cipher_data)
        url = params.get("url")
        signature = params.get("s")
        if not url or not signature:
            raise StreamUndecryptableError(
                f"Stream {stream_format.itag} has incomplete cipher data; "
                "its signature cannot be decrypted right now"
            )
        signature_parameter = params.get("sp") or DEFAULT_SIGNATURE_PARAMETER

        if manifest is None:
            try:
                manifest = self.controller.get_cipher_manifest()
            except CipherParseError as e:
                raise StreamUndecryptableError(
                    f"Stream {stream_format.itag} signature cannot be decrypted right now: {e}"
                ) from e

        return set_query_parameter(url, signature_parameter, manifest.decipher(signature))

    def _player_response(self, video_id: VideoId) -> PlayerResponse:
        try:
            return self.controller.get_player_response(video_id)
        except CipherParseError as e:
            logger.warning(f"[streams] {e.reason.value} for {video_id}; re-fetching player script")
            self.controller.invalidate_cipher_manifest()

        try:
            return self.controller.get_player_response(video_id)
        except CipherParseError as e:
            raise StreamUndecryptableError(
                f"Streams of '{video_id}' cannot be decrypted right now: {e}"
            ) from e

    def get_stream_urls(self, video_id: str) -> List[ResolvedStream]:
        """
        All formats of ``video_id`` with playable URLs.

        Formats whose cipher data is incomplete are skipped.
        """
        video_id = VideoId.parse(video_id)
        response = self._player_response(video_id)
        if response.streamingData is None:
            return []

        manifest = self.controller.get_cipher_manifest()
        streams: List[ResolvedStream] = []
        for stream_format in response.streamingData.all_formats:
            if stream_format.itag is None:
                continue
            try:
                url = self.resolve_format_url(stream_format, manifest)
            except StreamUndecryptableError as e:
                logger.warning(f"[streams] Skipping format: {e}")
                continue
            if url is None:
                continue
            streams.append({
                "itag": stream_format.itag,
                "url": url,
                "mime_type": stream_format.mimeType,
                "bitrate": stream_format.bitrate,
                "quality_label": stream_format.qualityLabel,
                "deciphered": stream_format.requires_decryption,
            })

        logger.info(f"[streams] {len(streams)} streams resolved for {video_id}")
        return streams
