"""
Stream resolution workflow tests.
iframe_api, base.js and the player API are stubbed with requests_mock.
"""

import pytest
import requests_mock

from tubeexplode.config import ClientConfig
from tubeexplode.exceptions import (
    PlayerScriptError,
    StreamUndecryptableError,
    VideoUnavailableError,
)
from tubeexplode.internal.video_controller import PLAYER_API_URL, IFRAME_API_URL, VideoController
from tubeexplode.schemas.player_response import StreamFormat
from tubeexplode.streams import StreamClient
from tubeexplode.tests.scripts import PLAYER_SCRIPT, PREAMBLE
from tubeexplode.utils.http_utils import RobustHTTPClient

VIDEO_ID = "yIVRs6YSbOM"
PLAYER_VERSION = "4fcd6e4a"
BASE_JS_URL = f"https://www.youtube.com/s/player/{PLAYER_VERSION}/player_ias.vflset/en_US/base.js"
IFRAME_API = f"var scriptUrl = 'https:\\/\\/www.youtube.com\\/s\\/player\\/{PLAYER_VERSION}\\/www-widgetapi.vflset\\/www-widgetapi.js';"

CIPHERED = "s=abcdefgh&sp=sig&url=https%3A%2F%2Frr1.googlevideo.com%2Fvideoplayback%3Fitag%3D251%26id%3Dx"

PLAYER_RESPONSE = {
    "playabilityStatus": {"status": "OK"},
    "streamingData": {
        "formats": [
            {"itag": 18, "url": "https://rr1.googlevideo.com/videoplayback?itag=18", "mimeType": "video/mp4", "bitrate": 500000},
        ],
        "adaptiveFormats": [
            {"itag": 251, "signatureCipher": CIPHERED, "mimeType": "audio/webm", "bitrate": 130000},
            {"itag": 140, "signatureCipher": "sp=sig", "mimeType": "audio/mp4"},
            {"itag": 22, "mimeType": "video/mp4"},
        ],
    },
}


@pytest.fixture
def controller():
    http_client = RobustHTTPClient(config=ClientConfig(max_retries=1, offline=False), cookies={})
    return VideoController(http_client=http_client)


@pytest.fixture
def client(controller):
    return StreamClient(controller)


def _count(mocker, url):
    return sum(1 for request in mocker.request_history if request.url == url)


class TestVideoController:
    """Player script resolution and manifest caching"""

    def test_manifest_resolved_from_iframe_version(self, controller):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, text=PLAYER_SCRIPT)

            manifest = controller.get_cipher_manifest()

        assert manifest.signature_timestamp == "19000"
        assert manifest.decipher("abcdefgh") == "fedcab"

    def test_manifest_cached_across_calls(self, controller):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, text=PLAYER_SCRIPT)

            first = controller.get_cipher_manifest()
            second = controller.get_cipher_manifest()

            assert first is second
            assert _count(m, BASE_JS_URL) == 1

    def test_watch_page_url_skips_iframe_api(self, controller):
        html = f'<script src="/s/player/{PLAYER_VERSION}/player_ias.vflset/en_US/base.js"></script>'
        assert controller.remember_player_script_url(html) == BASE_JS_URL

        with requests_mock.Mocker() as m:
            m.get(BASE_JS_URL, text=PLAYER_SCRIPT)

            controller.get_cipher_manifest()

            assert _count(m, IFRAME_API_URL) == 0

    def test_missing_player_version(self, controller):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text="var nothing = 1;")

            with pytest.raises(PlayerScriptError):
                controller.get_cipher_manifest()

    def test_player_request_carries_signature_timestamp(self, controller):
        body = controller.build_player_request(VIDEO_ID, "19000")

        assert body["videoId"] == VIDEO_ID
        assert body["playbackContext"]["contentPlaybackContext"]["signatureTimestamp"] == "19000"
        assert body["context"]["client"]["clientName"] == "TVHTML5_SIMPLY_EMBEDDED_PLAYER"

    def test_unplayable_video(self, controller):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, text=PLAYER_SCRIPT)
            m.post(PLAYER_API_URL, json={"playabilityStatus": {"status": "ERROR", "reason": "Video unavailable"}})

            with pytest.raises(VideoUnavailableError, match="Video unavailable"):
                controller.get_player_response(VIDEO_ID)


class TestStreamClient:
    """Stream URL assembly"""

    def test_resolves_plain_and_ciphered_formats(self, client):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, text=PLAYER_SCRIPT)
            m.post(PLAYER_API_URL, json=PLAYER_RESPONSE)

            streams = client.get_stream_urls(f"https://youtu.be/{VIDEO_ID}")

            sent = [r for r in m.request_history if r.url == PLAYER_API_URL][0].json()

        assert sent["playbackContext"]["contentPlaybackContext"]["signatureTimestamp"] == "19000"
        assert [s["itag"] for s in streams] == [18, 251]
        assert streams[0]["url"] == "https://rr1.googlevideo.com/videoplayback?itag=18"
        assert streams[0]["deciphered"] is False
        assert streams[1]["url"] == "https://rr1.googlevideo.com/videoplayback?itag=251&id=x&sig=fedcab"
        assert streams[1]["deciphered"] is True
        assert streams[1]["mime_type"] == "audio/webm"

    def test_reparses_fresh_script_after_parse_failure(self, client):
        """A stale or broken script is dropped and fetched again once"""
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, [{"text": PREAMBLE}, {"text": PLAYER_SCRIPT}])
            m.post(PLAYER_API_URL, json=PLAYER_RESPONSE)

            streams = client.get_stream_urls(VIDEO_ID)

            assert _count(m, BASE_JS_URL) == 2

        assert streams[1]["url"].endswith("sig=fedcab")

    def test_persistent_parse_failure_is_undecryptable(self, client):
        with requests_mock.Mocker() as m:
            m.get(IFRAME_API_URL, text=IFRAME_API)
            m.get(BASE_JS_URL, text=PREAMBLE)

            with pytest.raises(StreamUndecryptableError) as exc_info:
                client.get_stream_urls(VIDEO_ID)

        assert "signature timestamp" in str(exc_info.value.__cause__)

    def test_resolve_format_with_plain_url_needs_no_manifest(self, client):
        stream_format = StreamFormat(itag=18, url="https://example.com/v")

        assert client.resolve_format_url(stream_format) == "https://example.com/v"

    def test_resolve_format_default_signature_parameter(self, client):
        from tubeexplode.cipher.manifest import CipherManifest
        from tubeexplode.cipher.operations import Reverse

        stream_format = StreamFormat(itag=18, cipher="s=abc&url=https%3A%2F%2Fexample.com%2Fv")
        manifest = CipherManifest("19000", (Reverse(),))

        assert client.resolve_format_url(stream_format, manifest) == "https://example.com/v?sig=cba"

    def test_resolve_format_incomplete_cipher_data(self, client):
        stream_format = StreamFormat(itag=140, signatureCipher="sp=sig")

        with pytest.raises(StreamUndecryptableError):
            client.resolve_format_url(stream_format)

    def test_format_without_url_or_cipher(self, client):
        assert client.resolve_format_url(StreamFormat(itag=22)) is None

    def test_invalid_video_id(self, client):
        with pytest.raises(ValueError):
            client.get_stream_urls("definitely not a video")
