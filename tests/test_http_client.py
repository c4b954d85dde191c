import pytest
import requests_mock

from tubeexplode.config import ClientConfig
from tubeexplode.exceptions import NetworkDisabledError, RequestFailedError
from tubeexplode.utils.http_utils import RobustHTTPClient

URL = "https://www.youtube.com/iframe_api"


def _client(**overrides):
    settings = {"max_retries": 1, "offline": False}
    settings.update(overrides)
    return RobustHTTPClient(config=ClientConfig(**settings), cookies={"SID": "abc"})


def test_get_text_sends_user_agent_and_cookies():
    client = _client()
    with requests_mock.Mocker() as m:
        m.get(URL, text="hello")

        assert client.get_text(URL) == "hello"

        request = m.request_history[0]
        assert request.headers["User-Agent"].startswith("Mozilla/5.0")
        assert "SID=abc" in request.headers["Cookie"]
        assert "CONSENT=" in request.headers["Cookie"]


def test_client_error_is_not_retried():
    client = _client(max_retries=3)
    with requests_mock.Mocker() as m:
        m.get(URL, status_code=404, text="missing")

        with pytest.raises(RequestFailedError) as exc_info:
            client.get_text(URL)

        assert exc_info.value.status_code == 404
        assert m.call_count == 1


def test_server_error_exhausts_retries():
    client = _client()
    with requests_mock.Mocker() as m:
        m.get(URL, status_code=503)

        with pytest.raises(RequestFailedError) as exc_info:
            client.get_text(URL)

        assert exc_info.value.status_code == 503


def test_offline_mode_refuses_requests():
    client = _client(offline=True)

    with pytest.raises(NetworkDisabledError):
        client.get_text(URL)


def test_post_json_strips_xssi_prefix():
    client = _client()
    with requests_mock.Mocker() as m:
        m.post(URL, text=")]}'\n{\"ok\": true}", headers={"content-type": "application/json"})

        assert client.post_json(URL, {"a": 1}) == {"ok": True}
        assert m.request_history[0].json() == {"a": 1}


def test_post_json_rejects_html():
    client = _client()
    with requests_mock.Mocker() as m:
        m.post(URL, text="<html>error</html>", headers={"content-type": "text/html"})

        with pytest.raises(RequestFailedError):
            client.post_json(URL, {})
