"""
HTTP utilities for fetching pages, the player script and player API responses.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tubeexplode.config import ClientConfig
from tubeexplode.exceptions import NetworkDisabledError, RequestFailedError
from tubeexplode.utils.cookies import load_cookies
from tubeexplode.utils.user_agent import get_random_desktop_ua

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

# Skips the consent interstitial served to cookieless EU clients
CONSENT_COOKIE = ("CONSENT", "YES+cb")


class RobustHTTPClient:
    """HTTP client with a retrying session, rotating User-Agent and optional cookies"""

    def __init__(self, config: Optional[ClientConfig] = None, cookies: Optional[Dict[str, str]] = None):
        self.config = config or ClientConfig.from_env()
        self.timeout = self.config.timeout
        self.max_retries = self.config.max_retries
        self.session = self._create_session()

        if cookies is None:
            cookies = load_cookies(self.config.cookies_file)
        self.session.cookies.set(*CONSENT_COOKIE, domain=".youtube.com")
        for name, value in cookies.items():
            self.session.cookies.set(name, value, domain=".youtube.com")
        if cookies:
            logger.info(f"http: {len(cookies)} session cookies loaded")

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy"""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            status_forcelist=list(RETRYABLE_STATUS_CODES),
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            backoff_factor=1
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _prepare_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Prepare headers with User-Agent rotation"""
        current_headers = {'User-Agent': get_random_desktop_ua()}
        if headers:
            current_headers.update(headers)
        return current_headers

    def request(
        self,
        method: str,
        url: str,
        context: str = "",
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> requests.Response:
        """
        Make an HTTP request, retrying transient failures with exponential backoff.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            context: Context for logging
            headers: Request headers
            **kwargs: Additional requests arguments

        Returns:
            The successful (2xx) response

        Raises:
            NetworkDisabledError: running offline
            RequestFailedError: all attempts failed
        """
        if self.config.offline:
            raise NetworkDisabledError(f"{context} - Network access disabled (offline mode): {url}")

        retries = max(1, self.max_retries)
        timeout = kwargs.pop('timeout', self.timeout)
        last_status = None

        for attempt in range(retries):
            try:
                logger.debug(f"{context} - {method} attempt {attempt + 1}/{retries}: {url[:80]}")
                response = self.session.request(
                    method=method,
                    url=url,
                    headers=self._prepare_headers(headers),
                    timeout=timeout,
                    **kwargs
                )
            except requests.exceptions.Timeout:
                logger.warning(f"{context} - Timeout ({timeout}s) on attempt {attempt + 1}")
            except requests.exceptions.RequestException as e:
                logger.warning(f"{context} - Request error on attempt {attempt + 1}: {e}")
            else:
                if response.ok:
                    return response
                last_status = response.status_code
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(f"{context} - HTTP {response.status_code}: {response.text[:200]}")
                    raise RequestFailedError(
                        f"{context} - HTTP {response.status_code} for {url}",
                        status_code=response.status_code
                    )
                logger.warning(f"{context} - HTTP {response.status_code} on attempt {attempt + 1}")

            if attempt < retries - 1:
                time.sleep(2 ** attempt)

        logger.error(f"{context} - All {retries} attempts failed for {url[:60]}")
        raise RequestFailedError(f"{context} - All {retries} attempts failed for {url}", status_code=last_status)

    def get_text(self, url: str, context: str = "", **kwargs) -> str:
        """GET ``url`` and return the body as text"""
        return self.request("GET", url, context=context, **kwargs).text

    def safe_json_parse(self, response: requests.Response, context: str = "") -> Optional[Dict[str, Any]]:
        """
        Parse a JSON response body, stripping the ``)]}'`` XSSI guard if present.

        Returns:
            Parsed JSON data or None if parsing fails
        """
        text_content = response.text.strip()
        if not text_content:
            logger.warning(f"{context} - Empty response received")
            return None

        if text_content.startswith(")]}'"):
            text_content = text_content[4:].lstrip()

        content_type = response.headers.get('content-type', '').lower()
        if 'text/html' in content_type:
            logger.warning(f"{context} - Received HTML instead of JSON (likely error page)")
            logger.debug(f"{context} - HTML content preview: {text_content[:200]}...")
            return None

        try:
            return json.loads(text_content)
        except json.JSONDecodeError as e:
            logger.error(f"{context} - JSON Decode Error: {e} (line {e.lineno}, column {e.colno})")
            logger.debug(f"{context} - Response preview: {text_content[:1000]}")
            return None

    def post_json(
        self,
        url: str,
        json_data: Dict[str, Any],
        context: str = "",
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON response.

        Raises:
            RequestFailedError: request failed or the body is not JSON
        """
        response = self.request("POST", url, context=context, headers=headers, json=json_data, **kwargs)
        data = self.safe_json_parse(response, context)
        if data is None:
            raise RequestFailedError(f"{context} - Response from {url} is not valid JSON",
                                     status_code=response.status_code)
        return data
