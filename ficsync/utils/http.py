# ficsync/utils/http.py

import logging
from typing import Optional

import requests

from ficsync.config import DEFAULT_USER_AGENT
from ficsync.exceptions import TransportError


class ArchiveDownloader:
    def __init__(self,
                 user_agent: str = DEFAULT_USER_AGENT,
                 timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        """
        Initialize the page downloader.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Connect and read timeout in seconds
            session: Optional preconfigured requests session
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml",
        })
        self.logger = logging.getLogger(self.__class__.__name__)

    def download_url(self, url: str) -> str:
        """
        Download a page, following redirects.

        Args:
            url: The URL to download

        Returns:
            The response body as text

        Raises:
            TransportError: On network failure, timeout, non-2xx status or
                an empty body
        """
        self.logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=(self.timeout, self.timeout), allow_redirects=True)
        except requests.Timeout as e:
            raise TransportError(f"Request timed out: {e}", url=url) from e
        except requests.RequestException as e:
            raise TransportError(f"Network error: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        if not response.text:
            raise TransportError("Empty response body", status_code=response.status_code, url=url)

        return response.text

    def close(self) -> None:
        self.session.close()
