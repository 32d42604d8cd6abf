"""
HTTP client for the public Drive endpoints with manual redirect handling.
"""

import logging
from typing import Optional

import aiohttp
from rich.markup import escape
from yarl import URL

from gdrive_dl.exceptions import TooManyRedirectsError

from .cookies import CookieStore

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
)
LOGIN_MARKER = "ServiceLogin"


class DriveClient:
    """
    Async client that follows redirects itself so that every `Set-Cookie` in
    the chain reaches the shared CookieStore.

    Drive sets the cookies that authorise a download on intermediate redirect
    hops, which an auto-following transport would hide from us.
    """

    ITEM_URL = "https://drive.google.com/open?id={id}"
    FILE_URL = (
        "https://drive.usercontent.google.com/download"
        "?id={id}&export=download&authuser=0"
    )
    FOLDER_URL = "https://drive.google.com/embeddedfolderview?id={id}#list"

    def __init__(
        self,
        cookies: CookieStore,
        max_redirects: int = 20,
        timeout: int = 90,
        verbose: bool = False,
    ):
        """
        Initializes the client.

        Args:
            cookies: The run's cookie store, shared with the caller.
            max_redirects: Redirect hops allowed before giving up.
            timeout: Socket read timeout in seconds.
            verbose: Log response headers of every hop at debug level.
        """
        self.cookies = cookies
        self.max_redirects = max_redirects
        self.timeout = timeout
        self.verbose = verbose
        self._session: Optional[aiohttp.ClientSession] = None

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session that never stores cookies on its own."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(ttl_dns_cache=300),
                cookie_jar=aiohttp.DummyCookieJar(),
                headers={"User-Agent": USER_AGENT},
                timeout=aiohttp.ClientTimeout(
                    total=None, sock_connect=15, sock_read=self.timeout
                ),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def item_url(self, item_id: str) -> str:
        return self.ITEM_URL.format(id=item_id)

    def file_url(self, file_id: str, query_suffix: str = "") -> str:
        return self.FILE_URL.format(id=file_id) + query_suffix

    def folder_url(self, folder_id: str) -> str:
        return self.FOLDER_URL.format(id=folder_id)

    async def fetch(self, url: str) -> aiohttp.ClientResponse:
        """
        Issues a GET request and follows redirects by hand.

        Cookies from every hop, including the final one, are recorded before
        the next request goes out. The terminal response is returned with its
        body unread; the caller must read or release it.

        Raises:
            TooManyRedirectsError: If the chain is longer than `max_redirects`.
        """
        await self._initialize_session()
        current = URL(url, encoded=True)
        redirects = 0

        while True:
            log.debug(f"Requesting: {escape(str(current))}")
            headers = {}
            cookie_header = self.cookies.to_header()
            if cookie_header:
                headers["Cookie"] = cookie_header

            response = await self._session.get(
                current, headers=headers, allow_redirects=False
            )
            self.cookies.record(response.headers.getall("Set-Cookie", []))
            if self.verbose:
                log.debug(
                    f"Response {response.status} for {escape(str(current))}: "
                    f"{escape(str(dict(response.headers)))}"
                )

            location = response.headers.get("Location")
            if not (300 <= response.status < 400 and location):
                return response

            response.release()
            if redirects >= self.max_redirects:
                raise TooManyRedirectsError(
                    f"{url}: more than {self.max_redirects} redirects"
                )
            redirects += 1
            current = current.join(URL(location, encoded=True))
