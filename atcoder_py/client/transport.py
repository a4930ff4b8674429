"""HTTP transport with explicit cookie handling and redirect walking."""

from http.cookiejar import DefaultCookiePolicy
from typing import Mapping, Optional
from urllib.parse import urljoin, urlparse

import requests
from loguru import logger

from .cookies import CookieStore
from .errors import (
    CrossHostRedirectError,
    RedirectError,
    StatusError,
    TooManyRedirectsError,
    TransportError,
)


USER_AGENT = "atcoder_py"
MAX_REDIRECTS = 5


class HttpTransport:
    """GET / POST-form against a fixed origin.

    Redirects are followed by hand: cookies are absorbed from every hop, the
    method drops to GET, the target must stay on the origin host and at most
    MAX_REDIRECTS hops are taken.
    """

    def __init__(
        self,
        origin: str,
        cookies: CookieStore,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.origin = origin.rstrip("/")
        self.host = urlparse(self.origin).hostname
        self.cookies = cookies
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        # CookieStore is the only cookie source; keep the session's own jar inert
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    def url_for(self, path: str) -> str:
        return urljoin(self.origin + "/", path)

    def get(self, path: str) -> str:
        return self._request("GET", path)

    def post_form(self, path: str, fields: Mapping[str, str]) -> str:
        return self._request("POST", path, dict(fields))

    def _request(self, method: str, path: str, data: Optional[dict] = None) -> str:
        url = self.url_for(path)
        redirects_left = MAX_REDIRECTS

        while True:
            response = self._send(method, url, data)
            self.cookies.absorb(response, url)

            status = response.status_code
            if 200 <= status < 300:
                logger.debug(f"{method} {url} -> {status}")
                return response.text

            if not 300 <= status < 400:
                raise StatusError(url, status, response.reason or "")

            location = response.headers.get("Location")
            if not location:
                raise RedirectError(f"redirect from {url} ({status}) has no Location header")

            next_url = urljoin(url, location)
            if urlparse(next_url).hostname != self.host:
                raise CrossHostRedirectError(
                    f"refusing cross-host redirect from {url} to {next_url}"
                )
            if redirects_left == 0:
                raise TooManyRedirectsError(
                    f"too many redirects (more than {MAX_REDIRECTS}) starting at {self.url_for(path)}"
                )
            redirects_left -= 1

            logger.debug(f"{method} {url} -> {status}, following to {next_url}")
            method, url, data = "GET", next_url, None

    def _send(self, method: str, url: str, data: Optional[dict]) -> requests.Response:
        headers = {}
        cookie_header = self.cookies.cookie_header(url)
        if cookie_header:
            headers["Cookie"] = cookie_header

        try:
            return self.session.request(
                method,
                url,
                data=data,
                headers=headers,
                allow_redirects=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
