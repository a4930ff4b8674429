"""Persistent cookie store shared by every request of a session."""

import json
from http.cookiejar import Cookie, DefaultCookiePolicy
from pathlib import Path
from typing import Iterator, List, Optional

import requests
from loguru import logger
from requests.cookies import (
    MockRequest,
    RequestsCookieJar,
    create_cookie,
    extract_cookies_to_jar,
    get_cookie_header,
)

from .errors import TransportError


def _request_for(url: str) -> requests.PreparedRequest:
    return requests.Request("GET", url).prepare()


class CookieStore:
    """Cookies of one login session, persisted between runs as JSON.

    Matching follows http.cookiejar's DefaultCookiePolicy. Cookies set
    without a Domain attribute are host-only.
    """

    def __init__(self):
        self.policy = DefaultCookiePolicy(
            strict_ns_domain=DefaultCookiePolicy.DomainStrictNonDomain
        )
        self.jar = RequestsCookieJar(policy=self.policy)

    @classmethod
    def load(cls, path: Path) -> "CookieStore":
        """Load the store from disk. A missing file gives an empty store."""
        store = cls()
        if not path.exists():
            logger.debug(f"No session file at {path}, starting with empty cookies")
            return store

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            for entry in data:
                cookie = create_cookie(
                    entry["name"],
                    entry["value"],
                    domain=entry["domain"],
                    path=entry.get("path", "/"),
                    secure=entry.get("secure", False),
                    expires=entry.get("expires"),
                )
                cookie.domain_specified = not entry.get("host_only", False)
                store.jar.set_cookie(cookie)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable session file {path}: {e}")
            return cls()

        logger.debug(f"Loaded {len(store)} cookie(s) from {path}")
        return store

    def save(self, path: Path) -> None:
        """Write the store to disk. Raises OSError when writing fails."""
        data = [
            {
                "name": c.name,
                "value": c.value,
                "domain": c.domain,
                "host_only": not c.domain_specified,
                "path": c.path,
                "secure": c.secure,
                "expires": c.expires,
            }
            for c in self.jar
        ]
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug(f"Saved {len(data)} cookie(s) to {path}")

    def cookies_for(self, url: str) -> List[Cookie]:
        """Cookies to send to `url`, longest path first."""
        request = MockRequest(_request_for(url))
        matched = [
            c
            for c in self.jar
            if not c.is_expired()
            and self.policy.domain_return_ok(c.domain, request)
            and self.policy.path_return_ok(c.path, request)
            and self.policy.return_ok_domain(c, request)
            and self.policy.return_ok_secure(c, request)
        ]
        matched.sort(key=lambda c: len(c.path), reverse=True)
        return matched

    def cookie_header(self, url: str) -> Optional[str]:
        return get_cookie_header(self.jar, _request_for(url))

    def absorb(self, response: requests.Response, url: str) -> None:
        """Merge the Set-Cookie headers of a response received from `url`.

        The headers are read unmerged from the underlying HTTP message; a
        response without it cannot be absorbed safely.
        """
        raw = response.raw
        if getattr(raw, "_original_response", None) is None:
            if "Set-Cookie" in response.headers:
                raise TransportError(
                    f"cannot read Set-Cookie headers of the response from {url}"
                )
            return

        before = len(self.jar)
        extract_cookies_to_jar(self.jar, _request_for(url), raw)
        logger.debug(f"Cookies from {url}: {before} -> {len(self.jar)}")

    def clear(self) -> None:
        self.jar.clear()

    def __iter__(self) -> Iterator[Cookie]:
        return iter(self.jar)

    def __len__(self) -> int:
        return len(self.jar)
