"""Exceptions raised while talking to AtCoder."""


class AtCoderError(Exception):
    """Base class for all atcoder_py errors."""


class TransportError(AtCoderError):
    """Network level failure (DNS, TLS, connection)."""


class StatusError(AtCoderError):
    """Non-2xx, non-redirect HTTP response."""

    def __init__(self, url: str, code: int, reason: str = ""):
        self.url = url
        self.code = code
        self.reason = reason
        super().__init__(f"HTTP {code} {reason} for {url}".replace("  ", " "))

    @property
    def not_found(self) -> bool:
        return self.code == 404


class RedirectError(AtCoderError):
    """Redirect that violates the client's redirect policy."""


class CrossHostRedirectError(RedirectError):
    pass


class TooManyRedirectsError(RedirectError):
    pass


class StatusParseError(AtCoderError):
    """Judge status token with an unrecognized shape."""

    def __init__(self, token: str, detail: str = "unrecognized status"):
        self.token = token
        super().__init__(f"{detail}: `{token}`")


class PageParseError(AtCoderError):
    """Page markup did not have the expected structure."""


class NotLoggedInError(AtCoderError):
    def __init__(self):
        super().__init__("You are not logged in. Please login first.")


class LoginError(AtCoderError):
    pass
