"""Client module for AtCoder interaction."""

from .client import ATCODER_ENDPOINT, AtCoderClient
from .cookies import CookieStore
from .errors import (
    AtCoderError,
    CrossHostRedirectError,
    LoginError,
    NotLoggedInError,
    PageParseError,
    RedirectError,
    StatusError,
    StatusParseError,
    TooManyRedirectsError,
    TransportError,
)
from .models import (
    Done,
    JudgingStatus,
    Progress,
    ResultCode,
    SubmissionDetail,
    SubmissionRecord,
    SubmissionRow,
    Verdict,
    Waiting,
    WaitingReason,
    parse_status,
)
from .transport import HttpTransport

__all__ = [
    "ATCODER_ENDPOINT",
    "AtCoderClient",
    "AtCoderError",
    "CookieStore",
    "CrossHostRedirectError",
    "Done",
    "HttpTransport",
    "JudgingStatus",
    "LoginError",
    "NotLoggedInError",
    "PageParseError",
    "Progress",
    "RedirectError",
    "ResultCode",
    "StatusError",
    "StatusParseError",
    "SubmissionDetail",
    "SubmissionRecord",
    "SubmissionRow",
    "TooManyRedirectsError",
    "TransportError",
    "Verdict",
    "Waiting",
    "WaitingReason",
    "parse_status",
]
