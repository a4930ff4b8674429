"""Test doubles shared by the unit tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from http.client import HTTPMessage
from types import SimpleNamespace
from typing import List, Optional

import requests
from requests.cookies import RequestsCookieJar
from requests.structures import CaseInsensitiveDict

from atcoder_py.client.models import SubmissionRow


JST = timezone(timedelta(hours=9))


def make_raw(headers: Optional[dict] = None, set_cookies: List[str] = ()):
    """urllib3-like raw response keeping each header line of the HTTP message."""
    msg = HTTPMessage()
    for name, value in (headers or {}).items():
        msg[name] = value
    for cookie in set_cookies:
        msg["Set-Cookie"] = cookie
    return SimpleNamespace(_original_response=SimpleNamespace(msg=msg))


def make_response(
    status: int = 200,
    body: str = "",
    headers: Optional[dict] = None,
    set_cookies: List[str] = (),
    reason: str = "OK",
    raw: bool = True,
) -> requests.Response:
    merged = dict(headers or {})
    if set_cookies:
        # requests folds repeated headers into one comma separated value
        merged["Set-Cookie"] = ", ".join(set_cookies)

    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(merged)
    response.raw = make_raw(headers, set_cookies) if raw else None
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session, replaying queued responses."""

    def __init__(self, responses=()):
        self.headers = {}
        self.cookies = RequestsCookieJar()
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, data=None, headers=None, **kwargs):
        self.calls.append(
            {"method": method, "url": url, "data": data, "headers": dict(headers or {}), **kwargs}
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        response.url = url
        return response


def row(
    id: int,
    status: str,
    seconds: int = 0,
    problem: str = "A - Welcome",
    score: int = 0,
    run_time: Optional[str] = None,
    memory: Optional[str] = None,
    base: datetime = datetime(2024, 1, 6, 21, 0, 0, tzinfo=JST),
) -> SubmissionRow:
    return SubmissionRow(
        id=id,
        submitted_at=base + timedelta(seconds=seconds),
        problem=problem,
        user="tourist",
        language="Python (CPython 3.11.4)",
        score=score,
        code_length="120 Byte",
        status=status,
        run_time=run_time,
        memory=memory,
    )


class FakeIndicator:
    def __init__(self, prefix, events):
        self.prefix = prefix
        self.live = True
        self.ticks = 0
        self.events = events

    def wait(self, message):
        self.events.append(("wait", self.prefix, message))

    def progress(self, completed, total, message=""):
        self.events.append(("progress", self.prefix, completed, total))

    def tick(self):
        self.ticks += 1

    def finish(self, message):
        self.live = False
        self.events.append(("finish", self.prefix, message))


class RecordingDisplay:
    """Display that records indicator calls instead of drawing."""

    def __init__(self):
        self.events = []
        self.indicators = []
        self.refreshes = 0
        self.entered = False
        self.exited = False

    def indicator(self, prefix):
        indicator = FakeIndicator(prefix, self.events)
        self.indicators.append(indicator)
        return indicator

    def refresh(self):
        self.refreshes += 1

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True

    def finishes(self):
        return [e for e in self.events if e[0] == "finish"]


class ScriptedSource:
    """SubmissionSource returning one scripted snapshot per poll."""

    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.polls = 0

    def fetch_submissions(self, contest_id):
        self.polls += 1
        snapshot = self.snapshots.pop(0) if len(self.snapshots) > 1 else self.snapshots[0]
        if isinstance(snapshot, Exception):
            raise snapshot
        return list(snapshot)


async def no_sleep(_seconds):
    """Yield to the event loop without waiting."""
    await asyncio.sleep(0)
