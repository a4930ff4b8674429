"""AtCoder HTTP client with a persistent login session."""

from pathlib import Path
from typing import List, Optional, Tuple

import requests
from loguru import logger
from rich.console import Console

from . import pages
from .cookies import CookieStore
from .errors import LoginError, NotLoggedInError
from .models import SubmissionDetail, SubmissionRecord, SubmissionRow
from .transport import HttpTransport


ATCODER_ENDPOINT = "https://atcoder.jp"

console = Console(stderr=True)


class AtCoderClient:
    """Client for one command invocation.

    Cookies are loaded from `session_file` on construction and written back
    exactly once by close(), which the context manager calls on exit.
    """

    def __init__(
        self,
        session_file: Path,
        endpoint: str = ATCODER_ENDPOINT,
        session: Optional[requests.Session] = None,
    ):
        self.session_file = session_file
        self.cookies = CookieStore.load(session_file)
        self.transport = HttpTransport(endpoint, self.cookies, session=session)
        self._closed = False

    def __enter__(self) -> "AtCoderClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Save the session. A failed save is reported, not raised."""
        if self._closed:
            return
        self._closed = True
        try:
            self.cookies.save(self.session_file)
        except OSError as e:
            logger.error(f"Failed to save session to {self.session_file}: {e}")
            console.print(
                f"[yellow]An error occurred while saving the session: {e}[/yellow]"
            )

    def clear_session(self) -> None:
        self.cookies.clear()

    def username(self) -> Optional[str]:
        return pages.parse_username(self.transport.get("/"))

    def check_login(self) -> str:
        name = self.username()
        if name is None:
            raise NotLoggedInError()
        return name

    def login(self, username: str, password: str) -> str:
        """Authenticate with AtCoder and return the logged-in user name."""
        csrf_token = pages.parse_csrf_token(self.transport.get("/login"))

        html = self.transport.post_form(
            "/login",
            {"username": username, "password": password, "csrf_token": csrf_token},
        )

        error = pages.parse_login_error(html)
        if error is not None:
            raise LoginError(f"Login failed: {error}")

        name = pages.parse_username(html)
        if name is None:
            raise LoginError("Login failed: Unknown error")

        logger.info(f"Logged in as {name}")
        return name

    def fetch_submissions(self, contest_id: str) -> List[SubmissionRow]:
        """Own submissions of a contest, newest first as listed by the judge."""
        # TODO: follow pagination, the judge lists only 20 submissions per page
        html = self.transport.get(f"/contests/{contest_id}/submissions/me")
        return pages.parse_submissions(html)

    def submission_detail(self, contest_id: str, submission_id: int) -> SubmissionDetail:
        html = self.transport.get(f"/contests/{contest_id}/submissions/{submission_id}")
        row, cases = pages.parse_submission_detail(html, submission_id)
        return SubmissionDetail(SubmissionRecord.from_row(row), cases)

    def submit(
        self, contest_id: str, problem_id: str, source: str, language: str
    ) -> Tuple[str, str]:
        """Submit `source` and return (task screen name, language name)."""
        self.check_login()

        path = f"/contests/{contest_id}/submit"
        form = pages.parse_submit_form(self.transport.get(path), problem_id, language)

        self.transport.post_form(
            path,
            {
                "data.TaskScreenName": form.task_screen_name,
                "data.LanguageId": form.language_id,
                "sourceCode": source,
                "csrf_token": form.csrf_token,
            },
        )
        logger.debug(f"Submitted {form.task_screen_name} with language id {form.language_id}")
        return form.task_screen_name, form.language_name
