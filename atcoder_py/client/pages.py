"""Field extraction from AtCoder pages."""

from datetime import datetime
from typing import List, NamedTuple, Optional

from bs4 import BeautifulSoup

from .errors import PageParseError
from .models import CaseResult, SubmissionRow, parse_status


TIME_FORMAT = "%Y-%m-%d %H:%M:%S%z"


class SubmitForm(NamedTuple):
    task_screen_name: str
    language_id: str
    language_name: str
    csrf_token: str


def _parse_time(text: str) -> datetime:
    try:
        return datetime.strptime(text.strip(), TIME_FORMAT)
    except ValueError:
        raise PageParseError(f"Cannot parse submission time: {text!r}") from None


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise PageParseError(f"Cannot parse {what}: {text!r}") from None


def parse_csrf_token(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    token = soup.find("input", {"name": "csrf_token"})
    if token is None or not token.get("value"):
        raise PageParseError("cannot find csrf_token")
    return token["value"]


def parse_username(html: str) -> Optional[str]:
    """Name of the logged-in user from the navigation bar, if any."""
    soup = BeautifulSoup(html, "html.parser")
    link = soup.select_one('li a[href^="/users/"]')
    if link is None:
        return None
    return link["href"][len("/users/"):]


def parse_login_error(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    alert = soup.select_one("div.alert-danger")
    if alert is None:
        return None
    texts = [t.strip() for t in alert.find_all(string=True) if t.strip()]
    return texts[-1] if texts else "Unknown error"


def parse_submissions(html: str) -> List[SubmissionRow]:
    """Rows of the "My Submissions" table."""
    soup = BeautifulSoup(html, "html.parser")
    rows = []

    for tr in soup.select("table tbody tr"):
        cols = tr.find_all("td")
        if len(cols) < 7:
            raise PageParseError(f"failed to parse submission row:\n{tr}")

        score_cell = cols[4]
        if not score_cell.get("data-id"):
            raise PageParseError(f"submission row without id:\n{tr}")

        # While judging, the status cell spans the run time and memory columns
        run_time = memory = None
        if len(cols) >= 10:
            run_time = cols[7].get_text(strip=True)
            memory = cols[8].get_text(strip=True)

        rows.append(
            SubmissionRow(
                id=_parse_int(score_cell["data-id"], "submission id"),
                submitted_at=_parse_time(cols[0].get_text()),
                problem=cols[1].get_text(strip=True),
                user=cols[2].get_text(strip=True),
                language=cols[3].get_text(strip=True),
                score=_parse_int(score_cell.get_text(), "score"),
                code_length=cols[5].get_text(strip=True),
                status=cols[6].get_text(strip=True),
                run_time=run_time,
                memory=memory,
            )
        )

    return rows


def parse_submission_detail(html: str, submission_id: int):
    """Summary row and test case results of a submission page."""
    soup = BeautifulSoup(html, "html.parser")
    cells = [td.get_text(strip=True) for td in soup.select("table tr > th + td")]
    if len(cells) < 7:
        raise PageParseError(f"failed to parse submission {submission_id}")

    row = SubmissionRow(
        id=submission_id,
        submitted_at=_parse_time(cells[0]),
        problem=cells[1],
        user=cells[2],
        language=cells[3],
        score=_parse_int(cells[4], "score"),
        code_length=cells[5],
        status=cells[6],
        run_time=cells[7] if len(cells) > 8 else None,
        memory=cells[8] if len(cells) > 8 else None,
    )

    cases = []
    for tr in soup.select("table tbody tr"):
        cols = tr.find_all("td")
        # summary rows are th/td pairs
        if not cols or tr.find("th") is not None:
            continue
        if len(cols) < 4:
            raise PageParseError(
                f"failed to parse a test case row of submission {submission_id}"
            )
        cases.append(
            CaseResult(
                name=cols[0].get_text(strip=True),
                status=parse_status(cols[1].get_text(strip=True)),
                run_time=cols[2].get_text(strip=True),
                memory=cols[3].get_text(strip=True),
            )
        )

    return row, cases


def _first_word(text: str) -> str:
    words = text.split()
    return words[0].lower() if words else ""


def parse_submit_form(html: str, problem_id: str, language: str) -> SubmitForm:
    """Pick the task and language options of the submit form."""
    soup = BeautifulSoup(html, "html.parser")

    task = None
    for option in soup.select('select[name="data.TaskScreenName"] option'):
        if option.get("value") and _first_word(option.get_text()).startswith(
            problem_id.lower()
        ):
            task = option["value"]
            break
    if task is None:
        raise PageParseError(f"Problem not found: {problem_id}")

    options = soup.select(f'div[id="select-lang-{task}"] select option')
    if not options:
        options = soup.select('select[name="data.LanguageId"] option')

    chosen = None
    for option in options:
        if option.get("value") and _first_word(option.get_text()).startswith(
            language.lower()
        ):
            chosen = option
            break
    if chosen is None:
        raise PageParseError(f"{language} seems to be not available in problem {problem_id}")

    return SubmitForm(
        task_screen_name=task,
        language_id=chosen["value"],
        language_name=chosen.get_text(strip=True),
        csrf_token=parse_csrf_token(html),
    )
