"""Data models for AtCoder submissions and judge statuses."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import List, NamedTuple, Optional, Union

from .errors import StatusParseError


class WaitingReason(Enum):
    AWAITING_JUDGE = "WJ"
    AWAITING_REJUDGE = "WR"

    @property
    def message(self) -> str:
        if self is WaitingReason.AWAITING_JUDGE:
            return "Waiting for judge..."
        return "Waiting for rejudge..."


class Verdict(IntEnum):
    """Judge outcomes, in the order used for grouping and sorting."""

    ACCEPTED = 0
    WRONG_ANSWER = 1
    TIME_LIMIT_EXCEEDED = 2
    MEMORY_LIMIT_EXCEEDED = 3
    OUTPUT_LIMIT_EXCEEDED = 4
    RUNTIME_ERROR = 5
    COMPILE_ERROR = 6
    INTERNAL_ERROR = 7
    UNKNOWN = 8


_CODES = {
    "AC": Verdict.ACCEPTED,
    "WA": Verdict.WRONG_ANSWER,
    "TLE": Verdict.TIME_LIMIT_EXCEEDED,
    "MLE": Verdict.MEMORY_LIMIT_EXCEEDED,
    "OLE": Verdict.OUTPUT_LIMIT_EXCEEDED,
    "RE": Verdict.RUNTIME_ERROR,
    "CE": Verdict.COMPILE_ERROR,
    "IE": Verdict.INTERNAL_ERROR,
}

_SHORT_LABELS = {verdict: code for code, verdict in _CODES.items()}

_LONG_LABELS = {
    Verdict.ACCEPTED: "Accepted",
    Verdict.WRONG_ANSWER: "Wrong Answer",
    Verdict.TIME_LIMIT_EXCEEDED: "Time Limit Exceeded",
    Verdict.MEMORY_LIMIT_EXCEEDED: "Memory Limit Exceeded",
    Verdict.OUTPUT_LIMIT_EXCEEDED: "Output Limit Exceeded",
    Verdict.RUNTIME_ERROR: "Runtime Error",
    Verdict.COMPILE_ERROR: "Compile Error",
    Verdict.INTERNAL_ERROR: "Internal Error",
}


@dataclass(frozen=True, order=True)
class ResultCode:
    """A final judge outcome.

    Codes the client does not know yet are kept as Verdict.UNKNOWN with the
    raw text, and sort after every known code.
    """

    verdict: Verdict
    raw: str = ""

    @classmethod
    def from_code(cls, code: str) -> "ResultCode":
        verdict = _CODES.get(code)
        if verdict is None:
            return cls(Verdict.UNKNOWN, code)
        return cls(verdict)

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED

    @property
    def short_label(self) -> str:
        if self.verdict is Verdict.UNKNOWN:
            return f"UNK({self.raw})"
        return _SHORT_LABELS[self.verdict]

    @property
    def long_label(self) -> str:
        if self.verdict is Verdict.UNKNOWN:
            return f"Unknown ({self.raw})"
        return _LONG_LABELS[self.verdict]


@dataclass(frozen=True)
class Waiting:
    reason: WaitingReason


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int
    outcome: Optional[ResultCode] = None


@dataclass(frozen=True)
class Done:
    outcome: ResultCode


JudgingStatus = Union[Waiting, Progress, Done]


_PROGRESS_RE = re.compile(r"^(\d+)\s*/\s*(\d+)\s*(.*)$")


def parse_status(token: str) -> JudgingStatus:
    """Parse a status token such as "AC", "WJ" or "6/9 TLE"."""
    token = token.strip()
    if not token:
        raise StatusParseError(token, "empty status")

    for reason in WaitingReason:
        if token == reason.value:
            return Waiting(reason)

    match = _PROGRESS_RE.match(token)
    if match is None:
        return Done(ResultCode.from_code(token))

    completed, total = int(match.group(1)), int(match.group(2))
    if completed > total:
        raise StatusParseError(token, "completed count exceeds total")

    rest = match.group(3).strip()
    if not rest:
        return Progress(completed, total)

    # The trailing part may only be a plain result code
    if rest in (r.value for r in WaitingReason) or _PROGRESS_RE.match(rest):
        raise StatusParseError(token, "invalid progress status")
    return Progress(completed, total, ResultCode.from_code(rest))


def is_done(status: JudgingStatus) -> bool:
    return isinstance(status, Done)


def result_code(status: JudgingStatus) -> Optional[ResultCode]:
    if isinstance(status, Done):
        return status.outcome
    return None


class SubmissionRow(NamedTuple):
    """One row of the submissions page, status still as raw text."""

    id: int
    submitted_at: datetime
    problem: str
    user: str
    language: str
    score: int
    code_length: str
    status: str
    run_time: Optional[str] = None
    memory: Optional[str] = None


@dataclass
class SubmissionRecord:
    """A submission with its parsed judging status."""

    id: int
    submitted_at: datetime
    problem: str
    user: str
    language: str
    score: int
    code_length: str
    status: JudgingStatus
    run_time: Optional[str] = None
    memory: Optional[str] = None

    @classmethod
    def from_row(cls, row: SubmissionRow) -> "SubmissionRecord":
        return cls(
            id=row.id,
            submitted_at=row.submitted_at,
            problem=row.problem,
            user=row.user,
            language=row.language,
            score=row.score,
            code_length=row.code_length,
            status=parse_status(row.status),
            run_time=row.run_time,
            memory=row.memory,
        )

    @property
    def done(self) -> bool:
        return is_done(self.status)

    def update(self, other: "SubmissionRecord") -> None:
        """Take over the judge-owned fields of a newer observation."""
        self.score = other.score
        self.status = other.status
        self.run_time = other.run_time
        self.memory = other.memory


@dataclass
class CaseResult:
    """Result of a single test case."""

    name: str
    status: JudgingStatus
    run_time: Optional[str] = None
    memory: Optional[str] = None


@dataclass
class SubmissionDetail:
    """A submission together with its per-case results."""

    submission: SubmissionRecord
    cases: List[CaseResult] = field(default_factory=list)

    def breakdown(self) -> List[tuple]:
        """(ResultCode, count) pairs in result-code order."""
        counts = {}
        for case in self.cases:
            code = result_code(case.status)
            if code is not None:
                counts[code] = counts.get(code, 0) + 1
        return sorted(counts.items())
