"""Submission tracking."""

from .display import Indicator, LiveDisplay
from .tracker import SubmissionSource, SubmissionTracker, track_submissions

__all__ = [
    "Indicator",
    "LiveDisplay",
    "SubmissionSource",
    "SubmissionTracker",
    "track_submissions",
]
