"""
Task helpers for ClipAnchor Core.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from .polling import PollOutcome, PollState, poll_until

__all__ = [
    "PollOutcome",
    "PollState",
    "poll_until",
]
