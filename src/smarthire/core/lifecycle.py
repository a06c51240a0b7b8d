"""Candidate status pipeline.

Transitions are deliberately permissive: any status can be assigned from any
other. The named actions below mirror what a recruiter can click (advance one
step, reject, restore a rejected candidate) but none of them refuse a move.
"""

from __future__ import annotations

from typing import get_args

from ..schemas import Candidate, CandidatePatch, CandidateStatus, OfferResult

STATUSES: tuple[CandidateStatus, ...] = get_args(CandidateStatus)
INITIAL_STATUS: CandidateStatus = "new"
REJECTED: CandidateStatus = "rejected"

FORWARD_ORDER: tuple[CandidateStatus, ...] = ("new", "screened", "interviewing", "offer")


def validate_status(status: str) -> CandidateStatus:
    if status not in STATUSES:
        raise ValueError(f"Unknown candidate status {status!r}; expected one of {', '.join(STATUSES)}")
    return status  # type: ignore[return-value]


def initial_status(explicit: str | None = None) -> CandidateStatus:
    """Status for a freshly created candidate."""
    if explicit is None:
        return INITIAL_STATUS
    return validate_status(explicit)


def next_status(status: CandidateStatus) -> CandidateStatus | None:
    """Following forward step, or None at ``offer`` and ``rejected``."""
    if status not in FORWARD_ORDER:
        return None
    index = FORWARD_ORDER.index(status)
    if index + 1 >= len(FORWARD_ORDER):
        return None
    return FORWARD_ORDER[index + 1]


def is_active(status: CandidateStatus) -> bool:
    return status != REJECTED


def transition(candidate: Candidate, status: str) -> CandidatePatch:
    return CandidatePatch(status=validate_status(status))


def advance(candidate: Candidate) -> CandidatePatch | None:
    target = next_status(candidate.status)
    if target is None:
        return None
    return CandidatePatch(status=target)


def reject(candidate: Candidate) -> CandidatePatch:
    return CandidatePatch(status=REJECTED)


def restore(candidate: Candidate) -> CandidatePatch:
    return CandidatePatch(status=INITIAL_STATUS)


def offer_patch(offer: OfferResult) -> CandidatePatch:
    """Attach an offer and move to ``offer`` in a single update."""
    return CandidatePatch(offer_data=offer, status="offer")


__all__ = [
    "FORWARD_ORDER",
    "INITIAL_STATUS",
    "STATUSES",
    "advance",
    "initial_status",
    "is_active",
    "next_status",
    "offer_patch",
    "reject",
    "restore",
    "transition",
    "validate_status",
]
