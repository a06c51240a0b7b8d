from __future__ import annotations

import pytest

from smarthire.core import lifecycle
from smarthire.schemas import Candidate, OfferResult


def build_candidate(status: str = "new") -> Candidate:
    return Candidate(id="c1", job_id="j1", name="Jane", status=status, created_at="2024-05-01T09:00:00Z")


def test_forward_chain_ends_at_offer():
    assert lifecycle.next_status("new") == "screened"
    assert lifecycle.next_status("screened") == "interviewing"
    assert lifecycle.next_status("interviewing") == "offer"
    assert lifecycle.next_status("offer") is None
    assert lifecycle.next_status("rejected") is None


def test_advance_has_nothing_after_offer():
    assert lifecycle.advance(build_candidate("offer")) is None
    assert lifecycle.advance(build_candidate("new")).status == "screened"


@pytest.mark.parametrize("current", ["new", "rejected", "offer"])
def test_any_status_may_be_assigned(current: str):
    patch = lifecycle.transition(build_candidate(current), "interviewing")

    assert patch.status == "interviewing"
    assert patch.changes() == {"status": "interviewing"}


def test_unknown_status_is_refused():
    with pytest.raises(ValueError):
        lifecycle.transition(build_candidate(), "hired")
    with pytest.raises(ValueError):
        lifecycle.initial_status("archived")


def test_reject_and_restore():
    assert lifecycle.reject(build_candidate("interviewing")).status == "rejected"
    assert lifecycle.restore(build_candidate("rejected")).status == "new"
    assert not lifecycle.is_active("rejected")
    assert lifecycle.is_active("offer")


def test_initial_status_defaults_to_new():
    assert lifecycle.initial_status() == "new"
    assert lifecycle.initial_status("screened") == "screened"


def test_offer_patch_sets_offer_and_status_together():
    offer = OfferResult(offer_letter="Dear Jane", email_copy="Hi", next_steps=["Sign"])

    patch = lifecycle.offer_patch(offer)

    assert patch.changes() == {"offer_data": offer, "status": "offer"}
