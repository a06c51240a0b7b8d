from __future__ import annotations

import pytest

from smarthire.core import OnboardingProgress


def test_starts_inactive():
    progress = OnboardingProgress()

    assert progress.step == 0
    assert not progress.active
    assert not progress.completed
    assert progress.title() is None


def test_advance_only_from_expected_step():
    progress = OnboardingProgress(1)

    assert progress.advance_from(2) is False
    assert progress.step == 1
    assert progress.advance_from(1) is True
    assert progress.step == 2
    assert progress.title() == "Screen Candidate"


def test_final_step_marks_completed():
    progress = OnboardingProgress(4)

    progress.advance_from(4)

    assert progress.step == 5
    assert progress.completed
    assert progress.advance_from(5) is False


def test_skip_turns_off_and_completes():
    progress = OnboardingProgress(3)

    progress.skip()

    assert progress.step == 0
    assert progress.completed


@pytest.mark.parametrize("step", [-1, 6])
def test_out_of_range_steps_are_refused(step: int):
    with pytest.raises(ValueError):
        OnboardingProgress().set_step(step)
