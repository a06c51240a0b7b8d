"""Guided first-run workflow progress."""

from __future__ import annotations

INACTIVE_STEP = 0
FINAL_STEP = 5

STEP_TITLES: dict[int, str] = {
    1: "Create Job",
    2: "Screen Candidate",
    3: "Review Analysis",
    4: "Prep Interview",
    5: "All Set",
}


class OnboardingProgress:
    """Session-scoped step counter.

    Step 0 means inactive (never started, skipped or finished); steps 1-5
    walk the user through create job -> add candidate -> review -> interview
    prep. ``completed`` is the durable part and flips once step 5 is reached
    or the flow is skipped.
    """

    def __init__(self, step: int = INACTIVE_STEP, *, completed: bool = False) -> None:
        self._step = _validate_step(step)
        self._completed = completed or self._step == FINAL_STEP

    @property
    def step(self) -> int:
        return self._step

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def active(self) -> bool:
        return self._step != INACTIVE_STEP

    def set_step(self, step: int) -> None:
        self._step = _validate_step(step)
        if self._step == FINAL_STEP:
            self._completed = True

    def advance_from(self, expected: int) -> bool:
        """Move to ``expected + 1`` only when currently at ``expected``."""
        if self._step != expected or expected >= FINAL_STEP:
            return False
        self.set_step(expected + 1)
        return True

    def skip(self) -> None:
        self._step = INACTIVE_STEP
        self._completed = True

    def title(self) -> str | None:
        return STEP_TITLES.get(self._step)


def _validate_step(step: int) -> int:
    if not INACTIVE_STEP <= step <= FINAL_STEP:
        raise ValueError(f"Onboarding step must be between {INACTIVE_STEP} and {FINAL_STEP}, got {step}")
    return step
