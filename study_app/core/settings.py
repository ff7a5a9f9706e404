"""Session preferences injected into quiz sessions."""

from __future__ import annotations

from dataclasses import dataclass

from study_app.constants.quiz_constants import (
    DEFAULT_AUTO_REVEAL_SINGLE_SELECT,
    DEFAULT_SHUFFLE_OPTIONS_IN_SEQUENCE,
)


@dataclass(frozen=True, slots=True)
class SessionSettings:
    """Behavior switches for a quiz session."""

    auto_reveal_single_select: bool = DEFAULT_AUTO_REVEAL_SINGLE_SELECT
    # Sequential courses keep the authored option layout unless this is set.
    shuffle_options_in_sequence: bool = DEFAULT_SHUFFLE_OPTIONS_IN_SEQUENCE
