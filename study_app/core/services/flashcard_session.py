"""Service for flipping through one flashcard set."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from study_app.core.models import Flashcard, QuizValidationError
from study_app.core.services.quiz_session import SessionStateError


@dataclass(frozen=True, slots=True)
class FlashcardSnapshot:
    current_index: int
    total: int
    card: Flashcard
    flipped: bool

    @property
    def is_first_card(self) -> bool:
        return self.current_index == 0

    @property
    def is_last_card(self) -> bool:
        return self.current_index >= self.total - 1

    @property
    def progress(self) -> float:
        return (self.current_index + 1) / self.total

    @property
    def visible_text(self) -> str:
        return self.card.back if self.flipped else self.card.front


class FlashcardSession:
    """Cursor over a flashcard set; each card remembers whether it was flipped."""

    def __init__(self, cards: Sequence[Flashcard]) -> None:
        if not cards:
            raise QuizValidationError("Flashcard set must contain at least one card.")
        self._cards: tuple[Flashcard, ...] = tuple(cards)
        self._current_index = 0
        self._flipped: set[int] = set()

    @property
    def cards(self) -> tuple[Flashcard, ...]:
        return self._cards

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_card(self) -> Flashcard:
        return self._cards[self._current_index]

    def is_flipped(self, index: int) -> bool:
        return index in self._flipped

    def snapshot(self) -> FlashcardSnapshot:
        return FlashcardSnapshot(
            current_index=self._current_index,
            total=len(self._cards),
            card=self.current_card,
            flipped=self._current_index in self._flipped,
        )

    def flip(self) -> FlashcardSnapshot:
        self._flipped ^= {self._current_index}
        return self.snapshot()

    def next_card(self) -> FlashcardSnapshot:
        if self._current_index >= len(self._cards) - 1:
            raise SessionStateError("Already at the last card.")
        self._current_index += 1
        return self.snapshot()

    def previous_card(self) -> FlashcardSnapshot:
        if self._current_index == 0:
            raise SessionStateError("Already at the first card.")
        self._current_index -= 1
        return self.snapshot()

    def go_to_card(self, index: int) -> FlashcardSnapshot:
        if not 0 <= index < len(self._cards):
            raise IndexError(f"Card index {index} out of range")
        self._current_index = index
        return self.snapshot()

    def reset(self) -> FlashcardSnapshot:
        """Back to the first card with every card showing its front."""
        self._current_index = 0
        self._flipped.clear()
        return self.snapshot()
