"""Flashcard deck browsing: flip, navigate, mark and shuffle."""
import logging
import random

from study_assistant.models import CardStatus, Flashcard

logger = logging.getLogger(__name__)


class FlashcardSession:
    """Working view over the study set's flashcard deck.

    The session keeps its own list so shuffling does not reorder the study
    set, but the card objects are shared: marking a card updates its status
    in the study set as well.

    next(), prev(), mark() and shuffle() open a transition window. Until
    settle() is called every further navigation request is ignored, so a
    second key press during the card fade cannot act on the wrong card.
    """

    def __init__(self, cards: list[Flashcard], rng: random.Random = None):
        self._source = cards
        self.cards = list(cards)
        self.current_index = 0
        self.is_flipped = False
        self.transitioning = False
        self._rng = rng or random.Random()

    def sync(self, cards: list[Flashcard]) -> bool:
        """Adopt a newly generated deck. Returns True if the session was reset."""
        if cards is self._source:
            return False
        self._source = cards
        self.cards = list(cards)
        self.current_index = 0
        self.is_flipped = False
        self.transitioning = False
        return True

    @property
    def current_card(self):
        if not self.cards:
            return None
        return self.cards[self.current_index]

    def counts(self) -> dict:
        tally = {status: 0 for status in CardStatus}
        for card in self.cards:
            tally[card.status] += 1
        return tally

    def flip(self) -> bool:
        if not self.cards:
            return False
        self.is_flipped = not self.is_flipped
        return True

    def next(self) -> bool:
        return self._move(1)

    def prev(self) -> bool:
        return self._move(-1)

    def mark(self, status) -> bool:
        status = CardStatus(status)
        if status is CardStatus.NEW:
            raise ValueError("cards can only be marked known or review")
        if not self.cards or self.transitioning:
            return False
        self.cards[self.current_index].status = status
        return self._move(1)

    def shuffle(self) -> bool:
        if not self.cards or self.transitioning:
            return False
        self.transitioning = True
        self._rng.shuffle(self.cards)
        self.current_index = 0
        self.is_flipped = False
        logger.debug("Shuffled %d cards", len(self.cards))
        return True

    def settle(self) -> None:
        self.transitioning = False

    def _move(self, step: int) -> bool:
        if not self.cards or self.transitioning:
            return False
        self.transitioning = True
        self.is_flipped = False
        self.current_index = (self.current_index + step) % len(self.cards)
        return True
