from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from expense_tracker.models.expense import Category

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS: Dict[str, List[str]] = {
    "Food": ["lunch", "dinner", "breakfast", "pizza", "burger", "coffee", "restaurant", "groceries"],
    "Transport": ["uber", "ride", "taxi", "bus", "train", "fuel", "parking", "flight"],
    "Bills": ["electricity", "water", "internet", "rent", "phone", "bill", "insurance"],
    "Entertainment": ["movie", "netflix", "concert", "game", "spotify", "cinema"],
    "Shopping": ["clothes", "shoes", "amazon", "shirt", "mall", "electronics"],
}

_NON_WORD = re.compile(r"[^\w\s]")

AUTO = "auto"
MANUAL = "manual"


class KeywordClassifier:
    """
    Assigns a category to an expense title by counting keyword hits.

    The category with the most matching title tokens wins. Ties go to the
    category listed first in the keyword table; that ordering is an artifact
    of the table and callers should not depend on it. Titles with no hits
    fall back to ``Other``.
    """

    def __init__(self, keywords: Optional[Dict[str, Iterable[str]]] = None) -> None:
        table = DEFAULT_KEYWORDS if keywords is None else keywords
        self._keywords = self._validate(table)

    @classmethod
    def from_json(cls, path: Optional[str | Path]) -> "KeywordClassifier":
        if not path:
            return cls()

        keywords_file = Path(path)
        if not keywords_file.exists():
            logger.warning(f"Keyword table {keywords_file} not found, using built-in defaults")
            return cls()

        with keywords_file.open() as fp:
            return cls(json.load(fp))

    @staticmethod
    def _validate(table: Dict[str, Iterable[str]]) -> Dict[Category, frozenset]:
        validated: Dict[Category, frozenset] = {}
        for name, words in table.items():
            try:
                category = Category(name)
            except ValueError:
                raise ValueError(f"Unknown category in keyword table: {name!r}") from None
            validated[category] = frozenset(word.lower() for word in words)
        return validated

    @property
    def keywords(self) -> Dict[Category, frozenset]:
        return dict(self._keywords)

    @staticmethod
    def tokenize(title: str) -> set:
        normalized = _NON_WORD.sub("", (title or "").lower())
        return set(normalized.split())

    def classify(self, title: str) -> Category:
        tokens = self.tokenize(title)
        if not tokens:
            return Category.OTHER

        best_category = Category.OTHER
        best_score = 0
        for category, words in self._keywords.items():
            score = len(tokens & words)
            if score > best_score:
                best_category = category
                best_score = score
        return best_category

    def suggest(self, title: str, mode: str = AUTO, current: Optional[Category] = None) -> Category:
        """
        Category to pre-fill on a draft expense.

        In ``manual`` mode the user has picked a category themselves, so it is
        returned untouched and the title is not classified.
        """
        if mode == MANUAL:
            return current or Category.OTHER
        if mode != AUTO:
            raise ValueError(f"Unknown classification mode: {mode!r}")
        return self.classify(title)
