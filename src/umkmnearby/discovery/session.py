# src/umkmnearby/discovery/session.py
"""
Search interaction state.

The nearby page runs a small state machine:

    Idle -> Typing -> [Enter] -> Submitted (top-N cards shown) -> [dismiss] -> Idle

Typing also drives the live list independently of submission: `results()` simply
recomputes `filter_and_sort` for the current inputs every time it is called, so any
observer mechanism (re-render, callback, polling) can sit on top of it.

The session owns no data source: listings, origin and category selection are plain
attributes set by the caller after the external fetch/geolocation has resolved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from umkmnearby.discovery.matching import normalize_query
from umkmnearby.discovery.pipeline import filter_and_sort
from umkmnearby.discovery.ranking import suggest, top_matches
from umkmnearby.domain.models import (
    ALL_CATEGORIES,
    Coordinate,
    Listing,
    RankedResult,
    SearchCriteria,
    Suggestion,
)

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    SUBMITTED = "submitted"


@dataclass
class SearchSession:
    listings: list[Listing] = field(default_factory=list)
    origin: Coordinate | None = None
    radius_km: float = 5.0
    category_selector: str = ALL_CATEGORIES
    category_names: list[str] = field(default_factory=list)
    top_n: int = 3

    text: str = ""
    state: SearchState = SearchState.IDLE
    cards: list[RankedResult] = field(default_factory=list)
    selected_id: str | None = None

    def criteria(self) -> SearchCriteria:
        return SearchCriteria(
            text=self.text,
            category_selector=self.category_selector,
            radius_km=self.radius_km,
            origin=self.origin,
        )

    def type(self, text: str) -> None:
        """Update the query; any shown cards are closed."""
        self.text = text
        self.cards = []
        self.state = SearchState.TYPING if normalize_query(text) else SearchState.IDLE

    def submit(self) -> list[RankedResult]:
        """Enter pressed: compute the top-N cards. A blank query closes the cards instead."""
        if not normalize_query(self.text):
            self.cards = []
            self.state = SearchState.IDLE
            return []
        self.cards = top_matches(self.listings, self.criteria(), self.top_n)
        self.state = SearchState.SUBMITTED
        logger.debug("Search %r submitted: %d card(s)", self.text, len(self.cards))
        return self.cards

    def dismiss(self) -> None:
        self.cards = []
        self.state = SearchState.IDLE

    def suggestions(self) -> list[Suggestion]:
        return suggest(self.listings, self.text, category_names=self.category_names)

    def pick_suggestion(self, suggestion: Suggestion) -> None:
        """Apply an autocomplete pick: a listing selects it, a category sets the selector."""
        if suggestion.kind == "listing":
            self.text = suggestion.label
            self.selected_id = suggestion.id
            self.state = SearchState.TYPING
        else:
            self.category_selector = suggestion.id
        self.cards = []
        if self.state == SearchState.SUBMITTED:
            self.state = SearchState.TYPING if normalize_query(self.text) else SearchState.IDLE

    def results(self, sort_key: str = "none") -> list[Listing]:
        """The live list for the current inputs; drops a selection that got filtered out."""
        items = filter_and_sort(self.listings, self.criteria(), sort_key)
        if self.selected_id is not None and not any(l.id == self.selected_id for l in items):
            self.selected_id = None
        return items
