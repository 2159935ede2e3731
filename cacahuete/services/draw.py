from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from ..logging_config import get_draw_logger
from ..settings import ParticipantRegistry
from .store import PersistedState, RecordStore


logger = get_draw_logger(__name__)


class ScreenKind(str, Enum):
    HOME = "home"
    SELECTION = "selection"
    CONFIRMATION = "confirmation"
    THANK_YOU = "thank_you"
    EXPIRED = "expired"
    RESET_DONE = "reset_done"


TERMINAL_SCREENS = frozenset({ScreenKind.THANK_YOU, ScreenKind.EXPIRED, ScreenKind.RESET_DONE})


@dataclass(frozen=True)
class Screen:
    kind: ScreenKind
    giver: Optional[str] = None
    selected: Optional[str] = None
    error: bool = False

    @classmethod
    def home(cls) -> Screen:
        return cls(ScreenKind.HOME)

    @classmethod
    def selection(cls, giver: str, error: bool = False) -> Screen:
        return cls(ScreenKind.SELECTION, giver=giver, error=error)

    @classmethod
    def confirmation(cls, giver: str, selected: str) -> Screen:
        return cls(ScreenKind.CONFIRMATION, giver=giver, selected=selected)

    @classmethod
    def thank_you(cls) -> Screen:
        return cls(ScreenKind.THANK_YOU)

    @classmethod
    def expired(cls) -> Screen:
        return cls(ScreenKind.EXPIRED)

    @classmethod
    def reset_done(cls) -> Screen:
        return cls(ScreenKind.RESET_DONE)

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_SCREENS


@dataclass(frozen=True)
class PickGiver:
    name: str


@dataclass(frozen=True)
class ChooseCandidate:
    name: str


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


Event = Union[PickGiver, ChooseCandidate, Confirm, Cancel]


def can_receive(state: PersistedState, giver: str, candidate: str, registry: ParticipantRegistry) -> bool:
    """A candidate is valid when known, not the giver, and not already taken."""
    return candidate in registry and candidate != giver and not state.is_taken(candidate)


def commit_draw(state: PersistedState, giver: str, receiver: str) -> PersistedState:
    """
    Apply one giver -> receiver pairing and return the new state.

    The count only moves for a giver seen for the first time, so a repeated
    commit for the same giver never double-counts.
    """
    already_assigned = state.is_assigned(giver)
    assignments = dict(state.assignments)
    assignments[giver] = receiver
    completed_count = state.completed_count if already_assigned else state.completed_count + 1
    return replace(
        state,
        assignments=assignments,
        taken=state.taken | {receiver},
        completed_count=completed_count,
    )


def transition(screen: Screen, event: Event, store: RecordStore, registry: ParticipantRegistry) -> Screen:
    """
    Compute the next screen for a user event.

    Only a Confirm on the Confirmation screen writes to the store. Events that
    do not apply to the current screen leave it unchanged. A giver who already
    drew is sent back Home from any screen, so a replayed page cannot redraw.
    """
    if screen.is_terminal:
        return screen

    if screen.kind in (ScreenKind.SELECTION, ScreenKind.CONFIRMATION) and store.load().is_assigned(screen.giver):
        logger.info("giver_already_drawn", giver=screen.giver)
        return Screen.home()

    if screen.kind is ScreenKind.HOME and isinstance(event, PickGiver):
        if event.name not in registry:
            return screen
        if store.load().is_assigned(event.name):
            logger.info("giver_already_drawn", giver=event.name)
            return screen
        return Screen.selection(event.name)

    if screen.kind is ScreenKind.SELECTION and isinstance(event, ChooseCandidate):
        if not can_receive(store.load(), screen.giver, event.name, registry):
            logger.info("selection_rejected", giver=screen.giver)
            return Screen.selection(screen.giver, error=True)
        return Screen.confirmation(screen.giver, event.name)

    if screen.kind is ScreenKind.CONFIRMATION and isinstance(event, Cancel):
        return Screen.selection(screen.giver)

    if screen.kind is ScreenKind.CONFIRMATION and isinstance(event, Confirm):
        state = store.load()
        if state.is_assigned(screen.giver):
            return Screen.home()
        if not can_receive(state, screen.giver, screen.selected, registry):
            logger.info("stale_confirmation", giver=screen.giver)
            return Screen.selection(screen.giver)

        new_state = commit_draw(state, screen.giver, screen.selected)
        store.save(new_state)
        logger.info("draw_committed", giver=screen.giver, completed_count=new_state.completed_count)
        return Screen.thank_you()

    return screen
