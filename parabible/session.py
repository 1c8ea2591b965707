"""
Session controller for the parallel reader.
Tracks the current selection and reference and the fetch lifecycle.
"""

import threading
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional, Sequence, Tuple, Union

from .utils.types import (
    AppSession,
    FetchRequest,
    Fetching,
    Idle,
    Ready,
    Reference,
    TextFragment,
    Translation,
)


@dataclass(frozen=True)
class RequestFetch:
    pass


@dataclass(frozen=True)
class FetchSucceeded:
    fragments: Tuple[TextFragment, ...]


@dataclass(frozen=True)
class FetchFailed:
    error: Exception


@dataclass(frozen=True)
class ChangeSelection:
    selection: Tuple[Translation, ...]


@dataclass(frozen=True)
class ChangeReference:
    reference: Reference


Event = Union[RequestFetch, FetchSucceeded, FetchFailed, ChangeSelection, ChangeReference]

FetchIssuer = Callable[[FetchRequest], None]


class SessionController:
    """
    Finite-state coordinator: Idle -> Fetching -> Ready / Idle(error).

    Fetches are never cancelled. Results are applied in arrival order
    without checking which request they answer, so a late response for an
    older reference overwrites newer state (last write wins). Request
    generations are only informational.
    """

    def __init__(
        self,
        selection: Sequence[Translation],
        reference: Reference,
        issue_fetch: FetchIssuer,
    ):
        """
        Initialize the controller in Idle.

        Args:
            selection: Initial translations, catalog order
            reference: Initial book and chapter
            issue_fetch: Called once per fetch; must eventually dispatch
                FetchSucceeded or FetchFailed back into the controller
        """
        self._state: AppSession = Idle(selection=tuple(selection), reference=reference)
        self._issue_fetch = issue_fetch
        self._generation = 0
        # Reentrant so a synchronous issuer can dispatch its result inline.
        self._lock = threading.RLock()
        self.last_request: Optional[FetchRequest] = None

    @property
    def state(self) -> AppSession:
        return self._state

    @property
    def selection(self) -> Tuple[Translation, ...]:
        return self._state.selection

    @property
    def reference(self) -> Reference:
        return self._state.reference

    def dispatch(self, event: Event) -> AppSession:
        """Apply one event and return the resulting state."""
        with self._lock:
            if isinstance(event, RequestFetch):
                self._start_fetch(self._state.selection, self._state.reference)
            elif isinstance(event, FetchSucceeded):
                self._state = Ready(
                    selection=self._state.selection,
                    reference=self._state.reference,
                    fragments=tuple(event.fragments),
                )
            elif isinstance(event, FetchFailed):
                self._state = Idle(
                    selection=self._state.selection,
                    reference=self._state.reference,
                    error=event.error,
                )
            elif isinstance(event, ChangeSelection):
                self._change(selection=tuple(event.selection))
            elif isinstance(event, ChangeReference):
                self._change(reference=event.reference)
            else:
                raise TypeError(f"Unknown event: {event!r}")
            return self._state

    def _change(self, **changes) -> None:
        if isinstance(self._state, Fetching):
            updated = replace(self._state, **changes)
            self._start_fetch(updated.selection, updated.reference)
        else:
            # Ready keeps its now stale fragments until the next fetch lands.
            self._state = replace(self._state, **changes)

    def _start_fetch(self, selection: Tuple[Translation, ...], reference: Reference) -> None:
        self._generation += 1
        request = FetchRequest(selection=selection, reference=reference, generation=self._generation)
        self._state = Fetching(selection=selection, reference=reference)
        self.last_request = request
        self._issue_fetch(request)

    # Convenience wrappers used by the reader and the CLI
    def request_fetch(self) -> AppSession:
        return self.dispatch(RequestFetch())

    def change_selection(self, selection: Iterable[Translation]) -> AppSession:
        return self.dispatch(ChangeSelection(tuple(selection)))

    def change_reference(self, reference: Reference) -> AppSession:
        return self.dispatch(ChangeReference(reference))

    def fetch_succeeded(self, fragments: Iterable[TextFragment]) -> AppSession:
        return self.dispatch(FetchSucceeded(tuple(fragments)))

    def fetch_failed(self, error: Exception) -> AppSession:
        return self.dispatch(FetchFailed(error))
