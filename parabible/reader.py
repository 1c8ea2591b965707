"""
Parallel reader facade.
Wires settings, the text API client and the session controller together and
exposes what the UI needs to paint for the current state.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from .client import TextApiClient
from .config import Settings
from .errors import ReaderError
from .layout import build_columns, join_names, select_translations
from .references import format_reference, make_reference
from .session import SessionController
from .utils.catalog import BOOK_NAMES, TRANSLATIONS, find_translation, list_translations
from .utils.types import Column, FetchRequest, Fetching, Ready, Translation


@dataclass(frozen=True)
class IdleView:
    reference_label: str
    selection_label: str
    error_text: Optional[str] = None


@dataclass(frozen=True)
class FetchingView:
    reference_label: str
    selection_label: str


@dataclass(frozen=True)
class ReadyView:
    reference_label: str
    columns: Tuple[Column, ...]


View = Union[IdleView, FetchingView, ReadyView]


class ParallelReader:
    """
    Reads one chapter side by side in several translations.
    Fetches run synchronously: the result is dispatched before fetch() returns.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[TextApiClient] = None,
        catalog: Tuple[Translation, ...] = TRANSLATIONS,
    ):
        """
        Initialize the reader.

        Args:
            settings: Runtime settings (defaults when None)
            client: Text API client; built from settings when None
            catalog: Translations available for selection
        """
        self.settings = settings or Settings()
        self.catalog = catalog
        self.client = client or TextApiClient(
            self.settings.api_url,
            reference_style=self.settings.reference_style,
            timeout=self.settings.timeout,
            log_dir=self.settings.log_dir,
        )
        selection = select_translations(catalog, self.settings.translations)
        self.controller = SessionController(selection, self.settings.reference, self._perform_fetch)

    def _perform_fetch(self, request: FetchRequest) -> None:
        print(f"Fetching {format_reference(request.reference)} "
              f"[{join_names(request.selection, attr='short_name', sep=',')}] (#{request.generation})")
        try:
            fragments = self.client.fetch(request.selection, request.reference)
        except ReaderError as e:
            self.controller.fetch_failed(e)
            return
        self.controller.fetch_succeeded(fragments)

    def fetch(self) -> View:
        """Fetch the current chapter and return the resulting view."""
        self.controller.request_fetch()
        return self.view()

    def set_book(self, book: str) -> None:
        """Switch book, keeping the chapter number."""
        self.controller.change_reference(make_reference(book, self.controller.reference.chapter))

    def set_chapter(self, chapter: int) -> None:
        self.controller.change_reference(make_reference(self.controller.reference.book, chapter))

    def set_translations(self, tokens: Iterable[str]) -> List[Translation]:
        """
        Replace the selection with translations named by name or short name.

        Raises:
            ValueError: A token matches no translation
        """
        tokens = [t for t in tokens if t.strip()]
        unknown = [t for t in tokens if find_translation(t, self.catalog) is None]
        if unknown:
            raise ValueError(f"Unknown translation(s): {', '.join(unknown)}")
        selection = select_translations(self.catalog, tokens)
        self.controller.change_selection(selection)
        return selection

    def view(self) -> View:
        """Data needed to paint the current state."""
        state = self.controller.state
        reference_label = format_reference(state.reference)
        if isinstance(state, Ready):
            return ReadyView(
                reference_label=reference_label,
                columns=tuple(build_columns(state.selection, state.fragments)),
            )
        if isinstance(state, Fetching):
            return FetchingView(reference_label, join_names(state.selection))
        error_text = str(state.error) if state.error is not None else None
        return IdleView(reference_label, join_names(state.selection), error_text)

    def list_translations(self) -> List[dict]:
        return list_translations(self.catalog)

    def list_books(self) -> List[str]:
        return list(BOOK_NAMES)


def create_reader(settings: Optional[Settings] = None) -> ParallelReader:
    """
    Factory function to create a reader.

    Args:
        settings: Runtime settings

    Returns:
        Configured ParallelReader instance
    """
    return ParallelReader(settings)
