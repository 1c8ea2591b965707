"""
Column layout for side-by-side reading.

Fragments are grouped per translation in catalog order. Within a column the
API's own fragment order is kept; nothing is re-sorted by parallel id or rid.
"""

from typing import Iterable, List, Sequence

from .normalizer import FAILED_PLACEHOLDER, is_failed_structure
from .references import decode_verse_key
from .utils.types import Column, ColumnEntry, TextFragment, TextSegment, Translation, WordSequence


def column_width(count: int) -> int:
    """Width of each column in percent, leaving a one percent gutter."""
    return 100 // count - 1


def render_segment(segment: TextSegment, rtl: bool) -> str:
    """
    Render a segment as display text.

    Word sequences put each trailer before its word for right-to-left
    modules and after it otherwise.
    """
    if isinstance(segment, WordSequence):
        if rtl:
            return "".join(w.trailer + w.text for w in segment.words)
        return "".join(w.text + w.trailer for w in segment.words)
    return segment.text


def _entry(fragment: TextFragment, rtl: bool) -> ColumnEntry:
    label = decode_verse_key(fragment.rid)
    if is_failed_structure(fragment.segment):
        return ColumnEntry(label=label, content=FAILED_PLACEHOLDER, failed=True)
    return ColumnEntry(label=label, content=render_segment(fragment.segment, rtl))


def build_columns(selection: Sequence[Translation], fragments: Iterable[TextFragment]) -> List[Column]:
    """
    Build one column per selected translation.

    Args:
        selection: Translations in catalog order
        fragments: Decoded fragments in response order

    Returns:
        Columns in selection order; empty when nothing is selected
    """
    if not selection:
        return []

    fragments = list(fragments)
    width = column_width(len(selection))
    columns: List[Column] = []
    for translation in selection:
        entries = tuple(
            _entry(f, translation.rtl)
            for f in fragments
            if f.module_id == translation.module_id
        )
        columns.append(
            Column(
                translation=translation,
                width_percent=width,
                rtl=translation.rtl,
                entries=entries,
            )
        )
    return columns


def select_translations(catalog: Sequence[Translation], wanted: Iterable[str]) -> List[Translation]:
    """
    Pick translations by name or short name, keeping catalog order.

    The order of `wanted` does not matter.
    """
    tokens = {w.strip().lower() for w in wanted if w.strip()}
    return [
        t for t in catalog
        if t.name.lower() in tokens or t.short_name.lower() in tokens
    ]


def join_names(translations: Iterable[Translation], attr: str = "name", sep: str = ", ") -> str:
    return sep.join(getattr(t, attr) for t in translations)
