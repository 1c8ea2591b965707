"""
Reference helpers: verse-key labels and API reference tokens.
"""

from urllib.parse import quote

from .utils.catalog import resolve_book
from .utils.types import Reference


REFERENCE_STYLES = ("plain", "plus")


def decode_verse_key(rid: int) -> str:
    """
    Turn a packed verse key into a "chapter:verse " label.

    The last three digits are the verse, the rest the chapter. Leading zeros
    are stripped from each group, so an all-zero verse (1000) gives "1: ".

    Args:
        rid: Packed chapter/verse integer

    Returns:
        Label with a single trailing space
    """
    digits = str(rid)
    chapter = digits[:-3].lstrip("0")
    verse = digits[-3:].lstrip("0")
    return f"{chapter}:{verse} "


def make_reference(book: str, chapter: int) -> Reference:
    """Build a Reference, rejecting unknown books and chapters below 1."""
    canonical = resolve_book(book)
    if canonical is None:
        raise ValueError(f"Unknown book: {book!r}")
    if isinstance(chapter, bool) or not isinstance(chapter, int) or chapter < 1:
        raise ValueError(f"Chapter must be a positive integer, got {chapter!r}")
    return Reference(book=canonical, chapter=chapter)


def reference_token(reference: Reference, style: str = "plus") -> str:
    """
    Build the reference query parameter for the text API.

    "plain" gives Genesis1, "plus" gives Genesis+1.
    """
    book = quote(reference.book)
    if style == "plain":
        return f"{book}{reference.chapter}"
    if style == "plus":
        return f"{book}+{reference.chapter}"
    raise ValueError(f"Unknown reference style: {style!r} (expected one of {', '.join(REFERENCE_STYLES)})")


def format_reference(reference: Reference) -> str:
    return f"{reference.book} {reference.chapter}"
