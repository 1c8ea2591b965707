"""
Static catalogs: book names and the translation modules the API serves.
Built once at import and never mutated.
"""

from typing import List, Optional, Tuple

from .types import Reference, Translation


BOOK_NAMES: Tuple[str, ...] = (
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy",
    "Joshua", "Judges", "Ruth", "1 Samuel", "2 Samuel",
    "1 Kings", "2 Kings", "1 Chronicles", "2 Chronicles", "Ezra",
    "Nehemiah", "Esther", "Job", "Psalms", "Proverbs",
    "Ecclesiastes", "Song of Songs", "Isaiah", "Jeremiah", "Lamentations",
    "Ezekiel", "Daniel", "Hosea", "Joel", "Amos",
    "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk",
    "Zephaniah", "Haggai", "Zechariah", "Malachi",
    "Matthew", "Mark", "Luke", "John", "Acts",
    "Romans", "1 Corinthians", "2 Corinthians", "Galatians", "Ephesians",
    "Philippians", "Colossians", "1 Thessalonians", "2 Thessalonians", "1 Timothy",
    "2 Timothy", "Titus", "Philemon", "Hebrews", "James",
    "1 Peter", "2 Peter", "1 John", "2 John", "3 John",
    "Jude", "Revelation",
)

# Catalog order is display order. Only the ETCBC module carries
# word-level (structured) text and is written right-to-left.
TRANSLATIONS: Tuple[Translation, ...] = (
    Translation(name="BHSA (ETCBC)", module_id=7, short_name="BHSA", rtl=True),
    Translation(name="unfoldingWord Simplified Text", module_id=5, short_name="UST"),
    Translation(name="unfoldingWord Literal Text", module_id=6, short_name="ULT"),
    Translation(name="NET Bible", module_id=2, short_name="NET"),
    Translation(name="Berean Study Bible", module_id=3, short_name="BSB"),
)

DEFAULT_SELECTION: Tuple[str, ...] = ("UST", "NET")
DEFAULT_REFERENCE = Reference(book="Genesis", chapter=1)


def resolve_book(name: str) -> Optional[str]:
    """Return the canonical book name for a case-insensitive match."""
    wanted = " ".join(name.split()).lower()
    for book in BOOK_NAMES:
        if book.lower() == wanted:
            return book
    return None


def find_translation(token: str, catalog: Tuple[Translation, ...] = TRANSLATIONS) -> Optional[Translation]:
    """Look up a translation by name or short name."""
    wanted = token.strip().lower()
    for t in catalog:
        if wanted in (t.name.lower(), t.short_name.lower()):
            return t
    return None


def list_translations(catalog: Tuple[Translation, ...] = TRANSLATIONS) -> List[dict]:
    """
    List catalog entries as plain dictionaries.

    Returns:
        List of translation info dictionaries
    """
    return [
        {
            "name": t.name,
            "short_name": t.short_name,
            "module_id": t.module_id,
            "direction": "rtl" if t.rtl else "ltr",
        }
        for t in catalog
    ]
