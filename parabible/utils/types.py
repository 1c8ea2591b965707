from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

@dataclass(frozen=True)
class Translation:
    """One text source offered by the API."""
    name: str
    module_id: int
    short_name: str
    rtl: bool = False

@dataclass(frozen=True)
class Reference:
    """Book and chapter currently being read."""
    book: str
    chapter: int

@dataclass(frozen=True)
class Morpheme:
    """A single word inside a structured verse."""
    wid: int
    text: str
    trailer: str

@dataclass(frozen=True)
class PlainText:
    text: str

@dataclass(frozen=True)
class WordSequence:
    words: Tuple[Morpheme, ...] = ()

TextSegment = Union[PlainText, WordSequence]

@dataclass(frozen=True)
class TextFragment:
    """A decoded verse of one module."""
    parallel_id: int
    module_id: int
    rid: int
    segment: TextSegment

@dataclass(frozen=True)
class ColumnEntry:
    label: str
    content: str
    failed: bool = False

@dataclass(frozen=True)
class Column:
    """Rendering plan for one translation."""
    translation: Translation
    width_percent: int
    rtl: bool
    entries: Tuple[ColumnEntry, ...] = field(default_factory=tuple)

@dataclass(frozen=True)
class FetchRequest:
    """A fetch issued by the session controller."""
    selection: Tuple[Translation, ...]
    reference: Reference
    generation: int

@dataclass(frozen=True)
class Idle:
    selection: Tuple[Translation, ...]
    reference: Reference
    error: Optional[Exception] = None

@dataclass(frozen=True)
class Fetching:
    selection: Tuple[Translation, ...]
    reference: Reference

@dataclass(frozen=True)
class Ready:
    selection: Tuple[Translation, ...]
    reference: Reference
    fragments: Tuple[TextFragment, ...] = ()

AppSession = Union[Idle, Fetching, Ready]

JsonDict = Dict[str, Any]
