"""
Decoding of text API responses into TextFragment objects.

Most modules send verse text as a prose string. Word-level modules (the
ETCBC Hebrew text) send a JSON string holding a list of word objects:

    [{"wid": 1, "text": "בְּרֵאשִׁ֖ית", "trailer": " "}, ...]

Every fragment goes through the same ordered attempt: word list first,
then plain string. The module id never picks the decoder.
"""

import json
import re
from typing import Any, List, Optional, Union

from .errors import SchemaError, UnrecognizedTextShape
from .utils.types import JsonDict, Morpheme, PlainText, TextFragment, TextSegment, WordSequence


FAILED_PLACEHOLDER = "failed to load"

REQUIRED_INT_FIELDS = ("parallelId", "moduleId", "rid")

FAILED_STRUCTURE_RE = re.compile(r"\s*\[\s*\{")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _decode_words(value: Any) -> Optional[WordSequence]:
    """Try to read value as a (possibly JSON-encoded) list of word objects."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except (ValueError, RecursionError):
            return None
    if not isinstance(value, list):
        return None

    words: List[Morpheme] = []
    for item in value:
        if not isinstance(item, dict):
            return None
        wid = item.get("wid")
        text = item.get("text")
        trailer = item.get("trailer")
        if not _is_int(wid) or not isinstance(text, str) or not isinstance(trailer, str):
            return None
        words.append(Morpheme(wid=wid, text=text, trailer=trailer))
    return WordSequence(words=tuple(words))


def decode_segment(value: Any) -> TextSegment:
    """
    Decode the text field of a fragment.

    Args:
        value: Raw text value from the response

    Returns:
        WordSequence when value is a list of word objects, else PlainText

    Raises:
        UnrecognizedTextShape: value is neither shape
    """
    words = _decode_words(value)
    if words is not None:
        return words
    if isinstance(value, str):
        return PlainText(text=value)
    raise UnrecognizedTextShape(type(value).__name__)


def decode_fragment(raw: Any) -> TextFragment:
    """Decode one element of matchingText."""
    if not isinstance(raw, dict):
        raise SchemaError("fragment", f"expected an object, got {type(raw).__name__}")

    for name in REQUIRED_INT_FIELDS:
        if not _is_int(raw.get(name)):
            raise SchemaError(name)
    if "text" not in raw:
        raise SchemaError("text")

    return TextFragment(
        parallel_id=raw["parallelId"],
        module_id=raw["moduleId"],
        rid=raw["rid"],
        segment=decode_segment(raw["text"]),
    )


def decode_response(raw: Union[str, bytes, JsonDict]) -> List[TextFragment]:
    """
    Decode a whole text API response.

    Any failing fragment fails the whole response; no partial results.

    Args:
        raw: Parsed JSON document, or the document text

    Returns:
        Fragments in response order
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise SchemaError("matchingText", f"body is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise SchemaError("matchingText", "response root is not an object")
    items = raw.get("matchingText")
    if not isinstance(items, list):
        raise SchemaError("matchingText")

    return [decode_fragment(item) for item in items]


def encode_segment(segment: TextSegment) -> str:
    """Serialize a segment back to its wire form."""
    if isinstance(segment, WordSequence):
        return json.dumps(
            [{"wid": w.wid, "text": w.text, "trailer": w.trailer} for w in segment.words],
            ensure_ascii=False,
        )
    return segment.text


def is_failed_structure(segment: TextSegment) -> bool:
    """True for word-list payloads that fell back to plain text."""
    return isinstance(segment, PlainText) and FAILED_STRUCTURE_RE.match(segment.text) is not None
