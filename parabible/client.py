"""
HTTP client for the parallel text API.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from .errors import BadBody, BadStatus, BadUrl, DecodeError, NetworkError, RequestTimeout
from .layout import join_names
from .normalizer import decode_response
from .references import format_reference, reference_token
from .utils.types import Reference, TextFragment, Translation


class TextApiClient:
    """Fetches one chapter in several translations with a single GET."""

    def __init__(
        self,
        api_url: str,
        reference_style: str = "plus",
        timeout: float = 30.0,
        log_dir: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            api_url: Text endpoint, e.g. https://parabible.com/api/v2/text
            reference_style: "plain" (Genesis1) or "plus" (Genesis+1)
            timeout: Request timeout in seconds
            log_dir: Directory for fetches.jsonl; logging is off when None
        """
        self.api_url = api_url
        self.reference_style = reference_style
        self.timeout = timeout
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.fetch_log_path = self.log_dir / "fetches.jsonl"
        else:
            self.fetch_log_path = None

    def _write_jsonl(self, payload: dict) -> None:
        if not self.fetch_log_path:
            return
        try:
            with self.fetch_log_path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        except OSError as e:
            print(f"Failed to write log entry: {e}")

    def build_url(self, selection: Sequence[Translation], reference: Reference) -> str:
        # Built by hand: "+" in the reference token must not be percent-encoded.
        modules = join_names(selection, attr="short_name", sep=",")
        token = reference_token(reference, self.reference_style)
        return f"{self.api_url}?modules={modules}&reference={token}"

    def fetch(self, selection: Sequence[Translation], reference: Reference) -> List[TextFragment]:
        """
        Fetch and decode the text of a chapter.

        Args:
            selection: Translations to request
            reference: Book and chapter

        Returns:
            Decoded fragments in response order

        Raises:
            TransportError: BadUrl, RequestTimeout, NetworkError, BadStatus or BadBody
        """
        url = self.build_url(selection, reference)
        self._write_jsonl({
            "time": datetime.now().isoformat(timespec="seconds"),
            "event": "request",
            "reference": format_reference(reference),
            "modules": [t.short_name for t in selection],
            "url": url,
        })

        try:
            fragments = self._get(url)
        except Exception as e:
            self._write_jsonl({
                "time": datetime.now().isoformat(timespec="seconds"),
                "event": "failed",
                "url": url,
                "error": type(e).__name__,
                "message": str(e),
            })
            raise

        self._write_jsonl({
            "time": datetime.now().isoformat(timespec="seconds"),
            "event": "loaded",
            "url": url,
            "fragments": len(fragments),
        })
        return fragments

    def _get(self, url: str) -> List[TextFragment]:
        try:
            r = requests.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except (requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema,
                requests.exceptions.InvalidURL) as e:
            raise BadUrl(url) from e
        except requests.exceptions.Timeout as e:
            raise RequestTimeout(self.timeout) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(str(e)) from e

        if not 200 <= r.status_code < 300:
            raise BadStatus(r.status_code, r.text[:500])

        try:
            return decode_response(r.text)
        except DecodeError as e:
            raise BadBody(str(e)) from e
