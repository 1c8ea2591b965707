"""
Tests for the text API client. requests.get is always mocked.
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from parabible.client import TextApiClient
from parabible.errors import BadBody, BadStatus, BadUrl, NetworkError, RequestTimeout, TransportError
from parabible.utils.types import PlainText, Reference, Translation, WordSequence


UST = Translation(name="UST", module_id=5, short_name="UST")
BHSA = Translation(name="BHSA", module_id=7, short_name="BHSA", rtl=True)
GEN1 = Reference("Genesis", 1)
API = "https://example.test/api/v2/text"


def _response(status=200, body=None, text=None):
    r = MagicMock()
    r.status_code = status
    r.text = text if text is not None else json.dumps(body)
    return r


class TestBuildUrl(unittest.TestCase):

    def test_plus_style(self):
        client = TextApiClient(API)
        self.assertEqual(
            client.build_url([BHSA, UST], GEN1),
            f"{API}?modules=BHSA,UST&reference=Genesis+1",
        )

    def test_plain_style(self):
        client = TextApiClient(API, reference_style="plain")
        self.assertEqual(client.build_url([UST], Reference("1 John", 4)), f"{API}?modules=UST&reference=1%20John4")


class TestFetch(unittest.TestCase):
    """Test decoding and error mapping."""

    def setUp(self):
        self.client = TextApiClient(API, timeout=5)

    @patch("parabible.client.requests.get")
    def test_success(self, mock_get):
        words = json.dumps([{"wid": 1, "text": "בְּרֵאשִׁ֖ית", "trailer": " "}], ensure_ascii=False)
        mock_get.return_value = _response(body={"matchingText": [
            {"parallelId": 1, "moduleId": 7, "rid": 1001, "text": words},
            {"parallelId": 1, "moduleId": 5, "rid": 1001, "text": "In the beginning"},
        ]})

        fragments = self.client.fetch([BHSA, UST], GEN1)

        self.assertEqual(len(fragments), 2)
        self.assertIsInstance(fragments[0].segment, WordSequence)
        self.assertEqual(fragments[1].segment, PlainText("In the beginning"))
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], f"{API}?modules=BHSA,UST&reference=Genesis+1")
        self.assertEqual(kwargs["timeout"], 5)

    @patch("parabible.client.requests.get")
    def test_bad_status(self, mock_get):
        mock_get.return_value = _response(status=404, text="not found")
        with self.assertRaises(BadStatus) as ctx:
            self.client.fetch([UST], GEN1)
        self.assertEqual(ctx.exception.status_code, 404)

    @patch("parabible.client.requests.get")
    def test_schema_failure_is_bad_body(self, mock_get):
        mock_get.return_value = _response(body={"results": []})
        with self.assertRaises(BadBody) as ctx:
            self.client.fetch([UST], GEN1)
        self.assertIn("matchingText", str(ctx.exception))

    @patch("parabible.client.requests.get")
    def test_non_json_body(self, mock_get):
        mock_get.return_value = _response(text="<html>oops</html>")
        with self.assertRaises(BadBody):
            self.client.fetch([UST], GEN1)

    @patch("parabible.client.requests.get")
    def test_transport_failures(self, mock_get):
        cases = [
            (requests.exceptions.MissingSchema("no schema"), BadUrl),
            (requests.exceptions.InvalidURL("bad"), BadUrl),
            (requests.exceptions.ConnectTimeout("slow"), RequestTimeout),
            (requests.exceptions.ReadTimeout("slow"), RequestTimeout),
            (requests.exceptions.ConnectionError("down"), NetworkError),
        ]
        for raised, expected in cases:
            mock_get.side_effect = raised
            with self.assertRaises(expected):
                self.client.fetch([UST], GEN1)

    @patch("parabible.client.requests.get")
    def test_all_failures_are_transport_errors(self, mock_get):
        mock_get.return_value = _response(status=500, text="")
        with self.assertRaises(TransportError):
            self.client.fetch([UST], GEN1)


class TestFetchLog(unittest.TestCase):
    """Test the JSONL fetch log."""

    @patch("parabible.client.requests.get")
    def test_writes_request_and_outcome(self, mock_get):
        mock_get.side_effect = [
            _response(body={"matchingText": []}),
            _response(status=502, text=""),
        ]
        with tempfile.TemporaryDirectory() as tmp:
            client = TextApiClient(API, log_dir=tmp)
            client.fetch([UST], GEN1)
            with self.assertRaises(BadStatus):
                client.fetch([UST], GEN1)

            lines = (Path(tmp) / "fetches.jsonl").read_text(encoding="utf-8").splitlines()
            records = [json.loads(line) for line in lines]

        self.assertEqual([r["event"] for r in records], ["request", "loaded", "request", "failed"])
        self.assertEqual(records[0]["reference"], "Genesis 1")
        self.assertEqual(records[0]["modules"], ["UST"])
        self.assertEqual(records[1]["fragments"], 0)
        self.assertEqual(records[3]["error"], "BadStatus")

    def test_no_log_dir(self):
        client = TextApiClient(API)
        self.assertIsNone(client.fetch_log_path)


if __name__ == "__main__":
    unittest.main()
