"""
Tests for the session controller state machine.
"""

import sys
import unittest
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from parabible.errors import BadStatus
from parabible.session import (
    ChangeReference,
    ChangeSelection,
    FetchFailed,
    FetchSucceeded,
    RequestFetch,
    SessionController,
)
from parabible.utils.types import Fetching, Idle, PlainText, Ready, Reference, TextFragment, Translation


UST = Translation(name="UST", module_id=5, short_name="UST")
NET = Translation(name="NET", module_id=2, short_name="NET")
GEN1 = Reference("Genesis", 1)
EXO3 = Reference("Exodus", 3)


def _frag(module_id, rid, text):
    return TextFragment(parallel_id=rid, module_id=module_id, rid=rid, segment=PlainText(text))


class TestSessionController(unittest.TestCase):
    """Test transitions with a recording fetch issuer."""

    def setUp(self):
        self.issued = []
        self.controller = SessionController([UST, NET], GEN1, self.issued.append)

    def test_starts_idle(self):
        state = self.controller.state
        self.assertIsInstance(state, Idle)
        self.assertEqual(state.selection, (UST, NET))
        self.assertEqual(state.reference, GEN1)
        self.assertIsNone(state.error)
        self.assertEqual(self.issued, [])

    def test_request_fetch_issues_one_request(self):
        state = self.controller.dispatch(RequestFetch())
        self.assertEqual(state, Fetching((UST, NET), GEN1))
        self.assertEqual(len(self.issued), 1)
        self.assertEqual(self.issued[0].selection, (UST, NET))
        self.assertEqual(self.issued[0].reference, GEN1)
        self.assertEqual(self.issued[0].generation, 1)

    def test_fetch_succeeded(self):
        self.controller.request_fetch()
        fragments = [_frag(5, 1001, "a")]
        state = self.controller.dispatch(FetchSucceeded(tuple(fragments)))
        self.assertEqual(state, Ready((UST, NET), GEN1, tuple(fragments)))

    def test_fetch_failed_keeps_error(self):
        self.controller.request_fetch()
        error = BadStatus(503)
        state = self.controller.dispatch(FetchFailed(error))
        self.assertIsInstance(state, Idle)
        self.assertIs(state.error, error)
        self.assertEqual(state.reference, GEN1)

    def test_change_reference_while_idle_does_not_fetch(self):
        state = self.controller.dispatch(ChangeReference(EXO3))
        self.assertEqual(state, Idle((UST, NET), EXO3))
        self.assertEqual(self.issued, [])

    def test_change_selection_in_idle_keeps_error(self):
        self.controller.request_fetch()
        self.controller.fetch_failed(BadStatus(500))
        state = self.controller.dispatch(ChangeSelection((NET,)))
        self.assertIsInstance(state, Idle)
        self.assertEqual(state.selection, (NET,))
        self.assertIsNotNone(state.error)

    def test_change_selection_in_ready_keeps_stale_fragments(self):
        self.controller.request_fetch()
        fragments = (_frag(5, 1001, "a"), _frag(2, 1001, "b"))
        self.controller.fetch_succeeded(fragments)
        state = self.controller.dispatch(ChangeSelection((NET,)))
        self.assertIsInstance(state, Ready)
        self.assertEqual(state.selection, (NET,))
        self.assertEqual(state.fragments, fragments)
        self.assertEqual(len(self.issued), 1)

    def test_change_while_fetching_reissues(self):
        self.controller.request_fetch()
        state = self.controller.dispatch(ChangeReference(EXO3))
        self.assertEqual(state, Fetching((UST, NET), EXO3))
        self.assertEqual([r.reference for r in self.issued], [GEN1, EXO3])
        self.assertEqual([r.generation for r in self.issued], [1, 2])

        state = self.controller.dispatch(ChangeSelection((UST,)))
        self.assertEqual(state, Fetching((UST,), EXO3))
        self.assertEqual(self.issued[-1].selection, (UST,))
        self.assertEqual(self.controller.last_request, self.issued[-1])

    def test_request_fetch_from_ready(self):
        self.controller.request_fetch()
        self.controller.fetch_succeeded([])
        state = self.controller.request_fetch()
        self.assertIsInstance(state, Fetching)
        self.assertEqual(len(self.issued), 2)

    def test_stale_response_wins_when_it_arrives_last(self):
        """Responses are not matched to requests: the last one to arrive wins."""
        self.controller.request_fetch()
        self.controller.change_reference(EXO3)
        self.assertEqual(len(self.issued), 2)

        exodus = (_frag(5, 3001, "exodus"),)
        genesis = (_frag(5, 1001, "genesis"),)

        # Newer request answers first, then the stale Genesis response lands.
        self.controller.fetch_succeeded(exodus)
        state = self.controller.fetch_succeeded(genesis)

        self.assertIsInstance(state, Ready)
        self.assertEqual(state.reference, EXO3)
        self.assertEqual(state.fragments, genesis)

    def test_stale_failure_overwrites_ready(self):
        self.controller.request_fetch()
        self.controller.change_reference(EXO3)
        self.controller.fetch_succeeded((_frag(5, 3001, "exodus"),))
        error = BadStatus(504)
        state = self.controller.fetch_failed(error)
        self.assertEqual(state, Idle((UST, NET), EXO3, error))

    def test_unknown_event(self):
        with self.assertRaises(TypeError):
            self.controller.dispatch("fetch")


class TestSynchronousIssuer(unittest.TestCase):
    """An issuer may dispatch its result before returning."""

    def test_inline_result(self):
        holder = {}

        def issue(request):
            holder["controller"].fetch_succeeded([_frag(5, 1001, str(request.generation))])

        controller = SessionController([UST], GEN1, issue)
        holder["controller"] = controller

        state = controller.request_fetch()
        self.assertIsInstance(state, Ready)
        self.assertEqual(state.fragments[0].segment, PlainText("1"))


if __name__ == "__main__":
    unittest.main()
