"""
Unit test fixtures. Pure core objects; no app, no real LLM.
"""
import pytest

from learning.engine import SessionEngine
from learning.payloads import Mode, parse_payload


@pytest.fixture
def make_engine(raw_by_mode, clock, rng):
    """Build a SessionEngine for a mode from the shared raw payloads."""
    def _make(mode: Mode, raw=None, **kwargs):
        payload = parse_payload(mode, raw if raw is not None else raw_by_mode[mode])
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("rng", rng)
        return SessionEngine.from_payload("Cells", payload, **kwargs)
    return _make
