"""
Shared fixtures for fsmguard tests.
"""

import logging
from pathlib import Path

import pytest

from fsmguard.definition import parse_definition
from fsmguard.observability import reset_metrics, set_correlation_id


PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def clean_observability():
    """Fresh counters and logging state for every test."""
    reset_metrics()
    set_correlation_id(None)
    yield
    reset_metrics()
    package_logger = logging.getLogger("fsmguard")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def examples_dir() -> Path:
    return PROJECT_ROOT / "examples"


@pytest.fixture
def lifecycle_document() -> dict:
    """Draft -> Approved -> Active -> Archived, Archived terminal."""
    return {
        "states": ["Draft", "Approved", "Active", "Archived"],
        "transitions": [
            {"from": "Draft", "to": "Approved", "action": "approve"},
            {"from": "Approved", "to": "Active", "action": "activate"},
            {"from": "Active", "to": "Archived", "action": "close"},
        ],
        "invariants": [
            {"kind": "terminal_states", "states": ["Archived"]},
        ],
    }


@pytest.fixture
def make_definition():
    """Build a definition from states, transition triples and invariants."""
    def _make(states, transitions, invariants=(), initial_state=None):
        document = {
            "states": list(states),
            "transitions": [
                {"from": source, "to": target, "action": action}
                for source, target, action in transitions
            ],
            "invariants": list(invariants),
        }
        if initial_state is not None:
            document["defaults"] = {"initialState": initial_state}
        return parse_definition(document)
    return _make
