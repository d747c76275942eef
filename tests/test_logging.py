import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from borewell.calculators.slab_cost import compute
from borewell.core.logging_config import setup_logging


def test_calculator_emits_debug_events(buffer_rates):
    with capture_logs() as logs:
        compute(305, rates=buffer_rates, buffer_limit=10)

    events = {e["event"]: e for e in logs}

    assert events["buffer_absorbed"]["log_level"] == "debug"
    assert events["buffer_absorbed"]["total_depth"] == 305
    assert events["drilling_cost_computed"]["log_level"] == "debug"
    assert events["drilling_cost_computed"]["lines"] == 1


@pytest.fixture
def json_logging():
    setup_logging(level="DEBUG", json_logs=True)
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()


def test_setup_logging_renders_json(json_logging, caplog, buffer_rates):
    caplog.set_level(logging.DEBUG)

    compute(305, rates=buffer_rates, buffer_limit=10)

    events = [
        json.loads(r.getMessage())
        for r in caplog.records
        if r.name == "borewell.calculators.slab_cost"
    ]
    names = [e["event"] for e in events]

    assert "buffer_absorbed" in names
    assert "drilling_cost_computed" in names
    absorbed = next(e for e in events if e["event"] == "buffer_absorbed")
    assert absorbed["level"] == "debug"
    assert absorbed["logger"] == "borewell.calculators.slab_cost"
    assert "timestamp" in absorbed
