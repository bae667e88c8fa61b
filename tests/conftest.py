import json

import pytest

from drawdown.schema import load_scenario
from tests.helpers import SAMPLE_SCENARIO


@pytest.fixture
def sample_scenario_dict() -> dict:
    return json.loads(SAMPLE_SCENARIO.read_text(encoding="utf-8"))


@pytest.fixture
def sample_scenario():
    return load_scenario(SAMPLE_SCENARIO)
