"""Shared fixtures: dataset writers and scenario parameters."""
from pathlib import Path

import pytest

from spreader_detector.config import DetectorParams


SCENARIO_PEOPLE = "Alice 1 30\nBob 2 25\nCarol 3 40\n"
SCENARIO_MEETINGS = "1\n1 2 1.0 60.0\n2 3 2.0 30.0\n"


@pytest.fixture
def write_file(tmp_path):
    """Write text into tmp_path/<name> and return the path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')
        return path
    return _write


@pytest.fixture
def params():
    """Reference values used by the three-person chain scenario."""
    return DetectorParams(
        reference_distance=2.0,
        reference_time=15.0,
        hospitalization_threshold=0.3,
        quarantine_threshold=0.1,
    )


@pytest.fixture
def scenario_files(write_file):
    return write_file("people.in", SCENARIO_PEOPLE), write_file("meetings.in", SCENARIO_MEETINGS)
