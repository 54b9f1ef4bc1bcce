"""Shared fixtures for the registry tests."""

import io

import pytest
from PIL import Image

from sitrep import ReportFields


@pytest.fixture
def make_image():
    """Factory for encoded test images."""

    def _make(width=100, height=80, fmt="PNG", mode="RGB", color=(200, 30, 30)):
        if mode == "RGBA" and len(color) == 3:
            color = (*color, 128)
        buffer = io.BytesIO()
        Image.new(mode, (width, height), color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_fields():
    return ReportFields(
        report_date="16 FEB 26",
        unit_name="Alpha Company",
        day_number="3",
        operational_summary="conducted range practice and patrols.",
        security_situation="calm",
        incidents=[{"time": "1430hrs", "description": "a vehicle breakdown was resolved."}],
        action_taken="Vehicle recovered by the transport section.",
        duties=["Guard mounting", "Patrol of the perimeter"],
        force_discipline={"casualties": "", "disciplinary_cases": "One late return"},
        challenges=["Water shortage", "Late ration delivery"],
        recommendations=["Additional water bowser"],
        overall_summary="Training objectives met.",
        commander_name="J. Mwangi",
    )
