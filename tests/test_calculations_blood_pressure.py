"""
Tests for blood pressure classification helpers
"""

import pytest

from bptracker.calculations import (
    classify_blood_pressure,
    get_classification_label,
    is_high_reading,
    mean_arterial_pressure,
)


class TestClassifyBloodPressure:
    """Test AHA-style categories"""

    @pytest.mark.parametrize("systolic,diastolic,expected", [
        (118, 76, "normal"),
        (124, 78, "elevated"),
        (128, 85, "high_stage_1"),
        (132, 78, "high_stage_1"),
        (142, 85, "high_stage_2"),
        (125, 92, "high_stage_2"),
        (185, 100, "hypertensive_crisis"),
        (150, 121, "hypertensive_crisis"),
    ])
    def test_categories(self, systolic, diastolic, expected):
        assert classify_blood_pressure(systolic, diastolic) == expected

    def test_boundaries_inclusive(self):
        """Thresholds belong to the higher category"""
        assert classify_blood_pressure(120, 70) == "elevated"
        assert classify_blood_pressure(130, 70) == "high_stage_1"
        assert classify_blood_pressure(140, 70) == "high_stage_2"
        assert classify_blood_pressure(180, 70) == "hypertensive_crisis"

    def test_labels(self):
        assert get_classification_label("high_stage_2") == "High (Stage 2)"
        assert get_classification_label("unknown") == "unknown"


class TestMeanArterialPressure:
    """Test the MAP-like composite"""

    def test_typical(self):
        assert mean_arterial_pressure(120, 81) == pytest.approx(94.0)

    def test_equal_values(self):
        assert mean_arterial_pressure(90, 90) == 90


class TestHighReading:
    """Test the >=140/90 high reading rule"""

    def test_high_systolic(self):
        assert is_high_reading(140, 80) is True

    def test_high_diastolic(self):
        assert is_high_reading(125, 90) is True

    def test_normal(self):
        assert is_high_reading(139, 89) is False
