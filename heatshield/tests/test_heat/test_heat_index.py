"""Tests for heat index classification, advice, and unit display."""

import pytest

from heatshield.config.schema import TemperatureUnit
from heatshield.heat.advice import HEAT_ADVICE, SAFETY_TIPS, advice_for
from heatshield.heat.index import classify_heat_index
from heatshield.heat.units import c_to_f, format_temperature
from heatshield.models.heat import HeatIndex


class TestClassifyHeatIndex:
    @pytest.mark.parametrize(
        "temp,expected",
        [
            (26, HeatIndex.SAFE),
            (27, HeatIndex.CAUTION),
            (31, HeatIndex.CAUTION),
            (32, HeatIndex.WARNING),
            (36, HeatIndex.WARNING),
            (37, HeatIndex.DANGER),
            (41, HeatIndex.DANGER),
            (42, HeatIndex.EXTREME),
        ],
    )
    def test_boundaries(self, temp: int, expected: HeatIndex):
        assert classify_heat_index(temp) == expected

    def test_extremes(self):
        assert classify_heat_index(-40) == HeatIndex.SAFE
        assert classify_heat_index(60) == HeatIndex.EXTREME

    def test_severity_monotonic(self):
        severities = [classify_heat_index(t).severity for t in range(-10, 60)]
        assert severities == sorted(severities)

    def test_labels(self):
        assert [h.label for h in HeatIndex] == [
            "Seguro", "Precaución", "Advertencia", "Peligro", "Extremo",
        ]


class TestAdvice:
    def test_every_category_has_advice(self):
        assert set(HEAT_ADVICE) == set(HeatIndex)
        for h in HeatIndex:
            assert advice_for(h).actions

    def test_extreme_advice(self):
        assert advice_for(HeatIndex.EXTREME).title

    def test_safety_tips(self):
        assert len(SAFETY_TIPS) == 8
        assert all(t.emoji and t.title and t.detail for t in SAFETY_TIPS)


class TestUnits:
    def test_conversions(self):
        assert c_to_f(100) == 212

    def test_format_celsius(self):
        assert format_temperature(34, TemperatureUnit.CELSIUS) == "34°C"

    def test_format_fahrenheit(self):
        assert format_temperature(34, TemperatureUnit.FAHRENHEIT) == "93°F"
