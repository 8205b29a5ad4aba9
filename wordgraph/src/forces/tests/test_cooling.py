"""
Tests for forces/cooling.py - geometric cooling schedule.
"""

import pytest

from wordgraph.src.forces.cooling import CoolingSchedule


class TestCoolingSchedule:
    def test_strictly_decreasing(self):
        temperatures = list(CoolingSchedule())
        assert len(temperatures) == 150
        assert temperatures[0] == 100.0
        assert all(b < a for a, b in zip(temperatures, temperatures[1:]))

    def test_reaches_floor(self):
        schedule = CoolingSchedule(initial=100.0, final=0.01, iterations=150)
        assert schedule.temperature_at(150) == pytest.approx(0.01)
        assert list(schedule)[-1] * schedule.factor == pytest.approx(0.01)

    def test_temperature_at_matches_iteration(self):
        schedule = CoolingSchedule(iterations=10)
        assert list(schedule) == pytest.approx([schedule.temperature_at(i) for i in range(10)])

    @pytest.mark.parametrize(
        "kwargs",
        [{"iterations": 0}, {"final": 0.0}, {"final": 100.0}, {"initial": 0.001}],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            CoolingSchedule(**kwargs)
