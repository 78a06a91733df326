"""Tests for the manufacturing process reference table."""

import pytest

from stackup.models import Dimension
from stackup.processes import IT_GRADES, apply_process, get_process, list_processes


class TestProcessTable:
    def test_lookup_case_insensitive(self):
        p = get_process("  grinding ")
        assert p.name == "Grinding"
        assert p.typical_tol == 0.005
        assert p.min_cpk == 1.67

    def test_unknown_process(self):
        with pytest.raises(KeyError, match="known processes"):
            get_process("Laser Sintering")

    def test_list(self):
        names = [p.name for p in list_processes()]
        assert "Sheet Metal Bending" in names
        assert len(names) == len(set(names))

    def test_it_grades_ascending(self):
        values = [g.value for g in IT_GRADES]
        assert values == sorted(values)


class TestApplyProcess:
    def test_sets_tolerance_and_cpk(self):
        d = Dimension(name="Boss", nominal=12.0, tol_plus=0.5, tol_minus=0.1, sign=-1, id="boss")
        updated = apply_process(d, "CNC Milling (Precision)")
        assert updated.tol_plus == updated.tol_minus == 0.01
        assert updated.cpk == 1.33
        assert updated.process == "CNC Milling (Precision)"
        assert updated.id == "boss"
        assert updated.sign == -1
        # input dimension untouched
        assert d.tol_plus == 0.5
        assert d.process is None
