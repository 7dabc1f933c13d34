import pytest

from cardiocircuit.components import (
    Compliance, ElastanceChamber, Ground, Inductance, PressureSource, Resistor, ResistorDiode,
)


def test_component_names_must_be_identifiers():
    with pytest.raises(ValueError):
        Resistor("bad name", R=1.0)
    with pytest.raises(ValueError):
        Resistor("", R=1.0)


@pytest.mark.parametrize("make", [
    lambda: Resistor("R1", R=0.0),
    lambda: ResistorDiode("AV", R=-1.0),
    lambda: Inductance("L1", L=0.0),
    lambda: Compliance("Ca", C=0.0),
    lambda: ElastanceChamber("LV", Emin=1.0, Emax=0.5),
    lambda: ElastanceChamber("LV", Emin=0.03, Emax=1.5, tau_es=0.5, tau_ed=0.4),
    lambda: ElastanceChamber("LV", Emin=0.03, Emax=1.5, tau=0.4, tau_ed=0.45),
    lambda: ElastanceChamber("LV", Emin=0.03, Emax=1.5, activation="square"),
])
def test_invalid_parameters_rejected(make):
    with pytest.raises(ValueError):
        make()


def test_symbols_are_namespaced():
    R = Resistor("Rs", R=1.1)
    assert R.in_.p.name == "Rs_in_p"
    assert R.out.q.name == "Rs_out_q"
    assert R.R.name == "Rs_R"
    assert R.parameters[R.R] == 1.1


def test_oneport_equation_balance():
    # each pin is closed by one connection equation
    for comp in (Resistor("R1", R=1.0), ResistorDiode("D1", R=1.0)):
        assert len(comp.unknowns) - len(comp.equations) == len(comp.pins)
    L = Inductance("L1", L=0.1, q_init=2.0)
    assert L.states == [L.q]
    assert L.initial[L.q] == 2.0
    assert len(L.unknowns) - len(L.equations) == len(L.pins)


def test_compliance_initial_volume():
    SA = Compliance("SA", C=2.0, V_unstressed=10.0, p_init=50.0)
    assert SA.states == [SA.V]
    assert SA.initial[SA.V] == 110.0
    assert SA.V in SA.rhs


def test_chamber_parameters():
    LV = ElastanceChamber("LV", Emin=0.03, Emax=1.5, V_init=120.0)
    names = {s.name for s in LV.parameters}
    assert {"LV_Emin", "LV_Emax", "LV_tau", "LV_tau_es", "LV_tau_ed", "LV_V0"} <= names
    assert LV.initial[LV.V] == 120.0

    hill = ElastanceChamber("LV", Emin=0.03, Emax=1.5, activation="double_hill")
    assert "LV_tau_es" not in {s.name for s in hill.parameters}


def test_single_pin_components():
    g = Ground("gnd")
    src = PressureSource("Pv", P=5.0)
    assert list(g.pins) == ["g"]
    assert list(src.pins) == ["node"]
    assert src.parameters[src.P] == 5.0
