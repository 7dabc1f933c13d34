import numpy as np
import pytest

from cardiocircuit.analysis import hemodynamics, last_beat_mask, to_si, total_volume
from cardiocircuit.constants import ML_TO_M3, MMHG_TO_PA
from cardiocircuit.models import single_chamber_model
from cardiocircuit.ode import solve

T = 1.0


def _run(beats=10, params=None, activation="shi"):
    system = single_chamber_model(tau=T, activation=activation).structural_simplify()
    t = np.linspace(0.0, beats * T, beats * 500 + 1)
    return solve(system, (0.0, beats * T), params=params, max_step=0.01, t_eval=t)


@pytest.fixture(scope="module")
def baseline():
    return _run()


def test_reduced_to_three_volumes():
    system = single_chamber_model().structural_simplify()
    assert system.state_names == ["LV_V", "SA_V", "SV_V"]
    assert {"LV_p", "LV_E", "SA_p", "SV_p", "AV_q", "MV_q", "Rs_q"} <= set(system.observed_names)


def test_unknown_model_parameters_rejected():
    with pytest.raises(ValueError):
        single_chamber_model(valves={"R_tv": 0.01})


def test_blood_volume_conserved(baseline):
    vol = total_volume(baseline.frame)
    assert vol[0] == pytest.approx(150.0 + 1.13 * 90.0 + 11.0 * 4.5)
    assert np.ptp(vol) / vol[0] < 1e-6


def test_valves_are_one_way(baseline):
    av = baseline["AV_q"]
    mv = baseline["MV_q"]
    assert av.min() >= 0.0
    assert mv.min() >= 0.0
    assert av.max() > 0.0 and mv.max() > 0.0
    assert not np.any((av > 1e-9) & (mv > 1e-9))


def test_last_beat_in_physiological_ranges(baseline):
    m = hemodynamics(baseline.frame, T)
    assert 80 <= m["EDV_mL"] <= 250, "LV EDV out of range"
    assert 20 <= m["ESV_mL"] <= 150, "LV ESV out of range"
    assert 30 <= m["SV_mL"] <= 150, "LV stroke volume not physiological"
    assert 0.2 <= m["EF"] <= 0.9
    assert 60 <= m["SBP_mmHg"] <= 180, "Arterial systolic pressure out of range"
    assert 30 <= m["DBP_mmHg"] < m["SBP_mmHg"]
    assert m["DBP_mmHg"] < m["MAP_mmHg"] < m["SBP_mmHg"]
    assert 0 < m["MVP_mmHg"] < 20
    assert m["LVSP_mmHg"] >= m["SBP_mmHg"] - 1e-6
    assert m["CO_L_min"] == pytest.approx(m["SV_mL"] * 60.0 / 1000.0)


def test_periodic_steady_state(baseline):
    # consecutive beats settle to the same loop
    df = baseline.frame
    t = df["t"].to_numpy()
    V = df["LV_V"].to_numpy()
    last = V[last_beat_mask(t, T)]
    prev = V[(t >= t[-1] - 2 * T - 1e-9) & (t <= t[-1] - T + 1e-9)]
    assert abs(last.max() - prev.max()) < 5.0
    assert abs(last.min() - prev.min()) < 5.0


def test_contractility_raises_stroke_volume(baseline):
    strong = _run(beats=8, params={"LV_Emax": 3.0})
    assert hemodynamics(strong.frame, T)["SV_mL"] > hemodynamics(baseline.frame, T)["SV_mL"]


def test_double_hill_activation_runs():
    sol = _run(beats=4, activation="double_hill")
    vol = total_volume(sol.frame)
    assert np.ptp(vol) / vol[0] < 1e-6
    assert hemodynamics(sol.frame, T)["SV_mL"] > 10.0


def test_si_conversion(baseline):
    si = to_si(baseline.frame)
    np.testing.assert_allclose(si["SA_p"], baseline["SA_p"] * MMHG_TO_PA)
    np.testing.assert_allclose(si["LV_V"], baseline["LV_V"] * ML_TO_M3)
    np.testing.assert_allclose(si["t"], baseline["t"])
