import json

import matplotlib
matplotlib.use("Agg")
import pandas as pd
import pytest

from cardiocircuit.cli import main
from cardiocircuit.config import Config
from cardiocircuit.runner import CircuitSimulation


def _short_config(outdir):
    config = Config()
    config.simulation.cycles = 4
    config.simulation.samples_per_beat = 200
    config.output.output_dir = str(outdir)
    return config


def test_run_and_save(tmp_path):
    sim = CircuitSimulation(_short_config(tmp_path))
    results = sim.run(verbose=False)
    assert len(results["frame"]) == 4 * 200 + 1
    assert results["statistics"]["n_states"] == 3

    out = sim.save_results(results)
    df = pd.read_csv(out["main_csv"])
    assert {"t", "LV_V", "LV_p", "SA_p", "AV_q"} <= set(df.columns)
    pv = pd.read_csv(out["pv_lv_csv"])
    assert list(pv.columns) == ["t", "LV_p", "LV_V"]
    with open(out["metrics_json"]) as f:
        saved = json.load(f)
    assert saved["metrics"]["SV_mL"] == pytest.approx(results["metrics"]["SV_mL"])


def test_parameter_override_in_run(tmp_path):
    sim = CircuitSimulation(_short_config(tmp_path))
    base = sim.run(verbose=False)["metrics"]
    stiff = sim.run(verbose=False, params={"Rs_R": 2.0})["metrics"]
    assert stiff["MAP_mmHg"] > base["MAP_mmHg"]


def test_si_output(tmp_path):
    config = _short_config(tmp_path)
    config.output.si_units = True
    sim = CircuitSimulation(config)
    results = sim.run(verbose=False)
    df = pd.read_csv(sim.save_results(results)["main_csv"])
    # arterial pressure of order 1e4 Pa, LV volume of order 1e-4 m^3
    assert df["SA_p"].max() > 5e3
    assert df["LV_V"].max() < 1e-3


def test_plots_written(tmp_path):
    sim = CircuitSimulation(_short_config(tmp_path))
    results = sim.run(verbose=False)
    pngs = sim.plot_results(results)
    assert len(pngs) == 3
    for p in pngs:
        assert (tmp_path / p.split("/")[-1]).exists()


def test_cli_prints_outputs(tmp_path, capsys):
    out = main(["--beats", "3", "--outdir", str(tmp_path), "--no-plots", "--quiet"])
    printed = json.loads(capsys.readouterr().out)
    assert printed["main_csv"] == out["main_csv"]
    assert printed["plots"] == []
    assert (tmp_path / "simlog.csv").exists()
    assert printed["metrics"]["SV_mL"] > 0


def test_cli_reads_yaml(tmp_path, capsys):
    config = _short_config(tmp_path)
    config.simulation.cycles = 2
    config.output.make_plots = False
    path = tmp_path / "run.yaml"
    config.save(path)
    main(["--config", str(path), "--print-equations"])
    text = capsys.readouterr().out
    assert "d(LV_V)/dt" in text
    assert "Integrating 2 beats" in text


def test_trace_title_names_the_model(tmp_path, monkeypatch):
    from cardiocircuit import plotting

    sim = CircuitSimulation(_short_config(tmp_path))
    results = sim.run(verbose=False)
    closed = []
    monkeypatch.setattr(plotting.plt, "close", closed.append)
    sim.plot_results(results)
    titles = [fig.axes[0].get_title() for fig in closed]
    assert "single_chamber traces" in titles
    assert not any(t.startswith("LV circuit") for t in titles)
