import pytest

from cardiocircuit.config import Config
from cardiocircuit.runner import CircuitSimulation


def test_defaults_are_valid():
    config = Config()
    assert config.validate() == []
    assert config.simulation.hr_bpm == pytest.approx(60.0)
    assert "activation" not in config.chamber.parameters()


def test_from_dict_overrides_sections():
    config = Config.from_dict({
        "chamber": {"Emax": 2.0, "activation": "double_hill"},
        "simulation": {"cycles": 3},
    })
    assert config.chamber.Emax == 2.0
    assert config.chamber.activation == "double_hill"
    assert config.simulation.cycles == 3
    assert config.valves.R_mv == Config().valves.R_mv


def test_yaml_save_and_load(tmp_path):
    config = Config()
    config.systemic.R_s = 1.3
    config.output.make_plots = False
    path = tmp_path / "model.yaml"
    config.save(path)
    loaded = Config.from_yaml(path)
    assert loaded.to_dict() == config.to_dict()


def test_validate_reports_problems():
    config = Config.from_dict({
        "chamber": {"Emin": 2.0, "Emax": 1.0, "tau_es": 0.5, "tau_ed": 0.4},
        "valves": {"R_av": -1.0},
        "simulation": {"cycles": 0},
    })
    warnings = config.validate()
    assert any("Emax" in w for w in warnings)
    assert any("tau_ed > tau_es" in w for w in warnings)
    assert any("Aortic valve" in w for w in warnings)
    assert any("cycles" in w for w in warnings)


def test_simulation_refuses_invalid_config():
    config = Config()
    config.systemic.C_sa = 0.0
    with pytest.raises(ValueError):
        CircuitSimulation(config)


def test_empty_yaml_sections_use_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("chamber:\nvalves:\nsimulation:\n  cycles: 3\n")
    config = Config.from_yaml(path)
    assert config.chamber == Config().chamber
    assert config.valves == Config().valves
    assert config.simulation.cycles == 3
