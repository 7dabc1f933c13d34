"""
Configuration management for circulation simulations.

This module provides configuration classes and utilities for managing
model and solver parameters, loaded from and saved to YAML files.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Union, Dict, Any
import yaml

from .constants import (
    DEFAULT_CHAMBER, DEFAULT_VALVES, DEFAULT_SYSTEMIC, DEFAULT_SIMULATION
)


@dataclass
class ChamberConfig:
    """Ventricular elastance parameters."""
    Emin: float = DEFAULT_CHAMBER["Emin"]          # mmHg/mL
    Emax: float = DEFAULT_CHAMBER["Emax"]          # mmHg/mL
    V0: float = DEFAULT_CHAMBER["V0"]              # mL
    p0: float = DEFAULT_CHAMBER["p0"]              # mmHg
    tau_es: float = DEFAULT_CHAMBER["tau_es"]      # s
    tau_ed: float = DEFAULT_CHAMBER["tau_ed"]      # s
    shift: float = DEFAULT_CHAMBER["shift"]
    V_init: float = DEFAULT_CHAMBER["V_init"]      # mL
    activation: str = "shi"

    def parameters(self) -> Dict[str, float]:
        """Keyword arguments for the chamber, without the activation kind."""
        d = asdict(self)
        d.pop("activation")
        return d


@dataclass
class ValveConfig:
    """Valve resistances (mmHg·s/mL)."""
    R_mv: float = DEFAULT_VALVES["R_mv"]
    R_av: float = DEFAULT_VALVES["R_av"]

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class SystemicConfig:
    """Systemic circulation parameters."""
    C_sa: float = DEFAULT_SYSTEMIC["C_sa"]      # mL/mmHg
    R_s: float = DEFAULT_SYSTEMIC["R_s"]        # mmHg·s/mL
    C_sv: float = DEFAULT_SYSTEMIC["C_sv"]      # mL/mmHg
    p_sa0: float = DEFAULT_SYSTEMIC["p_sa0"]    # mmHg
    p_sv0: float = DEFAULT_SYSTEMIC["p_sv0"]    # mmHg

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class SimulationConfig:
    """Time span and solver settings."""
    tau: float = DEFAULT_SIMULATION["tau"]
    cycles: int = DEFAULT_SIMULATION["cycles"]
    method: str = DEFAULT_SIMULATION["method"]
    rtol: float = DEFAULT_SIMULATION["rtol"]
    atol: float = DEFAULT_SIMULATION["atol"]
    max_step: float = DEFAULT_SIMULATION["max_step"]
    samples_per_beat: int = DEFAULT_SIMULATION["samples_per_beat"]

    @property
    def hr_bpm(self) -> float:
        return 60.0 / self.tau


@dataclass
class OutputConfig:
    """What to write after a run."""
    output_dir: str = "outputs"
    make_plots: bool = True
    si_units: bool = False


@dataclass
class Config:
    """Complete simulation configuration."""
    chamber: ChamberConfig = field(default_factory=ChamberConfig)
    valves: ValveConfig = field(default_factory=ValveConfig)
    systemic: SystemicConfig = field(default_factory=SystemicConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """
        Create configuration from dictionary.

        Parameters
        ----------
        config_dict : dict
            Configuration dictionary, one sub-dictionary per section

        Returns
        -------
        Config
            Configuration object
        """
        config_dict = config_dict or {}
        return cls(
            chamber=ChamberConfig(**(config_dict.get("chamber") or {})),
            valves=ValveConfig(**(config_dict.get("valves") or {})),
            systemic=SystemicConfig(**(config_dict.get("systemic") or {})),
            simulation=SimulationConfig(**(config_dict.get("simulation") or {})),
            output=OutputConfig(**(config_dict.get("output") or {})),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "Config":
        """
        Load configuration from YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to YAML configuration file

        Returns
        -------
        Config
            Configuration object
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "chamber": asdict(self.chamber),
            "valves": asdict(self.valves),
            "systemic": asdict(self.systemic),
            "simulation": asdict(self.simulation),
            "output": asdict(self.output),
        }

    def save(self, yaml_path: Union[str, Path]):
        """
        Save configuration to YAML file.

        Parameters
        ----------
        yaml_path : str or Path
            Path to save YAML configuration file
        """
        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of warnings.

        Returns
        -------
        list of str
            List of validation messages
        """
        warnings = []

        # Timing
        if self.simulation.tau <= 0:
            warnings.append("Cycle length must be positive")
        if self.simulation.cycles <= 0:
            warnings.append("Number of cycles must be positive")
        if self.simulation.samples_per_beat <= 0:
            warnings.append("Samples per beat must be positive")
        if self.simulation.max_step <= 0:
            warnings.append("Maximum step must be positive")

        # Chamber
        if self.chamber.activation not in ("shi", "double_hill"):
            warnings.append(f"Unknown activation: {self.chamber.activation}")
        if self.chamber.Emax <= self.chamber.Emin:
            warnings.append("Emax should be greater than Emin")
        if self.chamber.tau_ed <= self.chamber.tau_es:
            warnings.append("Relaxation must end after contraction (tau_ed > tau_es)")
        if self.chamber.tau_ed > self.simulation.tau:
            warnings.append("Relaxation must end within the cycle (tau_ed <= tau)")

        # Circuit elements
        for label, value in (
            ("Mitral valve resistance", self.valves.R_mv),
            ("Aortic valve resistance", self.valves.R_av),
            ("Arterial compliance", self.systemic.C_sa),
            ("Systemic resistance", self.systemic.R_s),
            ("Venous compliance", self.systemic.C_sv),
        ):
            if value <= 0:
                warnings.append(f"{label} must be positive")

        return warnings
