"""
Main simulation runner for circulation models.

This module provides a high-level interface for building, reducing and
integrating the single-chamber circuit with automatic result logging.
"""

import json
import os
import time
from typing import Dict, List, Optional

import numpy as np

from .analysis import hemodynamics, to_si
from .config import Config
from .models import build_from_config
from .ode import solve


class CircuitSimulation:
    """
    Single-chamber circulation simulation.

    Builds the circuit from the configuration, reduces it to an ODE system
    once, and integrates it on demand.

    Parameters
    ----------
    config : Config
        Configuration object containing all model and solver parameters
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config if config is not None else Config()
        warnings = self.config.validate()
        if warnings:
            raise ValueError("Invalid configuration: " + "; ".join(warnings))
        self.T_cyc = self.config.simulation.tau
        self.T_end = self.config.simulation.cycles * self.T_cyc

        self.circuit = build_from_config(self.config)
        self.system = self.circuit.structural_simplify()

    def _time_grid(self) -> np.ndarray:
        sim = self.config.simulation
        n = sim.cycles * sim.samples_per_beat + 1
        return np.linspace(0.0, self.T_end, n)

    def run(self, verbose: bool = True, params: Optional[Dict[str, float]] = None) -> Dict:
        """
        Run the simulation.

        Parameters
        ----------
        verbose : bool
            Whether to print progress information
        params : dict, optional
            Parameter overrides by name, e.g. ``{"Rs_R": 1.3}``

        Returns
        -------
        dict
            ``frame`` (DataFrame), ``metrics`` and ``statistics``
        """
        sim = self.config.simulation
        if verbose:
            print(f"Model '{self.system.name}': {len(self.system)} states, "
                  f"{len(self.system.observed)} observed variables")
            print(f"Integrating {sim.cycles} beats (T = {self.T_cyc:.3f} s) with {sim.method}...")

        start = time.time()
        solution = solve(
            self.system,
            (0.0, self.T_end),
            params=params,
            method=sim.method,
            rtol=sim.rtol,
            atol=sim.atol,
            max_step=sim.max_step,
            t_eval=self._time_grid(),
        )
        elapsed = time.time() - start

        metrics = hemodynamics(solution.frame, self.T_cyc)
        statistics = {
            "elapsed_time_s": elapsed,
            "n_states": len(self.system),
            **solution.stats,
        }
        if verbose:
            print(f"Done in {elapsed:.2f} s ({statistics['nfev']} RHS evaluations)")
            print(f"  SV = {metrics['SV_mL']:.1f} mL, EF = {100 * metrics['EF']:.0f} %, "
                  f"BP = {metrics['SBP_mmHg']:.0f}/{metrics['DBP_mmHg']:.0f} mmHg")

        return {"frame": solution.frame, "metrics": metrics, "statistics": statistics}

    def save_results(self, results: Dict, output_dir: Optional[str] = None) -> Dict[str, str]:
        """
        Write the trajectory, the LV pressure-volume trace and the metrics.

        Returns
        -------
        dict
            Paths of the written files
        """
        output_dir = output_dir or self.config.output.output_dir
        os.makedirs(output_dir, exist_ok=True)
        frame = results["frame"]
        if self.config.output.si_units:
            frame = to_si(frame)

        main_csv = os.path.join(output_dir, "simlog.csv")
        frame.to_csv(main_csv, index=False)

        pv_lv_csv = os.path.join(output_dir, "pv_lv.csv")
        frame[["t", "LV_p", "LV_V"]].to_csv(pv_lv_csv, index=False)

        metrics_json = os.path.join(output_dir, "metrics.json")
        with open(metrics_json, "w") as f:
            json.dump({"metrics": results["metrics"],
                       "statistics": results["statistics"]}, f, indent=2)

        return {"main_csv": main_csv, "pv_lv_csv": pv_lv_csv, "metrics_json": metrics_json}

    def plot_results(self, results: Dict, output_dir: Optional[str] = None) -> List[str]:
        """Write trace, PV loop and elastance figures; returns their paths."""
        from .plotting import plot_all

        output_dir = output_dir or self.config.output.output_dir
        return plot_all(results["frame"], self.T_cyc, output_dir, title=f"{self.system.name} traces")
