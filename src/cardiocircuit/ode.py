"""
Numerical integration of reduced circuit models.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.integrate import solve_ivp

from .system import ReducedSystem

# methods that use the symbolic Jacobian
IMPLICIT_METHODS = ("Radau", "BDF", "LSODA")


class Solution:
    """
    Integrated trajectory with the observed variables reconstructed.

    Attributes
    ----------
    t : ndarray
        Output times
    y : ndarray
        States, shape (n_states, n_times)
    frame : pandas.DataFrame
        ``t``, every state and every observed variable
    stats : dict
        Solver statistics
    """

    def __init__(self, system: ReducedSystem, result, p: np.ndarray):
        self.system = system
        self.t = result.t
        self.y = result.y
        self.parameters = dict(zip(system.parameter_names, p))
        self.stats = {
            "message": result.message,
            "nfev": int(result.nfev),
            "njev": int(result.njev),
            "nlu": int(result.nlu),
            "n_samples": int(result.t.size),
        }
        columns = {"t": self.t}
        for name, row in zip(system.state_names, self.y):
            columns[name] = row
        for name, values in system.observe(self.t, self.y, p).items():
            columns.setdefault(name, values)
        self.frame = pd.DataFrame(columns)

    def __getitem__(self, name: str) -> np.ndarray:
        return self.frame[name].to_numpy()

    def to_csv(self, path) -> str:
        self.frame.to_csv(path, index=False)
        return str(path)


def solve(
    system: ReducedSystem,
    t_span: Tuple[float, float],
    u0: Optional[Mapping[str, float]] = None,
    params: Optional[Mapping[str, float]] = None,
    method: str = "LSODA",
    rtol: float = 1e-6,
    atol: float = 1e-8,
    max_step: float = np.inf,
    t_eval: Optional[Sequence[float]] = None,
) -> Solution:
    """
    Integrate a reduced system with :func:`scipy.integrate.solve_ivp`.

    Parameters
    ----------
    system : ReducedSystem
        Model from :meth:`Circuit.structural_simplify`
    t_span : (float, float)
        Start and end time (s)
    u0 : dict, optional
        Initial state overrides by state name
    params : dict, optional
        Parameter overrides by name
    method : str
        Any ``solve_ivp`` method; implicit ones get the symbolic Jacobian
    rtol, atol : float
        Solver tolerances
    max_step : float
        Largest allowed step (s)
    t_eval : array, optional
        Output times; solver steps are returned when omitted

    Returns
    -------
    Solution

    Raises
    ------
    RuntimeError
        If the integrator does not reach the end time
    """
    y0 = system.initial_state(u0)
    p = system.parameter_vector(params)

    def fun(t, y):
        return system(t, y, p)

    kwargs: Dict = {}
    if method in IMPLICIT_METHODS:
        kwargs["jac"] = lambda t, y: system.jacobian(t, y, p)

    result = solve_ivp(
        fun,
        t_span,
        y0,
        method=method,
        t_eval=t_eval,
        rtol=rtol,
        atol=atol,
        max_step=max_step,
        **kwargs,
    )
    if not result.success:
        t_fail = result.t[-1] if result.t.size else t_span[0]
        raise RuntimeError(f"Integration failed at t={t_fail:.4g} s: {result.message}")
    return Solution(system, result, p)
