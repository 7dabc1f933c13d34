"""
Minimal ODE system produced by structural simplification.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

import numpy as np
import sympy as sp


class ReducedSystem:
    """
    Explicit ODE system dx/dt = f(t, x, p) with observed variables.

    Parameters
    ----------
    name : str
        Model name
    t : sympy.Symbol
        Time symbol
    states : sequence of sympy.Symbol
        Differential states
    rhs : sequence of sympy.Expr
        Right-hand side per state, in states, parameters and time only
    observed : dict
        Eliminated algebraic variables as expressions of states, parameters
        and time
    parameters : dict
        Parameter symbols with default values
    initial : dict
        Default initial value per state
    """

    def __init__(self, name, t, states, rhs, observed, parameters, initial):
        self.name = name
        self.t = t
        self.states: List[sp.Symbol] = list(states)
        self.rhs = sp.Matrix(list(rhs))
        self.observed: Dict[sp.Symbol, sp.Expr] = dict(observed)
        self.parameters: Dict[sp.Symbol, float] = dict(parameters)
        self.initial: Dict[sp.Symbol, float] = dict(initial)

        self._p = list(self.parameters)
        self.jac = self.rhs.jacobian(sp.Matrix(self.states))

        args = (self.t, self.states, self._p)
        self._f = sp.lambdify(args, list(self.rhs), modules="numpy", cse=True)
        self._jac = sp.lambdify(args, self.jac, modules="numpy", cse=True)
        self._obs = sp.lambdify(args, list(self.observed.values()), modules="numpy", cse=True)

    # ---- names

    @property
    def state_names(self) -> List[str]:
        return [s.name for s in self.states]

    @property
    def parameter_names(self) -> List[str]:
        return [s.name for s in self._p]

    @property
    def observed_names(self) -> List[str]:
        return [s.name for s in self.observed]

    def __len__(self):
        return len(self.states)

    # ---- numeric vectors

    def parameter_vector(self, overrides: Optional[Mapping[str, float]] = None) -> np.ndarray:
        """Parameter defaults with ``overrides`` (by name) applied."""
        values = {s.name: v for s, v in self.parameters.items()}
        for key, val in (overrides or {}).items():
            if key not in values:
                raise KeyError(f"Unknown parameter: {key}")
            values[key] = float(val)
        return np.array([values[s.name] for s in self._p], dtype=float)

    def initial_state(self, overrides: Optional[Mapping[str, float]] = None) -> np.ndarray:
        """Default initial state with ``overrides`` (by state name) applied."""
        values = {s.name: v for s, v in self.initial.items()}
        for key, val in (overrides or {}).items():
            if key not in values:
                raise KeyError(f"Unknown state: {key}")
            values[key] = float(val)
        return np.array([values[s.name] for s in self.states], dtype=float)

    # ---- evaluation

    def __call__(self, t: float, y: np.ndarray, p: np.ndarray) -> np.ndarray:
        return np.asarray(self._f(t, y, p), dtype=float)

    def jacobian(self, t: float, y: np.ndarray, p: np.ndarray) -> np.ndarray:
        return np.asarray(self._jac(t, y, p), dtype=float)

    def observe(self, t, Y, p) -> Dict[str, np.ndarray]:
        """
        Evaluate the observed variables along a trajectory.

        Parameters
        ----------
        t : array, shape (n_times,)
        Y : array, shape (n_states, n_times)
        p : array, shape (n_parameters,)
        """
        t = np.asarray(t, dtype=float)
        values = self._obs(t, np.asarray(Y, dtype=float), p)
        return {
            s.name: np.broadcast_to(np.asarray(v, dtype=float), t.shape).copy()
            for s, v in zip(self.observed, values)
        }

    def __str__(self):
        lines = [f"{self.name}: {len(self.states)} states, {len(self.observed)} observed"]
        lines += [f"  d({x})/dt = {f}" for x, f in zip(self.states, self.rhs)]
        return "\n".join(lines)
