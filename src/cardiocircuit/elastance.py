"""
Time-varying elastance curves.

Curves are sympy expressions of time so that their timing parameters can be
kept symbolic inside a circuit and lambdified together with the rest of the
model.
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np
import sympy as sp


def shi_activation(t, tau, tau_es, tau_ed, shift=0):
    r"""
    Double-cosine activation from Shi et al. (2006).

    Parameters
    ----------
    t : sympy.Symbol
        Time
    tau : float or sympy.Symbol
        Cardiac cycle length
    tau_es : float or sympy.Symbol
        End of the contraction phase, measured from the start of the beat
    tau_ed : float or sympy.Symbol
        End of the relaxation phase, measured from the start of the beat
    shift : float or sympy.Symbol
        Phase shift as a fraction of the cycle

    Returns
    -------
    sympy.Expr
        Activation in [0, 1]

    Notes
    -----
    With :math:`t_m = \mathrm{mod}(t - s\,\tau, \tau)`

    .. math::

        e(t) = \begin{cases}
            \tfrac12 \left(1 - \cos(\pi t_m / \tau_{es})\right) & t_m \le \tau_{es} \\
            \tfrac12 \left(1 + \cos(\pi (t_m - \tau_{es}) / (\tau_{ed} - \tau_{es}))\right)
            & \tau_{es} < t_m \le \tau_{ed} \\
            0 & \text{otherwise}
        \end{cases}
    """
    tm = sp.Mod(t - shift * tau, tau)
    return sp.Piecewise(
        ((1 - sp.cos(sp.pi * tm / tau_es)) / 2, tm <= tau_es),
        ((1 + sp.cos(sp.pi * (tm - tau_es) / (tau_ed - tau_es))) / 2, tm <= tau_ed),
        (0, True),
    )


def _double_hill_peak(t1: float, t2: float, m1: float, m2: float) -> float:
    phi = np.linspace(0.0, 1.0, 20001)
    x1 = (phi / t1) ** m1
    x2 = (phi / t2) ** m2
    return float(np.max(x1 / (1.0 + x1) / (1.0 + x2)))


def double_hill_activation(t, tau, t1=0.303, t2=0.508, m1=1.32, m2=21.9, shift=0):
    """
    Normalised double-Hill activation (Stergiopulos et al., 1996).

    ``t1`` and ``t2`` are fractions of the cycle. The shape parameters must be
    numbers: the curve is rescaled so that its peak over one beat equals one.
    """
    k = 1.0 / _double_hill_peak(float(t1), float(t2), float(m1), float(m2))
    phi = sp.Mod(t - shift * tau, tau) / tau
    x1 = (phi / t1) ** m1
    x2 = (phi / t2) ** m2
    return k * x1 / (1 + x1) / (1 + x2)


def elastance(activation, Emin, Emax):
    """E(t) = Emin + (Emax - Emin) * e(t)"""
    return Emin + (Emax - Emin) * activation


def lambdify_curve(expr, t, values: Optional[Dict] = None):
    """
    Turn a curve into a numpy function of time.

    ``values`` maps the remaining symbols (or their names) to numbers.
    """
    if values:
        subs = {}
        for key, val in values.items():
            sym = key if isinstance(key, sp.Symbol) else sp.Symbol(key)
            subs[sym] = val
        expr = expr.subs(subs)
    leftover = expr.free_symbols - {t}
    if leftover:
        names = ", ".join(sorted(str(s) for s in leftover))
        raise ValueError(f"Unassigned symbols in curve: {names}")
    f = sp.lambdify(t, expr, modules="numpy")

    def curve(tt):
        tt = np.asarray(tt, dtype=float)
        return np.broadcast_to(np.asarray(f(tt), dtype=float), tt.shape).copy()

    return curve
