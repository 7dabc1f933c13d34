"""
Acausal element templates for lumped circulation circuits.

Each component owns sympy symbols for its pins, internal variables and
parameters, and contributes equations in residual form (``expr == 0``) plus
the right-hand sides of its differential states. Components know nothing
about each other; :class:`cardiocircuit.network.Circuit` wires them together.

Sign convention: the flow ``q`` of a pin is positive into the component.
"""

from __future__ import annotations

from typing import Dict, List

import sympy as sp

from .elastance import double_hill_activation, elastance, shi_activation

# Independent variable shared by all components
t = sp.Symbol("t")


class Pin:
    """Connection point carrying a pressure and a flow."""

    def __init__(self, owner: str, name: str):
        self.owner = owner
        self.name = name
        self.p = sp.Symbol(f"{owner}_{name}_p")
        self.q = sp.Symbol(f"{owner}_{name}_q")

    def __repr__(self):
        return f"Pin({self.owner}.{self.name})"


class Component:
    """
    Base class for circuit elements.

    Parameters
    ----------
    name : str
        Unique component name, must be a valid Python identifier
    """

    def __init__(self, name: str):
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"Invalid component name: {name!r}")
        self.name = name
        self.pins: Dict[str, Pin] = {}
        self.states: List[sp.Symbol] = []
        self.rhs: Dict[sp.Symbol, sp.Expr] = {}
        self.unknowns: List[sp.Symbol] = []
        self.equations: List[sp.Expr] = []
        self.parameters: Dict[sp.Symbol, float] = {}
        self.initial: Dict[sp.Symbol, float] = {}

    def _pin(self, name: str) -> Pin:
        pin = Pin(self.name, name)
        self.pins[name] = pin
        self.unknowns += [pin.p, pin.q]
        return pin

    def _var(self, name: str) -> sp.Symbol:
        sym = sp.Symbol(f"{self.name}_{name}")
        self.unknowns.append(sym)
        return sym

    def _state(self, name: str, value: float) -> sp.Symbol:
        sym = sp.Symbol(f"{self.name}_{name}")
        self.states.append(sym)
        self.initial[sym] = float(value)
        return sym

    def _param(self, name: str, value: float) -> sp.Symbol:
        sym = sp.Symbol(f"{self.name}_{name}")
        self.parameters[sym] = float(value)
        return sym

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


def _positive(label: str, value: float) -> float:
    if not value > 0:
        raise ValueError(f"{label} must be positive, got {value}")
    return value


class OnePort(Component):
    """
    Two-pin element with a single through-flow.

    ``q = in.q``, ``out.q = -q`` and ``dp = in.p - out.p``.
    """

    flow_is_state = False

    def __init__(self, name: str, q_init: float = 0.0):
        super().__init__(name)
        self.in_ = self._pin("in")
        self.out = self._pin("out")
        if self.flow_is_state:
            self.q = self._state("q", q_init)
        else:
            self.q = self._var("q")
        self.dp = self._var("dp")
        self.equations += [
            self.in_.q - self.q,
            self.out.q + self.q,
            self.dp - (self.in_.p - self.out.p),
        ]


class Resistor(OnePort):
    """Linear resistance: dp = R*q."""

    def __init__(self, name: str, R: float):
        super().__init__(name)
        self.R = self._param("R", _positive("R", R))
        self.equations.append(self.dp - self.R * self.q)


class ResistorDiode(OnePort):
    """
    One-way valve: resistive forward flow, no backflow.

    q = dp / R if dp > 0 else 0
    """

    def __init__(self, name: str, R: float):
        super().__init__(name)
        self.R = self._param("R", _positive("R", R))
        forward = sp.Piecewise((self.dp / self.R, self.dp > 0), (0, True))
        self.equations.append(self.q - forward)


class Inductance(OnePort):
    """Blood inertia: L dq/dt = dp."""

    flow_is_state = True

    def __init__(self, name: str, L: float, q_init: float = 0.0):
        super().__init__(name, q_init=q_init)
        self.L = self._param("L", _positive("L", L))
        self.rhs[self.q] = self.dp / self.L


class Compliance(Component):
    """
    Elastic vessel segment storing volume.

    Both pins share the pressure ``p = (V - V_unstressed) / C`` and the stored
    volume changes with the net inflow ``dV/dt = in.q + out.q``.
    """

    def __init__(self, name: str, C: float, V_unstressed: float = 0.0, p_init: float = 0.0):
        super().__init__(name)
        C = _positive("C", C)
        self.in_ = self._pin("in")
        self.out = self._pin("out")
        self.p = self._var("p")
        self.V = self._state("V", V_unstressed + C * p_init)
        self.C = self._param("C", C)
        self.V_unstressed = self._param("V_unstressed", V_unstressed)
        self.rhs[self.V] = self.in_.q + self.out.q
        self.equations += [
            self.in_.p - self.p,
            self.out.p - self.p,
            self.p - (self.V - self.V_unstressed) / self.C,
        ]


class ElastanceChamber(Component):
    """
    Time-varying elastance pump (cardiac chamber).

    Parameters
    ----------
    name : str
        Component name
    Emin, Emax : float
        Diastolic and end-systolic elastance (mmHg/mL)
    V0 : float
        Unstressed volume (mL)
    p0 : float
        Pressure offset (mmHg)
    tau : float
        Cycle length (s)
    tau_es, tau_ed : float
        End of contraction and end of relaxation (s), Shi activation only
    shift : float
        Activation phase shift, fraction of a beat
    V_init : float
        Initial chamber volume (mL)
    activation : str
        ``"shi"`` (double cosine) or ``"double_hill"``
    """

    def __init__(
        self,
        name: str,
        Emin: float,
        Emax: float,
        V0: float = 0.0,
        p0: float = 0.0,
        tau: float = 1.0,
        tau_es: float = 0.3,
        tau_ed: float = 0.45,
        shift: float = 0.0,
        V_init: float = 100.0,
        activation: str = "shi",
    ):
        super().__init__(name)
        if Emin < 0 or Emax <= Emin:
            raise ValueError(f"Need 0 <= Emin < Emax, got Emin={Emin}, Emax={Emax}")
        _positive("tau", tau)
        self.in_ = self._pin("in")
        self.out = self._pin("out")
        self.p = self._var("p")
        self.E = self._var("E")
        self.V = self._state("V", V_init)

        self.Emin = self._param("Emin", Emin)
        self.Emax = self._param("Emax", Emax)
        self.V0 = self._param("V0", V0)
        self.p0 = self._param("p0", p0)
        self.tau = self._param("tau", tau)
        self.shift = self._param("shift", shift)

        if activation == "shi":
            if not 0 < tau_es < tau_ed <= tau:
                raise ValueError(
                    f"Need 0 < tau_es < tau_ed <= tau, got {tau_es}, {tau_ed}, {tau}"
                )
            self.tau_es = self._param("tau_es", tau_es)
            self.tau_ed = self._param("tau_ed", tau_ed)
            act = shi_activation(t, self.tau, self.tau_es, self.tau_ed, self.shift)
        elif activation == "double_hill":
            act = double_hill_activation(t, self.tau, shift=self.shift)
        else:
            raise ValueError(f"Unknown activation: {activation!r}")

        self.rhs[self.V] = self.in_.q + self.out.q
        self.equations += [
            self.in_.p - self.p,
            self.out.p - self.p,
            self.E - elastance(act, self.Emin, self.Emax),
            self.p - (self.p0 + self.E * (self.V - self.V0)),
        ]


class Ground(Component):
    """Reference node at zero pressure."""

    def __init__(self, name: str):
        super().__init__(name)
        self.g = self._pin("g")
        self.equations.append(self.g.p)


class PressureSource(Component):
    """Fixed pressure reservoir."""

    def __init__(self, name: str, P: float):
        super().__init__(name)
        self.node = self._pin("node")
        self.P = self._param("P", P)
        self.equations.append(self.node.p - self.P)
