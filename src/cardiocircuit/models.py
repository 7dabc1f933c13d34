"""
Prebuilt circulation circuits.
"""

from __future__ import annotations

from typing import Dict, Optional

from .components import Compliance, ElastanceChamber, Resistor, ResistorDiode
from .constants import DEFAULT_CHAMBER, DEFAULT_SIMULATION, DEFAULT_SYSTEMIC, DEFAULT_VALVES
from .network import Circuit


def _merged(defaults: Dict, given: Optional[Dict], label: str) -> Dict:
    given = dict(given or {})
    unknown = set(given) - set(defaults)
    if unknown:
        raise ValueError(f"Unknown {label} parameters: {sorted(unknown)}")
    return {**defaults, **given}


def single_chamber_model(
    tau: float = DEFAULT_SIMULATION["tau"],
    chamber: Optional[Dict] = None,
    valves: Optional[Dict] = None,
    systemic: Optional[Dict] = None,
    activation: str = "shi",
    name: str = "single_chamber",
) -> Circuit:
    """
    Closed loop of one ventricle and the systemic circulation.

    LV -> AV -> SA -> Rs -> SV -> MV -> LV

    Parameters
    ----------
    tau : float
        Cardiac cycle length (s)
    chamber, valves, systemic : dict, optional
        Overrides of :data:`DEFAULT_CHAMBER`, :data:`DEFAULT_VALVES` and
        :data:`DEFAULT_SYSTEMIC`
    activation : str
        Ventricular activation curve, ``"shi"`` or ``"double_hill"``

    Returns
    -------
    Circuit
        Unreduced circuit; call :meth:`Circuit.structural_simplify` on it
    """
    ch = _merged(DEFAULT_CHAMBER, chamber, "chamber")
    va = _merged(DEFAULT_VALVES, valves, "valve")
    sy = _merged(DEFAULT_SYSTEMIC, systemic, "systemic")

    LV = ElastanceChamber("LV", tau=tau, activation=activation, **ch)
    AV = ResistorDiode("AV", R=va["R_av"])
    SA = Compliance("SA", C=sy["C_sa"], p_init=sy["p_sa0"])
    Rs = Resistor("Rs", R=sy["R_s"])
    SV = Compliance("SV", C=sy["C_sv"], p_init=sy["p_sv0"])
    MV = ResistorDiode("MV", R=va["R_mv"])

    circuit = Circuit(name).add(LV, AV, SA, Rs, SV, MV)
    circuit.connect(LV.out, AV.in_)
    circuit.connect(AV.out, SA.in_)
    circuit.connect(SA.out, Rs.in_)
    circuit.connect(Rs.out, SV.in_)
    circuit.connect(SV.out, MV.in_)
    circuit.connect(MV.out, LV.in_)
    return circuit


def build_from_config(config) -> Circuit:
    """Single-chamber circuit from a :class:`cardiocircuit.config.Config`."""
    return single_chamber_model(
        tau=config.simulation.tau,
        chamber=config.chamber.parameters(),
        valves=config.valves.to_dict(),
        systemic=config.systemic.to_dict(),
        activation=config.chamber.activation,
    )
