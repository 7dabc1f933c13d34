"""
cardiocircuit

Lumped-parameter (0-D) circulation models built from acausal circuit
elements, reduced symbolically with sympy and integrated with scipy.

Main modules:
- components: Circuit element templates (resistor, diode, compliance, chamber)
- network: Circuit assembly and structural simplification
- ode: Numerical integration of the reduced system
- models: Prebuilt circulation circuits
- runner: Configured simulation with result logging
"""

__version__ = "0.1.0"

from .constants import MMHG_TO_PA, PA_TO_MMHG, ML_TO_M3
from .components import (
    Compliance, ElastanceChamber, Ground, Inductance, PressureSource,
    Resistor, ResistorDiode,
)
from .network import Circuit, StructuralError
from .ode import Solution, solve
from .models import single_chamber_model
from .config import Config
from .runner import CircuitSimulation

__all__ = [
    "MMHG_TO_PA", "PA_TO_MMHG", "ML_TO_M3",
    "Compliance", "ElastanceChamber", "Ground", "Inductance",
    "PressureSource", "Resistor", "ResistorDiode",
    "Circuit", "StructuralError",
    "Solution", "solve",
    "single_chamber_model",
    "Config",
    "CircuitSimulation",
]
