"""
Unit conversions and default parameters for the lumped circulation model.

The circuit itself works in clinical units: mmHg, mL, mL/s and seconds.
"""

# Unit conversions
MMHG_TO_PA = 133.322368  # Convert mmHg to Pascals
PA_TO_MMHG = 1.0 / MMHG_TO_PA  # Convert Pascals to mmHg
ML_TO_M3 = 1e-6

# Left ventricle (Shi double-cosine elastance)
DEFAULT_CHAMBER = {
    "Emin": 0.03,           # Diastolic elastance (mmHg/mL)
    "Emax": 1.5,            # End-systolic elastance (mmHg/mL)
    "V0": 0.0,              # Unstressed volume (mL)
    "p0": 0.0,              # Pressure offset (mmHg)
    "tau_es": 0.3,          # End of contraction (s)
    "tau_ed": 0.45,         # End of relaxation (s)
    "shift": 0.0,           # Activation phase shift (fraction of a beat)
    "V_init": 150.0,        # Initial chamber volume (mL)
}

DEFAULT_VALVES = {
    "R_mv": 0.006,          # Mitral valve resistance (mmHg·s/mL)
    "R_av": 0.033,          # Aortic valve resistance (mmHg·s/mL)
}

DEFAULT_SYSTEMIC = {
    "C_sa": 1.13,           # Systemic arterial compliance (mL/mmHg)
    "R_s": 1.11,            # Systemic resistance (mmHg·s/mL)
    "C_sv": 11.0,           # Systemic venous compliance (mL/mmHg)
    "p_sa0": 90.0,          # Initial arterial pressure (mmHg)
    "p_sv0": 4.5,           # Initial venous pressure (mmHg)
}

DEFAULT_SIMULATION = {
    "tau": 1.0,             # Cardiac cycle length (s)
    "cycles": 10,           # Number of cardiac cycles to simulate
    "method": "LSODA",      # scipy.integrate.solve_ivp method
    "rtol": 1e-6,
    "atol": 1e-8,
    "max_step": 0.01,       # Upper bound on the solver step (s)
    "samples_per_beat": 500,
}
