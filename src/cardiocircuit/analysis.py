"""
Hemodynamic indices from simulated traces.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd
from scipy.integrate import trapezoid

from .constants import ML_TO_M3, MMHG_TO_PA


def last_beat_mask(t: np.ndarray, period: float) -> np.ndarray:
    """Samples of the final cardiac cycle."""
    t = np.asarray(t)
    return t >= (t[-1] - period - 1e-9)


def _mean(t: np.ndarray, x: np.ndarray) -> float:
    span = t[-1] - t[0]
    if span <= 0:
        return float(np.mean(x))
    return float(trapezoid(x, t) / span)


def hemodynamics(
    df: pd.DataFrame,
    period: float,
    chamber: str = "LV",
    artery: str = "SA",
    vein: str = "SV",
    outflow_valve: str = "AV",
    inflow_valve: str = "MV",
) -> Dict[str, float]:
    """
    Clinical indices over the last simulated beat.

    Returns
    -------
    dict
        EDV, ESV, SV (mL), EF (-), CO (L/min), arterial SBP, DBP, MAP,
        mean venous pressure and peak LV pressure (mmHg), peak valve flows
        (mL/s)
    """
    t_all = df["t"].to_numpy()
    mask = last_beat_mask(t_all, period)
    t = t_all[mask]
    V = df[f"{chamber}_V"].to_numpy()[mask]
    P = df[f"{chamber}_p"].to_numpy()[mask]
    Pa = df[f"{artery}_p"].to_numpy()[mask]
    Pv = df[f"{vein}_p"].to_numpy()[mask]

    edv = float(V.max())
    esv = float(V.min())
    sv = edv - esv
    return {
        "EDV_mL": edv,
        "ESV_mL": esv,
        "SV_mL": sv,
        "EF": sv / edv if edv > 0 else float("nan"),
        "CO_L_min": sv * 60.0 / period / 1000.0,
        "SBP_mmHg": float(Pa.max()),
        "DBP_mmHg": float(Pa.min()),
        "MAP_mmHg": _mean(t, Pa),
        "MVP_mmHg": _mean(t, Pv),
        "LVSP_mmHg": float(P.max()),
        "peak_outflow_mL_s": float(df[f"{outflow_valve}_q"].to_numpy()[mask].max()),
        "peak_inflow_mL_s": float(df[f"{inflow_valve}_q"].to_numpy()[mask].max()),
    }


def total_volume(df: pd.DataFrame, compartments: Optional[Iterable[str]] = None) -> np.ndarray:
    """Sum of stored volumes; constant over time in a closed loop."""
    if compartments is None:
        columns = [c for c in df.columns if c.endswith("_V")]
    else:
        columns = [f"{c}_V" for c in compartments]
    return df[columns].sum(axis=1).to_numpy()


def to_si(df: pd.DataFrame) -> pd.DataFrame:
    """Copy of ``df`` with pressures in Pa, volumes in m³, flows in m³/s."""
    out = df.copy()
    for col in out.columns:
        if col.endswith("_p") or col.endswith("_dp"):
            out[col] = out[col] * MMHG_TO_PA
        elif col.endswith("_V") or col.endswith("_q"):
            out[col] = out[col] * ML_TO_M3
        elif col.endswith("_E"):
            out[col] = out[col] * MMHG_TO_PA / ML_TO_M3
    return out
