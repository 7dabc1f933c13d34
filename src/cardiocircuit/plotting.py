"""
Pressure, volume and flow plots.
"""

from __future__ import annotations

import os
from typing import List

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .analysis import last_beat_mask


def plot_traces(df: pd.DataFrame, path: str, title: str = "Circuit traces") -> str:
    """Pressures, volumes and valve/resistor flows over the whole run."""
    t = df["t"].to_numpy()
    fig, axes = plt.subplots(3, 1, figsize=(9, 8), sharex=True)

    for col in [c for c in df.columns if c.endswith("_p") and c.count("_") == 1]:
        axes[0].plot(t, df[col], label=col)
    axes[0].set_ylabel("Pressure [mmHg]")
    axes[0].legend(loc="upper right")

    for col in [c for c in df.columns if c.endswith("_V")]:
        axes[1].plot(t, df[col], label=col)
    axes[1].set_ylabel("Volume [mL]")
    axes[1].legend(loc="upper right")

    for col in [c for c in df.columns if c.endswith("_q") and c.count("_") == 1]:
        axes[2].plot(t, df[col], label=col)
    axes[2].set_ylabel("Flow [mL/s]")
    axes[2].set_xlabel("t [s]")
    axes[2].legend(loc="upper right")

    axes[0].set_title(title)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_pv_loop(df: pd.DataFrame, period: float, path: str, chamber: str = "LV") -> str:
    """Pressure-volume loop of the last beat."""
    mask = last_beat_mask(df["t"].to_numpy(), period)
    V = df[f"{chamber}_V"].to_numpy()[mask]
    P = df[f"{chamber}_p"].to_numpy()[mask]

    fig = plt.figure(figsize=(5.0, 5.0))
    plt.plot(V, P, "-")
    plt.xlabel(f"{chamber} Volume [mL]")
    plt.ylabel(f"{chamber} Pressure [mmHg]")
    plt.title(f"{chamber} PV loop")
    plt.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_elastance(df: pd.DataFrame, period: float, path: str, chamber: str = "LV") -> str:
    """Elastance over the last beat against the time within the beat."""
    t = df["t"].to_numpy()
    mask = last_beat_mask(t, period)
    fig = plt.figure(figsize=(6.0, 4.0))
    plt.plot(np.mod(t[mask], period), df[f"{chamber}_E"].to_numpy()[mask], ".", ms=2)
    plt.xlabel("t mod T [s]")
    plt.ylabel(f"{chamber} Elastance [mmHg/mL]")
    plt.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_all(
    df: pd.DataFrame, period: float, output_dir: str, chamber: str = "LV", title: str = "Circuit traces"
) -> List[str]:
    os.makedirs(output_dir, exist_ok=True)
    return [
        plot_traces(df, os.path.join(output_dir, "traces.png"), title=title),
        plot_pv_loop(df, period, os.path.join(output_dir, f"pv_{chamber.lower()}.png"), chamber=chamber),
        plot_elastance(df, period, os.path.join(output_dir, "elastance.png"), chamber=chamber),
    ]
