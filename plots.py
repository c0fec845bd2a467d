import os
from typing import Dict, Iterable
import numpy as np
import matplotlib.pyplot as plt


def plot_acceleration_response(
    gaps: Iterable[float],
    responses: Dict[str, np.ndarray],
    v: float,
    vl: float,
    output_path: str,
) -> None:
    """Plot acceleration versus gap for one or more car-following models."""
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    gaps = np.asarray(gaps, dtype=float)

    plt.figure(figsize=(7, 4))
    for label, acc in responses.items():
        plt.plot(gaps, acc, linewidth=2.0, label=label)
    plt.axhline(0.0, color="gray", linewidth=1.0)
    plt.xlabel("Gap s [m]")
    plt.ylabel("Acceleration [m/s^2]")
    plt.title(f"Acceleration response (v={v:.1f} m/s, vl={vl:.1f} m/s)")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.5)
    plt.tight_layout()
    plt.savefig(output_path, dpi=200)
    plt.close()


def plot_fundamental_diagram(diagrams: Dict[str, Dict], output_path: str) -> None:
    """Plot flow-density and speed-density relations per vehicle class."""
    os.makedirs(os.path.dirname(output_path), exist_ok=True)

    fig, (ax_flow, ax_speed) = plt.subplots(1, 2, figsize=(11, 4))
    for name, info in sorted(diagrams.items()):
        density = info["density"]
        ax_flow.plot(density, info["flow"], linewidth=2.0, label=name)
        ax_speed.plot(density, 3.6 * info["speed"], linewidth=2.0, label=name)

    ax_flow.set_xlabel("Density [veh/km]")
    ax_flow.set_ylabel("Flow [veh/h]")
    ax_flow.set_title("Flow-density relation")
    ax_speed.set_xlabel("Density [veh/km]")
    ax_speed.set_ylabel("Speed [km/h]")
    ax_speed.set_title("Speed-density relation")
    for ax in (ax_flow, ax_speed):
        ax.grid(True, linestyle="--", alpha=0.5)
        ax.legend()
    fig.tight_layout()
    fig.savefig(output_path, dpi=200)
    plt.close(fig)


def plot_lane_change_map(
    acc_gain: Iterable[float],
    acc_lag_new: Iterable[float],
    decisions: np.ndarray,
    title: str,
    output_path: str,
) -> None:
    """
    Plot a MOBIL decision map.

    Args:
        acc_gain: own acceleration advantage acc_new - acc on the x axis.
        acc_lag_new: prospective acceleration of the new follower on the y axis.
        decisions: boolean grid of shape (len(acc_lag_new), len(acc_gain)).
        title: figure title.
        output_path: target PNG file.
    """
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    acc_gain = np.asarray(acc_gain, dtype=float)
    acc_lag_new = np.asarray(acc_lag_new, dtype=float)

    plt.figure(figsize=(6, 5))
    mesh = plt.pcolormesh(acc_gain, acc_lag_new, np.asarray(decisions, dtype=float), cmap="RdYlGn", shading="auto",
                          vmin=0.0, vmax=1.0)
    plt.colorbar(mesh, label="Lane change (1 = yes)")
    plt.xlabel("Own advantage acc_new - acc [m/s^2]")
    plt.ylabel("New follower acceleration [m/s^2]")
    plt.title(title)
    plt.tight_layout()
    plt.savefig(output_path, dpi=200)
    plt.close()
