import csv
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Mapping, Tuple
import numpy as np

from driver_models import MOBIL, VehicleClassConfig
from driver_models.longitudinal import LongitudinalModel
from equilibrium import capacity, fundamental_diagram
from plots import plot_acceleration_response, plot_fundamental_diagram, plot_lane_change_map

logger = logging.getLogger(__name__)


def acceleration_response(
    model: LongitudinalModel,
    gaps: np.ndarray,
    v: float,
    vl: float,
    al: float = 0.0,
) -> np.ndarray:
    """Acceleration of any car-following model over a grid of gaps."""
    return np.array([model.calc_acc(float(s), v, vl, al) for s in gaps], dtype=float)


def lane_change_map(
    mobil: MOBIL,
    acc_gain: np.ndarray,
    acc_lag_new: np.ndarray,
    vrel: float = 1.0,
    to_right: bool = True,
) -> np.ndarray:
    """Boolean grid of MOBIL decisions, rows over acc_lag_new and columns over acc_gain."""
    decisions = np.zeros((len(acc_lag_new), len(acc_gain)), dtype=bool)
    for i, lag in enumerate(acc_lag_new):
        for j, gain in enumerate(acc_gain):
            decisions[i, j] = mobil.realize_lane_change(vrel, 0.0, float(gain), float(lag), to_right)
    return decisions


def run_analysis(
    vehicle_classes: Mapping[str, VehicleClassConfig],
    output_dir: str = "results",
    speed_samples: int = 100,
    gap_max: float = 150.0,
    approach_speed: float = 20.0,
    base_seed: int = 1234,
    show_progress: bool = True,
    save_results: bool = True,
    make_plots: bool = True,
) -> Tuple[List[Dict], Dict[str, Dict]]:
    """Analyse the steady state and the decision behaviour of each vehicle class."""
    if len(vehicle_classes) == 0:
        raise ValueError("vehicle_classes must contain at least one class.")
    if speed_samples < 2:
        raise ValueError("speed_samples must be at least 2.")
    if gap_max <= 0:
        raise ValueError("gap_max must be positive.")
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    def render_progress_bar(completed: int, total: int, width: int = 30) -> str:
        fraction = completed / total if total > 0 else 0.0
        filled = int(fraction * width)
        bar = "#" * filled + "-" * (width - filled)
        return f"[{bar}] {completed}/{total}"

    summary_rows: List[Dict] = []
    diagrams: Dict[str, Dict] = {}
    responses: Dict[str, np.ndarray] = {}
    gaps = np.linspace(0.5, gap_max, 300)
    acc_gain = np.linspace(-1.0, 2.0, 61)
    acc_lag_grid = np.linspace(-10.0, 1.0, 56)
    total_jobs = len(vehicle_classes)

    for idx, (name, cfg) in enumerate(vehicle_classes.items()):
        rng = np.random.default_rng(base_seed + idx)
        model = cfg.build_longitudinal(rng=rng)
        mobil = cfg.build_lane_change()

        speeds, density, flow = fundamental_diagram(model, cfg.length, num_speeds=speed_samples)
        stats = capacity(speeds, density, flow)
        diagrams[name] = {"speed": speeds, "density": density, "flow": flow}
        responses[f"{name} ({cfg.longitudinal.model})"] = acceleration_response(
            replace(model, noise_acc=0.0), gaps, v=approach_speed, vl=0.5 * approach_speed
        )
        summary_rows.append({"class": name, "model": cfg.longitudinal.model, "length": cfg.length, **stats})
        logger.info("Class %s: capacity %.0f veh/h at %.1f veh/km", name, stats["max_flow"],
                    stats["density_at_capacity"])

        if make_plots:
            decisions = lane_change_map(mobil, acc_gain, acc_lag_grid)
            plot_lane_change_map(
                acc_gain,
                acc_lag_grid,
                decisions,
                title=f"MOBIL decisions ({name}, to right)",
                output_path=str(output_path / "lane_change" / f"mobil_map_{name}.png"),
            )

        if show_progress:
            bar = render_progress_bar(idx + 1, total_jobs)
            print(f"\r{bar} | class={name} max_flow={stats['max_flow']:.0f} veh/h", end="", flush=True)

    if show_progress:
        print()  # finish progress line

    if make_plots:
        plot_fundamental_diagram(diagrams, output_path=str(output_path / "fundamental_diagram.png"))
        plot_acceleration_response(
            gaps, responses, v=approach_speed, vl=0.5 * approach_speed,
            output_path=str(output_path / "acceleration_response.png"),
        )

    if save_results:
        _persist_results(output_path, summary_rows, diagrams)

    return summary_rows, diagrams


def _persist_results(output_dir: Path, summary_rows: List[Dict], diagrams: Dict[str, Dict]) -> None:
    """Write capacity summary and sampled fundamental diagrams to disk (CSV + JSON)."""
    output_dir.mkdir(parents=True, exist_ok=True)

    summary_csv = output_dir / "capacity_summary.csv"
    summary_json = output_dir / "capacity_summary.json"
    diagram_csv = output_dir / "fundamental_diagram.csv"

    summary_fields = ["class", "model", "length", "max_flow", "density_at_capacity", "speed_at_capacity",
                      "jam_density"]
    with summary_csv.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=summary_fields)
        writer.writeheader()
        for row in summary_rows:
            writer.writerow({k: row.get(k) for k in summary_fields})

    with summary_json.open("w", encoding="utf-8") as f:
        json.dump(summary_rows, f, indent=2)

    diagram_fields = ["class", "speed", "density", "flow"]
    with diagram_csv.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=diagram_fields)
        writer.writeheader()
        for name in sorted(diagrams):
            info = diagrams[name]
            for v, rho, q in zip(info["speed"], info["density"], info["flow"]):
                writer.writerow({"class": name, "speed": float(v), "density": float(rho), "flow": float(q)})
