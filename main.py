import argparse
import logging

from analysis import run_analysis
from driver_models import DEFAULT_VEHICLE_CLASSES, load_vehicle_classes


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyse car-following and lane-change driver models.")
    parser.add_argument("--config", type=str, default=None,
                        help="JSON file with vehicle classes; built-in car/truck classes if omitted.")
    parser.add_argument("--classes", nargs="+", default=None,
                        help="Space separated vehicle class names to analyse (default: all).")
    parser.add_argument("--output-dir", type=str, default="results", help="Directory for all outputs (plots + CSV/JSON).")
    parser.add_argument("--speed-samples", type=int, default=100, help="Speeds sampled per fundamental diagram.")
    parser.add_argument("--gap-max", type=float, default=150.0, help="Largest gap [m] of the acceleration response.")
    parser.add_argument("--seed", type=int, default=1234, help="Base seed for the acceleration noise generators.")
    parser.add_argument("--no-progress", action="store_true", help="Disable CLI progress bar.")
    parser.add_argument("--no-save", action="store_true", help="Skip writing CSV/JSON result files.")
    parser.add_argument("--no-plots", action="store_true", help="Skip writing plots.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging of the model kernels.")
    return parser.parse_args()


def main() -> None:
    """Run the analysis for the selected vehicle classes and print a capacity summary."""
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    vehicle_classes = load_vehicle_classes(args.config) if args.config else dict(DEFAULT_VEHICLE_CLASSES)
    if args.classes:
        missing = [name for name in args.classes if name not in vehicle_classes]
        if missing:
            raise ValueError(f"Unknown vehicle classes: {', '.join(missing)}")
        vehicle_classes = {name: vehicle_classes[name] for name in args.classes}

    summary_rows, _ = run_analysis(
        vehicle_classes,
        output_dir=args.output_dir,
        speed_samples=args.speed_samples,
        gap_max=args.gap_max,
        base_seed=args.seed,
        show_progress=not args.no_progress,
        save_results=not args.no_save,
        make_plots=not args.no_plots,
    )

    print("Analysis finished.")
    for row in summary_rows:
        print(
            f"{row['class']} ({row['model']}): capacity={row['max_flow']:.0f} veh/h "
            f"at {row['density_at_capacity']:.1f} veh/km, {3.6 * row['speed_at_capacity']:.1f} km/h, "
            f"jam density={row['jam_density']:.1f} veh/km"
        )


if __name__ == "__main__":
    main()
