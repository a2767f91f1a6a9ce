"""CLI for summarizing cable inspection results and generating plots."""

import argparse
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from ..core.models import DefectClass  # noqa: E402
from ..utils.file_io import find_metrics_files, load_metrics_json  # noqa: E402

DEFECT_LABELS = [defect.name.lower() for defect in DefectClass]


def create_argument_parser():
    """Create argument parser for the summarize command."""
    parser = argparse.ArgumentParser(description="Summarize cable inspection results and generate plots.")
    parser.add_argument("--in-dir", default="out", help="Directory containing *_metrics.json files (default: ./out)")
    parser.add_argument("--out-dir", default="out", help="Output directory for summaries and plots (default: ./out)")
    parser.add_argument("--make-plots", action="store_true", help="Generate diameter and defect histograms")
    return parser


def read_metric_file(fp: Path) -> dict:
    """Flatten one *_metrics.json into a single-row dict; tolerant to missing fields."""
    try:
        d = load_metrics_json(str(fp))
    except Exception as e:
        return {"_file": str(fp), "_read_error": str(e)}

    row = {
        "_file": str(fp),
        "name": fp.stem.replace("_metrics", ""),
        "image_path": d.get("image_path"),
        "diameter_px": d.get("diameter_px"),
        "diameter_min_px": d.get("diameter_min_px"),
        "diameter_max_px": d.get("diameter_max_px"),
        "rows_measured": d.get("rows_measured", 0),
        "defect_count": d.get("defect_count", 0),
    }

    counts = d.get("defect_counts") or {}
    for label in DEFECT_LABELS:
        row[f"{label}_count"] = counts.get(label, 0)

    return row


def load_summary_frame(metrics_files) -> pd.DataFrame:
    """Load every metrics file into one DataFrame, skipping unreadable ones."""
    rows = []
    for metrics_file in metrics_files:
        row = read_metric_file(Path(metrics_file))
        if "_read_error" in row:
            print(f"Error loading {metrics_file}: {row['_read_error']}")
            continue
        rows.append(row)
    return pd.DataFrame(rows)


def print_summary_stats(df: pd.DataFrame) -> None:
    """Print summary statistics to console."""
    if df.empty:
        print("No data to summarize")
        return

    print(f"\nSummary Statistics (n={len(df)} images):")
    print("=" * 50)

    diameters = df["diameter_px"].dropna()
    if not diameters.empty:
        print("Diameter (px):")
        print(f"  Mean: {diameters.mean():.1f} ± {diameters.std(ddof=0):.1f}")
        print(f"  Range: {diameters.min():.1f} - {diameters.max():.1f}")
        print(f"  Median: {diameters.median():.1f}")

    print("\nDefects:")
    print(f"  Total: {int(df['defect_count'].sum())}")
    print(f"  Images with defects: {int((df['defect_count'] > 0).sum())}")
    for label in DEFECT_LABELS:
        print(f"  {label}: {int(df[f'{label}_count'].sum())}")


def create_diameter_histogram(df: pd.DataFrame, output_path: Path) -> bool:
    """Histogram of per-image mean diameter; returns False when there is no data."""
    diameters = df["diameter_px"].dropna().to_numpy()
    if diameters.size == 0:
        return False

    plt.figure(figsize=(8, 6))
    plt.hist(diameters, bins=min(15, len(diameters)), alpha=0.7, edgecolor="black")
    plt.xlabel("Diameter (px)")
    plt.ylabel("Count")
    plt.title(f"Diameter Distribution (n={len(diameters)})")
    plt.grid(True, alpha=0.3)

    mean_d = np.mean(diameters)
    std_d = np.std(diameters)
    plt.axvline(mean_d, color="red", linestyle="--", alpha=0.8)
    plt.text(
        0.02,
        0.98,
        f"Mean: {mean_d:.1f}±{std_d:.1f} px\nRange: {diameters.min():.1f}-{diameters.max():.1f} px",
        transform=plt.gca().transAxes,
        verticalalignment="top",
        bbox={"boxstyle": "round", "facecolor": "white", "alpha": 0.8},
    )

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"  Created: {output_path}")
    return True


def create_defect_bar_chart(df: pd.DataFrame, output_path: Path) -> None:
    """Bar chart of total defects per class."""
    totals = [int(df[f"{label}_count"].sum()) for label in DEFECT_LABELS]

    plt.figure(figsize=(8, 6))
    plt.bar(DEFECT_LABELS, totals, color=["tab:blue", "tab:orange", "tab:green"], edgecolor="black")
    plt.ylabel("Count")
    plt.title(f"Defects by Class ({len(df)} images)")
    plt.grid(True, axis="y", alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"  Created: {output_path}")


def main():
    """Main entry point for the summarize command."""
    parser = create_argument_parser()
    args = parser.parse_args()

    in_dir = Path(args.in_dir)
    if not in_dir.exists():
        print(f"Error: Input directory '{args.in_dir}' does not exist")
        sys.exit(1)

    metrics_files = find_metrics_files(str(in_dir))
    if not metrics_files:
        print(f"No *_metrics.json files found in '{args.in_dir}'")
        return

    print(f"Found {len(metrics_files)} metrics files in {in_dir}")

    df = load_summary_frame(metrics_files)
    if df.empty:
        print("Error: No valid data could be loaded from metrics files")
        return

    print_summary_stats(df)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    summary_csv = out_dir / "summary.csv"
    df.to_csv(summary_csv, index=False)
    print(f"\nSummary table saved to: {summary_csv}")

    if args.make_plots:
        print("\nGenerating plots...")
        plots_dir = out_dir / "plots"
        plots_dir.mkdir(parents=True, exist_ok=True)

        create_diameter_histogram(df, plots_dir / "diameter_histogram.png")
        create_defect_bar_chart(df, plots_dir / "defect_classes.png")

        print(f"\nAll plots saved to: {plots_dir}")
    else:
        print("\nUse --make-plots to generate visualization plots")


if __name__ == "__main__":
    main()
