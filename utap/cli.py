"""
UTAP Command Line Interface

Trajectory analysis for recorded UAV flights, with cross-flight comparison
when several flight files are given.

Usage:
    utap-analyze FLIGHT.json [FLIGHT.json ...] [--output REPORT]
                 [--format json|txt] [--metric M] [--period P]
                 [--speed-unit ms|kmh]
"""

import sys
import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .config import Config, Settings
from .analysis import (
    FlightAnalyzer,
    FlightRecord,
    ReportGenerator,
    ideal_path_from_sequence,
    samples_from_dicts,
)
from .utils import format_error, format_percentage, format_speed

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
REQUIRED_POSITION_FIELDS = ("x", "y", "z", "time")


def load_flight_file(path: str) -> Dict[str, Any]:
    """
    Load a flight upload file.

    Args:
        path: Path to a JSON file with 'timestamp', 'position_data' and
              optionally 'sequence', 'battery' and 'response_time'

    Returns:
        Parsed flight dictionary

    Raises:
        ValueError: If position_data is not a non-empty list of samples that
                    all carry x, y, z and time
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    positions = data.get("position_data") if isinstance(data, dict) else None
    if not isinstance(positions, list) or not positions:
        raise ValueError(f"{path}: position data must be a non-empty array")

    for index, position in enumerate(positions):
        if not isinstance(position, dict):
            raise ValueError(f"{path}: position sample {index} is not an object")
        for field in REQUIRED_POSITION_FIELDS:
            if field not in position:
                raise ValueError(f"{path}: missing field '{field}' in position sample {index}")

    return data


def parse_flight_timestamp(data: Dict[str, Any], path: str) -> datetime:
    """Flight creation time from the upload timestamp, else the file mtime."""
    try:
        return datetime.strptime(str(data.get("timestamp")), TIMESTAMP_FORMAT)
    except ValueError:
        logger.debug("No usable timestamp in %s, using file modification time", path)
        return datetime.fromtimestamp(Path(path).stat().st_mtime)


def analyze_file(analyzer: FlightAnalyzer, path: str) -> Tuple[str, FlightRecord]:
    """Run the per-flight analysis for one file and wrap it as a FlightRecord."""
    data = load_flight_file(path)
    samples = samples_from_dicts(data["position_data"])
    ideal_path = ideal_path_from_sequence(data.get("sequence"))

    metrics = analyzer.analyze_flight(samples, ideal_path)
    name = data.get("flightName") or f"Flight_{data.get('timestamp', Path(path).stem)}"
    battery = data.get("battery") or {}

    record = FlightRecord(
        flight_id=Path(path).stem,
        flight_name=name,
        created_at=parse_flight_timestamp(data, path),
        metrics=metrics,
        battery_start_voltage=battery.get("startVoltage"),
        response_time=float(data.get("response_time") or 0.0),
    )
    return name, record


def print_flight_summary(name: str, metrics: Dict[str, Any], speed_unit: str = "ms"):
    """Print the headline metrics of one flight."""
    accuracy = metrics["path_accuracy"]
    stability = metrics["stability_metrics"]
    efficiency = metrics["trajectory_efficiency"]
    quality = metrics["quality_assessment"]

    print(f"\n✈️  {name}")
    print("=" * 70)
    print(f"Points:           {accuracy['total_points']:,}")
    print(f"Average error:    {format_error(accuracy['average_error'])}")
    print(f"Max error:        {format_error(accuracy['max_error'])}")
    print(f"Stabilization:    {format_percentage(stability['stabilization_ratio'])}")
    print(f"Stability score:  {stability['overall_stability_score']:.1f}")
    print(f"Efficiency:       {format_percentage(efficiency['efficiency_ratio'])}")
    print(f"Turns:            {metrics['turn_analysis']['total_turns']}")
    print(f"Average speed:    {format_speed(metrics['motion_summary']['avg_speed'], speed_unit)}")
    print(f"Quality:          {quality['overall_score']} ({quality['grade']})")
    print(f"Network impact:   {metrics['network_impact']['correlation']['interpretation']}")


def print_comparison(comparison: Dict[str, Any], patterns: Dict[str, Any],
                     trends: Dict[str, Any]):
    """Print cross-flight insights."""
    print("\n📊 Flight Comparison")
    print("=" * 70)
    for insight in comparison["insights"]:
        print(f"  • {insight['message']}")
    print(f"  Variation: {comparison['summary']['performance_variation']}")

    print("\n🔍 Patterns")
    print("=" * 70)
    for metric, direction in patterns["trends"].items():
        print(f"  {metric:10s}: {direction}")
    for insight in patterns["insights"]:
        print(f"  • {insight}")

    print(f"\n⏰ {trends['metric']} trend ({trends['period']})")
    print("=" * 70)
    for point in trends["trends"]:
        print(f"  {point['period']} | {point['value']:.4f} ({point['flight_count']} flights)")


def run(files: List[str], config: Config, output: str = None, report_format: str = None,
        metric: str = None, period: str = None, speed_unit: str = None) -> Dict[str, Any]:
    """
    Analyze flight files and optionally write a report.

    Returns:
        Report dictionary with metadata, a per-flight list and, for more
        than one flight, comparison, patterns and trends
    """
    analyzer = FlightAnalyzer()
    speed_unit = speed_unit or config.speed_unit

    records = []
    for path in files:
        name, record = analyze_file(analyzer, path)
        records.append(record)
        print_flight_summary(name, record.metrics, speed_unit)

    records.sort(key=lambda r: r.created_at)

    results = {
        "metadata": {
            "analysis_date": datetime.now().isoformat(),
            "files": list(files),
        },
        "flights": [
            {"flight_id": r.flight_id, "flight_name": r.flight_name, "metrics": r.metrics}
            for r in records
        ],
    }

    if len(records) > 1:
        results["comparison"] = analyzer.compare_flights(records)
        results["patterns"] = analyzer.analyze_patterns(records)
        results["trends"] = analyzer.performance_trends(
            records, metric or config.trend_metric, period or config.trend_period
        )
        print_comparison(results["comparison"], results["patterns"], results["trends"])

    if output:
        output_path = Path(output)
        # Bare file names go to the configured report directory
        if output_path.parent == Path("."):
            output_path = Path(config.report_dir) / output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        ReportGenerator(speed_unit=speed_unit).generate_report(
            results, str(output_path), format=report_format or config.report_format
        )
        print(f"\n💾 Report saved to: {output_path}")

    return results


def main():
    """Main entry point for analyzer."""
    parser = argparse.ArgumentParser(
        description='UTAP Flight Analyzer - Trajectory metrics and flight comparison'
    )
    parser.add_argument(
        'files',
        nargs='+',
        help='Flight JSON files to analyze'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to YAML configuration file (optional)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Output file for the report (optional)'
    )
    parser.add_argument(
        '--format',
        choices=Settings.REPORT_FORMATS,
        help='Report format (default: from config)'
    )
    parser.add_argument(
        '--metric',
        choices=Settings.TREND_METRICS,
        help='Metric for performance trends (default: from config)'
    )
    parser.add_argument(
        '--period',
        choices=Settings.TREND_PERIODS,
        help='Bucketing period for performance trends (default: from config)'
    )
    parser.add_argument(
        '--speed-unit',
        choices=Settings.SPEED_UNITS,
        help='Unit for displayed speeds (default: from config)'
    )

    args = parser.parse_args()

    config = Config(args.config)
    config.configure_logging()

    try:
        run(args.files, config, args.output, args.format, args.metric, args.period,
            args.speed_unit)
        print("\n✅ Analysis complete!")
    except (OSError, ValueError) as e:
        print(f"❌ Error during analysis: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
