"""
Report Generator
Writes analysis results to JSON or plain text reports.
"""

import json
from typing import Any, Dict

from ..utils import format_duration, format_error, format_percentage, format_speed


class ReportGenerator:
    """
    Generates analysis reports in multiple formats.

    Args:
        speed_unit: Unit for speeds in text reports ('ms', 'kmh')
    """

    def __init__(self, speed_unit: str = "ms"):
        self.speed_unit = speed_unit

    def generate_report(self, analysis_results: Dict[str, Any],
                        output_path: str, format: str = 'json'):
        """
        Generate analysis report.

        Args:
            analysis_results: Metadata, a 'flights' list of flight_id,
                flight_name and metrics, and an optional 'comparison' section
            output_path: Output file path
            format: Report format ('json', 'txt')

        Raises:
            ValueError: If the format is not supported
        """
        if format == 'json':
            self._generate_json_report(analysis_results, output_path)
        elif format == 'txt':
            self._generate_text_report(analysis_results, output_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _generate_json_report(self, results: Dict[str, Any], output_path: str):
        """Generate JSON report."""
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, default=str)

    def _generate_text_report(self, results: Dict[str, Any], output_path: str):
        """Generate text report."""
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write("=" * 70 + "\n")
            f.write("UTAP TRAJECTORY ANALYSIS REPORT\n")
            f.write("=" * 70 + "\n\n")

            f.write(f"Generated: {results['metadata']['analysis_date']}\n")
            f.write(f"Flights: {len(results['flights'])}\n\n")

            for flight in results['flights']:
                f.write(self._format_flight(flight))

            comparison = results.get('comparison')
            if comparison:
                f.write("COMPARISON\n")
                f.write("-" * 70 + "\n")
                for insight in comparison['insights']:
                    f.write(f"  * {insight['message']}\n")
                summary = comparison['summary']
                f.write(f"  Average stability:  {summary['average_stability']:.1f}%\n")
                f.write(f"  Average efficiency: {summary['average_efficiency']:.1f}%\n")
                f.write(f"  Average accuracy:   {format_error(summary['average_accuracy'], 3)}\n")
                f.write(f"  Variation:          {summary['performance_variation']}\n\n")

    def _format_flight(self, flight: Dict[str, Any]) -> str:
        metrics = flight['metrics']
        accuracy = metrics['path_accuracy']
        stability = metrics['stability_metrics']
        efficiency = metrics['trajectory_efficiency']
        turns = metrics['turn_analysis']
        motion = metrics['motion_summary']

        lines = [
            f"FLIGHT: {flight['flight_name']} ({flight['flight_id']})",
            "-" * 70,
            f"Total Points:       {accuracy['total_points']:,}",
            f"Average Error:      {format_error(accuracy['average_error'])}",
            f"Max Error:          {format_error(accuracy['max_error'])}",
            f"Stabilization Rate: {format_percentage(stability['stabilization_ratio'])}",
            f"Stability Score:    {stability['overall_stability_score']:.1f}",
            f"Efficiency Ratio:   {format_percentage(efficiency['efficiency_ratio'])}",
            f"Distance Flown:     {efficiency['actual_distance']:.2f} m",
            f"Turns:              {turns['total_turns']} ({turns['sharp_turns']} sharp)",
            f"Path Smoothness:    {format_percentage(turns['path_smoothness'])}",
            f"Duration:           {format_duration(motion['duration'])}",
            f"Average Speed:      {format_speed(motion['avg_speed'], self.speed_unit)}",
        ]

        network = metrics.get('network_impact')
        if network:
            correlation = network['correlation']
            lines.append(
                f"Network Impact:     r={correlation['coefficient']:.3f} "
                f"({correlation['strength']}) - {correlation['interpretation']}"
            )
            for rec in network['recommendations']:
                lines.append(f"  [{rec['priority']}] {rec['message']}")

        return "\n".join(lines) + "\n\n"
