#!/usr/bin/env python3
"""
Dependency Map Migration Analyzer

Turns a project-reference dataset into migration-planning intelligence:
circular dependency groups, ranked cycle-breaking suggestions, extraction
difficulty scores per project and a color-coded dependency graph.

USAGE:
    python3 depMapAnalyze.py <dataset.json> [options]

EXAMPLES:
    # Analyze and write all outputs to the current directory
    python3 depMapAnalyze.py contoso.json

    # Write outputs elsewhere and render a PNG with Graphviz
    python3 depMapAnalyze.py contoso.json --output-dir ./analysis --render png

    # Use custom filters and scoring weights
    python3 depMapAnalyze.py contoso.json --config depmap-config.json

    # Keep System.Utilities edges while blocking other System.* references
    python3 depMapAnalyze.py contoso.json --allow "System.Utilities"

    # Export the graph with analysis attributes for Gephi/yEd
    python3 depMapAnalyze.py contoso.json --export-graph contoso.graphml

METHOD:
    1. Build the project graph from the dataset (unknown references are skipped)
    2. Remove framework references (System.*, Microsoft.*, ...)
    3. Detect circular dependencies (strongly connected components)
    4. Find the weakest coupling links inside each cycle
    5. Rank cycle-breaking suggestions across all cycles
    6. Score extraction difficulty (coupling, complexity, tech debt, API exposure)
    7. Write DOT, CSV tables and a text report
"""

import os
import sys
import argparse
import logging
import dataclasses

from depmap.package_verification import require_package

# Check dependencies early with helpful error messages
require_package("networkx", "dependency graph analysis")
require_package("numpy", "extraction score statistics")

from depmap.analysis_config import load_configuration
from depmap.cancellation import CancellationToken
from depmap.color_utils import Colors, colored, coupling_color, difficulty_color, print_error, print_header, print_success, print_warning
from depmap.constants import (
    EXIT_INVALID_ARGS,
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    DepMapError,
    OperationCancelledError,
)
from depmap.export_utils import export_graph
from depmap.framework_filter import FilterConfiguration
from depmap.graph_builder import load_dataset
from depmap.graphviz_renderer import OutputFormat, find_graphviz, render_dot_file
from depmap.pipeline import AnalysisResult, analyze_dataset, write_outputs
from depmap.project_graph import classify_coupling


def print_summary(result: AnalysisResult, top: int) -> None:
    """Print the analysis highlights to the terminal."""
    print_header(f"DEPENDENCY ANALYSIS: {result.name}")
    print(f"Projects: {result.total_projects}")
    print(f"References: {result.graph.edge_count} declared, {result.filtered_graph.edge_count} after framework filtering")

    stats = result.cycle_statistics
    if result.cycles:
        print(
            f"\n{Colors.RED}Found {stats.total_cycles} circular dependency groups "
            f"({stats.projects_in_cycles} projects, {stats.participation_rate:.1f}%){Colors.RESET}"
        )
        for cycle in result.cycles[:top]:
            print(f"  Cycle {cycle.cycle_id} ({cycle.size} projects): {', '.join(p.name for p in cycle.projects)}")
    else:
        print(f"\n{Colors.GREEN}✓ No circular dependencies found{Colors.RESET}")

    if result.suggestions:
        print(f"\n{Colors.BRIGHT}Top cycle-breaking suggestions:{Colors.RESET}")
        for suggestion in result.suggestions[:top]:
            color = coupling_color(classify_coupling(suggestion.coupling_score).value)
            print(f"  {suggestion.rank:2d}. {colored(suggestion.break_point, color)} - {suggestion.rationale}")

    candidates = result.candidates
    if candidates.all_scores:
        s = candidates.statistics
        print(f"\n{Colors.BRIGHT}Extraction difficulty:{Colors.RESET} {s.easy_count} easy, {s.medium_count} medium, {s.hard_count} hard")
        for score in candidates.easiest[:top]:
            print(f"  {colored(f'{score.final_score:5.1f}', difficulty_color(score.difficulty.value))}  {score.project_name}")
        if candidates.hardest:
            print(f"\n{Colors.BRIGHT}Hardest to extract:{Colors.RESET}")
            for score in candidates.hardest[:top]:
                print(f"  {colored(f'{score.final_score:5.1f}', difficulty_color(score.difficulty.value))}  {score.project_name}")

    for warning in result.warnings:
        print_warning(warning)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    parser = argparse.ArgumentParser(
        description="Analyze project dependencies for migration planning",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s contoso.json
  %(prog)s contoso.json --output-dir ./analysis --render png
  %(prog)s contoso.json --config depmap-config.json
  %(prog)s contoso.json --allow "System.Utilities"
  %(prog)s contoso.json --export-graph contoso.graphml
        """,
    )

    parser.add_argument("dataset", help="Path to the project dataset JSON file")
    parser.add_argument("--config", metavar="FILE", help="JSON configuration (filters, scoring weights, thresholds)")
    parser.add_argument("--output-dir", default=".", help="Directory for generated files (default: current directory)")
    parser.add_argument("--name", help="Name used for output files (default: dataset name)")
    parser.add_argument("--allow", action="append", metavar="PATTERN", help="Extra allow-list pattern (can be used multiple times)")
    parser.add_argument("--block", action="append", metavar="PATTERN", help="Extra block-list pattern (can be used multiple times)")
    parser.add_argument("--top", type=int, default=10, help="Number of entries to show per section (default: 10)")
    parser.add_argument("--render", choices=[f.value for f in OutputFormat], help="Render the DOT file with Graphviz")
    parser.add_argument("--export-graph", metavar="FILE", help="Export graph with analysis attributes (.graphml or .json)")
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Abort the analysis after this many seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")

    if args.top < 0:
        print_error("--top must be non-negative")
        return EXIT_INVALID_ARGS

    try:
        config = load_configuration(args.config)
        if args.allow or args.block:
            filters = FilterConfiguration(
                block_list=list(config.filters.block_list) + (args.block or []),
                allow_list=list(config.filters.allow_list) + (args.allow or []),
            )
            config = dataclasses.replace(config, filters=filters)

        dataset = load_dataset(args.dataset)
        if args.name:
            dataset.name = args.name

        token = CancellationToken(timeout=args.timeout) if args.timeout is not None else None
        result = analyze_dataset(dataset, config, token)
        print_summary(result, args.top)

        written = write_outputs(result, args.output_dir, config)
        if args.export_graph:
            written.append(export_graph(args.export_graph, result.filtered_graph, result.cycles, result.candidates.all_scores))

        if args.render:
            if find_graphviz() is None:
                print_warning("Graphviz 'dot' not found, skipping rendering")
                print(f"Render manually with: dot -T{args.render} {written[0]} -o {os.path.splitext(written[0])[0]}.{args.render}")
            else:
                written.append(render_dot_file(written[0], OutputFormat(args.render)))

        print()
        for path in written:
            print_success(f"Wrote {path}")
        return EXIT_SUCCESS

    except OperationCancelledError as e:
        logging.error("Analysis cancelled: %s", e)
        print_error(f"Analysis timed out: {e}")
        return e.exit_code


if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print_warning("\nInterrupted by user", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except DepMapError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logging.critical("Unexpected error: %s", e, exc_info=True)
        print_error(f"Fatal error: {e}")
        sys.exit(EXIT_RUNTIME_ERROR)
