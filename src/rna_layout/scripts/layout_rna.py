#!/usr/bin/env python3
"""
Lay out RNA secondary structures in 2D from the command line.

Reads a dot-bracket structure (optionally with a sequence) and prints one
`(x, y)` coordinate per base plus the bounding box, as text or JSON.

Examples:
  - python layout_rna.py "((((....))))"
  - python layout_rna.py --sequence GGGGAAACCCC --json "((((...))))"
  - python layout_rna.py --pseudoknots "((..[[..))..]]"
  - python layout_rna.py -v --input structures.txt --json

"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# --- Third-Party Imports ---
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

# --- Local Application Imports ---
from rna_layout.errors import LayoutStructureError, RNALayoutError
from rna_layout.layout.config import LayoutConfig, load_layout_config
from rna_layout.layout.rna_layout import RNALayout
from rna_layout.rules.constraints import CUT_CHARS
from rna_layout.structures.sec_struct import SecStruct, find_cut_points
from rna_layout.structures.sequence import Sequence
from rna_layout.utils.base_utils import clean_sequence
from rna_layout.utils.logging_utils import (
    DEFAULT_LOG_DIR,
    PACKAGE_LOGGERS,
    cleanup_old_logs,
    configure_package_logging,
    set_log_level,
)

# Set up module logger
logger = logging.getLogger(__name__)

# (structure, sequence or None)
BatchEntry = Tuple[str, Optional[str]]


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None, quiet: bool = False) -> None:
    """
    Configures the package loggers from the `-v` count.

    Parameters
    ----------
    verbose_level : int
        0 for WARNING, 1 for INFO, 2 for DEBUG.
    log_file : Optional[str]
        Explicit log file. Without it, a timestamped file under `var/log/` is
        written whenever `verbose_level > 0`.
    quiet : bool
        Only report errors; overrides `verbose_level`.
    """
    logger_names = list(PACKAGE_LOGGERS)
    # Run as a plain script the module logger is "__main__", outside the package tree.
    if not __name__.startswith("rna_layout"):
        logger_names.append(__name__)

    # Default-directory runs prune week-old logs before adding a new one.
    removed = cleanup_old_logs(DEFAULT_LOG_DIR) if verbose_level > 0 and log_file is None else []

    configure_package_logging(verbose_level, log_file=log_file, logger_names=logger_names)
    if quiet:
        for logger_name in logger_names:
            set_log_level(logging.getLogger(logger_name), logging.ERROR)

    if verbose_level > 0 and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()}")
        if removed:
            logger.info(f"Removed {len(removed)} old log file(s)")


# --------------------------
# Helpers
# --------------------------
def build_sequence(structure: str, raw_sequence: Optional[str]) -> Sequence:
    """
    Builds the sequence that accompanies `structure`.

    Without an explicit sequence, every base is unknown and the cut markers of
    the structure string become cut positions.

    Raises
    ------
    InvalidBaseError
        If `raw_sequence` holds a character that is not A, C, G, U, T or a cut marker.
    ValueError
        If the sequence and structure lengths differ.
    """
    if raw_sequence is None:
        return Sequence.undefined(len(structure), find_cut_points(structure))

    normalized = clean_sequence(raw_sequence)
    sequence = Sequence.from_string(normalized, allow_cut=True, allow_unknown=False)
    if sequence.length != len(structure):
        raise ValueError(
            f"Sequence length {sequence.length} does not match structure length {len(structure)}."
        )

    logger.debug(f"Sequence validated: length={sequence.length}")
    return sequence


def resolve_config(
    config_path: Optional[str],
    primary_space: Optional[float],
    pair_space: Optional[float],
    rotation: Optional[str],
) -> LayoutConfig:
    """Loads the YAML config (if any) and applies command-line overrides on top."""
    config = load_layout_config(config_path) if config_path else LayoutConfig()

    cli_overrides: Dict[str, Any] = {}
    if primary_space is not None:
        cli_overrides["primary_space"] = primary_space
    if pair_space is not None:
        cli_overrides["pair_space"] = pair_space
    if rotation is not None:
        cli_overrides["rotation"] = rotation

    if not cli_overrides:
        return config
    return replace(config, **cli_overrides)


def layout_structure(
    structure: str,
    raw_sequence: Optional[str],
    config: LayoutConfig,
    pseudoknots: bool = False,
) -> Dict[str, Any]:
    """
    Parses one structure and computes its layout.

    Returns
    -------
    Dict[str, Any]
        Structure, sequence, pair statistics and the coordinates/bounds.
    """
    structure = structure.strip()
    sec_struct = SecStruct.from_dot_bracket(structure, pseudoknots=pseudoknots)
    sequence = build_sequence(structure, raw_sequence)

    layout = RNALayout(config=config)
    coords = layout.layout(sec_struct, length=sequence.length)

    result: Dict[str, Any] = {
        "structure": sec_struct.to_dot_bracket(seq=sequence, pseudoknots=pseudoknots),
        "sequence": str(sequence),
        "length": sequence.length,
        "num_pairs": sec_struct.num_pairs(),
        "longest_stack": sec_struct.get_longest_stack_length(),
    }
    if pseudoknots:
        result["pseudoknot_pairs"] = sec_struct.only_pseudoknots().num_pairs()
    result.update(coords.as_dict())
    return result


def read_batch(path: str) -> List[BatchEntry]:
    """
    Reads one structure per line, optionally followed by a tab and its sequence.

    Blank lines and lines starting with `#` are skipped.
    """
    entries: List[BatchEntry] = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        structure, _, sequence = line.partition("\t")
        entries.append((structure.strip(), sequence.strip() or None))
    logger.info(f"Read {len(entries)} structures from {path}")
    return entries


def format_text(result: Dict[str, Any]) -> str:
    """Human-readable rendering of one `layout_structure` result."""
    lines = [
        f"Structure : {result['structure']}",
        f"Sequence : {result['sequence']}",
        f"Length : {result['length']}",
        f"Pairs : {result['num_pairs']} (longest stack {result['longest_stack']})",
        f"X bounds : {result['xbounds'][0]:.2f} .. {result['xbounds'][1]:.2f}",
        f"Y bounds : {result['ybounds'][0]:.2f} .. {result['ybounds'][1]:.2f}",
    ]
    for idx, (base, x, y) in enumerate(zip(result["sequence"], result["xarray"], result["yarray"])):
        if base in CUT_CHARS or x is None:
            lines.append(f"{idx:>5} {base}")
        else:
            lines.append(f"{idx:>5} {base} {x:10.3f} {y:10.3f}")
    return "\n".join(lines)


# --------------------------
# Command-Line Interface
# --------------------------
def main(argv=None) -> int:
    """
    Parses command-line arguments and lays out the requested structure(s).
    """
    # --- Argument Parsing ---
    parser = argparse.ArgumentParser(description="Compute 2D coordinates for an RNA secondary structure.")
    parser.add_argument("structure", nargs="?", default=None,
                      help="Dot-bracket structure (omit when using --input).")
    parser.add_argument("--sequence", default=None,
                      help="RNA sequence matching the structure (A,C,G,U; T becomes U; & marks a cut).")
    parser.add_argument("--input", default=None,
                      help="File with one structure per line, optionally 'structure<TAB>sequence'.")
    parser.add_argument("--pseudoknots", action="store_true",
                      help="Read [] {} <> brackets as pseudoknot pairs.")
    parser.add_argument("--config", default=None,
                      help="Path to a layout config YAML.")
    parser.add_argument("--primary-space", type=float, default=None,
                      help="Distance between consecutive backbone positions (default: 45).")
    parser.add_argument("--pair-space", type=float, default=None,
                      help="Distance between the two bases of a pair (default: 45).")
    parser.add_argument("--rotation", choices=["cw", "ccw"], default=None,
                      help="Rotation sense of the layout (default: cw).")
    parser.add_argument("--json", action="store_true",
                      help="Emit JSON instead of human-readable text.")

    # Logging arguments
    parser.add_argument("-v", "--verbose", action="count", default=0,
                      help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                      help="Path to log file (default: var/log/rna_layout_TIMESTAMP.log if verbose)")
    parser.add_argument("--quiet", action="store_true",
                      help="Suppress all output except final result")

    cli_args = parser.parse_args(argv)

    if (cli_args.structure is None) == (cli_args.input is None):
        parser.error("give exactly one of STRUCTURE or --input")

    # --- Setup ---
    verbose_level = 0 if cli_args.quiet else cli_args.verbose
    setup_cli_logging(verbose_level, cli_args.log_file, quiet=cli_args.quiet)

    try:
        config = resolve_config(cli_args.config, cli_args.primary_space, cli_args.pair_space, cli_args.rotation)
    except (RNALayoutError, OSError) as e:
        logger.error(f"Invalid layout configuration: {e}")
        print(f"Invalid layout configuration: {e}", file=sys.stderr)
        return 2
    logger.info(f"Layout config: {config}")

    if cli_args.input is not None:
        try:
            entries = read_batch(cli_args.input)
        except OSError as e:
            logger.error(f"Could not read {cli_args.input}: {e}")
            print(f"Could not read {cli_args.input}: {e}", file=sys.stderr)
            return 2
    else:
        entries = [(cli_args.structure, cli_args.sequence)]

    # --- Layout ---
    start_time = time.perf_counter()
    results: List[Dict[str, Any]] = []
    show_progress = len(entries) > 1 and logger.isEnabledFor(logging.INFO)
    # Keep log lines from tearing the progress bar.
    with logging_redirect_tqdm(loggers=[logging.getLogger(name) for name in PACKAGE_LOGGERS]):
        for line_no, (structure, sequence) in enumerate(
                tqdm(entries, desc="Layout", leave=True, disable=not show_progress), start=1):
            try:
                results.append(layout_structure(structure, sequence, config, pseudoknots=cli_args.pseudoknots))
            except LayoutStructureError as e:
                logger.error(f"Layout failed for entry {line_no}: {e}", exc_info=True)
                print(f"Layout failed for entry {line_no}: {e}", file=sys.stderr)
                return 1
            except ValueError as e:
                # Parse, base and length errors are all `ValueError`s.
                logger.error(f"Invalid input for entry {line_no}: {e}")
                print(f"Error (entry {line_no}): {e}", file=sys.stderr)
                return 2

    elapsed = time.perf_counter() - start_time
    logger.info(f"Laid out {len(results)} structure(s) in {elapsed * 1000:.1f}ms")

    # --- Output ---
    if cli_args.json:
        payload = results if cli_args.input is not None else results[0]
        print(json.dumps(payload, indent=2))
    else:
        print("\n\n".join(format_text(result) for result in results))

    return 0


if __name__ == "__main__":
    # Run the main function and exit with its return code.
    raise SystemExit(main())
