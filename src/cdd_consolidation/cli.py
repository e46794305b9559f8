"""CLI for the workbook consolidation pipeline."""

import argparse
from pathlib import Path

import yaml

from .pipeline import run_pipeline
from .utils import setup_logging, get_logger


def _load_config(config_path: str | Path | None) -> dict:
    path = Path(config_path or "configs/default.yaml")
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the cdd-consolidate command.

    Returns:
        Parser whose path options override the config file's paths section.
    """
    parser = argparse.ArgumentParser(
        description="Consolidate auditor testing workbooks into a findings report.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config",
        default="configs/default.yaml",
        help="Path to YAML config file",
    )
    parser.add_argument(
        "-i", "--input-dir",
        metavar="DIR",
        help="Directory of auditor workbook .xlsx files",
    )
    parser.add_argument(
        "-o", "--output-dir",
        metavar="DIR",
        help="Output directory for the report",
    )
    parser.add_argument(
        "--audit-run-id",
        metavar="ID",
        help="Audit run identifier recorded on the report",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Set log level to DEBUG",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    config = _load_config(args.config)
    config.setdefault("paths", {})
    if args.input_dir:
        config["paths"]["workbook_dir"] = args.input_dir
    if args.output_dir:
        config["paths"]["output_dir"] = args.output_dir
    if args.verbose:
        config.setdefault("logging", {})["level"] = "DEBUG"

    setup_logging(config.get("logging", {}))
    log = get_logger(__name__)

    try:
        report_path = run_pipeline(config, audit_run_id=args.audit_run_id)
        log.info("Done. Report: %s", report_path)
    except Exception as e:
        log.exception("Consolidation failed: %s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
