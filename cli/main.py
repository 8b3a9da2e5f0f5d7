"""Command line entry point: train or run a network from configuration files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List

from spreadnet.config import DEFAULT_CONFIG, NetworkConfig, load_config
from spreadnet.config.settings import read_mapping
from spreadnet.data.files import convert_truth_table
from spreadnet.errors import IOUnavailable, SpreadnetError
from spreadnet.reporting.metrics import CsvSink, JsonlSink
from spreadnet.training import pipelines


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "configs",
        nargs="*",
        type=Path,
        help=f"Configuration files to run in order (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--seed", type=int, help="Seed for random weight population"
    )
    parser.add_argument(
        "--override", type=Path, help="Optional JSON/YAML mapping merged over each config"
    )
    parser.add_argument(
        "--metrics-dir",
        type=Path,
        help="Write keep-alive status records to metrics.jsonl/metrics.csv here",
    )
    parser.add_argument(
        "--truth-table",
        nargs=3,
        type=Path,
        metavar=("SOURCE", "INPUTS", "OUTPUTS"),
        help="Convert a text truth table into binary case files and exit",
    )
    return parser.parse_args(argv)


def _load(path: Path, args: argparse.Namespace) -> NetworkConfig:
    config = load_config(path)
    if args.override:
        config = config.merged(read_mapping(args.override))
    if args.seed is not None:
        config = config.merged({"seed": args.seed})
    return config


def _callbacks(args: argparse.Namespace) -> List[object]:
    """Sinks shared by every config of one invocation."""

    if args.metrics_dir is None:
        return []
    return [
        JsonlSink(args.metrics_dir / "metrics.jsonl", seed=args.seed),
        CsvSink(args.metrics_dir / "metrics.csv"),
    ]


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.truth_table:
        source, inputs, outputs = args.truth_table
        try:
            convert_truth_table(source, inputs, outputs)
        except SpreadnetError as exc:
            raise SystemExit(f"error: {exc}") from None
        print(f"Wrote {inputs} and {outputs}")
        raise SystemExit(0)

    paths = list(args.configs)
    if not paths:
        print(f"No configuration file provided. Will use default ({DEFAULT_CONFIG})")
        paths = [Path(DEFAULT_CONFIG)]

    callbacks = _callbacks(args)
    failed = False
    for path in paths:
        try:
            try:
                config = _load(path, args)
            except IOUnavailable as exc:
                if path == Path(DEFAULT_CONFIG):
                    raise
                print(f"{exc}. Will use default ({DEFAULT_CONFIG})", file=sys.stderr)
                path = Path(DEFAULT_CONFIG)
                config = _load(path, args)
            print(f"Configuration file: {path}")
            for sink in callbacks:
                if isinstance(sink, JsonlSink):
                    sink.seed = config.seed
            pipelines.run_pipeline(config, callbacks=callbacks)
        except SpreadnetError as exc:
            print(f"error: {exc}", file=sys.stderr)
            failed = True

    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
