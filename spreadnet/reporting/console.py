"""Plain-text renderings of configurations, weights, truth tables and results."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..config.settings import POPULATE_FILE, POPULATE_RANDOM, NetworkConfig
from ..core.types import Array, CaseSet, TrainingState

DIVIDER = "-" * 70


def _num(value: float) -> str:
    return str(float(value))


def format_topology(layer_sizes: Sequence[int]) -> str:
    return "-".join(str(int(n)) for n in layer_sizes)


def echo_config(config: NetworkConfig, activation: str) -> str:
    """Describe a resolved configuration the way it is echoed before a run."""

    sizes = config.layer_sizes
    lines: List[str] = [
        f"Network Configuration: {format_topology(sizes)}",
        "",
        "Configuration Parameters",
        f"number of input nodes: {sizes[0]}",
        f"number of output nodes: {sizes[-1]}",
        f"number of cases: {config.num_cases}",
        f"population method: {config.population}",
    ]
    if config.population == POPULATE_FILE:
        lines.append(f"loading weights from {config.weights_file}")
    if config.population == POPULATE_RANDOM:
        lines.append(f"minRand: {_num(config.min_random)}")
        lines.append(f"maxRand: {_num(config.max_random)}")
    lines.append(f"activation function: {activation}")
    lines.append(f"inputs file: {config.inputs_file}")
    if config.print_truth_table or config.train:
        lines.append(f"Truth table file: {config.outputs_file}")

    if config.train:
        lines += [
            "",
            "Training Exclusive Parameters: ",
            f"average error cutoff: {_num(config.error_threshold)}",
            f"maximum iterations: {config.max_iterations}",
            f"lambda: {_num(config.learning_rate)}",
            f"keepAlive: {config.keep_alive}",
            f"save weights: {config.save_weights}",
            f"save interval: {config.save_interval}",
            f"Save to different files: {config.distinct_files}",
        ]
        if config.save_weights and not config.distinct_files:
            lines.append(f"Will save weights to {config.output_weights_file}")

    lines.append("")
    if config.print_weights:
        lines.append("Will print weights after run/train")
    if config.print_truth_table:
        lines.append("Will print truth table after run/train")
    return "\n".join(lines)


def dump_weights(weights: Sequence[Array]) -> str:
    """Return every edge weight, one block per connectivity layer."""

    lines: List[str] = []
    for n, matrix in enumerate(weights):
        lines.append(DIVIDER)
        for k, row in enumerate(matrix):
            cells = " | ".join(f"w{n + 1}{k}{j}: {_num(w)}" for j, w in enumerate(row))
            lines.append(f"| {cells} |")
    lines.append(DIVIDER)
    return "\n".join(lines)


def dump_truth_table(cases: CaseSet) -> str:
    if cases.outputs is None:
        raise ValueError("truth table needs expected outputs")
    lines = []
    for idx, (inputs, outputs) in enumerate(zip(cases.inputs, cases.outputs), start=1):
        ins = " ".join(_num(v) for v in inputs)
        outs = " ".join(_num(v) for v in outputs)
        lines.append(f"| {ins} | {outs} | --> Case {idx}")
    return "\n".join(lines)


def dump_outputs(outputs: Array) -> str:
    return "\n".join(
        f"Case {idx}: " + " ".join(_num(v) for v in row)
        for idx, row in enumerate(outputs, start=1)
    )


def format_report(
    config: NetworkConfig,
    *,
    training: Optional[TrainingState],
    elapsed: float,
    weights: Sequence[Array] = (),
    cases: Optional[CaseSet] = None,
    outputs: Optional[Array] = None,
    weights_path: str = "",
) -> str:
    """Render the end-of-run report."""

    lines: List[str] = []
    if training is not None:
        lines += [
            "Training Terminated",
            "Reason(s) for termination: " + ", ".join(training.reasons()),
            f"Iterations Reached: {training.iterations}",
            f"Error Reached: {_num(training.error)}",
            "",
        ]
        if config.print_weights:
            lines += ["Final Weights: ", dump_weights(weights)]

    lines.append(f"Time Elapsed: {elapsed * 1000.0:.0f} ms")

    if weights_path:
        lines += ["", f"Weights saved to file {weights_path}"]

    if config.print_truth_table and cases is not None and cases.outputs is not None:
        lines += ["", "Truth Table (format: | In ... In | Out ... Out |)", dump_truth_table(cases)]

    if outputs is not None:
        lines += ["Results from Running:", dump_outputs(outputs)]
    return "\n".join(lines)


__all__ = [
    "format_topology",
    "echo_config",
    "dump_weights",
    "dump_truth_table",
    "dump_outputs",
    "format_report",
]
