"""Binary weight and case files.

Both formats are headerless runs of big-endian IEEE-754 doubles. Weight files
are laid out layer by layer, row by row (``W[n][k][j]``); case files case by
case, feature by feature. A file is only accepted when its length matches the
expected shape exactly.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

import numpy as np

from ..core.types import Array
from ..errors import ConfigError, DimensionMismatch, IOUnavailable

WIRE_DTYPE = np.dtype(">f8")


def _read_bytes(path: str | Path) -> bytes:
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise IOUnavailable(f"file not found: {path}") from exc
    except OSError as exc:
        raise IOUnavailable(f"cannot read {path}: {exc}") from exc


def _decode(path: str | Path, count: int) -> Array:
    data = _read_bytes(path)
    expected = count * WIRE_DTYPE.itemsize
    if len(data) != expected:
        raise DimensionMismatch(str(path), expected, len(data))
    return np.frombuffer(data, dtype=WIRE_DTYPE).astype(np.float64)


def _write(path: str | Path, values: Array) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(np.ascontiguousarray(values, dtype=WIRE_DTYPE).tobytes())
    return path


def weight_shapes(layer_sizes: Sequence[int]) -> List[Tuple[int, int]]:
    sizes = list(layer_sizes)
    return list(zip(sizes[:-1], sizes[1:]))


def read_weights(path: str | Path, layer_sizes: Sequence[int]) -> List[Array]:
    """Load the weight tensor for ``layer_sizes`` from ``path``."""

    shapes = weight_shapes(layer_sizes)
    flat = _decode(path, sum(n * m for n, m in shapes))
    weights: List[Array] = []
    offset = 0
    for n, m in shapes:
        weights.append(flat[offset : offset + n * m].reshape(n, m).copy())
        offset += n * m
    return weights


def write_weights(path: str | Path, weights: Sequence[Array]) -> Path:
    flat = [np.asarray(w, dtype=np.float64).ravel() for w in weights]
    return _write(path, np.concatenate(flat) if flat else np.zeros(0))


def read_cases(path: str | Path, num_cases: int, dim: int) -> Array:
    """Load a ``num_cases x dim`` case table from ``path``."""

    return _decode(path, num_cases * dim).reshape(num_cases, dim)


def write_cases(path: str | Path, values: Array) -> Path:
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError(f"case table must be two-dimensional, got shape {values.shape}")
    return _write(path, values)


def convert_truth_table(
    source: str | Path, inputs_path: str | Path, outputs_path: str | Path
) -> Tuple[Path, Path]:
    """Convert a text truth table into binary input and output case files.

    The text starts with ``numCases numInputs numOutputs`` followed by one row
    of inputs per case and then one row of outputs per case.
    """

    try:
        text = Path(source).read_text()
    except FileNotFoundError as exc:
        raise IOUnavailable(f"truth table not found: {source}") from exc

    lines = [line.split() for line in text.splitlines() if line.strip()]
    try:
        num_cases, num_inputs, num_outputs = (int(tok) for tok in lines[0][:3])
        rows = lines[1 : 1 + 2 * num_cases]
        if len(rows) < 2 * num_cases:
            raise ValueError(f"expected {2 * num_cases} rows, found {len(rows)}")
        inputs = np.array(
            [[float(tok) for tok in row[:num_inputs]] for row in rows[:num_cases]],
            dtype=np.float64,
        )
        outputs = np.array(
            [[float(tok) for tok in row[:num_outputs]] for row in rows[num_cases:]],
            dtype=np.float64,
        )
    except (IndexError, ValueError) as exc:
        raise ConfigError(f"invalid truth table {source}: {exc}") from exc

    if inputs.shape != (num_cases, num_inputs) or outputs.shape != (num_cases, num_outputs):
        raise ConfigError(f"invalid truth table {source}: a row is missing columns")

    return write_cases(inputs_path, inputs), write_cases(outputs_path, outputs)


__all__ = [
    "WIRE_DTYPE",
    "weight_shapes",
    "read_weights",
    "write_weights",
    "read_cases",
    "write_cases",
    "convert_truth_table",
]
