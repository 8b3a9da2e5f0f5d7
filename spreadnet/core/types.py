"""Core typing contracts for spreadnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class CaseSet:
    """Inputs and expected outputs, one row per case."""

    inputs: Array
    outputs: Optional[Array] = None

    def __post_init__(self) -> None:
        if self.outputs is not None and len(self.outputs) != len(self.inputs):
            raise ValueError(
                f"case count mismatch: {len(self.inputs)} inputs, {len(self.outputs)} outputs"
            )

    def __len__(self) -> int:
        return int(self.inputs.shape[0])


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_sizes: List[int]
    activation: str

    @property
    def weight_count(self) -> int:
        sizes = self.layer_sizes
        return int(sum(n * m for n, m in zip(sizes[:-1], sizes[1:])))


@dataclass
class TrainingState:
    """Progress of one training run, finalised when the loop exits."""

    iterations: int = 0
    error: float = float("inf")
    hit_threshold: bool = False
    out_of_iterations: bool = False
    elapsed: float = 0.0
    # (iteration, error) at every keep-alive report.
    history: List[Tuple[int, float]] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.hit_threshold or self.out_of_iterations

    def reasons(self) -> List[str]:
        out: List[str] = []
        if self.hit_threshold:
            out.append("Error Threshold Reached")
        if self.out_of_iterations:
            out.append("Max Iterations Reached")
        return out


@dataclass(frozen=True)
class SessionResult:
    """Summary returned by :func:`spreadnet.training.pipelines.run_pipeline`."""

    training: Optional[TrainingState]
    outputs: Optional[Array]
    elapsed: float
    weights_path: str = ""


__all__ = ["Array", "CaseSet", "ModelDescription", "TrainingState", "SessionResult"]
