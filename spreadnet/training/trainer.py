"""Convergence-driven online training loop."""

from __future__ import annotations

import time
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from ..core.network import Network
from ..core.propagation import case_error, forward_run, train_case
from ..core.types import CaseSet, TrainingState
from ..data.files import write_weights

MAX_SNAPSHOT_FILES = 20


@dataclass
class WeightSnapshotter:
    """Periodically write the weights while training.

    With ``distinct_files`` the snapshots rotate through ``max_files`` files
    named ``<index>-<name>`` inside ``directory``; otherwise ``path`` is
    overwritten every time.
    """

    path: str | Path
    interval: int
    distinct_files: bool = False
    directory: str | Path = "."
    max_files: int = MAX_SNAPSHOT_FILES

    def target(self, iteration: int) -> Path:
        if not self.distinct_files:
            return Path(self.path)
        index = (iteration // self.interval) % self.max_files
        return Path(self.directory) / f"{index}-{Path(self.path).name}"

    def due(self, iteration: int) -> bool:
        return self.interval > 0 and iteration % self.interval == 0

    def save(self, iteration: int, network: Network) -> Path | None:
        target = self.target(iteration)
        print(
            f"SAVE: current iteration: {iteration} - Saving weights to file {target} ... ",
            end="",
        )
        try:
            write_weights(target, network.all_weights())
        except OSError as exc:
            print("failed")
            warnings.warn(
                f"could not save weights to {target}: {exc}; training continues",
                RuntimeWarning,
                stacklevel=2,
            )
            return None
        print("done!")
        return target


class Trainer:
    """Sweep every case once per iteration until the error or iteration limit is hit."""

    def __init__(
        self,
        network: Network,
        learning_rate: float,
        *,
        error_threshold: float = 2e-4,
        max_iterations: int = 100000,
        keep_alive: int = 0,
        snapshotter: WeightSnapshotter | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if not network.training:
            raise ValueError("Trainer needs a network built with training=True")
        self.network = network
        self.learning_rate = learning_rate
        self.error_threshold = error_threshold
        self.max_iterations = max_iterations
        self.keep_alive = keep_alive
        self.snapshotter = snapshotter
        self.callbacks = list(callbacks or [])

    def run(self, cases: CaseSet) -> TrainingState:
        if cases.outputs is None:
            raise ValueError("training needs expected outputs for every case")
        if len(cases) == 0:
            raise ValueError("training needs at least one case")

        state = TrainingState()
        start = time.perf_counter()
        while not state.done:
            state.error = self.sweep(cases)
            if state.error <= self.error_threshold:
                state.hit_threshold = True
            state.iterations += 1
            if state.iterations >= self.max_iterations:
                state.out_of_iterations = True

            if self.keep_alive > 0 and state.iterations % self.keep_alive == 0:
                print(
                    f"TRAINING: current iteration: {state.iterations}, error: {state.error}"
                )
                state.history.append((state.iterations, state.error))
                self._emit(state.iterations, {"error": state.error})

            if self.snapshotter is not None and self.snapshotter.due(state.iterations):
                self.snapshotter.save(state.iterations, self.network)

        state.elapsed = time.perf_counter() - start
        return state

    def sweep(self, cases: CaseSet) -> float:
        """Train on every case in order and return the average error after each update."""

        total = 0.0
        for inputs, expected in zip(cases.inputs, cases.outputs):
            train_case(self.network, inputs, expected, self.learning_rate)
            forward_run(self.network)
            total += case_error(expected, self.network.output)
        return total / len(cases)

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit(self, iteration: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_iteration"):
                callback.on_iteration(iteration, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(iteration, metrics)


__all__ = ["MAX_SNAPSHOT_FILES", "WeightSnapshotter", "Trainer"]
