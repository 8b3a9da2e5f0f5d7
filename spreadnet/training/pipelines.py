"""Pipeline assembly: initialise a network, train or run it, then report."""

from __future__ import annotations

import time
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

import numpy as np

from ..config.settings import POPULATE_FILE, NetworkConfig, resolve_config
from ..core import activations
from ..core.network import Network
from ..core.population import FromFile, Population, RandomUniform
from ..core.propagation import infer
from ..core.types import Array, CaseSet, SessionResult, TrainingState
from ..data.files import read_cases, write_weights
from ..errors import ConfigWarning, DimensionMismatch, IOUnavailable
from ..reporting.console import dump_weights, echo_config, format_report
from .trainer import Trainer, WeightSnapshotter


@dataclass
class Session:
    """One initialised network together with its cases and configuration."""

    config: NetworkConfig
    network: Network
    cases: CaseSet
    callbacks: Sequence[object] = ()
    training: Optional[TrainingState] = None
    outputs: Optional[Array] = None
    weights_path: str = ""
    elapsed: float = 0.0

    def train(self) -> TrainingState:
        cfg = self.config
        snapshotter = None
        if cfg.save_weights and cfg.save_interval > 0:
            snapshotter = WeightSnapshotter(
                path=cfg.output_weights_file,
                interval=cfg.save_interval,
                distinct_files=cfg.distinct_files,
                directory=cfg.snapshot_dir,
            )
        trainer = Trainer(
            self.network,
            cfg.learning_rate,
            error_threshold=cfg.error_threshold,
            max_iterations=cfg.max_iterations,
            keep_alive=cfg.keep_alive,
            snapshotter=snapshotter,
            callbacks=self.callbacks,
        )
        self.training = trainer.run(self.cases)
        return self.training

    def run(self) -> Array:
        """Infer every case and keep the outputs, one row per case."""

        self.outputs = np.stack([infer(self.network, row) for row in self.cases.inputs])
        return self.outputs

    def save_weights(self, path: str | Path | None = None) -> str:
        target = path or self.config.output_weights_file
        if target is None:
            raise ValueError("no output weights file configured")
        self.weights_path = str(write_weights(target, self.network.all_weights()))
        return self.weights_path

    def report(self) -> str:
        return format_report(
            self.config,
            training=self.training,
            elapsed=self.elapsed,
            weights=self.network.all_weights(),
            cases=self.cases,
            outputs=self.outputs,
            weights_path=self.weights_path,
        )

    def result(self) -> SessionResult:
        return SessionResult(
            training=self.training,
            outputs=self.outputs,
            elapsed=self.elapsed,
            weights_path=self.weights_path,
        )


def _population(config: NetworkConfig, rng: np.random.Generator) -> Population:
    population: Population = RandomUniform(rng, config.min_random, config.max_random)
    if config.population == POPULATE_FILE:
        population = FromFile(config.weights_file, fallback=population)
    return population


def _load_cases(config: NetworkConfig) -> tuple[CaseSet, NetworkConfig]:
    sizes = config.layer_sizes
    inputs = read_cases(config.inputs_file, config.num_cases, sizes[0])

    outputs = None
    if config.train:
        outputs = read_cases(config.outputs_file, config.num_cases, sizes[-1])
    elif config.print_truth_table:
        try:
            outputs = read_cases(config.outputs_file, config.num_cases, sizes[-1])
        except (DimensionMismatch, IOUnavailable) as exc:
            warnings.warn(
                f"truth table unusable ({exc}), "
                "will not print it this run",
                ConfigWarning,
                stacklevel=3,
            )
            config = config.merged({"print_truth_table": False})
    return CaseSet(inputs=inputs, outputs=outputs), config


def build_session(
    config: NetworkConfig,
    *,
    rng: np.random.Generator | None = None,
    callbacks: Sequence[object] = (),
    echo: bool = True,
) -> Session:
    """Resolve ``config``, allocate and populate the network and load the cases.

    Raises :class:`~spreadnet.errors.SpreadnetError` subclasses when the
    configuration or the required files are unusable.
    """

    config = resolve_config(config)
    activation = activations.resolve(config.activation)
    if echo:
        print(echo_config(config, activation.name))

    network = Network(config.layer_sizes, activation, training=config.train)
    rng = rng if rng is not None else np.random.default_rng(config.seed)
    _population(config, rng).populate(network)

    cases, config = _load_cases(config)
    return Session(config=config, network=network, cases=cases, callbacks=callbacks)


def run_pipeline(
    config: NetworkConfig | Mapping[str, object],
    *,
    rng: np.random.Generator | None = None,
    callbacks: Sequence[object] = (),
    echo: bool = True,
) -> SessionResult:
    """Initialise, train or run, report, and save according to ``config``."""

    if not isinstance(config, NetworkConfig):
        config = NetworkConfig.from_mapping(config)
    session = build_session(config, rng=rng, callbacks=callbacks, echo=echo)
    cfg = session.config

    start = time.perf_counter()
    if cfg.train:
        print("\nTraining ...\n")
        session.train()
        if cfg.run_after_train:
            session.run()
    else:
        if cfg.print_weights:
            print("Weights: ")
            print(dump_weights(session.network.all_weights()))
        print("\nRunning ...\n")
        session.run()
    session.elapsed = time.perf_counter() - start

    if cfg.train and cfg.save_weights:
        session.save_weights()

    print(session.report())
    return session.result()


__all__ = ["Session", "build_session", "run_pipeline"]
