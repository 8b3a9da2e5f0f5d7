"""Network configuration and its validation."""

from __future__ import annotations

import dataclasses
import json
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, List, Mapping, Optional

import yaml

from ..errors import ConfigError, ConfigIncomplete, ConfigWarning, IOUnavailable
from .records import decode_records

DEFAULT_CONFIG = "test.bin"

POPULATE_RANDOM = 0
POPULATE_MANUAL = 1
POPULATE_FILE = 2


@dataclass(frozen=True)
class NetworkConfig:
    """Every configuration field, plus the set of fields the source defined."""

    learning_rate: float = 0.3
    layer_sizes: List[int] = field(default_factory=list)
    population: int = POPULATE_RANDOM
    train: bool = True
    min_random: float = -1.5
    max_random: float = 1.5
    error_threshold: float = 2e-4
    max_iterations: int = 100000
    print_weights: bool = False
    print_truth_table: bool = True
    run_after_train: bool = True
    save_weights: bool = False
    activation: Optional[str] = None
    num_cases: int = 0
    keep_alive: int = 0
    weights_file: Optional[str] = None
    output_weights_file: Optional[str] = None
    inputs_file: Optional[str] = None
    outputs_file: Optional[str] = None
    save_interval: int = 0
    distinct_files: bool = False
    seed: Optional[int] = None
    snapshot_dir: str = "."
    defined: FrozenSet[str] = frozenset()

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls) if f.name != "defined"]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "NetworkConfig":
        """Build a config from ``mapping``; every key present counts as defined."""

        known = set(cls.field_names())
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        values = dict(mapping)
        if "layer_sizes" in values:
            values["layer_sizes"] = [int(n) for n in values["layer_sizes"]]
        return cls(**values, defined=frozenset(values))

    def merged(self, overrides: Mapping[str, Any]) -> "NetworkConfig":
        other = NetworkConfig.from_mapping(overrides)
        values = {name: getattr(other, name) for name in other.defined}
        return dataclasses.replace(self, **values, defined=self.defined | other.defined)

    def is_defined(self, name: str) -> bool:
        return name in self.defined

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.field_names()}


def _read(path: Path, binary: bool = False) -> Any:
    try:
        return path.read_bytes() if binary else path.read_text()
    except FileNotFoundError as exc:
        raise IOUnavailable(f"configuration file not found: {path}") from exc
    except OSError as exc:
        raise IOUnavailable(f"cannot read configuration {path}: {exc}") from exc


def read_mapping(path: str | Path) -> Mapping[str, Any]:
    """Read a JSON or YAML (by suffix) configuration mapping."""

    path = Path(path)
    text = _read(path)
    try:
        if path.suffix in {".yml", ".yaml"}:
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text or "{}")
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path}: configuration must be a mapping")
    return data


def load_config(path: str | Path) -> NetworkConfig:
    """Load a compiled record stream, or a JSON/YAML mapping by suffix."""

    path = Path(path)
    if path.suffix in {".json", ".yml", ".yaml"}:
        return NetworkConfig.from_mapping(read_mapping(path))
    return NetworkConfig.from_mapping(decode_records(_read(path, binary=True)))


def _warn(message: str) -> None:
    warnings.warn(message, ConfigWarning, stacklevel=3)


def resolve_config(config: NetworkConfig) -> NetworkConfig:
    """Apply documented defaults to undefined fields.

    Each default is announced with a :class:`ConfigWarning`. Missing topology,
    case count, inputs file, or (when training) outputs file cannot be
    defaulted and raise :class:`ConfigIncomplete` together.
    """

    defined = config.is_defined
    updates: dict[str, Any] = {}
    missing: List[str] = []

    train = config.train
    if not defined("train"):
        _warn("have not specified whether to train or run, will train")
        train = updates["train"] = True

    if not defined("learning_rate"):
        _warn("learning rate not defined, setting it to 0.3")
        updates["learning_rate"] = 0.3

    if not defined("layer_sizes"):
        missing.append("layer_sizes")
    elif len(config.layer_sizes) < 2 or any(n < 1 for n in config.layer_sizes):
        raise ConfigError(
            f"layer_sizes needs at least two positive layer sizes, got {config.layer_sizes}"
        )

    population = config.population
    if not defined("population") or population not in (POPULATE_RANDOM, POPULATE_FILE):
        _warn("population method missing or not valid, will use random values")
        population = updates["population"] = POPULATE_RANDOM

    low = config.min_random
    high = config.max_random
    if not defined("min_random"):
        _warn("min_random not defined, will set it to -1.5")
        low = -1.5
    if not defined("max_random"):
        _warn("max_random not defined, will set it to 1.5")
        high = 1.5
    if low > high:
        _warn("min_random is larger than max_random, swapping them")
        low, high = high, low
    updates["min_random"], updates["max_random"] = low, high

    if not defined("error_threshold"):
        _warn("average error cutoff not defined, setting it to 2e-4")
        updates["error_threshold"] = 2e-4

    if not defined("max_iterations"):
        _warn("max iterations not defined, setting it to 100000")
        updates["max_iterations"] = 100000

    if not defined("print_weights"):
        _warn("did not specify whether to print weights, will not print")
        updates["print_weights"] = False

    print_truths = config.print_truth_table
    if not defined("print_truth_table"):
        _warn("did not specify whether to print the truth table, will print")
        print_truths = updates["print_truth_table"] = True

    if train and not defined("run_after_train"):
        _warn("did not specify whether to run after training, will run after training")
        updates["run_after_train"] = True

    save = config.save_weights
    if not defined("save_weights"):
        _warn("did not specify whether to save weights, not saving them")
        save = updates["save_weights"] = False

    if not defined("num_cases"):
        missing.append("num_cases")
    elif config.num_cases < 1:
        raise ConfigError(f"num_cases must be at least 1, got {config.num_cases}")

    if not defined("activation"):
        _warn("activation function not defined, you get a sigmoid")
        updates["activation"] = "sigmoid"

    if not defined("inputs_file"):
        missing.append("inputs_file")

    if not defined("outputs_file"):
        if train:
            missing.append("outputs_file")
        elif print_truths:
            _warn("truth table not defined, will not print the truth table")
            updates["print_truth_table"] = False

    if population == POPULATE_FILE and not defined("weights_file"):
        _warn("weights file not present with population set to file, populating randomly")
        updates["population"] = POPULATE_RANDOM

    if save and train and not defined("output_weights_file"):
        _warn("save_weights is set but no output weights file is defined, not saving")
        updates["save_weights"] = False

    if missing:
        raise ConfigIncomplete(missing)

    return dataclasses.replace(config, **updates)


__all__ = [
    "DEFAULT_CONFIG",
    "POPULATE_RANDOM",
    "POPULATE_MANUAL",
    "POPULATE_FILE",
    "NetworkConfig",
    "load_config",
    "read_mapping",
    "resolve_config",
]
