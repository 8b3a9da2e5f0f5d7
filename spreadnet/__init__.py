"""spreadnet public API."""

from .config import NetworkConfig, load_config
from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.network import Network
from .training.pipelines import build_session, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Network",
    "NetworkConfig",
    "Trainer",
    "activations",
    "types",
    "build_session",
    "load_config",
    "run_pipeline",
]
