"""Training loop and pipeline assembly."""

from .pipelines import Session, build_session, run_pipeline
from .trainer import MAX_SNAPSHOT_FILES, Trainer, WeightSnapshotter

__all__ = [
    "MAX_SNAPSHOT_FILES",
    "Session",
    "Trainer",
    "WeightSnapshotter",
    "build_session",
    "run_pipeline",
]
