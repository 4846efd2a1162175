"""Utility modules for experiment tracking.

Submodules:
- mlflow: MLflow run orchestration and logging helpers

Import examples:
    from utils import mlflow       # MLflow utilities
    from utils.mlflow.io import setup_mlflow_tracking
"""

import warnings

# Suppress MLflow FutureWarning about filesystem backend deprecation
warnings.filterwarnings("ignore", category=FutureWarning, module="mlflow")

from . import mlflow  # noqa: E402

__all__ = [
    "mlflow",
]
