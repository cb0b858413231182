"""
Infrastructure module exports.

Configuration and bootstrap for the webhook pipeline.
"""

from .config import PipelineConfig, get_config, PublishBackendType, DEFAULT_SIGNATURE_ATTRIBUTE
from .bootstrap import PipelineBootstrap, bootstrap_pipeline

__all__ = [
    "PipelineConfig",
    "get_config",
    "PublishBackendType",
    "DEFAULT_SIGNATURE_ATTRIBUTE",
    "PipelineBootstrap",
    "bootstrap_pipeline",
]
