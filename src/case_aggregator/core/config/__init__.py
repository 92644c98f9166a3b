"""
Run configuration loading.
"""

from .pipeline_config import DAY_COUNTER_THRESHOLD, PipelineConfig, PipelineConfigLoader, build_config

__all__ = [
    "DAY_COUNTER_THRESHOLD",
    "PipelineConfig",
    "PipelineConfigLoader",
    "build_config",
]
