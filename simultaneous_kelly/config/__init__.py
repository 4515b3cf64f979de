"""Configuration module for Simultaneous Kelly."""

from .settings import (
    SimultaneousKellyConfig,
    OptimizationConfig,
    SampleConfig,
    LoggingConfig,
    CONFIG
)

__all__ = [
    'SimultaneousKellyConfig',
    'OptimizationConfig',
    'SampleConfig',
    'LoggingConfig',
    'CONFIG'
]
