"""Core components for pcspace.

Provides the configuration classes and the exception hierarchy shared by
every other subpackage.
"""

from .config import Config, FeatureSpaceConfig
from .exceptions import ConfigurationError, DataError, DataShapeError, PCSpaceError

__all__ = [
    "Config",
    "FeatureSpaceConfig",
    "PCSpaceError",
    "ConfigurationError",
    "DataError",
    "DataShapeError",
]
