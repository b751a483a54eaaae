"""
Storygrid Core Module

Contains core systems including configuration, constants, exceptions, and logging.
"""

from .config import StorygridConfig, get_default_config, load_config, save_config
from .constants import (
    SHOT_SIZE_LABELS,
    AspectRatio,
    GridLayout,
    Language,
    ShotSize,
)
from .exceptions import (
    ConfigurationError,
    ContentBlockedError,
    InvalidConfigError,
    LLMError,
    MissingConfigError,
    NoResultError,
    ParseError,
    RateLimitError,
    ServiceError,
    ServiceTimeoutError,
    StoryboardError,
    StorygridError,
)
from .logging_config import LogLevel, get_logger, setup_logging

__all__ = [
    'StorygridConfig',
    'get_default_config',
    'load_config',
    'save_config',
    'setup_logging',
    'get_logger',
    'LogLevel',
    # Vocabularies
    'ShotSize',
    'SHOT_SIZE_LABELS',
    'GridLayout',
    'AspectRatio',
    'Language',
    # Exceptions
    'StorygridError',
    'ConfigurationError',
    'MissingConfigError',
    'InvalidConfigError',
    'StoryboardError',
    'NoResultError',
    'LLMError',
    'ServiceError',
    'RateLimitError',
    'ServiceTimeoutError',
    'ContentBlockedError',
    'ParseError',
]
