from .settings import (
    config,
    AppConfig,
    PathConfig,
    CompilerConfig,
    LoggingConfig,
    TEXT_EXTENSIONS,
    STRUCTURED_EXTENSIONS,
    SUPPORTED_FORMATS,
)

__all__ = [
    'config',
    'AppConfig',
    'PathConfig',
    'CompilerConfig',
    'LoggingConfig',
    'TEXT_EXTENSIONS',
    'STRUCTURED_EXTENSIONS',
    'SUPPORTED_FORMATS',
]
