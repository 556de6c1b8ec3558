"""
Exception types raised by the prompt store and compiler.
"""
from typing import Optional


class PromptError(Exception):
    """Base class for prompt store and compiler errors."""


class TemplateNotFoundError(PromptError, KeyError):
    """Raised when a template name is not present in the store."""
    
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Template '{name}' not found")
    
    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]


class UnsupportedFormatError(PromptError, ValueError):
    """Raised when export/import is asked for a format other than json or yaml."""
    
    def __init__(self, format: str):
        self.format = format
        super().__init__(f"Unsupported format: {format}")


class TemplateDecodeError(PromptError, ValueError):
    """Raised when a serialized document or template file cannot be decoded."""
    
    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source or "<import>"
        super().__init__(f"{self.source}: {message}")
