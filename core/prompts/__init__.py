"""
Prompt template storage and compilation.

The main components are:
- PromptStore: keyed, file-backed collection of templates
- PromptTemplate: a named template with category, type and metadata
- TemplateCompiler: turns a stored template plus variables into final text

Example usage:
    from core.prompts import PromptStore, TemplateCompiler

    store = PromptStore("prompts")
    store.add_template("greeting", "Hello {{name}}{{#if vip}}, welcome back{{/if}}!")

    compiler = TemplateCompiler(store)
    compiler.compile("greeting", {"name": "Chen", "vip": True})
    # -> "Hello Chen, welcome back!"
"""

from core.prompts.errors import (
    PromptError,
    TemplateNotFoundError,
    UnsupportedFormatError,
    TemplateDecodeError,
)
from core.prompts.template import PromptTemplate
from core.prompts.store import PromptStore
from core.prompts.compiler import TemplateCompiler

__all__ = [
    'PromptError',
    'TemplateNotFoundError',
    'UnsupportedFormatError',
    'TemplateDecodeError',
    'PromptTemplate',
    'PromptStore',
    'TemplateCompiler',
]
