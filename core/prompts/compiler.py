"""
Template compiler for the prompt system.

Compiling runs four single-pass rewrites over a template's raw content, each
consuming the previous stage's output:

1. Variable substitution: {{ name }}
2. Conditionals: {{#if name}} ... {{else}} ... {{/if}}
3. Loops: {{#each name}} ... {{this}} ... {{/each}}
4. Formatting: whitespace and punctuation normalization

Blocks do not nest. An opening marker pairs with the first matching closing
marker after it, so an {{#if}} inside another {{#if}} ends the outer block early
and leaves the remainder as literal text.
"""
from typing import Any, Callable, Dict, Mapping, Optional
import re

from config import config
from core.prompts.errors import TemplateNotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)

_IDENTIFIER = r'([A-Za-z0-9_]+)'

VARIABLE_PATTERN = re.compile(r'{{\s*' + _IDENTIFIER + r'\s*}}')
IF_OPEN_PATTERN = re.compile(r'{{#if\s+' + _IDENTIFIER + r'\s*}}')
EACH_OPEN_PATTERN = re.compile(r'{{#each\s+' + _IDENTIFIER + r'\s*}}')
THIS_PATTERN = re.compile(r'{{\s*this\s*}}')

IF_CLOSE = '{{/if}}'
EACH_CLOSE = '{{/each}}'
ELSE_MARKER = '{{else}}'

_BLANK_RUN_PATTERN = re.compile(r'\n\s*\n\s*\n')
_WHITESPACE_PATTERN = re.compile(r'\s+')
_PUNCTUATION_PATTERN = re.compile(r'\s*([.,!?])\s*')


def to_text(value: Any) -> str:
    """String form of a variable value as it appears in compiled output."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ','.join('' if item is None else to_text(item) for item in value)
    return str(value)


def is_truthy(value: Any) -> bool:
    """
    Truthiness used by {{#if}}.

    None, False, zero (including NaN) and the empty string are falsy.
    Everything else is truthy, empty lists and dicts included.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ''
    if isinstance(value, (int, float)):
        return value == value and value != 0
    return True


def _rewrite_blocks(
    content: str,
    open_pattern: re.Pattern,
    close_marker: str,
    render: Callable[[str, str], str]
) -> str:
    """
    Replace every ``open ... close`` block left to right in one pass.

    Each opener pairs with the nearest closer after it. Replaced text is not
    scanned again. Once an opener has no closer, no later opener can have one,
    so the rest of the content is kept verbatim.
    """
    parts = []
    position = 0
    while True:
        match = open_pattern.search(content, position)
        if match is None:
            break
        close_at = content.find(close_marker, match.end())
        if close_at == -1:
            break
        parts.append(content[position:match.start()])
        parts.append(render(match.group(1), content[match.end():close_at]))
        position = close_at + len(close_marker)

    parts.append(content[position:])
    return ''.join(parts)


def replace_variables(content: str, variables: Mapping[str, Any]) -> str:
    """Substitute {{ name }} markers; unknown or None values leave the marker as-is."""
    def substitute(match):
        value = variables.get(match.group(1))
        return match.group(0) if value is None else to_text(value)

    return VARIABLE_PATTERN.sub(substitute, content)


def render_conditions(content: str, variables: Mapping[str, Any]) -> str:
    """Resolve {{#if name}} blocks, with an optional {{else}} branch."""
    def render(key, body):
        truthy = is_truthy(variables.get(key))
        else_at = body.find(ELSE_MARKER)
        if else_at == -1:
            return body if truthy else ''
        if truthy:
            return body[:else_at].strip()
        return body[else_at + len(ELSE_MARKER):].strip()

    return _rewrite_blocks(content, IF_OPEN_PATTERN, IF_CLOSE, render)


def render_loops(content: str, variables: Mapping[str, Any]) -> str:
    """Expand {{#each name}} blocks once per item; non-sequences render as ''."""
    def render(key, body):
        items = variables.get(key)
        if not isinstance(items, (list, tuple)):
            return ''
        return ''.join(
            THIS_PATTERN.sub(lambda _: '' if item is None else to_text(item), body)
            for item in items
        )

    return _rewrite_blocks(content, EACH_OPEN_PATTERN, EACH_CLOSE, render)


def format_output(content: str, enabled: bool = True) -> str:
    """
    Normalize whitespace of compiled text.

    Always trims the document. When enabled, also collapses three or more
    newlines (with any whitespace between them) to one blank line, squeezes
    whitespace inside each line, and leaves exactly one space after each of
    ``. , ! ?`` and none before it.
    """
    out = content.strip()
    if not enabled:
        return out

    out = _BLANK_RUN_PATTERN.sub('\n\n', out)
    lines = []
    for line in out.split('\n'):
        line = _WHITESPACE_PATTERN.sub(' ', line).strip()
        line = _PUNCTUATION_PATTERN.sub(r'\1 ', line).strip()
        lines.append(line)
    return '\n'.join(lines).strip()


class TemplateCompiler:
    """
    Compiles stored templates into final prompt text.

    The compiler keeps no state besides the store it reads from and the
    default for the formatting stage.

    Example:
        compiler = TemplateCompiler(store)
        compiler.compile("greeting", {"name": "Chen"})
        compiler.compile("greeting", {"name": "Chen"}, {"format": False})
    """

    def __init__(self, store, format_output: Optional[bool] = None):
        """
        Args:
            store: Object with a get_template(name) method (normally a PromptStore)
            format_output: Default for options["format"] (defaults to config.compiler.format_output)
        """
        self.store = store
        self.format_output = config.compiler.format_output if format_output is None else format_output

    def compile(
        self,
        name: str,
        variables: Optional[Dict[str, Any]] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Compile the template called ``name``.

        Args:
            name: Template name
            variables: Values for {{name}}, {{#if name}} and {{#each name}} markers
            options: Compile options; "format" (default True) toggles normalization

        Returns:
            The compiled text

        Raises:
            TemplateNotFoundError: If the store has no template called ``name``
        """
        template = self.store.get_template(name)
        if template is None:
            raise TemplateNotFoundError(name)

        logger.debug(f"Compiling template '{name}'")
        return self.compile_text(template.content, variables, options)

    def compile_text(
        self,
        content: str,
        variables: Optional[Dict[str, Any]] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> str:
        """Compile raw template text without a store lookup."""
        variables = variables or {}
        options = options or {}

        content = replace_variables(content, variables)
        content = render_conditions(content, variables)
        content = render_loops(content, variables)

        enabled = options.get('format', self.format_output) is not False
        return format_output(content, enabled)
