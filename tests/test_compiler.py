"""
Unit tests for the template compiler stages and TemplateCompiler.
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path
sys.path.append(str(Path(__file__).parents[1]))

from core.prompts import PromptStore, TemplateCompiler, TemplateNotFoundError
from core.prompts.compiler import (
    format_output, is_truthy, render_conditions, render_loops,
    replace_variables, to_text
)


@pytest.fixture
def store(tmp_path):
    return PromptStore(tmp_path / "prompts")


@pytest.fixture
def compiler(store):
    return TemplateCompiler(store, format_output=True)


def compile_text(content, variables=None, **options):
    return TemplateCompiler(store=None, format_output=True).compile_text(content, variables, options)


# Variable substitution
def test_substitutes_known_variable(compiler, store):
    store.add_template("greeting", "Hello {{name}}")
    assert compiler.compile("greeting", {"name": "Chen"}) == "Hello Chen"


def test_leaves_unknown_placeholder_untouched(compiler, store):
    store.add_template("greeting", "Hello {{name}}")
    assert compiler.compile("greeting", {}) == "Hello {{name}}"
    assert compiler.compile("greeting") == "Hello {{name}}"


def test_none_value_leaves_placeholder():
    assert replace_variables("Hi {{ who }}", {"who": None}) == "Hi {{ who }}"


def test_whitespace_inside_marker_is_tolerated():
    assert replace_variables("{{  who}}/{{who  }}/{{ who }}", {"who": "x"}) == "x/x/x"


def test_non_identifier_markers_are_literal():
    content = "{{first name}} {{ a-b }} {{}}"
    assert replace_variables(content, {"first": 1, "a": 2}) == content


def test_values_use_their_text_form():
    variables = {"flag": True, "off": False, "count": 3, "ratio": 2.0, "items": ["a", "b"]}
    result = replace_variables("{{flag}} {{off}} {{count}} {{ratio}} {{items}}", variables)
    assert result == "true false 3 2 a,b"


@pytest.mark.parametrize("value, expected", [
    (True, "true"),
    (False, "false"),
    (0, "0"),
    (1.5, "1.5"),
    (4.0, "4"),
    ("text", "text"),
    ([1, None, "x"], "1,,x"),
    (("a", "b"), "a,b"),
])
def test_to_text(value, expected):
    assert to_text(value) == expected


# Conditionals
@pytest.mark.parametrize("variables, expected", [
    ({"admin": True}, "A"),
    ({"admin": False}, "B"),
    ({"admin": None}, "B"),
    ({}, "B"),
])
def test_if_else_selects_branch(compiler, store, variables, expected):
    store.add_template("role", "{{#if admin}}A{{else}}B{{/if}}")
    assert compiler.compile("role", variables) == expected


@pytest.mark.parametrize("value, truthy", [
    (None, False),
    (False, False),
    (0, False),
    (0.0, False),
    (float("nan"), False),
    ("", False),
    (True, True),
    (1, True),
    (-2.5, True),
    ("0", True),
    ("false", True),
    ([], True),
    ({}, True),
])
def test_truthiness(value, truthy):
    assert is_truthy(value) is truthy


def test_if_without_else_keeps_body_untrimmed():
    content = "[{{#if on}} kept {{/if}}]"
    assert render_conditions(content, {"on": 1}) == "[ kept ]"
    assert render_conditions(content, {"on": 0}) == "[]"


def test_if_else_branches_are_trimmed():
    content = "[{{#if on}}\n  yes  \n{{else}}\n  no  \n{{/if}}]"
    assert render_conditions(content, {"on": True}) == "[yes]"
    assert render_conditions(content, {}) == "[no]"


def test_multiple_blocks_are_resolved_independently():
    content = "{{#if a}}A{{/if}}-{{#if b}}B{{else}}b{{/if}}-{{#if c}}C{{/if}}"
    assert render_conditions(content, {"a": True, "c": "yes"}) == "A-b-C"


def test_nested_if_closes_at_first_end_marker():
    content = "{{#if a}}X{{#if b}}Y{{/if}}Z{{/if}}"
    assert render_conditions(content, {"a": True, "b": False}) == "X{{#if b}}YZ{{/if}}"
    assert render_conditions(content, {"a": False, "b": True}) == "Z{{/if}}"


def test_unclosed_if_is_left_verbatim():
    content = "start {{#if a}} never closed"
    assert render_conditions(content, {"a": True}) == content


# Loops
def test_each_repeats_body_per_item(compiler, store):
    store.add_template("list", "{{#each xs}}-{{this}} {{/each}}")
    assert compiler.compile("list", {"xs": ["a", "b"]}) == "-a -b"


@pytest.mark.parametrize("value", ["not-an-array", None, 5, {"a": 1}])
def test_each_over_non_sequence_is_empty(compiler, store, value):
    store.add_template("list", "{{#each xs}}-{{this}} {{/each}}")
    assert compiler.compile("list", {"xs": value}) == ""


def test_each_accepts_tuples_and_stringifies_items():
    content = "{{#each xs}}[{{ this }}]{{/each}}"
    assert render_loops(content, {"xs": (1, True, 2.0, None)}) == "[1][true][2][]"


def test_each_body_has_no_outer_scope():
    content = "{{#each xs}}{{this}}{{other}}{{/each}}"
    assert render_loops(content, {"xs": ["a"], "other": "!"}) == "a{{other}}"


def test_empty_sequence_renders_nothing():
    assert render_loops("a{{#each xs}}x{{/each}}b", {"xs": []}) == "ab"


# Stage ordering
def test_substituted_values_feed_later_stages():
    variables = {"snippet": "{{#if on}}yes{{/if}}", "on": True}
    assert compile_text("{{snippet}}", variables) == "yes"


def test_outer_variables_are_substituted_before_loops():
    content = "{{#each xs}}{{this}}@{{host}} {{/each}}"
    assert compile_text(content, {"xs": ["a", "b"], "host": "h"}) == "a@h b@h"


def test_if_inside_each_sees_outer_variables():
    content = "{{#each xs}}{{#if loud}}!{{/if}}{{this}}{{/each}}"
    assert compile_text(content, {"xs": ["a", "b"], "loud": True}, format=False) == "!a!b"


# Formatting
def test_format_disabled_preserves_blank_line(compiler, store):
    store.add_template("lines", "Line1\n\nLine2")
    assert compiler.compile("lines", {}, {"format": False}) == "Line1\n\nLine2"


def test_format_disabled_only_trims():
    assert compile_text("  a   b\n\n\n\nc  ", format=False) == "a   b\n\n\n\nc"


def test_format_collapses_blank_runs_to_single_blank_line(compiler, store):
    store.add_template("lines", "Line1\n\n\n\nLine2")
    assert compiler.compile("lines") == "Line1\n\nLine2"


def test_format_treats_whitespace_only_lines_as_blank():
    assert format_output("A\n   \n\t\nB") == "A\n\nB"


def test_format_keeps_single_blank_line():
    assert format_output("A\n\nB\nC") == "A\n\nB\nC"


def test_format_squeezes_whitespace_within_lines():
    assert format_output("  a   b\t\tc  \n  d ") == "a b c\nd"


def test_format_normalizes_punctuation_spacing():
    assert format_output("Hello ,world !How are you ?") == "Hello, world! How are you?"
    assert format_output("Wait . . . what") == "Wait. . . what"


def test_format_option_none_still_formats():
    assert compile_text("a   b", format=None) == "a b"


def test_compiler_default_can_disable_formatting(store):
    compiler = TemplateCompiler(store, format_output=False)
    store.add_template("lines", "a   b")
    assert compiler.compile("lines") == "a   b"
    assert compiler.compile("lines", options={"format": True}) == "a b"


# Errors
def test_missing_template_raises_not_found(compiler):
    with pytest.raises(TemplateNotFoundError) as exc_info:
        compiler.compile("non-existent-template")
    assert exc_info.value.name == "non-existent-template"
    assert str(exc_info.value) == "Template 'non-existent-template' not found"


def test_not_found_is_a_key_error(compiler):
    with pytest.raises(KeyError):
        compiler.compile("missing", {"name": "x"})


def test_malformed_markers_never_raise():
    content = "{{#each}} {{#if}} {{/if}} {{else}} {{ }} {{#each xs}"
    assert compile_text(content, {"xs": [1]}, format=False) == content


# Full template
def test_compiles_multiline_template(compiler, store):
    store.add_template("expert", """
{{#if isExpert}}
Expert mode: {{topic}}
{{else}}
Basic mode: {{topic}}
{{/if}}


{{#each points}}
- {{this}}
{{/each}}
""")
    result = compiler.compile("expert", {
        "isExpert": True,
        "topic": "machine learning",
        "points": ["supervised", "unsupervised"],
    })
    assert result == "Expert mode: machine learning\n\n- supervised\n\n- unsupervised"
