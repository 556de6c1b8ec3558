#!/usr/bin/env python3
"""
Command-line access to the prompt store and compiler.

Examples:
    python main.py list --category chat
    python main.py compile greeting --var name=Chen --var vip=true
    python main.py export --format yaml --output prompts.yaml
    python main.py import prompts.yaml --format yaml --save
    python main.py demo
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import config, SUPPORTED_FORMATS
from core import PromptCompiler
from core.prompts import PromptError
from utils import get_logger

logger = get_logger(__name__)

DEMO_TEMPLATES = {
    "simple-prompt": """
Hello {{name}},

Today we are going to talk about {{topic}}.

Please share your thoughts!
""",
    "expert-prompt": """
{{#if isExpert}}
Expert mode: an in-depth analysis of {{topic}}
{{else}}
Basic mode: an introduction to {{topic}}
{{/if}}

{{#each points}}
- {{this}}
{{/each}}
""",
}


def parse_value(raw: str) -> Any:
    """Turn a --var value into a boolean, a list (comma separated) or a string."""
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if "," in raw:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


def parse_variables(pairs: Optional[List[str]]) -> Dict[str, Any]:
    variables = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid variable '{pair}', expected key=value")
        variables[key.strip()] = parse_value(value)
    return variables


def cmd_list(compiler: PromptCompiler, args) -> None:
    templates = sorted(compiler.list_templates(args.category), key=lambda t: (t.category, t.name))
    for template in templates:
        print(f"  - {template.name} ({template.category})")
    print(f"{len(templates)} templates")


def cmd_compile(compiler: PromptCompiler, args) -> None:
    variables = parse_variables(args.var)
    print(compiler.compile(args.name, variables, {"format": not args.no_format}))


def cmd_export(compiler: PromptCompiler, args) -> None:
    document = compiler.export(args.format)
    if args.output:
        Path(args.output).write_text(document, encoding="utf-8")
        logger.info(f"Exported {len(compiler.list_templates())} templates to {args.output}")
    else:
        print(document)


def cmd_import(compiler: PromptCompiler, args) -> None:
    data = Path(args.file).read_text(encoding="utf-8")
    count = compiler.import_templates(data, args.format)
    print(f"Imported {count} templates")
    if args.save:
        compiler.save()


def cmd_demo(compiler: PromptCompiler, args) -> None:
    for name, content in DEMO_TEMPLATES.items():
        compiler.add_template(name, content, {"category": "demo"})

    print("Available templates:")
    for template in compiler.list_templates():
        print(f"  - {template.name} ({template.category})")

    print("\n1. Variable substitution:")
    print(compiler.compile("simple-prompt", {"name": "Chen", "topic": "artificial intelligence"}))

    print("\n2. Conditions and loops:")
    print(compiler.compile("expert-prompt", {
        "isExpert": True,
        "topic": "machine learning",
        "points": ["supervised learning", "unsupervised learning", "reinforcement learning"],
    }))

    print("\nYAML export:")
    print(compiler.export("yaml"))


COMMANDS = {
    "list": cmd_list,
    "compile": cmd_compile,
    "export": cmd_export,
    "import": cmd_import,
    "demo": cmd_demo,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage and compile prompt templates")
    parser.add_argument("--prompts-dir", default=config.paths.prompts_dir, help="Directory holding prompt templates")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List templates")
    list_parser.add_argument("--category", help="Only list templates in this category")

    compile_parser = subparsers.add_parser("compile", help="Compile a template")
    compile_parser.add_argument("name", help="Template name")
    compile_parser.add_argument("--var", action="append", metavar="KEY=VALUE",
                                help="Template variable (repeatable); a,b,c becomes a list")
    compile_parser.add_argument("--no-format", action="store_true", help="Only trim the output")

    export_parser = subparsers.add_parser("export", help="Export all templates")
    export_parser.add_argument("--format", choices=SUPPORTED_FORMATS, default="json")
    export_parser.add_argument("--output", help="Write to this file instead of stdout")

    import_parser = subparsers.add_parser("import", help="Import templates from an exported document")
    import_parser.add_argument("file", help="Exported JSON or YAML document")
    import_parser.add_argument("--format", choices=SUPPORTED_FORMATS, default="json")
    import_parser.add_argument("--save", action="store_true", help="Write templates to the prompts directory afterwards")

    subparsers.add_parser("demo", help="Register and compile sample templates")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        compiler = PromptCompiler(prompts_dir=args.prompts_dir)
        COMMANDS[args.command](compiler, args)
    except (PromptError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
