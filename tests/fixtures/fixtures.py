"""
Utilities for loading test fixtures for the prompt store and compiler tests.
"""

import shutil
from pathlib import Path

# Constants for test fixtures
FIXTURES_DIR = Path(__file__).parent
INPUT_DIR = FIXTURES_DIR / "input"
PROMPTS_DIR = INPUT_DIR / "prompts"
BROKEN_PROMPTS_DIR = INPUT_DIR / "broken"
EXPORTS_DIR = INPUT_DIR / "exports"

# Templates expected from PROMPTS_DIR, by name -> category
EXPECTED_TEMPLATES = {
    "hello": "greetings",
    "farewell": "greetings",
    "code_review": "review",
    "summarize": "writing",
    "translate": "general",
}

def copy_prompts(dest: Path, source: Path = PROMPTS_DIR) -> Path:
    """Copy a fixture prompt tree so tests can write to it."""
    target = Path(dest) / source.name
    shutil.copytree(source, target)
    return target

def load_export(name: str) -> str:
    """Load a serialized export document by file name."""
    with open(EXPORTS_DIR / name, "r", encoding="utf-8") as f:
        return f.read()
