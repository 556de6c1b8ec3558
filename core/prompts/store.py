"""
PromptStore class for the prompt system.

This module owns the keyed collection of prompt templates and moves it to and
from a directory tree (one subdirectory per category) or a serialized JSON/YAML
document.
"""
from typing import Dict, List, Optional, Any, Iterator, Set, Union
from datetime import date, datetime
import json
from pathlib import Path

import yaml

from config import config, TEXT_EXTENSIONS, STRUCTURED_EXTENSIONS, SUPPORTED_FORMATS
from core.prompts.errors import TemplateDecodeError, UnsupportedFormatError
from core.prompts.template import PromptTemplate
from utils.file_ops import read_text_file, write_text_file, load_yaml_file, file_mtime
from utils.logging import get_logger

logger = get_logger(__name__)


class PromptStore:
    """
    Keyed, file-backed collection of prompt templates.

    Templates are keyed by name; adding a template under an existing name
    replaces it. Construction scans ``base_dir``: every immediate subdirectory
    is a category, every ``.txt``/``.md``/``.template`` file in it becomes one
    template and every ``.yaml``/``.yml`` file contributes the entries of its
    ``prompts`` list.

    The store is not thread-safe. Callers sharing one instance across threads
    must serialize access themselves.

    Example:
        store = PromptStore("prompts")
        store.add_template("greeting", "Hello {{name}}", {"category": "chat"})
        store.save()  # writes prompts/chat/greeting.template
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None, template_extension: Optional[str] = None):
        """
        Create the store and load every template under ``base_dir``.

        Args:
            base_dir: Root directory for templates (defaults to config.paths.prompts_dir)
            template_extension: Extension used by save() (defaults to config.compiler.template_extension)

        Raises:
            TemplateDecodeError: If a YAML document or text file cannot be decoded
            OSError: If the directory or a file cannot be read
        """
        self.base_dir = Path(base_dir or config.paths.prompts_dir)
        self.template_extension = (template_extension or config.compiler.template_extension).lstrip(".")
        self._templates: Dict[str, PromptTemplate] = {}
        self._load_from_directory()

    def _load_from_directory(self) -> None:
        """Create the base directory if needed, then load each category subdirectory."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

        for entry in sorted(self.base_dir.iterdir()):
            if entry.is_dir():
                self._load_category_dir(entry)

        logger.info(f"Loaded {len(self._templates)} templates from {self.base_dir}")

    def _load_category_dir(self, dir_path: Path) -> None:
        for file_path in sorted(dir_path.iterdir()):
            if not file_path.is_file():
                continue

            extension = file_path.suffix.lstrip(".").lower()
            if extension in TEXT_EXTENSIONS:
                self._load_template_file(file_path)
            elif extension in STRUCTURED_EXTENSIONS:
                self._load_yaml_file(file_path)

    def _load_template_file(self, file_path: Path) -> None:
        """Load one plain-text template named after the file's base name."""
        try:
            content = read_text_file(file_path)
        except UnicodeDecodeError as e:
            raise TemplateDecodeError(f"file is not valid UTF-8 ({e.reason})", source=str(file_path)) from e

        template = PromptTemplate(
            name=file_path.stem,
            content=content,
            category=file_path.parent.name,
            file_path=str(file_path),
            last_modified=file_mtime(file_path)
        )
        self._templates[template.name] = template
        logger.debug(f"Loaded template '{template.name}' from {file_path}")

    def _load_yaml_file(self, file_path: Path) -> None:
        """Load every entry of a ``{prompts: [...]}`` YAML document."""
        source = str(file_path)
        try:
            data = load_yaml_file(file_path)
        except UnicodeDecodeError as e:
            raise TemplateDecodeError(f"file is not valid UTF-8 ({e.reason})", source=source) from e
        except yaml.YAMLError as e:
            raise TemplateDecodeError(f"invalid YAML: {e}", source=source) from e

        if data is None:
            return
        if not isinstance(data, dict):
            raise TemplateDecodeError("expected a mapping with a 'prompts' list", source=source)

        prompts = data.get("prompts")
        if prompts is None:
            return
        if not isinstance(prompts, list):
            raise TemplateDecodeError("'prompts' must be a list", source=source)

        mtime = file_mtime(file_path)
        for index, entry in enumerate(prompts):
            _check_entry(entry, index, source)
            template = PromptTemplate(
                name=entry["name"],
                content=entry.get("content"),
                category=entry.get("category"),
                type=entry.get("type"),
                metadata=entry.get("metadata"),
                file_path=source,
                last_modified=mtime
            )
            self._templates[template.name] = template
            logger.debug(f"Loaded template '{template.name}' from {file_path}")

    def reload(self) -> None:
        """Drop the in-memory collection and re-scan the base directory."""
        self._templates.clear()
        self._load_from_directory()

    def add_template(self, name: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> PromptTemplate:
        """
        Insert or replace a template.

        Args:
            name: Template name
            content: Raw template text
            metadata: Optional metadata; its "category" and "type" keys populate those fields

        Returns:
            The stored PromptTemplate
        """
        metadata = metadata or {}
        template = PromptTemplate(
            name=name,
            content=content,
            category=metadata.get("category"),
            type=metadata.get("type"),
            metadata=metadata,
            file_path=None,
            last_modified=datetime.now()
        )
        self._templates[name] = template
        logger.debug(f"Registered template '{name}' in category '{template.category}'")
        return template

    def get_template(self, name: str) -> Optional[PromptTemplate]:
        """Return the template called ``name``, or None."""
        return self._templates.get(name)

    def list_templates(self, category: Optional[str] = None) -> List[PromptTemplate]:
        """
        List templates in insertion order, optionally filtered by category.

        Order follows the underlying collection and is not stable across
        reloads; sort the result if a fixed order matters.
        """
        if category is None:
            return list(self._templates.values())
        return [t for t in self._templates.values() if t.category == category]

    def categories(self) -> Set[str]:
        """Return all categories in use."""
        return {t.category for t in self._templates.values()}

    def remove_template(self, name: str) -> None:
        """
        Remove a template from memory. No-op if absent.

        Files written by save() or loaded at construction are left on disk.
        """
        if self._templates.pop(name, None) is not None:
            logger.debug(f"Removed template '{name}'")

    def save(self) -> None:
        """
        Write every template to ``<base_dir>/<category>/<name>.<extension>``.

        Existing files are overwritten. Not transactional: if a write fails the
        OSError propagates and templates written before it stay on disk.
        """
        self.base_dir.mkdir(parents=True, exist_ok=True)

        for template in self._templates.values():
            file_path = self.base_dir / template.category / f"{template.name}.{self.template_extension}"
            write_text_file(file_path, template.content)
            logger.debug(f"Saved template '{template.name}' to {file_path}")

        logger.info(f"Saved {len(self._templates)} templates to {self.base_dir}")

    def export(self, format: str = "json") -> str:
        """
        Serialize all templates into a single document.

        Args:
            format: "json" for an array of template objects, "yaml" for the
                same array under a top-level "prompts" key

        Returns:
            The serialized document

        Raises:
            UnsupportedFormatError: If format is neither "json" nor "yaml"
        """
        _check_format(format)
        templates = [t.to_dict() for t in self._templates.values()]

        if format == "json":
            return json.dumps(templates, indent=2, ensure_ascii=False, default=_json_default)
        return yaml.safe_dump({"prompts": templates}, sort_keys=False, allow_unicode=True)

    def import_templates(self, data: str, format: str = "json") -> int:
        """
        Merge templates from a document produced by export().

        Entries are merged in document order, replacing templates with the same
        name. Imported templates have no file_path. There is no rollback: if an
        entry is invalid, entries before it have already been merged when
        TemplateDecodeError is raised.

        Args:
            data: Serialized document
            format: "json" or "yaml"

        Returns:
            Number of templates merged

        Raises:
            UnsupportedFormatError: If format is neither "json" nor "yaml"
            TemplateDecodeError: If the document or one of its entries is malformed
        """
        _check_format(format)
        entries = _decode_document(data, format)

        imported = 0
        for index, entry in enumerate(entries):
            _check_entry(entry, index, "<import>")
            template = PromptTemplate.from_dict(entry)
            self._templates[template.name] = template
            imported += 1

        logger.info(f"Imported {imported} templates from {format} document")
        return imported

    def __contains__(self, name: str) -> bool:
        return name in self._templates

    def __iter__(self) -> Iterator[str]:
        """Iterate over template names."""
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)


def _check_format(format: str) -> None:
    if format not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(format)


def _json_default(value: Any) -> str:
    """Serialize dates YAML decoded natively inside metadata as ISO text."""
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _check_entry(entry: Any, index: int, source: str) -> None:
    if not isinstance(entry, dict):
        raise TemplateDecodeError(f"entry {index} is not a mapping", source=source)
    if not entry.get("name"):
        raise TemplateDecodeError(f"entry {index} has no name", source=source)
    if entry.get("content") is not None and not isinstance(entry["content"], str):
        raise TemplateDecodeError(f"entry {index} content is not a string", source=source)
    if entry.get("metadata") is not None and not isinstance(entry["metadata"], dict):
        raise TemplateDecodeError(f"entry {index} metadata is not a mapping", source=source)


def _decode_document(data: str, format: str) -> List[Any]:
    """Parse an exported document into its list of entries."""
    if format == "json":
        try:
            entries = json.loads(data)
        except json.JSONDecodeError as e:
            raise TemplateDecodeError(f"invalid JSON: {e}") from e
        if not isinstance(entries, list):
            raise TemplateDecodeError("expected a JSON array of templates")
        return entries

    try:
        parsed = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise TemplateDecodeError(f"invalid YAML: {e}") from e
    if parsed is None:
        return []
    if not isinstance(parsed, dict):
        raise TemplateDecodeError("expected a mapping with a 'prompts' list")
    entries = parsed.get("prompts") or []
    if not isinstance(entries, list):
        raise TemplateDecodeError("'prompts' must be a list")
    return entries
