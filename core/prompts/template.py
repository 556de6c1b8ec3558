"""
PromptTemplate class for the prompt store.
"""
from typing import Dict, Any, Optional
from datetime import datetime

DEFAULT_CATEGORY = "general"
DEFAULT_TYPE = "text"


class PromptTemplate:
    """
    A named prompt template with bookkeeping fields.

    Attributes:
        name: Unique identifier for the template within a store
        category: Grouping label, also the storage subdirectory
        content: Raw template text with {{...}} markers
        type: Free-form tag carried through storage (not interpreted)
        metadata: Opaque key/value pairs preserved through storage
        file_path: File the template was loaded from, None if never loaded from disk
        last_modified: File mtime on load, or creation time for in-memory templates
    """

    def __init__(
        self,
        name: str,
        content: str,
        category: Optional[str] = None,
        type: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        file_path: Optional[str] = None,
        last_modified: Optional[datetime] = None
    ):
        """Initialize a prompt template, applying category/type defaults."""
        self.name = str(name)
        self.content = content if content is not None else ""
        self.category = str(category) if category else DEFAULT_CATEGORY
        self.type = str(type) if type else DEFAULT_TYPE
        self.metadata = dict(metadata) if metadata else {}
        self.file_path = str(file_path) if file_path is not None else None
        self.last_modified = last_modified or datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the template to the exported document shape."""
        return {
            "name": self.name,
            "category": self.category,
            "content": self.content,
            "type": self.type,
            "metadata": self.metadata,
            "filePath": self.file_path,
            "lastModified": self.last_modified.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PromptTemplate':
        """
        Create a template from an exported entry. "filePath" is not carried over.

        Args:
            data: Mapping with at least a "name" key

        Returns:
            The new PromptTemplate
        """
        return cls(
            name=data["name"],
            content=data.get("content"),
            category=data.get("category"),
            type=data.get("type"),
            metadata=data.get("metadata"),
            file_path=None,
            last_modified=_parse_timestamp(data.get("lastModified"))
        )

    def __str__(self) -> str:
        """String representation of the template."""
        return f"PromptTemplate({self.name}, category={self.category})"

    def __repr__(self) -> str:
        """Detailed representation of the template."""
        return f"PromptTemplate(name='{self.name}', category='{self.category}', type='{self.type}', file_path={self.file_path!r})"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetimes (YAML may decode them natively) or ISO-8601 text."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            # fromisoformat() before 3.11 rejects a trailing "Z"
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None
