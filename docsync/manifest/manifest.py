"""
Manifest types for Document Sync.

The server publishes manifest.json:
    {"gcf": [{"name": ..., "size": ..., "modified": ...}], "policy": [...]}
"""

from dataclasses import dataclass, field
from enum import Enum

from ..core.errors import FormatError


def is_safe_filename(name: str) -> bool:
    """
    True for a plain file name that stays inside its category folder.

    Rejects empty names, path separators, "." and "..", and NUL bytes.
    """
    if not name or name in (".", ".."):
        return False
    return not any(c in name for c in ("/", "\\", "\0"))


class Category(str, Enum):
    """Document categories, in processing order."""
    GCF = "gcf"
    POLICY = "policy"

    def __str__(self) -> str:
        return self.value


@dataclass
class ManifestEntry:
    """One remote file."""
    name: str
    size: int = 0
    modified: str = ""

    @classmethod
    def from_dict(cls, data: dict, category: Category) -> "ManifestEntry":
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise FormatError(f"Invalid manifest format: {category} entry has no name")
        name = data["name"]
        if not is_safe_filename(name):
            raise FormatError(f"Invalid manifest format: {category} entry has unsafe name {name!r}")
        modified = data.get("modified", "")
        if not isinstance(modified, str):
            raise FormatError(f"Invalid manifest format: {category} entry {name!r} has non-string modified")
        return cls(
            name=name,
            size=data.get("size", 0),
            modified=modified,
        )

    def to_dict(self) -> dict:
        return {"name": self.name, "size": self.size, "modified": self.modified}


@dataclass
class Manifest:
    """Remote file listing, one entry list per category."""
    gcf: list[ManifestEntry] = field(default_factory=list)
    policy: list[ManifestEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "Manifest":
        """
        Validate and wrap a decoded manifest body.

        Each category is checked on its own so the error names the field.
        """
        if not isinstance(data, dict):
            raise FormatError("Invalid manifest format: not an object")

        for category in Category:
            if not isinstance(data.get(category.value), list):
                raise FormatError(f"Invalid manifest format: {category} is not an array")

        return cls(**{
            category.value: [ManifestEntry.from_dict(e, category) for e in data[category.value]]
            for category in Category
        })

    def entries(self, category: Category) -> list[ManifestEntry]:
        return getattr(self, Category(category).value)

    def to_dict(self) -> dict:
        return {c.value: [e.to_dict() for e in self.entries(c)] for c in Category}

    @property
    def total_files(self) -> int:
        return sum(len(self.entries(c)) for c in Category)
