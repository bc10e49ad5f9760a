"""
The ordered table of manifest categories and where each one lands on disk.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from cookbook_cli.models.manifest import CookbookItem, CookbookManifest


@dataclass(frozen=True)
class Category:
    """
    One manifest category.

    Attributes:
        name: The label used in messages.
        attribute: The manifest field holding the category's items.
        subdirectory: Directory under the cookbook root, or None for the root
            itself.
    """

    name: str
    attribute: str
    subdirectory: Optional[str]

    def items(self, manifest: CookbookManifest) -> list[CookbookItem]:
        return getattr(manifest, self.attribute)

    def destination(self, cookbook_path: Path) -> Path:
        if self.subdirectory is None:
            return cookbook_path
        return cookbook_path / self.subdirectory


def _subdir_category(name: str) -> Category:
    return Category(name=name, attribute=name, subdirectory=name)


# Processing order is fixed so a partial failure always leaves the same tree.
CATEGORIES: tuple[Category, ...] = (
    Category(name="root_files", attribute="root_files", subdirectory=None),
    _subdir_category("files"),
    _subdir_category("templates"),
    _subdir_category("attributes"),
    _subdir_category("recipes"),
    _subdir_category("definitions"),
    _subdir_category("libraries"),
    _subdir_category("providers"),
    _subdir_category("resources"),
)
