"""
Pydantic models for the cookbook version manifest returned by the Chef server.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class CookbookItem(BaseModel):
    """A single file entry within a manifest category."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str = ""
    url: str
    checksum: str = ""
    specificity: str = ""


class CookbookManifest(BaseModel):
    """
    The full file inventory of one cookbook version.

    `name` is the '{cookbook_name}-{version}' string the server reports
    (e.g. 'apache-0.1.0') and is used as the local directory name.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    cookbook_name: str
    version: str

    root_files: list[CookbookItem] = []
    files: list[CookbookItem] = []
    templates: list[CookbookItem] = []
    attributes: list[CookbookItem] = []
    recipes: list[CookbookItem] = []
    definitions: list[CookbookItem] = []
    libraries: list[CookbookItem] = []
    providers: list[CookbookItem] = []
    resources: list[CookbookItem] = []

    @field_validator(
        "root_files",
        "files",
        "templates",
        "attributes",
        "recipes",
        "definitions",
        "libraries",
        "providers",
        "resources",
        mode="before",
    )
    @classmethod
    def null_category_is_empty(cls, v):
        """Some servers send `null` for a category with no files."""
        return [] if v is None else v

    @property
    def is_consistent(self) -> bool:
        """True when `name` matches '{cookbook_name}-{version}'."""
        return self.name == f"{self.cookbook_name}-{self.version}"
