from typing import Literal, Optional, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated

from fonda._src.constants import PlatformTag, Section


class PlainPackage(BaseModel):
    """conda-style name with an optional version constraint, eg. `numpy>=1.24.0`"""
    type: Literal["plain"] = "plain"
    name_and_constraint: str

    def to_requirement(self) -> str:
        return self.name_and_constraint

    def __str__(self):
        return f"conda: {self.name_and_constraint}"


class PipPackage(BaseModel):
    type: Literal["pip"] = "pip"
    name_and_constraint: str

    def to_requirement(self) -> str:
        return self.name_and_constraint

    def __str__(self):
        return f"pip: {self.name_and_constraint}"


class GitDependency(BaseModel):
    """A VCS reference

    `url` keeps the `git+` prefix, `ref` is the branch, tag or commit
    given after the `@` separator and `fragment` is anything after a
    `#`, eg. `egg=name` or `subdirectory=pkg`.
    """
    type: Literal["git"] = "git"
    url: str
    ref: Optional[str] = None
    fragment: Optional[str] = None

    def to_requirement(self) -> str:
        requirement = self.url
        if self.ref is not None:
            requirement += f"@{self.ref}"
        if self.fragment is not None:
            requirement += f"#{self.fragment}"
        return requirement

    def __str__(self):
        if self.ref is None:
            return f"git: {self.url}"
        return f"git: {self.url} - {self.ref}"


class UrlDependency(BaseModel):
    type: Literal["url"] = "url"
    url: str

    def to_requirement(self) -> str:
        return self.url

    def __str__(self):
        return f"url: {self.url}"


class LocalPath(BaseModel):
    # never checked for existence, that is left to the installer
    type: Literal["path"] = "path"
    path: str

    def to_requirement(self) -> str:
        return self.path

    def __str__(self):
        return f"path: {self.path}"


EditableTarget = Annotated[
    Union[GitDependency, UrlDependency, LocalPath],
    Field(discriminator="type"),
]


class EditableInstall(BaseModel):
    type: Literal["editable"] = "editable"
    target: EditableTarget

    def to_requirement(self) -> str:
        return f"-e {self.target.to_requirement()}"

    def __str__(self):
        return f"editable {self.target}"


DependencyKind = Annotated[
    Union[PlainPackage, PipPackage, GitDependency, UrlDependency, LocalPath, EditableInstall],
    Field(discriminator="type"),
]


class DependencySpec(BaseModel):
    """A single classified entry of an environment file"""
    raw_line: str
    kind: DependencyKind
    platform: PlatformTag = PlatformTag.ANY
    section: Section = Section.CONDA

    def to_requirement(self) -> str:
        """The installable form, with the marker comment and `pip:` prefix stripped"""
        return self.kind.to_requirement()

    def applies_to(self, platform: PlatformTag) -> bool:
        return self.platform == PlatformTag.ANY or self.platform == platform
