from typing import List, Optional

from pydantic import BaseModel, Field

from fonda._src.constants import PlatformTag


class EnvironmentSpec(BaseModel):
    """Input conda-style environment.yaml spec

    Entries are raw strings that may still carry a trailing `# [tag]`
    marker comment.
    """
    name: str
    python_version: Optional[str] = None
    dependencies: List[str] = Field(default=[])
    pip: List[str] = Field(default=[])


class ResolvedManifest(BaseModel):
    """The platform filtered, deduplicated and ordered list of installable specs"""
    name: Optional[str] = None
    platform: PlatformTag
    entries: List[str] = Field(default=[])

    def __len__(self):
        return len(self.entries)
