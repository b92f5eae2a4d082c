from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

FileStatus = Literal["added", "modified", "removed", "renamed", "copied", "changed", "unchanged"]


class PullRequestContext(BaseModel):
    """
    Pull request metadata handed to every agent.
    Built once per review and never modified afterwards.
    """
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    author: str
    base_ref: str
    head_ref: str
    head_sha: str
    body: Optional[str] = None


class ChangedFile(BaseModel):
    filename: str
    status: FileStatus = "modified"
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None  # Unified diff hunk(s), missing for binary/huge files

    @property
    def is_reviewable(self) -> bool:
        return self.status != "removed" and bool(self.patch)
