from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, Field

AgentName = Literal["Quality", "Security", "Performance"]


class AgentFinding(BaseModel):
    """Markdown section produced by one analysis agent. Always present, even on failure."""
    agent: AgentName
    section_title: str
    markdown: str
    failed: bool = False


class RawSuggestion(BaseModel):
    """LLM output for a single inline suggestion, before line validation."""
    line: int = Field(strict=True, ge=1)
    suggestion: str = Field(min_length=1)


class InlineSuggestion(BaseModel):
    """Review comment anchored to a line of the new file version."""
    path: str
    line: int
    side: Literal["RIGHT"] = "RIGHT"  # GitHub's name for the new-file side
    body: str


class AggregateReview(BaseModel):
    """Final output of the orchestrator, ready to be published."""
    body: str
    comments: list[InlineSuggestion] = []
    truncated: bool = False
    failed: bool = False
