from __future__ import annotations

from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.pr_models import PullRequestContext
from reviewbot.core.types import AgentFinding
from reviewbot.agents.base import AgentProfile, run_analysis_agent

INSTRUCTIONS = """You are a senior code reviewer focusing on CODE QUALITY.

Analyze the changes for:
- Code readability and clarity
- Naming conventions
- Code organization and structure
- DRY principles (Don't Repeat Yourself)
- SOLID principles adherence
- Proper error handling
- Code comments and documentation
- Best practices for the language/framework

If the code looks good, say so briefly."""

QUALITY_PROFILE = AgentProfile(
    name="Quality",
    section_title="Code Quality Review",
    system_role="You are an expert code reviewer specializing in code quality and best practices.",
    instructions=INSTRUCTIONS,
    temperature=0.3,
)


async def review_quality(diff: str, pr: PullRequestContext, cfg: ReviewBotConfig) -> AgentFinding:
    return await run_analysis_agent(QUALITY_PROFILE, diff, pr, cfg)
