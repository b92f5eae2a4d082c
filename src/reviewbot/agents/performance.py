from __future__ import annotations

from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.pr_models import PullRequestContext
from reviewbot.core.types import AgentFinding
from reviewbot.agents.base import AgentProfile, run_analysis_agent

INSTRUCTIONS = """You are a performance optimization expert.

Review the changes for PERFORMANCE CONCERNS:
- Algorithmic complexity (time and space)
- Inefficient loops or iterations
- Unnecessary computations
- Memory leaks or excessive memory usage
- N+1 query problems (database)
- Blocking operations that should be async
- Inefficient data structures
- Redundant API calls or network requests
- Large payload sizes
- Caching opportunities

Suggest specific optimizations where applicable.
If performance looks good, acknowledge it."""

PERFORMANCE_PROFILE = AgentProfile(
    name="Performance",
    section_title="Performance Review",
    system_role="You are a performance engineering expert specializing in code optimization and scalability.",
    instructions=INSTRUCTIONS,
    temperature=0.3,
)


async def review_performance(diff: str, pr: PullRequestContext, cfg: ReviewBotConfig) -> AgentFinding:
    return await run_analysis_agent(PERFORMANCE_PROFILE, diff, pr, cfg)
