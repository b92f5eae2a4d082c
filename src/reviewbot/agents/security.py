from __future__ import annotations

from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.pr_models import PullRequestContext
from reviewbot.core.types import AgentFinding
from reviewbot.agents.base import AgentProfile, run_analysis_agent

INSTRUCTIONS = """You are a security-focused code reviewer.

Check the changes for SECURITY CONCERNS:
- SQL injection vulnerabilities
- XSS (Cross-Site Scripting) risks
- Authentication/authorization issues
- Sensitive data exposure (API keys, passwords, tokens)
- Insecure dependencies or imports
- Input validation problems
- CSRF vulnerabilities
- Insecure cryptography usage
- Path traversal vulnerabilities
- Command injection risks

Be specific about the security risk and suggest remediation.
If no security issues are found, state that clearly."""

# Lowest temperature of the three: security findings should be reproducible
SECURITY_PROFILE = AgentProfile(
    name="Security",
    section_title="Security Review",
    system_role="You are a cybersecurity expert specializing in application security and vulnerability assessment.",
    instructions=INSTRUCTIONS,
    temperature=0.2,
)


async def review_security(diff: str, pr: PullRequestContext, cfg: ReviewBotConfig) -> AgentFinding:
    return await run_analysis_agent(SECURITY_PROFILE, diff, pr, cfg)
