from __future__ import annotations
import asyncio

from reviewbot.core.config import ReviewBotConfig, DEFAULT_MAX_DIFF_TOKENS
from reviewbot.core.pr_models import PullRequestContext, ChangedFile
from reviewbot.core.types import AgentFinding, AggregateReview
from reviewbot.agents.quality import review_quality
from reviewbot.agents.security import review_security
from reviewbot.agents.performance import review_performance
from reviewbot.agents.suggestions import generate_inline_suggestions


# =============================================================================
# SIZE POLICY
# =============================================================================
# Rough estimate: 1 token ~ 4 characters. Oversized diffs are cut to the
# budget before they reach the agents; per-file patches used for inline
# suggestions are never cut.
# =============================================================================

CHARS_PER_TOKEN = 4

REVIEW_TITLE = "# 🤖 AI Code Review"
SECTION_DIVIDER = "---"
TRUNCATION_NOTE = "⚠️ **Note:** This PR is large. Review is based on the first portion of changes."

SUMMARY_FOOTER = """### 📋 Review Summary
This automated review was generated by specialized AI agents analyzing code quality, security, and performance. Please use this as a guide alongside human code review.

*Powered by AI PR Review Bot* 🚀"""


def estimate_tokens(text: str) -> float:
    return len(text) / CHARS_PER_TOKEN


def truncate_diff(diff: str, max_tokens: int = DEFAULT_MAX_DIFF_TOKENS) -> tuple[str, bool]:
    """Return (diff, was_truncated). The input string is never modified."""
    if estimate_tokens(diff) <= max_tokens:
        return (diff, False)
    return (diff[:max_tokens * CHARS_PER_TOKEN], True)


def _build_review_body(
    pr: PullRequestContext,
    findings: list[AgentFinding],
    truncated: bool,
) -> str:
    lines: list[str] = [REVIEW_TITLE, ""]

    if truncated:
        lines.extend([TRUNCATION_NOTE, ""])

    lines.extend([f"## Pull Request: {pr.title}", "", SECTION_DIVIDER, ""])

    for finding in findings:
        lines.extend([finding.markdown.strip(), "", SECTION_DIVIDER, ""])

    lines.append(SUMMARY_FOOTER)
    return "\n".join(lines)


def _build_unavailable_body(pr: PullRequestContext, error: Exception) -> str:
    return "\n".join([
        REVIEW_TITLE,
        "",
        f"## Pull Request: {pr.title}",
        "",
        "⚠️ **AI Review Unavailable**",
        "",
        "The AI review system encountered an error and could not complete the analysis.",
        "",
        f"**Error:** {error}",
        "",
        "Please proceed with manual code review.",
        "",
        "*AI PR Review Bot*",
    ])


async def perform_review(
    diff: str,
    pr: PullRequestContext,
    files: list[ChangedFile],
    cfg: ReviewBotConfig,
) -> AggregateReview:
    """
    Run the full AI review for one pull request.

    The three analysis agents run concurrently on the (possibly truncated)
    diff; their sections always appear in the order Quality, Security,
    Performance. Inline suggestions are generated from the untruncated
    per-file patches.

    Never raises. Agent faults are already absorbed by the agents; anything
    else that escapes yields a well-formed "unavailable" review with no
    inline comments.
    """
    diff_to_review, truncated = truncate_diff(diff, cfg.max_diff_tokens)
    if truncated:
        print(f"[ReviewBot] ✂️ Diff truncated from {len(diff)} to {len(diff_to_review)} characters")

    try:
        print(f"[ReviewBot] 🤖 Running agents in parallel for PR #{pr.number}...")
        findings = await asyncio.gather(
            review_quality(diff_to_review, pr, cfg),
            review_security(diff_to_review, pr, cfg),
            review_performance(diff_to_review, pr, cfg),
        )

        comments = await generate_inline_suggestions(files, cfg)

        failed_agents = [finding.agent for finding in findings if finding.failed]
        if failed_agents:
            print(f"[ReviewBot] ⚠️ Agents unavailable: {', '.join(failed_agents)}")

        print(f"[ReviewBot] ✅ AI review completed ({len(comments)} inline comments)")
        return AggregateReview(
            body=_build_review_body(pr, list(findings), truncated),
            comments=comments,
            truncated=truncated,
        )

    except Exception as error:
        print(f"[ReviewBot] ❌ AI review failed: {error}")
        return AggregateReview(
            body=_build_unavailable_body(pr, error),
            comments=[],
            truncated=truncated,
            failed=True,
        )
