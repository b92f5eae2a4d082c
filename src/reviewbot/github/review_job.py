"""
Review job: everything that happens after a pull_request webhook is accepted.

1. Gets a fresh installation token from GitHub
2. Fetches PR metadata, the unified diff and the changed files
3. Runs the AI review
4. Publishes the review (with inline comments when there are any)
"""
from __future__ import annotations

import traceback
from dataclasses import dataclass

from reviewbot.agents.orchestrator import perform_review
from reviewbot.core.config import ReviewBotConfig
from reviewbot.github.auth import get_installation_token
from reviewbot.github.client.github_client import GitHubClient
from reviewbot.github.client.pr_api import fetch_pr_context, fetch_pr_diff, fetch_pr_files, post_issue_comment
from reviewbot.github.client.review_publisher import publish_review


@dataclass(frozen=True)
class ReviewJob:
    owner: str
    repo: str
    pr_number: int
    installation_id: int

    @classmethod
    def from_payload(cls, payload: dict) -> "ReviewJob":
        return cls(
            owner=payload["repository"]["owner"]["login"],
            repo=payload["repository"]["name"],
            pr_number=int(payload["pull_request"]["number"]),
            installation_id=int(payload["installation"]["id"]),
        )


def _failure_message(error: Exception) -> str:
    return (
        f"# 🤖 AI Code Review\n\n"
        f"⚠️ **Review Failed**\n\n"
        f"The automated review encountered an error:\n"
        f"```\n{str(error)}\n```\n\n"
        f"_Please proceed with manual review._"
    )


async def process_pull_request_review(job: ReviewJob, cfg: ReviewBotConfig) -> dict:
    """Run the full review pipeline for one pull request. Never raises."""
    print(f"[ReviewBot] 🔎 Starting review for {job.owner}/{job.repo}#{job.pr_number}")

    github_client: GitHubClient | None = None
    try:
        token = await get_installation_token(job.installation_id, cfg)
        github_client = GitHubClient(token)

        pr = await fetch_pr_context(job.owner, job.repo, job.pr_number, github_client)
        diff = await fetch_pr_diff(job.owner, job.repo, job.pr_number, github_client)
        files = await fetch_pr_files(job.owner, job.repo, job.pr_number, github_client)

        if not diff.strip():
            print(f"[ReviewBot] ⏭️ No changes found in PR #{job.pr_number}, skipping review")
            return {"skipped": True, "reason": "empty_diff"}

        review = await perform_review(diff, pr, files, cfg)

        published = await publish_review(
            owner=job.owner,
            repo=job.repo,
            pr_number=job.pr_number,
            commit_id=pr.head_sha,
            review=review,
            gh=github_client,
        )

        review_url = published.get("html_url") or published.get("url")
        print(f"[ReviewBot] ✅ Successfully completed review for PR #{job.pr_number}: {review_url}")
        return {"published": True, "comments": len(review.comments), "review_url": review_url}

    except Exception as error:
        print(f"[ReviewBot] ❌ Failed to process PR #{job.pr_number}: {error}")
        traceback.print_exc()

        if github_client is not None:
            try:
                await post_issue_comment(job.owner, job.repo, job.pr_number, _failure_message(error), github_client)
            except Exception as post_error:
                print(f"[ReviewBot] ❌ Could not post error comment: {post_error}")

        return {"published": False, "error": str(error)}
