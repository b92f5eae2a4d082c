from __future__ import annotations

from reviewbot.core.types import AggregateReview, InlineSuggestion
from reviewbot.github.auth import GITHUB_API_URL
from reviewbot.github.client.github_client import GitHubClient


def to_github_review_comment(suggestion: InlineSuggestion) -> dict:
    """
    Format an InlineSuggestion for GitHub's review API.

    Note: commit_id is NOT included here - it goes at the top level of the review,
    not inside each comment object.
    """
    return {
        "path": suggestion.path,
        "line": suggestion.line,
        "side": suggestion.side,
        "body": suggestion.body,
    }


def build_review_payload(review: AggregateReview, commit_id: str) -> dict:
    """
    Request body for POST /pulls/{n}/reviews.
    Inline comments are only sent together with the commit they were computed against.
    """
    payload = {
        "event": "COMMENT",
        "body": review.body,
    }
    if review.comments:
        payload["commit_id"] = commit_id
        payload["comments"] = [to_github_review_comment(comment) for comment in review.comments]
    return payload


async def publish_review(
    owner: str,
    repo: str,
    pr_number: int,
    commit_id: str,
    review: AggregateReview,
    gh: GitHubClient,
) -> dict:
    """
    Publish the review in a single request.

    GitHub validates all inline anchors together: one bad anchor fails the
    whole call. The call is attempted once and errors propagate to the caller.
    """
    url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/pulls/{pr_number}/reviews"
    published = await gh.post_json(url, build_review_payload(review, commit_id))

    if review.comments:
        print(f"[ReviewBot] 💬 Posted {len(review.comments)} inline comments on PR #{pr_number} in {owner}/{repo}")
    else:
        print(f"[ReviewBot] 💬 Posted review comment on PR #{pr_number} in {owner}/{repo}")
    return published
