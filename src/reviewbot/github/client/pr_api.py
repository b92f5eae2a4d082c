from __future__ import annotations

from reviewbot.core.pr_models import PullRequestContext, ChangedFile
from reviewbot.github.auth import GITHUB_API_URL
from reviewbot.github.client.github_client import GitHubClient


FILES_PER_PAGE = 100
MAX_FILE_PAGES = 30  # GitHub stops listing files after 3000


def _pr_url(owner: str, repo: str, pr_number: int) -> str:
    return f"{GITHUB_API_URL}/repos/{owner}/{repo}/pulls/{pr_number}"


# =============================================================================
# PAYLOAD CONVERTERS
# =============================================================================

def parse_pr_context(data: dict) -> PullRequestContext:
    """Convert a GitHub pull request payload into a PullRequestContext."""
    return PullRequestContext(
        number=int(data["number"]),
        title=data.get("title") or "",
        body=data.get("body"),
        author=(data.get("user") or {}).get("login") or "unknown",
        base_ref=data["base"]["ref"],
        head_ref=data["head"]["ref"],
        head_sha=data["head"]["sha"],
    )


def parse_changed_files(items: list[dict]) -> list[ChangedFile]:
    return [
        ChangedFile(
            filename=item["filename"],
            status=item.get("status") or "modified",
            additions=item.get("additions") or 0,
            deletions=item.get("deletions") or 0,
            patch=item.get("patch"),
        )
        for item in items
    ]


# =============================================================================
# PULL REQUEST DATA
# =============================================================================

async def fetch_pr_context(owner: str, repo: str, pr_number: int, gh: GitHubClient) -> PullRequestContext:
    data = await gh.get_json(_pr_url(owner, repo, pr_number))
    pr = parse_pr_context(data)
    print(f"[ReviewBot] 📄 Fetched PR info for #{pr_number}: \"{pr.title}\"")
    return pr


async def fetch_pr_diff(owner: str, repo: str, pr_number: int, gh: GitHubClient) -> str:
    """Fetch the whole pull request as a unified diff."""
    diff = await gh.get_text(_pr_url(owner, repo, pr_number), accept="application/vnd.github.v3.diff")
    print(f"[ReviewBot] 📄 Fetched diff for PR #{pr_number} in {owner}/{repo} ({len(diff)} chars)")
    return diff


async def fetch_pr_files(owner: str, repo: str, pr_number: int, gh: GitHubClient) -> list[ChangedFile]:
    """Fetch every changed file of the pull request, in GitHub's order."""
    url = f"{_pr_url(owner, repo, pr_number)}/files"
    items: list[dict] = []

    for page in range(1, MAX_FILE_PAGES + 1):
        batch = await gh.get_json(url, params={"per_page": FILES_PER_PAGE, "page": page})
        items.extend(batch)
        if len(batch) < FILES_PER_PAGE:
            break

    print(f"[ReviewBot] 📄 Found {len(items)} changed files in PR #{pr_number}")
    return parse_changed_files(items)


# =============================================================================
# ISSUE COMMENTS
# =============================================================================

async def post_issue_comment(
    owner: str,
    repo: str,
    issue_number: int,
    body: str,
    gh: GitHubClient,
) -> dict:
    """Post a comment on an issue or PR."""
    url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/issues/{issue_number}/comments"
    return await gh.post_json(url, {"body": body})
