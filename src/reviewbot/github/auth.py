from __future__ import annotations

import time

import httpx
import jwt

from reviewbot.core.config import ReviewBotConfig

GITHUB_API_URL = "https://api.github.com"


def create_app_jwt(app_id: str, private_key: str) -> str:
    """Sign a short-lived JWT that authenticates as the GitHub App itself."""
    now = int(time.time())
    payload = {
        "iat": now - 60,  # clock drift allowance
        "exp": now + 600,  # GitHub's 10 minute maximum
        "iss": app_id,
    }
    return jwt.encode(payload, private_key, algorithm="RS256")


async def get_installation_token(installation_id: int, cfg: ReviewBotConfig) -> str:
    """
    Exchange the App JWT for an installation access token.
    Called once per review; tokens are never cached or shared.
    """
    app_jwt = create_app_jwt(cfg.github_app_id, cfg.github_private_key)
    headers = {
        "Authorization": f"Bearer {app_jwt}",
        "Accept": "application/vnd.github+json",
    }
    url = f"{GITHUB_API_URL}/app/installations/{installation_id}/access_tokens"

    async with httpx.AsyncClient(timeout=30) as client:
        resp = await client.post(url, headers=headers)
        resp.raise_for_status()
        print(f"[ReviewBot] 🔑 Generated installation token for installation {installation_id}")
        return resp.json()["token"]
