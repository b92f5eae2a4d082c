from __future__ import annotations

from dataclasses import dataclass
import httpx


@dataclass(frozen=True)
class GitHubClient:
    token: str

    def headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": accept,
        }

    async def get_json(self, url: str, params: dict | None = None) -> dict | list:
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.get(url, headers=self.headers(), params=params)
            r.raise_for_status()
            return r.json()

    async def get_text(self, url: str, accept: str) -> str:
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.get(url, headers=self.headers(accept))
            r.raise_for_status()
            return r.text

    async def post_json(self, url: str, body: dict) -> dict:
        async with httpx.AsyncClient(timeout=30) as client:
            r = await client.post(url, headers=self.headers(), json=body)
            r.raise_for_status()
            return r.json()
