from __future__ import annotations

from typing import Callable

import pytest
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from reviewbot.agents import base, suggestions
from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.pr_models import PullRequestContext, ChangedFile


@pytest.fixture
def cfg() -> ReviewBotConfig:
    return ReviewBotConfig(
        github_app_id="12345",
        github_private_key="not-a-real-key",
        webhook_secret="s3cret",
        openai_api_key="sk-test",
    )


@pytest.fixture
def pr_context() -> PullRequestContext:
    return PullRequestContext(
        number=7,
        title="Add user search endpoint",
        author="octocat",
        base_ref="main",
        head_ref="feature/search",
        head_sha="abc1234def",
    )


def make_file(
    filename: str = "src/app.py",
    patch: str | None = "@@ -1,2 +1,3 @@\n context\n+added line\n context two\n",
    status: str = "modified",
) -> ChangedFile:
    return ChangedFile(filename=filename, status=status, additions=1, deletions=0, patch=patch)


def _prompt_text(value) -> str:
    """Flatten whatever reaches the chat model (prompt value, message list or str) to text."""
    if isinstance(value, str):
        return value
    if hasattr(value, "to_string"):
        return value.to_string()
    return "\n".join(str(message.content) for message in value)


@pytest.fixture
def fake_llm(monkeypatch):
    """
    Replace the chat model with a responder function.

    The responder receives the flattened prompt text and returns the reply
    text, or raises to simulate a failed call.
    """
    calls: list[str] = []

    def install(responder: Callable[[str], str]) -> list[str]:
        def respond(value):
            text = _prompt_text(value)
            calls.append(text)
            return AIMessage(content=responder(text))

        def build(cfg, temperature, max_tokens):
            return RunnableLambda(respond)

        monkeypatch.setattr(base, "build_llm", build)
        monkeypatch.setattr(suggestions, "build_llm", build)
        return calls

    return install
