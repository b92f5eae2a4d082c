from __future__ import annotations
import re

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from openai import APITimeoutError
from pydantic import BaseModel, ConfigDict

from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.pr_models import PullRequestContext
from reviewbot.core.types import AgentFinding, AgentName
from reviewbot.prompts.shared import SHARED_RULES


MAX_AGENT_TOKENS = 1000  # Response ceiling for each analysis agent

UNAVAILABLE_MESSAGE = "⚠️ Analysis temporarily unavailable."


class AgentProfile(BaseModel):
    """
    Everything that distinguishes one analysis agent from another.
    The request/response shape and the failure policy are shared.
    """
    model_config = ConfigDict(frozen=True)

    name: AgentName
    section_title: str
    system_role: str
    instructions: str
    temperature: float

    @property
    def heading(self) -> str:
        return f"**{self.section_title}:**"


def build_llm(cfg: ReviewBotConfig, temperature: float, max_tokens: int) -> ChatOpenAI:
    """
    Chat model for one request. No retries: a failed call is reported, not repeated.
    The request timeout is the only bound on a hanging call.
    """
    return ChatOpenAI(
        model=cfg.openai_model,
        api_key=cfg.openai_api_key,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=cfg.openai_timeout_seconds,
        max_retries=0,
    )


def _build_prompt(profile: AgentProfile) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages([
        ("system", f"{profile.system_role}\n\n{profile.instructions}\n\n{SHARED_RULES}"),
        ("user", """Review the following pull request changes:

**PR Title:** {title}
**Author:** {author}
**Branches:** {head_ref} -> {base_ref}

**Code Changes:**
```diff
{diff}
```""")
    ])


def _strip_section_heading(text: str, profile: AgentProfile) -> str:
    """
    Remove a heading the model echoed despite instructions, e.g. '**Security Review:**'.

    The heading may sit alone on its line or lead into text on the same line.
    In the second case it must end with a colon or closing bold marker, so a
    sentence that merely starts with the title words is left intact.
    """
    heading_re = re.compile(
        rf"^\s*(?:#{{1,6}}[ \t]*)?(?:\*\*)?[ \t]*{re.escape(profile.section_title)}[ \t]*"
        r"(?:(?::[ \t]*(?:\*\*)?|\*\*[ \t]*:?)[ \t]*|(?=\n|$))",
        re.IGNORECASE,
    )
    return heading_re.sub("", text, count=1).strip()


def unavailable_finding(profile: AgentProfile) -> AgentFinding:
    return AgentFinding(
        agent=profile.name,
        section_title=profile.section_title,
        markdown=f"{profile.heading}\n{UNAVAILABLE_MESSAGE}",
        failed=True,
    )


async def run_analysis_agent(
    profile: AgentProfile,
    diff: str,
    pr: PullRequestContext,
    cfg: ReviewBotConfig,
) -> AgentFinding:
    """
    Shared execution logic for the analysis agents.

    Never raises: any fault from the model call (timeout, quota, malformed
    reply) is logged and turned into a placeholder finding, so the
    orchestrator can always assemble a full report.
    """
    llm = build_llm(cfg, temperature=profile.temperature, max_tokens=MAX_AGENT_TOKENS)
    chain = _build_prompt(profile) | llm | StrOutputParser()

    try:
        text: str = await chain.ainvoke({
            "title": pr.title,
            "author": pr.author,
            "head_ref": pr.head_ref,
            "base_ref": pr.base_ref,
            "diff": diff,
        })
    except APITimeoutError:
        print(f"[ReviewBot] ⏱️ {profile.name} agent timed out after {cfg.openai_timeout_seconds}s")
        return unavailable_finding(profile)
    except Exception as error:
        print(f"[ReviewBot] ⚠️ {profile.name} agent failed: {error}")
        return unavailable_finding(profile)

    body = _strip_section_heading(text or "", profile)
    if not body:
        print(f"[ReviewBot] ⚠️ {profile.name} agent returned an empty reply")
        return unavailable_finding(profile)

    print(f"[ReviewBot] 📊 {profile.name} agent returned {len(body)} chars")
    return AgentFinding(
        agent=profile.name,
        section_title=profile.section_title,
        markdown=f"{profile.heading}\n{body}",
    )


async def check_ai_health(cfg: ReviewBotConfig) -> bool:
    """Quick connectivity check against the model provider."""
    llm = build_llm(cfg, temperature=0, max_tokens=5)
    try:
        await llm.ainvoke("test")
    except Exception as error:
        print(f"[ReviewBot] ❌ AI health check failed: {error}")
        return False
    return True
