"""
Inline suggestion generator.

Asks the model for 1-2 line-anchored suggestions per changed file. The
model is told which new-file lines exist in the diff, but its answer is
still validated: a suggestion that points anywhere else is dropped,
because GitHub rejects the whole review if one inline anchor is invalid.
"""
from __future__ import annotations

from langchain_core.exceptions import OutputParserException
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.output_parsers import JsonOutputParser, StrOutputParser
from pydantic import ValidationError

from reviewbot.agents.base import build_llm
from reviewbot.core.config import ReviewBotConfig
from reviewbot.core.errors import MalformedSuggestionResponse
from reviewbot.core.pr_models import ChangedFile
from reviewbot.core.types import InlineSuggestion, RawSuggestion
from reviewbot.github.client.diff_parser import compute_valid_lines, extract_line_from_patch
from reviewbot.prompts.shared import JSON_ONLY_SYSTEM_ROLE


MAX_SUGGESTION_TOKENS = 500
SUGGESTION_TEMPERATURE = 0.3


def build_suggestion_request(pr_file: ChangedFile, valid_lines: list[int]) -> str:
    lines_text = ", ".join(str(line) for line in valid_lines)
    return f"""Review this file change and provide 1-2 specific, actionable suggestions.

**File:** {pr_file.filename}
**Changes:** {pr_file.additions} additions, {pr_file.deletions} deletions

**Valid line numbers you can comment on:** {lines_text}

**Patch:**
```diff
{pr_file.patch}
```

Respond ONLY with a JSON array of suggestions. Each suggestion must have:
- "line": must be one of these valid line numbers: {lines_text}
- "suggestion": a concise, specific improvement (max 100 words)

Example format:
[
  {{"line": {valid_lines[0]}, "suggestion": "Validate the input before using it here."}}
]

If no suggestions, return an empty array: []"""


def parse_suggestions(content: str) -> list[RawSuggestion]:
    """
    Parse a model reply into suggestion records.

    Accepts a raw JSON array or one wrapped in a markdown code fence.
    Raises MalformedSuggestionResponse if the payload is not a JSON array.
    Individual records with a missing/non-integer line or an empty
    suggestion are skipped.
    """
    try:
        data = JsonOutputParser().parse(content)
    except OutputParserException as parse_error:
        raise MalformedSuggestionResponse(f"Reply is not valid JSON: {parse_error}") from parse_error

    if not isinstance(data, list):
        raise MalformedSuggestionResponse(f"Expected a JSON array, got {type(data).__name__}")

    suggestions: list[RawSuggestion] = []
    for item in data:
        try:
            suggestions.append(RawSuggestion.model_validate(item))
        except ValidationError:
            continue
    return suggestions


def format_suggestion_body(suggestion: str, code_snippet: str | None = None) -> str:
    parts = ["💡 **AI Suggestion:**", ""]

    if code_snippet and code_snippet.strip():
        parts.append(f"```\n{code_snippet.strip()}\n```")
        parts.append("")

    parts.append(suggestion.strip())
    return "\n".join(parts)


async def _request_suggestions(
    pr_file: ChangedFile,
    valid_lines: list[int],
    cfg: ReviewBotConfig,
) -> str:
    llm = build_llm(cfg, temperature=SUGGESTION_TEMPERATURE, max_tokens=MAX_SUGGESTION_TOKENS)
    chain = llm | StrOutputParser()
    return await chain.ainvoke([
        SystemMessage(content=JSON_ONLY_SYSTEM_ROLE),
        HumanMessage(content=build_suggestion_request(pr_file, valid_lines)),
    ])


def _accept_suggestions(
    pr_file: ChangedFile,
    valid_lines: list[int],
    candidates: list[RawSuggestion],
) -> list[InlineSuggestion]:
    """
    Keep candidates anchored to a valid line, in reply order.
    A second suggestion for an already used line is dropped.
    """
    valid = set(valid_lines)
    used_lines: set[int] = set()
    accepted: list[InlineSuggestion] = []

    for candidate in candidates:
        if candidate.line not in valid or candidate.line in used_lines:
            continue
        used_lines.add(candidate.line)
        accepted.append(InlineSuggestion(
            path=pr_file.filename,
            line=candidate.line,
            body=format_suggestion_body(
                candidate.suggestion,
                extract_line_from_patch(pr_file.patch, candidate.line),
            ),
        ))

    return accepted


async def generate_inline_suggestions(
    files: list[ChangedFile],
    cfg: ReviewBotConfig,
) -> list[InlineSuggestion]:
    """
    Generate inline suggestions for the first cfg.max_inline_files files.

    Files are processed sequentially in input order. A failed request or an
    unparseable reply only costs that file its suggestions.
    """
    files_to_review = files[:cfg.max_inline_files]
    inline_suggestions: list[InlineSuggestion] = []

    for pr_file in files_to_review:
        if not pr_file.is_reviewable:
            continue

        valid_lines = compute_valid_lines(pr_file.patch)
        if not valid_lines:
            print(f"[ReviewBot] ⏭️ No valid lines to comment on in {pr_file.filename}")
            continue

        try:
            content = await _request_suggestions(pr_file, valid_lines, cfg)
            candidates = parse_suggestions(content)
        except MalformedSuggestionResponse as parse_error:
            print(f"[ReviewBot] ⚠️ Failed to parse suggestions for {pr_file.filename}: {parse_error}")
            continue
        except Exception as request_error:
            print(f"[ReviewBot] ⚠️ Failed to generate inline comments for {pr_file.filename}: {request_error}")
            continue

        accepted = _accept_suggestions(pr_file, valid_lines, candidates)
        dropped = len(candidates) - len(accepted)
        if dropped > 0:
            print(f"[ReviewBot] 🔇 {pr_file.filename}: dropped {dropped} suggestions (invalid line or duplicate)")
        inline_suggestions.extend(accepted)

    print(f"[ReviewBot] 💡 Generated {len(inline_suggestions)} inline comments across {len(files_to_review)} files")
    return inline_suggestions
