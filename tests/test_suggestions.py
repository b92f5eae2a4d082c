"""Tests for the inline suggestion generator."""

import asyncio
import json

import pytest

from reviewbot.agents import suggestions
from reviewbot.agents.suggestions import generate_inline_suggestions, parse_suggestions
from reviewbot.core.errors import MalformedSuggestionResponse
from reviewbot.github.client.diff_parser import compute_valid_lines

from conftest import make_file

# Valid lines for this patch: [1, 2, 3]
SIMPLE_PATCH = "@@ -1,2 +1,3 @@\n context\n+added line\n context two\n"


# ---------------------------------------------------------------------------
# parse_suggestions
# ---------------------------------------------------------------------------


class TestParseSuggestions:
    def test_raw_json_array(self):
        parsed = parse_suggestions('[{"line": 2, "suggestion": "Rename x"}]')
        assert [(s.line, s.suggestion) for s in parsed] == [(2, "Rename x")]

    def test_json_fenced_block(self):
        content = 'Here you go:\n```json\n[{"line": 3, "suggestion": "Add a docstring"}]\n```'
        assert [s.line for s in parse_suggestions(content)] == [3]

    def test_plain_fenced_block(self):
        content = '```\n[{"line": 1, "suggestion": "Handle None"}]\n```'
        assert [s.line for s in parse_suggestions(content)] == [1]

    def test_reply_cut_off_mid_string_keeps_complete_records(self):
        content = '[{"line": 2, "suggestion": "Close the file"}, {"line": 3, "suggestion": "Use a con'
        parsed = parse_suggestions(content)
        assert parsed[0].line == 2
        assert parsed[0].suggestion == "Close the file"

    def test_empty_array(self):
        assert parse_suggestions("[]") == []

    def test_invalid_json_raises(self):
        with pytest.raises(MalformedSuggestionResponse):
            parse_suggestions("I think line 2 could be better.")

    def test_non_list_payload_raises(self):
        with pytest.raises(MalformedSuggestionResponse):
            parse_suggestions('{"line": 2, "suggestion": "x"}')

    def test_invalid_records_are_skipped(self):
        content = json.dumps([
            {"line": 2, "suggestion": "keep me"},
            {"suggestion": "no line"},
            {"line": "2", "suggestion": "string line"},
            {"line": 2.5, "suggestion": "float line"},
            {"line": 0, "suggestion": "line zero"},
            {"line": 3, "suggestion": ""},
            {"line": 3},
            "not an object",
            None,
        ])
        assert [(s.line, s.suggestion) for s in parse_suggestions(content)] == [(2, "keep me")]


# ---------------------------------------------------------------------------
# generate_inline_suggestions
# ---------------------------------------------------------------------------


def test_valid_suggestion_becomes_inline_comment(cfg, fake_llm):
    fake_llm(lambda prompt: '[{"line": 2, "suggestion": "Validate the input."}]')

    result = asyncio.run(generate_inline_suggestions([make_file(patch=SIMPLE_PATCH)], cfg))

    assert len(result) == 1
    assert result[0].path == "src/app.py"
    assert result[0].line == 2
    assert result[0].side == "RIGHT"
    assert result[0].body.startswith("💡 **AI Suggestion:**")
    assert "added line" in result[0].body
    assert "Validate the input." in result[0].body


def test_request_lists_valid_lines(cfg, fake_llm):
    calls = fake_llm(lambda prompt: "[]")

    asyncio.run(generate_inline_suggestions([make_file(patch=SIMPLE_PATCH)], cfg))

    assert len(calls) == 1
    assert "**Valid line numbers you can comment on:** 1, 2, 3" in calls[0]
    assert "Always respond with valid JSON only." in calls[0]


def test_suggestions_outside_valid_lines_are_dropped(cfg, fake_llm):
    fake_llm(lambda prompt: json.dumps([
        {"line": 99, "suggestion": "hallucinated line"},
        {"line": 3, "suggestion": "real line"},
    ]))

    result = asyncio.run(generate_inline_suggestions([make_file(patch=SIMPLE_PATCH)], cfg))

    assert [comment.line for comment in result] == [3]


def test_duplicate_lines_are_dropped(cfg, fake_llm):
    fake_llm(lambda prompt: json.dumps([
        {"line": 2, "suggestion": "first"},
        {"line": 2, "suggestion": "same line again"},
        {"line": 1, "suggestion": "second"},
        {"line": 3, "suggestion": "third"},
    ]))

    result = asyncio.run(generate_inline_suggestions([make_file(patch=SIMPLE_PATCH)], cfg))

    assert [comment.line for comment in result] == [2, 1, 3]
    assert "first" in result[0].body


def test_every_valid_distinct_line_is_kept(cfg, fake_llm):
    fake_llm(lambda prompt: json.dumps([
        {"line": 1, "suggestion": "one"},
        {"line": 2, "suggestion": "two"},
        {"line": 3, "suggestion": "three"},
    ]))

    result = asyncio.run(generate_inline_suggestions([make_file(patch=SIMPLE_PATCH)], cfg))

    assert [comment.line for comment in result] == [1, 2, 3]


def test_lines_always_within_valid_set_under_adversarial_output(cfg, fake_llm):
    fake_llm(lambda prompt: json.dumps([{"line": n, "suggestion": f"s{n}"} for n in range(-3, 50)]))
    files = [
        make_file("a.py", "@@ -1,2 +1,2 @@\n-x\n+y\n z"),
        make_file("b.py", "@@ -10,3 +20,2 @@\n keep\n-drop\n+new"),
    ]

    result = asyncio.run(generate_inline_suggestions(files, cfg))

    patches = {f.filename: f.patch for f in files}
    assert result
    for comment in result:
        assert comment.line in compute_valid_lines(patches[comment.path])


def test_removed_and_patchless_files_are_skipped(cfg, fake_llm):
    calls = fake_llm(lambda prompt: "[]")
    files = [
        make_file("deleted.py", status="removed"),
        make_file("binary.png", patch=None),
        make_file("only_deletions.py", patch="@@ -1,2 +0,0 @@\n-a\n-b"),
    ]

    result = asyncio.run(generate_inline_suggestions(files, cfg))

    assert result == []
    assert calls == []


def test_only_first_five_files_are_requested_in_order(cfg, monkeypatch):
    requested: list[str] = []

    async def fake_request(pr_file, valid_lines, cfg):
        requested.append(pr_file.filename)
        return "[]"

    monkeypatch.setattr(suggestions, "_request_suggestions", fake_request)
    files = [make_file(f"file_{index}.py") for index in range(7)]

    asyncio.run(generate_inline_suggestions(files, cfg))

    assert requested == ["file_0.py", "file_1.py", "file_2.py", "file_3.py", "file_4.py"]


def test_file_cap_applies_before_skipping_ineligible_files(cfg, monkeypatch):
    requested: list[str] = []

    async def fake_request(pr_file, valid_lines, cfg):
        requested.append(pr_file.filename)
        return "[]"

    monkeypatch.setattr(suggestions, "_request_suggestions", fake_request)
    files = [make_file("removed.py", status="removed")] + [make_file(f"file_{index}.py") for index in range(6)]

    asyncio.run(generate_inline_suggestions(files, cfg))

    assert requested == ["file_0.py", "file_1.py", "file_2.py", "file_3.py"]


def test_failure_for_one_file_does_not_stop_the_others(cfg, fake_llm):
    def responder(prompt):
        if "broken.py" in prompt:
            return "Sorry, I cannot help with that."
        if "crash.py" in prompt:
            raise RuntimeError("rate limited")
        return '```json\n[{"line": 2, "suggestion": "ok"}]\n```'

    fake_llm(responder)
    files = [make_file("broken.py"), make_file("crash.py"), make_file("good.py")]

    result = asyncio.run(generate_inline_suggestions(files, cfg))

    assert [(comment.path, comment.line) for comment in result] == [("good.py", 2)]


def test_output_preserves_file_order_then_reply_order(cfg, fake_llm):
    def responder(prompt):
        if "first.py" in prompt:
            return '[{"line": 3, "suggestion": "a"}, {"line": 1, "suggestion": "b"}]'
        return '[{"line": 2, "suggestion": "c"}]'

    fake_llm(responder)
    files = [make_file("first.py"), make_file("second.py")]

    result = asyncio.run(generate_inline_suggestions(files, cfg))

    assert [(comment.path, comment.line) for comment in result] == [
        ("first.py", 3),
        ("first.py", 1),
        ("second.py", 2),
    ]
