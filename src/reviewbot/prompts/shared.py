"""
Shared prompt fragments for all review bot agents.

These fragments ensure consistency in:
- Tone and actionability of the feedback
- Output format (the agent adds its own section heading)
- JSON-only replies for inline suggestions
"""

# =============================================================================
# GENERAL RULES
# =============================================================================
# Core principles that apply to every analysis agent.
# =============================================================================

GENERAL_RULES = """GENERAL RULES
- Only comment on code present in the diff.
- Provide concise, actionable feedback. Be constructive and specific.
- Reference file names and the relevant code when you point at a problem.
- Prefer a few important points over a long list of minor ones."""


# =============================================================================
# OUTPUT FORMAT
# =============================================================================
# The section heading (e.g. "**Security Review:**") is added in code so that
# the aggregated review always has exactly one heading per agent.
# =============================================================================

OUTPUT_FORMAT = """OUTPUT FORMAT
- Respond in GitHub-flavored markdown.
- Do NOT start with a heading or title; your text is placed under a heading for you.
- Keep the whole answer under 300 words."""


# =============================================================================
# JSON ONLY
# =============================================================================
# Used by the inline suggestion generator, whose reply is parsed as JSON.
# =============================================================================

JSON_ONLY_SYSTEM_ROLE = "You are a precise code reviewer. Always respond with valid JSON only."


# =============================================================================
# COMBINED SHARED SECTION
# =============================================================================

SHARED_RULES = f"""{GENERAL_RULES}

{OUTPUT_FORMAT}"""
