from __future__ import annotations

import re


# Matches hunk headers like: @@ -10,5 +12,8 @@
HUNK_HEADER_RE = re.compile(r"^@@\s+-\d+(?:,\d+)?\s+\+(\d+)(?:,\d+)?\s+@@")


def compute_valid_lines(patch: str | None) -> list[int]:
    """
    Parse a unified diff patch and return the new-file line numbers that
    an inline review comment can be anchored to, in patch order.

    GitHub's review API only accepts lines that exist on the diff's "new" side:
    - Lines starting with '+' (additions), excluding the '+++' file header
    - Lines starting with ' ' (context)
    - NOT lines starting with '-' (deletions)

    Every hunk header resets the cursor to that hunk's new-file start line.
    """
    if not patch:
        return []

    valid_lines: list[int] = []
    current_new_line = 0

    for line in patch.split("\n"):
        hunk_match = HUNK_HEADER_RE.match(line)
        if hunk_match:
            current_new_line = int(hunk_match.group(1))
            continue

        if line.startswith("+") and not line.startswith("+++"):
            valid_lines.append(current_new_line)
            current_new_line += 1
        elif line.startswith(" "):
            valid_lines.append(current_new_line)
            current_new_line += 1
        # Deletions, "\ No newline at end of file" and anything else
        # leave the new-file cursor where it is

    return valid_lines


def extract_line_from_patch(patch: str | None, target_line: int) -> str | None:
    """
    Extract the source code at a specific new-file line number from a patch.
    Returns the line content without the diff prefix (+ or space).
    """
    if not patch:
        return None

    current_new_line = 0

    for line in patch.split("\n"):
        hunk_match = HUNK_HEADER_RE.match(line)
        if hunk_match:
            current_new_line = int(hunk_match.group(1))
            continue

        if (line.startswith("+") and not line.startswith("+++")) or line.startswith(" "):
            if current_new_line == target_line:
                return line[1:]
            current_new_line += 1

    return None
