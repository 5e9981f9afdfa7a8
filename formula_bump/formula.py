"""Read and rewrite the fields of a Homebrew formula.

Only the first `url`, `sha256` and `version` stanzas are touched, which in a
typical formula are the top-level source fields (bottle checksums use the
`sha256 cellar: ...` form and never match).
"""

import re
from dataclasses import dataclass

from formula_bump.errors import MalformedContentError

SHA256_RE = re.compile(r'\bsha256\s+"([^"]*)"')

# field name -> pattern capturing the text before and after the quoted value
FIELD_PATTERNS: dict[str, re.Pattern[str]] = {
    "url": re.compile(r'(\burl\s+")[^"]*(")'),
    "sha256": re.compile(r'(\bsha256\s+")[^"]*(")'),
    "version": re.compile(r'(\bversion\s+")[^"]*(")'),
}

FORMULA_SUFFIX = ".rb"
FORMULA_DIR_PREFIX = "Formula/"


@dataclass(frozen=True)
class FormulaRewrite:
    """Result of rewriting a formula's source fields."""

    content: str
    updated: tuple[str, ...]
    missing: tuple[str, ...]


def extract_sha256(text: str) -> str:
    """Return the value of the first `sha256 "..."` line.

    Raises:
        MalformedContentError: If the formula has no sha256 line.
    """
    match = SHA256_RE.search(text)
    if not match:
        raise MalformedContentError('Formula has no sha256 "<value>" line')
    return match.group(1)


def formula_name_from_path(path: str) -> str:
    """Derive the formula name: "Formula/foo.rb" -> "foo"."""
    name = path[: -len(FORMULA_SUFFIX)] if path.endswith(FORMULA_SUFFIX) else path
    return name.replace(FORMULA_DIR_PREFIX, "")


def _replace_field(text: str, field: str, value: str) -> tuple[str, bool]:
    # A function replacement keeps backslashes in the value literal
    new_text, count = FIELD_PATTERNS[field].subn(
        lambda m: f"{m.group(1)}{value}{m.group(2)}", text, count=1
    )
    return new_text, count == 1


def rewrite_formula(text: str, download_url: str, sha256: str, version: str) -> FormulaRewrite:
    """Point the formula at a new download.

    Args:
        text: Current formula source
        download_url: New value for `url`
        sha256: New value for `sha256`
        version: New value for `version` (the release tag)

    Returns:
        FormulaRewrite with the new text and which fields were found.
        Fields absent from the formula are left alone and listed in `missing`.
    """
    values = {"url": download_url, "sha256": sha256, "version": version}
    updated: list[str] = []
    missing: list[str] = []

    for field, value in values.items():
        text, replaced = _replace_field(text, field, value)
        (updated if replaced else missing).append(field)

    return FormulaRewrite(content=text, updated=tuple(updated), missing=tuple(missing))


def default_commit_message(repo_name: str, tag_name: str) -> str:
    return f"Update {repo_name} to {tag_name}"


def resolve_commit_message(message: str | None, repo_name: str, tag_name: str) -> str:
    """Use the caller's message verbatim, or synthesize one when it is blank."""
    if message is None or not message.strip():
        return default_commit_message(repo_name, tag_name)
    return message.strip()
