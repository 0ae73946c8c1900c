"""Mention and hashtag extraction: pure functions, no I/O.

Tokens are ``@`` or ``#`` followed by Unicode word characters (letters,
digits, underscore). Extraction never checks that a mentioned username
exists; resolution against the user directory happens in the post service.
"""

import re

MENTION_PATTERN = re.compile(r"@(\w+)")
HASHTAG_PATTERN = re.compile(r"#(\w+)")


def _unique(matches: list[str]) -> list[str]:
    # dict keeps first-occurrence order while collapsing duplicates
    return list(dict.fromkeys(matches))


def extract_mentions(text: str | None) -> list[str]:
    """Usernames mentioned in ``text``, duplicates collapsed. Case is preserved."""
    if not text:
        return []
    return _unique(MENTION_PATTERN.findall(text))


def extract_hashtags(text: str | None) -> list[str]:
    """Lowercase hashtag names (without '#'), duplicates collapsed."""
    if not text:
        return []
    return _unique([tag.lower() for tag in HASHTAG_PATTERN.findall(text)])


def get_added_mentions(old_text: str | None, new_text: str | None) -> set[str]:
    """Usernames mentioned in the new text but not in the old one."""
    return set(extract_mentions(new_text)) - set(extract_mentions(old_text))


def get_removed_mentions(old_text: str | None, new_text: str | None) -> set[str]:
    """Usernames mentioned in the old text that the edit dropped."""
    return set(extract_mentions(old_text)) - set(extract_mentions(new_text))
