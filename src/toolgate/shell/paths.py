"""Path references scraped out of raw command strings.

The scan is boundary-aware rather than syntax-aware: a token is a maximal run
of characters that are not whitespace, quotes, redirection or control
operators, ``=``, or parentheses.  That keeps ``cat .env``, ``<.env``,
``--env-file=.env`` and ``"$(cat .env)"`` all yielding ``.env`` while
``.envrc`` stays a different token.
"""

from __future__ import annotations

import re

_TOKEN = re.compile(r"[^\s<>|;&\"'`()=]+")

# Pure shell punctuation and option flags are never paths.
_NOT_A_PATH = re.compile(r"^(?:\$+|\{|\}|!|\\|-{1,2}[\w-]*)$")


def extract_path_references(command: str) -> list[str]:
    """Path-like tokens of *command* in order of first appearance.

    >>> extract_path_references("cat .env | grep KEY > out.txt")
    ['cat', '.env', 'grep', 'KEY', 'out.txt']
    """
    seen: dict[str, None] = {}
    for match in _TOKEN.finditer(command):
        token = match.group(0).rstrip(",")
        if token and not _NOT_A_PATH.match(token):
            seen.setdefault(token, None)
    return list(seen)
