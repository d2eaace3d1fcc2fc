"""Path exclusion by substring.

A path is excluded when it contains any non-empty entry of the exclusion
list.  Empty entries never match, so a stray comma in ``--exclude`` does
not silence the whole tree.
"""

from collections.abc import Iterable


def is_excluded(path: str, exclusions: Iterable[str]) -> bool:
    """True iff some non-empty entry of *exclusions* is a substring of *path*."""
    return any(entry and entry in path for entry in exclusions)


def parse_exclusions(text: str) -> tuple[str, ...]:
    """Split a comma-separated exclusion list, keeping order and dropping blanks.

    ::

        >>> parse_exclusions(".git, node_modules,,dist")
        ('.git', 'node_modules', 'dist')
    """
    return tuple(part.strip() for part in text.split(",") if part.strip())
