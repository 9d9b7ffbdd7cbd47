"""Path utilities for the virtual namespace.

Virtual paths are relative and slash-separated::

    ""                         root
    "octo"                     owner
    "octo/widgets"             repository
    "octo/widgets/src/app.py"  folder or file
"""

from __future__ import annotations

SEPARATOR = "/"


# =============================================================================
# Parsing
# =============================================================================


def parse_path(path: str | None) -> list[str] | None:
    """Split a virtual path into segments.

    - An empty or whitespace-only path is the root (no segments).
    - A single trailing separator is dropped.
    - Any other empty or whitespace-only segment makes the path invalid.

    Examples:
        parse_path("") -> []
        parse_path("octo/widgets/") -> ["octo", "widgets"]
        parse_path("octo//widgets") -> None
        parse_path("/octo") -> None
    """
    if path is None or not path.strip():
        return []

    sections = path.split(SEPARATOR)
    for section in sections[:-1]:
        if not section.strip():
            return None

    if not sections[-1].strip():
        sections = sections[:-1]
    return sections


def canonical_path(path: str | None) -> str | None:
    """Return the cache key form of *path*, or ``None`` when invalid."""
    sections = parse_path(path)
    if sections is None:
        return None
    return SEPARATOR.join(sections)


def join_path(*segments: str) -> str:
    """Join non-empty segments with the separator.

    Examples:
        join_path("octo", "widgets") -> "octo/widgets"
        join_path("", "octo") -> "octo"
    """
    return SEPARATOR.join(s.strip(SEPARATOR) for s in segments if s and s.strip(SEPARATOR))


def normalize_tree_path(path: str) -> str:
    """Normalize a path reported by a tree listing.

    Backslashes are folded to the separator and surrounding separators
    are stripped.
    """
    return path.replace("\\", SEPARATOR).strip(SEPARATOR)


# =============================================================================
# Hierarchy
# =============================================================================


def split_path(path: str) -> tuple[str, str]:
    """Split path into (parent, name).

    Examples:
        split_path("octo/widgets/README.md") -> ("octo/widgets", "README.md")
        split_path("octo") -> ("", "octo")
        split_path("") -> ("", "")
    """
    path = path.rstrip(SEPARATOR)
    if SEPARATOR not in path:
        return "", path
    parent, _, name = path.rpartition(SEPARATOR)
    return parent, name


def parent_path(path: str) -> str:
    """Return the parent virtual path (root for single segments)."""
    return split_path(path)[0]


def child_name(path: str) -> str:
    """Return the last segment of *path*."""
    return split_path(path)[1]


def is_immediate_child(parent: str, child: str) -> bool:
    """True when *child* sits exactly one level below *parent*."""
    if not child or child == parent:
        return False
    return parent_path(child) == parent


def make_path(parent: str, child: str) -> str:
    """Combine a parent path and a child path."""
    return join_path(parent, child)
