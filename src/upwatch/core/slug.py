"""Workspace slug generation."""

import re

# Width of the workspaces.slug column
MAX_SLUG_LENGTH = 60
SLUG_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_SEPARATORS = re.compile(r"[\s-]+")


def generate_slug(name: str) -> str:
    """Derive a kebab-case slug from a workspace name.

    Characters outside ``[a-z0-9]``, whitespace and hyphens are dropped after
    lowercasing. Runs of whitespace (and existing hyphens) become single
    hyphens and leading or trailing hyphens are stripped, so an already
    kebab-cased name is returned unchanged.

    The result is cut to MAX_SLUG_LENGTH, dropping any hyphen left dangling
    at the cut. An empty or all-symbol name yields an empty string. Callers
    that need a non-empty slug must validate the name before calling.

    Examples:
        >>> generate_slug("My Workspace")
        'my-workspace'
        >>> generate_slug("hello@world!")
        'helloworld'
    """
    slug = _DISALLOWED.sub("", name.lower())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")[:MAX_SLUG_LENGTH].rstrip("-")
