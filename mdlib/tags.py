"""
Tag extraction.

A document's tags come from two places: the ``tags:`` line of its front
matter, and inline ``#markers`` anywhere in the text.
"""

from .frontmatter import TAGS_KEY, parse_frontmatter, parse_tags_value, unique


def frontmatter_tags(content: str) -> list[str]:
    """Tags listed in the front matter. The last ``tags:`` line wins."""
    fm = parse_frontmatter(content)
    if fm is None:
        return []
    values = fm.get_all(TAGS_KEY)
    if not values:
        return []
    return unique(parse_tags_value(values[-1]))


def _inline_tag(word: str) -> str:
    """'#todo,' -> 'todo'; returns '' for tokens that are not tags."""
    if not word.startswith("#") or len(word) < 2:
        return ""
    tag = word[1:]
    end = len(tag)
    while end > 0 and not tag[end - 1].isalnum():
        end -= 1
    return tag[:end]


def inline_tags(content: str) -> list[str]:
    """Inline ``#tag`` markers in content order, without duplicates."""
    return unique(tag for tag in map(_inline_tag, content.split()) if tag)


def extract_tags(content: str) -> list[str]:
    """
    Derive the ordered tag set of a document.

    Front matter tags come first in their listed order, followed by inline
    markers in the order they appear.  Duplicates are dropped on exact,
    case-sensitive match.  Malformed input yields fewer tags, never an error.
    """
    return unique([*frontmatter_tags(content), *inline_tags(content)])
