"""
Front matter parsing and rewriting.

A document may open (after leading whitespace) with a block delimited by
``---`` markers::

    ---
    title: Groceries
    category: lists
    tags: [food, weekly]
    ---

Only ``tags:`` and ``category:`` are interpreted.  The block is parsed into
an ordered list of lines so that rewriting the tags leaves every other line
exactly as it was.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

FRONTMATTER_DELIM = "---"
TAGS_KEY = "tags"
CATEGORY_KEY = "category"


def _locate(content: str) -> Optional[tuple[int, int]]:
    """Return (start of block text, index of closing marker), or None."""
    start = len(content) - len(content.lstrip())
    if not content.startswith(FRONTMATTER_DELIM, start):
        return None
    body_start = start + len(FRONTMATTER_DELIM)
    end = content.find(FRONTMATTER_DELIM, body_start)
    if end == -1:
        return None
    return body_start, end


def extract_frontmatter(content: str) -> Optional[str]:
    """
    Return the text between the opening and closing markers, stripped.

    Returns None if the content does not start with ``---`` (ignoring
    leading whitespace) or the block is never closed.
    """
    span = _locate(content)
    if span is None:
        return None
    body_start, end = span
    return content[body_start:end].strip()


@dataclass
class FrontMatterLine:
    """One line of a front matter block; key is None for lines without a colon."""
    raw: str
    key: Optional[str] = None
    value: str = ""


class FrontMatter:
    """Ordered, lossless view of a front matter block."""

    def __init__(self, lines: Optional[list[FrontMatterLine]] = None):
        self.lines = lines or []

    @classmethod
    def parse(cls, text: str) -> "FrontMatter":
        lines = []
        for raw in text.splitlines():
            stripped = raw.lstrip()
            if ":" in stripped:
                key, _, value = stripped.partition(":")
                lines.append(FrontMatterLine(raw=raw, key=key, value=value.strip()))
            else:
                lines.append(FrontMatterLine(raw=raw))
        return cls(lines)

    def get(self, key: str) -> Optional[str]:
        """Value of the first line with this key."""
        for line in self.lines:
            if line.key == key:
                return line.value
        return None

    def get_all(self, key: str) -> list[str]:
        return [line.value for line in self.lines if line.key == key]

    def set_tags(self, tags: list[str]) -> None:
        """Replace the first tags line, drop any later ones, append if absent."""
        new_line = FrontMatterLine(raw=format_tags_line(tags), key=TAGS_KEY,
                                   value=format_tags_value(tags))
        result = []
        replaced = False
        for line in self.lines:
            if line.key == TAGS_KEY:
                if not replaced:
                    result.append(new_line)
                    replaced = True
                continue
            result.append(line)
        if not replaced:
            result.append(new_line)
        self.lines = result

    def serialize(self) -> str:
        """Block body, one line per entry, each newline-terminated."""
        return "".join(f"{line.raw}\n" for line in self.lines)


def parse_frontmatter(content: str) -> Optional[FrontMatter]:
    """Parse the front matter of a document, or None if it has none."""
    text = extract_frontmatter(content)
    if text is None:
        return None
    return FrontMatter.parse(text)


def get_field(content: str, key: str) -> Optional[str]:
    """Value of the first ``key:`` line in the front matter, if any."""
    fm = parse_frontmatter(content)
    if fm is None:
        return None
    return fm.get(key)


def parse_tags_value(value: str) -> list[str]:
    """
    Parse the right-hand side of a ``tags:`` line.

    ``[a, b, c]`` is split on commas; anything else is split on whitespace.
    Empty items are dropped.
    """
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        items = (item.strip() for item in value[1:-1].split(","))
    else:
        items = value.split()
    return [item for item in items if item]


def format_tags_value(tags: Iterable[str]) -> str:
    return f"[{', '.join(tags)}]"


def format_tags_line(tags: Iterable[str]) -> str:
    return f"{TAGS_KEY}: {format_tags_value(tags)}"


def unique(tags: Iterable[str]) -> list[str]:
    """Drop repeated tags, keeping first occurrences in order."""
    seen = set()
    result = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def rewrite_tags(content: str, tags: Iterable[str]) -> str:
    """
    Return content whose front matter lists exactly ``tags``.

    Existing front matter keeps all of its other lines; a document without
    front matter gets a new block prepended and its text left untouched.
    If the document already yields this tag list, content is returned as is.
    """
    from .tags import extract_tags

    tags = unique(tags)
    if extract_tags(content) == tags:
        return content

    span = _locate(content)
    if span is None:
        return f"{FRONTMATTER_DELIM}\n{format_tags_line(tags)}\n{FRONTMATTER_DELIM}\n\n{content}"

    body_start, end = span
    fm = FrontMatter.parse(content[body_start:end].strip())
    fm.set_tags(tags)

    rest = content[end + len(FRONTMATTER_DELIM):]
    if rest.startswith("\r\n"):
        rest = rest[2:]
    elif rest.startswith("\n"):
        rest = rest[1:]
    return f"{FRONTMATTER_DELIM}\n{fm.serialize()}{FRONTMATTER_DELIM}\n{rest}"
