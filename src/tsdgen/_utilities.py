"""Text, value and path helpers shared by the parsers and generators."""

from __future__ import annotations

import json
import posixpath
import re
from typing import Any, Iterable, TypeVar

T = TypeVar("T")

_JSON_ESCAPE = re.compile(r'([\[,]\s?)"?(undefined)"?(\s?[,\]])')
_JSON_QUOTE = re.compile(r"['`]")

_REMOVE_EXAMPLE_HTML = re.compile(r"<(\w+)[^\>]*>([\S\s]*?)<\/\1>")
_REMOVE_EXAMPLE_JSDOC = re.compile(r"@example[^@]*")
_REMOVE_EXAMPLE_MARKDOWN = re.compile(r"\s*```[^`]*?```")
_REMOVE_EXAMPLE_REPLACEMENT = "(see online documentation for example)"

_REMOVE_LINK_JSDOC = re.compile(r"\{@link\s+([^\}\|]+)(?:\|([^\}]+))?\}")
_REMOVE_LINK_MARKDOWN = re.compile(r"\[([^\]]+)\]\(([^\)]+)\)")
_REMOVE_LINK_MIX = re.compile(r"\[([^\]]+)\]\{@link\s+([^\}]+)\}")
_REMOVE_LINK_SPACE = re.compile(r"\s")

_TRANSFORM_LISTS = re.compile(r"\n\s*([\-\+\*]|\d+\.)\s+")
_URL_WEB = re.compile(r"[\w\-\+]+\:\S+[\w\/]")


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def unique_array(*sources: Iterable[T]) -> list[T]:
    """Concatenate the sources, keeping only the first occurrence of each item."""
    target: list[T] = []
    for source in sources:
        for item in source:
            if item not in target:
                target.append(item)
    return target


def is_deep_equal(a: Any, b: Any) -> bool:
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(is_deep_equal(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(
            is_deep_equal(item_a, item_b) for item_a, item_b in zip(a, b)
        )
    return type(a) is type(b) and a == b


def parse_json(text: str, allow_quirks: bool = False) -> Any:
    """Parse JSON. With `allow_quirks`, single quotes and backticks are treated
    as double quotes and bare `undefined` list items become strings."""
    if allow_quirks:
        text = _JSON_QUOTE.sub('"', text)
        text = _JSON_ESCAPE.sub(r'\1"\2"\3', text)
    return json.loads(text)


def remove_examples(text: str) -> str:
    text = _REMOVE_EXAMPLE_HTML.sub(_REMOVE_EXAMPLE_REPLACEMENT, text)
    text = _REMOVE_EXAMPLE_JSDOC.sub(_REMOVE_EXAMPLE_REPLACEMENT, text)
    return _REMOVE_EXAMPLE_MARKDOWN.sub(_REMOVE_EXAMPLE_REPLACEMENT, text)


def remove_links(text: str, removed_links: list[str] | None = None) -> str:
    """Replace JSDoc and Markdown links with their titles.

    Args:
        text: Text to clean up.
        removed_links: If given, receives the web URL of every removed link.
    """

    def _replace(title: str | None, link: str) -> str:
        if removed_links is not None:
            link_url = url(_REMOVE_LINK_SPACE.sub("", link))
            if link_url:
                removed_links.append(link_url)
        if title:
            return title.replace("#", ".", 1)
        return link

    text = _REMOVE_LINK_MIX.sub(lambda m: _replace(m.group(1), m.group(2)), text)
    text = _REMOVE_LINK_MARKDOWN.sub(lambda m: _replace(m.group(1), m.group(2)), text)
    return _REMOVE_LINK_JSDOC.sub(lambda m: _replace(m.group(2), m.group(1)), text)


def transform_lists(text: str) -> str:
    """Put every list item into its own paragraph."""
    return _TRANSFORM_LISTS.sub(r"\n\n\1 ", text)


def url(text: str) -> str | None:
    match = _URL_WEB.search(text)
    return match.group(0) if match else None


def urls(text: str) -> list[str]:
    return _URL_WEB.findall(text)


# Paths are module keys like `code/highcharts`, always with forward slashes.


def base(path: str) -> str:
    """Strip all extensions from the file name of a path."""
    slash_index = path.rfind("/")
    point_index = path.find(".", slash_index + 1)
    if point_index > slash_index + 1:
        return path[:point_index]
    return path


def parent(path: str) -> str:
    return posixpath.dirname(path)


def relative(from_path: str, to_path: str, module_mode: bool = False) -> str:
    """Relative path from one file to another.

    In module mode both paths are treated as files and the result always
    starts with `.`, as required by ES module specifiers."""
    from_directory, to_directory = from_path, to_path
    to_file = False
    if module_mode or posixpath.splitext(from_path)[1]:
        from_directory = posixpath.dirname(from_path)
    if module_mode or posixpath.splitext(to_path)[1]:
        to_directory = posixpath.dirname(to_path)
        to_file = True

    relative_path = posixpath.relpath(to_directory or ".", from_directory or ".")
    if relative_path == ".":
        relative_path = ""

    if module_mode and not relative_path.startswith("."):
        if not relative_path.startswith("/"):
            relative_path = "/" + relative_path
        relative_path = "." + relative_path

    if to_file:
        if relative_path and not relative_path.endswith("/"):
            relative_path += "/"
        relative_path += posixpath.basename(to_path)

    return relative_path
