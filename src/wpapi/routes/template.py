"""Path template tokenizer.

Route maps key every route by a path template relative to the API root,
for example::

    /wp/v2/posts/(?P<parent>[\\d]+)/revisions/(?P<id>[\\d]+)

:func:`parse_template` turns such a template into one token per path
segment: a :class:`~wpapi.models.PathLiteral` for fixed segments and a
:class:`~wpapi.models.PathParam` for named groups. The regular expression
inside a named group is scanned with bracket and escape awareness, so
patterns containing ``/``, ``)`` inside a character class, or nested
non-capturing groups are kept intact instead of being split.

:func:`to_identifier` maps wire names (``block-types``, ``_fields``,
``class``) to valid Python attribute names for the generated setters.
"""

from __future__ import annotations

import keyword
import re
from typing import Union

from wpapi.exceptions import DescriptorError
from wpapi.models import PathLiteral, PathParam

Token = Union[PathLiteral, PathParam]

_PARAM_OPEN = "(?P<"
_PARAM_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")


def parse_template(template: str) -> list[Token]:
    """Split a path template into one token per ``/``-separated segment.

    Args:
        template: A path template such as ``/wp/v2/posts/(?P<id>[\\d]+)``.

    Returns:
        Ordered tokens, one per non-empty segment, preserving declared
        parameter order.

    Raises:
        DescriptorError: On an unterminated or unbalanced named group, an
            invalid parameter name, a stray parenthesis outside a named
            group, or a segment mixing literal text with a parameter.

    Example::

        >>> parse_template("/wp/v2/customendpoint/(?P<thing>[\\w-]+)")
        [PathLiteral(value='wp'), PathLiteral(value='v2'),
         PathLiteral(value='customendpoint'),
         PathParam(name='thing', pattern='[\\\\w-]+')]
    """
    if not isinstance(template, str):
        raise DescriptorError(f"Path template must be a string, got {type(template).__name__}")

    segments: list[list[Token]] = [[]]
    literal: list[str] = []

    def flush_literal() -> None:
        if literal:
            segments[-1].append(PathLiteral(value="".join(literal)))
            literal.clear()

    i = 0
    length = len(template)
    while i < length:
        char = template[i]
        if template.startswith(_PARAM_OPEN, i):
            flush_literal()
            name_start = i + len(_PARAM_OPEN)
            name_end = template.find(">", name_start)
            if name_end == -1:
                raise DescriptorError(f"Unterminated parameter name in template {template!r}")
            name = template[name_start:name_end]
            if not _PARAM_NAME_RE.fullmatch(name):
                raise DescriptorError(
                    f"Invalid parameter name {name!r} in template {template!r}"
                )
            group_end = _find_group_end(template, name_end + 1)
            segments[-1].append(
                PathParam(name=name, pattern=template[name_end + 1 : group_end])
            )
            i = group_end + 1
        elif char == "/":
            flush_literal()
            segments.append([])
            i += 1
        elif char in "()":
            raise DescriptorError(
                f"Unexpected {char!r} at offset {i} in template {template!r}"
            )
        else:
            literal.append(char)
            i += 1
    flush_literal()

    tokens: list[Token] = []
    for segment in segments:
        if not segment:
            continue
        if len(segment) > 1:
            raise DescriptorError(
                f"Segment mixing literal text and parameters is not supported: {template!r}"
            )
        tokens.append(segment[0])
    return tokens


def _find_group_end(template: str, start: int) -> int:
    """Return the index of the ``)`` closing the group whose body begins at *start*."""
    depth = 1
    in_class = False
    i = start
    while i < len(template):
        char = template[i]
        if char == "\\":
            i += 2
            continue
        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise DescriptorError(f"Unbalanced parentheses in template {template!r}")


def to_identifier(name: str) -> str:
    """Convert a wire name to a valid Python attribute name.

    1. Non-alphanumeric/non-underscore characters become underscores
       (``block-types`` becomes ``block_types``).
    2. Leading underscores are stripped (``_fields`` becomes ``fields``).
    3. A leading digit gets an ``n`` prefix.
    4. Python keywords get a trailing underscore (``class`` becomes
       ``class_``).

    Args:
        name: The raw name from a path template or argument schema.

    Returns:
        A string usable with :func:`setattr` and dotted attribute access.
    """
    ident = _INVALID_IDENT_RE.sub("_", name).lstrip("_")
    if not ident:
        return "param"
    if ident[0].isdigit():
        ident = "n" + ident
    if keyword.iskeyword(ident):
        ident += "_"
    return ident
