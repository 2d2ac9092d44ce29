"""Display text for type expressions and other syntax fragments.

The renderer never looks at a ``Syntax`` itself; it is handed a
``Stringifier`` and calls it wherever a rendered type appears.
"""

from __future__ import annotations

from typing import Callable, TypeAlias

from rsoutline.config import TypeStyle
from rsoutline.declarations import Syntax

Stringifier: TypeAlias = Callable[[Syntax], str]


def source_text(syntax: Syntax) -> str:
    """Source text with every whitespace run collapsed to a single space."""
    return " ".join(syntax.text.split())


def token_text(syntax: Syntax) -> str:
    """Leaf tokens joined by single spaces, e.g. ``Vec < String >``.

    Falls back to ``source_text`` for fragments built without tokens.
    """
    if not syntax.tokens:
        return source_text(syntax)
    return " ".join(syntax.tokens)


_STRINGIFIERS: dict[TypeStyle, Stringifier] = {
    TypeStyle.SOURCE: source_text,
    TypeStyle.TOKENS: token_text,
}


def get_stringifier(style: TypeStyle) -> Stringifier:
    """Return the stringifier for a configured type style."""
    return _STRINGIFIERS[style]


__all__ = ["Stringifier", "source_text", "token_text", "get_stringifier"]
