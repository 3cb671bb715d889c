"""Textual lens paths: ``a.items[0].name()`` → a tuple of lenses."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from lark import Lark, Token, Transformer, UnexpectedInput

from .types import Lens, LensPathError

PATH_GRAMMAR = r"""
start: _first _rest*

_first: member
      | index
_rest: "." member
     | index

member: NAME call?
call: "(" args? ")"
args: arg ("," arg)*

index: "[" SIGNED_INT "]"     -> int_index
     | "[" ESCAPED_STRING "]" -> key_index

?arg: SIGNED_NUMBER  -> number
    | ESCAPED_STRING -> string
    | "true"         -> true
    | "false"        -> false
    | "none"         -> none

%import common.CNAME -> NAME
%import common.SIGNED_INT
%import common.SIGNED_NUMBER
%import common.ESCAPED_STRING
%import common.WS
%ignore WS
"""

_PARSER: Optional[Lark] = None

def _unquote(token: Token) -> str:
    return token[1:-1].replace('\\"', '"').replace("\\\\", "\\")

class PathToLenses(Transformer):
    def start(self, items: List[Lens]) -> Tuple[Lens, ...]:
        return tuple(items)

    def member(self, items: List[Any]) -> Lens:
        name = str(items[0])

        if len(items) == 1:
            return Lens.read(name)

        return Lens.invoke(name, *items[1])

    def call(self, items: List[Any]) -> Tuple[Any, ...]:
        return tuple(items[0]) if items else ()

    def args(self, items: List[Any]) -> List[Any]:
        return list(items)

    def int_index(self, items: List[Token]) -> Lens:
        return Lens.read(int(items[0]))

    def key_index(self, items: List[Token]) -> Lens:
        return Lens.read(_unquote(items[0]))

    def number(self, items: List[Token]) -> int | float:
        raw = str(items[0])

        if any(ch in raw for ch in ".eE"):
            return float(raw)
        return int(raw)

    def string(self, items: List[Token]) -> str:
        return _unquote(items[0])

    def true(self, _items: List[Any]) -> bool:
        return True

    def false(self, _items: List[Any]) -> bool:
        return False

    def none(self, _items: List[Any]) -> None:
        return None

def make_parser() -> Lark:
    global _PARSER

    if _PARSER is None:
        _PARSER = Lark(PATH_GRAMMAR, parser="lalr")

    return _PARSER

def parse_path(path: str) -> Tuple[Lens, ...]:
    if not path.strip():
        raise LensPathError(path, "Empty lens path")

    try:
        tree = make_parser().parse(path)
    except UnexpectedInput as exc:
        raise LensPathError(path, "Malformed lens path", column=getattr(exc, "column", None)) from exc

    return PathToLenses().transform(tree)
