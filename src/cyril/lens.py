from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Iterator, Tuple

from .types import Lens, LensKey, LensOp, UnresolvedLensError

_MISSING = object()
_INDEX_RE = re.compile(r"-?[0-9]+")

class LensChain:
    """Ordered, append-only sequence of lenses; every extension returns a new chain."""

    __slots__ = ("_lenses",)

    def __init__(self, lenses: Iterable[Lens] = ()):
        self._lenses: Tuple[Lens, ...] = tuple(lenses)

    def extend(self, *lenses: Lens) -> LensChain:
        return LensChain(self._lenses + lenses)

    def __iter__(self) -> Iterator[Lens]:
        return iter(self._lenses)

    def __len__(self) -> int:
        return len(self._lenses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LensChain):
            return NotImplemented
        return self._lenses == other._lenses

    def __hash__(self) -> int:
        return hash(self._lenses)

    def __repr__(self) -> str:
        return "".join(repr(lens) for lens in self._lenses) or "<identity>"

    def apply(self, value: Any) -> Any:
        return apply_chain(value, self._lenses)

def lookup(recv: Any, key: LensKey) -> Any:
    """Fetch `recv[key]` or `recv.key`; returns _MISSING when neither exists."""
    match recv:
        case Mapping():
            if key in recv:
                return recv[key]
        case str() | bytes():
            pass
        case Sequence():
            index = _as_index(key)

            if index is not None:
                if -len(recv) <= index < len(recv):
                    return recv[index]
                return _MISSING

    if isinstance(key, str):
        return getattr(recv, key, _MISSING)

    return _MISSING

def _as_index(key: LensKey) -> int | None:
    if isinstance(key, bool):
        return None

    if isinstance(key, int):
        return key

    if _INDEX_RE.fullmatch(key):
        return int(key)

    return None

def apply_lens(recv: Any, lens: Lens) -> Any:
    # absence propagates through the rest of the chain
    if recv is None:
        return None

    member = lookup(recv, lens.key)

    if lens.op is LensOp.READ:
        return None if member is _MISSING else member

    if member is _MISSING:
        raise UnresolvedLensError(recv, lens)

    if not callable(member):
        raise UnresolvedLensError(recv, lens, reason="has non-callable member")

    return member(*(lens.args or ()))

def apply_chain(value: Any, lenses: Iterable[Lens]) -> Any:
    for lens in lenses:
        value = apply_lens(value, lens)

    return value

def read_path(*keys: LensKey) -> Tuple[Lens, ...]:
    return tuple(Lens.read(key) for key in keys)
