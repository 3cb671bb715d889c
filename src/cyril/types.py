from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union
from typing_extensions import TypeAlias

# ---------- Lens Model ----------

class LensOp(Enum):
    READ = "read"
    INVOKE = "invoke"

LensKey: TypeAlias = Union[str, int]

@dataclass(frozen=True)
class Lens:
    op: LensOp
    key: LensKey
    args: Optional[Tuple[Any, ...]] = None

    def __post_init__(self) -> None:
        if self.op is LensOp.READ and self.args is not None:
            raise UsageError(f"Read lens for '{self.key}' cannot carry arguments")

        if self.op is LensOp.INVOKE and self.args is None:
            object.__setattr__(self, "args", ())

    @classmethod
    def read(cls, key: LensKey) -> Lens:
        return cls(LensOp.READ, key)

    @classmethod
    def invoke(cls, key: LensKey, *args: Any) -> Lens:
        return cls(LensOp.INVOKE, key, tuple(args))

    def __repr__(self) -> str:
        if self.op is LensOp.READ:
            return f".{self.key}"

        rendered = ", ".join(repr(a) for a in self.args or ())
        return f".{self.key}({rendered})"

# ---------- Comparisons ----------

class ComparisonKind(Enum):
    EXACT = "to_be"
    PATTERN = "to_match"

@dataclass(frozen=True)
class Comparison:
    kind: ComparisonKind
    value: Any

@dataclass
class Deferred:
    """Callable wrapper whose result is the value compared at verification time."""
    thunk: Callable[[], Any]
    label: Optional[str] = None

    def __call__(self) -> Any:
        return self.thunk()

    def __repr__(self) -> str:
        return f"<deferred {self.label or getattr(self.thunk, '__name__', 'thunk')}>"

# ---------- Commands & Groups ----------

class CommandKind(Enum):
    LOG = "log"

@dataclass(frozen=True)
class Command:
    kind: CommandKind
    value: str

Body: TypeAlias = Callable[[], Any]

@dataclass
class CaseResult:
    group: str
    name: str
    passed: bool
    error: Optional[BaseException] = None

    @property
    def title(self) -> str:
        return f"{self.group} > {self.name}"

@dataclass(eq=False)
class TestCase:
    name: str
    body: Body
    result: Optional[CaseResult] = None

    # keep pytest from collecting this dataclass
    __test__ = False

@dataclass(eq=False)
class Group:
    name: str
    body: Body
    cases: List[TestCase] = field(default_factory=list)
    parent: Optional['Group'] = None

    @property
    def full_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name} > {self.name}"

    def __repr__(self) -> str:
        return f"<group {self.full_name!r} cases={len(self.cases)}>"

@dataclass(frozen=True)
class VerificationEvent:
    kind: ComparisonKind
    expected: Any
    actual: Any
    message: str
    passed: bool

@dataclass
class VerificationReport:
    cases: List[CaseResult] = field(default_factory=list)
    log: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(case.passed for case in self.cases)

    def failures(self) -> List[CaseResult]:
        return [case for case in self.cases if not case.passed]

# ---------- Exceptions (keep Cyril* canonical) ----------

class CyrilError(Exception):
    pass

class UsageError(CyrilError):
    pass

class LensPathError(UsageError):
    def __init__(self, path: str, message: str, column: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.column = column

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.column is None:
            return f"{msg} in path {self.path!r}"

        return f"{msg} in path {self.path!r} (col {self.column})"

class LensError(CyrilError):
    pass

class UnresolvedLensError(LensError):
    def __init__(self, recv: Any, lens: Lens, reason: str = "has no member"):
        super().__init__(f"{type(recv).__name__} {reason} '{lens.key}'")
        self.receiver = recv
        self.lens = lens

class AssertionFailure(CyrilError, AssertionError):
    def __init__(self, kind: ComparisonKind, expected: Any, actual: Any, message: str):
        super().__init__(message)
        self.kind = kind
        self.expected = expected
        self.actual = actual
        self.message = message

class VerificationTimeout(CyrilError):
    def __init__(self, subject: Any, timeout: float):
        super().__init__(f"Subject {subject!r} did not resolve within {timeout}s")
        self.subject = subject
        self.timeout = timeout

class CaseFailure(CyrilError):
    def __init__(self, result: CaseResult):
        super().__init__(f"{result.title} failed: {result.error}")
        self.result = result
