"""Intermediate representation of an analysed hardware module."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class CodegenError(Exception):
    """Raised when a design cannot be turned into CSS."""


class Op(enum.Enum):
    """Operators that may appear in expressions."""

    LOGIC_NOT = "!"
    LOGIC_AND = "&&"
    LOGIC_OR = "||"
    LESS = "<:"
    LESS_EQ = "<="
    GREATER = ">:"
    GREATER_EQ = ">="
    EQ = "=="
    EQ_WILDCARD = "==?"
    NE = "!="
    NE_WILDCARD = "!=?"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    BIT_NOT = "~"
    LOGIC_SHIFT_L = "<<"
    LOGIC_SHIFT_R = ">>"

    def __str__(self) -> str:
        return self.value


class VarKind(enum.Enum):
    """How a variable was declared."""

    INPUT = "input"
    OUTPUT = "output"
    INOUT = "inout"
    VARIABLE = "var"
    LET = "let"
    PARAM = "param"
    CONST = "const"


@dataclass(frozen=True)
class Select:
    """Bit or part select applied to a variable, e.g. ``x[3]``."""

    items: tuple = ()
    is_range: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def is_empty(self) -> bool:
        return not self.items

    def dimension(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class VariableFactor:
    """Reference to a variable, with optional array index and bit select."""

    id: int
    index: tuple = ()
    select: Select = field(default_factory=Select)

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", tuple(self.index))


@dataclass(frozen=True)
class ValueFactor:
    """Literal value, held as its source text such as ``32'sh00000001``."""

    literal: str


Factor = Union[VariableFactor, ValueFactor]


@dataclass(frozen=True)
class Term:
    factor: Factor


@dataclass(frozen=True)
class Unary:
    op: Op
    inner: "Expression"


@dataclass(frozen=True)
class Binary:
    lhs: "Expression"
    op: Op
    rhs: "Expression"


Expression = Union[Term, Unary, Binary]


@dataclass(frozen=True)
class AssignDestination:
    id: int
    index: tuple = ()
    select: Select = field(default_factory=Select)

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", tuple(self.index))


@dataclass(frozen=True)
class AssignStatement:
    dst: tuple
    expr: Expression

    def __post_init__(self) -> None:
        object.__setattr__(self, "dst", tuple(self.dst))


@dataclass(frozen=True)
class IfStatement:
    cond: Expression
    true_side: tuple = ()
    false_side: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "true_side", tuple(self.true_side))
        object.__setattr__(self, "false_side", tuple(self.false_side))


@dataclass(frozen=True)
class IfResetStatement:
    true_side: tuple = ()
    false_side: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "true_side", tuple(self.true_side))
        object.__setattr__(self, "false_side", tuple(self.false_side))


@dataclass(frozen=True)
class NullStatement:
    pass


Statement = Union[AssignStatement, IfStatement, IfResetStatement, NullStatement]


@dataclass(frozen=True)
class CombDeclaration:
    statements: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "statements", tuple(self.statements))


@dataclass(frozen=True)
class FfDeclaration:
    clock: int
    reset: Optional[int] = None
    statements: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "statements", tuple(self.statements))


@dataclass(frozen=True)
class NullDeclaration:
    pass


Declaration = Union[CombDeclaration, FfDeclaration, NullDeclaration]


@dataclass(frozen=True)
class Variable:
    """A declared signal: its hierarchical path, kind and type text."""

    path: str
    kind: VarKind
    type: str


@dataclass
class Module:
    name: str
    variables: dict = field(default_factory=dict)
    declarations: list = field(default_factory=list)


@dataclass
class Ir:
    components: list = field(default_factory=list)