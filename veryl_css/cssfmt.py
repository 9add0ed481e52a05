"""Text builders for the CSS rules emitted by the generator."""

from __future__ import annotations

import enum
from typing import Collection, Iterable

from .ir import CodegenError


class CompFn(enum.Enum):
    """Comparison helper functions, valued by their CSS name."""

    LT = "--veryl-lt"
    LTE = "--veryl-lte"
    GT = "--veryl-gt"
    GTE = "--veryl-gte"
    EQ = "--veryl-eq"
    NEQ = "--veryl-neq"


_COMP_BODIES = {
    CompFn.LT: "clamp(0, sign(calc(var(--b) - var(--a))), 1)",
    CompFn.LTE: "clamp(0, calc(1 + sign(calc(var(--b) - var(--a)))), 1)",
    CompFn.GT: "clamp(0, sign(calc(var(--a) - var(--b))), 1)",
    CompFn.GTE: "clamp(0, calc(1 + sign(calc(var(--a) - var(--b)))), 1)",
    CompFn.EQ: "clamp(0, calc(1 - abs(sign(calc(var(--a) - var(--b))))), 1)",
    CompFn.NEQ: "abs(sign(calc(var(--a) - var(--b))))",
}


class BitFn(enum.Enum):
    """Bitwise helper functions, valued by (width, operation)."""

    AND8 = (8, "and")
    AND16 = (16, "and")
    OR8 = (8, "or")
    OR16 = (16, "or")
    XOR8 = (8, "xor")
    XOR16 = (16, "xor")
    NOT8 = (8, "not")
    NOT16 = (16, "not")
    SHL8 = (8, "shl")
    SHL16 = (16, "shl")
    SHR8 = (8, "shr")
    SHR16 = (16, "shr")

    @property
    def bits(self) -> int:
        return self.value[0]

    @property
    def op(self) -> str:
        return self.value[1]

    @property
    def css_name(self) -> str:
        return f"--veryl-b{self.op}{self.bits}"


def comp_functions(used: Collection[CompFn]) -> str:
    """CSS ``@function`` definitions for the used comparisons, in fixed order."""
    return "".join(
        f"@function {fn.value}(--a <number>, --b <number>) returns <integer> {{\n"
        f"  result: {_COMP_BODIES[fn]};\n}}\n\n"
        for fn in CompFn
        if fn in used
    )


def bit_functions(used: Collection[BitFn]) -> str:
    """CSS ``@function`` definitions for the used bitwise helpers, in fixed order."""
    return "".join(bit_function_body(fn.bits, fn.op) for fn in BitFn if fn in used)


def _extract(arg: str, i: int) -> str:
    if i == 0:
        return f"mod(var(--{arg}), 2)"
    return f"mod(round(down, var(--{arg}) / {1 << i}), 2)"


def _bit_term(op: str, j: int) -> str:
    if op == "and":
        return f"var(--a{j}) * var(--b{j})"
    if op == "or":
        return f"min(1, calc(var(--a{j}) + var(--b{j})))"
    if op == "xor":
        return f"calc(min(1, calc(var(--a{j}) + var(--b{j}))) - var(--a{j}) * var(--b{j}))"
    raise CodegenError(f"unknown bitwise operation: {op}")


def bit_function_body(bits: int, op: str) -> str:
    """One CSS ``@function`` implementing ``op`` on ``bits``-wide integers."""
    header_ab = "(--a <integer>, --b <integer>) returns <integer>"
    if op == "not":
        return (
            f"@function --veryl-bnot{bits}(--a <integer>) returns <integer> {{\n"
            f"  result: calc({(1 << bits) - 1} - var(--a));\n}}\n\n"
        )
    if op == "shr":
        return (
            f"@function --veryl-bshr{bits}{header_ab} {{\n"
            "  result: round(down, var(--a) / pow(2, var(--b)));\n}\n\n"
        )
    if op == "shl":
        entries = "".join(f"style(--b:{i}):{1 << i}; " for i in range(bits))
        return (
            f"@function --veryl-bshl{bits}{header_ab} {{\n"
            f"  --shift: if({entries}else:1);\n"
            f"  result: mod(calc(var(--a) * var(--shift)), {1 << bits});\n}}\n\n"
        )

    terms = [
        _bit_term(op, i + 1) if i == 0 else f"{_bit_term(op, i + 1)} * {1 << i}"
        for i in range(bits)
    ]
    lines = [f"  --a{i + 1}: {_extract('a', i)};\n" for i in range(bits)]
    lines += [f"  --b{i + 1}: {_extract('b', i)};\n" for i in range(bits)]
    lines.append("  result: calc(\n")
    lines.append(" +\n".join(f"    {term}" for term in terms) + ("\n" if terms else ""))
    lines.append("  );\n")
    body = "".join(lines)
    return f"@function --veryl-b{op}{bits}{header_ab} {{\n{body}}}\n\n"


def property_rule(var: str) -> str:
    """An ``@property`` rule registering ``var`` as an inherited integer."""
    return (
        f"@property {var} {{\n"
        '  syntax: "<integer>";\n'
        "  inherits: true;\n"
        "  initial-value: 0;\n}\n\n"
    )


def block(selector: str, lines: Iterable[str]) -> str:
    """A rule block with each declaration on its own indented line."""
    inner = "".join(f"  {line}\n" for line in lines)
    return f"{selector} {{\n{inner}}}\n\n"


def keyframes(name: str, lines: Iterable[str]) -> str:
    """A single-frame ``@keyframes`` rule holding ``lines`` at 0% and 100%."""
    inner = "\n".join(f"    {line}" for line in lines)
    return f"@keyframes {name} {{\n  0%, 100% {{\n{inner}\n  }}\n}}\n\n"