"""Generate CSS from the intermediate representation of a single module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .cssfmt import (
    BitFn,
    CompFn,
    bit_functions,
    block,
    comp_functions,
    keyframes,
    property_rule,
)
from .ir import (
    AssignDestination,
    AssignStatement,
    Binary,
    CodegenError,
    CombDeclaration,
    Expression,
    FfDeclaration,
    IfResetStatement,
    IfStatement,
    Ir,
    Module,
    NullDeclaration,
    NullStatement,
    Op,
    Term,
    Unary,
    ValueFactor,
    Variable,
    VariableFactor,
    VarKind,
)
from .literals import last_path_segment, literal_to_css_int

_HEADER = "/* generated by veryl-css */\n\n"
_COND_PREFIX = "--veryl-cond-"


@dataclass
class Output:
    """Result of code generation."""

    css: str


@dataclass(frozen=True)
class _TypeInfo:
    width: int
    signed: bool


@dataclass(frozen=True)
class _FfReg:
    current: str
    next: str
    captured: str
    hoist: str


_TYPES = {
    "signed bit<8>": _TypeInfo(8, True),
    "signed bit<16>": _TypeInfo(16, True),
    "signed bit<32>": _TypeInfo(32, True),
    "bit<8>": _TypeInfo(8, False),
    "bit<16>": _TypeInfo(16, False),
}

_COMPARISONS = {
    Op.LESS: CompFn.LT,
    Op.LESS_EQ: CompFn.LTE,
    Op.GREATER: CompFn.GT,
    Op.GREATER_EQ: CompFn.GTE,
    Op.EQ: CompFn.EQ,
    # Wildcard equality has no X/Z to match here, so it behaves as plain equality.
    Op.EQ_WILDCARD: CompFn.EQ,
    Op.NE: CompFn.NEQ,
    Op.NE_WILDCARD: CompFn.NEQ,
}

_BITWISE = {
    (Op.BIT_AND, 8): BitFn.AND8,
    (Op.BIT_AND, 16): BitFn.AND16,
    (Op.BIT_OR, 8): BitFn.OR8,
    (Op.BIT_OR, 16): BitFn.OR16,
    (Op.BIT_XOR, 8): BitFn.XOR8,
    (Op.BIT_XOR, 16): BitFn.XOR16,
}

_SHIFTS = {
    (Op.LOGIC_SHIFT_L, 8): BitFn.SHL8,
    (Op.LOGIC_SHIFT_L, 16): BitFn.SHL16,
    (Op.LOGIC_SHIFT_R, 8): BitFn.SHR8,
    (Op.LOGIC_SHIFT_R, 16): BitFn.SHR16,
}

_NOTS = {8: BitFn.NOT8, 16: BitFn.NOT16}

_ARITHMETIC = {
    Op.ADD: "calc(({lhs}) + ({rhs}))",
    Op.SUB: "calc(({lhs}) - ({rhs}))",
    Op.MUL: "calc(({lhs}) * ({rhs}))",
    Op.DIV: "round(to-zero, calc(({lhs}) / ({rhs})), 1)",
    Op.REM: "rem(({lhs}), ({rhs}))",
}

_Typed = Tuple[str, Optional[_TypeInfo]]


def emit(ir: Ir) -> Output:
    """Generate CSS for the single top module held in ``ir``."""
    modules = [c for c in ir.components if isinstance(c, Module)]
    if len(modules) != 1:
        raise CodegenError(f"expected exactly one top module, found {len(modules)}")
    return _emit_module(modules[0])


def _emit_module(module: Module) -> Output:
    module_name = str(module.name)

    clock_ids: Set[int] = set()
    reset_ids: Set[int] = set()
    ff_assigned: Set[int] = set()
    for decl in module.declarations:
        if isinstance(decl, FfDeclaration):
            clock_ids.add(decl.clock)
            if decl.reset is not None:
                reset_ids.add(decl.reset)
            ff_assigned.update(_assigned_ids(decl.statements))

    has_ff = bool(clock_ids)

    names: Dict[int, str] = {}
    types: Dict[int, _TypeInfo] = {}
    ff_regs: Dict[int, _FfReg] = {}
    public_vars: Set[str] = set()

    for var_id, variable in sorted(module.variables.items(), key=lambda item: item[0]):
        if var_id in clock_ids:
            continue
        is_reset = var_id in reset_ids
        if not is_reset:
            types[var_id] = _type_info(variable)
        css_name = _variable_css_name(variable, module_name)
        if css_name is None:
            continue
        if var_id in ff_assigned and not is_reset:
            base = f"--{module_name}-{last_path_segment(variable.path)}"
            ff_regs[var_id] = _FfReg(
                current=css_name,
                next=f"{base}-next",
                captured=f"{base}-captured",
                hoist=f"{base}-hoist",
            )
        names[var_id] = css_name
        public_vars.add(css_name)

    emitter = _Emitter(names, types, {i: reg.next for i, reg in ff_regs.items()})

    ff_current_lines = [f"{reg.current}: var({reg.hoist}, 0);" for reg in ff_regs.values()]
    comb_lines: List[str] = []
    ff_next_lines: List[str] = []
    saw_comb = False

    for decl in module.declarations:
        if isinstance(decl, CombDeclaration):
            saw_comb = True
            for stmt in decl.statements:
                comb_lines.extend(emitter.comb_statement(stmt))
        elif isinstance(decl, FfDeclaration):
            for stmt in decl.statements:
                ff_next_lines.extend(emitter.ff_statement(stmt))
        elif isinstance(decl, NullDeclaration):
            continue
        else:
            raise CodegenError(f"unsupported declaration: {type(decl).__name__}")

    if not has_ff and not saw_comb:
        raise CodegenError("no comb or ff declaration found")

    parts = [_HEADER]
    if emitter.used_comp_fns:
        parts.append(comp_functions(emitter.used_comp_fns))
    if emitter.used_bit_fns:
        parts.append(bit_functions(emitter.used_bit_fns))
    parts.extend(property_rule(f"{_COND_PREFIX}{n}") for n in range(emitter.cond_counter))
    parts.extend(property_rule(var) for var in sorted(public_vars))

    if has_ff:
        parts.append(block("body", [*ff_current_lines, *comb_lines, *ff_next_lines]))
        parts.append(
            keyframes(
                "hoist",
                [f"{reg.hoist}: var({reg.captured}, 0);" for reg in ff_regs.values()],
            )
        )
        parts.append(
            keyframes(
                "capture",
                [f"{reg.captured}: var({reg.next});" for reg in ff_regs.values()],
            )
        )
    else:
        parts.append(block(":root", comb_lines))

    return Output(css="".join(parts))


def _assigned_ids(statements: Iterable[object]) -> Iterator[int]:
    for stmt in statements:
        if isinstance(stmt, AssignStatement):
            yield from (d.id for d in stmt.dst)
        elif isinstance(stmt, (IfStatement, IfResetStatement)):
            yield from _assigned_ids(stmt.true_side)
            yield from _assigned_ids(stmt.false_side)


def _type_info(variable: Variable) -> _TypeInfo:
    info = _TYPES.get(str(variable.type))
    if info is None:
        raise CodegenError(
            f"unsupported type `{variable.type}` for `{variable.path}`; "
            "supported: i8, i16, i32, u8, u16"
        )
    return info


def _variable_css_name(variable: Variable, module_name: str) -> Optional[str]:
    signal = last_path_segment(variable.path)
    if variable.kind in (VarKind.INPUT, VarKind.OUTPUT, VarKind.INOUT):
        return f"--{signal}"
    if variable.kind in (VarKind.VARIABLE, VarKind.LET):
        return f"--{module_name}-{signal}"
    return None


def _const_bit_divisor(expr: Expression) -> Optional[int]:
    """2**i for a literal bit index i, or None when the index is not a literal."""
    if not (isinstance(expr, Term) and isinstance(expr.factor, ValueFactor)):
        return None
    try:
        text = literal_to_css_int(expr.factor.literal)
    except CodegenError:
        return None
    if not (text.isascii() and text.isdigit()):
        return None
    index = int(text)
    if index >= 1 << 32:
        return None
    return 1 << index


@dataclass
class _Emitter:
    names: Dict[int, str]
    types: Dict[int, _TypeInfo]
    ff_next: Dict[int, str]
    cond_counter: int = 0
    used_comp_fns: Set[CompFn] = field(default_factory=set)
    used_bit_fns: Set[BitFn] = field(default_factory=set)

    def _next_cond_var(self) -> str:
        name = f"{_COND_PREFIX}{self.cond_counter}"
        self.cond_counter += 1
        return name

    # statements -------------------------------------------------------

    def comb_statement(self, stmt: object) -> List[str]:
        if isinstance(stmt, AssignStatement):
            dst, css = self._assignment(stmt)
            name = self.names.get(dst.id)
            if name is None:
                raise CodegenError(f"unknown assignment destination: {dst.id}")
            return [f"{name}: {css};"]
        if isinstance(stmt, IfStatement):
            lines, values = self._if_values(stmt)
            for var_id, css in values.items():
                name = self.names.get(var_id)
                if name is None:
                    raise CodegenError(f"unknown variable in if branch: {var_id}")
                lines.append(f"{name}: {css};")
            return lines
        if isinstance(stmt, NullStatement):
            return []
        raise CodegenError(f"unsupported statement: {type(stmt).__name__}")

    def ff_statement(self, stmt: object) -> List[str]:
        if isinstance(stmt, AssignStatement):
            dst, css = self._assignment(stmt)
            return [f"{self._ff_next(dst.id, 'ff assignment to non-ff variable')}: {css};"]
        if isinstance(stmt, IfStatement):
            lines, values = self._if_values(stmt)
            for var_id, css in values.items():
                lines.append(f"{self._ff_next(var_id, 'if assigns to non-ff variable')}: {css};")
            return lines
        if isinstance(stmt, IfResetStatement):
            return self._if_reset(stmt)
        if isinstance(stmt, NullStatement):
            return []
        raise CodegenError(f"unsupported ff statement: {type(stmt).__name__}")

    def _ff_next(self, var_id: int, message: str) -> str:
        name = self.ff_next.get(var_id)
        if name is None:
            raise CodegenError(f"{message}: {var_id}")
        return name

    def _if_reset(self, stmt: IfResetStatement) -> List[str]:
        reset_pre, reset_values = self._branch(stmt.true_side)
        normal_pre, normal_values = self._branch(stmt.false_side)
        lines = reset_pre + normal_pre
        for var_id in sorted(reset_values.keys() | normal_values.keys()):
            name = self._ff_next(var_id, "if_reset assigns to non-ff variable")
            rv = reset_values.get(var_id)
            nv = normal_values.get(var_id)
            if rv is not None and nv is not None:
                lines.append(f"{name}: if(style(--rst: 1): {rv}; else: {nv});")
            else:
                lines.append(f"{name}: {rv if rv is not None else nv};")
        return lines

    def _branch(self, statements: Iterable[object]) -> Tuple[List[str], Dict[int, str]]:
        preamble: List[str] = []
        values: Dict[int, str] = {}
        for stmt in statements:
            if isinstance(stmt, AssignStatement):
                dst, css = self._assignment(stmt)
                values[dst.id] = css
            elif isinstance(stmt, IfStatement):
                pre, nested = self._if_values(stmt)
                preamble.extend(pre)
                values.update(nested)
            elif isinstance(stmt, NullStatement):
                continue
            else:
                raise CodegenError(f"unsupported statement in branch: {type(stmt).__name__}")
        return preamble, values

    def _if_values(self, stmt: IfStatement) -> Tuple[List[str], Dict[int, str]]:
        cond_var = self._next_cond_var()
        preamble = [f"{cond_var}: {self._condition(stmt.cond)};"]
        true_pre, true_values = self._branch(stmt.true_side)
        false_pre, false_values = self._branch(stmt.false_side)
        preamble += true_pre + false_pre

        values: Dict[int, str] = {}
        for var_id in sorted(true_values.keys() | false_values.keys()):
            if var_id not in true_values:
                raise CodegenError(f"variable {var_id} not assigned in true branch")
            if var_id not in false_values:
                raise CodegenError(f"variable {var_id} not assigned in false branch")
            values[var_id] = (
                f"if(style({cond_var}: 1): {true_values[var_id]}; else: {false_values[var_id]})"
            )
        return preamble, values

    def _assignment(self, stmt: AssignStatement) -> Tuple[AssignDestination, str]:
        if len(stmt.dst) != 1:
            raise CodegenError("only single-destination assignments are supported")
        dst = stmt.dst[0]
        if len(dst.index) != 0:
            raise CodegenError("array destination is unsupported")
        if not dst.select.is_empty():
            raise CodegenError("bit/part-select destination is unsupported")
        css, _ = self._expr(stmt.expr)
        return dst, css

    # expressions ------------------------------------------------------

    def _condition(self, expr: Expression) -> str:
        if isinstance(expr, Unary) and expr.op is Op.LOGIC_NOT:
            return f"calc(1 - ({self._condition(expr.inner)}))"
        if isinstance(expr, Binary):
            if expr.op is Op.LOGIC_AND:
                return f"min({self._condition(expr.lhs)}, {self._condition(expr.rhs)})"
            if expr.op is Op.LOGIC_OR:
                return f"max({self._condition(expr.lhs)}, {self._condition(expr.rhs)})"
            comp = _COMPARISONS.get(expr.op)
            if comp is None:
                raise CodegenError(f"unsupported condition operator: {expr.op}")
            self.used_comp_fns.add(comp)
            lhs, _ = self._expr(expr.lhs)
            rhs, _ = self._expr(expr.rhs)
            return f"{comp.value}({lhs}, {rhs})"
        raise CodegenError(f"unsupported condition expression: {type(expr).__name__}")

    def _expr(self, expr: Expression) -> _Typed:
        if isinstance(expr, Term):
            return self._factor(expr.factor)
        if isinstance(expr, Unary):
            return self._unary(expr)
        if isinstance(expr, Binary):
            return self._binary(expr)
        raise CodegenError(f"unsupported expression: {type(expr).__name__}")

    def _unary(self, expr: Unary) -> _Typed:
        inner, inner_type = self._expr(expr.inner)
        if expr.op is Op.ADD:
            return inner, inner_type
        if expr.op is Op.SUB:
            return f"calc(-1 * ({inner}))", inner_type
        if expr.op is Op.BIT_NOT:
            if inner_type is None:
                raise CodegenError("cannot determine type width for bitwise NOT")
            if inner_type.signed:
                raise CodegenError("bitwise NOT is only supported for unsigned types (u8, u16)")
            fn = _NOTS.get(inner_type.width)
            if fn is None:
                raise CodegenError(f"bitwise NOT unsupported for {inner_type.width}-bit type")
            self.used_bit_fns.add(fn)
            return f"{fn.css_name}({inner})", inner_type
        raise CodegenError(f"unsupported unary operator: {expr.op}")

    def _binary(self, expr: Binary) -> _Typed:
        lhs, lhs_type = self._expr(expr.lhs)
        rhs, rhs_type = self._expr(expr.rhs)
        result_type = lhs_type if lhs_type is not None else rhs_type

        if expr.op in (Op.BIT_AND, Op.BIT_OR, Op.BIT_XOR):
            fn = self._bit_fn(
                _BITWISE, expr.op, result_type, "bitwise op", "bitwise AND/OR/XOR", "bitwise op"
            )
            return f"{fn.css_name}({lhs}, {rhs})", result_type
        if expr.op in (Op.LOGIC_SHIFT_L, Op.LOGIC_SHIFT_R):
            fn = self._bit_fn(_SHIFTS, expr.op, result_type, "shift", "logical shifts", "shift")
            return f"{fn.css_name}({lhs}, {rhs})", result_type

        template = _ARITHMETIC.get(expr.op)
        if template is None:
            raise CodegenError(f"unsupported binary operator: {expr.op}")
        return template.format(lhs=lhs, rhs=rhs), result_type

    def _bit_fn(
        self,
        table: Dict[Tuple[Op, int], BitFn],
        op: Op,
        type_info: Optional[_TypeInfo],
        what: str,
        plural: str,
        width_what: str,
    ) -> BitFn:
        if type_info is None:
            raise CodegenError(f"cannot determine type width for {what}")
        if type_info.signed:
            verb = "are" if plural.endswith("s") else "is"
            raise CodegenError(f"{plural} {verb} only supported for unsigned types (u8, u16)")
        fn = table.get((op, type_info.width))
        if fn is None:
            raise CodegenError(f"{width_what} unsupported for {type_info.width}-bit type")
        self.used_bit_fns.add(fn)
        return fn

    def _factor(self, factor: object) -> _Typed:
        if isinstance(factor, VariableFactor):
            if len(factor.index) != 0:
                raise CodegenError("array indexing is unsupported")
            name = self.names.get(factor.id)
            if name is None:
                raise CodegenError(f"unknown variable id: {factor.id}")
            if not factor.select.is_empty():
                return self._bit_select(name, factor), None
            return f"var({name})", self.types.get(factor.id)
        if isinstance(factor, ValueFactor):
            return literal_to_css_int(factor.literal), None
        raise CodegenError(f"unsupported factor: {type(factor).__name__}")

    def _bit_select(self, name: str, factor: VariableFactor) -> str:
        select = factor.select
        if select.is_range or select.dimension() != 1:
            raise CodegenError("only single bit-select is supported (e.g., x[0])")
        value = f"var({name})"
        index_expr = select.items[0]
        divisor = _const_bit_divisor(index_expr)
        if divisor == 1:
            return f"mod({value}, 2)"
        if divisor is not None:
            return f"mod(round(down, {value} / {divisor}), 2)"
        index_css, _ = self._expr(index_expr)
        return f"mod(round(down, {value} / pow(2, {index_css})), 2)"