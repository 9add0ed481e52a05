import pytest

from veryl_css.cssfmt import (
    BitFn,
    CompFn,
    bit_function_body,
    bit_functions,
    block,
    comp_functions,
    keyframes,
    property_rule,
)
from veryl_css.ir import CodegenError


def test_property_rule():
    assert property_rule("--x") == (
        '@property --x {\n  syntax: "<integer>";\n  inherits: true;\n  initial-value: 0;\n}\n\n'
    )


def test_block_indents_lines():
    assert block(":root", ["--a: 1;", "--b: 2;"]) == ":root {\n  --a: 1;\n  --b: 2;\n}\n\n"
    assert block("body", []) == "body {\n}\n\n"


def test_keyframes():
    assert keyframes("hoist", ["--h: var(--c, 0);"]) == (
        "@keyframes hoist {\n  0%, 100% {\n    --h: var(--c, 0);\n  }\n}\n\n"
    )


def test_comp_function_text():
    text = comp_functions({CompFn.NEQ})
    assert text == (
        "@function --veryl-neq(--a <number>, --b <number>) returns <integer> {\n"
        "  result: abs(sign(calc(var(--a) - var(--b))));\n}\n\n"
    )


def test_comp_functions_fixed_order():
    text = comp_functions([CompFn.EQ, CompFn.LT])
    assert text.index("--veryl-lt(") < text.index("--veryl-eq(")
    assert "--veryl-gt(" not in text
    assert comp_functions(set()) == ""


def test_shr_body():
    assert bit_function_body(8, "shr") == (
        "@function --veryl-bshr8(--a <integer>, --b <integer>) returns <integer> {\n"
        "  result: round(down, var(--a) / pow(2, var(--b)));\n}\n\n"
    )


def test_not_body_names_function():
    text = bit_function_body(16, "not")
    assert text.startswith("@function --veryl-bnot16(--a <integer>) returns <integer> {")
    assert f"calc({2 ** 16 - 1} - var(--a))" in text


@pytest.mark.parametrize("bits", [8, 16])
def test_shl_has_entry_per_bit(bits):
    text = bit_function_body(bits, "shl")
    assert text.count("style(--b:") == bits
    assert f"style(--b:{bits - 1}):{2 ** (bits - 1)}; else:1" in text
    assert f"{2 ** bits});" in text


@pytest.mark.parametrize("op", ["and", "or", "xor"])
@pytest.mark.parametrize("bits", [8, 16])
def test_decomposed_ops(op, bits):
    text = bit_function_body(bits, op)
    assert text.startswith(f"@function --veryl-b{op}{bits}(")
    assert f"  --a{bits}:" in text and f"  --b{bits}:" in text
    assert f"  --a{bits + 1}:" not in text
    assert text.count(" +\n") == bits - 1
    assert text.endswith("  );\n}\n\n")
    assert "  --a1: mod(var(--a), 2);\n" in text


def test_and_first_term():
    text = bit_function_body(8, "and")
    assert "    var(--a1) * var(--b1) +\n" in text


def test_unknown_op_raises():
    with pytest.raises(CodegenError):
        bit_function_body(8, "nand")


def test_bit_functions_order_and_selection():
    text = bit_functions({BitFn.SHR16, BitFn.AND8})
    assert text == bit_function_body(8, "and") + bit_function_body(16, "shr")


def test_bitfn_css_name():
    assert BitFn.XOR16.css_name == "--veryl-bxor16"
    assert bit_function_body(BitFn.XOR16.bits, BitFn.XOR16.op).startswith(
        f"@function {BitFn.XOR16.css_name}("
    )