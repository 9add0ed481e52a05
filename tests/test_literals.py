import pytest

from veryl_css.ir import CodegenError
from veryl_css.literals import last_path_segment, literal_to_css_int


def test_documented_example():
    assert literal_to_css_int("32'sh00000001") == "1"


def test_signed_negative():
    assert literal_to_css_int("8'shff") == "-1"


@pytest.mark.parametrize("n", [0, 1, 7, 100, 255, 4095, 65535])
def test_unsigned_round_trip(n):
    assert literal_to_css_int(f"16'd{n}") == str(n)
    assert literal_to_css_int(f"32'h{n:x}") == str(n)
    assert literal_to_css_int(f"32'b{n:b}") == str(n)
    assert literal_to_css_int(f"32'o{n:o}") == str(n)


@pytest.mark.parametrize("n", [-128, -100, -1, 0, 1, 64, 127])
def test_signed_8bit_round_trip(n):
    assert literal_to_css_int(f"8'sd{n & 0xFF}") == str(n)
    assert literal_to_css_int(f"8'sh{n & 0xFF:x}") == str(n)


def test_unsigned_ignores_sign_bit():
    assert literal_to_css_int("8'hff") == str(0xFF)


def test_case_whitespace_and_underscores():
    assert literal_to_css_int("  16'HAB_CD ") == str(0xABCD)


def test_plain_decimal_and_negative():
    assert literal_to_css_int("42") == "42"
    assert literal_to_css_int("-7") == "-7"
    assert literal_to_css_int("1_000") == "1000"


@pytest.mark.parametrize(
    "text", ["8'hxx", "4'bz", "4'q1", "abc", "8'h", "8'", "8'b102", "3.5"]
)
def test_invalid_literals(text):
    with pytest.raises(CodegenError):
        literal_to_css_int(text)


def test_last_path_segment():
    assert last_path_segment("prj.Top.counter") == "counter"
    assert last_path_segment("plain") == "plain"