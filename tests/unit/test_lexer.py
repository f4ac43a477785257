import pytest
from src.ia32_asm.lexer import (
    strip_comment, split_label, is_directive,
    split_mnemonic_operands, split_operands, parse_number, is_label_name
)

# --- strip_comment ---
@pytest.mark.parametrize("src, expected", [
    ("movl $1, %eax ; cmt", "movl $1, %eax"),
    ("addl %ebx, %eax # trailing", "addl %ebx, %eax"),
    ("; full comment", ""),
    ("# full comment", ""),
    ('msg: .asciiz "a;b"  ; real', 'msg: .asciiz "a;b"'),
    (r'.ascii "a\"; b" # fin', r'.ascii "a\"; b"'),
    (r'.ascii "c:\\" ; real', r'.ascii "c:\\"'),
    ("   nop   ", "nop"),
    ("", ""),
])
def test_strip_comment(src, expected):
    assert strip_comment(src) == expected

# --- split_label ---
@pytest.mark.parametrize("src, label, rest", [
    ("loop: addl $1, %eax", "loop", "addl $1, %eax"),
    ("_start:   ", "_start", ""),
    ("  nope: nop", None, "  nope: nop"),
    ("notlabel :", None, "notlabel :"),
])
def test_split_label(src, label, rest):
    got_label, got_rest = split_label(src)
    assert got_label == label
    assert got_rest == rest

# --- is_directive ---
@pytest.mark.parametrize("src, expected", [
    (".text", True),
    ("  .data", True),
    ("movl %eax, %ebx", False),
    ("", False),
])
def test_is_directive(src, expected):
    assert is_directive(src) == expected

# --- split_mnemonic_operands ---
@pytest.mark.parametrize("src, mn, tail", [
    ("MOVL $1,   %EAX", "movl", "$1,   %EAX"),
    ("ret", "ret", ""),
    ("   ", "", ""),
])
def test_split_mnemonic_operands(src, mn, tail):
    got_mn, got_tail = split_mnemonic_operands(src)
    assert got_mn == mn
    assert got_tail == tail

# --- split_operands ---
@pytest.mark.parametrize("src, expected", [
    ("%eax,%ebx", ["%eax", "%ebx"]),
    (" $1 , %eax ", ["$1", "%eax"]),
    ("8(%ebp,%esi,4), %eax", ["8(%ebp,%esi,4)", "%eax"]),
    ("(%eax, %eax", ["(%eax, %eax"]),
    ('"hola, mundo", 0', ['"hola, mundo"', "0"]),
    (r'"a\", b", 1', [r'"a\", b"', "1"]),
    ("", []),
])
def test_split_operands(src, expected):
    assert split_operands(src) == expected

# --- parse_number ---
@pytest.mark.parametrize("src, expected", [
    ("42", 42),
    ("-7", -7),
    ("0x1F", 31),
    ("-0x10", -16),
    ("0b101", 5),
    ("0B11", 3),
    ("1f", None),
    ("0x", None),
    ("abc", None),
])
def test_parse_number(src, expected):
    assert parse_number(src) == expected

def test_label_names():
    assert is_label_name("_start")
    assert is_label_name("loop2")
    assert not is_label_name("2loop")
    assert not is_label_name("a-b")
