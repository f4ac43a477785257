import pytest
from src.ia32_asm.regs import normalize_reg, reg_size, reg_parent, is_reg

def test_names_and_aliases():
    assert normalize_reg("%eax") == "EAX"
    assert normalize_reg("%Esp") == "ESP"
    assert normalize_reg("bx") == "BX"
    assert reg_size("%al") == "b"
    assert reg_size("%si") == "w"
    assert reg_size("%edi") == "l"
    assert reg_parent("%ah") == "EAX"
    assert reg_parent("%sp") == "ESP"
    assert is_reg("%dh")

def test_invalid():
    with pytest.raises(ValueError):
        normalize_reg("%rax")
    with pytest.raises(ValueError):
        normalize_reg("%foo")
    assert not is_reg("%r8")
