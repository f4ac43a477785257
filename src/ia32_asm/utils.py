'''
 representaciones de valores de 32 bits (hex, binario, con/sin signo, ASCII)
'''

from __future__ import annotations
from typing import Dict

# Máscara para 32 bits sin signo
U32_MASK = 0xFFFFFFFF

def u32(x: int) -> int:
    """Fuerza el valor al rango de 32 bits sin signo."""
    return x & U32_MASK

def sign_extend(x: int, bits: int) -> int:
    """Extiende el signo de x, asumiendo que cabe en 'bits' bits (complemento a dos)."""
    if bits <= 0:
        raise ValueError("bits debe ser positivo")
    mask = (1 << bits) - 1
    x &= mask
    sign_bit = 1 << (bits - 1)
    return (x ^ sign_bit) - sign_bit

def to_signed32(x: int) -> int:
    """Interpretación con signo (complemento a dos) de los 32 bits bajos."""
    return sign_extend(x, 32)

def fits32(x: int) -> bool:
    """True si x se puede escribir en 32 bits, con o sin signo: [-(2^31), 2^32-1]."""
    return -(1 << 31) <= x <= U32_MASK

def to_bin32(x: int) -> str:
    """Representación binaria de 32 bits (cadena)."""
    return format(u32(x), "032b")

def to_hex32(x: int, *, prefix: bool = True) -> str:
    """Representación hexadecimal de 32 bits (cadena), con o sin prefijo 0x."""
    s = format(u32(x), "08x")
    return ("0x" + s) if prefix else s

def to_ascii32(x: int) -> str:
    """Los 4 bytes en orden little-endian como ASCII: 0 -> '\\0', no imprimible -> '.'."""
    out = []
    for byte in u32(x).to_bytes(4, "little"):
        if byte == 0:
            out.append("\\0")
        elif 32 <= byte <= 126:
            out.append(chr(byte))
        else:
            out.append(".")
    return "".join(out)

def format_value(x: int) -> Dict[str, object]:
    """Todas las representaciones de un valor de registro."""
    return {
        "hex": to_hex32(x),
        "signed": to_signed32(x),
        "unsigned": u32(x),
        "binary": to_bin32(x),
        "ascii": to_ascii32(x),
    }
