# src/ia32_asm/operands.py
'''
clasificación de un operando AT&T: inmediato, registro, memoria o etiqueta
'''

from __future__ import annotations
import re
from typing import Optional, Tuple

from .ast import Imm, Reg, Mem, LabelRef, Operand, VALID_SCALES
from .lexer import is_label_name, parse_number
from .regs import normalize_reg, REGISTERS
from .utils import fits32

DISP_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)?(.*)$")
SIGNED_RE = re.compile(r"^([+-])\s*(.+)$")

# Término de una expresión simbólica de directiva: '.', '.nombre', '@tipo', símbolo o número
_TERM = r"(?:[.@]?[A-Za-z_][A-Za-z0-9_.]*|\.|0x[0-9A-Fa-f]+|\d+)"
SYMBOL_EXPR_RE = re.compile(rf"^{_TERM}(?:\s*[+-]\s*{_TERM})*$")

def parse_immediate(token: str) -> Imm:
    t = token.strip()
    if not t.startswith("$"):
        raise ValueError(f"invalid immediate: '{token}'")
    body = t[1:].strip()
    if is_label_name(body):
        return Imm(text=t, symbol=body)
    value = parse_number(body)
    if value is None:
        raise ValueError(f"invalid immediate: '{token}'")
    if not fits32(value):
        raise ValueError(f"immediate out of 32-bit range: '{token}'")
    return Imm(text=t, value=value)

def parse_register(token: str) -> Reg:
    t = token.strip()
    if not t.startswith("%"):
        raise ValueError(f"invalid register: '{token}'")
    name = normalize_reg(t)
    size, parent = REGISTERS[name]
    return Reg(text=t, name=name, size=size, parent=parent)

def _parse_displacement(token: str) -> Tuple[Optional[str], Optional[int]]:
    """'simbolo', '-8', 'simbolo+0x10' -> (simbolo, desplazamiento)."""
    t = token.strip()
    if not t:
        return None, None
    m = DISP_RE.match(t)
    symbol = m.group(1) or None
    rest = m.group(2).strip()
    if not rest:
        return symbol, None
    sm = SIGNED_RE.match(rest)
    if sm:
        value = parse_number(sm.group(2))
        if value is None:
            raise ValueError(f"invalid displacement: '{token}'")
        return symbol, (-value if sm.group(1) == "-" else value)
    if symbol is not None:
        # 'foo 8' o 'foo8x': el resto no es un desplazamiento con signo
        raise ValueError(f"invalid displacement: '{token}'")
    value = parse_number(rest)
    if value is None:
        raise ValueError(f"invalid displacement: '{token}'")
    return None, value

def _parse_scale(token: str) -> int:
    value = parse_number(token)
    if value is None:
        raise ValueError(f"invalid scale: '{token}'")
    if value not in VALID_SCALES:
        raise ValueError("scale must be 1, 2, 4, or 8")
    return value

def _balanced(text: str) -> bool:
    depth = 0
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0

def address_mode(*, base: bool, index: bool, disp: bool, scale: bool) -> str:
    """Tabla de decisión del modo de direccionamiento de un grupo (base, indice, escala)."""
    if base and index and (disp or scale):
        return "base+indice+desp"
    if base and index:
        return "base+indice"
    if index and (disp or scale):
        return "indice-escalado" if scale else "base+indice"
    if base and disp:
        return "base+desp"
    if base:
        return "indirecto"
    if index:
        return "indirecto"
    if disp:
        return "directo"
    return "desconocido"

def parse_memory(token: str) -> Mem:
    """Operando de memoria: [*][simbolo][+-desp][(base[, indice[, escala]])].

    '*%reg' se acepta como salto/llamada indirecta a través de un registro.
    """
    text = token.strip()
    indirect = text.startswith("*")
    body = text[1:].strip() if indirect else text

    if not _balanced(body):
        raise ValueError(f"unbalanced parentheses in memory operand: '{token}'")

    if indirect and body.startswith("%"):
        base = normalize_reg(body)
        return Mem(text=text, base=base, indirect=True, addr_mode="indirecto")

    open_at = body.find("(")
    if open_at == -1:
        symbol, disp = _parse_displacement(body)
        has_disp = symbol is not None or disp is not None
        return Mem(text=text, symbol=symbol, displacement=disp, indirect=indirect,
                   addr_mode="directo" if has_disp else "desconocido")

    close_at = body.rfind(")")
    if body[close_at + 1:].strip():
        raise ValueError(f"unexpected text after ')' in memory operand: '{token}'")
    symbol, disp = _parse_displacement(body[:open_at])
    inner = body[open_at + 1:close_at]
    if "(" in inner:
        raise ValueError(f"nested parentheses in memory operand: '{token}'")

    parts = [p.strip() for p in inner.split(",")]
    if len(parts) > 3:
        raise ValueError(f"too many components in memory operand: '{token}'")
    parts += [""] * (3 - len(parts))
    base_raw, index_raw, scale_raw = parts

    base = index = scale = None
    if base_raw:
        try:
            base = normalize_reg(base_raw) if base_raw.startswith("%") else None
        except ValueError:
            base = None
        if base is None:
            raise ValueError(f"invalid base register: '{base_raw}'")
    if index_raw:
        try:
            index = normalize_reg(index_raw) if index_raw.startswith("%") else None
        except ValueError:
            index = None
        if index is None:
            raise ValueError(f"invalid index register: '{index_raw}'")
    if scale_raw:
        scale = _parse_scale(scale_raw)

    mode = address_mode(base=base is not None, index=index is not None,
                        disp=symbol is not None or disp is not None,
                        scale=scale is not None)
    return Mem(text=text, symbol=symbol, displacement=disp, base=base, index=index,
               scale=scale, indirect=indirect, addr_mode=mode)

def parse_operand(token: str) -> Operand:
    """Clasifica un operando de instrucción según su primer carácter; ValueError si no es válido."""
    t = token.strip()
    if t.startswith("$"):
        return parse_immediate(t)
    if t.startswith("%"):
        return parse_register(t)
    return parse_memory(t)

def parse_directive_operand(token: str) -> Operand:
    """Operando de directiva: cadena entre comillas, número o símbolo."""
    t = token.strip()
    if len(t) >= 2 and t[0] == '"' and t[-1] == '"':
        return Imm(text=t, string=t[1:-1])
    value = parse_number(t)
    if value is not None:
        return Imm(text=t, value=value)
    if is_label_name(t):
        return LabelRef(text=t, name=t, addr_mode="directo")
    # '.rodata', '@function', '.-main', 'fin-inicio'
    if SYMBOL_EXPR_RE.match(t):
        return LabelRef(text=t, name=t, addr_mode="directo")
    raise ValueError(f"invalid directive operand: {t}")

def as_branch_target(op: Operand) -> Operand:
    """Un destino de salto sin base/índice/escala es una etiqueta, no una lectura de memoria."""
    if isinstance(op, Mem) and not op.indirect and op.base is None \
            and op.index is None and op.scale is None and op.addr_mode == "directo":
        return LabelRef(text=op.text, name=op.symbol or op.text,
                        displacement=op.displacement, addr_mode="relativo")
    return op
