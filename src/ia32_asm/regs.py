'''
tabla de registros IA-32 (32/16/8 bits), normalización y tamaños
'''

from __future__ import annotations
from typing import Dict, List, Tuple

# Registros generales de 32 bits, en el orden en que se muestran
GPR32: List[str] = ["EAX", "EBX", "ECX", "EDX", "ESI", "EDI", "EBP", "ESP"]

STACK_POINTER = "ESP"

# nombre -> (tamaño de operando, registro de 32 bits que lo contiene)
REGISTERS: Dict[str, Tuple[str, str]] = {
    **{r: ("l", r) for r in GPR32},
    "AX": ("w", "EAX"), "BX": ("w", "EBX"), "CX": ("w", "ECX"), "DX": ("w", "EDX"),
    "SI": ("w", "ESI"), "DI": ("w", "EDI"), "BP": ("w", "EBP"), "SP": ("w", "ESP"),
    "AL": ("b", "EAX"), "AH": ("b", "EAX"),
    "BL": ("b", "EBX"), "BH": ("b", "EBX"),
    "CL": ("b", "ECX"), "CH": ("b", "ECX"),
    "DL": ("b", "EDX"), "DH": ("b", "EDX"),
}

def is_reg(token: str) -> bool:
    """Indica si el token representa un registro válido (con o sin '%')."""
    try:
        normalize_reg(token)
        return True
    except ValueError:
        return False

def normalize_reg(token: str) -> str:
    """Devuelve el nombre canónico en mayúsculas ('EAX', 'AL', ...) o lanza ValueError."""
    t = token.strip()
    if t.startswith("%"):
        t = t[1:]
    name = t.upper()
    if name not in REGISTERS:
        raise ValueError(f"invalid register: {token}")
    return name

def reg_size(token: str) -> str:
    """Tamaño del registro: 'b', 'w' o 'l'."""
    return REGISTERS[normalize_reg(token)][0]

def reg_parent(token: str) -> str:
    """Registro de 32 bits que contiene al registro dado (AL -> EAX)."""
    return REGISTERS[normalize_reg(token)][1]
