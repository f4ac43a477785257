'''
estado de la CPU: registros de 32 bits, ZF/SF y la pila simulada
'''

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Dict, List

from .regs import GPR32, STACK_POINTER

# Dirección inicial de ESP
STACK_BASE = 0x1000
WORD_SIZE = 4

FLAG_NAMES = ("ZF", "SF")

@dataclass
class CpuState:
    """Registros, flags y pila.

    La pila guarda los valores apilados con el tope al final de la lista;
    ESP es la única fuente de verdad de la dirección del tope.
    """
    registers: Dict[str, int]
    flags: Dict[str, bool]
    stack: List[int] = field(default_factory=list)

    @classmethod
    def initial(cls, stack_base: int = STACK_BASE) -> "CpuState":
        regs = {r: 0 for r in GPR32}
        regs[STACK_POINTER] = stack_base
        return cls(registers=regs, flags={f: False for f in FLAG_NAMES}, stack=[])

    def read(self, reg: str) -> int:
        return self.registers[reg]

    def write(self, reg: str, value: int) -> None:
        if reg not in self.registers:
            raise KeyError(f"unknown register: {reg}")
        self.registers[reg] = value

    def rebase_stack(self, address: int) -> None:
        """Mover ESP a otra dirección descarta los valores apilados."""
        self.registers[STACK_POINTER] = address
        self.stack.clear()

    def set_result_flags(self, result: int) -> None:
        self.flags["ZF"] = result == 0
        self.flags["SF"] = result < 0

    def push(self, value: int) -> None:
        self.registers[STACK_POINTER] -= WORD_SIZE
        self.stack.append(value)

    def pop(self) -> int:
        if not self.stack:
            raise IndexError("stack is empty")
        value = self.stack.pop()
        self.registers[STACK_POINTER] += WORD_SIZE
        return value

    def top(self) -> int:
        return self.stack[-1]

    def stack_top_first(self) -> List[int]:
        """Contenido de la pila con el tope en el índice 0 (orden de visualización)."""
        return list(reversed(self.stack))

    def snapshot(self) -> "CpuState":
        return copy.deepcopy(self)

def initial_state(stack_base: int = STACK_BASE) -> CpuState:
    return CpuState.initial(stack_base)
