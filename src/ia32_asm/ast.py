'''
dataclases del análisis (operandos, registro de línea, resultado)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Union, Literal

# Modos de direccionamiento (etiquetas tal y como se muestran al usuario)
AddrMode = Literal[
    "inmediato", "registro", "directo", "indirecto", "base+desp",
    "base+indice", "base+indice+desp", "indice-escalado", "relativo", "desconocido",
]

Size = Literal["b", "w", "l", "inferido"]

VALID_SCALES = (1, 2, 4, 8)

# ---- Operandos ----

@dataclass(frozen=True)
class Imm:
    """Inmediato: valor numérico, símbolo ($etiqueta) o cadena (solo en directivas)."""
    text: str
    value: Optional[int] = None
    symbol: Optional[str] = None
    string: Optional[str] = None
    kind = "imm"
    addr_mode: AddrMode = "inmediato"

@dataclass(frozen=True)
class Reg:
    """Registro canónico ('EAX', 'AX', 'AL', ...) con su tamaño y su registro de 32 bits."""
    text: str
    name: str
    size: Size
    parent: str
    kind = "reg"
    addr_mode: AddrMode = "registro"

@dataclass(frozen=True)
class Mem:
    """Referencia a memoria: [*][simbolo][+-desp][(base, indice, escala)]."""
    text: str
    symbol: Optional[str] = None
    displacement: Optional[int] = None
    base: Optional[str] = None
    index: Optional[str] = None
    scale: Optional[int] = None
    indirect: bool = False
    addr_mode: AddrMode = "desconocido"
    kind = "mem"

@dataclass(frozen=True)
class LabelRef:
    """Referencia simbólica desnuda (destino de salto o símbolo en una directiva)."""
    text: str
    name: str
    displacement: Optional[int] = None
    addr_mode: AddrMode = "relativo"
    kind = "label"

Operand = Union[Imm, Reg, Mem, LabelRef]

# ---- Nodos a nivel de línea ----

@dataclass(frozen=True)
class LineRecord:
    """Representación clasificada de una línea de código fuente.

    - line: número de línea (base 1)
    - label: etiqueta definida en la línea, si la hay
    - mnemonic: mnemónico normalizado (sin sufijo de tamaño)
    - size: sufijo de tamaño ('b','w','l') o 'inferido'
    - category: categoría de la instrucción (ver isa.Category)
    - operands: operandos ya clasificados, en el orden del fuente
    - addr_mode: resumen legible de los modos de direccionamiento
    - reads/writes: flags de condición que lee/escribe
    - errors: errores estructurales (solo se añaden, nunca se borran)
    - prefixes: prefijos (rep, repne...) o None
    - source: texto de la instrucción normalizado (sin etiqueta ni comentario)
    """
    line: int
    mnemonic: str
    category: str
    label: Optional[str] = None
    size: Size = "inferido"
    operands: List[Operand] = field(default_factory=list)
    addr_mode: str = "sin-operandos"
    reads: FrozenSet[str] = frozenset()
    writes: FrozenSet[str] = frozenset()
    errors: List[str] = field(default_factory=list)
    prefixes: Optional[List[str]] = None
    source: str = ""

@dataclass(frozen=True)
class AnalysisResult:
    lines: List[LineRecord]

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def errors(self) -> List[tuple]:
        """(línea, mensaje) de todos los errores estructurales, en orden."""
        return [(rec.line, msg) for rec in self.lines for msg in rec.errors]
