'''
tabla de mnemónicos IA-32 (categoría, flags leídos/escritos, aridad)
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

class Category(str, Enum):
    DATA = "data"
    ARITH = "arith"
    LOGIC = "logic"
    SHIFT = "shift"
    VERIFY = "verify"
    SETCC = "setcc"
    BRANCH = "branch"
    CMOV = "cmov"
    STRING = "string"
    STACK = "stack"
    MISC = "misc"
    DIRECTIVE = "directive"
    LABEL = "label"

class Flag(str, Enum):
    CF = "CF"
    ZF = "ZF"
    SF = "SF"
    OF = "OF"
    PF = "PF"

CF, ZF, SF, OF, PF = Flag.CF, Flag.ZF, Flag.SF, Flag.OF, Flag.PF

NO_FLAGS: FrozenSet[Flag] = frozenset()
ARITH_FLAGS = frozenset({CF, OF, SF, ZF})

# Sufijo de condición -> flags que lee (j<cc>, set<cc>, cmov<cc>)
CONDITION_FLAGS: Dict[str, FrozenSet[Flag]] = {
    "e": frozenset({ZF}),   "z": frozenset({ZF}),
    "ne": frozenset({ZF}),  "nz": frozenset({ZF}),
    "s": frozenset({SF}),   "ns": frozenset({SF}),
    "g": frozenset({ZF, SF, OF}),  "nle": frozenset({ZF, SF, OF}),
    "ge": frozenset({SF, OF}),     "nl": frozenset({SF, OF}),
    "l": frozenset({SF, OF}),      "nge": frozenset({SF, OF}),
    "le": frozenset({ZF, SF, OF}), "ng": frozenset({ZF, SF, OF}),
    "a": frozenset({CF, ZF}),  "nbe": frozenset({CF, ZF}),
    "be": frozenset({CF, ZF}), "na": frozenset({CF, ZF}),
    "ae": frozenset({CF}), "nb": frozenset({CF}),
    "b": frozenset({CF}),  "nae": frozenset({CF}),
    "c": frozenset({CF}),  "nc": frozenset({CF}),
    "o": frozenset({OF}),  "no": frozenset({OF}),
    "p": frozenset({PF}),  "pe": frozenset({PF}),
    "po": frozenset({PF}), "np": frozenset({PF}),
}

CONDITIONAL_PREFIXES = ("cmov", "set", "j")

REPEAT_PREFIXES = frozenset({"rep", "repe", "repz", "repne", "repnz"})

# Instrucciones de cadena que, sin operandos, comparten nombre con movs<x> de extensión de signo
STRING_MOVES = frozenset({"movs", "movsb", "movsw"})

@dataclass(frozen=True)
class ISpec:
    """Especificación de un mnemónico.

    - category: Category
    - writes: flags que escribe siempre
    - arity: (mínimo, máximo) de operandos, o None si no se valida
    """
    category: Category
    writes: FrozenSet[Flag] = NO_FLAGS
    arity: Optional[Tuple[int, int]] = None

ONE = (1, 1)
TWO = (2, 2)

SPEC: Dict[str, ISpec] = {}

def _add(names: Sequence[str], spec: ISpec):
    for name in names:
        SPEC[name] = spec

# Movimiento de datos
_add(["mov", "movzb", "movzw", "movsb", "movsw", "xchg", "lea"], ISpec(Category.DATA, arity=TWO))
_add(["cbtw", "cwtl", "cwtd", "cltd"], ISpec(Category.DATA))
# Pila
_add(["push", "pop"], ISpec(Category.STACK, arity=ONE))
# Aritméticas
_add(["add", "sub"], ISpec(Category.ARITH, ARITH_FLAGS, TWO))
_add(["adc", "sbb"], ISpec(Category.ARITH, ARITH_FLAGS, TWO))
_add(["inc", "dec"], ISpec(Category.ARITH, frozenset({OF, SF, ZF})))
_add(["neg"], ISpec(Category.ARITH, ARITH_FLAGS, ONE))
_add(["mul"], ISpec(Category.ARITH, frozenset({CF, OF}), ONE))
_add(["imul"], ISpec(Category.ARITH, frozenset({CF, OF})))
_add(["div", "idiv"], ISpec(Category.ARITH, arity=ONE))
# Lógicas
_add(["and", "or", "xor"], ISpec(Category.LOGIC, ARITH_FLAGS, TWO))
_add(["not"], ISpec(Category.LOGIC, arity=ONE))
# Desplazamientos y rotaciones
_add(["shl", "sal", "shr", "sar"], ISpec(Category.SHIFT, ARITH_FLAGS))
_add(["rol", "ror", "rcl", "rcr"], ISpec(Category.SHIFT, frozenset({CF, OF})))
# Comparación
_add(["cmp", "test"], ISpec(Category.VERIFY, ARITH_FLAGS, TWO))
# Saltos y llamadas
_add(["jmp", "jcxz", "jecxz"], ISpec(Category.BRANCH, arity=ONE))
_add(["loop", "loope", "loopz", "loopne", "loopnz", "call"], ISpec(Category.BRANCH, arity=ONE))
_add(["ret"], ISpec(Category.BRANCH, arity=(0, 1)))
# Cadenas
_add(["lods", "stos", "movs", "scas", "cmps", "cld", "std"], ISpec(Category.STRING))
_add(sorted(REPEAT_PREFIXES), ISpec(Category.STRING))
# Varios
_add(["nop", "int", "hlt", "leave", "enter", "clc", "stc", "cmc"], ISpec(Category.MISC))

for _cc in CONDITION_FLAGS:
    _add(["j" + _cc], ISpec(Category.BRANCH, arity=ONE))
    _add(["set" + _cc], ISpec(Category.SETCC, arity=ONE))
    _add(["cmov" + _cc], ISpec(Category.CMOV, arity=TWO))

SIZE_SUFFIXES = ("b", "w", "l")

def split_size_suffix(mnemonic: str) -> Tuple[str, str]:
    """'movl' -> ('mov', 'l'). Solo se quita el sufijo si el mnemónico completo
    no es conocido y la base sí lo es ('call', 'sub', 'jl' no se tocan)."""
    m = mnemonic.lower()
    if len(m) > 1 and m not in SPEC and m[-1] in SIZE_SUFFIXES and m[:-1] in SPEC:
        return m[:-1], m[-1]
    return m, "inferido"

def condition_of(mnemonic: str) -> Optional[str]:
    """Sufijo de condición de j<cc>/set<cc>/cmov<cc>, o None."""
    m = mnemonic.lower()
    if m == "jmp":
        return None
    for prefix in CONDITIONAL_PREFIXES:
        if m.startswith(prefix) and len(m) > len(prefix):
            return m[len(prefix):]
    return None

def category_of(mnemonic: str, operand_count: int = 0) -> Category:
    m = mnemonic.lower()
    if m in STRING_MOVES and operand_count == 0:
        return Category.STRING
    if m in SPEC:
        return SPEC[m].category
    # familias por prefijo para mnemónicos fuera de la tabla
    if m.startswith("mov"):
        return Category.DATA
    if m.startswith("set"):
        return Category.SETCC
    if m.startswith("cmov"):
        return Category.CMOV
    if m.startswith("j"):
        return Category.BRANCH
    if m.startswith(("lods", "stos", "scas", "cmps")):
        return Category.STRING
    return Category.MISC

def flag_reads(mnemonic: str, operand_count: int = 0) -> FrozenSet[Flag]:
    m = mnemonic.lower()
    if m == "imul" and operand_count == 3:
        return frozenset({CF, OF})
    cc = condition_of(m)
    if cc is None:
        return NO_FLAGS
    return CONDITION_FLAGS.get(cc, NO_FLAGS)

def flag_writes(mnemonic: str) -> FrozenSet[Flag]:
    spec = SPEC.get(mnemonic.lower())
    return spec.writes if spec else NO_FLAGS

@dataclass(frozen=True)
class Classification:
    category: Category
    reads: FrozenSet[Flag]
    writes: FrozenSet[Flag]

def classify(mnemonic: str, operand_count: int = 0) -> Classification:
    """Categoría y flags de un mnemónico ya normalizado (sin sufijo de tamaño)."""
    return Classification(
        category=category_of(mnemonic, operand_count),
        reads=flag_reads(mnemonic, operand_count),
        writes=flag_writes(mnemonic),
    )

def _arity(mnemonic: str, operand_count: int) -> Optional[Tuple[int, int]]:
    m = mnemonic.lower()
    if m in STRING_MOVES and operand_count == 0:
        return None
    if m in SPEC:
        return SPEC[m].arity
    category = category_of(m, operand_count)
    if category == Category.DATA:
        return TWO
    if category in (Category.BRANCH, Category.SETCC):
        return ONE
    if category == Category.CMOV:
        return TWO
    return None

def _arity_message(mnemonic: str, arity: Tuple[int, int]) -> str:
    category = category_of(mnemonic, arity[0])
    if mnemonic.startswith("loop"):
        return f"{mnemonic} requires a target label"
    if mnemonic == "ret":
        return "ret accepts at most one immediate operand"
    if category in (Category.BRANCH, Category.SETCC):
        return f"{mnemonic} requires a target"
    if arity == ONE:
        return f"{mnemonic} requires one operand"
    return f"{mnemonic} requires two operands"

def validate_operands(mnemonic: str, operands: List, operand_count: Optional[int] = None) -> List[str]:
    """Reglas estructurales de una instrucción. Devuelve un mensaje por regla violada.

    operand_count es el número de operandos escritos en el fuente (incluidos
    los que no se pudieron interpretar); por defecto len(operands).
    """
    m = mnemonic.lower()
    count = len(operands) if operand_count is None else operand_count
    errors: List[str] = []

    if m.startswith("mov") and category_of(m, count) == Category.DATA and len(operands) == 2 \
            and all(getattr(op, "kind", None) == "mem" for op in operands):
        errors.append(f"{m} does not allow memory to memory")

    arity = _arity(m, count)
    if arity is not None and not (arity[0] <= count <= arity[1]):
        errors.append(_arity_message(m, arity))

    return errors
