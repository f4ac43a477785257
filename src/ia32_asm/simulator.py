# src/ia32_asm/simulator.py
'''
intérprete reducido: mov, add, sub, push, pop, nop, int sobre los LineRecord del análisis
'''

from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from .ast import AnalysisResult, Imm, LineRecord, Operand, Reg
from .cpu import CpuState, STACK_BASE
from .diagnostics import Diagnostic, error, warning
from .isa import Category
from .parser import analyze
from .regs import STACK_POINTER
from .utils import fits32

logger = logging.getLogger(__name__)

class ExecutionError(Exception):
    """Fallo de una instrucción concreta; no detiene la simulación."""

@dataclass(frozen=True)
class LogEntry:
    line: int
    instruction: str
    description: str

@dataclass(frozen=True)
class SimulationResult:
    state: CpuState
    diagnostics: List[Diagnostic]
    log: List[LogEntry]
    analysis: AnalysisResult

# ---------- Resolución de operandos ----------

def _reg32(op: Operand, message: str) -> str:
    if not isinstance(op, Reg):
        raise ExecutionError(message)
    if op.size != "l":
        raise ExecutionError(f"only 32-bit registers are supported: {op.name}")
    return op.name

def _value(state: CpuState, op: Operand, mnemonic: str) -> int:
    if isinstance(op, Reg):
        return state.read(_reg32(op, f"invalid operand for {mnemonic}"))
    if isinstance(op, Imm) and op.value is not None:
        return op.value
    if isinstance(op, Imm) and op.symbol is not None:
        raise ExecutionError(f"unresolved symbol: {op.symbol}")
    raise ExecutionError(f"unsupported source operand: {op.text}")

# ---------- Instrucciones ----------

def _mov(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    src, dst = rec.operands
    reg = _reg32(dst, "mov destination must be a register")
    value = _value(state, src, "mov")
    if reg == STACK_POINTER:
        state.rebase_stack(value)
    else:
        state.write(reg, value)
    return f"moved {value} into {reg}"

def _arith(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    src, dst = rec.operands
    reg = _reg32(dst, f"{rec.mnemonic} destination must be a register")
    operand = _value(state, src, rec.mnemonic)
    current = state.read(reg)
    result = current + operand if rec.mnemonic == "add" else current - operand
    state.write(reg, result)
    state.set_result_flags(result)
    if not fits32(result):
        diags.append(warning(f"result {result} does not fit in 32 bits", line=rec.line))
    return f"result in {reg}: {result}"

def _push(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    value = _value(state, rec.operands[0], "push")
    state.push(value)
    return f"pushed value {value}"

def _pop(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    reg = _reg32(rec.operands[0], "pop destination must be a register")
    if not state.stack:
        raise ExecutionError("stack is empty, cannot pop")
    value = state.pop()
    state.write(reg, value)
    return f"popped {value} from the stack into {reg}"

def _nop(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    return "no operation"

def _int(state: CpuState, rec: LineRecord, diags: List[Diagnostic]) -> str:
    if rec.operands:
        return f"interrupt {rec.operands[0].text} simulated (no effect)"
    return "interrupt simulated (no effect)"

Handler = Callable[[CpuState, LineRecord, List[Diagnostic]], str]

HANDLERS: Dict[str, Handler] = {
    "mov": _mov,
    "add": _arith,
    "sub": _arith,
    "push": _push,
    "pop": _pop,
    "nop": _nop,
    "int": _int,
}

SUPPORTED = frozenset(HANDLERS)
SUPPORTED_HINT = "supported: " + ", ".join(sorted(SUPPORTED))

# ---------- Bucle principal ----------

def execute(analysis: AnalysisResult, *, stack_base: int = STACK_BASE,
            file: Optional[str] = None) -> SimulationResult:
    """Ejecuta de arriba abajo, una sola vez, los registros de línea ya analizados.

    file solo se usa para ubicar los diagnósticos ('prog.s:3: ERROR: ...').
    """
    state = CpuState.initial(stack_base)
    diagnostics: List[Diagnostic] = []
    log: List[LogEntry] = []

    for rec in analysis.lines:
        if rec.category in (Category.LABEL, Category.DIRECTIVE):
            continue
        if rec.errors:
            diagnostics.extend(error(msg, line=rec.line, file=file) for msg in rec.errors)
            continue
        handler = HANDLERS.get(rec.mnemonic)
        if handler is None or rec.prefixes:
            name = " ".join((rec.prefixes or []) + [rec.mnemonic])
            diagnostics.append(error(f"unsupported instruction: {name}", line=rec.line,
                                     file=file, hint=SUPPORTED_HINT))
            continue
        step: List[Diagnostic] = []
        try:
            description = handler(state, rec, step)
        except ExecutionError as ex:
            logger.debug("line %d: %s", rec.line, ex)
            diagnostics.append(error(str(ex), line=rec.line, file=file))
            continue
        diagnostics.extend(replace(d, file=file) for d in step)
        log.append(LogEntry(line=rec.line, instruction=rec.source, description=description))
        logger.debug("line %d: %s -> %s", rec.line, rec.source, description)

    return SimulationResult(state=state.snapshot(), diagnostics=diagnostics, log=log, analysis=analysis)

def simulate(text: str, *, stack_base: int = STACK_BASE, file: Optional[str] = None) -> SimulationResult:
    """Analiza y ejecuta el fuente. Nunca lanza por errores del programa."""
    return execute(analyze(text), stack_base=stack_base, file=file)
