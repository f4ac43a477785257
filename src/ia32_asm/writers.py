from __future__ import annotations
from typing import Iterable, List

from .ast import AnalysisResult
from .cpu import CpuState, WORD_SIZE
from .isa import Flag
from .parser import extract_variables
from .simulator import SimulationResult
from .utils import format_value, to_hex32

def _flags(flags: Iterable[Flag]) -> str:
    return ",".join(sorted(f.value for f in flags)) or "-"

def analysis_lines(result: AnalysisResult) -> List[str]:
    out: List[str] = []
    for rec in result.lines:
        label = f"{rec.label}: " if rec.label else ""
        prefix = " ".join(rec.prefixes) + " " if rec.prefixes else ""
        out.append(f"{rec.line:4d}  {label}{prefix}{rec.mnemonic} [{rec.category.value}/{rec.size}] "
                   f"{rec.addr_mode}  reads={_flags(rec.reads)} writes={_flags(rec.writes)}")
        for msg in rec.errors:
            out.append(f"      error: {msg}")
    for var in extract_variables(result):
        out.append(f"var {var.name} {var.directive} {', '.join(str(v) for v in var.values)}")
    return out

def register_lines(state: CpuState) -> List[str]:
    out: List[str] = []
    for name, value in state.registers.items():
        v = format_value(value)
        out.append(f"{name}  {v['hex']}  {v['signed']:>11}  {v['unsigned']:>10}  '{v['ascii']}'")
    out.append("  ".join(f"{f}={int(b)}" for f, b in state.flags.items()))
    esp = state.registers["ESP"]
    for i, value in enumerate(state.stack_top_first()):
        out.append(f"[{to_hex32(esp + WORD_SIZE * i)}] {to_hex32(value)}")
    return out

def simulation_lines(result: SimulationResult) -> List[str]:
    out = [f"{e.line:4d}  {e.instruction:<24} ; {e.description}" for e in result.log]
    out.extend(str(d) for d in result.diagnostics)
    out.extend(register_lines(result.state))
    return out

def write_lines(lines: Iterable[str], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
