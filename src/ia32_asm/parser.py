# src/ia32_asm/parser.py
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .lexer import (
    strip_comment,
    split_label,
    is_directive,
    split_mnemonic_operands,
    split_operands,
)
from .ast import Imm, LineRecord, AnalysisResult, Operand
from .isa import Category, REPEAT_PREFIXES, classify, split_size_suffix, validate_operands
from .operands import parse_operand, parse_directive_operand, as_branch_target

logger = logging.getLogger(__name__)

# Solo \n y \r\n separan líneas físicas (no \f, \v ni \u2028)
LINE_BREAK_RE = re.compile(r"\r?\n")

SECTION_DIRECTIVES = frozenset({".text", ".data", ".bss", ".rodata", ".section"})
DATA_DIRECTIVES = frozenset({
    ".byte", ".word", ".short", ".int", ".long", ".quad",
    ".ascii", ".asciiz", ".asciz", ".string", ".space", ".skip", ".zero",
})
OTHER_DIRECTIVES = frozenset({
    ".global", ".globl", ".extern", ".align", ".balign", ".p2align",
    ".equ", ".set", ".comm", ".lcomm", ".type", ".size", ".file",
})
DIRECTIVES = SECTION_DIRECTIVES | DATA_DIRECTIVES | OTHER_DIRECTIVES

# Directivas cuyos operandos numéricos se exponen como variables
VARIABLE_DIRECTIVES = frozenset({".byte", ".word", ".short", ".int", ".long", ".quad"})

def _addr_mode_summary(operands: List[Operand]) -> str:
    if not operands:
        return "sin-operandos"
    if len(operands) == 1:
        return operands[0].addr_mode
    return " ".join(f"{'src' if i == 0 else 'dst'}:{op.addr_mode}" for i, op in enumerate(operands))

def _normalize_source(text: str) -> str:
    return " ".join(text.split())

def _parse_directive(lineno: int, label: Optional[str], name: str, op_str: str, source: str) -> LineRecord:
    raw = split_operands(op_str)
    operands: List[Operand] = []
    errors: List[str] = []
    if name not in DIRECTIVES:
        errors.append(f"unknown directive: {name}")
    for tok in raw:
        try:
            operands.append(parse_directive_operand(tok))
        except ValueError as ex:
            errors.append(str(ex))
    return LineRecord(
        line=lineno,
        label=label,
        mnemonic=name,
        category=Category.DIRECTIVE,
        operands=operands,
        addr_mode=", ".join(raw) if raw else "sin-operandos",
        errors=errors,
        source=source,
    )

def _parse_instruction(lineno: int, label: Optional[str], mnemonic: str, op_str: str,
                       source: str, prefixes: Optional[List[str]] = None) -> LineRecord:
    raw = split_operands(op_str)
    operands: List[Operand] = []
    errors: List[str] = []
    for tok in raw:
        try:
            operands.append(parse_operand(tok))
        except ValueError as ex:
            errors.append(str(ex))

    base, size = split_size_suffix(mnemonic)
    info = classify(base, len(raw))
    if info.category == Category.BRANCH:
        operands = [as_branch_target(op) for op in operands]
    errors.extend(validate_operands(base, operands, len(raw)))

    return LineRecord(
        line=lineno,
        label=label,
        mnemonic=base,
        size=size,
        category=info.category,
        operands=operands,
        addr_mode=_addr_mode_summary(operands),
        reads=info.reads,
        writes=info.writes,
        errors=errors,
        prefixes=prefixes,
        source=source,
    )

def _parse_prefixed(lineno: int, label: Optional[str], prefix: str, rest: str, source: str) -> LineRecord:
    mnemonic, op_str = split_mnemonic_operands(rest)
    if not mnemonic:
        rec = LineRecord(line=lineno, label=label, mnemonic=prefix, category=Category.STRING,
                         prefixes=[prefix], source=source)
        rec.errors.append("prefix without instruction")
        return rec
    return _parse_instruction(lineno, label, mnemonic, op_str, source, prefixes=[prefix])

def analyze_line(raw: str, lineno: int) -> List[LineRecord]:
    """Analiza una línea de fuente. Devuelve [] para líneas vacías o solo comentario.

    Reglas:
      - Comentarios: ';' o '#' hasta fin de línea.
      - Etiquetas: 'name:' al inicio (permite 'name: .byte ...' y 'name: instr ...').
      - Directivas: mnemónico que empieza con '.'.
      - Prefijos rep/repe/repne...: se registran y se analiza el resto de la línea.
    """
    core = strip_comment(raw)
    if not core:
        return []

    label, rest = split_label(core)
    if label and not rest:
        return [LineRecord(line=lineno, label=label, mnemonic="label", category=Category.LABEL)]

    mnemonic, op_str = split_mnemonic_operands(rest)
    source = _normalize_source(rest)

    if is_directive(mnemonic):
        return [_parse_directive(lineno, label, mnemonic, op_str, source)]
    if mnemonic in REPEAT_PREFIXES:
        return [_parse_prefixed(lineno, label, mnemonic, op_str, source)]
    return [_parse_instruction(lineno, label, mnemonic, op_str, source)]

def analyze(text: str) -> AnalysisResult:
    """Analiza todo el fuente, línea a línea (base 1). Los errores quedan en cada línea."""
    lines: List[LineRecord] = []
    for lineno, raw in enumerate(LINE_BREAK_RE.split(text), start=1):
        records = analyze_line(raw, lineno)
        for rec in records:
            if rec.errors:
                logger.debug("line %d: %s", lineno, "; ".join(rec.errors))
        lines.extend(records)
    logger.debug("analyzed %d records", len(lines))
    return AnalysisResult(lines=lines)

@dataclass(frozen=True)
class Variable:
    """Variable declarada en datos: 'buf: .byte 1, 2, 3'."""
    name: str
    directive: str
    values: Tuple[int, ...]
    line: int

def extract_variables(result: AnalysisResult) -> List[Variable]:
    """Líneas con etiqueta y directiva de datos; solo se conservan los valores numéricos."""
    out: List[Variable] = []
    for rec in result.lines:
        if not rec.label or rec.mnemonic not in VARIABLE_DIRECTIVES:
            continue
        values = tuple(op.value for op in rec.operands if isinstance(op, Imm) and op.value is not None)
        if values:
            out.append(Variable(name=rec.label, directive=rec.mnemonic, values=values, line=rec.line))
    return out
