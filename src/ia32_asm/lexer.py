from __future__ import annotations
import re
from typing import Optional

COMMENT_CHARS = (';', '#')

def strip_comment(line: str) -> str:
    """Remove comments starting with ';' or '#' (outside string literals)"""
    quoted = False
    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
        elif quoted and ch == '\\':
            escaped = True
        elif ch == '"':
            quoted = not quoted
        elif ch in COMMENT_CHARS and not quoted:
            return line[:i].strip()
    return line.strip()

LABEL_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
LABEL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*):\s*(.*)$")

def is_label_name(token: str) -> bool:
    return bool(LABEL_NAME_RE.match(token))

def split_label(line: str):
    """Return (label, rest) if line has 'label:', else (None, line)."""
    m = LABEL_RE.match(line)
    if not m:
        return None, line
    return m.group(1), m.group(2).strip()

def is_directive(line: str) -> bool:
    return line.strip().startswith('.')

def split_mnemonic_operands(line: str):
    s = line.strip()
    if not s:
        return "", ""
    parts = s.split(None, 1)
    if len(parts) == 1:
        return parts[0].lower(), ""
    return parts[0].lower(), parts[1].strip()

def split_operands(op_str: str):
    if not op_str:
        return []
    # split by commas but not inside parentheses or string literals
    out = []
    cur = []
    depth = 0
    quoted = False
    escaped = False
    for ch in op_str:
        if escaped:
            escaped = False
            cur.append(ch)
        elif quoted and ch == '\\':
            escaped = True
            cur.append(ch)
        elif ch == '"':
            quoted = not quoted
            cur.append(ch)
        elif quoted:
            cur.append(ch)
        elif ch == '(':
            depth += 1
            cur.append(ch)
        elif ch == ')':
            depth = max(0, depth-1)
            cur.append(ch)
        elif ch == ',' and depth == 0:
            s = ''.join(cur).strip()
            if s:
                out.append(s)
            cur = []
        else:
            cur.append(ch)
    s = ''.join(cur).strip()
    if s:
        out.append(s)
    return out

DEC_RE = re.compile(r"^-?\d+$")
HEX_RE = re.compile(r"^-?0x[0-9a-f]+$", re.IGNORECASE)
BIN_RE = re.compile(r"^-?0b[01]+$", re.IGNORECASE)

def parse_number(token: str) -> Optional[int]:
    """Decimal, 0x hex or 0b binary literal, optionally negative. None if not a number."""
    t = token.strip()
    if HEX_RE.match(t):
        return int(t, 16)
    if BIN_RE.match(t):
        return int(t, 2)
    if DEC_RE.match(t):
        return int(t, 10)
    return None
