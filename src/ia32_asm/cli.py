from __future__ import annotations
import argparse, logging, sys
from typing import List

from .cpu import STACK_BASE
from .diagnostics import has_errors
from .parser import analyze
from .simulator import execute
from .writers import analysis_lines, simulation_lines, write_lines

def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="IA-32 (AT&T) structural analyzer and reduced interpreter")
    ap.add_argument("-v", "--verbose", action="store_true", help="trazas de depuración")
    sub = ap.add_subparsers(dest="command", required=True)

    p_an = sub.add_parser("analyze", help="clasifica cada línea del fuente")
    p_an.add_argument("source", help="archivo .s/.asm de entrada")
    p_an.add_argument("--out", help="escribe el informe en este archivo")

    p_run = sub.add_parser("run", help="analiza y ejecuta el subconjunto soportado")
    p_run.add_argument("source", help="archivo .s/.asm de entrada")
    p_run.add_argument("--stack-base", type=lambda s: int(s, 0), default=STACK_BASE,
                       help="valor inicial de ESP (por defecto 0x1000)")
    p_run.add_argument("--out", help="escribe el informe en este archivo")

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        text = _read(args.source)
    except OSError as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    analysis = analyze(text)
    lines: List[str]
    if args.command == "analyze":
        lines = analysis_lines(analysis)
        failed = bool(analysis.errors)
    else:
        result = execute(analysis, stack_base=args.stack_base, file=args.source)
        lines = simulation_lines(result)
        failed = has_errors(result.diagnostics)

    if args.out:
        try:
            write_lines(lines, args.out)
        except OSError as ex:
            print(f"ERROR al escribir {args.out}: {ex}", file=sys.stderr)
            return 3
    else:
        for line in lines:
            print(line)

    return 1 if failed else 0

if __name__ == "__main__":
    raise SystemExit(main())
