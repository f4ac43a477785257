from src.ia32_asm.parser import analyze, analyze_line, extract_variables
from src.ia32_asm.ast import Imm, Reg, Mem, LabelRef
from src.ia32_asm.isa import Category, Flag

def test_blank_and_comment_lines_produce_nothing():
    assert analyze_line("", 1) == []
    assert analyze_line("   ; solo comentario", 2) == []
    assert analyze_line("# otro", 3) == []

def test_label_only_line():
    (rec,) = analyze_line("_start:", 4)
    assert rec.label == "_start"
    assert rec.category == Category.LABEL
    assert rec.operands == [] and rec.errors == []

def test_simple_instruction_record():
    (rec,) = analyze_line("  loop: addl $5, %EAX   ; suma", 7)
    assert rec.line == 7
    assert rec.label == "loop"
    assert rec.mnemonic == "add" and rec.size == "l"
    assert rec.category == Category.ARITH
    imm, reg = rec.operands
    assert isinstance(imm, Imm) and imm.value == 5
    assert isinstance(reg, Reg) and reg.name == "EAX" and reg.size == "l"
    assert rec.addr_mode == "src:inmediato dst:registro"
    assert rec.writes == {Flag.CF, Flag.OF, Flag.SF, Flag.ZF}
    assert rec.reads == frozenset()
    assert rec.errors == []
    assert rec.prefixes is None
    assert rec.source == "addl $5, %EAX"

def test_single_and_no_operand_summaries():
    (push,) = analyze_line("pushl -8(%ebp)", 1)
    assert push.addr_mode == "base+desp"
    (ret,) = analyze_line("ret", 2)
    assert ret.addr_mode == "sin-operandos"

def test_data_directive_under_label():
    (rec,) = analyze_line("buf: .byte 1, 2, 3", 3)
    assert rec.category == Category.DIRECTIVE
    assert rec.label == "buf"
    assert rec.mnemonic == ".byte"
    assert [op.value for op in rec.operands] == [1, 2, 3]
    assert all(isinstance(op, Imm) for op in rec.operands)
    assert rec.addr_mode == "1, 2, 3"
    assert rec.errors == []

def test_string_and_symbol_directives():
    (msg,) = analyze_line('mensaje: .asciiz "Hola, SimuEmu32!"', 1)
    assert msg.errors == []
    assert msg.operands[0].string == "Hola, SimuEmu32!"
    (glob,) = analyze_line(".global _start", 2)
    assert isinstance(glob.operands[0], LabelRef) and glob.operands[0].name == "_start"
    (text,) = analyze_line(".text", 3)
    assert text.addr_mode == "sin-operandos" and text.operands == []

def test_directive_errors():
    (bad,) = analyze_line(".word 1, %eax", 1)
    assert bad.errors == ["invalid directive operand: %eax"]
    assert [op.value for op in bad.operands] == [1]
    (unknown,) = analyze_line(".frob 1", 2)
    assert unknown.errors == ["unknown directive: .frob"]

def test_branch_targets_are_labels():
    (j,) = analyze_line("jne loop", 1)
    assert j.category == Category.BRANCH
    assert isinstance(j.operands[0], LabelRef)
    assert j.operands[0].addr_mode == "relativo"
    assert j.reads == {Flag.ZF}
    (call,) = analyze_line("call *%eax", 2)
    assert isinstance(call.operands[0], Mem) and call.operands[0].indirect
    # fuera de los saltos un símbolo desnudo es memoria directa
    (mov,) = analyze_line("movl counter, %eax", 3)
    assert isinstance(mov.operands[0], Mem) and mov.operands[0].addr_mode == "directo"

def test_prefixed_instruction():
    (rec,) = analyze_line("rep stosb", 1)
    assert rec.prefixes == ["rep"]
    assert rec.mnemonic == "stos" and rec.size == "b"
    assert rec.category == Category.STRING
    assert rec.errors == []
    (movs,) = analyze_line("repne movsb", 2)
    assert movs.category == Category.STRING and movs.errors == []
    (lone,) = analyze_line("rep", 3)
    assert lone.errors == ["prefix without instruction"]

def test_mem_to_mem_and_arity_accumulate():
    (rec,) = analyze_line("movl (%eax), (%ebx)", 1)
    assert rec.errors == ["mov does not allow memory to memory"]
    (rec,) = analyze_line("addl %eax, $zz!, 4", 2)
    assert rec.errors == ["invalid immediate: '$zz!'", "add requires two operands"]
    assert len(rec.operands) == 2

def test_unbalanced_parentheses():
    (rec,) = analyze_line("mov (%EAX, %EAX", 1)
    paren = [e for e in rec.errors if "unbalanced parentheses" in e]
    assert len(paren) == 1
    assert not any(isinstance(op, Mem) for op in rec.operands)

def test_bad_scale():
    (rec,) = analyze_line("movl (%ebx,%esi,3), %eax", 1)
    assert "scale must be 1, 2, 4, or 8" in rec.errors
    assert len(rec.operands) == 1

SRC = """
; SimuEmu32 - Plantilla Normal
.data
mensaje: .asciiz "Hola, SimuEmu32!"
valor:   .int 10, 0x20, etiqueta
nada:    .ascii "x"

.text
.global _start

_start:
  movl $0, %ebx
  movl $1, %eax
  int $0x80
  jmp _start
"""

def test_analyze_program():
    result = analyze(SRC)
    lines = [rec.line for rec in result.lines]
    assert lines == sorted(lines)
    # líneas vacías y comentarios no generan registros
    assert 1 not in lines and 2 not in lines and 7 not in lines
    assert result.errors == []
    mnems = [rec.mnemonic for rec in result.lines]
    assert mnems == [".data", ".asciiz", ".int", ".ascii", ".text", ".global",
                     "label", "mov", "mov", "int", "jmp"]

def test_analyze_is_idempotent():
    assert analyze(SRC) == analyze(SRC)

def test_errors_do_not_stop_analysis():
    result = analyze("movl (%eax, %ebx\npush\nnop\n")
    assert len(result) == 3
    assert result.lines[0].errors and result.lines[1].errors
    assert result.lines[2].errors == []
    assert [ln for ln, _ in result.errors] == [1, 1, 2]

def test_extract_variables():
    variables = extract_variables(analyze(SRC))
    assert len(variables) == 1
    var = variables[0]
    assert var.name == "valor" and var.directive == ".int"
    assert var.values == (10, 0x20)

def test_only_newlines_split_physical_lines():
    result = analyze("nop\x0c\nmov $1, %eax\r\nadd\x0b$2, %eax\n")
    assert [(rec.line, rec.mnemonic) for rec in result.lines] == [(1, "nop"), (2, "mov"), (3, "add")]
    assert result.errors == []
    # un salto de página dentro de la línea no crea un registro nuevo
    assert [rec.line for rec in analyze("nop\x0cnop\nnop").lines] == [1, 2]

def test_section_type_and_size_directives():
    src = '.section .rodata\n.type main, @function\n.size main, .-main\n.section .text,"ax",@progbits'
    result = analyze(src)
    assert result.errors == []
    assert [op.text for op in result.lines[1].operands] == ["main", "@function"]
    assert result.lines[2].operands[1].name == ".-main"

def test_escaped_quote_in_string_directive():
    (rec,) = analyze_line(r'msg: .ascii "a\"; b", "c"  ; comentario', 1)
    assert rec.errors == []
    assert [op.string for op in rec.operands] == [r'a\"; b', "c"]

def test_carry_arithmetic_needs_two_operands():
    (adc,) = analyze_line("adcl %eax", 1)
    assert adc.errors == ["adc requires two operands"]
    (sbb,) = analyze_line("sbbl $1, %eax, %ebx", 2)
    assert sbb.errors == ["sbb requires two operands"]

def test_out_of_range_immediate_is_a_line_error():
    (rec,) = analyze_line("mov $0x100000000, %eax", 1)
    assert rec.errors == ["immediate out of 32-bit range: '$0x100000000'"]
