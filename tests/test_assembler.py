import pytest

from simso.assembler import (
    MEM_SIZE,
    Assembler,
    AssemblyError,
    assemble,
    format_memory,
    main,
)
from simso.instr import Opcode


def run(text):
    assembler = Assembler()
    assembler.assemble_lines(text.split("\n"))
    assembler.resolve()
    return assembler


def test_simple_program():
    assert assemble(" CARGI 5\n PARA") == [Opcode.CARGI, 5, Opcode.PARA]


def test_instruction_names_are_case_insensitive():
    assert assemble(" cargi 5\n Para") == assemble(" CARGI 5\n PARA")


def test_comments_and_blank_lines_ignored():
    assert assemble("; header\n\n NOP ; nothing\n") == [Opcode.NOP]


def test_forward_reference_is_resolved():
    asm = run(" DESV fim\n NOP\nfim PARA")
    assert asm.messages == []
    assert asm.words[1] == asm.symbols["fim"]
    assert asm.words[asm.symbols["fim"]] == Opcode.PARA


def test_label_alone_defines_current_position():
    asm = run(" NOP\naqui\n NOP")
    assert asm.symbols["aqui"] == 1


def test_define_sets_symbol_value():
    asm = run("x DEFINE 7\n CARGI x")
    assert asm.symbols["x"] == 7
    assert asm.words == [Opcode.CARGI, 7]


def test_espaco_reserves_zeros():
    assert assemble(" ESPACO 3") == [0, 0, 0]


def test_espaco_accepts_symbol():
    assert assemble("n DEFINE 2\n ESPACO n") == [0, 0]


def test_valor_inserts_value_only():
    assert assemble("v VALOR -4") == [-4]


def test_undefined_symbol_reported_and_filled():
    asm = run(" CARGM nada")
    assert asm.words == [Opcode.CARGM, -1]
    assert any("'nada'" in message for message in asm.messages)


def test_redefinition_reported_and_first_kept():
    asm = run("a NOP\na NOP")
    assert asm.symbols["a"] == 0
    assert any("redefinicao" in message for message in asm.messages)


def test_unknown_instruction():
    asm = run(" FOO 1")
    assert asm.words == []
    assert any("'FOO' desconhecida" in message for message in asm.messages)


def test_missing_and_extra_argument():
    asm = run(" CARGI\n NOP 3")
    assert asm.words == []
    assert any("necessita argumento" in message for message in asm.messages)
    assert any("não tem argumento" in message for message in asm.messages)


def test_define_requires_label_and_number():
    asm = run(" DEFINE 3\nx DEFINE y")
    assert "x" not in asm.symbols
    assert any("exige um label" in message for message in asm.messages)
    assert any("exige valor numérico" in message for message in asm.messages)


def test_espaco_must_be_positive():
    asm = run(" ESPACO 0")
    assert asm.words == []
    assert any("valor positivo" in message for message in asm.messages)


def test_extra_text_is_ignored_with_warning():
    asm = run(" CARGI 5 extra coisa")
    assert asm.words == [Opcode.CARGI, 5]
    assert "linha 1: ignorando 'extra coisa'" in asm.messages


def test_program_size_limit():
    assert len(assemble(f" ESPACO {MEM_SIZE - 1}")) == MEM_SIZE - 1
    with pytest.raises(AssemblyError):
        assemble(f" ESPACO {MEM_SIZE}")


def test_format_memory_single_line():
    assert format_memory([1, 2]) == "    /*   0 */ 1, 2,\n"


def test_format_memory_ten_per_line():
    lines = format_memory(list(range(12))).splitlines()
    assert len(lines) == 2
    assert lines[1] == "    /*  10 */ 10, 11,"


def test_main_prints_memory(tmp_path, capsys):
    source = tmp_path / "prog.asm"
    text = " CARGI 5\n ESCR 0\n PARA\n"
    source.write_text(text, encoding="utf-8")
    assert main([str(source)]) == 0
    assert capsys.readouterr().out == format_memory(assemble(text))


def test_main_wrong_arguments(capsys):
    assert main([]) == 1
    assert "ERRO" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nada.asm"
    assert main([str(missing)]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert str(missing) in captured.err


def test_main_fatal_error(tmp_path, capsys):
    source = tmp_path / "big.asm"
    source.write_text(f" ESPACO {MEM_SIZE}\n", encoding="utf-8")
    assert main([str(source)]) == 1
    assert "ERRO FATAL" in capsys.readouterr().err