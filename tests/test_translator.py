import pytest

from calcmachine.instructions import InstructionError
from calcmachine.parsing_interpreter import parse_program
from calcmachine.primes import PRIMES_PROGRAM
from calcmachine.translator import translate_program_to_c, write_c_program

SET_AND_TERMINATE = [7, 0, 1, 5, 0, 0, 3]


def test_simple_program_statements():
    lines = translate_program_to_c(SET_AND_TERMINATE).splitlines()
    assert "    addr_2: acc = 5;" in lines
    assert "    addr_5: return 3;" in lines
    assert lines.index("    addr_2: acc = 5;") < lines.index("    addr_5: return 3;")


def test_header_and_main_opening():
    lines = translate_program_to_c(SET_AND_TERMINATE).splitlines()
    assert lines[0] == "#include <stdio.h>"
    assert lines[1] == "#include <string.h>"
    assert "int main() {" in lines
    assert "    unsigned short acc = 0;" in lines


def test_memory_section_lists_every_byte():
    text = translate_program_to_c(SET_AND_TERMINATE)
    lines = text.splitlines()
    start = lines.index("unsigned char memory[] = {")
    assert lines[start + 1:start + 1 + len(SET_AND_TERMINATE)] == [
        f"    {byte}, " for byte in SET_AND_TERMINATE
    ]
    assert lines[-1] == "};"
    assert text.endswith("\n")


def test_jump_and_labels():
    program = [7, 0, 13, 5, 0, 0, 0]
    lines = translate_program_to_c(program).splitlines()
    assert "    addr_2: goto addr_5;" in lines
    assert "    addr_5: return 0;" in lines


def test_input_block():
    program = [10, 0, 6, 4, 0, 0]
    lines = translate_program_to_c(program).splitlines()
    assert "    addr_2: {" in lines
    assert '        scanf("%4s", buf);' in lines
    assert "        memset(memory + acc + len, ' ', 4 - len);" in lines
    assert "    addr_4: return 0;" in lines


def test_invalid_opcode_raises():
    with pytest.raises(InstructionError, match="Invalid instruction."):
        translate_program_to_c([7, 0, 0xFF, 0, 0])


def test_missing_terminate_raises():
    with pytest.raises(InstructionError):
        translate_program_to_c([7, 0, 1, 5, 0])


def test_primes_program_labels_match_decoded_instructions():
    text = translate_program_to_c(PRIMES_PROGRAM)
    labels = [line for line in text.splitlines() if line.startswith("    addr_")]
    cells = parse_program(PRIMES_PROGRAM)
    decoded = [ip for ip, cell in enumerate(cells) if hasattr(cell, "opcode")]
    assert [int(line.split(":")[0][len("    addr_"):]) for line in labels] == decoded
    assert "    addr_2: acc = 284;" in text.splitlines()


def test_write_c_program(tmp_path, capsys):
    target = tmp_path / "prog.c"
    write_c_program(SET_AND_TERMINATE, target)
    assert target.read_text(encoding="utf-8") == translate_program_to_c(
        SET_AND_TERMINATE
    )
    assert f"Compiled to {target}." in capsys.readouterr().err