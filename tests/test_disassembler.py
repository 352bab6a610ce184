import pytest

from calcmachine.disassembler import (
    disassemble,
    disassemble_for_debug,
    format_instruction,
    format_instruction_debug,
    main,
)
from calcmachine.instructions import DataByte, Instruction, InstructionError, Opcode
from calcmachine.primes import PRIMES_PROGRAM

SMALL_PROGRAM = bytes([10, 0, 1, 5, 0, 0, 3, 9])


@pytest.mark.parametrize(
    ("opcode", "operand", "expected"),
    [
        (Opcode.TERMINATE, 0, "terminate 0"),
        (Opcode.JUMP_IF_NONZERO, 13, "jump if non-zero 13"),
        (Opcode.INDIRECT_STORE_BYTE, 289, "indirect store byte 289"),
        (Opcode.OUTPUT, 5, "output 5"),
    ],
)
def test_format_instruction(opcode, operand, expected):
    assert format_instruction(Instruction(opcode, operand)) == expected


def test_format_data_byte():
    assert format_instruction(DataByte(7)) == "data byte 7"


def test_format_debug_word_operand_shows_bytes():
    assert format_instruction_debug(Instruction(Opcode.SET, 284)) == "Set(284: 28, 1)"


def test_format_debug_byte_operand_and_data():
    assert format_instruction_debug(Instruction(Opcode.TERMINATE, 0)) == "Terminate(0)"
    assert format_instruction_debug(Instruction(Opcode.OUTPUT, 5)) == "Output(5)"
    assert format_instruction_debug(DataByte(48)) == "Byte(48)"


def test_disassemble_small_program():
    assert list(disassemble(SMALL_PROGRAM)) == [
        "process size 10",
        "    2: set 5",
        "    5: terminate 3",
        "    7: data byte 9",
    ]


def test_disassemble_for_debug_small_program():
    assert list(disassemble_for_debug(SMALL_PROGRAM)) == [
        "Program size: 8",
        "Process size: 10",
        "    2: Set(5: 5, 0)",
        "    5: Terminate(3)",
        "    7: Byte(9)",
    ]


def test_primes_listing_offsets_are_consecutive():
    lines = list(disassemble(PRIMES_PROGRAM))
    assert lines[0] == "process size 699"
    offsets = [int(line.split(":")[0]) for line in lines[1:]]
    assert offsets[0] == 2
    assert offsets[-1] == len(PRIMES_PROGRAM) - 1
    assert offsets == sorted(offsets)
    assert "  276: terminate 0" in lines


def test_primes_data_section_is_listed_byte_by_byte():
    lines = list(disassemble(PRIMES_PROGRAM))
    data_lines = [line for line in lines if "data byte" in line]
    assert len(data_lines) == len(PRIMES_PROGRAM) - 278
    assert data_lines[0] == "  278: data byte 0"


def test_debug_and_plain_listings_have_same_offsets():
    plain = list(disassemble(PRIMES_PROGRAM))[1:]
    debug = list(disassemble_for_debug(PRIMES_PROGRAM))[2:]
    assert [line[:6] for line in plain] == [line[:6] for line in debug]


def test_disassemble_too_short_program_raises():
    with pytest.raises(InstructionError):
        list(disassemble(b"\x05"))


def test_debug_reports_program_size_before_failing():
    lines = disassemble_for_debug(b"\x05")
    assert next(lines) == "Program size: 1"
    with pytest.raises(InstructionError):
        next(lines)


def test_unknown_opcode_raises():
    with pytest.raises(InstructionError):
        list(disassemble(bytes([10, 0, 0x30])))


def test_missing_terminate_raises():
    with pytest.raises(InstructionError):
        list(disassemble(bytes([10, 0, 1, 5, 0])))


def test_main_prints_both_listings(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("FOR DEBUG\n")
    assert "Process size: 699" in out
    assert "\nFOR ASSEMBLING\nprocess size 699\n" in out


def test_main_reads_program_file(tmp_path, capsys):
    path = tmp_path / "prog.bin"
    path.write_bytes(SMALL_PROGRAM)
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "    5: terminate 3" in out
    assert "    5: Terminate(3)" in out


def test_main_reports_invalid_program(tmp_path, capsys):
    path = tmp_path / "bad.bin"
    path.write_bytes(bytes([10, 0, 0x30]))
    assert main([str(path)]) == 1
    assert "Disassembly stopped" in capsys.readouterr().err