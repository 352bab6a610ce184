"""Disassembler for byte machine program images.

Two listings are produced: a readable one for reassembling, and a debug
one that also shows the two bytes of every word operand.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator, Sequence

from calcmachine.instructions import (
    DataByte,
    Instruction,
    InstructionError,
    Opcode,
    get_process_size,
    parse_instruction,
)
from calcmachine.primes import PRIMES_PROGRAM

_MNEMONICS: dict[Opcode, str] = {
    Opcode.TERMINATE: "terminate",
    Opcode.SET: "set",
    Opcode.LOAD: "load",
    Opcode.STORE: "store",
    Opcode.INDIRECT_LOAD: "indirect load",
    Opcode.INDIRECT_STORE: "indirect store",
    Opcode.INPUT: "input",
    Opcode.OUTPUT: "output",
    Opcode.ADD: "add",
    Opcode.SUBTRACT: "subtract",
    Opcode.MULTIPLY: "multiply",
    Opcode.DIVIDE: "divide",
    Opcode.REMAINDER: "remainder",
    Opcode.JUMP: "jump",
    Opcode.JUMP_IF_ZERO: "jump if zero",
    Opcode.JUMP_IF_NONZERO: "jump if non-zero",
    Opcode.JUMP_IF_POSITIVE: "jump if positive",
    Opcode.JUMP_IF_NEGATIVE: "jump if negative",
    Opcode.JUMP_IF_NONPOSITIVE: "jump if non-positive",
    Opcode.JUMP_IF_NONNEGATIVE: "jump if non-negative",
    Opcode.LOAD_BYTE: "load byte",
    Opcode.STORE_BYTE: "store byte",
    Opcode.INDIRECT_LOAD_BYTE: "indirect load byte",
    Opcode.INDIRECT_STORE_BYTE: "indirect store byte",
}

_DEBUG_NAMES: dict[Opcode, str] = {
    Opcode.TERMINATE: "Terminate",
    Opcode.SET: "Set",
    Opcode.LOAD: "Load",
    Opcode.STORE: "Store",
    Opcode.INDIRECT_LOAD: "IndirectLoad",
    Opcode.INDIRECT_STORE: "IndirectStore",
    Opcode.INPUT: "Input",
    Opcode.OUTPUT: "Output",
    Opcode.ADD: "Add",
    Opcode.SUBTRACT: "Subtract",
    Opcode.MULTIPLY: "Multiply",
    Opcode.DIVIDE: "Divide",
    Opcode.REMAINDER: "Remainder",
    Opcode.JUMP: "Jump",
    Opcode.JUMP_IF_ZERO: "JumpIfZero",
    Opcode.JUMP_IF_NONZERO: "JumpIfNonZero",
    Opcode.JUMP_IF_POSITIVE: "JumpIfPositive",
    Opcode.JUMP_IF_NEGATIVE: "JumpIfNegative",
    Opcode.JUMP_IF_NONPOSITIVE: "JumpIfNonPositive",
    Opcode.JUMP_IF_NONNEGATIVE: "JumpIfNonNegative",
    Opcode.LOAD_BYTE: "LoadByte",
    Opcode.STORE_BYTE: "StoreByte",
    Opcode.INDIRECT_LOAD_BYTE: "IndirectLoadByte",
    Opcode.INDIRECT_STORE_BYTE: "IndirectStoreByte",
}


def format_instruction(instruction: Instruction | DataByte) -> str:
    """Return the assembler text of an instruction, e.g. ``jump if zero 13``."""
    if isinstance(instruction, DataByte):
        return f"data byte {instruction.value}"
    return f"{_MNEMONICS[instruction.opcode]} {instruction.operand}"


def format_instruction_debug(instruction: Instruction | DataByte) -> str:
    """Return a debug view; word operands also show their low and high bytes."""
    if isinstance(instruction, DataByte):
        return f"Byte({instruction.value})"
    name = _DEBUG_NAMES[instruction.opcode]
    operand = instruction.operand
    if instruction.opcode.operand_size == 2:
        return f"{name}({operand}: {operand & 0xFF}, {operand >> 8})"
    return f"{name}({operand})"


def _cells(program: Sequence[int]) -> Iterator[tuple[int, Instruction | DataByte]]:
    """Yield (offset, instruction) from address 2 through the first terminate,
    then every remaining byte as data."""
    offset = 2
    while True:
        instruction = parse_instruction(program[offset:offset + 3])
        yield offset, instruction
        offset += len(instruction)
        if instruction.opcode is Opcode.TERMINATE:
            break
    for byte in program[offset:]:
        cell = DataByte(byte)
        yield offset, cell
        offset += len(cell)


def disassemble(program: Sequence[int]) -> Iterator[str]:
    """Yield the assembler listing of ``program`` line by line.

    Raises InstructionError when undecodable code is reached.
    """
    yield f"process size {get_process_size(program)}"
    for offset, cell in _cells(program):
        yield f"{offset:5}: {format_instruction(cell)}"


def disassemble_for_debug(program: Sequence[int]) -> Iterator[str]:
    """Yield the debug listing of ``program`` line by line.

    Raises InstructionError when undecodable code is reached.
    """
    yield f"Program size: {len(program)}"
    yield f"Process size: {get_process_size(program)}"
    for offset, cell in _cells(program):
        yield f"{offset:5}: {format_instruction_debug(cell)}"


def _print_listing(lines: Iterator[str]) -> bool:
    try:
        for line in lines:
            print(line)
    except InstructionError as err:
        print(f"Disassembly stopped: {err}", file=sys.stderr)
        return False
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="disassemble",
        description="Disassemble a byte machine program image.",
    )
    parser.add_argument(
        "program",
        nargs="?",
        help="binary program file (default: the built-in primes program)",
    )
    args = parser.parse_args(argv)

    if args.program is None:
        program = PRIMES_PROGRAM
    else:
        try:
            with open(args.program, "rb") as source:
                program = source.read()
        except OSError as err:
            print(f"Failed to read from file {args.program}: ({err})", file=sys.stderr)
            return 1

    print("FOR DEBUG")
    debug_ok = _print_listing(disassemble_for_debug(program))
    print()
    print("FOR ASSEMBLING")
    listing_ok = _print_listing(disassemble(program))
    return 0 if debug_ok and listing_ok else 1