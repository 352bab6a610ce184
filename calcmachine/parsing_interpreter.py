"""Interpreter that decodes a program once and then runs the decoded cells."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from calcmachine.emulator import RegisterSet, _step
from calcmachine.instructions import (
    DataByte,
    Instruction,
    Opcode,
    get_process_size,
    parse_instruction,
)

Cell = Instruction | DataByte


class _ParsedMemory:
    """Process memory as a list of decoded cells.

    Reads of cells holding instructions yield 0; writes replace cells with data.
    """

    def __init__(self, cells: list[Cell]) -> None:
        self.cells = cells

    def _check(self, address: int, length: int) -> None:
        if address + length > len(self.cells):
            raise IndexError(
                f"memory access {address}..{address + length} out of range"
            )

    def get_byte(self, address: int) -> int:
        cell = self.cells[address]
        return cell.value if isinstance(cell, DataByte) else 0

    def set_byte(self, address: int, value: int) -> None:
        self.cells[address] = DataByte(value & 0xFF)

    def get_word(self, address: int) -> int:
        self._check(address, 2)
        low, high = self.cells[address], self.cells[address + 1]
        if isinstance(low, DataByte) and isinstance(high, DataByte):
            return low.value | (high.value << 8)
        return 0

    def set_word(self, address: int, value: int) -> None:
        self._check(address, 2)
        self.cells[address] = DataByte(value & 0xFF)
        self.cells[address + 1] = DataByte((value >> 8) & 0xFF)

    def fill(self, address: int, length: int, data: bytes) -> None:
        self._check(address, length)
        chunk = data[:length]
        padded = chunk + bytes(length - len(chunk))
        self.cells[address:address + length] = [DataByte(byte) for byte in padded]

    def text(self, address: int, length: int) -> str:
        self._check(address, length)
        return "".join(
            " " if cell.value == 0 else chr(cell.value)
            for cell in self.cells[address:address + length]
            if isinstance(cell, DataByte)
        )


def parse_program(program: Sequence[int]) -> list[Cell]:
    """Decode ``program`` into a process image of cells.

    Code is decoded from address 2 up to and including the first terminate
    instruction; the bytes after it become data cells. Operand bytes and
    unused memory are zero data cells.
    """
    process_size = get_process_size(program)
    cells: list[Cell] = [DataByte(0)] * process_size
    ip = 2
    while True:
        instruction = parse_instruction(program[ip:ip + 3])
        cells[ip] = instruction
        ip += len(instruction)
        if instruction.opcode is Opcode.TERMINATE:
            break
    for address in range(ip, len(program)):
        cells[address] = DataByte(program[address])
    return cells


def execute_parsed_program(
    parsed_program: list[Cell],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run a decoded process image in place and return its exit code."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    memory = _ParsedMemory(parsed_program)
    registers = RegisterSet()
    while True:
        instruction = parsed_program[registers.ip]
        return_code = _step(memory, registers, instruction, stdin, stdout)
        if return_code is not None:
            return return_code