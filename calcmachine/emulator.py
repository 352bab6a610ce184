"""Emulator that decodes and runs byte machine code straight from memory."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TextIO

from calcmachine.instructions import (
    DataByte,
    Instruction,
    InstructionError,
    Opcode,
    get_process_size,
    parse_instruction,
)

_WORD_MASK = 0xFFFF


@dataclass
class RegisterSet:
    """The machine registers: instruction pointer and accumulator."""

    ip: int = 2
    acc: int = 0


class _Memory(Protocol):
    def get_byte(self, address: int) -> int: ...

    def set_byte(self, address: int, value: int) -> None: ...

    def get_word(self, address: int) -> int: ...

    def set_word(self, address: int, value: int) -> None: ...

    def fill(self, address: int, length: int, data: bytes) -> None: ...

    def text(self, address: int, length: int) -> str: ...


class _ByteMemory:
    """Process memory held as raw bytes."""

    def __init__(self, process: bytearray) -> None:
        self.process = process

    def _check(self, address: int, length: int) -> None:
        if address + length > len(self.process):
            raise IndexError(
                f"memory access {address}..{address + length} out of range"
            )

    def get_byte(self, address: int) -> int:
        return self.process[address]

    def set_byte(self, address: int, value: int) -> None:
        self.process[address] = value & 0xFF

    def get_word(self, address: int) -> int:
        self._check(address, 2)
        return int.from_bytes(self.process[address:address + 2], "little")

    def set_word(self, address: int, value: int) -> None:
        self._check(address, 2)
        self.process[address:address + 2] = (value & _WORD_MASK).to_bytes(2, "little")

    def fill(self, address: int, length: int, data: bytes) -> None:
        self._check(address, length)
        chunk = data[:length]
        self.process[address:address + length] = chunk + bytes(length - len(chunk))

    def text(self, address: int, length: int) -> str:
        self._check(address, length)
        return "".join(
            " " if byte == 0 else chr(byte)
            for byte in self.process[address:address + length]
        )


def _signed(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


_ARITHMETIC: dict[Opcode, Callable[[int, int], int]] = {
    Opcode.ADD: lambda a, b: a + b,
    Opcode.SUBTRACT: lambda a, b: a - b,
    Opcode.MULTIPLY: lambda a, b: a * b,
    Opcode.DIVIDE: lambda a, b: a // b,
    Opcode.REMAINDER: lambda a, b: a % b,
}

_JUMPS: dict[Opcode, Callable[[int], bool]] = {
    Opcode.JUMP: lambda acc: True,
    Opcode.JUMP_IF_ZERO: lambda acc: acc == 0,
    Opcode.JUMP_IF_NONZERO: lambda acc: acc != 0,
    Opcode.JUMP_IF_POSITIVE: lambda acc: _signed(acc) > 0,
    Opcode.JUMP_IF_NEGATIVE: lambda acc: _signed(acc) < 0,
    Opcode.JUMP_IF_NONPOSITIVE: lambda acc: _signed(acc) <= 0,
    Opcode.JUMP_IF_NONNEGATIVE: lambda acc: _signed(acc) >= 0,
}


def _step(
    memory: _Memory,
    registers: RegisterSet,
    instruction: Instruction | DataByte,
    stdin: TextIO,
    stdout: TextIO,
) -> int | None:
    """Execute one instruction against ``memory``; return the exit code on terminate."""
    if isinstance(instruction, DataByte):
        registers.ip += 1
        return None

    opcode, operand = instruction.opcode, instruction.operand
    next_ip = registers.ip + len(instruction)

    if opcode in _JUMPS:
        registers.ip = operand if _JUMPS[opcode](registers.acc) else next_ip
        return None
    if opcode in _ARITHMETIC:
        value = memory.get_word(operand)
        registers.acc = _ARITHMETIC[opcode](registers.acc, value) & _WORD_MASK
        registers.ip = next_ip
        return None

    match opcode:
        case Opcode.TERMINATE:
            registers.ip = next_ip
            return operand
        case Opcode.SET:
            registers.acc = operand
        case Opcode.LOAD:
            registers.acc = memory.get_word(operand)
        case Opcode.STORE:
            memory.set_word(operand, registers.acc)
        case Opcode.INDIRECT_LOAD:
            registers.acc = memory.get_word(memory.get_word(operand))
        case Opcode.INDIRECT_STORE:
            memory.set_word(memory.get_word(operand), registers.acc)
        case Opcode.INPUT:
            memory.fill(registers.acc, operand, stdin.readline().encode("utf-8"))
        case Opcode.OUTPUT:
            stdout.write(memory.text(registers.acc, operand))
        case Opcode.LOAD_BYTE:
            registers.acc = memory.get_byte(operand)
        case Opcode.STORE_BYTE:
            memory.set_byte(operand, registers.acc)
        case Opcode.INDIRECT_LOAD_BYTE:
            registers.acc = memory.get_byte(memory.get_word(operand))
        case Opcode.INDIRECT_STORE_BYTE:
            memory.set_byte(memory.get_word(operand), registers.acc)
    registers.ip = next_ip
    return None


def execute_instruction(
    process: bytearray,
    registers: RegisterSet,
    instruction: Instruction | DataByte,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int | None:
    """Execute one instruction on raw process memory.

    Returns the exit code if the instruction terminates the program.
    """
    return _step(
        _ByteMemory(process),
        registers,
        instruction,
        stdin if stdin is not None else sys.stdin,
        stdout if stdout is not None else sys.stdout,
    )


def execute_program(
    program: Sequence[int],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Load ``program`` into a fresh process and run it; return its exit code."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    process_size = get_process_size(program)
    if len(program) > process_size:
        raise InstructionError(
            f"program of {len(program)} bytes exceeds process size {process_size}"
        )
    process = bytearray(process_size)
    process[:len(program)] = bytes(program)
    memory = _ByteMemory(process)
    registers = RegisterSet()
    while True:
        instruction = parse_instruction(process[registers.ip:registers.ip + 3])
        return_code = _step(memory, registers, instruction, stdin, stdout)
        if return_code is not None:
            return return_code