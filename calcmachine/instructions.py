"""Instruction set of the byte machine and its binary decoding.

A program image starts with a little-endian word giving the process size,
followed by code. Every instruction is an opcode byte followed by either a
one-byte operand or a little-endian word operand.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum


class InstructionError(Exception):
    """Raised when bytes cannot be decoded as a byte machine instruction."""


class Opcode(IntEnum):
    TERMINATE = 0x00
    SET = 0x01
    LOAD = 0x02
    STORE = 0x03
    INDIRECT_LOAD = 0x04
    INDIRECT_STORE = 0x05
    INPUT = 0x06
    OUTPUT = 0x07
    ADD = 0x08
    SUBTRACT = 0x09
    MULTIPLY = 0x0A
    DIVIDE = 0x0B
    REMAINDER = 0x0C
    JUMP = 0x0D
    JUMP_IF_ZERO = 0x0E
    JUMP_IF_NONZERO = 0x0F
    JUMP_IF_POSITIVE = 0x10
    JUMP_IF_NEGATIVE = 0x11
    JUMP_IF_NONPOSITIVE = 0x12
    JUMP_IF_NONNEGATIVE = 0x13
    LOAD_BYTE = 0x14
    STORE_BYTE = 0x15
    INDIRECT_LOAD_BYTE = 0x16
    INDIRECT_STORE_BYTE = 0x17

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode."""
        return 1 if self in _BYTE_OPERAND else 2


_BYTE_OPERAND = frozenset({Opcode.TERMINATE, Opcode.INPUT, Opcode.OUTPUT})


@dataclass(frozen=True)
class Instruction:
    """An executable instruction: an opcode and its operand."""

    opcode: Opcode
    operand: int

    def __post_init__(self) -> None:
        try:
            opcode = Opcode(self.opcode)
        except ValueError:
            raise InstructionError(f"unknown opcode {self.opcode!r}") from None
        object.__setattr__(self, "opcode", opcode)
        limit = 1 << (8 * opcode.operand_size)
        if not 0 <= self.operand < limit:
            raise InstructionError(
                f"operand {self.operand} out of range for {opcode.name}"
            )

    def __len__(self) -> int:
        return 1 + self.opcode.operand_size

    def to_bytes(self) -> bytes:
        """Encode the instruction as it appears in a program image."""
        return bytes([self.opcode]) + self.operand.to_bytes(
            self.opcode.operand_size, "little"
        )


@dataclass(frozen=True)
class DataByte:
    """A memory cell holding plain data rather than an instruction."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= 0xFF:
            raise InstructionError(f"byte value {self.value} out of range")

    def __len__(self) -> int:
        return 1


def get_process_size(program: Sequence[int]) -> int:
    """Return the process size stored in the first word of ``program``."""
    if len(program) < 2:
        raise InstructionError("program too short to hold its process size")
    return program[0] | (program[1] << 8)


def parse_instruction(data: Sequence[int]) -> Instruction:
    """Decode the instruction at the start of ``data``."""
    if not len(data):
        raise InstructionError("no instruction: end of input")
    try:
        opcode = Opcode(data[0])
    except ValueError:
        raise InstructionError(f"unknown opcode {data[0]}") from None
    size = opcode.operand_size
    if len(data) < 1 + size:
        raise InstructionError(f"truncated {opcode.name} instruction")
    operand = int.from_bytes(bytes(data[1:1 + size]), "little")
    return Instruction(opcode, operand)