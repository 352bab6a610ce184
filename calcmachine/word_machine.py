"""A word-addressed machine whose memory cells are unsigned 16-bit words.

A program image starts with a word giving the process size. Execution
starts at address 1. Every instruction is two words, an opcode and an
operand, and instructions with unknown opcodes do nothing.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from enum import IntEnum
from typing import TextIO

_WORD_MASK = 0xFFFF


class _Op(IntEnum):
    TERMINATE = 0
    SET = 1
    LOAD = 2
    STORE = 3
    INDIRECT_LOAD = 4
    INDIRECT_STORE = 5
    INPUT = 6
    OUTPUT = 7
    ADD = 8
    SUBTRACT = 9
    MULTIPLY = 10
    DIVIDE = 11
    REMAINDER = 12
    JUMP = 13
    JUMP_IF_ZERO = 14
    JUMP_IF_NONZERO = 15
    JUMP_IF_POSITIVE = 16
    JUMP_IF_NEGATIVE = 17
    JUMP_IF_NONPOSITIVE = 18
    JUMP_IF_NONNEGATIVE = 19


# Prints the number stored at address 33, right-aligned in five columns.
CONVERT_PROGRAM: tuple[int, ...] = (
    43, 1, 39, 3, 39, 2, 39, 9, 42, 3, 39, 2, 33, 12, 40, 8, 41, 5, 39, 2, 33,
    11, 40, 3, 33, 15, 5, 1, 34, 7, 5, 0, 0, 6710, 0, 0, 0, 0, 0, 0, 10, 48, 1,
)

# Reads a limit from standard input and prints the primes below it.
SIEVE_PROGRAM: tuple[int, ...] = (
    600,
    1, 190,  # 1: set digits
    6, 5,  # 3: input 5
    1, 190,  # 5: set digits
    3, 195,  # 7: store pos
    4, 195,  # 9: before_parsing_number: indirect_load pos
    9, 197,  # 11: subtract ascii_zero
    17, 49,  # 13: jump_if_negative after_parsing_number
    4, 195,  # 15: indirect_load pos
    9, 197,  # 17: subtract ascii_zero
    9, 196,  # 19: subtract number_base
    19, 49,  # 21: jump_if_nonnegative after_parsing_number
    2, 187,  # 23: load limit
    10, 196,  # 25: multiply number_base
    3, 187,  # 27: store limit
    4, 195,  # 29: indirect_load pos
    9, 197,  # 31: subtract ascii_zero
    8, 187,  # 33: add limit
    3, 187,  # 35: store limit
    2, 195,  # 37: load pos
    8, 198,  # 39: add one
    3, 195,  # 41: store pos
    1, 195,  # 43: set pos
    9, 195,  # 45: subtract pos
    15, 9,  # 47: jump_if_nonzero before_parsing_number
    2, 199,  # 49: after_parsing_number: load two
    3, 188,  # 51: store i
    2, 188,  # 53: before_computing_primes: load i
    9, 187,  # 55: subtract limit
    19, 105,  # 57: jump_if_nonnegative after_computing_primes
    1, 200,  # 59: set primes
    8, 188,  # 61: add i
    3, 195,  # 63: store pos
    4, 195,  # 65: indirect_load pos
    15, 97,  # 67: jump_if_nonzero after_setting_multiples
    2, 188,  # 69: load i
    8, 188,  # 71: add i
    3, 189,  # 73: store j
    9, 187,  # 75: before_setting_multiples: subtract limit
    19, 97,  # 77: jump_if_nonnegative after_setting_multiples
    1, 200,  # 79: set primes
    8, 189,  # 81: add j
    3, 195,  # 83: store pos
    2, 198,  # 85: load one
    5, 195,  # 87: indirect_store pos
    2, 189,  # 89: load j
    8, 188,  # 91: add i
    3, 189,  # 93: store j
    13, 75,  # 95: jump before_setting_multiples
    2, 188,  # 97: after_setting_multiples: load i
    8, 198,  # 99: add one
    3, 188,  # 101: store i
    13, 53,  # 103: jump before_computing_primes
    2, 199,  # 105: after_computing_primes: load two
    3, 188,  # 107: store i
    2, 188,  # 109: before_printing_primes: load i
    9, 187,  # 111: subtract limit
    19, 185,  # 113: jump_if_nonnegative after_printing_all_primes
    1, 200,  # 115: set primes
    8, 188,  # 117: add i
    3, 195,  # 119: store pos
    4, 195,  # 121: indirect_load pos
    15, 177,  # 123: jump_if_nonzero after_printing_a_prime
    2, 188,  # 125: load i
    3, 189,  # 127: store j
    1, 195,  # 129: set pos
    3, 195,  # 131: store pos
    2, 195,  # 133: before_generating_digits: load pos
    9, 198,  # 135: subtract one
    3, 195,  # 137: store pos
    2, 189,  # 139: load j
    12, 196,  # 141: remainder number_base
    8, 197,  # 143: add ascii_zero
    5, 195,  # 145: indirect_store pos
    2, 189,  # 147: load j
    11, 196,  # 149: divide number_base
    3, 189,  # 151: store j
    15, 133,  # 153: jump_if_nonzero before_generating_digits
    1, 190,  # 155: before_clearing_spaces: set digits
    9, 195,  # 157: subtract pos
    14, 173,  # 159: jump_if_zero after_clearing_spaces
    2, 195,  # 161: load pos
    9, 198,  # 163: subtract one
    3, 195,  # 165: store pos
    1, 32,  # 167: set 32 (blank)
    5, 195,  # 169: indirect_store pos
    13, 155,  # 171: jump before_clearing_spaces
    1, 190,  # 173: after_clearing_spaces: set digits
    7, 5,  # 175: output 5
    2, 188,  # 177: after_printing_a_prime: load i
    8, 198,  # 179: add one
    3, 188,  # 181: store i
    13, 109,  # 183: jump before_printing_primes
    0, 0,  # 185: after_printing_all_primes: terminate 0
    0,  # 187: limit
    0,  # 188: i
    0,  # 189: j
    0, 0, 0, 0, 0,  # 190: digits
    0,  # 195: pos
    10,  # 196: number_base
    48,  # 197: ascii_zero
    1,  # 198: one
    2,  # 199: two
    # 200: primes, up to the end of the process
)

PROGRAMS = {"convert": CONVERT_PROGRAM, "sieve": SIEVE_PROGRAM}


def _signed(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


def _check_range(process: list[int], address: int, length: int) -> None:
    if address + length > len(process):
        raise IndexError(f"memory access {address}..{address + length} out of range")


def _divisor(value: int) -> int:
    if value == 0:
        raise ZeroDivisionError("division of the accumulator by zero")
    return value


def execute(
    program: Sequence[int],
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Load ``program`` into a fresh process, run it and return its exit code."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    if not program:
        raise ValueError("empty program: no process size")
    process_size = program[0]
    if len(program) > process_size:
        raise ValueError(
            f"program of {len(program)} words exceeds process size {process_size}"
        )
    process = [word & _WORD_MASK for word in program]
    process.extend([0] * (process_size - len(program)))

    acc = 0
    ip = 1
    while True:
        opcode, operand = process[ip], process[ip + 1]
        ip += 2
        match opcode:
            case _Op.TERMINATE:
                return operand
            case _Op.SET:
                acc = operand
            case _Op.LOAD:
                acc = process[operand]
            case _Op.STORE:
                process[operand] = acc
            case _Op.INDIRECT_LOAD:
                acc = process[process[operand]]
            case _Op.INDIRECT_STORE:
                process[process[operand]] = acc
            case _Op.INPUT:
                _check_range(process, acc, operand)
                data = stdin.readline().encode("utf-8")[:operand]
                process[acc:acc + operand] = [*data, *[0] * (operand - len(data))]
            case _Op.OUTPUT:
                _check_range(process, acc, operand)
                stdout.write("".join(
                    " " if word == 0 else chr(word & 0xFF)
                    for word in process[acc:acc + operand]
                ))
            case _Op.ADD:
                acc = (acc + process[operand]) & _WORD_MASK
            case _Op.SUBTRACT:
                acc = (acc - process[operand]) & _WORD_MASK
            case _Op.MULTIPLY:
                acc = (acc * process[operand]) & _WORD_MASK
            case _Op.DIVIDE:
                acc //= _divisor(process[operand])
            case _Op.REMAINDER:
                acc %= _divisor(process[operand])
            case _Op.JUMP:
                ip = operand
            case _Op.JUMP_IF_ZERO:
                if acc == 0:
                    ip = operand
            case _Op.JUMP_IF_NONZERO:
                if acc != 0:
                    ip = operand
            case _Op.JUMP_IF_POSITIVE:
                if _signed(acc) > 0:
                    ip = operand
            case _Op.JUMP_IF_NEGATIVE:
                if _signed(acc) < 0:
                    ip = operand
            case _Op.JUMP_IF_NONPOSITIVE:
                if _signed(acc) <= 0:
                    ip = operand
            case _Op.JUMP_IF_NONNEGATIVE:
                if _signed(acc) >= 0:
                    ip = operand


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="word-machine",
        description="Run a built-in word machine program.",
    )
    parser.add_argument(
        "program",
        nargs="?",
        choices=sorted(PROGRAMS),
        default="sieve",
        help="program to run (default: sieve)",
    )
    args = parser.parse_args(argv)
    return execute(PROGRAMS[args.program])