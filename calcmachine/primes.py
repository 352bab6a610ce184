"""Demo: a byte machine program printing the primes below a number typed in.

The program is translated to C, then run by the emulator and by the
parsing interpreter in turn.
"""

from __future__ import annotations

import argparse
import sys

from calcmachine import emulator, parsing_interpreter
from calcmachine.translator import write_c_program

PRIMES_PROGRAM = bytes([
    187, 2,
    1, 28, 1,  # 2: set digits
    6, 5,  # 5: input 5
    1, 28, 1,  # 7: set digits
    3, 33, 1,  # 10: store pos
    22, 33, 1,  # 13: before_parsing_number: indirect_load_byte pos
    9, 37, 1,  # 16: subtract ascii_zero
    17, 73, 0,  # 19: jump_if_negative after_parsing_number
    22, 33, 1,  # 22: indirect_load_byte pos
    9, 37, 1,  # 25: subtract ascii_zero
    9, 35, 1,  # 28: subtract number_base
    19, 73, 0,  # 31: jump_if_nonnegative after_parsing_number
    2, 22, 1,  # 34: load limit
    10, 35, 1,  # 37: multiply number_base
    3, 22, 1,  # 40: store limit
    22, 33, 1,  # 43: indirect_load_byte pos
    9, 37, 1,  # 46: subtract ascii_zero
    8, 22, 1,  # 49: add limit
    3, 22, 1,  # 52: store limit
    2, 33, 1,  # 55: load pos
    8, 39, 1,  # 58: add one
    3, 33, 1,  # 61: store pos
    1, 33, 1,  # 64: set pos
    9, 33, 1,  # 67: subtract pos
    15, 13, 0,  # 70: jump_if_nonzero before_parsing_number
    2, 41, 1,  # 73: after_parsing_number: load two
    3, 24, 1,  # 76: store i
    2, 24, 1,  # 79: before_computing_primes: load i
    9, 22, 1,  # 82: subtract limit
    19, 157, 0,  # 85: jump_if_nonnegative after_computing_primes
    1, 43, 1,  # 88: set primes
    8, 24, 1,  # 91: add i
    3, 33, 1,  # 94: store pos
    22, 33, 1,  # 97: indirect_load_byte pos
    15, 145, 0,  # 100: jump_if_nonzero after_setting_multiples
    2, 24, 1,  # 103: load i
    8, 24, 1,  # 106: add i
    3, 26, 1,  # 109: store j
    9, 22, 1,  # 112: before_setting_multiples: subtract limit
    19, 145, 0,  # 115: jump_if_nonnegative after_setting_multiples
    1, 43, 1,  # 118: set primes
    8, 26, 1,  # 121: add j
    3, 33, 1,  # 124: store pos
    2, 39, 1,  # 127: load one
    23, 33, 1,  # 130: indirect_store_byte pos
    2, 26, 1,  # 133: load j
    8, 24, 1,  # 136: add i
    3, 26, 1,  # 139: store j
    13, 112, 0,  # 142: jump before_setting_multiples
    2, 24, 1,  # 145: after_setting_multiples: load i
    8, 39, 1,  # 148: add one
    3, 24, 1,  # 151: store i
    13, 79, 0,  # 154: jump before_computing_primes
    2, 41, 1,  # 157: after_computing_primes: load two
    3, 24, 1,  # 160: store i
    2, 24, 1,  # 163: before_printing_primes: load i
    9, 22, 1,  # 166: subtract limit
    19, 20, 1,  # 169: jump_if_nonnegative after_printing_all_primes
    1, 43, 1,  # 172: set primes
    8, 24, 1,  # 175: add i
    3, 33, 1,  # 178: store pos
    22, 33, 1,  # 181: indirect_load_byte pos
    15, 8, 1,  # 184: jump_if_nonzero after_printing_a_prime
    2, 24, 1,  # 187: load i
    3, 26, 1,  # 190: store j
    1, 33, 1,  # 193: set pos
    3, 33, 1,  # 196: store pos
    2, 33, 1,  # 199: before_generating_digits: load pos
    9, 39, 1,  # 202: subtract one
    3, 33, 1,  # 205: store pos
    2, 26, 1,  # 208: load j
    12, 35, 1,  # 211: remainder number_base
    8, 37, 1,  # 214: add ascii_zero
    23, 33, 1,  # 217: indirect_store_byte pos
    2, 26, 1,  # 220: load j
    11, 35, 1,  # 223: divide number_base
    3, 26, 1,  # 226: store j
    15, 199, 0,  # 229: jump_if_nonzero before_generating_digits
    1, 28, 1,  # 232: before_clearing_spaces: set digits
    9, 33, 1,  # 235: subtract pos
    14, 3, 1,  # 238: jump_if_zero after_clearing_spaces
    2, 33, 1,  # 241: load pos
    9, 39, 1,  # 244: subtract one
    3, 33, 1,  # 247: store pos
    1, 32, 0,  # 250: set 32 (blank)
    23, 33, 1,  # 253: indirect_store_byte pos
    13, 232, 0,  # 256: jump before_clearing_spaces
    1, 28, 1,  # 259: after_clearing_spaces: set digits
    7, 5,  # 262: output 5
    2, 24, 1,  # 264: after_printing_a_prime: load i
    8, 39, 1,  # 267: add one
    3, 24, 1,  # 270: store i
    13, 163, 0,  # 273: jump before_printing_primes
    0, 0,  # 276: after_printing_all_primes: terminate 0
    0, 0,  # 278: limit
    0, 0,  # 280: i
    0, 0,  # 282: j
    0, 0, 0, 0, 0,  # 284: digits
    0, 0,  # 289: pos
    10, 0,  # 291: number_base
    48, 0,  # 293: ascii_zero
    1, 0,  # 295: one
    2, 0,  # 297: two
    # 299: primes, 400 bytes up to the end of the process
])


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="primes",
        description="Print the primes below a number read from standard input.",
    )
    parser.add_argument(
        "--c-output",
        default="prog.c",
        help="path of the C translation to write (default: prog.c)",
    )
    args = parser.parse_args(argv)

    try:
        write_c_program(PRIMES_PROGRAM, args.c_output)
    except OSError as err:
        print(f"Failed to write to file {args.c_output}: ({err})", file=sys.stderr)

    return_code = emulator.execute_program(PRIMES_PROGRAM)
    print(f"\nReturn code: {return_code}")

    parsed_program = parsing_interpreter.parse_program(PRIMES_PROGRAM)
    return_code = parsing_interpreter.execute_parsed_program(parsed_program)
    print(f"\nReturn code: {return_code}")
    return 0