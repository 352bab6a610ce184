"""Generation of C source code from byte machine programs."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence

from calcmachine.instructions import (
    Instruction,
    InstructionError,
    Opcode,
    parse_instruction,
)

_HEADER = (
    "#include <stdio.h>",
    "#include <string.h>",
    "unsigned char memory[];",
    "unsigned short bytes_to_u16_le(unsigned int address) {",
    "    return (unsigned short)(memory[address] + (memory[address + 1] << 8));",
    "}",
    "void u16_to_bytes_le(unsigned int address, unsigned short operand) {",
    "    memory[address] = operand & 0xFF;",
    "    memory[address + 1] = operand >> 8;",
    "}",
    "int main() {",
    "    unsigned short acc = 0;",
)

_STATEMENTS: dict[Opcode, str] = {
    Opcode.TERMINATE: "return {0};",
    Opcode.SET: "acc = {0};",
    Opcode.LOAD: "acc = bytes_to_u16_le({0});",
    Opcode.STORE: "u16_to_bytes_le({0}, acc);",
    Opcode.INDIRECT_LOAD: "acc = bytes_to_u16_le(bytes_to_u16_le({0}));",
    Opcode.INDIRECT_STORE: "u16_to_bytes_le(bytes_to_u16_le({0}), acc);",
    Opcode.OUTPUT: (
        "for (int i = 0; i < {0}; i++) "
        "{{ putchar(memory[acc + i] ? memory[acc + i] : ' '); }}"
    ),
    Opcode.ADD: "acc += bytes_to_u16_le({0});",
    Opcode.SUBTRACT: "acc -= bytes_to_u16_le({0});",
    Opcode.MULTIPLY: "acc *= bytes_to_u16_le({0});",
    Opcode.DIVIDE: "acc /= bytes_to_u16_le({0});",
    Opcode.REMAINDER: "acc %= bytes_to_u16_le({0});",
    Opcode.JUMP: "goto addr_{0};",
    Opcode.JUMP_IF_ZERO: "if (!acc) goto addr_{0};",
    Opcode.JUMP_IF_NONZERO: "if (acc) goto addr_{0};",
    Opcode.JUMP_IF_POSITIVE: "if ((short)acc > 0) goto addr_{0};",
    Opcode.JUMP_IF_NEGATIVE: "if ((short)acc < 0) goto addr_{0};",
    Opcode.JUMP_IF_NONPOSITIVE: "if ((short)acc <= 0) goto addr_{0};",
    Opcode.JUMP_IF_NONNEGATIVE: "if ((short)acc >= 0) goto addr_{0};",
    Opcode.LOAD_BYTE: "acc = memory[{0}];",
    Opcode.STORE_BYTE: "memory[{0}] = acc & 0xFF;",
    Opcode.INDIRECT_LOAD_BYTE: "acc = memory[bytes_to_u16_le({0})];",
    Opcode.INDIRECT_STORE_BYTE: "memory[bytes_to_u16_le({0})] = acc & 0xFF;",
}


def _translate_instruction(instruction: Instruction, ip: int) -> Iterator[str]:
    length = instruction.operand
    if instruction.opcode is Opcode.INPUT:
        yield f"    addr_{ip}: {{"
        yield f"        char buf[{length + 1}];"
        yield "        int len;"
        yield f'        scanf("%{length}s", buf);'
        yield "        len = strlen(buf);"
        yield "        memcpy(memory + acc, buf, len);"
        yield f"        memset(memory + acc + len, ' ', {length} - len);"
        yield "    }"
    else:
        statement = _STATEMENTS[instruction.opcode].format(instruction.operand)
        yield f"    addr_{ip}: {statement}"


def _translate_code(program: Sequence[int]) -> Iterator[str]:
    ip = 2
    while True:
        try:
            instruction = parse_instruction(program[ip:ip + 3])
        except InstructionError as err:
            raise InstructionError("Invalid instruction.") from err
        yield from _translate_instruction(instruction, ip)
        ip += len(instruction)
        if instruction.opcode is Opcode.TERMINATE:
            return


def translate_program_to_c(program: Sequence[int]) -> str:
    """Return C source that behaves like ``program``.

    Code is emitted for the instructions from address 2 up to the first
    terminate instruction; the whole image then becomes the initial contents
    of ``memory``. Raises InstructionError if an invalid instruction is met.
    """
    lines = [*_HEADER, *_translate_code(program), "}", "unsigned char memory[] = {"]
    lines.extend(f"    {byte}, " for byte in program)
    lines.append("};")
    return "\n".join(lines) + "\n"


def write_c_program(program: Sequence[int], target_path) -> None:
    """Write the C form of ``program`` to ``target_path``."""
    text = translate_program_to_c(program)
    with open(target_path, "w", encoding="utf-8") as target:
        target.write(text)
    print(f"Compiled to {target_path}.", file=sys.stderr)