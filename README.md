# calcmachine

Two small language toolchains in one package.

**Calc** is a tiny calculator language with declarations, input, output and
assignment of floating-point variables:

```
@a
@b
>a
b := a * (a + 1) / 2
<b
```

- `@name` declares a variable (initialised to 0)
- `>name` reads a number from standard input into a variable; input that is
  not a number counts as 0
- `<expr` prints the value of an expression
- `name := expr` assigns an expression to a variable

Identifiers are made of letters only. Expressions support `+`, `-`, `*`, `/`,
parentheses, numeric literals and declared identifiers. Using a variable
before declaring it, or declaring it twice, is an error
(`calcmachine.symbol_table.SymbolError`).

**Byte machine** and **word machine** are toy accumulator machines. A program
image starts with the size of the process memory, followed by instructions
and data. Byte-machine programs can be run directly from memory, run after
being decoded once, translated to C source, and disassembled.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

### calc

```
calc
```

Starts the interactive Calc interpreter. Prompts go to standard error. At the
`>` prompt type Calc statements; `v` lists the variables, `c` clears them and
`q` (or end of input) quits.

```
calc program.calc
```

Translates `program.calc` into a Rust source file `program.rs` next to it. The
file name must end with `.calc`; unreadable files, code that does not parse
completely and undeclared or redeclared variables are reported on standard
error with exit status 1.

```
calc --parse program.calc
calc --analyze program.calc
```

`--parse` prints the parsed program; `--analyze` prints the symbol table and
the analyzed program.

### byte-machine-primes

```
byte-machine-primes [--c-output PATH]
```

Uses the built-in byte-machine sieve program. It first writes its C
translation to `PATH` (default `prog.c`), then runs the program on the
emulator and again on the decoding interpreter. Each run reads a limit (up to
five digits) from standard input, prints the primes below it and then its
return code.

### byte-disassemble

```
byte-disassemble [PROGRAM]
```

Prints a debug listing and then an assembler listing of a binary program
file, or of the built-in sieve program when no file is given.

### word-machine

```
word-machine [sieve|convert]
```

Runs a built-in word-machine program: `sieve` (the default) reads a limit and
prints the primes below it; `convert` prints the number 6710 right-aligned in
five columns.

## Library use

The Calc pipeline:

- `calcmachine.parser.parse_program(text)` returns the parsed statements
  (`Declaration`, `InputOperation`, `OutputOperation`, `Assignment`) and the
  text left unparsed.
- `calcmachine.analyzer.analyze_program(variables, statements)` resolves
  identifiers against a `calcmachine.symbol_table.SymbolTable`.
- `calcmachine.executor.execute_program(variables, program, stdin, stdout, stderr)`
  runs an analyzed program; `evaluate_expr` evaluates one expression.
- `calcmachine.compiler.translate_to_rust_program(variables, program)` returns
  Rust source for it.
- `calcmachine.calc_cli` offers `parse_file`, `analyze_file`, `compile_file`
  and `run_interpreter`; file problems raise `CalcFileError`.

```python
import io

from calcmachine.analyzer import analyze_program
from calcmachine.executor import execute_program
from calcmachine.parser import parse_program
from calcmachine.symbol_table import SymbolTable

statements, rest = parse_program("@a a := 3 * (2 + 1) <a")
variables = SymbolTable()
program = analyze_program(variables, statements)
out = io.StringIO()
execute_program(variables, program, stdout=out)
assert out.getvalue() == "9\n"
```

The machines:

- `calcmachine.instructions` – `Opcode`, `Instruction`, `DataByte`,
  `parse_instruction`, `get_process_size`; decoding errors raise
  `InstructionError`
- `calcmachine.emulator` – `execute_program(program, stdin, stdout)` and
  `execute_instruction` over a `RegisterSet`
- `calcmachine.parsing_interpreter` – `parse_program` decodes a program once,
  `execute_parsed_program` runs the result
- `calcmachine.translator` – `translate_program_to_c` returns C source,
  `write_c_program` writes it to a file
- `calcmachine.disassembler` – `disassemble` and `disassemble_for_debug` yield
  listing lines; `format_instruction` and `format_instruction_debug` format one
  instruction
- `calcmachine.word_machine` – `execute(program, stdin, stdout)` for the
  16-bit word machine, with `SIEVE_PROGRAM` and `CONVERT_PROGRAM`

```python
from calcmachine.disassembler import disassemble
from calcmachine.emulator import execute_program
from calcmachine.primes import PRIMES_PROGRAM

assert execute_program(bytes([6, 0, 0, 7])) == 7  # terminate 7
assert next(disassemble(PRIMES_PROGRAM)) == "process size 699"
```

## What it does not do

The package writes Rust and C source but does not compile or run it. There is
no assembler: programs are given as byte or word sequences, and the
disassembler only produces listings.