[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "calcmachine"
version = "0.1.0"
description = "A tiny calculator language (parser, analyzer, interpreter and Rust code generator) plus toy byte and word machines with an emulator, a decoding interpreter, a disassembler and a C code generator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "interpreter",
    "compiler",
    "parser",
    "virtual machine",
    "emulator",
    "disassembler",
    "bytecode",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Disassemblers",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
calc = "calcmachine.calc_cli:main"
byte-machine-primes = "calcmachine.primes:main"
byte-disassemble = "calcmachine.disassembler:main"
word-machine = "calcmachine.word_machine:main"

[tool.hatch.build.targets.wheel]
packages = ["calcmachine"]

[tool.pytest.ini_options]
addopts = "-ra"
