"""Calc language parser, analyzer, interpreter and Rust generator, plus toy byte and word machines."""

__version__ = "0.1.0"