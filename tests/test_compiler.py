from calcmachine.analyzer import analyze_program
from calcmachine.compiler import (
    format_literal,
    translate_to_rust_expr,
    translate_to_rust_program,
)
from calcmachine.parser import parse_program
from calcmachine.symbol_table import SymbolTable


def _analyze(source):
    statements, rest = parse_program(source)
    assert rest.strip() == ""
    table = SymbolTable()
    return table, analyze_program(table, statements)


def test_format_literal_fraction():
    assert format_literal(2.5) == "2.5f64"


def test_format_literal_whole_number_has_no_fraction():
    assert format_literal(3.0) == "3f64"


def test_format_literal_never_uses_exponent():
    text = format_literal(1e20)
    assert "e" not in text[:-3]
    assert float(text[:-3]) == 1e20


def test_program_frame():
    table, program = _analyze("")
    result = translate_to_rust_program(table, program)
    assert result.startswith("use std::io::Write;\n")
    assert result.endswith("fn main() {\n}\n")
    assert "text.trim().parse::<f64>().unwrap_or(0.)\n" in result


def test_statements_translation():
    table, program = _analyze("@a >a <a * 2 a := 0.5")
    result = translate_to_rust_program(table, program)
    assert "    let mut _a = 0.0;\n" in result
    assert "    _a = input();\n" in result
    assert '    println!("{}", _a * 2f64);\n' in result
    assert "    _a = 0.5f64;\n" in result


def test_statement_order_is_kept():
    table, program = _analyze("@a @b <b <a")
    result = translate_to_rust_program(table, program)
    assert result.index("let mut _a") < result.index("let mut _b")
    assert result.index('println!("{}", _b)') < result.index('println!("{}", _a)')


def test_expression_with_subexpression():
    table, program = _analyze("@a <(a + 1) / 4 - a")
    assert translate_to_rust_expr(table, program[1].expr) == "(_a + 1f64) / 4f64 - _a"