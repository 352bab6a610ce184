import pytest

from calcmachine.symbol_table import SymbolError, SymbolTable


def test_insert_returns_consecutive_handles():
    table = SymbolTable()
    assert table.insert_symbol("a") == 0
    assert table.insert_symbol("b") == 1
    assert len(table) == 2


def test_new_symbols_start_at_zero():
    table = SymbolTable()
    handle = table.insert_symbol("x")
    assert table.get_value(handle) == 0.0
    assert list(table) == [("x", 0.0)]


def test_duplicate_declaration_raises():
    table = SymbolTable()
    table.insert_symbol("a")
    with pytest.raises(SymbolError) as info:
        table.insert_symbol("a")
    assert str(info.value) == "Error: Identifier 'a' declared several times."
    assert len(table) == 1


def test_find_symbol_returns_insert_handle():
    table = SymbolTable()
    first = table.insert_symbol("first")
    second = table.insert_symbol("second")
    assert table.find_symbol("second") == second
    assert table.find_symbol("first") == first


def test_find_undeclared_raises():
    table = SymbolTable()
    with pytest.raises(SymbolError) as info:
        table.find_symbol("zz")
    assert (
        str(info.value)
        == "Error: Identifier 'zz' used before having been declared."
    )


def test_set_and_get_value_round_trip():
    table = SymbolTable()
    handle = table.insert_symbol("v")
    table.set_value(handle, 2.5)
    assert table.get_value(handle) == 2.5
    assert list(table) == [("v", 2.5)]


def test_get_name():
    table = SymbolTable()
    table.insert_symbol("alpha")
    handle = table.insert_symbol("beta")
    assert table.get_name(handle) == "beta"


def test_iteration_keeps_declaration_order():
    table = SymbolTable()
    names = ["c", "a", "b"]
    for name in names:
        table.insert_symbol(name)
    assert [name for name, _ in table] == names


def test_bad_handle_raises_index_error():
    table = SymbolTable()
    with pytest.raises(IndexError):
        table.get_value(0)