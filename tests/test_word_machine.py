import io

import pytest

from calcmachine.word_machine import (
    CONVERT_PROGRAM,
    SIEVE_PROGRAM,
    execute,
    main,
)

PRIMES_BELOW_30 = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


def _run(program, text=""):
    out = io.StringIO()
    code = execute(program, io.StringIO(text), out)
    return code, out.getvalue()


def test_convert_program_prints_number():
    code, output = _run(CONVERT_PROGRAM)
    assert code == 0
    assert output == " 6710"


def test_sieve_prints_primes_below_limit():
    code, output = _run(SIEVE_PROGRAM, "30\n")
    assert code == 0
    assert output == "".join(f"{p:>5}" for p in PRIMES_BELOW_30)


def test_sieve_with_small_limit_prints_nothing():
    code, output = _run(SIEVE_PROGRAM, "2\n")
    assert code == 0
    assert output == ""


def test_sieve_output_lengths_are_multiples_of_five():
    _, output = _run(SIEVE_PROGRAM, "100\n")
    assert len(output) % 5 == 0
    numbers = [int(output[i:i + 5]) for i in range(0, len(output), 5)]
    assert numbers[: len(PRIMES_BELOW_30)] == PRIMES_BELOW_30
    assert all(n < 100 for n in numbers)


def test_terminate_returns_operand():
    assert _run([3, 0, 7]) == (7, "")


def test_unknown_opcode_is_ignored():
    assert _run([5, 99, 0, 0, 4]) == (4, "")


def _io_program(length):
    # set 11; input length; set 11; output length; terminate 0; buffer at 11
    return [11 + length, 1, 11, 6, length, 1, 11, 7, length, 0, 0]


def test_input_output_round_trip():
    code, output = _run(_io_program(3), "ab\n")
    assert code == 0
    assert output == "ab\n"


def test_input_is_zero_padded_and_zeros_print_as_spaces():
    _, output = _run(_io_program(4), "a\n")
    assert output == "a\n  "


def test_input_is_truncated_to_buffer():
    _, output = _run(_io_program(2), "hello\n")
    assert output == "he"


@pytest.mark.parametrize("jump_opcode, expected", [(17, 1), (19, 2), (14, 2), (15, 1)])
def test_conditional_jumps_after_wrapping_subtraction(jump_opcode, expected):
    # set 0; subtract [11] (=1) wraps to 0xFFFF; jump to 9 or fall to 7
    program = [12, 1, 0, 9, 11, jump_opcode, 9, 0, 2, 0, 1, 1]
    assert execute(program, io.StringIO(), io.StringIO()) == expected


def test_store_then_load_keeps_value():
    # set 5; store 12; set 0; load 12; jump_if_positive 11; terminate 2; terminate 1
    program = [13, 1, 5, 3, 12, 1, 0, 2, 12, 16, 13, 0, 2, 0, 1]
    program[0] = 16
    program[4] = 15
    program[8] = 15
    assert execute(program, io.StringIO(), io.StringIO()) == 1


def test_program_larger_than_process_is_rejected():
    with pytest.raises(ValueError):
        execute([2, 0, 0], io.StringIO(), io.StringIO())


def test_empty_program_is_rejected():
    with pytest.raises(ValueError):
        execute([], io.StringIO(), io.StringIO())


def test_division_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        execute([6, 1, 5, 11, 5, 0], io.StringIO(), io.StringIO())


def test_output_beyond_memory_raises():
    with pytest.raises(IndexError):
        execute([5, 1, 4, 7, 9], io.StringIO(), io.StringIO())


def test_main_runs_convert(capsys):
    assert main(["convert"]) == 0
    assert capsys.readouterr().out == " 6710"


def test_main_runs_sieve_by_default(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("10\n"))
    assert main([]) == 0
    assert capsys.readouterr().out == "".join(f"{p:>5}" for p in [2, 3, 5, 7])


def test_main_rejects_unknown_program():
    with pytest.raises(SystemExit):
        main(["nonexistent"])