import io

from calcmachine.instructions import get_process_size
from calcmachine.primes import PRIMES_PROGRAM, main
from calcmachine.translator import translate_program_to_c


def run(monkeypatch, tmp_path, limit):
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{limit}\n{limit}\n"))
    target = tmp_path / "prog.c"
    code = main(["--c-output", str(target)])
    return code, target


def test_primes_below_twenty(monkeypatch, tmp_path, capsys):
    code, _ = run(monkeypatch, tmp_path, 20)
    out = capsys.readouterr().out
    primes = "    2    3    5    7   11   13   17   19"
    assert code == 0
    assert out == (primes + "\nReturn code: 0\n") * 2


def test_both_runs_agree(monkeypatch, tmp_path, capsys):
    run(monkeypatch, tmp_path, 100)
    out = capsys.readouterr().out
    first, second, tail = out.split("\nReturn code: 0\n")
    assert first == second
    assert tail == ""
    assert first.startswith("    2    3    5    7")


def test_no_primes_below_two(monkeypatch, tmp_path, capsys):
    run(monkeypatch, tmp_path, 2)
    assert capsys.readouterr().out == "\nReturn code: 0\n" * 2


def test_writes_c_translation(monkeypatch, tmp_path, capsys):
    _, target = run(monkeypatch, tmp_path, 10)
    assert target.read_text(encoding="utf-8") == translate_program_to_c(
        PRIMES_PROGRAM
    )
    assert f"Compiled to {target}." in capsys.readouterr().err


def test_process_size_header():
    assert get_process_size(PRIMES_PROGRAM) == 699
    assert len(PRIMES_PROGRAM) == 299