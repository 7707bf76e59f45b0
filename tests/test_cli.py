import pytest

from pla_espresso import cli
from pla_espresso.solver import EspressoSolver, SolverResponse


class CannedProcess:
    def __init__(self, output):
        self.output = output

    def invoke(self, text, flags):
        return SolverResponse(0, self.output)


@pytest.fixture
def canned(monkeypatch):
    def install(output):
        monkeypatch.setattr(cli, "EspressoSolver", lambda: EspressoSolver(CannedProcess(output)))
    return install


def test_vector_pla_format(capsys):
    assert cli.main(["vector", "0101", "--format", "pla"]) == 0
    out = capsys.readouterr().out
    assert out == (
        ".i 2\n"
        ".o 1\n"
        ".ilb A B\n"
        ".ob Z\n"
        ".p 2\n"
        "01 1\n"
        "11 1\n"
        ".d 0\n"
        ".r 2\n"
        "00 0\n"
        "10 0\n"
        ".e\n"
    )


def test_table_pla_format_with_names(tmp_path, capsys):
    table = tmp_path / "table.txt"
    table.write_text("# inputs outputs\n010 1\n011 0  # off\n\n1-0 2\n")
    assert cli.main(["table", str(table), "-f", "pla", "--ind-names", "x", "y", "w"]) == 0
    out = capsys.readouterr().out
    assert ".ilb x y w\n.ob Z\n" in out
    assert ".p 1\n010 1\n.d 1\n120 2\n.r 1\n011 0\n" in out


def test_vector_text_output(canned, capsys):
    canned("-1 1\n")
    assert cli.main(["vector", "0101"]) == 0
    out = capsys.readouterr().out
    assert 'T( 1): "-1" <-> {1 3}' in out
    assert "Z = B" in out
    assert "Logical complexity: 0 inputs" in out
    assert 'Output tt: "0101"' in out


def test_table_equations_output(canned, tmp_path, capsys):
    canned("1- 1\n")
    table = tmp_path / "table.txt"
    table.write_text("10 1\n11 1\n00 0\n")
    assert cli.main(["table", str(table), "--format", "equations"]) == 0
    assert capsys.readouterr().out == "Z = A\n"


def test_invalid_vector_exits_with_error(capsys):
    assert cli.main(["vector", "010", "-f", "pla"]) == 1
    assert "power of 2" in capsys.readouterr().err


def test_missing_table_file(tmp_path, capsys):
    assert cli.main(["table", str(tmp_path / "missing.txt")]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_malformed_table_line(tmp_path, capsys):
    table = tmp_path / "table.txt"
    table.write_text("10 1 extra\n")
    assert cli.main(["table", str(table), "-f", "pla"]) == 1
    assert "expected '<inputs> <outputs>'" in capsys.readouterr().err


def test_conflicting_flags(capsys):
    assert cli.main(["vector", "0101", "--exact", "--fast"]) == 1
    assert "cannot both be true" in capsys.readouterr().err


def test_three_variable_vector_prints_karnaugh_map(canned, capsys):
    canned("0-- 1\n")
    assert cli.main(["vector", "1-11-000"]) == 0
    out = capsys.readouterr().out
    assert "Karnaugh map (index to left, -:unused don't-care, =:used don't-care):" in out
    assert "  /  0  1  3  2 \\   / 1 = 1 1 \\\n" in out
    assert "  \\  4  5  7  6 /   \\ - . . . /\n" in out
    assert out.index("Karnaugh map") < out.index("All terms:")


def test_four_variable_vector_prints_karnaugh_map(canned, capsys):
    canned("1111 1\n")
    assert cli.main(["vector", "000000000000-001"]) == 0
    out = capsys.readouterr().out
    assert "  | 12 13 15 14 |   | - . 1 . |\n" in out
    assert "  \\  8  9 11 10 /   \\ . . . . /\n" in out


def test_two_variable_vector_has_no_karnaugh_map(canned, capsys):
    canned("-1 1\n")
    assert cli.main(["vector", "0101"]) == 0
    assert "Karnaugh" not in capsys.readouterr().out


def test_zero_variable_vector_pla_format(capsys):
    assert cli.main(["vector", "1", "-f", "pla"]) == 0
    out = capsys.readouterr().out
    assert ".i 0" not in out
    assert out.endswith("Z = 1\n")
