import json

import pytest

from binaries import build_pdb, build_pe
from testlocator import cli as cli

FUNCTIONS = [
    ("ns::Suite_Case_Test::TestBody", "c:\\src\\suite_test.cpp", 42),
    ("ns::Suite_Case_Test::Category__GTA__Slow_GTA_TRAIT", "c:\\src\\suite_test.cpp", 40),
    ("ns::Other_Case_Test::TestBody", "c:\\src\\other_test.cpp", 9),
]


@pytest.fixture
def built(tmp_path, monkeypatch):
    """An executable whose CodeView entry points at its PDB."""
    pdb = tmp_path / "out" / "suite.pdb"
    pdb.parent.mkdir()
    pdb.write_bytes(build_pdb([FUNCTIONS]))
    exe = tmp_path / "suite.exe"
    exe.write_bytes(build_pe(imports=["gtest.dll"], pdb_path=str(pdb)))
    (tmp_path / "cwd").mkdir()
    monkeypatch.chdir(tmp_path / "cwd")
    monkeypatch.setenv("PATH", "")
    return exe, pdb


def test_cli_locate_json(built, capsys):
    exe, _ = built
    rc = cli.main(["locate", str(exe), "Suite_Case_Test::TestBody", "--json"])
    assert rc == 0
    obj = json.loads(capsys.readouterr().out.splitlines()[0])
    assert obj["found"] is True
    assert obj["signatures"] == ["Suite_Case_Test::TestBody"]
    assert obj["location"] == {
        "symbol": "ns::Suite_Case_Test::TestBody",
        "source_file": "c:\\src\\suite_test.cpp",
        "line": 42,
        "traits": [{"name": "Category", "value": "Slow"}],
    }


def test_cli_locate_plain(built, capsys):
    exe, _ = built
    rc = cli.main(["locate", str(exe), "Other_Case_Test::TestBody"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "symbol: ns::Other_Case_Test::TestBody" in out
    assert "line: 9" in out
    assert "trait:" not in out


def test_cli_locate_not_found(built, capsys):
    exe, _ = built
    rc = cli.main(["locate", str(exe), "Missing_Test::TestBody", "Gone_Test::TestBody"])
    assert rc == 1
    assert capsys.readouterr().out.strip() == (
        "not found: Missing_Test::TestBody, Gone_Test::TestBody"
    )


def test_cli_locate_missing_executable(tmp_path, capsys):
    rc = cli.main(["locate", str(tmp_path / "nope.exe"), "A::TestBody"])
    assert rc == 2
    assert "File not found" in capsys.readouterr().err


def test_cli_locate_additional_pdb(tmp_path, monkeypatch, capsys):
    exe = tmp_path / "suite.exe"
    exe.write_bytes(build_pe())
    symbols = tmp_path / "symbols"
    symbols.mkdir()
    (symbols / "plugin.pdb").write_bytes(build_pdb([FUNCTIONS]))
    (tmp_path / "cwd").mkdir()
    monkeypatch.chdir(tmp_path / "cwd")
    monkeypatch.setenv("PATH", "")

    rc = cli.main(
        [
            "locate",
            str(exe),
            "Suite_Case_Test::TestBody",
            "--additional-pdb",
            "$(ExecutableDir)/symbols/*.pdb",
            "--json",
        ]
    )
    assert rc == 0
    obj = json.loads(capsys.readouterr().out.splitlines()[0])
    assert obj["location"]["line"] == 42


def test_cli_locate_no_symbols(built, capsys):
    exe, _ = built
    rc = cli.main(["locate", str(exe), "Suite_Case_Test::TestBody", "--no-symbols", "--json"])
    assert rc == 1
    obj = json.loads(capsys.readouterr().out.splitlines()[0])
    assert obj == {
        "signatures": ["Suite_Case_Test::TestBody"],
        "found": False,
        "location": None,
    }


def test_cli_symbols_json(built, capsys):
    exe, _ = built
    rc = cli.main(["symbols", str(exe), "--json"])
    assert rc == 0
    obj = json.loads(capsys.readouterr().out.splitlines()[0])
    assert [s["symbol"] for s in obj["tests"]] == [
        "ns::Suite_Case_Test::TestBody",
        "ns::Other_Case_Test::TestBody",
    ]
    assert [s["symbol"] for s in obj["traits"]] == [
        "ns::Suite_Case_Test::Category__GTA__Slow_GTA_TRAIT"
    ]


def test_cli_symbols_filters(built, capsys):
    exe, pdb = built
    rc = cli.main(
        ["symbols", str(exe), "--pdb", str(pdb), "--kind", "tests", "--search", "other"]
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0] == "tests: 1"
    assert "ns::Other_Case_Test::TestBody\tc:\\src\\other_test.cpp:9" in out
    assert "traits" not in out


def test_cli_symbols_without_pdb(tmp_path, monkeypatch, capsys):
    exe = tmp_path / "lonely.exe"
    exe.write_bytes(build_pe())
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", "")
    rc = cli.main(["symbols", str(exe)])
    assert rc == 3
    assert "No .pdb file found" in capsys.readouterr().err


def test_cli_imports_json(built, capsys):
    exe, pdb = built
    (exe.parent / "gtest.dll").write_bytes(b"")
    rc = cli.main(["imports", str(exe), "--json"])
    assert rc == 0
    obj = json.loads(capsys.readouterr().out.splitlines()[0])
    assert obj["pdb"] == str(pdb)
    assert obj["imports"] == [{"name": "gtest.dll", "exists": True}]


def test_cli_imports_plain_marks_missing(built, capsys):
    exe, _ = built
    rc = cli.main(["imports", str(exe)])
    assert rc == 0
    out = capsys.readouterr().out
    assert "path:" in out and str(exe) in out
    assert "  gtest.dll (missing)" in out


def test_cli_imports_not_pe(tmp_path, capsys):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x7fELF" + b"\x00" * 64)
    rc = cli.main(["imports", str(path)])
    assert rc == 3
    assert "Error parsing PE image" in capsys.readouterr().err


def test_cli_requires_command(capsys):
    with pytest.raises(SystemExit):
        cli.main([])
