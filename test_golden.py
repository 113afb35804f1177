"""Golden тесты транслятора и машины.

Каждый каталог golden/<name>/ содержит .vm модули и meta.json с начальным
состоянием RAM, лимитом тактов и ожидаемыми значениями ячеек.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from core.runner import run_machine
from isa import to_signed

ROOT = Path(__file__).resolve().parent
GOLDEN_DIR = ROOT / "golden"


def get_golden_tests():
    """Собирает все golden тесты из директории golden/."""
    tests = []

    for test_dir in sorted(GOLDEN_DIR.iterdir()):
        if test_dir.is_dir():
            meta_file = test_dir / "meta.json"
            if meta_file.exists():
                tests.append(test_dir.name)

    return tests


@pytest.mark.parametrize("test_name", get_golden_tests())
def test_golden(test_name, tmp_path):
    """Транслирует каталог программы, собирает и сверяет RAM после запуска."""
    test_dir = GOLDEN_DIR / test_name
    meta_file = test_dir / "meta.json"

    with open(meta_file) as f:
        meta = json.load(f)

    tmp_asm = tmp_path / "program.asm"
    tmp_hack = tmp_path / "program.hack"
    tmp_hex = tmp_path / "program.hex"

    result = subprocess.run(
        [sys.executable, "-m", "translator", str(test_dir), "-o", str(tmp_asm), "--hack", str(tmp_hack), "--hex", str(tmp_hex)],
        capture_output=True,
        text=True,
        cwd=ROOT,
    )

    assert result.returncode == 0, f"Translation failed: {result.stderr}"
    assert tmp_hex.read_text().count("\n") + 1 == len(tmp_hack.read_text().splitlines())

    ram = {int(addr): value for addr, value in meta.get("ram", {}).items()}
    mem = run_machine(str(tmp_hack), ram, tick_limit=meta.get("ticks", 10000))

    for addr, expected in meta["expect"].items():
        actual = to_signed(mem[int(addr)])
        assert actual == expected, f"RAM[{addr}] mismatch for {test_name}: expected {expected}, got {actual}"


def test_translate_single_file(tmp_path):
    src = tmp_path / "Single.vm"
    src.write_text("push constant 1\npush constant 2\nadd\n", encoding="utf-8")

    result = subprocess.run([sys.executable, "-m", "translator", str(src)], capture_output=True, text=True, cwd=ROOT)

    assert result.returncode == 0, result.stderr
    asm = (tmp_path / "Single.asm").read_text().splitlines()
    assert asm[0] == "// Single[1]: push constant 1"
    assert "@256" not in asm


def test_translate_reports_errors(tmp_path):
    src = tmp_path / "Broken.vm"
    src.write_text("push constant 1\npshu constant 1\n", encoding="utf-8")

    result = subprocess.run([sys.executable, "-m", "translator", str(src)], capture_output=True, text=True, cwd=ROOT)

    assert result.returncode == 1
    assert "Broken:2" in result.stderr
    assert not (tmp_path / "Broken.asm").exists()


def test_translate_unwritable_output(tmp_path, caplog):
    from translator.cli import main

    src = tmp_path / "Single.vm"
    src.write_text("push constant 1\n", encoding="utf-8")

    rc = main([str(src), "-o", str(tmp_path / "missing" / "out.asm")])

    assert rc == 1
    assert not (tmp_path / "missing").exists()
    assert any(r.levelname == "ERROR" for r in caplog.records)
