import pytest

import machine_cli
from core.cpu import CPU
from isa import assemble


def run(lines, ram=None, ticks=100):
    cpu = CPU(assemble(lines), tick_limit=ticks)
    for addr, value in (ram or {}).items():
        cpu.dp.write_m(value, addr)
    cpu.run()
    return cpu


@pytest.mark.parametrize(
    "value,jump,taken",
    [
        (5, "JGT", True),
        (0, "JGT", False),
        (0, "JEQ", True),
        (-1, "JLT", True),
        (0, "JGE", True),
        (-1, "JGE", False),
        (3, "JNE", True),
        (0, "JNE", False),
        (0, "JLE", True),
    ],
)
def test_conditional_jumps(value, jump, taken):
    cpu = run(["@0", "D=M", "@TAKEN", f"D;{jump}", "@1", "M=0", "@END", "0;JMP", "(TAKEN)", "@1", "M=1", "(END)"], {0: value})
    assert cpu.dp.mem[1] == (1 if taken else 0)
    assert cpu.halted


def test_m_is_addressed_by_old_a():
    # AM=M-1 пишет в ячейку по старому A
    cpu = run(["@0", "AM=M-1", "D=M"], {0: 300, 299: 7})
    assert cpu.dp.mem[0] == 299
    assert cpu.dp.a == 299
    assert cpu.dp.d == 7


def test_tick_limit_stops_infinite_loop():
    cpu = run(["(L)", "@L", "0;JMP"], ticks=50)
    assert cpu.halted
    assert cpu.tick == 50


def test_machine_cli_dump(tmp_path, capsys):
    prog = tmp_path / "add.asm"
    prog.write_text("@0\nD=M\n@1\nD=D+M\n@2\nM=D\n", encoding="utf-8")
    rc = machine_cli.main([str(prog), "--ram", "0=40", "--ram", "1=-2", "--dump", "2:3"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "RAM[2] = 38"


def test_machine_cli_ram_file(tmp_path):
    ram = tmp_path / "ram.txt"
    ram.write_text("# addr value\n0 256\n0x10 -1\n", encoding="utf-8")
    assert machine_cli.parse_ram_file(str(ram)) == {0: 256, 16: -1}


def test_machine_cli_bad_program(tmp_path):
    prog = tmp_path / "bad.asm"
    prog.write_text("D=Q\n", encoding="utf-8")
    assert machine_cli.main([str(prog)]) == 1
