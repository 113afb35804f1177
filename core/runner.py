from __future__ import annotations

from pathlib import Path

from isa import RAM_WORDS, assemble, decode

from .cpu import CPU


def load_program(code_path: str) -> list[int]:
    """Read a ``.hack`` binary-text file or assemble an ``.asm`` file."""
    path = Path(code_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".asm":
        return assemble(text.splitlines())
    return decode(text)


def run_words(
    words: list[int],
    ram_init: dict[int, int] | None = None,
    data_words: int = RAM_WORDS,
    tick_limit: int = 100000,
    trace: bool = False,
    trace_file: str | None = None,
) -> CPU:
    cpu = CPU(words, data_words=data_words, tick_limit=tick_limit)
    for addr, value in (ram_init or {}).items():
        cpu.dp.write_m(value, addr)
    trace_out = None
    if trace:
        trace_out = open(trace_file, "w", encoding="utf-8") if trace_file else None
    try:
        while not cpu.halted:
            if trace and cpu.pc < len(words):
                line = f"t={cpu.tick} pc={cpu.pc} A={cpu.dp.a} D={cpu.dp.d} SP={cpu.dp.mem[0]}\n"
                if trace_out:
                    trace_out.write(line)
                else:
                    print(line, end="")
            cpu.step_tick()
    finally:
        if trace_out:
            trace_out.close()
    return cpu


def run_machine(
    code_path: str,
    ram_init: dict[int, int] | None = None,
    data_words: int = RAM_WORDS,
    tick_limit: int = 100000,
    trace: bool = False,
    trace_file: str | None = None,
) -> list[int]:
    words = load_program(code_path)
    cpu = run_words(words, ram_init, data_words, tick_limit, trace=trace, trace_file=trace_file)
    return cpu.dp.mem
