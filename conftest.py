from __future__ import annotations

import pytest

from core.runner import run_words
from isa import assemble
from translator.driver import Module, translate


def run_vm(
    sources: dict[str, str] | str,
    ram: dict[int, int] | None = None,
    ticks: int = 10000,
    bootstrap: bool | None = None,
) -> list[int]:
    """Translate VM source(s), assemble and run on the emulator; returns RAM."""
    if isinstance(sources, str):
        sources = {"Main": sources}
    modules = [Module.from_source(name, src) for name, src in sources.items()]
    asm = translate(modules, "Test", bootstrap=bootstrap)
    cpu = run_words(assemble(asm), ram, tick_limit=ticks)
    return cpu.dp.mem


@pytest.fixture
def vm():
    return run_vm
