from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .codegen import ENTRY_POINT, Codegen
from .errors import TranslationError
from .parser import parse_lines
from .symbols import SymbolAllocator

log = logging.getLogger(__name__)


@dataclass
class Module:
    name: str
    lines: list[str] = field(default_factory=list)

    @classmethod
    def from_source(cls, name: str, src: str) -> Module:
        return cls(name, src.splitlines())


class Translator:
    """Translates an ordered list of VM modules into one Hack assembly program.

    A fresh :class:`SymbolAllocator` is used for every run, so two runs over
    the same input give identical output.
    """

    def __init__(self, annotate: bool = True, entry: str = ENTRY_POINT):
        self.annotate = annotate
        self.entry = entry

    def translate_module(self, cg: Codegen, module: Module):
        cg.symbols.set_current_module(module.name)
        try:
            commands = parse_lines(module.lines)
        except TranslationError as e:
            raise e.locate(module.name)
        for sc in commands:
            try:
                cg.gen(sc)
            except TranslationError as e:
                raise e.locate(module.name, sc.line, sc.text)
        log.debug("module %s: %d commands", module.name, len(commands))

    def translate(self, modules: list[Module], program: str = "", bootstrap: bool | None = None) -> list[str]:
        symbols = SymbolAllocator()
        cg = Codegen(symbols, annotate=self.annotate)
        if bootstrap is None:
            bootstrap = len(modules) > 1
        if bootstrap:
            log.debug("program %s: bootstrap via %s", program or "<unnamed>", self.entry)
            cg.gen_bootstrap(self.entry)
        for module in modules:
            self.translate_module(cg, module)
        log.info("translated %d module(s) into %d lines", len(modules), len(cg.code))
        return cg.code


def translate(
    modules: list[Module],
    program: str = "",
    bootstrap: bool | None = None,
    annotate: bool = True,
) -> list[str]:
    return Translator(annotate=annotate).translate(modules, program, bootstrap)


def translate_source(name: str, src: str, annotate: bool = True) -> list[str]:
    return translate([Module.from_source(name, src)], name, annotate=annotate)
