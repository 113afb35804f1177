from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from isa import AssemblyError, assemble, encode, to_hex

from .driver import Module, translate
from .errors import TranslationError

log = logging.getLogger("translator")

VM_SUFFIX = ".vm"


def load_modules(source: Path) -> tuple[str, list[Module], Path]:
    """Collect modules, program name and default output path for a file or directory."""
    if source.is_dir():
        files = sorted(p for p in source.iterdir() if p.suffix == VM_SUFFIX and p.is_file())
        if not files:
            raise FileNotFoundError(f"no {VM_SUFFIX} files in {source}")
        program = source.resolve().name
        target = source / f"{program}.asm"
    else:
        files = [source]
        program = source.stem
        target = source.with_suffix(".asm")
    modules = []
    for path in files:
        with open(path, encoding="utf-8") as f:
            modules.append(Module(path.stem, f.read().splitlines()))
    return program, modules, target


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Hack VM -> Hack assembly translator")
    ap.add_argument("source", help="input .vm file or directory of .vm files")
    ap.add_argument("-o", "--output", help="output .asm file (default: next to source)")
    ap.add_argument("--hack", help="also assemble and write .hack machine code")
    ap.add_argument("--hex", dest="hexdump", help="write hex listing to file")
    boot = ap.add_mutually_exclusive_group()
    boot.add_argument("--bootstrap", dest="bootstrap", action="store_true", default=None, help="always emit bootstrap")
    boot.add_argument("--no-bootstrap", dest="bootstrap", action="store_false", help="never emit bootstrap")
    ap.set_defaults(bootstrap=None)
    ap.add_argument("--no-comments", dest="annotate", action="store_false", help="omit source annotations")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        program, modules, target = load_modules(Path(args.source))
        asm = translate(modules, program, bootstrap=args.bootstrap, annotate=args.annotate)
        words = assemble(asm) if args.hack or args.hexdump else []

        if args.output:
            target = Path(args.output)
        with open(target, "w", encoding="utf-8") as f:
            f.write("\n".join(asm) + "\n")
        if args.hack:
            with open(args.hack, "w", encoding="utf-8") as f:
                f.write(encode(words))
        if args.hexdump:
            with open(args.hexdump, "w", encoding="utf-8") as f:
                f.write(to_hex(words))
    except (TranslationError, AssemblyError, OSError) as e:
        log.error("%s", e)
        return 1

    print(f"source = {args.source}")
    print(f"output = {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
