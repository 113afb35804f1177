from __future__ import annotations

import argparse
import logging
import sys

from core.runner import run_machine
from isa import AssemblyError, to_signed

log = logging.getLogger("machine")


def parse_ram_value(item: str) -> tuple[int, int]:
    # ADDR=VALUE, числа в десятичной или 0x-записи, значения могут быть отрицательными
    if "=" not in item:
        raise ValueError(f"bad RAM assignment {item!r}")
    addr, value = item.split("=", 1)
    return int(addr, 0), int(value, 0)


def parse_ram_file(path: str) -> dict[int, int]:
    ram: dict[int, int] = {}
    with open(path, encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            parts = s.split()
            if len(parts) != 2:
                raise ValueError("bad RAM line")
            ram[int(parts[0], 0)] = int(parts[1], 0)
    return ram


def parse_range(text: str) -> range:
    start, _, end = text.partition(":")
    first = int(start, 0)
    return range(first, int(end, 0) if end else first + 1)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run Hack machine code (.hack or .asm)")
    ap.add_argument("program", help=".hack or .asm program path")
    ap.add_argument("--ram", action="append", default=[], help="initial RAM cell ADDR=VALUE (repeatable)")
    ap.add_argument("--ram-file", help="text file of 'addr value' lines")
    ap.add_argument("--ticks", type=int, default=100000)
    ap.add_argument("--trace", action="store_true", help="dump per-tick trace")
    ap.add_argument("--trace-file", help="write trace to file (default: stdout)")
    ap.add_argument("--dump", action="append", default=[], help="RAM range START:END to print (default 0:16)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    try:
        ram = parse_ram_file(args.ram_file) if args.ram_file else {}
        for item in args.ram:
            addr, value = parse_ram_value(item)
            ram[addr] = value
        ranges = [parse_range(r) for r in args.dump] or [range(0, 16)]
        mem = run_machine(args.program, ram, tick_limit=args.ticks, trace=args.trace, trace_file=args.trace_file)
    except (AssemblyError, ValueError, OSError, IndexError) as e:
        log.error("%s", e)
        return 1

    for r in ranges:
        for addr in r:
            print(f"RAM[{addr}] = {to_signed(mem[addr])}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
