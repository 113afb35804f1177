from __future__ import annotations

from isa import RAM_WORDS, WORD_MASK


class DataPath:
    """Тракт данных Hack: регистры A/D, память данных и ALU."""

    def __init__(self, data_words: int = RAM_WORDS):
        self.mem = [0] * max(1, data_words)

        self.a: int = 0
        self.d: int = 0
        self.zero: bool = True
        self.sign: bool = False
        self._last_alu: int = 0

    def _check_addr(self, addr: int) -> int:
        if not 0 <= addr < len(self.mem):
            raise IndexError(f"RAM address out of range: {addr}")
        return addr

    # Память
    def read_m(self) -> int:
        return self.mem[self._check_addr(self.a)]

    def write_m(self, value: int, addr: int | None = None):
        addr = self.a if addr is None else addr
        self.mem[self._check_addr(addr)] = value & WORD_MASK

    def latch_a(self, value: int):
        self.a = value & WORD_MASK

    def latch_d(self, value: int):
        self.d = value & WORD_MASK

    def alu_compute(self, comp: int) -> int:
        # comp = a zx nx zy ny f no
        x = self.d
        y = self.read_m() if comp & 0b1000000 else self.a
        if comp & 0b0100000:
            x = 0
        if comp & 0b0010000:
            x = ~x
        if comp & 0b0001000:
            y = 0
        if comp & 0b0000100:
            y = ~y
        out = x + y if comp & 0b0000010 else x & y
        if comp & 0b0000001:
            out = ~out
        out &= WORD_MASK
        self._last_alu = out
        self.zero = out == 0
        self.sign = (out & 0x8000) != 0
        return out
