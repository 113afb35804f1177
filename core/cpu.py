from __future__ import annotations

from isa import JUMP, RAM_WORDS, Instr, decode_word

from .datapath import DataPath


class CPU:
    def __init__(self, rom: list[int], data_words: int = RAM_WORDS, tick_limit: int = 100000):
        self.rom = rom
        self.dp = DataPath(data_words)
        self.pc = 0
        self.ir: Instr | None = None
        self.tick = 0
        self.tick_limit = tick_limit

        self._halted = False
        self.last_pc: int = 0

    @property
    def halted(self) -> bool:
        return self._halted

    def tick_inc(self):
        self.tick += 1

    def _should_jump(self, jump: int) -> bool:
        if jump == JUMP["JMP"]:
            return True
        if jump & 0b100 and self.dp.sign:
            return True
        if jump & 0b010 and self.dp.zero:
            return True
        if jump & 0b001 and not self.dp.sign and not self.dp.zero:
            return True
        return False

    def step_tick(self):
        if self._halted:
            return
        # останов при выходе PC за пределы ROM
        if not 0 <= self.pc < len(self.rom) or self.tick >= self.tick_limit:
            self._halted = True
            return

        self.last_pc = self.pc
        self.ir = decode_word(self.rom[self.pc])
        ins = self.ir

        if ins.is_a:
            self.dp.latch_a(ins.value)
            self.pc += 1
            self.tick_inc()
            return

        # адрес M и цель перехода берутся из A до записи результата
        addr = self.dp.a
        out = self.dp.alu_compute(ins.comp)
        if ins.dest & 0b001:
            self.dp.write_m(out, addr)
        if ins.dest & 0b100:
            self.dp.latch_a(out)
        if ins.dest & 0b010:
            self.dp.latch_d(out)

        if ins.jump and self._should_jump(ins.jump):
            self.pc = addr
        else:
            self.pc += 1
        self.tick_inc()

    def run(self) -> int:
        while not self._halted:
            self.step_tick()
        return self.tick
