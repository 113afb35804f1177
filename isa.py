from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Reg(IntEnum):
    # Виртуальные регистры VM в RAM
    SP = 0
    LCL = 1
    ARG = 2
    THIS = 3
    THAT = 4


WORD_MASK = 0xFFFF
MAX_LITERAL = 0x7FFF  # максимум для @value (15 бит)

POINTER_BASE = 3
TEMP_BASE = 5
TEMP_SIZE = 8
STACK_BASE = 256
VARIABLE_BASE = 16
SCREEN = 16384
KBD = 24576
RAM_WORDS = 32768

PREDEFINED = {
    "SP": Reg.SP,
    "LCL": Reg.LCL,
    "ARG": Reg.ARG,
    "THIS": Reg.THIS,
    "THAT": Reg.THAT,
    "SCREEN": SCREEN,
    "KBD": KBD,
}
PREDEFINED.update({f"R{i}": i for i in range(16)})

# comp -> a-bit + zx nx zy ny f no
COMP = {
    "0": 0b0101010,
    "1": 0b0111111,
    "-1": 0b0111010,
    "D": 0b0001100,
    "A": 0b0110000,
    "!D": 0b0001101,
    "!A": 0b0110001,
    "-D": 0b0001111,
    "-A": 0b0110011,
    "D+1": 0b0011111,
    "A+1": 0b0110111,
    "D-1": 0b0001110,
    "A-1": 0b0110010,
    "D+A": 0b0000010,
    "D-A": 0b0010011,
    "A-D": 0b0000111,
    "D&A": 0b0000000,
    "D|A": 0b0010101,
    "M": 0b1110000,
    "!M": 0b1110001,
    "-M": 0b1110011,
    "M+1": 0b1110111,
    "M-1": 0b1110010,
    "D+M": 0b1000010,
    "D-M": 0b1010011,
    "M-D": 0b1000111,
    "D&M": 0b1000000,
    "D|M": 0b1010101,
}
# коммутативные записи
COMP.update({"A+D": COMP["D+A"], "M+D": COMP["D+M"], "A&D": COMP["D&A"], "M&D": COMP["D&M"]})
COMP.update({"A|D": COMP["D|A"], "M|D": COMP["D|M"]})

DEST = {"": 0b000, "M": 0b001, "D": 0b010, "MD": 0b011, "A": 0b100, "AM": 0b101, "AD": 0b110, "AMD": 0b111}
DEST.update({"DM": 0b011, "MA": 0b101, "DA": 0b110, "ADM": 0b111, "MAD": 0b111, "MDA": 0b111, "DAM": 0b111, "DMA": 0b111})

JUMP = {"": 0b000, "JGT": 0b001, "JEQ": 0b010, "JGE": 0b011, "JLT": 0b100, "JNE": 0b101, "JLE": 0b110, "JMP": 0b111}

_COMP_NAMES = {v: k for k, v in reversed(list(COMP.items()))}
_DEST_NAMES = {v: k for k, v in reversed(list(DEST.items()))}
_JUMP_NAMES = {v: k for k, v in JUMP.items()}


class AssemblyError(ValueError):
    def __init__(self, message: str, line: int = 0, text: str = ""):
        self.line = line
        self.text = text
        where = f"line {line}: " if line else ""
        suffix = f" ({text})" if text else ""
        super().__init__(f"{where}{message}{suffix}")


@dataclass
class Instr:
    """Decoded Hack instruction; ``value`` is used by A-instructions only."""

    is_a: bool
    value: int = 0
    dest: int = 0
    comp: int = 0
    jump: int = 0

    def mnemonic(self) -> str:
        if self.is_a:
            return f"@{self.value}"
        text = _COMP_NAMES.get(self.comp, f"?{self.comp:07b}")
        if self.dest:
            text = f"{_DEST_NAMES[self.dest]}={text}"
        if self.jump:
            text = f"{text};{_JUMP_NAMES[self.jump]}"
        return text


def _clean(line: str) -> str:
    i = line.find("//")
    if i >= 0:
        line = line[:i]
    return "".join(line.split())


def _is_symbol(name: str) -> bool:
    if not name or not name.isascii() or name[0].isdigit():
        return False
    return all(ch.isalnum() or ch in "_.$:" for ch in name)


def _encode_c(text: str, line: int) -> int:
    dest, comp, jump = "", text, ""
    if "=" in comp:
        dest, comp = comp.split("=", 1)
    if ";" in comp:
        comp, jump = comp.split(";", 1)
    if dest not in DEST:
        raise AssemblyError(f"bad dest {dest!r}", line, text)
    if comp not in COMP:
        raise AssemblyError(f"bad comp {comp!r}", line, text)
    if jump not in JUMP:
        raise AssemblyError(f"bad jump {jump!r}", line, text)
    return 0b111 << 13 | COMP[comp] << 6 | DEST[dest] << 3 | JUMP[jump]


def assemble(lines: list[str]) -> list[int]:
    """Assemble Hack assembly text into 16-bit words.

    First pass binds ``(LABEL)`` pseudo-instructions to ROM addresses, second
    pass encodes instructions; unknown ``@symbol`` references become variables
    allocated from RAM 16 upwards in order of first use.
    """
    symbols: dict[str, int] = dict(PREDEFINED)
    program: list[tuple[int, str]] = []

    for lineno, raw in enumerate(lines, 1):
        s = _clean(raw)
        if not s:
            continue
        if s.startswith("("):
            if not s.endswith(")") or not _is_symbol(s[1:-1]):
                raise AssemblyError("bad label", lineno, raw.strip())
            name = s[1:-1]
            if name in symbols:
                raise AssemblyError(f"duplicate label {name!r}", lineno, raw.strip())
            symbols[name] = len(program)
            continue
        program.append((lineno, s))

    words: list[int] = []
    next_var = VARIABLE_BASE
    for lineno, s in program:
        if s.startswith("@"):
            ref = s[1:]
            if ref.isascii() and ref.isdigit():
                value = int(ref)
                if value > MAX_LITERAL:
                    raise AssemblyError("literal out of range", lineno, s)
            elif _is_symbol(ref):
                if ref not in symbols:
                    symbols[ref] = next_var
                    next_var += 1
                value = symbols[ref]
            else:
                raise AssemblyError("bad symbol", lineno, s)
            words.append(value)
        else:
            words.append(_encode_c(s, lineno))
    return words


def decode_word(word: int) -> Instr:
    if not word & 0x8000:
        return Instr(True, word & MAX_LITERAL)
    return Instr(False, dest=(word >> 3) & 0b111, comp=(word >> 6) & 0b1111111, jump=word & 0b111)


def encode(words: list[int]) -> str:
    # формат .hack: одно 16-битное слово в двоичном виде на строку
    return "".join(f"{w & WORD_MASK:016b}\n" for w in words)


def decode(text: str) -> list[int]:
    words: list[int] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        s = line.strip()
        if not s:
            continue
        if len(s) != 16 or any(ch not in "01" for ch in s):
            raise AssemblyError("bad machine word", lineno, s)
        words.append(int(s, 2))
    return words


def to_hex(words: list[int]) -> str:
    lines: list[str] = []
    for addr, word in enumerate(words):
        lines.append(f"{addr} - {word & WORD_MASK:04X} - {decode_word(word).mnemonic()}")
    return "\n".join(lines)


def to_signed(value: int) -> int:
    value &= WORD_MASK
    return value - 0x10000 if value & 0x8000 else value
