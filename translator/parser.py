from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from isa import MAX_LITERAL, PREDEFINED, TEMP_SIZE

from .errors import UnsupportedSegmentError, VMSyntaxError
from .lexer import Token, strip_comment, tokenize


class ArithOp(str, Enum):
    ADD = "add"
    SUB = "sub"
    NEG = "neg"
    EQ = "eq"
    GT = "gt"
    LT = "lt"
    AND = "and"
    OR = "or"
    NOT = "not"


class Segment(str, Enum):
    ARGUMENT = "argument"
    LOCAL = "local"
    STATIC = "static"
    CONSTANT = "constant"
    THIS = "this"
    THAT = "that"
    POINTER = "pointer"
    TEMP = "temp"


# Команды VM
class Command:  # маркер
    pass


@dataclass
class Arithmetic(Command):
    op: ArithOp


@dataclass
class Push(Command):
    segment: Segment
    index: int


@dataclass
class Pop(Command):
    segment: Segment
    index: int


@dataclass
class Label(Command):
    name: str


@dataclass
class Goto(Command):
    name: str


@dataclass
class IfGoto(Command):
    name: str


@dataclass
class Function(Command):
    name: str
    n_locals: int


@dataclass
class Call(Command):
    name: str
    n_args: int


@dataclass
class Return(Command):
    pass


@dataclass
class SourceCommand:
    """A parsed command together with where it came from."""

    line: int
    text: str
    command: Command


ARITH_OPS = {op.value for op in ArithOp}
SEGMENT_LIMITS = {Segment.POINTER: 2, Segment.TEMP: TEMP_SIZE}


class Parser:
    def __init__(self, tokens: list[Token], text: str = ""):
        self.tokens = tokens
        self.text = text
        self.line = tokens[0].line if tokens else 0

    def error(self, message: str) -> VMSyntaxError:
        return VMSyntaxError(message, line=self.line, text=self.text)

    def expect_operands(self, count: int):
        got = len(self.tokens) - 1
        if got != count:
            kw = self.tokens[0].value
            raise self.error(f"'{kw}' expects {count} operand(s), got {got}")

    def number(self, tok: Token, what: str) -> int:
        if tok.kind != "INT":
            raise self.error(f"{what} must be an integer, got {tok.value!r}")
        value = int(tok.value)
        if value < 0:
            raise self.error(f"{what} must not be negative")
        if value > MAX_LITERAL:
            raise self.error(f"{what} exceeds {MAX_LITERAL}")
        return value

    def ident(self, tok: Token, what: str) -> str:
        if tok.kind != "ID":
            raise self.error(f"bad {what} {tok.value!r}")
        return tok.value

    def segment(self, tok: Token) -> Segment:
        try:
            return Segment(tok.value)
        except ValueError:
            raise UnsupportedSegmentError(f"unknown segment {tok.value!r}", line=self.line, text=self.text) from None

    def parse(self) -> Command:
        head = self.tokens[0]
        if head.kind != "KW":
            raise self.error(f"unknown command {head.value!r}")
        kw = head.value

        if kw in ARITH_OPS:
            self.expect_operands(0)
            return Arithmetic(ArithOp(kw))
        if kw in ("push", "pop"):
            return self.parse_memory(kw)
        if kw in ("label", "goto", "if-goto"):
            self.expect_operands(1)
            name = self.ident(self.tokens[1], "label")
            if kw == "label":
                return Label(name)
            if kw == "goto":
                return Goto(name)
            return IfGoto(name)
        if kw in ("function", "call"):
            self.expect_operands(2)
            name = self.ident(self.tokens[1], "function name")
            if name in PREDEFINED:
                raise self.error(f"function name {name!r} is a reserved assembler symbol")
            if kw == "function":
                return Function(name, self.number(self.tokens[2], "local count"))
            return Call(name, self.number(self.tokens[2], "argument count"))
        if kw == "return":
            self.expect_operands(0)
            return Return()
        raise self.error(f"unknown command {kw!r}")

    def parse_memory(self, kw: str) -> Command:
        self.expect_operands(2)
        seg = self.segment(self.tokens[1])
        index = self.number(self.tokens[2], "index")
        limit = SEGMENT_LIMITS.get(seg)
        if limit is not None and index >= limit:
            raise self.error(f"{seg.value} index must be below {limit}")
        if kw == "push":
            return Push(seg, index)
        if seg is Segment.CONSTANT:
            raise UnsupportedSegmentError("cannot pop to constant segment", line=self.line, text=self.text)
        return Pop(seg, index)


def parse_line(text: str, line: int = 0) -> Command | None:
    """Parse one source line; blank and comment-only lines give ``None``."""
    tokens = list(tokenize(text, line))
    if not tokens:
        return None
    return Parser(tokens, text.strip()).parse()


def parse_lines(lines: list[str]) -> list[SourceCommand]:
    commands: list[SourceCommand] = []
    for lineno, text in enumerate(lines, 1):
        cmd = parse_line(text, lineno)
        if cmd is not None:
            commands.append(SourceCommand(lineno, strip_comment(text), cmd))
    return commands


def parse_source(src: str) -> list[SourceCommand]:
    return parse_lines(src.splitlines())
