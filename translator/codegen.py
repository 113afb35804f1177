from __future__ import annotations

from isa import POINTER_BASE, STACK_BASE, TEMP_BASE, Reg

from .errors import UnsupportedSegmentError
from .parser import (
    Arithmetic,
    ArithOp,
    Call,
    Command,
    Function,
    Goto,
    IfGoto,
    Label,
    Pop,
    Push,
    Return,
    Segment,
    SourceCommand,
)
from .symbols import SymbolAllocator

# сегменты с базой в регистре
INDIRECT = {
    Segment.LOCAL: "LCL",
    Segment.ARGUMENT: "ARG",
    Segment.THIS: "THIS",
    Segment.THAT: "THAT",
}
DIRECT = {Segment.POINTER: POINTER_BASE, Segment.TEMP: TEMP_BASE}

BINARY = {
    ArithOp.ADD: "M=D+M",
    ArithOp.SUB: "M=M-D",
    ArithOp.AND: "M=D&M",
    ArithOp.OR: "M=D|M",
}
UNARY = {ArithOp.NEG: "M=-M", ArithOp.NOT: "M=!M"}
# x - y, где y на вершине стека
COMPARE = {ArithOp.EQ: "JEQ", ArithOp.GT: "JGT", ArithOp.LT: "JLT"}

# адрес возврата + LCL, ARG, THIS, THAT
SAVED_REGS = ("LCL", "ARG", "THIS", "THAT")
FRAME_SIZE = len(SAVED_REGS) + 1

FRAME = "R13"
RET_ADDR = "R14"
POP_ADDR = "R15"

ENTRY_POINT = "Sys.init"


class Codegen:
    def __init__(self, symbols: SymbolAllocator | None = None, annotate: bool = True):
        self.symbols = symbols or SymbolAllocator()
        self.annotate = annotate
        self.code: list[str] = []

    def emit(self, *lines: str):
        self.code.extend(lines)

    # Примитивы стека
    def push_d(self):
        self.emit("@SP", "A=M", "M=D", "@SP", "M=M+1")

    def pop_d(self):
        self.emit("@SP", "AM=M-1", "D=M")

    def _direct_symbol(self, segment: Segment, index: int) -> str:
        if segment is Segment.STATIC:
            return self.symbols.current_static(index)
        addr = DIRECT[segment] + index
        if segment is Segment.POINTER:
            return Reg(addr).name
        return f"R{addr}"

    def gen_push(self, segment: Segment, index: int):
        if segment is Segment.CONSTANT:
            self.emit(f"@{index}", "D=A")
        elif segment in INDIRECT:
            self.emit(f"@{index}", "D=A", f"@{INDIRECT[segment]}", "A=D+M", "D=M")
        else:
            self.emit(f"@{self._direct_symbol(segment, index)}", "D=M")
        self.push_d()

    def gen_pop(self, segment: Segment, index: int):
        if segment is Segment.CONSTANT:
            raise UnsupportedSegmentError("cannot pop to constant segment")
        if segment in INDIRECT:
            self.emit(f"@{index}", "D=A", f"@{INDIRECT[segment]}", "D=D+M", f"@{POP_ADDR}", "M=D")
            self.pop_d()
            self.emit(f"@{POP_ADDR}", "A=M", "M=D")
            return
        symbol = self._direct_symbol(segment, index)
        self.pop_d()
        self.emit(f"@{symbol}", "M=D")

    def gen_comparison(self, jump: str):
        """Replace x, y on top of the stack with -1 if ``x - y`` satisfies ``jump``, else 0.

        Exactly one of the two writes runs: the false write falls through and
        jumps over the true branch to the end label.
        """
        true_label, end_label = self.symbols.comparison_labels(self.symbols.next_comparison_id())
        self.emit("@SP", "AM=M-1", "D=M", "A=A-1", "D=M-D")
        self.emit(f"@{true_label}", f"D;{jump}")
        self.emit("@SP", "A=M-1", "M=0")
        self.emit(f"@{end_label}", "0;JMP")
        self.emit(f"({true_label})", "@SP", "A=M-1", "M=-1")
        self.emit(f"({end_label})")

    def gen_arithmetic(self, op: ArithOp):
        if op in BINARY:
            self.emit("@SP", "AM=M-1", "D=M", "A=A-1", BINARY[op])
            return
        if op in UNARY:
            self.emit("@SP", "A=M-1", UNARY[op])
            return
        if op in COMPARE:
            self.gen_comparison(COMPARE[op])
            return
        raise NotImplementedError(f"arithmetic not supported: {op}")

    def gen_function(self, name: str, n_locals: int):
        self.emit(f"({name})")
        for _ in range(n_locals):
            self.emit("@SP", "A=M", "M=0", "@SP", "M=M+1")

    def gen_call(self, name: str, n_args: int):
        ret = self.symbols.next_return_label(name)
        self.emit(f"@{ret}", "D=A")
        self.push_d()
        for reg in SAVED_REGS:
            self.emit(f"@{reg}", "D=M")
            self.push_d()
        # ARG = SP - n - 5
        self.emit("@SP", "D=M", f"@{n_args + FRAME_SIZE}", "D=D-A", "@ARG", "M=D")
        # LCL = SP
        self.emit("@SP", "D=M", "@LCL", "M=D")
        self.emit(f"@{name}", "0;JMP")
        self.emit(f"({ret})")

    def gen_return(self):
        """Collapse the current frame onto the caller's stack and resume the caller.

        The return address is read out of the frame first: with zero arguments
        it lives in the same cell that receives the return value.
        """
        self.emit("@LCL", "D=M", f"@{FRAME}", "M=D")
        self.emit(f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{RET_ADDR}", "M=D")
        # *ARG = pop()
        self.pop_d()
        self.emit("@ARG", "A=M", "M=D")
        # SP = ARG + 1
        self.emit("@ARG", "D=M+1", "@SP", "M=D")
        for reg in reversed(SAVED_REGS):
            self.emit(f"@{FRAME}", "AM=M-1", "D=M", f"@{reg}", "M=D")
        self.emit(f"@{RET_ADDR}", "A=M", "0;JMP")

    def gen_bootstrap(self, entry: str = ENTRY_POINT) -> list[str]:
        start = len(self.code)
        if self.annotate:
            self.emit("// bootstrap")
        self.emit(f"@{STACK_BASE}", "D=A", "@SP", "M=D")
        self.gen_call(entry, 0)
        return self.code[start:]

    def gen_command(self, cmd: Command):
        if isinstance(cmd, Arithmetic):
            self.gen_arithmetic(cmd.op)
            return
        if isinstance(cmd, Push):
            self.gen_push(cmd.segment, cmd.index)
            return
        if isinstance(cmd, Pop):
            self.gen_pop(cmd.segment, cmd.index)
            return
        if isinstance(cmd, Label):
            self.emit(f"({self.symbols.branch_label(cmd.name)})")
            return
        if isinstance(cmd, Goto):
            self.emit(f"@{self.symbols.branch_label(cmd.name)}", "0;JMP")
            return
        if isinstance(cmd, IfGoto):
            self.pop_d()
            self.emit(f"@{self.symbols.branch_label(cmd.name)}", "D;JNE")
            return
        if isinstance(cmd, Function):
            self.gen_function(cmd.name, cmd.n_locals)
            return
        if isinstance(cmd, Call):
            self.gen_call(cmd.name, cmd.n_args)
            return
        if isinstance(cmd, Return):
            self.gen_return()
            return
        raise NotImplementedError(f"command not supported: {cmd}")

    def gen(self, sc: SourceCommand) -> list[str]:
        """Generate one annotated command and return its lines."""
        start = len(self.code)
        if self.annotate:
            self.emit(f"// {self.symbols.module}[{sc.line}]: {sc.text}")
        self.gen_command(sc.command)
        return self.code[start:]
