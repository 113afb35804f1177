from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .errors import VMSyntaxError


@dataclass
class Token:
    kind: str
    value: str
    line: int
    col: int


KEYWORDS = {
    "add",
    "sub",
    "neg",
    "eq",
    "gt",
    "lt",
    "and",
    "or",
    "not",
    "push",
    "pop",
    "label",
    "goto",
    "if-goto",
    "function",
    "call",
    "return",
}

COMMENT = "//"


def strip_comment(text: str) -> str:
    i = text.find(COMMENT)
    if i >= 0:
        text = text[:i]
    return text.strip()


def _is_ident(word: str) -> bool:
    if not word or not word.isascii() or word[0].isdigit():
        return False
    return all(ch.isalnum() or ch in "_.:" for ch in word)


def _is_int(word: str) -> bool:
    digits = word[1:] if word.startswith("-") else word
    return digits.isascii() and digits.isdigit()


def tokenize(text: str, line: int = 0) -> Iterator[Token]:
    """Split one VM source line into tokens; comments and blanks yield nothing."""
    code = strip_comment(text)
    col = 1
    first = True
    while code:
        ws = len(code) - len(code.lstrip())
        col += ws
        code = code[ws:]
        if not code:
            break
        end = 0
        while end < len(code) and not code[end].isspace():
            end += 1
        word = code[:end]
        if first and word in KEYWORDS:
            kind = "KW"
        elif _is_int(word):
            kind = "INT"
        elif _is_ident(word):
            kind = "ID"
        else:
            raise VMSyntaxError(f"unexpected token {word!r} at col {col}", line=line, text=text.strip())
        yield Token(kind, word, line, col)
        first = False
        col += end
        code = code[end:]
