from __future__ import annotations


class TranslationError(Exception):
    """Base error of a translation run, located by module and line."""

    def __init__(self, message: str, module: str = "", line: int = 0, text: str = ""):
        super().__init__(message)
        self.message = message
        self.module = module
        self.line = line
        self.text = text

    def locate(self, module: str = "", line: int = 0, text: str = "") -> TranslationError:
        self.module = self.module or module
        self.line = self.line or line
        self.text = self.text or text
        return self

    def __str__(self) -> str:
        where = self.module or "<vm>"
        if self.line:
            where = f"{where}:{self.line}"
        if self.text:
            return f"{where}: {self.message} ({self.text})"
        return f"{where}: {self.message}"


class VMSyntaxError(TranslationError):
    pass


class UnsupportedSegmentError(TranslationError):
    pass
