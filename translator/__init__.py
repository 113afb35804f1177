from .driver import Module, Translator, translate, translate_source
from .errors import TranslationError, UnsupportedSegmentError, VMSyntaxError

__all__ = [
    "Module",
    "Translator",
    "translate",
    "translate_source",
    "TranslationError",
    "UnsupportedSegmentError",
    "VMSyntaxError",
]
