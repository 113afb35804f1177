from __future__ import annotations


class SymbolAllocator:
    """Label and symbol naming state for one translation run.

    Branch labels are qualified with the current module name and a ``$``
    separator. VM identifiers cannot contain ``$``, so generated labels never
    clash with function names. Comparison and return labels use counters
    shared by all modules of the run.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self.module: str | None = None
        self._comparisons = 0
        self._returns = 0

    def set_current_module(self, name: str):
        self.module = name

    def _require_module(self) -> str:
        if self.module is None:
            raise RuntimeError("no current module")
        return self.module

    def next_comparison_id(self) -> int:
        n = self._comparisons
        self._comparisons += 1
        return n

    def comparison_labels(self, n: int) -> tuple[str, str]:
        return f"CMP$TRUE${n}", f"CMP$END${n}"

    def next_return_label(self, callee: str) -> str:
        n = self._returns
        self._returns += 1
        return f"{callee}$ret${n}"

    def static_symbol(self, module: str, index: int) -> str:
        return f"{module}.{index}"

    def current_static(self, index: int) -> str:
        return self.static_symbol(self._require_module(), index)

    def branch_label(self, name: str) -> str:
        return f"{self._require_module()}${name}"
