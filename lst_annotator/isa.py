"""
Instruction knowledge base primitives.

Every instruction family (see avr.py, i8085.py) is a table of
InstructionInfo entries keyed by upper-case mnemonic. Instead of one
closure per mnemonic, each entry carries an OperationRule: an operand-shape
tag plus a format template. All entries of the same shape share one
rendering routine, which keeps the per-family tables declarative.

Rendering policy:
  - IMPLIED instructions always render their constant template.
  - Too few operand tokens for the shape → the raw text is returned as-is.
  - INDEXED_* shapes expand pointer side effects (X+, -X, Y+q).
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .operands import OperandFormatter, parse_pointer, split_operands

__all__ = [
    'OperandShape', 'OperationRule', 'InstructionInfo', 'KnowledgeBase',
    'parse_flags',
]


# ──────────────────────────────────────────────
# Operand shapes
# ──────────────────────────────────────────────

class OperandShape(enum.Enum):
    IMPLIED = "implied"                         # RET, NOP, SEC
    REGISTER = "register"                       # INC Rd
    IMMEDIATE = "immediate"                     # DES K, IN port, RST n
    TARGET = "target"                           # RJMP k, JMP addr
    TWO_REGISTER = "two_register"               # ADD Rd, Rr
    REGISTER_IMMEDIATE = "register_immediate"   # LDI Rd, K / SBI A, b
    BIT_TARGET = "bit_target"                   # BRBS s, k
    INDEXED_LOAD = "indexed_load"               # LD Rd, X+
    INDEXED_STORE = "indexed_store"             # ST -Y, Rr
    INDEXED_POINTER = "indexed_pointer"         # SPM Z+

    @property
    def arity(self) -> int:
        return _ARITY[self]

    @property
    def indexed(self) -> bool:
        return self in (OperandShape.INDEXED_LOAD, OperandShape.INDEXED_STORE,
                        OperandShape.INDEXED_POINTER)


_ARITY = {
    OperandShape.IMPLIED: 0,
    OperandShape.REGISTER: 1,
    OperandShape.IMMEDIATE: 1,
    OperandShape.TARGET: 1,
    OperandShape.TWO_REGISTER: 2,
    OperandShape.REGISTER_IMMEDIATE: 2,
    OperandShape.BIT_TARGET: 2,
    OperandShape.INDEXED_LOAD: 2,
    OperandShape.INDEXED_STORE: 2,
    OperandShape.INDEXED_POINTER: 1,
}


_DEFAULT_FORMATTER = OperandFormatter()


@dataclass(frozen=True)
class OperationRule:
    """How to turn operand text into a symbolic register transfer.

    template: positional ``{0}``/``{1}`` slots for ordinary shapes; the
              indexed shapes use ``{reg}`` and ``{mem}`` instead.
    bare:     constant used when the mnemonic is written with no operands
              at all (AVR ``LPM`` means ``LPM R0, Z``).
    """
    shape: OperandShape
    template: str
    bare: Optional[str] = None

    def render(self, line: str, formatter: OperandFormatter = _DEFAULT_FORMATTER) -> str:
        if self.shape is OperandShape.IMPLIED:
            return self.template

        operands = split_operands(line)[1:]
        if not operands and self.bare is not None:
            return self.bare
        if len(operands) < self.shape.arity:
            return line

        if self.shape.indexed:
            return self._render_indexed(operands, formatter)
        return formatter.format(self.template, *operands)

    def _render_indexed(self, operands, formatter: OperandFormatter) -> str:
        if self.shape is OperandShape.INDEXED_LOAD:
            reg, expr = operands[0], "".join(operands[1:])
        elif self.shape is OperandShape.INDEXED_POINTER:
            reg, expr = None, "".join(operands)
        else:
            reg, expr = operands[-1], "".join(operands[:-1])

        pointer = parse_pointer(expr)
        if pointer is None:
            return formatter.format(self.template, reg=reg, mem=f"[{expr}]")
        access = formatter.format(self.template, reg=reg, mem=pointer.dereference)
        return pointer.transfer(access)


def parse_flags(text: str) -> Tuple[str, ...]:
    """``"Z,C,N"`` → ``('Z', 'C', 'N')``; ``"None"`` → ``()``."""
    text = text.strip()
    if not text or text.lower() == 'none':
        return ()
    return tuple(f.strip() for f in text.split(',') if f.strip())


# ──────────────────────────────────────────────
# Instruction metadata
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class InstructionInfo:
    """Static metadata for one mnemonic."""
    mnemonic: str
    operands: str
    description: str
    flags: Tuple[str, ...]
    rule: OperationRule

    def operation(self, line: str, formatter: OperandFormatter = _DEFAULT_FORMATTER) -> str:
        """Symbolic operation for the raw mnemonic text ``line``."""
        return self.rule.render(line, formatter)

    def __str__(self):
        flags = ",".join(self.flags) if self.flags else "None"
        return f"{self.mnemonic:7s} {self.operands:12s} {flags:14s} {self.description}"


class KnowledgeBase:
    """Read-only mnemonic → InstructionInfo mapping for one family."""

    def __init__(self, family: str, entries: Dict[str, InstructionInfo],
                 formatter: Optional[OperandFormatter] = None):
        self.family = family
        self._entries: Mapping[str, InstructionInfo] = MappingProxyType(
            {key.upper(): info for key, info in entries.items()}
        )
        self.formatter = formatter or _DEFAULT_FORMATTER

    def lookup(self, key: str) -> Optional[InstructionInfo]:
        return self._entries.get(key.upper())

    def render(self, info: InstructionInfo, line: str) -> str:
        return info.operation(line, self.formatter)

    @property
    def entries(self) -> Mapping[str, InstructionInfo]:
        return self._entries

    def __contains__(self, key) -> bool:
        return isinstance(key, str) and key.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self):
        return f"KnowledgeBase({self.family!r}, {len(self)} mnemonics)"
