"""
Operand splitting and rendering helpers shared by every instruction family.

Listing text is not guaranteed to be well formed, so nothing in here raises
on odd input: tokens that do not look like what a helper expects are passed
through untouched.

Pointer syntax (AVR indirect addressing):
  X      plain dereference          LD  R3, X      → R3 ← [X]
  X+     post-increment             LD  R3, X+     → R3 ← [X], X ← X + 1
  -X     pre-decrement              LD  R3, -X     → X ← X - 1, R3 ← [X]
  Y+q    displacement               LDD R3, Y+5    → R3 ← [Y + 5]
"""

from __future__ import annotations
import enum
import re
import string
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

__all__ = [
    'split_operands', 'PointerMode', 'Pointer', 'parse_pointer',
    'OperandFormatter', 'I8085OperandFormatter',
]


_DELIMITERS = re.compile(r"[ ,\t]+")


def split_operands(text: str) -> List[str]:
    """Split raw mnemonic text on blanks, commas and tabs, dropping empties.

    The first token is the mnemonic itself; operands follow.
    """
    return [tok for tok in _DELIMITERS.split(text.strip()) if tok]


# ──────────────────────────────────────────────
# Pointer expressions
# ──────────────────────────────────────────────

class PointerMode(enum.Enum):
    PLAIN = "plain"
    POST_INCREMENT = "post_increment"
    PRE_DECREMENT = "pre_decrement"
    DISPLACEMENT = "displacement"


_POINTER_RE = re.compile(
    r"^(?P<pre>-)?(?P<base>[XYZxyz])(?:(?P<post>\+)(?P<disp>.+)?)?$"
)


@dataclass(frozen=True)
class Pointer:
    """A parsed index-register operand."""
    base: str
    mode: PointerMode = PointerMode.PLAIN
    displacement: Optional[str] = None

    @property
    def dereference(self) -> str:
        if self.mode is PointerMode.DISPLACEMENT:
            return f"[{self.base} + {self.displacement}]"
        return f"[{self.base}]"

    @property
    def increment(self) -> str:
        return f"{self.base} ← {self.base} + 1"

    @property
    def decrement(self) -> str:
        return f"{self.base} ← {self.base} - 1"

    def transfer(self, access: str) -> str:
        """Wrap a memory access with the pointer's side effect, in hardware order."""
        if self.mode is PointerMode.POST_INCREMENT:
            return f"{access}, {self.increment}"
        if self.mode is PointerMode.PRE_DECREMENT:
            return f"{self.decrement}, {access}"
        return access


def parse_pointer(token: str) -> Optional[Pointer]:
    """Parse ``X``, ``X+``, ``-X`` or ``Y+q``. Returns None for anything else."""
    m = _POINTER_RE.match(token.strip())
    if not m:
        return None
    base = m.group('base').upper()
    if m.group('pre'):
        if m.group('post'):
            # "-X+" is not an addressing mode
            return None
        return Pointer(base, PointerMode.PRE_DECREMENT)
    if m.group('disp'):
        return Pointer(base, PointerMode.DISPLACEMENT, m.group('disp'))
    if m.group('post'):
        return Pointer(base, PointerMode.POST_INCREMENT)
    return Pointer(base)


# ──────────────────────────────────────────────
# Template formatters
# ──────────────────────────────────────────────

class OperandFormatter(string.Formatter):
    """``str.format`` with per-family operand conversions.

    The format spec of a replacement field names a conversion, e.g. the
    template ``"{0:reg} ← {1:reg}"`` runs both operands through the
    ``reg`` conversion. Unknown specs fall back to normal formatting.
    """

    conversions: Dict[str, Callable[[str], str]] = {}

    def format_field(self, value, format_spec):
        convert = self.conversions.get(format_spec)
        if convert is not None:
            return convert(str(value))
        return super().format_field(value, format_spec)


_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]+$")

# 8085 register pair names as written in operands → the pair they denote
_I8085_PAIRS = {
    'B': 'BC',
    'D': 'DE',
    'H': 'HL',
    'SP': 'SP',
    'PSW': 'PSW',
}


def _i8085_register(token: str) -> str:
    if token.upper() == 'M':
        return '[HL]'
    return token


def _i8085_pair(token: str) -> str:
    return _I8085_PAIRS.get(token.upper(), token)


def _i8085_hex(token: str) -> str:
    if _HEX_DIGITS.match(token):
        return f"{token}H"
    return token


class I8085OperandFormatter(OperandFormatter):
    """Operand conversions for the 8080/8085 family."""

    conversions = {
        'reg': _i8085_register,
        'pair': _i8085_pair,
        'hex': _i8085_hex,
    }
