"""
Listing profiles: per-family parser and knowledge-base configuration.

Each supported instruction-set family gets one ListingProfile. The parser,
the synthesizer and the converter take a profile rather than hard-coding a
family, so adding a family means adding a table module and a profile here.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Pattern, Tuple, Union

from . import avr, i8085
from .isa import KnowledgeBase

__all__ = [
    'ListingProfile', 'PROFILES', 'COLUMNS', 'UnknownFamilyError',
    'get_profile', 'profile_for_path', 'eligible_extensions',
]


class UnknownFamilyError(KeyError):
    """Raised when a family key is not in PROFILES."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown instruction family: {name!r} "
                         f"(choose from {', '.join(PROFILES)})")

    def __str__(self):
        return self.args[0]


COLUMNS: Tuple[str, ...] = (
    "Section", "Address", "Label", "Opcode", "Mnemonic",
    "Flags Affected", "Symbol", "Comment",
)

_LABEL = r"(?:(?P<label>[A-Za-z_.?@$][\w.?@$]*):\s*)?"
_MNEMONIC = r"(?P<mnemonic>[A-Za-z].*?)\s*(?:;\s*(?P<comment>.*))?$"

# AVRASM listing:  C:000034 e50f      loop: ldi r16, 0x5F   ; comment
# Opcode groups are whole 2- or 4-digit hex words so that a mnemonic made
# of hex letters (ADD, ADC) cannot be absorbed into the opcode field.
AVR_CODE_LINE = re.compile(
    r"^\s*(?:[CDEcde]:)?(?P<address>[0-9A-Fa-f]{4,8})\s+"
    r"(?P<opcode>[0-9A-Fa-f]{2}(?:[0-9A-Fa-f]{2})?(?:[ \t][0-9A-Fa-f]{2}(?:[0-9A-Fa-f]{2})?)*)\s+"
    + _LABEL + _MNEMONIC
)

# 8085 listing:  0003 2002 3E05 MVI A,05 >.
I8085_CODE_LINE = re.compile(
    r"^\s*(?P<index>\d+)\s+(?P<address>[0-9A-Fa-f]{4})\s+"
    r"(?P<opcode>[0-9A-Fa-f]{2,8})\s+"
    + _LABEL + _MNEMONIC
)


@dataclass(frozen=True)
class ListingProfile:
    name: str
    description: str
    extension: str
    knowledge_base: KnowledgeBase
    code_line: Pattern
    segment_directives: bool = True
    starts_in_code: bool = False
    trailing_ascii: bool = False
    columns: Tuple[str, ...] = COLUMNS

    def matches(self, path: Union[str, Path]) -> bool:
        return Path(path).suffix.lower() == self.extension


PROFILES: Dict[str, ListingProfile] = {
    "avr": ListingProfile(
        name="avr",
        description="Atmel AVR assembler listing (.lss)",
        extension=".lss",
        knowledge_base=avr.KNOWLEDGE_BASE,
        code_line=AVR_CODE_LINE,
    ),
    "i8085": ListingProfile(
        name="i8085",
        description="Intel 8080/8085 assembler listing (.lst)",
        extension=".lst",
        knowledge_base=i8085.KNOWLEDGE_BASE,
        code_line=I8085_CODE_LINE,
        segment_directives=False,
        starts_in_code=True,
        trailing_ascii=True,
        columns=("Index",) + COLUMNS + ("ASCII",),
    ),
}


def get_profile(name: str) -> ListingProfile:
    try:
        return PROFILES[name.lower()]
    except KeyError:
        raise UnknownFamilyError(name) from None


def profile_for_path(path: Union[str, Path]) -> Optional[ListingProfile]:
    """Profile whose extension matches ``path``, or None."""
    for profile in PROFILES.values():
        if profile.matches(path):
            return profile
    return None


def eligible_extensions(profile: Optional[ListingProfile] = None) -> Tuple[str, ...]:
    if profile is not None:
        return (profile.extension,)
    return tuple(p.extension for p in PROFILES.values())
