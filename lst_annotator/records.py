"""
Record synthesizer: joins parsed listing lines with the knowledge base.

synthesize() never raises. An unknown mnemonic is recorded as absent
flags/symbol (None) and only turned into a display sentinel by
DecodedRecord.as_row().
"""

from __future__ import annotations
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .isa import KnowledgeBase
from .listing import ListingParser, RawLine, Segment, read_listing
from .profiles import ListingProfile, get_profile, profile_for_path

__all__ = [
    'DecodedRecord', 'synthesize', 'decode_lines', 'decode_text', 'decode_file',
    'NO_FLAGS', 'UNKNOWN_FLAGS', 'UNKNOWN_SYMBOL',
]

log = logging.getLogger(__name__)

# Display sentinels (presentation boundary only)
NO_FLAGS = "None"
UNKNOWN_FLAGS = "Unknown"
UNKNOWN_SYMBOL = "???"


@dataclass(frozen=True)
class DecodedRecord:
    """One annotated code line."""
    section: Optional[Segment]
    address: str
    label: Optional[str]
    opcode: str
    mnemonic: str
    flags: Optional[Tuple[str, ...]]
    symbol: Optional[str]
    comment: Optional[str]
    index: Optional[str] = None
    ascii: Optional[str] = None
    line_number: int = 0

    @property
    def known(self) -> bool:
        return self.symbol is not None

    @property
    def flags_text(self) -> str:
        if self.flags is None:
            return UNKNOWN_FLAGS
        return ",".join(self.flags) if self.flags else NO_FLAGS

    @property
    def symbol_text(self) -> str:
        return UNKNOWN_SYMBOL if self.symbol is None else self.symbol

    def as_row(self) -> Dict[str, str]:
        """Display values keyed by column name."""
        return {
            "Index": self.index or "",
            "Section": self.section.value if self.section else "",
            "Address": self.address,
            "Label": self.label or "",
            "Opcode": self.opcode,
            "Mnemonic": self.mnemonic,
            "Flags Affected": self.flags_text,
            "Symbol": self.symbol_text,
            "Comment": self.comment or "",
            "ASCII": self.ascii or "",
        }

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['section'] = self.section.value if self.section else None
        data['flags'] = list(self.flags) if self.flags is not None else None
        return data

    def __str__(self):
        return (f"{self.section.value if self.section else '':<8} {self.address:<8} "
                f"{self.opcode:<10} {self.mnemonic:<35} | {self.flags_text:<10} | "
                f"{self.symbol_text:<30} | {self.comment or ''}")


def synthesize(raw: RawLine, kb: KnowledgeBase) -> DecodedRecord:
    info = kb.lookup(raw.key)
    if info is None:
        log.debug("line %d: unknown mnemonic %r", raw.line_number, raw.key)
        flags, symbol = None, None
    else:
        flags, symbol = info.flags, kb.render(info, raw.mnemonic)

    return DecodedRecord(
        section=raw.section,
        address=raw.address,
        label=raw.label,
        opcode=raw.opcode,
        mnemonic=raw.mnemonic,
        flags=flags,
        symbol=symbol,
        comment=raw.comment,
        index=raw.index,
        ascii=raw.ascii,
        line_number=raw.line_number,
    )


def decode_lines(lines: Iterable[str], profile: ListingProfile) -> List[DecodedRecord]:
    """Parse and annotate listing lines, preserving source order."""
    parser = ListingParser(profile)
    kb = profile.knowledge_base
    return [synthesize(raw, kb) for raw in parser.parse(lines)]


def decode_text(text: str, profile: Union[ListingProfile, str]) -> List[DecodedRecord]:
    if isinstance(profile, str):
        profile = get_profile(profile)
    return decode_lines(text.splitlines(), profile)


def decode_file(path: Union[str, Path],
                profile: Optional[ListingProfile] = None) -> List[DecodedRecord]:
    """Annotate a listing file. The profile defaults to the one matching the extension."""
    if profile is None:
        profile = profile_for_path(path)
        if profile is None:
            raise ValueError(f"No listing profile for extension of {path}")
    records = decode_lines(read_listing(path).splitlines(), profile)
    unknown = sum(1 for r in records if not r.known)
    log.debug("%s: %d records (%d unknown mnemonics)", Path(path).name, len(records), unknown)
    return records
