"""
Listing parser: finds the executable lines of an assembler listing.

Single pass, line by line, streaming. A two-state machine tracks whether
the active segment is the code segment:

    OUTSIDE_CODE ──.cseg──> INSIDE_CODE
    INSIDE_CODE  ──.dseg/.eseg──> OUTSIDE_CODE

A segment directive always wins over code-line matching and consumes the
line. Outside the code segment nothing else is tested. Inside it, lines
that don't match the profile's code-line pattern (blank lines, headers,
directives, padding) are skipped without complaint.
"""

from __future__ import annotations
import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Union

if TYPE_CHECKING:
    from .profiles import ListingProfile

__all__ = ['Segment', 'ParserState', 'RawLine', 'ListingParser', 'read_listing']

log = logging.getLogger(__name__)


class Segment(enum.Enum):
    CODE = "code"
    DATA = "data"
    EEPROM = "eeprom"

    @property
    def directive(self) -> str:
        return _DIRECTIVES[self]

    @classmethod
    def from_directive(cls, text: str) -> "Segment":
        return _SEGMENTS[text.lower().lstrip('.')]


_DIRECTIVES = {
    Segment.CODE: ".cseg",
    Segment.DATA: ".dseg",
    Segment.EEPROM: ".eseg",
}
_SEGMENTS = {
    "cseg": Segment.CODE,
    "dseg": Segment.DATA,
    "eseg": Segment.EEPROM,
}

# Only a directive at the start of a line switches segments; a mention in a
# comment does not.
SEGMENT_DIRECTIVE = re.compile(r"^\s*\.(cseg|dseg|eseg)\b", re.IGNORECASE)


class ParserState(enum.Enum):
    OUTSIDE_CODE = "outside_code"
    INSIDE_CODE = "inside_code"


@dataclass(frozen=True)
class RawLine:
    """Fields extracted from one code line, before any instruction lookup."""
    line_number: int
    section: Optional[Segment]
    address: str
    opcode: str
    mnemonic: str
    label: Optional[str] = None
    comment: Optional[str] = None
    index: Optional[str] = None
    ascii: Optional[str] = None

    @property
    def key(self) -> str:
        """Upper-cased first token of the mnemonic text."""
        parts = self.mnemonic.split(None, 1)
        return parts[0].upper() if parts else ""


def read_listing(path: Union[str, Path]) -> str:
    """Read a listing file as text. Stray high bytes are replaced, not fatal."""
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        return f.read()


class ListingParser:
    """Parses listing text for one profile. One instance per parse."""

    def __init__(self, profile: "ListingProfile"):
        self.profile = profile
        self.reset()

    def reset(self):
        if self.profile.starts_in_code:
            self.state = ParserState.INSIDE_CODE
        else:
            self.state = ParserState.OUTSIDE_CODE
        self.section: Optional[Segment] = None
        self.lines_seen = 0
        self.lines_matched = 0

    def parse(self, lines: Iterable[str]) -> Iterator[RawLine]:
        """Yield a RawLine for every code line, in source order."""
        self.reset()
        for line_number, line in enumerate(lines, start=1):
            self.lines_seen += 1
            line = line.rstrip('\r\n')

            if self.profile.segment_directives and self._switch_segment(line):
                continue
            if self.state is not ParserState.INSIDE_CODE:
                continue

            raw = self._match_code_line(line, line_number)
            if raw is None:
                continue
            self.lines_matched += 1
            yield raw

        log.debug("%s: %d lines read, %d code lines",
                  self.profile.name, self.lines_seen, self.lines_matched)

    def parse_text(self, text: str) -> List[RawLine]:
        return list(self.parse(text.splitlines()))

    def parse_file(self, path: Union[str, Path]) -> List[RawLine]:
        return self.parse_text(read_listing(path))

    # ── internals ──

    def _switch_segment(self, line: str) -> bool:
        m = SEGMENT_DIRECTIVE.match(line)
        if not m:
            return False
        self.section = Segment.from_directive(m.group(1))
        if self.section is Segment.CODE:
            self.state = ParserState.INSIDE_CODE
        else:
            self.state = ParserState.OUTSIDE_CODE
        log.debug("segment → %s (%s)", self.section.value, self.state.value)
        return True

    def _match_code_line(self, line: str, line_number: int) -> Optional[RawLine]:
        m = self.profile.code_line.match(line)
        if not m:
            return None
        fields = m.groupdict()

        mnemonic = fields['mnemonic'].strip()
        ascii_col = None
        if self.profile.trailing_ascii:
            parts = mnemonic.rsplit(None, 1)
            if len(parts) == 2:
                mnemonic, ascii_col = parts[0].rstrip(), parts[1]

        return RawLine(
            line_number=line_number,
            section=self.section,
            address=fields['address'].strip(),
            opcode=fields['opcode'].strip(),
            mnemonic=mnemonic,
            label=fields.get('label') or None,
            comment=(fields.get('comment') or '').strip() or None,
            index=fields.get('index'),
            ascii=ascii_col,
        )
