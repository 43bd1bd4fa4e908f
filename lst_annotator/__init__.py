"""
Listing Annotator
=================
Turns assembler listing files into per-instruction records annotated with
the status flags each instruction affects and a symbolic register-transfer
rendering of what it does.

Supports: Atmel AVR (.lss) and Intel 8080/8085 (.lst) listings.

Architecture:
    ┌──────────┐    ┌───────────────┐    ┌─────────────┐    ┌──────────────┐
    │ Listing  │───>│ ListingParser │───>│ synthesize  │───>│ OutputManager│
    │ (.lss)   │    │  (RawLine)    │    │ (records)   │    │ (txt/csv/..) │
    └──────────┘    └───────────────┘    └──────┬──────┘    └──────────────┘
                                                │
                                         ┌──────┴──────┐
                                         │KnowledgeBase│
                                         │ avr / i8085 │
                                         └─────────────┘

    - listing.py:   segment-tracking state machine + code-line regex
    - isa.py:       InstructionInfo / OperandShape / OperationRule
    - avr.py, i8085.py: one table per instruction family
    - profiles.py:  per-family configuration (extension, regex, KB)
    - records.py:   DecodedRecord and the synthesizer
    - converter.py: file/directory conversion with structural errors
"""

__version__ = "0.1.0"

from .isa import InstructionInfo, KnowledgeBase, OperandShape, OperationRule
from .listing import ListingParser, ParserState, RawLine, Segment
from .profiles import PROFILES, ListingProfile, UnknownFamilyError, get_profile, profile_for_path
from .records import DecodedRecord, decode_file, decode_lines, decode_text, synthesize
from .converter import (ConversionError, EmptyDirectoryError, InputNotFoundError,
                        WrongExtensionError, convert)


def annotate_source(source: str, family: str = "avr") -> str:
    """Annotate listing text and return it as a plain columnar table.

    Args:
        source: Listing text.
        family: Profile name ('avr' or 'i8085').
    """
    from .output_manager import format_table

    profile = get_profile(family)
    return format_table(decode_text(source, profile), profile)
