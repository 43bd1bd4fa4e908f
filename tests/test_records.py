"""
Record synthesis tests: parsed lines joined with the knowledge base, and
the display sentinels applied at the presentation boundary.
"""

import pytest

from lst_annotator import annotate_source
from lst_annotator.listing import RawLine, Segment
from lst_annotator.profiles import PROFILES, UnknownFamilyError
from lst_annotator.records import (
    NO_FLAGS,
    UNKNOWN_FLAGS,
    UNKNOWN_SYMBOL,
    decode_file,
    decode_text,
    synthesize,
)


AVR_KB = PROFILES["avr"].knowledge_base


def _raw(mnemonic: str, **kw) -> RawLine:
    fields = dict(line_number=1, section=Segment.CODE, address="000000", opcode="0000",
                  mnemonic=mnemonic)
    fields.update(kw)
    return RawLine(**fields)


# ─── synthesize ─────────────────────

class TestSynthesize:

    def test_known_mnemonic(self):
        rec = synthesize(_raw("ADD R1, R2"), AVR_KB)
        assert rec.known
        assert rec.flags == ("Z", "C", "N", "V", "S", "H")
        assert rec.symbol == "R1 ← R1 + R2"
        assert rec.flags_text == "Z,C,N,V,S,H"

    def test_unknown_mnemonic(self):
        rec = synthesize(_raw("FOO R1"), AVR_KB)
        assert not rec.known
        assert rec.flags is None
        assert rec.symbol is None
        assert rec.flags_text == UNKNOWN_FLAGS
        assert rec.symbol_text == UNKNOWN_SYMBOL

    def test_no_flags_is_not_unknown(self):
        rec = synthesize(_raw("MOV R1, R2"), AVR_KB)
        assert rec.flags == ()
        assert rec.flags_text == NO_FLAGS
        assert rec.symbol == "R1 ← R2"

    def test_carries_raw_fields(self):
        raw = _raw("ret", label="done", comment="bye", line_number=42)
        rec = synthesize(raw, AVR_KB)
        assert rec.label == "done"
        assert rec.comment == "bye"
        assert rec.line_number == 42
        assert rec.mnemonic == "ret"

    def test_malformed_operands_keep_raw_text(self):
        rec = synthesize(_raw("ADD R1"), AVR_KB)
        assert rec.known
        assert rec.symbol == "ADD R1"


# ─── Display rows ─────────────────────

class TestRows:

    def test_as_row_sentinels(self):
        row = synthesize(_raw("FOO"), AVR_KB).as_row()
        assert row["Flags Affected"] == "Unknown"
        assert row["Symbol"] == "???"
        assert row["Label"] == ""
        assert row["Section"] == "code"

    def test_as_row_covers_every_column(self):
        row = synthesize(_raw("NOP"), AVR_KB).as_row()
        for profile in PROFILES.values():
            assert set(profile.columns) <= set(row), profile.name

    def test_to_dict_is_json_ready(self):
        data = synthesize(_raw("SEC"), AVR_KB).to_dict()
        assert data["section"] == "code"
        assert data["flags"] == ["C"]
        assert data["symbol"] == "C ← 1"

    def test_to_dict_unknown(self):
        data = synthesize(_raw("FOO"), AVR_KB).to_dict()
        assert data["flags"] is None
        assert data["symbol"] is None


# ─── decode_text / decode_file ─────────────────────

class TestDecode:

    def test_avr_listing(self, avr_listing):
        records = decode_text(avr_listing, "avr")
        assert len(records) == 10
        by_mnemonic = {r.mnemonic: r for r in records}
        assert by_mnemonic["ld r17, X+"].symbol == "r17 ← [X], X ← X + 1"
        assert by_mnemonic["ldd r18, Y+1"].symbol == "r18 ← [Y + 1]"
        assert by_mnemonic["rjmp loop"].symbol == "PC ← PC + loop + 1"
        assert by_mnemonic["ret"].flags_text == "None"
        assert not by_mnemonic["foo r1"].known

    def test_source_order_preserved(self, avr_listing):
        records = decode_text(avr_listing, PROFILES["avr"])
        numbers = [r.line_number for r in records]
        assert numbers == sorted(numbers)

    def test_i8085_listing(self, i8085_listing):
        records = decode_text(i8085_listing, "i8085")
        assert [r.symbol for r in records] == [
            "A ← 05H",
            "B ← 05H",
            "A ← A + B",
            "PC ← START",
            "Stop",
        ]
        assert records[2].flags_text == "Z,S,P,C,AC"
        assert records[0].as_row()["ASCII"] == ">."
        assert records[0].as_row()["Index"] == "0001"

    def test_i8085_call_to_hex_letter_label(self):
        records = decode_text("0002 2002 CD0030 CALL ADD1 .\n", "i8085")
        assert records[0].symbol == "STACK ← PC, PC ← ADD1"

    def test_unknown_family(self, avr_listing):
        with pytest.raises(UnknownFamilyError):
            decode_text(avr_listing, "z80")

    def test_decode_file_picks_profile_by_extension(self, tmp_path, i8085_listing):
        path = tmp_path / "prog.lst"
        path.write_text(i8085_listing, encoding="utf-8")
        records = decode_file(path)
        assert len(records) == 5

    def test_decode_file_unknown_extension(self, tmp_path, i8085_listing):
        path = tmp_path / "prog.asm"
        path.write_text(i8085_listing, encoding="utf-8")
        with pytest.raises(ValueError):
            decode_file(path)

    def test_annotate_source(self, avr_listing):
        table = annotate_source(avr_listing)
        lines = table.splitlines()
        assert lines[0].startswith("Section")
        assert set(lines[1]) == {"-"}
        assert len(lines) == 12
        assert "???" in table
