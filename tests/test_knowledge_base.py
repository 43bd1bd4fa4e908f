"""
Knowledge base tests: lookups, flag sets and symbolic operations for the
AVR and 8085 instruction tables.
"""

import pytest

from lst_annotator import avr, i8085
from lst_annotator.isa import OperandShape, OperationRule, parse_flags


AVR = avr.KNOWLEDGE_BASE
I85 = i8085.KNOWLEDGE_BASE


def _avr(line: str) -> str:
    info = AVR.lookup(line.split()[0])
    assert info is not None, line
    return AVR.render(info, line)


def _i85(line: str) -> str:
    info = I85.lookup(line.split()[0])
    assert info is not None, line
    return I85.render(info, line)


class TestLookup:

    def test_case_insensitive(self):
        assert AVR.lookup("add") is AVR.lookup("ADD")
        assert "add" in AVR
        assert "Mov" in I85

    def test_unknown_is_none(self):
        assert AVR.lookup("FOO") is None
        assert I85.lookup("LDI") is None
        assert 42 not in AVR

    def test_keys_match_mnemonics(self):
        for kb in (AVR, I85):
            for key, info in kb.entries.items():
                assert key == info.mnemonic
                assert key == key.upper()

    def test_table_sizes(self):
        assert len(AVR) >= 110
        assert len(I85) >= 75

    def test_read_only(self):
        with pytest.raises(TypeError):
            AVR.entries["NEW"] = AVR.lookup("NOP")

    def test_every_entry_renders(self):
        """No template may blow up, whatever operands it gets."""
        for kb in (AVR, I85):
            for key in kb:
                info = kb.lookup(key)
                for line in (key, f"{key} R1", f"{key} B, 05", f"{key} Z+, R1, R2"):
                    assert isinstance(kb.render(info, line), str)


class TestFlags:

    def test_parse_flags(self):
        assert parse_flags("Z,C,N") == ("Z", "C", "N")
        assert parse_flags("None") == ()
        assert parse_flags(" ") == ()

    def test_avr_arithmetic(self):
        assert AVR.lookup("ADD").flags == ("Z", "C", "N", "V", "S", "H")
        assert AVR.lookup("ADIW").flags == ("Z", "C", "N", "V", "S")

    def test_avr_flag_instructions(self):
        assert AVR.lookup("SEC").flags == ("C",)
        assert AVR.lookup("CLI").flags == ("I",)
        assert AVR.lookup("SET").flags == ("T",)
        assert AVR.lookup("RETI").flags == ("I",)

    def test_avr_no_flags(self):
        assert AVR.lookup("MOV").flags == ()
        assert AVR.lookup("SER").flags == ()

    def test_8085_logical_forced_values(self):
        assert I85.lookup("ANA").flags == ("Z", "S", "P", "C=0", "AC=1")
        assert I85.lookup("XRI").flags == ("Z", "S", "P", "C=0", "AC=0")

    def test_8085_increment_keeps_carry(self):
        assert "C" not in I85.lookup("INR").flags
        assert I85.lookup("INX").flags == ()


class TestAvrOperations:

    def test_two_register_arithmetic(self):
        assert _avr("ADD R1, R2") == "R1 ← R1 + R2"
        assert _avr("adc r4,r5") == "r4 ← r4 + r5 + C"
        assert _avr("EOR R0, R0") == "R0 ← R0 ⊕ R0"

    def test_register_immediate(self):
        assert _avr("LDI R16, 0x5F") == "R16 ← 0x5F"
        assert _avr("ADIW R24, 1") == "R[R24+1]:R24 ← R[R24+1]:R24 + 1"

    def test_single_register(self):
        assert _avr("INC R5") == "R5 ← R5 + 1"
        assert _avr("CLR R1") == "R1 ← R1 ⊕ R1"

    def test_implied_ignores_operands(self):
        assert _avr("RET") == "PC ← STACK"
        assert _avr("SEC") == "C ← 1"
        assert _avr("NOP") == "No operation"

    def test_branches(self):
        assert _avr("RJMP loop") == "PC ← PC + loop + 1"
        assert _avr("BREQ done") == "if (Z = 1) PC ← PC + done + 1"
        assert _avr("BRBS 1, skip") == "if (SREG(1) = 1) PC ← PC + skip + 1"

    def test_io(self):
        assert _avr("OUT SPL, R16") == "I/O(SPL) ← R16"
        assert _avr("IN R0, PINB") == "R0 ← I/O(PINB)"
        assert _avr("SBI PORTB, 5") == "I/O(PORTB,5) ← 1"

    def test_direct_data_space(self):
        assert _avr("LDS R16, 0x0100") == "R16 ← [0x0100]"
        assert _avr("STS 0x0100, R16") == "[0x0100] ← R16"

    def test_post_increment_load(self):
        """Dereference first, then increment."""
        assert _avr("LD R3, X+") == "R3 ← [X], X ← X + 1"

    def test_pre_decrement_load(self):
        """Decrement first, then dereference."""
        assert _avr("LD R3, -X") == "X ← X - 1, R3 ← [X]"

    def test_plain_indirect(self):
        assert _avr("LD R3, X") == "R3 ← [X]"

    def test_displacement(self):
        assert _avr("LDD R4, Y+2") == "R4 ← [Y + 2]"
        assert _avr("LDD R4, Y + 2") == "R4 ← [Y + 2]"
        assert _avr("STD Z+5, R1") == "[Z + 5] ← R1"

    def test_indirect_store(self):
        assert _avr("ST X+, R5") == "[X] ← R5, X ← X + 1"
        assert _avr("ST -Z, R0") == "Z ← Z - 1, [Z] ← R0"

    def test_program_memory(self):
        assert _avr("LPM") == "R0 ← [Z]"
        assert _avr("LPM R2, Z+") == "R2 ← [Z], Z ← Z + 1"
        assert _avr("ELPM") == "R0 ← [RAMPZ:Z]"

    def test_store_program_memory(self):
        assert _avr("SPM") == "[Z] ← R1:R0"
        assert _avr("spm Z+") == "[Z] ← R1:R0, Z ← Z + 1"

    def test_malformed_returns_raw_text(self):
        assert _avr("ADD R1") == "ADD R1"
        assert _avr("INC") == "INC"
        assert _avr("LD R3") == "LD R3"


class TestI8085Operations:

    def test_memory_placeholder(self):
        assert _i85("MOV A, M") == "A ← [HL]"
        assert _i85("MOV M,B") == "[HL] ← B"
        assert _i85("INR M") == "[HL] ← [HL] + 1"

    def test_immediates(self):
        assert _i85("MVI B,3F") == "B ← 3FH"
        assert _i85("ADI 10") == "A ← A + 10H"
        assert _i85("CPI 0FFH") == "A - 0FFH"

    def test_register_pairs(self):
        assert _i85("LXI H,2050") == "HL ← 2050H"
        assert _i85("STAX D") == "[DE] ← A"
        assert _i85("INX H") == "HL ← HL + 1"
        assert _i85("DAD B") == "HL ← HL + BC"
        assert _i85("PUSH PSW") == "STACK ← PSW"

    def test_direct_addressing(self):
        assert _i85("LDA 2050") == "A ← [2050H]"
        assert _i85("STA 2051H") == "[2051H] ← A"
        assert _i85("SHLD 3000") == "[3000H] ← L, [3000H+1] ← H"

    def test_accumulator_arithmetic(self):
        assert _i85("ADD B") == "A ← A + B"
        assert _i85("SBB M") == "A ← A - [HL] - C"
        assert _i85("ANA C") == "A ← A ∧ C"

    def test_branches(self):
        assert _i85("JMP START") == "PC ← START"
        assert _i85("JNZ LOOP") == "if (Z = 0) PC ← LOOP"
        assert _i85("CALL 2100") == "STACK ← PC, PC ← 2100"
        assert _i85("RZ") == "if (Z = 1) PC ← STACK"

    def test_hex_looking_labels_kept_as_written(self):
        assert _i85("CALL ADD1") == "STACK ← PC, PC ← ADD1"
        assert _i85("JMP FADE") == "PC ← FADE"
        assert _i85("JC BEEF") == "if (C = 1) PC ← BEEF"
        assert _i85("CNZ ACE") == "if (Z = 0) STACK ← PC, PC ← ACE"
        # data operands still get the suffix
        assert _i85("LXI H,CAFE") == "HL ← CAFEH"

    def test_implied(self):
        assert _i85("HLT") == "Stop"
        assert _i85("XCHG") == "HL ↔ DE"
        assert _i85("STC") == "C ← 1"

    def test_malformed_returns_raw_text(self):
        assert _i85("MVI A") == "MVI A"
        assert _i85("MOV") == "MOV"


class TestOperationRule:

    def test_bare_only_without_operands(self):
        rule = OperationRule(OperandShape.INDEXED_LOAD, "{reg} ← {mem}", bare="R0 ← [Z]")
        assert rule.render("LPM") == "R0 ← [Z]"
        assert rule.render("LPM R5, Z") == "R5 ← [Z]"
        # one operand is neither bare nor complete
        assert rule.render("LPM R5") == "LPM R5"

    def test_indexed_non_pointer_operand(self):
        rule = OperationRule(OperandShape.INDEXED_LOAD, "{reg} ← {mem}")
        assert rule.render("LD R1, 0x100") == "R1 ← [0x100]"

    def test_arity(self):
        assert OperandShape.IMPLIED.arity == 0
        assert OperandShape.TARGET.arity == 1
        assert OperandShape.INDEXED_STORE.arity == 2
        assert OperandShape.INDEXED_POINTER.arity == 1
        assert OperandShape.INDEXED_POINTER.indexed
