"""
Atmel AVR instruction table.

Reference: AVR Instruction Set Manual (DS40002198).

Status register bits: I T H S V N Z C. An entry's flags list the bits the
instruction may modify; "None" means SREG is untouched.

Format per entry:
    _ins(MNEMONIC, operands, description, flags, shape, template[, bare])

Templates take operand tokens positionally ({0}, {1}); the indexed shapes
take {reg} and {mem} (see isa.OperationRule).
"""

from __future__ import annotations
from typing import Dict, Optional

from .isa import InstructionInfo, KnowledgeBase, OperandShape, OperationRule, parse_flags
from .operands import OperandFormatter

__all__ = ['MNEMONICS', 'KNOWLEDGE_BASE']


IMP = OperandShape.IMPLIED
REG = OperandShape.REGISTER
IMM = OperandShape.IMMEDIATE
TGT = OperandShape.TARGET
RR = OperandShape.TWO_REGISTER
RK = OperandShape.REGISTER_IMMEDIATE
BT = OperandShape.BIT_TARGET
LDX = OperandShape.INDEXED_LOAD
STX = OperandShape.INDEXED_STORE
PTR = OperandShape.INDEXED_POINTER

ARITH = "Z,C,N,V,S,H"
LOGIC = "Z,N,V,S"

MNEMONICS: Dict[str, InstructionInfo] = {}


def _ins(mnemonic: str, operands: str, description: str, flags: str,
         shape: OperandShape, template: str, bare: Optional[str] = None):
    """Register an instruction entry."""
    MNEMONICS[mnemonic] = InstructionInfo(
        mnemonic=mnemonic,
        operands=operands,
        description=description,
        flags=parse_flags(flags),
        rule=OperationRule(shape, template, bare),
    )


# ── Arithmetic and logic ──
_ins('ADD',    'Rd, Rr', 'Add without Carry',              ARITH,       RR,  "{0} ← {0} + {1}")
_ins('ADC',    'Rd, Rr', 'Add with Carry',                 ARITH,       RR,  "{0} ← {0} + {1} + C")
_ins('ADIW',   'Rd, K',  'Add Immediate to Word',          "Z,C,N,V,S", RK,  "R[{0}+1]:{0} ← R[{0}+1]:{0} + {1}")
_ins('SUB',    'Rd, Rr', 'Subtract without Carry',         ARITH,       RR,  "{0} ← {0} - {1}")
_ins('SUBI',   'Rd, K',  'Subtract Immediate',             ARITH,       RK,  "{0} ← {0} - {1}")
_ins('SBC',    'Rd, Rr', 'Subtract with Carry',            ARITH,       RR,  "{0} ← {0} - {1} - C")
_ins('SBCI',   'Rd, K',  'Subtract Immediate with Carry',  ARITH,       RK,  "{0} ← {0} - {1} - C")
_ins('SBIW',   'Rd, K',  'Subtract Immediate from Word',   "Z,C,N,V,S", RK,  "R[{0}+1]:{0} ← R[{0}+1]:{0} - {1}")
_ins('AND',    'Rd, Rr', 'Logical AND',                    LOGIC,       RR,  "{0} ← {0} ∧ {1}")
_ins('ANDI',   'Rd, K',  'Logical AND with Immediate',     LOGIC,       RK,  "{0} ← {0} ∧ {1}")
_ins('OR',     'Rd, Rr', 'Logical OR',                     LOGIC,       RR,  "{0} ← {0} ∨ {1}")
_ins('ORI',    'Rd, K',  'Logical OR with Immediate',      LOGIC,       RK,  "{0} ← {0} ∨ {1}")
_ins('EOR',    'Rd, Rr', 'Exclusive OR',                   LOGIC,       RR,  "{0} ← {0} ⊕ {1}")
_ins('COM',    'Rd',     "One's Complement",               "Z,C,N,V,S", REG, "{0} ← 0xFF - {0}")
_ins('NEG',    'Rd',     "Two's Complement",               ARITH,       REG, "{0} ← 0x00 - {0}")
_ins('SBR',    'Rd, K',  'Set Bit(s) in Register',         LOGIC,       RK,  "{0} ← {0} ∨ {1}")
_ins('CBR',    'Rd, K',  'Clear Bit(s) in Register',       LOGIC,       RK,  "{0} ← {0} ∧ (0xFF - {1})")
_ins('INC',    'Rd',     'Increment',                      LOGIC,       REG, "{0} ← {0} + 1")
_ins('DEC',    'Rd',     'Decrement',                      LOGIC,       REG, "{0} ← {0} - 1")
_ins('TST',    'Rd',     'Test for Zero or Minus',         LOGIC,       REG, "{0} ← {0} ∧ {0}")
_ins('CLR',    'Rd',     'Clear Register',                 LOGIC,       REG, "{0} ← {0} ⊕ {0}")
_ins('SER',    'Rd',     'Set Register',                   "None",      REG, "{0} ← 0xFF")
_ins('MUL',    'Rd, Rr', 'Multiply Unsigned',              "Z,C",       RR,  "R1:R0 ← {0} × {1}")
_ins('MULS',   'Rd, Rr', 'Multiply Signed',                "Z,C",       RR,  "R1:R0 ← {0} × {1}")
_ins('MULSU',  'Rd, Rr', 'Multiply Signed with Unsigned',  "Z,C",       RR,  "R1:R0 ← {0} × {1}")
_ins('FMUL',   'Rd, Rr', 'Fractional Multiply Unsigned',   "Z,C",       RR,  "R1:R0 ← ({0} × {1}) << 1")
_ins('FMULS',  'Rd, Rr', 'Fractional Multiply Signed',     "Z,C",       RR,  "R1:R0 ← ({0} × {1}) << 1")
_ins('FMULSU', 'Rd, Rr', 'Fractional Multiply Signed with Unsigned', "Z,C", RR, "R1:R0 ← ({0} × {1}) << 1")
_ins('DES',    'K',      'Data Encryption',                "None",      IMM, "Encrypt/Decrypt(R15:R0, {0})")

# ── Jumps, calls and returns ──
_ins('RJMP',   'k',      'Relative Jump',                  "None", TGT, "PC ← PC + {0} + 1")
_ins('IJMP',   '-',      'Indirect Jump to (Z)',           "None", IMP, "PC ← Z")
_ins('EIJMP',  '-',      'Extended Indirect Jump to (Z)',  "None", IMP, "PC ← EIND:Z")
_ins('JMP',    'k',      'Jump',                           "None", TGT, "PC ← {0}")
_ins('RCALL',  'k',      'Relative Call Subroutine',       "None", TGT, "PC ← PC + {0} + 1")
_ins('ICALL',  '-',      'Indirect Call to (Z)',           "None", IMP, "PC ← Z")
_ins('EICALL', '-',      'Extended Indirect Call to (Z)',  "None", IMP, "PC ← EIND:Z")
_ins('CALL',   'k',      'Call Subroutine',                "None", TGT, "PC ← {0}")
_ins('RET',    '-',      'Subroutine Return',              "None", IMP, "PC ← STACK")
_ins('RETI',   '-',      'Interrupt Return',               "I",    IMP, "PC ← STACK")

# ── Compare and skip ──
_ins('CPSE',   'Rd, Rr', 'Compare, Skip if Equal',         "None", RR,  "if ({0} = {1}) skip next")
_ins('CP',     'Rd, Rr', 'Compare',                        ARITH,  RR,  "{0} - {1}")
_ins('CPC',    'Rd, Rr', 'Compare with Carry',             ARITH,  RR,  "{0} - {1} - C")
_ins('CPI',    'Rd, K',  'Compare with Immediate',         ARITH,  RK,  "{0} - {1}")
_ins('SBRC',   'Rr, b',  'Skip if Bit in Register Cleared', "None", RK, "if ({0}({1}) = 0) skip next")
_ins('SBRS',   'Rr, b',  'Skip if Bit in Register Set',    "None", RK,  "if ({0}({1}) = 1) skip next")
_ins('SBIC',   'A, b',   'Skip if Bit in I/O Register Cleared', "None", RK, "if (I/O({0},{1}) = 0) skip next")
_ins('SBIS',   'A, b',   'Skip if Bit in I/O Register Set', "None", RK, "if (I/O({0},{1}) = 1) skip next")

# ── Conditional branches ──
_ins('BRBS',   's, k',   'Branch if Status Flag Set',      "None", BT,  "if (SREG({0}) = 1) PC ← PC + {1} + 1")
_ins('BRBC',   's, k',   'Branch if Status Flag Cleared',  "None", BT,  "if (SREG({0}) = 0) PC ← PC + {1} + 1")

for _mnem, _cond, _desc in [
    ('BREQ', "Z = 1",     'Branch if Equal'),
    ('BRNE', "Z = 0",     'Branch if Not Equal'),
    ('BRCS', "C = 1",     'Branch if Carry Set'),
    ('BRCC', "C = 0",     'Branch if Carry Cleared'),
    ('BRSH', "C = 0",     'Branch if Same or Higher'),
    ('BRLO', "C = 1",     'Branch if Lower'),
    ('BRMI', "N = 1",     'Branch if Minus'),
    ('BRPL', "N = 0",     'Branch if Plus'),
    ('BRGE', "N ⊕ V = 0", 'Branch if Greater or Equal, Signed'),
    ('BRLT', "N ⊕ V = 1", 'Branch if Less Than, Signed'),
    ('BRHS', "H = 1",     'Branch if Half Carry Flag Set'),
    ('BRHC', "H = 0",     'Branch if Half Carry Flag Cleared'),
    ('BRTS', "T = 1",     'Branch if T Flag Set'),
    ('BRTC', "T = 0",     'Branch if T Flag Cleared'),
    ('BRVS', "V = 1",     'Branch if Overflow Flag Set'),
    ('BRVC', "V = 0",     'Branch if Overflow Flag Cleared'),
    ('BRIE', "I = 1",     'Branch if Interrupt Enabled'),
    ('BRID', "I = 0",     'Branch if Interrupt Disabled'),
]:
    _ins(_mnem, 'k', _desc, "None", TGT, f"if ({_cond}) PC ← PC + {{0}} + 1")

# ── Data transfer ──
_ins('MOV',    'Rd, Rr', 'Copy Register',                  "None", RR,  "{0} ← {1}")
_ins('MOVW',   'Rd, Rr', 'Copy Register Pair',             "None", RR,  "R[{0}+1]:{0} ← R[{1}+1]:{1}")
_ins('LDI',    'Rd, K',  'Load Immediate',                 "None", RK,  "{0} ← {1}")
_ins('LDS',    'Rd, k',  'Load Direct from Data Space',    "None", RK,  "{0} ← [{1}]")
_ins('LD',     'Rd, X',  'Load Indirect',                  "None", LDX, "{reg} ← {mem}")
_ins('LDD',    'Rd, Y+q', 'Load Indirect with Displacement', "None", LDX, "{reg} ← {mem}")
_ins('STS',    'k, Rr',  'Store Direct to Data Space',     "None", RK,  "[{0}] ← {1}")
_ins('ST',     'X, Rr',  'Store Indirect',                 "None", STX, "{mem} ← {reg}")
_ins('STD',    'Y+q, Rr', 'Store Indirect with Displacement', "None", STX, "{mem} ← {reg}")
_ins('LPM',    'Rd, Z',  'Load Program Memory',            "None", LDX, "{reg} ← {mem}", bare="R0 ← [Z]")
_ins('ELPM',   'Rd, Z',  'Extended Load Program Memory',   "None", LDX, "{reg} ← {mem}", bare="R0 ← [RAMPZ:Z]")
_ins('SPM',    'Z+',     'Store Program Memory',           "None", PTR, "{mem} ← R1:R0", bare="[Z] ← R1:R0")
_ins('IN',     'Rd, A',  'In From I/O Location',           "None", RK,  "{0} ← I/O({1})")
_ins('OUT',    'A, Rr',  'Out To I/O Location',            "None", RK,  "I/O({0}) ← {1}")
_ins('PUSH',   'Rr',     'Push Register on Stack',         "None", REG, "STACK ← {0}")
_ins('POP',    'Rd',     'Pop Register from Stack',        "None", REG, "{0} ← STACK")
_ins('XCH',    'Z, Rd',  'Exchange',                       "None", STX, "{mem} ↔ {reg}")
_ins('LAS',    'Z, Rd',  'Load and Set',                   "None", STX, "{mem} ← {reg} ∨ {mem}, {reg} ← {mem}")
_ins('LAC',    'Z, Rd',  'Load and Clear',                 "None", STX, "{mem} ← (0xFF - {reg}) ∧ {mem}, {reg} ← {mem}")
_ins('LAT',    'Z, Rd',  'Load and Toggle',                "None", STX, "{mem} ← {reg} ⊕ {mem}, {reg} ← {mem}")

# ── Bit and bit-test ──
_ins('LSL',    'Rd',     'Logical Shift Left',             ARITH,       REG, "{0} ← {0} << 1")
_ins('LSR',    'Rd',     'Logical Shift Right',            "Z,C,N,V,S", REG, "{0} ← {0} >> 1")
_ins('ROL',    'Rd',     'Rotate Left Through Carry',      ARITH,       REG, "{0} ← ({0} << 1) + C")
_ins('ROR',    'Rd',     'Rotate Right Through Carry',     "Z,C,N,V,S", REG, "{0} ← ({0} >> 1) + (C << 7)")
_ins('ASR',    'Rd',     'Arithmetic Shift Right',         "Z,C,N,V,S", REG, "{0} ← {0} >> 1 (sign kept)")
_ins('SWAP',   'Rd',     'Swap Nibbles',                   "None",      REG, "{0}(7:4) ↔ {0}(3:0)")
_ins('SBI',    'A, b',   'Set Bit in I/O Register',        "None",      RK,  "I/O({0},{1}) ← 1")
_ins('CBI',    'A, b',   'Clear Bit in I/O Register',      "None",      RK,  "I/O({0},{1}) ← 0")
_ins('BST',    'Rr, b',  'Bit Store from Register to T',   "T",         RK,  "T ← {0}({1})")
_ins('BLD',    'Rd, b',  'Bit Load from T to Register',    "None",      RK,  "{0}({1}) ← T")
_ins('BSET',   's',      'Flag Set',                       "I,T,H,S,V,N,Z,C", IMM, "SREG({0}) ← 1")
_ins('BCLR',   's',      'Flag Clear',                     "I,T,H,S,V,N,Z,C", IMM, "SREG({0}) ← 0")

for _flag, _name in [
    ('C', 'Carry'), ('N', 'Negative'), ('Z', 'Zero'), ('I', 'Global Interrupt'),
    ('S', 'Signed'), ('V', 'Overflow'), ('T', 'T'), ('H', 'Half Carry'),
]:
    _ins(f'SE{_flag}', '-', f'Set {_name} Flag', _flag, IMP, f"{_flag} ← 1")
    _ins(f'CL{_flag}', '-', f'Clear {_name} Flag', _flag, IMP, f"{_flag} ← 0")

# ── MCU control ──
_ins('BREAK',  '-',      'Break',                          "None", IMP, "On-chip debug break")
_ins('NOP',    '-',      'No Operation',                   "None", IMP, "No operation")
_ins('SLEEP',  '-',      'Sleep',                          "None", IMP, "Sleep")
_ins('WDR',    '-',      'Watchdog Reset',                 "None", IMP, "WDT ← 0")


KNOWLEDGE_BASE = KnowledgeBase('avr', MNEMONICS, OperandFormatter())
