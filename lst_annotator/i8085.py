"""
Intel 8080/8085 instruction table.

Reference: Intel 8080/8085 Assembly Language Programming Manual (1977).

Flags: Z (zero), S (sign), P (parity), C (carry), AC (auxiliary carry).
A forced result is written as C=0 / AC=1.

Operand conversions used in the templates (see operands.I8085OperandFormatter):
  {0:reg}   register or memory placeholder, M → [HL]
  {0:pair}  register pair, B → BC, D → DE, H → HL
  {0:hex}   numeric literal, 2050 → 2050H

Branch targets are written as they appear (usually labels, which may well
be spelled with hex letters only, e.g. ADD1 or FADE).
"""

from __future__ import annotations
from typing import Dict

from .isa import InstructionInfo, KnowledgeBase, OperandShape, OperationRule, parse_flags
from .operands import I8085OperandFormatter

__all__ = ['MNEMONICS', 'KNOWLEDGE_BASE']


IMP = OperandShape.IMPLIED
REG = OperandShape.REGISTER
IMM = OperandShape.IMMEDIATE
TGT = OperandShape.TARGET
RR = OperandShape.TWO_REGISTER
RK = OperandShape.REGISTER_IMMEDIATE

ALL = "Z,S,P,C,AC"

MNEMONICS: Dict[str, InstructionInfo] = {}


def _ins(mnemonic: str, operands: str, description: str, flags: str,
         shape: OperandShape, template: str):
    """Register an instruction entry."""
    MNEMONICS[mnemonic] = InstructionInfo(
        mnemonic=mnemonic,
        operands=operands,
        description=description,
        flags=parse_flags(flags),
        rule=OperationRule(shape, template),
    )


# ── Data transfer ──
_ins('MOV',  'r1, r2',    'Move register to register',    "None", RR,  "{0:reg} ← {1:reg}")
_ins('MVI',  'r, data',   'Move immediate',               "None", RK,  "{0:reg} ← {1:hex}")
_ins('LXI',  'rp, data16', 'Load register pair immediate', "None", RK, "{0:pair} ← {1:hex}")
_ins('LDA',  'addr',      'Load accumulator direct',      "None", IMM, "A ← [{0:hex}]")
_ins('STA',  'addr',      'Store accumulator direct',     "None", IMM, "[{0:hex}] ← A")
_ins('LHLD', 'addr',      'Load H and L direct',          "None", IMM, "L ← [{0:hex}], H ← [{0:hex}+1]")
_ins('SHLD', 'addr',      'Store H and L direct',         "None", IMM, "[{0:hex}] ← L, [{0:hex}+1] ← H")
_ins('LDAX', 'rp',        'Load accumulator indirect',    "None", REG, "A ← [{0:pair}]")
_ins('STAX', 'rp',        'Store accumulator indirect',   "None", REG, "[{0:pair}] ← A")
_ins('XCHG', '-',         'Exchange H and L with D and E', "None", IMP, "HL ↔ DE")

# ── Arithmetic ──
_ins('ADD',  'r',         'Add register to A',            ALL,    REG, "A ← A + {0:reg}")
_ins('ADC',  'r',         'Add register to A with carry', ALL,    REG, "A ← A + {0:reg} + C")
_ins('ADI',  'data',      'Add immediate to A',           ALL,    IMM, "A ← A + {0:hex}")
_ins('ACI',  'data',      'Add immediate to A with carry', ALL,   IMM, "A ← A + {0:hex} + C")
_ins('SUB',  'r',         'Subtract register from A',     ALL,    REG, "A ← A - {0:reg}")
_ins('SBB',  'r',         'Subtract register from A with borrow', ALL, REG, "A ← A - {0:reg} - C")
_ins('SUI',  'data',      'Subtract immediate from A',    ALL,    IMM, "A ← A - {0:hex}")
_ins('SBI',  'data',      'Subtract immediate from A with borrow', ALL, IMM, "A ← A - {0:hex} - C")
_ins('INR',  'r',         'Increment register',           "Z,S,P,AC", REG, "{0:reg} ← {0:reg} + 1")
_ins('DCR',  'r',         'Decrement register',           "Z,S,P,AC", REG, "{0:reg} ← {0:reg} - 1")
_ins('INX',  'rp',        'Increment register pair',      "None", REG, "{0:pair} ← {0:pair} + 1")
_ins('DCX',  'rp',        'Decrement register pair',      "None", REG, "{0:pair} ← {0:pair} - 1")
_ins('DAD',  'rp',        'Add register pair to H and L', "C",    REG, "HL ← HL + {0:pair}")
_ins('DAA',  '-',         'Decimal adjust accumulator',   ALL,    IMP, "A ← BCD(A)")

# ── Logical ──
_ins('ANA',  'r',         'AND register with A',          "Z,S,P,C=0,AC=1", REG, "A ← A ∧ {0:reg}")
_ins('ANI',  'data',      'AND immediate with A',         "Z,S,P,C=0,AC=1", IMM, "A ← A ∧ {0:hex}")
_ins('XRA',  'r',         'Exclusive OR register with A', "Z,S,P,C=0,AC=0", REG, "A ← A ⊕ {0:reg}")
_ins('XRI',  'data',      'Exclusive OR immediate with A', "Z,S,P,C=0,AC=0", IMM, "A ← A ⊕ {0:hex}")
_ins('ORA',  'r',         'OR register with A',           "Z,S,P,C=0,AC=0", REG, "A ← A ∨ {0:reg}")
_ins('ORI',  'data',      'OR immediate with A',          "Z,S,P,C=0,AC=0", IMM, "A ← A ∨ {0:hex}")
_ins('CMP',  'r',         'Compare register with A',      ALL,    REG, "A - {0:reg}")
_ins('CPI',  'data',      'Compare immediate with A',     ALL,    IMM, "A - {0:hex}")
_ins('RLC',  '-',         'Rotate A left',                "C",    IMP, "A ← A << 1, C ← A7")
_ins('RRC',  '-',         'Rotate A right',               "C",    IMP, "A ← A >> 1, C ← A0")
_ins('RAL',  '-',         'Rotate A left through carry',  "C",    IMP, "A ← (A << 1) + C, C ← A7")
_ins('RAR',  '-',         'Rotate A right through carry', "C",    IMP, "A ← (A >> 1) + (C << 7), C ← A0")
_ins('CMA',  '-',         'Complement A',                 "None", IMP, "A ← ¬A")
_ins('CMC',  '-',         'Complement carry',             "C",    IMP, "C ← ¬C")
_ins('STC',  '-',         'Set carry',                    "C",    IMP, "C ← 1")

# ── Branch ──
_ins('JMP',  'addr',      'Jump unconditional',           "None", TGT, "PC ← {0}")
_ins('CALL', 'addr',      'Call unconditional',           "None", TGT, "STACK ← PC, PC ← {0}")
_ins('RET',  '-',         'Return from subroutine',       "None", IMP, "PC ← STACK")
_ins('PCHL', '-',         'Load PC from H and L',         "None", IMP, "PC ← HL")
_ins('RST',  'n',         'Restart',                      "None", IMM, "STACK ← PC, PC ← 8 × {0}")

for _cc, _cond, _name in [
    ('C',  "C = 1", 'carry'),
    ('NC', "C = 0", 'no carry'),
    ('Z',  "Z = 1", 'zero'),
    ('NZ', "Z = 0", 'not zero'),
    ('P',  "S = 0", 'plus'),
    ('M',  "S = 1", 'minus'),
    ('PE', "P = 1", 'parity even'),
    ('PO', "P = 0", 'parity odd'),
]:
    _ins(f'J{_cc}', 'addr', f'Jump on {_name}', "None", TGT, f"if ({_cond}) PC ← {{0}}")
    _ins(f'C{_cc}', 'addr', f'Call on {_name}', "None", TGT, f"if ({_cond}) STACK ← PC, PC ← {{0}}")
    _ins(f'R{_cc}', '-', f'Return on {_name}', "None", IMP, f"if ({_cond}) PC ← STACK")

# ── Stack, I/O and machine control ──
_ins('PUSH', 'rp',        'Push register pair on stack',  "None", REG, "STACK ← {0:pair}")
_ins('POP',  'rp',        'Pop register pair off stack',  "None", REG, "{0:pair} ← STACK")
_ins('XTHL', '-',         'Exchange top of stack with H and L', "None", IMP, "HL ↔ [SP]")
_ins('SPHL', '-',         'Load SP from H and L',         "None", IMP, "SP ← HL")
_ins('IN',   'port',      'Input from port',              "None", IMM, "A ← I/O({0:hex})")
_ins('OUT',  'port',      'Output to port',               "None", IMM, "I/O({0:hex}) ← A")
_ins('EI',   '-',         'Enable interrupts',            "None", IMP, "IE ← 1")
_ins('DI',   '-',         'Disable interrupts',           "None", IMP, "IE ← 0")
_ins('HLT',  '-',         'Halt',                         "None", IMP, "Stop")
_ins('NOP',  '-',         'No operation',                 "None", IMP, "No operation")
_ins('RIM',  '-',         'Read interrupt mask',          "None", IMP, "A ← interrupt mask")
_ins('SIM',  '-',         'Set interrupt mask',           "None", IMP, "interrupt mask ← A")


KNOWLEDGE_BASE = KnowledgeBase('i8085', MNEMONICS, I8085OperandFormatter())
