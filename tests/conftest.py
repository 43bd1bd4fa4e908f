"""
Shared listing samples.
"""

import pytest


AVR_LISTING = """\
AVRASM ver. 2.2.7  blink.asm Mon Jan 01 00:00:00 2024

                 .dseg
D:000100 0000      buffer: .byte 16
                 .CSEG
                 .org 0x0000
C:000000 c003      rjmp RESET
C:000002 940e 0010 call delay

C:000004 e50f      RESET: ldi r16, 0x5F     ; stack low
C:000005 bf0d      out SPL, r16
C:000006 0c12      add r1, r2
C:000007 911d      ld r17, X+
C:000008 8129      ldd r18, Y+1
C:000009 ffff      foo r1
C:00000a cffe      loop: rjmp loop
                 .eseg
E:000000 0102      ldi r20, 1
                 .cseg
C:00000b 9508      ret
"""

I8085_LISTING = """\
INDEX ADDR OPCODE MNEMONIC
0001 2000 3E05 START: MVI A,05 >.
0002 2002 0605 MVI B,05 ..
0003 2004 80 ADD B .

0004 2005 C30020 JMP START >..
0005 2008 76 HLT ; done
"""


@pytest.fixture
def avr_listing():
    return AVR_LISTING


@pytest.fixture
def i8085_listing():
    return I8085_LISTING


@pytest.fixture
def listing_dir(tmp_path):
    """Directory with two AVR listings, one 8085 listing and a stray file."""
    src = tmp_path / "listings"
    src.mkdir()
    (src / "b_main.lss").write_text(AVR_LISTING, encoding="utf-8")
    (src / "a_boot.lss").write_text(AVR_LISTING, encoding="utf-8")
    (src / "monitor.lst").write_text(I8085_LISTING, encoding="utf-8")
    (src / "notes.txt").write_text("not a listing\n", encoding="utf-8")
    return src
