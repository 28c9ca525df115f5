"""RISC-V instruction fields, opcodes, CSR addresses and register layouts."""

from __future__ import annotations

import enum
from dataclasses import dataclass


def get_field(value: int, lsb: int, width: int) -> int:
    """Extract the unsigned ``width``-bit field of ``value`` starting at ``lsb``."""
    if lsb < 0 or width <= 0:
        raise ValueError("field position and width must be non-negative and positive")
    return (value >> lsb) & ((1 << width) - 1)


def set_field(value: int, lsb: int, width: int, field: int) -> int:
    """Return ``value`` with its ``width``-bit field at ``lsb`` replaced by ``field``.

    Like a bit-field assignment, ``field`` is truncated to ``width`` bits.
    """
    if lsb < 0 or width <= 0:
        raise ValueError("field position and width must be non-negative and positive")
    mask = ((1 << width) - 1) << lsb
    return (value & ~mask) | ((field << lsb) & mask)


def _signed(value: int, width: int) -> int:
    sign = 1 << (width - 1)
    return (value & (sign - 1)) - (value & sign)


def rv_ext(letter: str) -> int:
    """The ``misa`` extension bit for a lower-case extension letter."""
    if len(letter) != 1 or not "a" <= letter <= "z":
        raise ValueError(f"not an extension letter: {letter!r}")
    return 1 << (ord(letter) - ord("a"))


@dataclass(frozen=True)
class RvInstr:
    """A 32-bit instruction word with accessors for each encoding format."""

    raw: int

    @property
    def opcode(self) -> int:
        return get_field(self.raw, 0, 7)

    @property
    def rd(self) -> int:
        return get_field(self.raw, 7, 5)

    @property
    def funct3(self) -> int:
        return get_field(self.raw, 12, 3)

    @property
    def rs1(self) -> int:
        return get_field(self.raw, 15, 5)

    @property
    def rs2(self) -> int:
        return get_field(self.raw, 20, 5)

    @property
    def funct7(self) -> int:
        return get_field(self.raw, 25, 7)

    def i_imm(self) -> int:
        """Sign-extended 12-bit immediate of an I-type instruction."""
        return _signed(get_field(self.raw, 20, 12), 12)

    def s_imm(self) -> int:
        """Sign-extended 12-bit immediate of an S-type instruction."""
        high = _signed(get_field(self.raw, 25, 7), 7)
        return (high << 5) | get_field(self.raw, 7, 5)

    def b_imm(self) -> int:
        """Sign-extended branch offset of a B-type instruction."""
        return (
            (_signed(get_field(self.raw, 31, 1), 1) << 12)
            | (get_field(self.raw, 7, 1) << 11)
            | (get_field(self.raw, 25, 6) << 5)
            | (get_field(self.raw, 8, 4) << 1)
        )

    def u_imm(self) -> int:
        """Sign-extended upper immediate of a U-type instruction, already shifted by 12."""
        return _signed(get_field(self.raw, 12, 20), 20) << 12

    def j_imm(self) -> int:
        """Sign-extended jump offset of a J-type instruction."""
        return (
            (_signed(get_field(self.raw, 31, 1), 1) << 20)
            | (get_field(self.raw, 12, 8) << 12)
            | (get_field(self.raw, 20, 1) << 11)
            | (get_field(self.raw, 21, 10) << 1)
        )


class Opcode(enum.IntEnum):
    """Major opcodes of the 32-bit base instruction set."""

    LUI = 0b0110111
    AUIPC = 0b0010111
    JAL = 0b1101111
    JALR = 0b1100111
    BRANCH = 0b1100011
    LOAD = 0b0000011
    STORE = 0b0100011
    OPIMM = 0b0010011
    OPIMM32 = 0b0011011
    OP = 0b0110011
    OP32 = 0b0111011
    FENCE = 0b0001111
    SYSTEM = 0b1110011
    AMO = 0b0101111


class PrivMode(enum.IntEnum):
    """Privilege levels."""

    U = 0
    S = 1
    H = 2
    M = 3


class CsrAddr(enum.IntEnum):
    """Addresses of the implemented control and status registers."""

    CYCLE = 0xC00
    TIME = 0xC01
    INSTRET = 0xC02
    SSTATUS = 0x100
    SIE = 0x104
    STVEC = 0x105
    SCOUNTEREN = 0x106
    SSCRATCH = 0x140
    SEPC = 0x141
    SCAUSE = 0x142
    STVAL = 0x143
    SIP = 0x144
    SATP = 0x180
    MVENDORID = 0xF11
    MARCHID = 0xF12
    MIMPID = 0xF13
    MHARTID = 0xF14
    MCONFIGPTR = 0xF15
    MSTATUS = 0x300
    MISA = 0x301
    MEDELEG = 0x302
    MIDELEG = 0x303
    MIE = 0x304
    MTVEC = 0x305
    MCOUNTEREN = 0x306
    MSCRATCH = 0x340
    MEPC = 0x341
    MCAUSE = 0x342
    MTVAL = 0x343
    MIP = 0x344
    PMPCFG0 = 0x3A0
    PMPCFG1 = 0x3A1
    PMPCFG2 = 0x3A2
    PMPCFG3 = 0x3A3
    PMPADDR0 = 0x3B0
    PMPADDR1 = 0x3B1
    PMPADDR2 = 0x3B2
    PMPADDR3 = 0x3B3
    PMPADDR4 = 0x3B4
    PMPADDR5 = 0x3B5
    PMPADDR6 = 0x3B6
    PMPADDR7 = 0x3B7
    PMPADDR8 = 0x3B8
    PMPADDR9 = 0x3B9
    PMPADDR10 = 0x3BA
    PMPADDR11 = 0x3BB
    PMPADDR12 = 0x3BC
    PMPADDR13 = 0x3BD
    PMPADDR14 = 0x3BE
    PMPADDR15 = 0x3BF
    MCYCLE = 0xB00
    MINSTRET = 0xB02
    TSELECT = 0x7A0
    TDATA1 = 0x7A1


class IntCode(enum.IntEnum):
    """Interrupt cause numbers."""

    S_SW = 1
    M_SW = 3
    S_TIMER = 5
    M_TIMER = 7
    S_EXT = 9
    M_EXT = 11


class ExcCode(enum.IntEnum):
    """Exception cause numbers; ``CUSTOM_OK`` marks the absence of one."""

    INSTR_MISALIGN = 0
    INSTR_ACC_FAULT = 1
    ILLEGAL_INSTR = 2
    BREAKPOINT = 3
    LOAD_MISALIGN = 4
    LOAD_ACC_FAULT = 5
    STORE_MISALIGN = 6
    STORE_ACC_FAULT = 7
    ECALL_FROM_USER = 8
    ECALL_FROM_SUPERVISOR = 9
    ECALL_FROM_MACHINE = 11
    INSTR_PGFAULT = 12
    LOAD_PGFAULT = 13
    STORE_PGFAULT = 15
    CUSTOM_OK = 24


# Compressed opcodes: instr[1:0] concatenated with instr[15:13].
OPCODE_C_ADDI4SPN = 0b00000
OPCODE_C_LW = 0b00010
OPCODE_C_LD = 0b00011
OPCODE_C_SW = 0b00110
OPCODE_C_SD = 0b00111
OPCODE_C_ADDI = 0b01000
OPCODE_C_ADDIW = 0b01001
OPCODE_C_LI = 0b01010
OPCODE_C_ADDI16SPN_LUI = 0b01011
OPCODE_C_ALU = 0b01100
OPCODE_C_J = 0b01101
OPCODE_C_BEQZ = 0b01110
OPCODE_C_BNEZ = 0b01111
OPCODE_C_SLLI = 0b10000
OPCODE_C_LWSP = 0b10010
OPCODE_C_LDSP = 0b10011
OPCODE_C_JR_MV_EB_JALR_ADD = 0b10100
OPCODE_C_SWSP = 0b10110
OPCODE_C_SDSP = 0b10111

FUNCT2_SUB = 0b00
FUNCT2_XOR_ADDW = 0b01
FUNCT2_OR = 0b10
FUNCT2_AND = 0b11

FUNCT3_BEQ = 0b000
FUNCT3_BNE = 0b001
FUNCT3_BLT = 0b100
FUNCT3_BGE = 0b101
FUNCT3_BLTU = 0b110
FUNCT3_BGEU = 0b111

FUNCT3_LB = 0b000
FUNCT3_LH = 0b001
FUNCT3_LW = 0b010
FUNCT3_LD = 0b011
FUNCT3_LBU = 0b100
FUNCT3_LHU = 0b101
FUNCT3_LWU = 0b110

FUNCT3_SB = 0b000
FUNCT3_SH = 0b001
FUNCT3_SW = 0b010
FUNCT3_SD = 0b011

FUNCT3_ADD_SUB = 0b000
FUNCT3_SLL = 0b001
FUNCT3_SLT = 0b010
FUNCT3_SLTU = 0b011
FUNCT3_XOR = 0b100
FUNCT3_SRL_SRA = 0b101
FUNCT3_OR = 0b110
FUNCT3_AND = 0b111

FUNCT3_MUL = 0b000
FUNCT3_MULH = 0b001
FUNCT3_MULHSU = 0b010
FUNCT3_MULHU = 0b011
FUNCT3_DIV = 0b100
FUNCT3_DIVU = 0b101
FUNCT3_REM = 0b110
FUNCT3_REMU = 0b111

FUNCT3_PRIV = 0b000
FUNCT3_CSRRW = 0b001
FUNCT3_CSRRS = 0b010
FUNCT3_CSRRC = 0b011
FUNCT3_HLSV = 0b100
FUNCT3_CSRRWI = 0b101
FUNCT3_CSRRSI = 0b110
FUNCT3_CSRRCI = 0b111

FUNCT7_ECALL_EBREAK = 0b0000000
FUNCT7_SRET_WFI = 0b0001000
FUNCT7_MRET = 0b0011000
FUNCT7_SFENCE_VMA = 0b0001001

AMO_LR = 0b00010
AMO_SC = 0b00011
AMO_SWAP = 0b00001
AMO_ADD = 0b00000
AMO_XOR = 0b00100
AMO_AND = 0b01100
AMO_OR = 0b01000
AMO_MIN = 0b10000
AMO_MAX = 0b10100
AMO_MINU = 0b11000
AMO_MAXU = 0b11100

FUNCT7_NORMAL = 0b0000000
FUNCT7_SUB_SRA = 0b0100000
FUNCT7_MUL = 0b0000001

FUNCT6_NORMAL = 0b000000
FUNCT6_SRA = 0b010000

S_INT_MASK = (1 << IntCode.S_EXT) | (1 << IntCode.S_SW) | (1 << IntCode.S_TIMER)
M_INT_MASK = (
    S_INT_MASK | (1 << IntCode.M_EXT) | (1 << IntCode.M_SW) | (1 << IntCode.M_TIMER)
)
S_EXC_MASK = (1 << 16) - 1 - (1 << ExcCode.ECALL_FROM_MACHINE)
COUNTER_MASK = (1 << 0) | (1 << 2)

# Register layouts as name -> (lsb, width), for use with get_field/set_field.
MISA_FIELDS = {"ext": (0, 26), "mxl": (62, 2)}

MSTATUS_FIELDS = {
    "sie": (1, 1),
    "mie": (3, 1),
    "spie": (5, 1),
    "ube": (6, 1),
    "mpie": (7, 1),
    "spp": (8, 1),
    "vs": (9, 2),
    "mpp": (11, 2),
    "fs": (13, 2),
    "xs": (15, 2),
    "mprv": (17, 1),
    "sum": (18, 1),
    "mxr": (19, 1),
    "tvm": (20, 1),
    "tw": (21, 1),
    "tsr": (22, 1),
    "uxl": (32, 2),
    "sxl": (34, 2),
    "sbe": (36, 1),
    "mbe": (37, 1),
    "sd": (63, 1),
}

SSTATUS_FIELDS = {
    "sie": (1, 1),
    "spie": (5, 1),
    "ube": (6, 1),
    "spp": (8, 1),
    "vs": (9, 2),
    "fs": (13, 2),
    "xs": (15, 2),
    "sum": (18, 1),
    "mxr": (19, 1),
    "uxl": (32, 2),
    "sd": (63, 1),
}

CAUSE_FIELDS = {"cause": (0, 63), "interrupt": (63, 1)}

TVEC_FIELDS = {"mode": (0, 2), "base": (2, 62)}

INT_FIELDS = {
    "s_s_ip": (1, 1),
    "m_s_ip": (3, 1),
    "s_t_ip": (5, 1),
    "m_t_ip": (7, 1),
    "s_e_ip": (9, 1),
    "m_e_ip": (11, 1),
}

COUNTEREN_FIELDS = {"cycle": (0, 1), "time": (1, 1), "instr_retire": (2, 1)}

SV39_PTE_FIELDS = {
    "V": (0, 1),
    "R": (1, 1),
    "W": (2, 1),
    "X": (3, 1),
    "U": (4, 1),
    "G": (5, 1),
    "A": (6, 1),
    "D": (7, 1),
    "RSW": (8, 2),
    "PPN0": (10, 9),
    "PPN1": (19, 9),
    "PPN2": (28, 26),
    "reserved": (54, 7),
    "PBMT": (61, 2),
    "N": (63, 1),
}

SATP_FIELDS = {"ppn": (0, 44), "asid": (44, 16), "mode": (60, 4)}

SV39_VA_FIELDS = {
    "page_off": (0, 12),
    "vpn_0": (12, 9),
    "vpn_1": (21, 9),
    "vpn_2": (30, 9),
}