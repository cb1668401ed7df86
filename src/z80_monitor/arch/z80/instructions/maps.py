"""
Z80 命令マッピング定義。
各命令モジュールから関数をインポートし、オペコードとデコーダ、Op型と実行関数の対応表を構築します。
"""
from z80_monitor.arch.z80.ops import (
    Ld8, Ld16, Push, Pop,
    Add8, Adc, Sub8, Sbc, And, Or, Xor, Cp, Inc, Dec, Inc16, Dec16, Add16,
    Cpl, Neg, Ccf, Scf, Daa, Rlca, Rla, Rrca, Rra,
    Nop, Halt, Jp, Jr, Djnz, Call, Ret, In, Out, Rld, Rrd,
    Rlc, Rrc, Rl, Rr, Sla, Sra, Srl, Bit, Set, Res,
)
from .alu import (
    decode_alu_r, decode_alu_n, decode_inc_dec8, decode_inc_dec16, decode_add_hl_ss, decode_implied,
    execute_add8, execute_adc, execute_sub8, execute_sbc, execute_and, execute_or, execute_xor,
    execute_cp, execute_inc, execute_dec, execute_inc16, execute_dec16, execute_add16,
    execute_cpl, execute_neg, execute_ccf, execute_scf, execute_daa,
    execute_rlca, execute_rla, execute_rrca, execute_rra,
)
from .load import (
    decode_ld_ss_nn, decode_ld_r_n, decode_ld_r_r_prime, decode_ld_indirect_a, decode_ld_a_indirect,
    decode_ld_nn_a, decode_ld_a_nn, decode_ld_nn_hl, decode_ld_hl_nn, decode_ld_sp_hl, decode_push_pop,
    execute_ld8, execute_ld16, execute_push, execute_pop,
)
from .control import (
    decode_nop, decode_halt, decode_djnz, decode_jr, decode_jp, decode_jp_hl, decode_call, decode_ret,
    decode_out_n_a, decode_in_a_n, decode_cb, decode_ed,
    execute_nop, execute_halt, execute_jr, execute_djnz, execute_jp, execute_call, execute_ret,
    execute_in, execute_out, execute_rotate_shift, execute_bit, execute_set, execute_res,
    execute_rld, execute_rrd,
)

DECODE_MAP = {
    0x00: decode_nop,
    0x02: decode_ld_indirect_a,
    0x12: decode_ld_indirect_a,
    0x0A: decode_ld_a_indirect,
    0x1A: decode_ld_a_indirect,
    0x10: decode_djnz,
    0x18: decode_jr,
    0x22: decode_ld_nn_hl,
    0x2A: decode_ld_hl_nn,
    0x32: decode_ld_nn_a,
    0x3A: decode_ld_a_nn,
    0x76: decode_halt,
    0xC3: decode_jp,
    0xC9: decode_ret,
    0xCB: decode_cb,
    0xCD: decode_call,
    0xD3: decode_out_n_a,
    0xDB: decode_in_a_n,
    0xE9: decode_jp_hl,
    0xED: decode_ed,
    0xF9: decode_ld_sp_hl,
    **{op: decode_implied for op in (0x07, 0x0F, 0x17, 0x1F, 0x27, 0x2F, 0x37, 0x3F)},
    **{op: decode_ld_ss_nn for op in range(0x01, 0x40, 0x10)}, # LD BC/DE/HL/SP, nn
    **{op: decode_inc_dec16 for op in range(0x03, 0x40, 0x10)}, # INC ss
    **{op: decode_inc_dec16 for op in range(0x0B, 0x40, 0x10)}, # DEC ss
    **{op: decode_add_hl_ss for op in range(0x09, 0x40, 0x10)}, # ADD HL,ss
    **{op: decode_inc_dec8 for op in range(0x04, 0x40, 0x08)}, # INC r
    **{op: decode_inc_dec8 for op in range(0x05, 0x40, 0x08)}, # DEC r
    **{op: decode_ld_r_n for op in range(0x06, 0x40, 0x08)}, # LD r,n
    **{op: decode_jr for op in range(0x20, 0x40, 0x08)}, # JR cc,e
    **{op: decode_ld_r_r_prime for op in range(0x40, 0x80) if op != 0x76},
    **{op: decode_alu_r for op in range(0x80, 0xC0)},
    **{op: decode_ret for op in range(0xC0, 0x100, 0x08)}, # RET cc
    **{op: decode_jp for op in range(0xC2, 0x100, 0x08)}, # JP cc,nn
    **{op: decode_call for op in range(0xC4, 0x100, 0x08)}, # CALL cc,nn
    **{op: decode_alu_n for op in range(0xC6, 0x100, 0x08)},
    **{op: decode_push_pop for op in range(0xC5, 0x100, 0x10)}, # PUSH qq
    **{op: decode_push_pop for op in range(0xC1, 0x100, 0x10)}, # POP qq
}

EXECUTE_MAP = {
    Ld8: execute_ld8,
    Ld16: execute_ld16,
    Push: execute_push,
    Pop: execute_pop,
    Add8: execute_add8,
    Adc: execute_adc,
    Sub8: execute_sub8,
    Sbc: execute_sbc,
    And: execute_and,
    Or: execute_or,
    Xor: execute_xor,
    Cp: execute_cp,
    Inc: execute_inc,
    Dec: execute_dec,
    Inc16: execute_inc16,
    Dec16: execute_dec16,
    Add16: execute_add16,
    Cpl: execute_cpl,
    Neg: execute_neg,
    Ccf: execute_ccf,
    Scf: execute_scf,
    Daa: execute_daa,
    Rlca: execute_rlca,
    Rla: execute_rla,
    Rrca: execute_rrca,
    Rra: execute_rra,
    Nop: execute_nop,
    Halt: execute_halt,
    Jp: execute_jp,
    Jr: execute_jr,
    Djnz: execute_djnz,
    Call: execute_call,
    Ret: execute_ret,
    In: execute_in,
    Out: execute_out,
    Rld: execute_rld,
    Rrd: execute_rrd,
    Bit: execute_bit,
    Set: execute_set,
    Res: execute_res,
    **{op: execute_rotate_shift for op in (Rlc, Rrc, Rl, Rr, Sla, Sra, Srl)},
}
