"""
Z80 ALU (算術論理演算ユニット) およびフラグ操作ユーティリティ。

演算結果に基づいたフラグ（S, Z, H, P/V, N, C）の計算と更新を担当します。
"""
from z80_monitor.arch.z80.state import Z80Registers


# @intent:responsibility 指定されたバイト値のパリティ（ビット1の数が偶数ならTrue）を計算します。
def calculate_parity(val: int) -> bool:
    val ^= val >> 4
    val ^= val >> 2
    val ^= val >> 1
    return (val & 1) == 0


def _update_sz(state: Z80Registers, res8: int) -> None:
    state.flag_s = (res8 & 0x80) != 0
    state.flag_z = res8 == 0


# @intent:responsibility 8ビット加算の結果に基づいて全フラグを更新します。
def update_flags_add8(state: Z80Registers, val1: int, val2: int, result: int, carry_in: int = 0) -> None:
    """ADD/ADC命令のフラグを更新します。"""
    res8 = result & 0xFF
    _update_sz(state, res8)
    state.flag_h = ((val1 & 0x0F) + (val2 & 0x0F) + carry_in) > 0x0F
    # 同符号の加算で結果の符号が変わった場合にオーバーフロー
    state.flag_pv = ((val1 ^ res8) & (val2 ^ res8) & 0x80) != 0
    state.flag_n = False
    state.flag_c = result > 0xFF


# @intent:responsibility 8ビット減算の結果に基づいて全フラグを更新します。
def update_flags_sub8(state: Z80Registers, val1: int, val2: int, result: int, borrow_in: int = 0) -> None:
    """SUB/SBC/CP/NEG命令のフラグを更新します。"""
    res8 = result & 0xFF
    _update_sz(state, res8)
    state.flag_h = ((val1 & 0x0F) - (val2 & 0x0F) - borrow_in) < 0
    # 異符号の減算で結果の符号が第一オペランドと異なる場合にオーバーフロー
    state.flag_pv = ((val1 ^ val2) & (val1 ^ res8) & 0x80) != 0
    state.flag_n = True
    state.flag_c = result < 0


# @intent:responsibility 8ビット論理演算の結果に基づいてフラグを更新します。
def update_flags_logic8(state: Z80Registers, result: int, h_flag: bool = False) -> None:
    """AND/OR/XOR命令のフラグを更新します。ANDのみHがセットされます。"""
    res8 = result & 0xFF
    _update_sz(state, res8)
    state.flag_h = h_flag
    state.flag_pv = calculate_parity(res8)
    state.flag_n = False
    state.flag_c = False


# @intent:responsibility インクリメント/デクリメント命令のフラグを更新します（Cフラグは変化しません）。
def update_flags_inc_dec8(state: Z80Registers, val: int, result: int, is_inc: bool) -> None:
    res8 = result & 0xFF
    _update_sz(state, res8)
    if is_inc:
        state.flag_h = (val & 0x0F) == 0x0F
        state.flag_pv = val == 0x7F
        state.flag_n = False
    else:
        state.flag_h = (val & 0x0F) == 0x00
        state.flag_pv = val == 0x80
        state.flag_n = True


# @intent:responsibility 16ビット加算の結果に基づいてフラグ（H, N, C）を更新します。
# @intent:rationale Z, S, P/Vフラグは影響を受けません。
def update_flags_add16(state: Z80Registers, val1: int, val2: int, result: int) -> None:
    state.flag_h = ((val1 & 0x0FFF) + (val2 & 0x0FFF)) > 0x0FFF
    state.flag_n = False
    state.flag_c = result > 0xFFFF


# CBプレフィックスのローテート/シフト種別
RLC, RRC, RL, RR, SLA, SRA, SRL = "RLC", "RRC", "RL", "RR", "SLA", "SRA", "SRL"


# @intent:responsibility CBプレフィックスのローテート/シフトを計算し、フラグを更新して結果を返します。
def rotate_shift8(state: Z80Registers, val: int, kind: str) -> int:
    carry_in = 1 if state.flag_c else 0
    if kind == RLC:
        carry = val >> 7
        result = ((val << 1) | carry) & 0xFF
    elif kind == RRC:
        carry = val & 1
        result = (val >> 1) | (carry << 7)
    elif kind == RL:
        carry = val >> 7
        result = ((val << 1) | carry_in) & 0xFF
    elif kind == RR:
        carry = val & 1
        result = (val >> 1) | (carry_in << 7)
    elif kind == SLA:
        carry = val >> 7
        result = (val << 1) & 0xFF
    elif kind == SRA:
        carry = val & 1
        result = (val >> 1) | (val & 0x80)
    elif kind == SRL:
        carry = val & 1
        result = val >> 1
    else:
        raise ValueError(f"Unknown rotate/shift kind: {kind}")

    _update_sz(state, result)
    state.flag_h = False
    state.flag_pv = calculate_parity(result)
    state.flag_n = False
    state.flag_c = carry != 0
    return result


# @intent:responsibility アキュムレータ専用ローテート (RLCA/RLA/RRCA/RRA)。S, Z, P/V は保持されます。
def rotate_accumulator(state: Z80Registers, kind: str) -> None:
    a = state.a
    carry_in = 1 if state.flag_c else 0
    if kind == RLC:
        carry = a >> 7
        state.a = ((a << 1) | carry) & 0xFF
    elif kind == RL:
        carry = a >> 7
        state.a = ((a << 1) | carry_in) & 0xFF
    elif kind == RRC:
        carry = a & 1
        state.a = (a >> 1) | (carry << 7)
    elif kind == RR:
        carry = a & 1
        state.a = (a >> 1) | (carry_in << 7)
    else:
        raise ValueError(f"Unknown accumulator rotate kind: {kind}")
    state.flag_h = False
    state.flag_n = False
    state.flag_c = carry != 0


# @intent:responsibility 直前の加減算結果をBCDに補正します (DAA)。
def decimal_adjust(state: Z80Registers) -> None:
    a = state.a
    correction = 0
    carry = state.flag_c
    if state.flag_h or (a & 0x0F) > 9:
        correction |= 0x06
    if carry or a > 0x99:
        correction |= 0x60
        carry = True

    if state.flag_n:
        state.flag_h = state.flag_h and (a & 0x0F) < 6
        result = (a - correction) & 0xFF
    else:
        state.flag_h = (a & 0x0F) > 9
        result = (a + correction) & 0xFF

    state.a = result
    _update_sz(state, result)
    state.flag_pv = calculate_parity(result)
    state.flag_c = carry
