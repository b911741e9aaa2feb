"""
Fee Math - 백서 기반 수수료 계산

Uniswap V3 백서 Section 6.3, 6.4의 공식을 구현.

References:
- 백서 Section 6.3: Tick-Indexed State (feeGrowthOutside)
- 백서 Section 6.4.1: Position-Indexed State (uncollected fees)

핵심 공식:
    f_b(i) = f_o(i)        if i_c >= i else f_g - f_o(i)   # 틱 i 아래 수수료
    f_a(i) = f_o(i)        if i_c < i  else f_g - f_o(i)   # 틱 i 위 수수료
    f_r = f_g - f_b(i_l) - f_a(i_u)                       # 범위 내 수수료
    f_u = l × (f_r(t_1) - f_r(t_0)) / 2^128               # 미수령 수수료

누적값의 모든 뺄셈은 safe_diff를 거칩니다. uint256 랩어라운드로 음수가
나와야 하는 경우 0으로 고정됩니다.
"""

from typing import NamedTuple

from ..constants import Q128
from ..data.types import Pool, Position, Tick
from .price_math import value_of_token0_amount_in_token1, value_of_token1_amount_in_token0


class FeeGrowthInside(NamedTuple):
    """범위 내 fee growth (Q128)"""
    inside0: int
    inside1: int


class UnclaimedFees(NamedTuple):
    """포지션 미수령 수수료 내역 (토큰 최소 단위)"""
    incremental0: int  # 마지막 체크포인트 이후 발생한 token0 수수료
    incremental1: int
    checkpointed0: int  # 체크포인트에 이미 반영된 token0 수수료 (tokensOwed0)
    checkpointed1: int
    total_claimable0: int
    total_claimable1: int


class UnclaimedFeesWithValue(NamedTuple):
    """미수령 수수료의 base/quote 분리 및 quote 환산 가치"""
    fees: UnclaimedFees
    base_token_amount: int
    quote_token_amount: int
    value_in_quote_token: int


def safe_diff(a: int, b: int) -> int:
    """a - b, 단 b > a이면 0"""
    return a - b if a >= b else 0


def fee_growth_below(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int
) -> int:
    """틱 아래에서 발생한 수수료 성장률 (f_b)

    Args:
        tick_idx: 틱 인덱스 (i)
        current_tick: 현재 틱 (i_c)
        fee_growth_global: 전역 fee growth (f_g)
        fee_growth_outside: 틱의 fee growth outside (f_o)
    """
    if current_tick >= tick_idx:
        return fee_growth_outside
    return safe_diff(fee_growth_global, fee_growth_outside)


def fee_growth_above(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int
) -> int:
    """틱 위에서 발생한 수수료 성장률 (f_a)

    Args:
        tick_idx: 틱 인덱스 (i)
        current_tick: 현재 틱 (i_c)
        fee_growth_global: 전역 fee growth (f_g)
        fee_growth_outside: 틱의 fee growth outside (f_o)
    """
    if current_tick < tick_idx:
        return fee_growth_outside
    return safe_diff(fee_growth_global, fee_growth_outside)


def compute_fee_growth_inside(
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    fee_growth_global_0: int,
    fee_growth_global_1: int,
    fee_growth_outside_lower_0: int,
    fee_growth_outside_lower_1: int,
    fee_growth_outside_upper_0: int,
    fee_growth_outside_upper_1: int
) -> FeeGrowthInside:
    """두 토큰의 범위 내 fee growth 계산 (f_r)

    f_r = safe_diff(safe_diff(f_g, f_b(i_l)), f_a(i_u))

    Args:
        tick_current: 현재 틱 (i_c)
        tick_lower: 하한 틱 (i_l)
        tick_upper: 상한 틱 (i_u)
        fee_growth_global_0: token0 전역 fee growth (f_g,0)
        fee_growth_global_1: token1 전역 fee growth (f_g,1)
        fee_growth_outside_lower_0: 하한 틱 token0 outside (f_o,0(i_l))
        fee_growth_outside_lower_1: 하한 틱 token1 outside (f_o,1(i_l))
        fee_growth_outside_upper_0: 상한 틱 token0 outside (f_o,0(i_u))
        fee_growth_outside_upper_1: 상한 틱 token1 outside (f_o,1(i_u))

    Returns:
        FeeGrowthInside(inside0, inside1)
    """
    below0 = fee_growth_below(tick_lower, tick_current, fee_growth_global_0, fee_growth_outside_lower_0)
    below1 = fee_growth_below(tick_lower, tick_current, fee_growth_global_1, fee_growth_outside_lower_1)

    above0 = fee_growth_above(tick_upper, tick_current, fee_growth_global_0, fee_growth_outside_upper_0)
    above1 = fee_growth_above(tick_upper, tick_current, fee_growth_global_1, fee_growth_outside_upper_1)

    return FeeGrowthInside(
        inside0=safe_diff(safe_diff(fee_growth_global_0, below0), above0),
        inside1=safe_diff(safe_diff(fee_growth_global_1, below1), above1),
    )


def calculate_incremental_fees(
    fee_growth_inside_current: int,
    fee_growth_inside_last: int,
    liquidity: int
) -> int:
    """마지막 체크포인트 이후 발생한 수수료 (토큰 최소 단위)

    f_u = safe_diff(f_r(t_1), f_r(t_0)) × l / 2^128 (내림)
    """
    fee_growth_delta = safe_diff(fee_growth_inside_current, fee_growth_inside_last)
    return (fee_growth_delta * liquidity) // Q128


def calculate_unclaimed_fees(
    liquidity: int,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    fee_growth_global_0: int,
    fee_growth_global_1: int,
    fee_growth_outside_lower_0: int,
    fee_growth_outside_lower_1: int,
    fee_growth_outside_upper_0: int,
    fee_growth_outside_upper_1: int,
    fee_growth_inside_last_0: int,
    fee_growth_inside_last_1: int,
    tokens_owed_0: int = 0,
    tokens_owed_1: int = 0
) -> UnclaimedFees:
    """두 토큰의 미수령 수수료 계산

    백서 Section 6.3, 6.4의 전체 수수료 계산 파이프라인.
    체크포인트 이후 증가분에 이미 체크포인트된 tokensOwed를 더해
    지금 바로 수령 가능한 총액을 구합니다.

    Returns:
        UnclaimedFees
    """
    # Step 1: 현재 범위 내 fee growth (f_r(t_1))
    inside = compute_fee_growth_inside(
        tick_current, tick_lower, tick_upper,
        fee_growth_global_0, fee_growth_global_1,
        fee_growth_outside_lower_0, fee_growth_outside_lower_1,
        fee_growth_outside_upper_0, fee_growth_outside_upper_1,
    )

    # Step 2: 체크포인트 이후 증가분
    incremental0 = calculate_incremental_fees(inside.inside0, fee_growth_inside_last_0, liquidity)
    incremental1 = calculate_incremental_fees(inside.inside1, fee_growth_inside_last_1, liquidity)

    return UnclaimedFees(
        incremental0=incremental0,
        incremental1=incremental1,
        checkpointed0=tokens_owed_0,
        checkpointed1=tokens_owed_1,
        total_claimable0=tokens_owed_0 + incremental0,
        total_claimable1=tokens_owed_1 + incremental1,
    )


def calculate_position_unclaimed_fees(
    pool: Pool,
    position: Position,
    lower_tick: Tick,
    upper_tick: Tick
) -> UnclaimedFees:
    """스냅샷 레코드로부터 미수령 수수료 계산

    Args:
        pool: 풀 상태 (현재 틱, 전역 fee growth)
        position: 포지션 상태 (범위, 유동성, 체크포인트)
        lower_tick: 하한 틱 상태 (fee growth outside)
        upper_tick: 상한 틱 상태 (fee growth outside)
    """
    return calculate_unclaimed_fees(
        position.liquidity,
        pool.tick,
        position.tick_lower,
        position.tick_upper,
        pool.fee_growth_global_0_x128,
        pool.fee_growth_global_1_x128,
        lower_tick.fee_growth_outside_0_x128,
        lower_tick.fee_growth_outside_1_x128,
        upper_tick.fee_growth_outside_0_x128,
        upper_tick.fee_growth_outside_1_x128,
        position.fee_growth_inside_0_last_x128,
        position.fee_growth_inside_1_last_x128,
        position.tokens_owed_0,
        position.tokens_owed_1,
    )


def unclaimed_fees_in_quote(
    fees: UnclaimedFees,
    base_is_token0: bool,
    sqrt_price_x96: int
) -> UnclaimedFeesWithValue:
    """미수령 수수료를 base/quote로 나누고 quote 단위 가치로 환산

    Args:
        fees: 미수령 수수료
        base_is_token0: base 토큰이 token0인지 여부
        sqrt_price_x96: 현재 풀 sqrtPriceX96
    """
    if base_is_token0:
        base_amount, quote_amount = fees.total_claimable0, fees.total_claimable1
        base_as_quote = value_of_token0_amount_in_token1(base_amount, sqrt_price_x96)
    else:
        base_amount, quote_amount = fees.total_claimable1, fees.total_claimable0
        base_as_quote = value_of_token1_amount_in_token0(base_amount, sqrt_price_x96)

    return UnclaimedFeesWithValue(
        fees=fees,
        base_token_amount=base_amount,
        quote_token_amount=quote_amount,
        value_in_quote_token=quote_amount + base_as_quote,
    )
