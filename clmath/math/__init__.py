"""
Math layer for clmath

온체인 수준 정밀도의 수학 함수들:
- tick_math: Tick ↔ sqrtPriceX96 변환 (TickMath)
- price_math: 가격 ↔ sqrtPriceX96 ↔ 틱 변환
- liquidity_math: 유동성 ↔ 토큰 수량, 투자 예산 기반 유동성
- fee_math: 백서 기반 수수료 계산
- position_math: 포지션 가치, PnL, PnL 곡선
"""

from .tick_math import (
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    nearest_usable_tick,
    get_tick_spacing_for_fee,
)
from .price_math import (
    tick_to_sqrt_ratio_x96,
    encode_sqrt_ratio_x96,
    sqrt_ratio_x96_to_token1_per_token0,
    sqrt_ratio_x96_to_token0_per_token1,
    value_of_token0_amount_in_token1,
    value_of_token1_amount_in_token0,
    price_per_token0_in_token1,
    price_per_token1_in_token0,
    price_to_sqrt_ratio_x96,
    tick_to_price,
    price_to_tick,
    price_to_closest_usable_tick,
)
from .liquidity_math import (
    TokenAmounts,
    get_amount0_from_liquidity,
    get_amount1_from_liquidity,
    get_liquidity_from_amount0,
    get_liquidity_from_amount1,
    get_token_amounts_from_liquidity_x96,
    get_liquidity_from_token_amounts_x96,
    get_token_amounts_from_liquidity,
    get_liquidity_from_token_amounts,
    get_token_amounts_from_liquidity_with_tick,
    get_liquidity_from_token_amounts_with_tick,
    get_liquidity_from_investment_amounts,
    get_liquidity_from_investment_amounts_with_tick,
)
from .fee_math import (
    FeeGrowthInside,
    UnclaimedFees,
    UnclaimedFeesWithValue,
    safe_diff,
    compute_fee_growth_inside,
    calculate_incremental_fees,
    calculate_unclaimed_fees,
    calculate_position_unclaimed_fees,
    unclaimed_fees_in_quote,
)
from .position_math import (
    PositionPhase,
    PnLResult,
    PnLPoint,
    PriceRange,
    PnLCurve,
    determine_phase,
    calculate_position_value,
    calculate_pnl,
    calculate_position_value_at_price,
    generate_pnl_curve,
)
