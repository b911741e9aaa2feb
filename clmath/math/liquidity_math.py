"""
Liquidity Math - 유동성 계산

Uniswap V3의 집중화된 유동성(Concentrated Liquidity) 계산.
특정 가격 범위에서의 토큰 수량과 유동성 간의 변환.

References:
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol
- 백서 Section 6.2.1: Concentrated Liquidity

핵심 공식:
    Δx = L * (√P_b - √P_a) * 2^96 / (√P_a * √P_b)   # token0
    Δy = L * (√P_b - √P_a) / 2^96                    # token1

함수 선택 우선순위:
    1. `_x96` 함수: sqrtPriceX96을 직접 받음. 틱 변환 없음, 최고 정밀도.
    2. 접미사 없는 함수: 현재 가격은 sqrtPriceX96, 범위는 틱.
       범위 경계 두 번만 틱 → sqrt 변환.
    3. `_with_tick` 함수 (레거시): 현재 가격도 틱으로 받아 세 번 변환.
       각 변환마다 독립적인 반올림이 들어가므로 정밀도가 가장 낮습니다.
       현재 틱만 알고 있는 호출자와의 호환성을 위해 유지합니다.

퇴화 입력(수량 <= 0, 상한 <= 하한)은 예외 없이 0을 반환합니다.
"""

from typing import NamedTuple

from loguru import logger

from ..constants import Q96, Q192
from .tick_math import get_sqrt_ratio_at_tick


class TokenAmounts(NamedTuple):
    """토큰 수량 쌍 (최소 단위, token0 < token1 순서)"""
    token0_amount: int
    token1_amount: int


# === 단일 토큰 기본 함수 ===

def get_amount0_from_liquidity(
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """유동성에서 token0 수량 계산

    공식: Δx = L * (√P_b - √P_a) * 2^96 / (√P_a * √P_b)

    Args:
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount0 (token0 수량, 최소 단위)
    """
    if sqrt_price_upper_x96 <= sqrt_price_lower_x96 or liquidity <= 0:
        return 0

    numerator = liquidity * (sqrt_price_upper_x96 - sqrt_price_lower_x96) * Q96
    denominator = sqrt_price_upper_x96 * sqrt_price_lower_x96

    if round_up:
        return _div_rounding_up(numerator, denominator)
    return numerator // denominator


def get_amount1_from_liquidity(
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    liquidity: int,
    round_up: bool = False
) -> int:
    """유동성에서 token1 수량 계산

    공식: Δy = L * (√P_b - √P_a) / 2^96

    Args:
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        liquidity: 유동성
        round_up: True면 올림, False면 내림

    Returns:
        amount1 (token1 수량, 최소 단위)
    """
    if sqrt_price_upper_x96 <= sqrt_price_lower_x96 or liquidity <= 0:
        return 0

    product = liquidity * (sqrt_price_upper_x96 - sqrt_price_lower_x96)

    if round_up:
        return _div_rounding_up(product, Q96)
    return product // Q96


def get_liquidity_from_amount0(
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    amount0: int,
    round_up: bool = False
) -> int:
    """token0 수량에서 유동성 계산

    공식: L = Δx * √P_a * √P_b / (2^96 * (√P_b - √P_a))

    Args:
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        amount0: token0 수량
        round_up: True면 올림, False면 내림

    Returns:
        유동성
    """
    if sqrt_price_upper_x96 <= sqrt_price_lower_x96 or amount0 <= 0:
        return 0

    numerator = amount0 * (sqrt_price_lower_x96 * sqrt_price_upper_x96)
    denominator = Q96 * (sqrt_price_upper_x96 - sqrt_price_lower_x96)

    if round_up:
        return _div_rounding_up(numerator, denominator)
    return numerator // denominator


def get_liquidity_from_amount1(
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    amount1: int,
    round_up: bool = False
) -> int:
    """token1 수량에서 유동성 계산

    공식: L = Δy * 2^96 / (√P_b - √P_a)

    Args:
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        amount1: token1 수량
        round_up: True면 올림, False면 내림

    Returns:
        유동성
    """
    if sqrt_price_upper_x96 <= sqrt_price_lower_x96 or amount1 <= 0:
        return 0

    numerator = amount1 * Q96
    denominator = sqrt_price_upper_x96 - sqrt_price_lower_x96

    if round_up:
        return _div_rounding_up(numerator, denominator)
    return numerator // denominator


# === sqrtPriceX96 기반 (최고 정밀도) ===

def get_token_amounts_from_liquidity_x96(
    liquidity: int,
    sqrt_price_current_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    round_up: bool = False
) -> TokenAmounts:
    """유동성에서 토큰 수량 계산

    현재 가격과 범위, 유동성이 주어졌을 때
    포지션이 보유한 토큰 수량을 계산합니다.

    Args:
        liquidity: 유동성
        sqrt_price_current_x96: 현재 sqrtPriceX96
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        round_up: True면 모든 나눗셈을 올림

    Returns:
        TokenAmounts(token0_amount, token1_amount)
    """
    if liquidity <= 0:
        return TokenAmounts(0, 0)

    if sqrt_price_current_x96 <= sqrt_price_lower_x96:
        # 가격이 범위 아래: token0만 보유
        return TokenAmounts(
            get_amount0_from_liquidity(sqrt_price_lower_x96, sqrt_price_upper_x96, liquidity, round_up),
            0,
        )

    if sqrt_price_current_x96 >= sqrt_price_upper_x96:
        # 가격이 범위 위: token1만 보유
        return TokenAmounts(
            0,
            get_amount1_from_liquidity(sqrt_price_lower_x96, sqrt_price_upper_x96, liquidity, round_up),
        )

    # 가격이 범위 내: 양쪽 토큰 보유
    return TokenAmounts(
        get_amount0_from_liquidity(sqrt_price_current_x96, sqrt_price_upper_x96, liquidity, round_up),
        get_amount1_from_liquidity(sqrt_price_lower_x96, sqrt_price_current_x96, liquidity, round_up),
    )


def get_liquidity_from_token_amounts_x96(
    sqrt_price_current_x96: int,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    token0_amount: int,
    token1_amount: int
) -> int:
    """토큰 수량에서 유동성 계산

    현재 가격과 범위, 두 토큰 수량이 주어졌을 때
    민트 가능한 최대 유동성을 계산합니다. 항상 내림.

    Args:
        sqrt_price_current_x96: 현재 sqrtPriceX96
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        token0_amount: token0 수량
        token1_amount: token1 수량

    Returns:
        유동성 (범위 내에서는 두 제약 조건 중 작은 값)
    """
    if sqrt_price_current_x96 <= sqrt_price_lower_x96:
        # 가격이 범위 아래: token0만 사용
        return get_liquidity_from_amount0(sqrt_price_lower_x96, sqrt_price_upper_x96, token0_amount)

    if sqrt_price_current_x96 >= sqrt_price_upper_x96:
        # 가격이 범위 위: token1만 사용
        return get_liquidity_from_amount1(sqrt_price_lower_x96, sqrt_price_upper_x96, token1_amount)

    # 가격이 범위 내: 양쪽 토큰 사용, 부족한 쪽이 유동성을 결정
    liquidity0 = get_liquidity_from_amount0(sqrt_price_current_x96, sqrt_price_upper_x96, token0_amount)
    liquidity1 = get_liquidity_from_amount1(sqrt_price_lower_x96, sqrt_price_current_x96, token1_amount)
    return min(liquidity0, liquidity1)


# === 틱 범위 기반 (현재 가격은 sqrtPriceX96) ===

def get_token_amounts_from_liquidity(
    liquidity: int,
    sqrt_price_current_x96: int,
    tick_lower: int,
    tick_upper: int,
    round_up: bool = False
) -> TokenAmounts:
    """유동성에서 토큰 수량 계산 (현재 sqrtPriceX96 + 포지션 틱 범위)

    범위 경계만 틱 → sqrt 변환합니다. pool.sqrtPriceX96과 포지션 틱을 가진
    일반적인 호출자에게 권장되는 함수입니다.
    """
    return get_token_amounts_from_liquidity_x96(
        liquidity,
        sqrt_price_current_x96,
        get_sqrt_ratio_at_tick(tick_lower),
        get_sqrt_ratio_at_tick(tick_upper),
        round_up,
    )


def get_liquidity_from_token_amounts(
    sqrt_price_current_x96: int,
    tick_lower: int,
    tick_upper: int,
    token0_amount: int,
    token1_amount: int
) -> int:
    """토큰 수량에서 유동성 계산 (현재 sqrtPriceX96 + 포지션 틱 범위)"""
    return get_liquidity_from_token_amounts_x96(
        sqrt_price_current_x96,
        get_sqrt_ratio_at_tick(tick_lower),
        get_sqrt_ratio_at_tick(tick_upper),
        token0_amount,
        token1_amount,
    )


# === 레거시: 현재 가격도 틱 (정밀도 낮음) ===

def get_token_amounts_from_liquidity_with_tick(
    liquidity: int,
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    round_up: bool = False
) -> TokenAmounts:
    """유동성에서 토큰 수량 계산 (현재 틱 기반, 레거시)

    현재 가격까지 틱으로 받아 세 번의 틱 → sqrt 변환을 수행합니다.
    현재 틱의 sqrtPrice는 실제 풀 가격과 다르므로 sqrtPriceX96 기반
    함수보다 정밀도가 낮습니다. 현재 틱만 가진 호출자를 위해 유지합니다.
    """
    return get_token_amounts_from_liquidity(
        liquidity,
        get_sqrt_ratio_at_tick(tick_current),
        tick_lower,
        tick_upper,
        round_up,
    )


def get_liquidity_from_token_amounts_with_tick(
    tick_current: int,
    tick_lower: int,
    tick_upper: int,
    token0_amount: int,
    token1_amount: int
) -> int:
    """토큰 수량에서 유동성 계산 (현재 틱 기반, 레거시)

    get_token_amounts_from_liquidity_with_tick과 같은 정밀도 손실이 있습니다.
    """
    return get_liquidity_from_token_amounts(
        get_sqrt_ratio_at_tick(tick_current),
        tick_lower,
        tick_upper,
        token0_amount,
        token1_amount,
    )


# === 투자 예산 기반 유동성 ===

def get_liquidity_from_investment_amounts(
    base_amount: int,
    quote_amount: int,
    is_quote_token0: bool,
    sqrt_price_lower_x96: int,
    sqrt_price_upper_x96: int,
    sqrt_price_current_x96: int
) -> int:
    """총 투자 예산(base + quote)으로 얻을 수 있는 최대 유동성

    base 수량을 현재 가격으로 quote 단위로 환산해 하나의 예산으로 합친 뒤,
    현재 가격 위치에 따라 유동성을 계산합니다.

    - 범위 아래: 예산 전체를 token0로 환산 → L0
    - 범위 위: 예산 전체를 token1로 환산 → L1
    - 범위 내: L = budget * 2^96 / K
        K (유동성 1단위당 quote 가치, X96):
        quote = token1: K = (S - B) + floor(S * (A - S) / A)
        quote = token0: K = floor(2^192 * (A - S) / (A * S)) + floor(2^192 * (S - B) / S^2)
      (A = 상한, B = 하한, S = 현재 sqrtPriceX96)

    Args:
        base_amount: base 토큰 수량 (최소 단위)
        quote_amount: quote 토큰 수량 (최소 단위)
        is_quote_token0: quote 토큰이 token0인지 여부
        sqrt_price_lower_x96: 하한 sqrtPriceX96
        sqrt_price_upper_x96: 상한 sqrtPriceX96
        sqrt_price_current_x96: 현재 sqrtPriceX96 (slot0)

    Returns:
        유동성
    """
    if base_amount <= 0 and quote_amount <= 0:
        return 0
    if sqrt_price_upper_x96 <= sqrt_price_lower_x96:
        logger.debug(f"empty range [{sqrt_price_lower_x96}, {sqrt_price_upper_x96}], no liquidity")
        return 0

    upper = sqrt_price_upper_x96
    lower = sqrt_price_lower_x96
    current = sqrt_price_current_x96

    budget_quote = _total_budget_in_quote(base_amount, quote_amount, is_quote_token0, current)

    if current <= lower:
        # 범위 아래: 모든 유동성이 token0
        amount0 = budget_quote if is_quote_token0 else _token1_to_token0(budget_quote, current)
        return get_liquidity_from_amount0(lower, upper, amount0)

    if current >= upper:
        # 범위 위: 모든 유동성이 token1
        amount1 = _token0_to_token1(budget_quote, current) if is_quote_token0 else budget_quote
        return get_liquidity_from_amount1(lower, upper, amount1)

    if is_quote_token0:
        k_x96 = _k_x96_in_token0(lower, upper, current)
    else:
        k_x96 = _k_x96_in_token1(lower, upper, current)

    if k_x96 <= 0:
        logger.debug(f"non-positive K ({k_x96}) for range [{lower}, {upper}] at {current}")
        return 0

    return (budget_quote * Q96) // k_x96


def get_liquidity_from_investment_amounts_with_tick(
    base_amount: int,
    quote_amount: int,
    is_quote_token0: bool,
    tick_lower: int,
    tick_upper: int,
    sqrt_price_current_x96: int
) -> int:
    """총 투자 예산으로 얻을 수 있는 최대 유동성 (틱 범위 기반)

    범위 경계를 틱 → sqrt 변환하므로 sqrtPriceX96 기반 함수보다 정밀도가 낮습니다.
    """
    return get_liquidity_from_investment_amounts(
        base_amount,
        quote_amount,
        is_quote_token0,
        get_sqrt_ratio_at_tick(tick_lower),
        get_sqrt_ratio_at_tick(tick_upper),
        sqrt_price_current_x96,
    )


# === 내부 헬퍼 함수 ===

def _total_budget_in_quote(
    base_amount: int,
    quote_amount: int,
    is_quote_token0: bool,
    sqrt_price_x96: int
) -> int:
    """base 수량을 quote 단위로 환산해 quote 수량과 합산"""
    s_squared = sqrt_price_x96 * sqrt_price_x96
    if is_quote_token0:
        # quote = token0, base = token1 → quote/base = 2^192 / S^2
        base_as_quote = (base_amount * Q192) // s_squared
    else:
        # quote = token1, base = token0 → quote/base = S^2 / 2^192
        base_as_quote = (base_amount * s_squared) // Q192
    return quote_amount + base_as_quote


def _token1_to_token0(amount1: int, sqrt_price_x96: int) -> int:
    return (amount1 * Q192) // (sqrt_price_x96 * sqrt_price_x96)


def _token0_to_token1(amount0: int, sqrt_price_x96: int) -> int:
    return (amount0 * sqrt_price_x96 * sqrt_price_x96) // Q192


def _k_x96_in_token1(lower: int, upper: int, current: int) -> int:
    """유동성 1단위당 quote(token1) 가치, X96"""
    if current <= lower or current >= upper:
        return 0
    return (current - lower) + (current * (upper - current)) // upper


def _k_x96_in_token0(lower: int, upper: int, current: int) -> int:
    """유동성 1단위당 quote(token0) 가치, X96"""
    if current <= lower or current >= upper:
        return 0
    term_upper = (Q192 * (upper - current)) // (upper * current)
    term_lower = (Q192 * (current - lower)) // (current * current)
    return term_upper + term_lower


def _div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator 올림"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result
