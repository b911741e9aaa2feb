"""
Price Math - 가격 ↔ sqrtPriceX96 ↔ 틱 변환

Uniswap V3의 가격은 sqrtPriceX96 형식으로 저장됩니다.
sqrtPriceX96 = sqrt(token1 / token0) * 2^96

이 모듈의 "가격"은 정수입니다: base 토큰 1개(10^base_decimals 최소 단위)가
quote 토큰 최소 단위로 몇 개인지를 나타냅니다 (quote 토큰 decimals 기준).

base/quote 방향은 호출자가 넘기는 base_is_token0 플래그 하나로 결정됩니다.
- base_is_token0 = True  → 가격 = token1 per token0
- base_is_token0 = False → 가격 = token0 per token1

References:
- Uniswap V3 SDK: encodeSqrtRatioX96, nearestUsableTick
"""

import math

from loguru import logger

from ..constants import Q192, MIN_TICK, MAX_TICK, MIN_SQRT_RATIO, MAX_SQRT_RATIO
from .tick_math import get_sqrt_ratio_at_tick, get_tick_at_sqrt_ratio, nearest_usable_tick


def tick_to_sqrt_ratio_x96(tick: int) -> int:
    """틱 → sqrtPriceX96 (TickMath와 비트 단위로 동일)"""
    return get_sqrt_ratio_at_tick(tick)


def encode_sqrt_ratio_x96(amount1: int, amount0: int) -> int:
    """토큰 수량 비율을 sqrtPriceX96으로 인코딩

    sqrtPriceX96 = floor(sqrt(amount1 * 2^192 / amount0))

    Args:
        amount1: token1 수량 (분자)
        amount0: token0 수량 (분모)

    Returns:
        sqrtPriceX96
    """
    if amount0 <= 0:
        raise ValueError(f"amount0는 양수여야 합니다: {amount0}")
    ratio_x192 = (amount1 << 192) // amount0
    return math.isqrt(ratio_x192)


def sqrt_ratio_x96_to_token1_per_token0(sqrt_ratio_x96: int, token0_decimals: int) -> int:
    """sqrtPriceX96 → token0 1개의 가격 (token1 최소 단위)

    price = sqrtPriceX96^2 * 10^token0_decimals / 2^192 (내림)
    """
    return (sqrt_ratio_x96 * sqrt_ratio_x96 * 10 ** token0_decimals) // Q192


def sqrt_ratio_x96_to_token0_per_token1(sqrt_ratio_x96: int, token1_decimals: int) -> int:
    """sqrtPriceX96 → token1 1개의 가격 (token0 최소 단위)

    price = 2^192 * 10^token1_decimals / sqrtPriceX96^2 (내림)

    sqrt_ratio_x96_to_token1_per_token0의 정확한 역수가 아닙니다.
    양쪽 모두 내림을 하므로 비대칭 오차가 생깁니다.
    """
    return (Q192 * 10 ** token1_decimals) // (sqrt_ratio_x96 * sqrt_ratio_x96)


def value_of_token0_amount_in_token1(token0_amount: int, sqrt_price_x96: int) -> int:
    """token0 수량(최소 단위)을 현재 가격의 token1 수량으로 환산

    amount1 = amount0 * S^2 / 2^192
    """
    return (token0_amount * sqrt_price_x96 * sqrt_price_x96) // Q192


def value_of_token1_amount_in_token0(token1_amount: int, sqrt_price_x96: int) -> int:
    """token1 수량(최소 단위)을 현재 가격의 token0 수량으로 환산

    amount0 = amount1 * 2^192 / S^2
    """
    return (token1_amount * Q192) // (sqrt_price_x96 * sqrt_price_x96)


def price_per_token0_in_token1(sqrt_price_x96: int, token0_decimals: int) -> int:
    """token0 1개(10^token0_decimals)의 token1 가격"""
    return value_of_token0_amount_in_token1(10 ** token0_decimals, sqrt_price_x96)


def price_per_token1_in_token0(sqrt_price_x96: int, token1_decimals: int) -> int:
    """token1 1개(10^token1_decimals)의 token0 가격"""
    return value_of_token1_amount_in_token0(10 ** token1_decimals, sqrt_price_x96)


def price_to_sqrt_ratio_x96(price: int, base_is_token0: bool, base_decimals: int) -> int:
    """Quote/base 정수 가격을 sqrtPriceX96으로 변환

    Args:
        price: base 토큰 1개의 가격 (quote 토큰 최소 단위)
        base_is_token0: base 토큰이 token0인지 여부
        base_decimals: base 토큰 소수점 자릿수

    Returns:
        sqrtPriceX96 값

    Raises:
        ValueError: 가격이 양수가 아닌 경우
    """
    if price <= 0:
        raise ValueError(f"가격은 양수여야 합니다: {price}")

    if base_is_token0:
        # base = token0, quote = token1 → price = token1 per token0
        amount0 = 10 ** base_decimals
        amount1 = price
    else:
        # base = token1, quote = token0 → 인코더를 위해 뒤집기
        amount0 = price
        amount1 = 10 ** base_decimals

    return encode_sqrt_ratio_x96(amount1, amount0)


def tick_to_price(tick: int, base_is_token0: bool, base_decimals: int) -> int:
    """틱 → base 토큰 1개의 quote 가격

    Example:
        >>> tick_to_price(0, True, 18)
        1000000000000000000
    """
    sqrt_ratio = tick_to_sqrt_ratio_x96(tick)
    if base_is_token0:
        return sqrt_ratio_x96_to_token1_per_token0(sqrt_ratio, base_decimals)
    return sqrt_ratio_x96_to_token0_per_token1(sqrt_ratio, base_decimals)


def _floor_tick_for_price(price: int, base_is_token0: bool, base_decimals: int) -> tuple:
    """가격의 sqrtPriceX96과 floor 틱을 (sqrt, tick) 으로 반환

    TickMath 범위를 벗어난 sqrtPriceX96은 경계값으로 고정합니다.
    """
    sqrt_price_x96 = price_to_sqrt_ratio_x96(price, base_is_token0, base_decimals)

    clamped = min(max(sqrt_price_x96, MIN_SQRT_RATIO), MAX_SQRT_RATIO - 1)
    if clamped != sqrt_price_x96:
        logger.debug(f"sqrtPriceX96 {sqrt_price_x96} for price {price} clamped to {clamped}")

    return clamped, get_tick_at_sqrt_ratio(clamped)


def price_to_tick(
    price: int,
    tick_spacing: int,
    base_is_token0: bool,
    base_decimals: int
) -> int:
    """가격 → 유효 틱 (floor 후 반올림)

    항상 floor 틱을 먼저 구한 뒤 tick_spacing에 맞춰 반올림합니다.
    틱 간격 경계 근처에서는 price_to_closest_usable_tick과 결과가 다를 수 있습니다.

    Args:
        price: base 토큰 1개의 가격 (quote 토큰 최소 단위)
        tick_spacing: 틱 간격
        base_is_token0: base 토큰이 token0인지 여부
        base_decimals: base 토큰 소수점 자릿수

    Returns:
        유효 틱

    Example:
        >>> price_to_tick(3793_895265, 10, True, 18)  # WETH/USDC
        -193910
    """
    _, tick_floor = _floor_tick_for_price(price, base_is_token0, base_decimals)
    return nearest_usable_tick(tick_floor, tick_spacing)


def price_to_closest_usable_tick(
    price: int,
    tick_spacing: int,
    base_is_token0: bool,
    base_decimals: int
) -> int:
    """가격 → sqrtPrice 거리 기준으로 가장 가까운 유효 틱

    floor 틱 t0와 t0 + 1 중 실제 sqrtPriceX96 거리가 더 가까운 틱을 고른 뒤
    tick_spacing에 맞춰 반올림합니다. 거리가 같으면 t0 + 1.

    Args:
        price: base 토큰 1개의 가격 (quote 토큰 최소 단위)
        tick_spacing: 틱 간격
        base_is_token0: base 토큰이 token0인지 여부
        base_decimals: base 토큰 소수점 자릿수

    Returns:
        유효 틱
    """
    sqrt_price_x96, t0 = _floor_tick_for_price(price, base_is_token0, base_decimals)

    if t0 >= MAX_TICK:
        return nearest_usable_tick(MAX_TICK, tick_spacing)
    if t0 <= MIN_TICK:
        return nearest_usable_tick(MIN_TICK, tick_spacing)

    s0 = get_sqrt_ratio_at_tick(t0)
    s1 = get_sqrt_ratio_at_tick(t0 + 1)

    d0 = abs(sqrt_price_x96 - s0)
    d1 = abs(s1 - sqrt_price_x96)

    t_closest = t0 if d0 < d1 else t0 + 1
    return nearest_usable_tick(t_closest, tick_spacing)
