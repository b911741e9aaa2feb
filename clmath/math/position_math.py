"""
Position Math - 포지션 가치 및 PnL 계산

포지션이 보유한 토큰 수량을 quote 토큰 단위 가치로 환산하고,
가격 구간 전체에 대한 PnL 곡선을 생성합니다.

가치는 모두 quote 토큰 최소 단위의 정수입니다.
"""

from enum import Enum
from typing import Iterator, NamedTuple, Optional

import pandas as pd
from loguru import logger

from ..config import settings
from ..data.tokens import is_token0, same_address
from .liquidity_math import get_token_amounts_from_liquidity
from .price_math import price_to_tick
from .tick_math import get_sqrt_ratio_at_tick


class PositionPhase(str, Enum):
    """현재 가격 기준 포지션 상태"""
    BELOW = "below"
    IN_RANGE = "in-range"
    ABOVE = "above"


class PnLResult(NamedTuple):
    pnl: int  # 부호 있는 손익 (quote 최소 단위)
    pnl_percent: float


class PnLPoint(NamedTuple):
    """PnL 곡선의 한 점"""
    price: int
    position_value: int
    pnl: int
    pnl_percent: float
    phase: PositionPhase


class PriceRange(NamedTuple):
    min: int
    max: int


def determine_phase(tick_current: int, tick_lower: int, tick_upper: int) -> PositionPhase:
    """포지션 상태 판별

    하한은 포함, 상한은 제외입니다.
    tick_current == tick_upper 이면 ABOVE.
    """
    if tick_current < tick_lower:
        return PositionPhase.BELOW
    if tick_current >= tick_upper:
        return PositionPhase.ABOVE
    return PositionPhase.IN_RANGE


def calculate_position_value(
    liquidity: int,
    sqrt_price_current_x96: int,
    tick_lower: int,
    tick_upper: int,
    current_price: int,
    base_is_token0: bool,
    base_decimals: int
) -> int:
    """포지션 가치 (quote 토큰 최소 단위)

    base 수량은 current_price로 환산하고 quote 수량은 그대로 더합니다.

    Args:
        liquidity: 포지션 유동성
        sqrt_price_current_x96: 현재 sqrtPriceX96
        tick_lower: 하한 틱
        tick_upper: 상한 틱
        current_price: base 토큰 1개의 가격 (quote 최소 단위)
        base_is_token0: base 토큰이 token0인지 여부
        base_decimals: base 토큰 소수점 자릿수

    Returns:
        quote 토큰 단위 포지션 가치
    """
    if liquidity <= 0:
        return 0

    amounts = get_token_amounts_from_liquidity(
        liquidity, sqrt_price_current_x96, tick_lower, tick_upper
    )
    base_unit = 10 ** base_decimals

    if base_is_token0:
        # token0 = base, token1 = quote
        return amounts.token0_amount * current_price // base_unit + amounts.token1_amount
    # token0 = quote, token1 = base
    return amounts.token0_amount + amounts.token1_amount * current_price // base_unit


def calculate_pnl(current_value: int, cost_basis: int) -> PnLResult:
    """미실현 손익 계산

    pnl_percent는 소수 둘째 자리까지, 0 방향으로 버림합니다.
    cost_basis <= 0 이면 pnl_percent = 0.0.

    Example:
        >>> calculate_pnl(1100, 1000)
        PnLResult(pnl=100, pnl_percent=10.0)
    """
    pnl = current_value - cost_basis
    if cost_basis <= 0:
        return PnLResult(pnl, 0.0)

    # 정수 나눗셈은 음수에서 내림이므로 부호를 분리해 0 방향으로 버림
    basis_points = abs(pnl) * 10000 // cost_basis
    if pnl < 0:
        basis_points = -basis_points
    return PnLResult(pnl, basis_points / 100)


def calculate_position_value_at_price(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    target_price: int,
    base_is_token0: bool,
    base_decimals: int,
    tick_spacing: int
) -> int:
    """가상의 가격에서 포지션 가치

    가격을 유효 틱으로 변환한 뒤 그 틱의 sqrtPriceX96으로 보유 수량을 구합니다.
    """
    target_tick = price_to_tick(target_price, tick_spacing, base_is_token0, base_decimals)
    sqrt_price_x96 = get_sqrt_ratio_at_tick(target_tick)
    return calculate_position_value(
        liquidity,
        sqrt_price_x96,
        tick_lower,
        tick_upper,
        target_price,
        base_is_token0,
        base_decimals,
    )


class PnLCurve:
    """PnL 곡선 (지연 계산 시퀀스)

    각 점은 불변 파라미터로부터 독립적으로 계산되므로
    몇 번이든 다시 순회할 수 있고 curve[i]로 개별 접근할 수 있습니다.
    """

    def __init__(
        self,
        liquidity: int,
        tick_lower: int,
        tick_upper: int,
        cost_basis: int,
        base_is_token0: bool,
        base_decimals: int,
        tick_spacing: int,
        price_range: PriceRange,
        num_points: int
    ):
        self.liquidity = liquidity
        self.tick_lower = tick_lower
        self.tick_upper = tick_upper
        self.cost_basis = cost_basis
        self.base_is_token0 = base_is_token0
        self.base_decimals = base_decimals
        self.tick_spacing = tick_spacing
        self.price_range = price_range
        self.num_points = num_points
        self.price_step = (price_range.max - price_range.min) // num_points

    def __len__(self) -> int:
        return self.num_points + 1

    def __getitem__(self, index: int) -> PnLPoint:
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError(f"PnL 곡선 인덱스 범위 초과: {index}")
        return self._point(self.price_at(index))

    def __iter__(self) -> Iterator[PnLPoint]:
        for i in range(len(self)):
            yield self._point(self.price_at(i))

    def __repr__(self) -> str:
        return (
            f"PnLCurve(range=[{self.price_range.min}, {self.price_range.max}], "
            f"points={len(self)}, ticks=[{self.tick_lower}, {self.tick_upper}])"
        )

    def price_at(self, index: int) -> int:
        return self.price_range.min + index * self.price_step

    def _point(self, price: int) -> PnLPoint:
        tick = price_to_tick(price, self.tick_spacing, self.base_is_token0, self.base_decimals)
        sqrt_price_x96 = get_sqrt_ratio_at_tick(tick)

        position_value = calculate_position_value(
            self.liquidity,
            sqrt_price_x96,
            self.tick_lower,
            self.tick_upper,
            price,
            self.base_is_token0,
            self.base_decimals,
        )
        pnl = calculate_pnl(position_value, self.cost_basis)

        return PnLPoint(
            price=price,
            position_value=position_value,
            pnl=pnl.pnl,
            pnl_percent=pnl.pnl_percent,
            phase=determine_phase(tick, self.tick_lower, self.tick_upper),
        )

    def to_frame(self) -> pd.DataFrame:
        """곡선 전체를 DataFrame으로 변환 (차트용)"""
        df = pd.DataFrame([point._asdict() for point in self], columns=list(PnLPoint._fields))
        df["phase"] = df["phase"].map(lambda phase: phase.value)
        return df


def generate_pnl_curve(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    cost_basis: int,
    base_token_address: str,
    quote_token_address: str,
    base_decimals: int,
    tick_spacing: int,
    price_range: PriceRange,
    num_points: Optional[int] = None
) -> PnLCurve:
    """PnL 곡선 생성

    price_range를 num_points 등분한 num_points + 1개 가격에 대해
    포지션 가치, PnL, 상태를 계산합니다.

    Args:
        liquidity: 포지션 유동성
        tick_lower: 하한 틱
        tick_upper: 상한 틱
        cost_basis: 비용 기준 (quote 최소 단위)
        base_token_address: base 토큰 주소
        quote_token_address: quote 토큰 주소
        base_decimals: base 토큰 소수점 자릿수
        tick_spacing: 틱 간격
        price_range: (min, max) 가격 구간
        num_points: 구간 수 (기본값: CLMATH_PNL_CURVE_POINTS)

    Returns:
        PnLCurve

    Raises:
        ValueError: num_points <= 0, max < min, min <= 0 이거나
            base와 quote가 같은 토큰인 경우
    """
    if num_points is None:
        num_points = settings.PNL_CURVE_POINTS
    if num_points <= 0:
        raise ValueError(f"num_points는 양수여야 합니다: {num_points}")

    price_range = PriceRange(*price_range)
    if price_range.max < price_range.min:
        raise ValueError(f"잘못된 가격 구간: min={price_range.min}, max={price_range.max}")
    if price_range.min <= 0:
        raise ValueError(f"가격은 양수여야 합니다: min={price_range.min}")

    if same_address(base_token_address, quote_token_address):
        raise ValueError("base와 quote는 같은 토큰일 수 없습니다")

    base_is_token0 = is_token0(base_token_address, quote_token_address)

    curve = PnLCurve(
        liquidity,
        tick_lower,
        tick_upper,
        cost_basis,
        base_is_token0,
        base_decimals,
        tick_spacing,
        price_range,
        num_points,
    )
    logger.debug(f"Built {curve!r}")
    return curve
