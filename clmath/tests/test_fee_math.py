"""
Fee Math 테스트

백서 Section 6.3, 6.4 기반 수수료 계산 함수들을 테스트합니다.
"""

import pytest

from ..math.fee_math import (
    safe_diff,
    fee_growth_above,
    fee_growth_below,
    compute_fee_growth_inside,
    calculate_incremental_fees,
    calculate_unclaimed_fees,
    calculate_position_unclaimed_fees,
    unclaimed_fees_in_quote,
    FeeGrowthInside,
    UnclaimedFees,
)
from ..data.types import Pool, Position, Tick, Token
from ..constants import Q96, Q128


class TestSafeDiff:
    """safe_diff 테스트"""

    def test_normal(self):
        assert safe_diff(1000, 300) == 700

    def test_equal(self):
        assert safe_diff(5, 5) == 0

    def test_negative_clamped_to_zero(self):
        """uint256 랩어라운드 대신 0"""
        assert safe_diff(100, 200) == 0


class TestFeeGrowthAbove:
    """fee_growth_above 테스트 (f_a)"""

    def test_current_tick_above_target(self):
        """현재 틱이 타겟 틱 위에 있을 때: f_a = f_g - f_o"""
        result = fee_growth_above(tick_idx=100, current_tick=150,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 700

    def test_current_tick_at_target(self):
        """현재 틱이 타겟 틱과 같을 때: f_a = f_g - f_o"""
        result = fee_growth_above(tick_idx=100, current_tick=100,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 700

    def test_current_tick_below_target(self):
        """현재 틱이 타겟 틱 아래에 있을 때: f_a = f_o"""
        result = fee_growth_above(tick_idx=100, current_tick=50,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 300


class TestFeeGrowthBelow:
    """fee_growth_below 테스트 (f_b)"""

    def test_current_tick_above_target(self):
        """현재 틱이 타겟 틱 위에 있을 때: f_b = f_o"""
        result = fee_growth_below(tick_idx=100, current_tick=150,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 300

    def test_current_tick_at_target(self):
        """현재 틱이 타겟 틱과 같을 때: f_b = f_o"""
        result = fee_growth_below(tick_idx=100, current_tick=100,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 300

    def test_current_tick_below_target(self):
        """현재 틱이 타겟 틱 아래에 있을 때: f_b = f_g - f_o"""
        result = fee_growth_below(tick_idx=100, current_tick=50,
                                  fee_growth_global=1000, fee_growth_outside=300)
        assert result == 700

    def test_outside_greater_than_global(self):
        result = fee_growth_below(tick_idx=100, current_tick=50,
                                  fee_growth_global=100, fee_growth_outside=300)
        assert result == 0


class TestComputeFeeGrowthInside:
    """compute_fee_growth_inside 테스트 (f_r)"""

    def test_current_tick_in_range(self):
        """범위 내: f_r = f_g - f_o(i_l) - f_o(i_u)"""
        result = compute_fee_growth_inside(
            tick_current=0, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=1000, fee_growth_global_1=2000,
            fee_growth_outside_lower_0=100, fee_growth_outside_lower_1=300,
            fee_growth_outside_upper_0=200, fee_growth_outside_upper_1=400,
        )
        assert result == FeeGrowthInside(700, 1300)

    def test_current_tick_below_range(self):
        """범위 아래: f_r = f_o(i_l) - f_o(i_u)"""
        result = compute_fee_growth_inside(
            tick_current=-100, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=1000, fee_growth_global_1=1000,
            fee_growth_outside_lower_0=300, fee_growth_outside_lower_1=300,
            fee_growth_outside_upper_0=100, fee_growth_outside_upper_1=100,
        )
        assert result.inside0 == 200
        assert result.inside1 == 200

    def test_current_tick_above_range(self):
        """범위 위: f_r = f_o(i_u) - f_o(i_l)"""
        result = compute_fee_growth_inside(
            tick_current=100, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=1000, fee_growth_global_1=1000,
            fee_growth_outside_lower_0=100, fee_growth_outside_lower_1=100,
            fee_growth_outside_upper_0=300, fee_growth_outside_upper_1=300,
        )
        assert result.inside0 == 200

    def test_current_tick_at_upper_is_above(self):
        """상한은 제외: tick_current == tick_upper 이면 범위 위"""
        result = compute_fee_growth_inside(
            tick_current=60, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=1000, fee_growth_global_1=0,
            fee_growth_outside_lower_0=100, fee_growth_outside_lower_1=0,
            fee_growth_outside_upper_0=300, fee_growth_outside_upper_1=0,
        )
        # f_a = 1000 - 300, f_b = 100
        assert result.inside0 == 200

    def test_inconsistent_snapshot_clamped(self):
        """음수가 나올 스냅샷은 0으로 고정"""
        result = compute_fee_growth_inside(
            tick_current=0, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=100, fee_growth_global_1=100,
            fee_growth_outside_lower_0=80, fee_growth_outside_lower_1=200,
            fee_growth_outside_upper_0=80, fee_growth_outside_upper_1=0,
        )
        assert result == FeeGrowthInside(0, 0)


class TestCalculateIncrementalFees:
    """calculate_incremental_fees 테스트 (f_u)"""

    def test_basic_calculation(self):
        """fee growth 1.0 증가 × L = L"""
        assert calculate_incremental_fees(2 * Q128, Q128, 10 ** 18) == 10 ** 18

    def test_floor_rounding(self):
        assert calculate_incremental_fees(Q128 - 1, 0, 1) == 0
        assert calculate_incremental_fees(3 * Q128 // 2, 0, 3) == 4

    def test_zero_delta(self):
        assert calculate_incremental_fees(Q128, Q128, 10 ** 18) == 0

    def test_checkpoint_ahead_of_current(self):
        """체크포인트가 현재보다 크면 0 (랩어라운드 없음)"""
        assert calculate_incremental_fees(Q128, 2 * Q128, 10 ** 18) == 0


class TestCalculateUnclaimedFees:
    """calculate_unclaimed_fees 테스트"""

    def test_incremental_plus_checkpointed(self):
        result = calculate_unclaimed_fees(
            liquidity=10 ** 18,
            tick_current=0, tick_lower=-60, tick_upper=60,
            fee_growth_global_0=5 * Q128, fee_growth_global_1=10 * Q128,
            fee_growth_outside_lower_0=Q128, fee_growth_outside_lower_1=2 * Q128,
            fee_growth_outside_upper_0=Q128, fee_growth_outside_upper_1=2 * Q128,
            fee_growth_inside_last_0=2 * Q128, fee_growth_inside_last_1=5 * Q128,
            tokens_owed_0=7, tokens_owed_1=11,
        )
        # inside0 = 5 - 1 - 1 = 3, inside1 = 10 - 2 - 2 = 6
        assert result.incremental0 == 10 ** 18
        assert result.incremental1 == 10 ** 18
        assert result.checkpointed0 == 7
        assert result.checkpointed1 == 11
        assert result.total_claimable0 == 10 ** 18 + 7
        assert result.total_claimable1 == 10 ** 18 + 11

    def test_zero_liquidity_keeps_checkpointed(self):
        result = calculate_unclaimed_fees(
            0, 0, -60, 60,
            5 * Q128, 5 * Q128, 0, 0, 0, 0, 0, 0,
            tokens_owed_0=3, tokens_owed_1=4,
        )
        assert result == UnclaimedFees(0, 0, 3, 4, 3, 4)


class TestPositionUnclaimedFees:
    """스냅샷 레코드 기반 미수령 수수료"""

    def _pool(self, tick: int) -> Pool:
        return Pool(
            address="0xC6962004f452bE9203591991D15f6b388e09E8D0",
            fee_tier=500,
            tick=tick,
            sqrt_price_x96=Q96,
            token0=Token("0x82aF49447D8a07e3bd95BD0d56f35241523fBab1", 18, "WETH"),
            token1=Token("0xaf88d065e77c8cC2239327C5EDb3A432268e5831", 6, "USDC"),
            fee_growth_global_0_x128=4 * Q128,
            fee_growth_global_1_x128=8 * Q128,
        )

    def test_matches_flat_function(self):
        pool = self._pool(tick=0)
        position = Position(
            tick_lower=-100, tick_upper=100, liquidity=1000,
            fee_growth_inside_0_last_x128=Q128, fee_growth_inside_1_last_x128=2 * Q128,
            tokens_owed_0=5, tokens_owed_1=6,
        )
        lower = Tick(-100, fee_growth_outside_0_x128=Q128, fee_growth_outside_1_x128=Q128)
        upper = Tick(100, fee_growth_outside_0_x128=Q128, fee_growth_outside_1_x128=Q128)

        result = calculate_position_unclaimed_fees(pool, position, lower, upper)

        # inside0 = 4 - 1 - 1 = 2, inside1 = 8 - 1 - 1 = 6
        assert result.incremental0 == 1000
        assert result.incremental1 == 4000
        assert result.total_claimable0 == 1005
        assert result.total_claimable1 == 4006


class TestUnclaimedFeesInQuote:
    """unclaimed_fees_in_quote 테스트"""

    FEES = UnclaimedFees(90, 40, 10, 10, 100, 50)

    def test_one_to_one(self):
        result = unclaimed_fees_in_quote(self.FEES, True, Q96)
        assert result.base_token_amount == 100
        assert result.quote_token_amount == 50
        assert result.value_in_quote_token == 150

    def test_base_token0(self):
        """sqrtPrice = 2 → token0 1개 = token1 4개"""
        result = unclaimed_fees_in_quote(self.FEES, True, 2 * Q96)
        assert result.value_in_quote_token == 50 + 400

    def test_base_token1(self):
        result = unclaimed_fees_in_quote(self.FEES, False, 2 * Q96)
        assert result.base_token_amount == 50
        assert result.quote_token_amount == 100
        assert result.value_in_quote_token == 100 + 12
        assert result.fees is self.FEES


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
