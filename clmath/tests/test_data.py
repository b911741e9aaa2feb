"""
Data layer 테스트

스냅샷 dataclass의 from_dict와 토큰 주소 정렬을 테스트합니다.
"""

import pytest

from ..data.types import Protocol, Token, Pool, Tick, Position
from ..data.tokens import (
    TokenMapping,
    normalize_address,
    same_address,
    compare_addresses,
    is_token0,
    sort_tokens,
    get_token_mapping,
)

WETH_ADDRESS = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
USDC_ADDRESS = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
WBTC_ADDRESS = "0x2f2a2543b76a4166549f7aab2e75bef0aefc5b0f"

POOL_PAYLOAD = {
    "id": "0xc6962004f452be9203591991d15f6b388e09e8d0",
    "feeTier": "500",
    "tick": "-193909",
    "sqrtPrice": "4880027310900678652549898",
    "liquidity": "12345678901234567890",
    "feeGrowthGlobal0X128": "1000000000000000000000000000000000000",
    "feeGrowthGlobal1X128": "2000000000000000000000000000000000000",
    "token0": {"id": WETH_ADDRESS.lower(), "symbol": "WETH", "name": "Wrapped Ether", "decimals": "18"},
    "token1": {"id": USDC_ADDRESS.lower(), "symbol": "USDC", "name": "USD Coin", "decimals": "6"},
}


class TestTypes:
    """스냅샷 타입 from_dict 테스트"""

    def test_pool_from_dict(self):
        pool = Pool.from_dict(POOL_PAYLOAD)
        assert pool.tick == -193909
        assert pool.sqrt_price_x96 == 4880027310900678652549898
        assert pool.fee_tier == 500
        assert pool.tick_spacing == 10
        assert pool.token0.decimals == 18
        assert pool.token1.symbol == "USDC"
        assert pool.fee_growth_global_1_x128 == 2 * 10 ** 36
        assert pool.protocol is Protocol.UNISWAP_V3

    def test_unknown_fee_tier_spacing(self):
        pool = Pool.from_dict({**POOL_PAYLOAD, "feeTier": "2500"})
        with pytest.raises(ValueError):
            pool.tick_spacing

    def test_tick_from_dict(self):
        tick = Tick.from_dict({
            "tickIdx": "-194000",
            "feeGrowthOutside0X128": "5",
            "feeGrowthOutside1X128": "7",
            "liquidityNet": "-100",
        })
        assert tick == Tick(-194000, 5, 7, 0, -100)

    def test_position_from_dict(self):
        position = Position.from_dict({
            "tickLower": "-194000",
            "tickUpper": "-193800",
            "liquidity": "1000",
            "feeGrowthInside0LastX128": "11",
            "tokensOwed1": "3",
            "pool": {"id": POOL_PAYLOAD["id"]},
        })
        assert position.tick_lower == -194000
        assert position.liquidity == 1000
        assert position.fee_growth_inside_0_last_x128 == 11
        assert position.fee_growth_inside_1_last_x128 == 0
        assert position.tokens_owed_1 == 3
        assert position.pool_address == POOL_PAYLOAD["id"]

    def test_records_are_frozen(self):
        token = Token(WETH_ADDRESS, 18, "WETH")
        with pytest.raises(AttributeError):
            token.decimals = 6


class TestTokens:
    """토큰 주소 정렬 테스트"""

    def test_normalize_address(self):
        assert normalize_address(WETH_ADDRESS.lower()) == WETH_ADDRESS

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            normalize_address("0x1234")
        with pytest.raises(ValueError):
            normalize_address(None)

    def test_address_without_prefix(self):
        """0x 접두사 없는 hex는 거부"""
        with pytest.raises(ValueError):
            normalize_address(WETH_ADDRESS.lower()[2:])

    def test_same_address_ignores_case(self):
        assert same_address(USDC_ADDRESS.lower(), USDC_ADDRESS)
        assert not same_address(USDC_ADDRESS, WETH_ADDRESS)

    def test_compare_addresses(self):
        assert compare_addresses(WETH_ADDRESS, USDC_ADDRESS) == -1
        assert compare_addresses(USDC_ADDRESS, WETH_ADDRESS) == 1
        assert compare_addresses(WETH_ADDRESS, WETH_ADDRESS.lower()) == 0

    def test_is_token0(self):
        assert is_token0(WETH_ADDRESS, USDC_ADDRESS)
        assert not is_token0(USDC_ADDRESS, WETH_ADDRESS)
        assert is_token0(WBTC_ADDRESS, WETH_ADDRESS)

    def test_sort_tokens(self):
        weth = Token(WETH_ADDRESS, 18, "WETH")
        usdc = Token(USDC_ADDRESS, 6, "USDC")
        assert sort_tokens(usdc, weth) == (weth, usdc)
        assert sort_tokens(weth, usdc) == (weth, usdc)

    def test_token_mapping(self):
        mapping = get_token_mapping(WETH_ADDRESS, USDC_ADDRESS, WETH_ADDRESS, USDC_ADDRESS)
        assert mapping == TokenMapping(base_is_token0=True, quote_is_token0=False)

        reversed_mapping = get_token_mapping(WETH_ADDRESS, USDC_ADDRESS, USDC_ADDRESS, WETH_ADDRESS)
        assert reversed_mapping == TokenMapping(base_is_token0=False, quote_is_token0=True)

    def test_token_mapping_same_token(self):
        with pytest.raises(ValueError):
            get_token_mapping(WETH_ADDRESS, USDC_ADDRESS, USDC_ADDRESS, USDC_ADDRESS)

    def test_token_mapping_foreign_token(self):
        with pytest.raises(ValueError):
            get_token_mapping(WETH_ADDRESS, USDC_ADDRESS, WBTC_ADDRESS, USDC_ADDRESS)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
