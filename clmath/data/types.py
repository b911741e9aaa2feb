"""
풀/포지션 스냅샷 데이터 타입 정의

호출자가 보유한 풀/포지션 스냅샷을 Python dataclass로 정의.
모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.
from_dict는 subgraph 스타일의 camelCase 페이로드를 읽습니다.
"""

from dataclasses import dataclass
from enum import Enum

from ..constants import TICK_SPACINGS


class Protocol(str, Enum):
    """스냅샷을 제공한 프로토콜

    엔진은 Uniswap V3 형태의 숫자 필드만 읽으므로
    프로토콜 구분은 데이터 경계에서만 사용됩니다.
    """
    UNISWAP_V3 = "uniswapv3"


@dataclass(frozen=True)
class Token:
    """ERC20 토큰 정보"""
    address: str  # 컨트랙트 주소
    decimals: int
    symbol: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Token":
        return cls(
            address=data.get("address", data.get("id", "")),
            decimals=int(data["decimals"]),
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
        )


@dataclass(frozen=True)
class Pool:
    """풀 상태 스냅샷

    Global State (Section 6.2, Table 1):
    - tick: 현재 틱 인덱스 (i_c)
    - sqrt_price_x96: 현재 √가격 (Q96 인코딩)
    - fee_growth_global_0_x128: token0 단위유동성당 누적수수료 (Q128)
    - fee_growth_global_1_x128: token1 단위유동성당 누적수수료 (Q128)
    """
    address: str
    fee_tier: int  # 수수료 티어 (100, 500, 3000, 10000)
    tick: int
    sqrt_price_x96: int
    token0: Token
    token1: Token
    liquidity: int = 0
    fee_growth_global_0_x128: int = 0  # f_g,0
    fee_growth_global_1_x128: int = 0  # f_g,1
    protocol: Protocol = Protocol.UNISWAP_V3

    @property
    def tick_spacing(self) -> int:
        if self.fee_tier not in TICK_SPACINGS:
            raise ValueError(f"지원하지 않는 수수료 티어: {self.fee_tier}")
        return TICK_SPACINGS[self.fee_tier]

    @classmethod
    def from_dict(cls, data: dict) -> "Pool":
        return cls(
            address=data.get("address", data.get("id", "")),
            fee_tier=int(data["feeTier"]),
            tick=int(data["tick"]),
            sqrt_price_x96=int(data["sqrtPrice"]),
            token0=Token.from_dict(data["token0"]),
            token1=Token.from_dict(data["token1"]),
            liquidity=int(data.get("liquidity", 0)),
            fee_growth_global_0_x128=int(data.get("feeGrowthGlobal0X128", 0)),
            fee_growth_global_1_x128=int(data.get("feeGrowthGlobal1X128", 0)),
            protocol=Protocol(data.get("protocol", Protocol.UNISWAP_V3.value)),
        )


@dataclass(frozen=True)
class Tick:
    """Tick-Indexed State (Section 6.3, Table 2)

    - fee_growth_outside_0_x128: 틱 외부 누적수수료 token0 (f_o,0)
    - fee_growth_outside_1_x128: 틱 외부 누적수수료 token1 (f_o,1)
    """
    tick_idx: int
    fee_growth_outside_0_x128: int = 0
    fee_growth_outside_1_x128: int = 0
    liquidity_gross: int = 0
    liquidity_net: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "Tick":
        return cls(
            tick_idx=int(data["tickIdx"]),
            fee_growth_outside_0_x128=int(data.get("feeGrowthOutside0X128", 0)),
            fee_growth_outside_1_x128=int(data.get("feeGrowthOutside1X128", 0)),
            liquidity_gross=int(data.get("liquidityGross", 0)),
            liquidity_net=int(data.get("liquidityNet", 0)),
        )


@dataclass(frozen=True)
class Position:
    """Position-Indexed State (Section 6.4, Table 3)

    - fee_growth_inside_0_last_x128: 마지막 체크포인트의 범위 내 수수료 token0 (f_r,0(t_0))
    - fee_growth_inside_1_last_x128: 마지막 체크포인트의 범위 내 수수료 token1 (f_r,1(t_0))
    - tokens_owed_0 / tokens_owed_1: 체크포인트에 이미 반영된 미수령 수수료
    """
    tick_lower: int  # i_l
    tick_upper: int  # i_u
    liquidity: int  # l
    fee_growth_inside_0_last_x128: int = 0
    fee_growth_inside_1_last_x128: int = 0
    tokens_owed_0: int = 0
    tokens_owed_1: int = 0
    pool_address: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        pool = data.get("pool", "")
        return cls(
            tick_lower=int(data["tickLower"]),
            tick_upper=int(data["tickUpper"]),
            liquidity=int(data["liquidity"]),
            fee_growth_inside_0_last_x128=int(data.get("feeGrowthInside0LastX128", 0)),
            fee_growth_inside_1_last_x128=int(data.get("feeGrowthInside1LastX128", 0)),
            tokens_owed_0=int(data.get("tokensOwed0", 0)),
            tokens_owed_1=int(data.get("tokensOwed1", 0)),
            pool_address=pool.get("id", "") if isinstance(pool, dict) else pool,
        )
