"""
집중화된 유동성 엔진 상수 정의

온체인 수준 정밀도를 위한 상수들:
- Q96: sqrt price 인코딩에 사용 (2^96)
- Q128: fee growth 인코딩에 사용 (2^128)
- FEE_TIERS: 지원되는 수수료 티어
- TICK_SPACINGS: 각 수수료 티어별 틱 간격
"""

from typing import Dict

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96
Q128: int = 2 ** 128
Q192: int = 2 ** 192

# 수수료 티어 (basis points 단위의 1/100)
# 100 = 0.01%, 500 = 0.05%, 3000 = 0.30%, 10000 = 1.00%
FEE_TIERS: Dict[int, str] = {
    100: "0.01%",
    500: "0.05%",
    3000: "0.30%",
    10000: "1.00%",
}

# 각 수수료 티어별 틱 간격
TICK_SPACINGS: Dict[int, int] = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# TickMath sqrtPriceX96 범위 (MIN_TICK, MAX_TICK에 대응)
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# uint256 최대값
UINT256_MAX: int = 2 ** 256 - 1
