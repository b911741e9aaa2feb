"""
clmath - Uniswap V3 Concentrated Liquidity Math

온체인 수준 정밀도로 집중화된 유동성 포지션을 계산하는 라이브러리.
틱/가격 변환, 유동성 ↔ 토큰 수량, 백서 Section 6 기반 수수료 계산,
포지션 가치 및 PnL 곡선을 제공합니다.
"""

from loguru import logger

from .config import settings, configure_logging

__version__ = "0.1.0"

# 라이브러리 로그는 기본적으로 꺼둡니다 (configure_logging()으로 활성화)
logger.disable("clmath")
if settings.LOG_ENABLED:
    configure_logging()

from .constants import Q96, Q128, Q192, FEE_TIERS, TICK_SPACINGS, MIN_TICK, MAX_TICK
