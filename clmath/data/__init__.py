"""
Data layer for clmath

풀/포지션 스냅샷 데이터 타입과 토큰 주소 정렬 유틸리티
"""

from .types import Protocol, Token, Pool, Tick, Position
from .tokens import (
    TokenMapping,
    normalize_address,
    same_address,
    compare_addresses,
    is_token0,
    sort_tokens,
    get_token_mapping,
)
