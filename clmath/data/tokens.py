"""
토큰 주소 정렬 유틸리티

주소 검증과 체크섬은 eth-utils에 맡기고, 이 모듈은
Uniswap V3 규칙(주소가 작은 쪽이 token0)에 따른 정렬과
base/quote ↔ token0/token1 매핑만 제공합니다.
"""

from typing import NamedTuple, Tuple, TypeVar

from eth_utils import is_address, to_checksum_address

T = TypeVar("T")


class TokenMapping(NamedTuple):
    base_is_token0: bool
    quote_is_token0: bool


def normalize_address(address: str) -> str:
    """주소를 EIP-55 체크섬 형식으로 변환

    0x 접두사가 있는 40자리 hex만 허용합니다.

    Raises:
        ValueError: 유효한 EVM 주소가 아닌 경우
    """
    if not isinstance(address, str) or not address.startswith("0x") or not is_address(address):
        raise ValueError(f"유효하지 않은 EVM 주소: {address}")
    return to_checksum_address(address)


def same_address(a: str, b: str) -> bool:
    return normalize_address(a) == normalize_address(b)


def compare_addresses(address_a: str, address_b: str) -> int:
    """두 주소를 160비트 정수로 비교 (-1, 0, 1)"""
    a = int(normalize_address(address_a), 16)
    b = int(normalize_address(address_b), 16)
    return (a > b) - (a < b)


def is_token0(address_a: str, address_b: str) -> bool:
    """address_a가 token0인지 (address_a < address_b)"""
    return compare_addresses(address_a, address_b) < 0


def sort_tokens(token_a: T, token_b: T) -> Tuple[T, T]:
    """두 토큰을 (token0, token1) 순서로 정렬

    토큰 객체는 address 속성을 가져야 합니다.
    """
    if is_token0(token_a.address, token_b.address):
        return token_a, token_b
    return token_b, token_a


def get_token_mapping(
    token0_address: str,
    token1_address: str,
    base_token_address: str,
    quote_token_address: str
) -> TokenMapping:
    """풀의 token0/token1과 base/quote 토큰의 대응 관계

    Raises:
        ValueError: base와 quote가 같은 토큰이거나 풀 토큰이 아닌 경우
    """
    if same_address(base_token_address, quote_token_address):
        raise ValueError("base와 quote는 같은 토큰일 수 없습니다")

    base_is_token0 = same_address(base_token_address, token0_address)
    quote_is_token0 = same_address(quote_token_address, token0_address)

    if not base_is_token0 and not same_address(base_token_address, token1_address):
        raise ValueError(f"base 토큰은 풀의 token0 또는 token1이어야 합니다: {base_token_address}")
    if not quote_is_token0 and not same_address(quote_token_address, token1_address):
        raise ValueError(f"quote 토큰은 풀의 token0 또는 token1이어야 합니다: {quote_token_address}")

    return TokenMapping(base_is_token0, quote_is_token0)
