"""EVM address format validation."""

from web3 import Web3

from src.security.exceptions import InvalidTokenAddressError


def is_valid_address(address: object) -> bool:
    """True for a 0x-prefixed 40-hex address.

    All-lowercase and all-uppercase forms are accepted; mixed case must
    carry a valid EIP-55 checksum.
    """
    if not isinstance(address, str):
        return False
    s = address.strip()
    if not s.startswith("0x") or len(s) != 42:
        return False
    return Web3.is_address(s)


def normalize_address(address: object) -> str:
    """Validate and return the lowercase form used for list lookups and cache keys.

    Raises:
        InvalidTokenAddressError: if the address is malformed.
    """
    if not is_valid_address(address):
        raise InvalidTokenAddressError(address)
    return address.strip().lower()  # type: ignore[union-attr]
