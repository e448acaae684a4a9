class TokenSecurityError(Exception):
    pass


class InvalidTokenAddressError(TokenSecurityError, ValueError):
    """Address failed format validation. Never reaches scoring."""

    def __init__(self, address: object) -> None:
        self.address = address
        super().__init__(f"Invalid token address: {address!r}")
