"""Exceptions raised while building consensus-layer messages."""


class DepositoorError(Exception):
    """Base class for all message-construction errors."""


class InvalidEncoding(DepositoorError, ValueError):
    """Input could not be decoded to bytes or has the wrong shape."""


class InvalidNetworkInfo(DepositoorError, ValueError):
    """Fork version, validators root or domain has the wrong length."""


class InvalidWithdrawalKey(DepositoorError, ValueError):
    """Withdrawal key is neither a 48-byte BLS pubkey nor a 20-byte address."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Withdrawal key must be a 48 byte BLS pubkey or a 20 byte execution address, "
            f"got {length} bytes"
        )


class InvalidObjectRoot(DepositoorError, ValueError):
    """Object root passed to the signing-root builder is not 32 bytes."""


class InvalidAmount(DepositoorError, ValueError):
    """Deposit amount is outside (0, 2**64)."""


class MissingParameter(DepositoorError, ValueError):
    """A required option was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required parameter: {name}")


class SignerError(DepositoorError):
    """The signer could not serve a request."""


class SignerMismatch(DepositoorError):
    """Signer returned a signature made by an unexpected key."""

    def __init__(self, expected: bytes, actual: bytes):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Incorrect signer returned: expected {expected.hex()[:16]}..., "
            f"got {actual.hex()[:16]}..."
        )
