"""
Error taxonomy for blind threshold BLS.

The library raises these; the boundary layer (:mod:`.ffi`) turns every one
of them into a plain ``False``.  Each class carries a stable ``code`` so
that logs on the library side can be correlated with a failed boundary
call.
"""

from typing import Optional

__all__ = [
    "ThresholdBLSError",
    "NullInputError",
    "MalformedBufferError",
    "InvalidSeedError",
    "VerificationError",
    "NotEnoughSharesError",
    "BlindingError",
    "ThresholdError",
]


class ThresholdBLSError(Exception):
    """Base class for all blind threshold BLS errors."""

    code = "TBLS_E000"
    default_message = "blind threshold BLS operation failed"

    def __init__(self, context: Optional[str] = None) -> None:
        self.context = context
        msg = f"[{self.code}] {self.default_message}"
        if context:
            msg += f": {context}"
        super().__init__(msg)


class NullInputError(ThresholdBLSError):
    code = "TBLS_E001"
    default_message = "a required input or output parameter is null"


class MalformedBufferError(ThresholdBLSError, ValueError):
    code = "TBLS_E002"
    default_message = "buffer has the wrong length or cannot be decoded"


class InvalidSeedError(ThresholdBLSError, ValueError):
    code = "TBLS_E003"
    default_message = "seed is too short"


class VerificationError(ThresholdBLSError):
    code = "TBLS_E100"
    default_message = "signature does not satisfy the verification equation"


class NotEnoughSharesError(ThresholdBLSError):
    code = "TBLS_E200"
    default_message = "fewer partial signatures than the threshold"

    def __init__(self, have: int, need: int) -> None:
        self.have = have
        self.need = need
        super().__init__(f"have {have}, need {need}")


class ThresholdError(ThresholdBLSError, ValueError):
    code = "TBLS_E201"
    default_message = "invalid threshold parameters"


class BlindingError(ThresholdBLSError):
    code = "TBLS_E300"
    default_message = "blinded signature cannot be unblinded"
