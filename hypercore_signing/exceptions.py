"""Errors raised by the signing core.

None of these are retried inside the package. Retrying a signing operation
may produce two valid signatures over the same nonce, so it is always
an explicit decision of the caller.
"""


class HypercoreSigningError(Exception):
    """Base class for all signing core errors."""


class InvalidPrice(HypercoreSigningError, ValueError):
    """Price is zero, negative, not a number, or the market lacks decimals metadata."""


class InvalidKey(HypercoreSigningError, ValueError):
    """Private key material is malformed.

    Raised before any hashing takes place.
    """


class EncodingError(HypercoreSigningError):
    """Action could not be converted to its canonical form."""


class SigningFailure(HypercoreSigningError):
    """The signing primitive or a remote signer rejected the request.

    The original exception is available as ``__cause__``.
    """


class IncompleteMultiSig(HypercoreSigningError):
    """Multisig envelope was finalized without any signatures."""


class MultiSigFinalized(HypercoreSigningError):
    """A finalized multisig aggregation was modified."""
