"""
Exceptions raised by the homovote package.
"""


class HomovoteError(Exception):
    """Base class of every error raised by homovote."""


class InvalidArgument(HomovoteError, ValueError):
    """An argument (or a serialized value) cannot be used as given."""


class NotInvertible(HomovoteError, ArithmeticError):
    """Division by an element that has no inverse modulo the current modulus."""


class SearchSpaceExhausted(HomovoteError):
    """The bounded discrete-log search found no plaintext within its cap.

    This is terminal: it means the tally is corrupt, a ballot proof was not
    checked, or the decryption shares were combined wrongly.
    """
