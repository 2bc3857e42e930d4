"""
Modular integers.

A ModInteger is a (value, modulus) pair. A modulus of 0 means "no modulus":
the usual integer arithmetic applies. Otherwise the value is always kept
reduced modulo the modulus, on construction and after every operation.

Instances are immutable; every operation returns a new ModInteger which
carries the modulus of the left operand.
"""
import functools
import secrets

from .errors import InvalidArgument, NotInvertible

_system_random = secrets.SystemRandom()


def _as_int(x):
    if isinstance(x, ModInteger):
        return x.value
    return int(x)


def default_rng(rng=None):
    """Return rng, or the process-wide cryptographically secure generator."""
    return _system_random if rng is None else rng


@functools.total_ordering
class ModInteger:
    """An integer, optionally reduced modulo a positive modulus."""

    __slots__ = ("_value", "_modulus")

    def __init__(self, value=0, modulus=0):
        value = _as_int(value)
        modulus = _as_int(modulus)
        if modulus < 0:
            raise InvalidArgument("modulus must not be negative, got {}".format(modulus))
        if modulus:
            value %= modulus
        self._value = value
        self._modulus = modulus

    @property
    def value(self):
        return self._value

    @property
    def modulus(self):
        return self._modulus

    def _new(self, value):
        return ModInteger(value, self._modulus)

    def with_modulus(self, modulus):
        """Same value, reduced modulo another modulus."""
        return ModInteger(self._value, modulus)

    @staticmethod
    def random(bound, rng=None):
        """Take uniformly at random an integer in {0,...,bound-1}.

        Raw draws of bound.bit_length() bits are rejected until one falls
        below the bound. The result carries bound as its modulus.

        :param bound: exclusive upper bound, greater than 1
        :type bound: int or ModInteger
        :param rng: object providing getrandbits(k); defaults to a
            secrets.SystemRandom instance
        :rtype: ModInteger
        """
        n = _as_int(bound)
        if n <= 1:
            raise InvalidArgument("random() needs a bound greater than 1, got {}".format(n))
        rng = default_rng(rng)
        nbits = n.bit_length()
        t = n
        while t >= n:
            t = rng.getrandbits(nbits)
        return ModInteger(t, n)

    def negate(self):
        """The additive inverse."""
        if self._modulus:
            return self._new(self._modulus - self._value)
        return self._new(-self._value)

    def add(self, other):
        return self._new(self._value + _as_int(other))

    def subtract(self, other):
        return self._new(self._value - _as_int(other))

    def multiply(self, other):
        return self._new(self._value * _as_int(other))

    def divide(self, other):
        """Multiply by the modular inverse of other.

        Without a modulus this is floor division.
        """
        b = _as_int(other)
        if not self._modulus:
            return self._new(self._value // b)
        try:
            b_inv = pow(b, -1, self._modulus)
        except ValueError:
            raise NotInvertible("{} has no inverse modulo {}".format(b, self._modulus))
        return self._new(self._value * b_inv)

    def pow(self, exponent):
        """Modular exponentiation, or the ordinary power without a modulus.

        A negative exponent inverts first, which needs a modulus.
        """
        e = _as_int(exponent)
        if self._modulus:
            try:
                return self._new(pow(self._value, e, self._modulus))
            except ValueError:
                raise NotInvertible("{} has no inverse modulo {}".format(self._value, self._modulus))
        if e < 0:
            raise InvalidArgument("negative exponent {} without a modulus".format(e))
        return self._new(self._value ** e)

    def mod(self, m):
        m = _as_int(m)
        if m <= 0:
            raise InvalidArgument("cannot reduce modulo {}".format(m))
        return self._new(self._value % m)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide
    __pow__ = pow
    __mod__ = mod
    __neg__ = negate

    def __int__(self):
        return self._value

    def __bool__(self):
        return self._value != 0

    def __eq__(self, other):
        """Compare reduced values only; the moduli are ignored."""
        if isinstance(other, ModInteger):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, (ModInteger, int)):
            return self._value < _as_int(other)
        return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return str(self._value)

    def __repr__(self):
        return "{}(value={}, modulus={})".format(type(self).__name__, self._value, self._modulus)


ZERO = ModInteger(0)
ONE = ModInteger(1)
TWO = ModInteger(2)
