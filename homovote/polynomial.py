"""
Polynomials over Z_q, used to share a decryption key between authorities and
to recombine their decryption shares with Lagrange coefficients.
"""
from .elgamal import PrivateKey
from .errors import InvalidArgument
from .modint import ModInteger


class Polynomial:
    """f(X) = a_0 + a_1 X + ... + a_d X^d with coefficients in Z_q."""

    def __init__(self, coefficients, q):
        if not coefficients:
            raise InvalidArgument("a polynomial needs at least one coefficient")
        self.q = int(q)
        self.coefficients = tuple(ModInteger(a, self.q) for a in coefficients)

    @classmethod
    def random(cls, degree, q, rng=None, constant=None):
        """A polynomial with random coefficients; the constant term may be fixed."""
        coefficients = [ModInteger.random(q, rng) for _ in range(degree + 1)]
        if constant is not None:
            coefficients[0] = ModInteger(constant, q)
        return cls(coefficients, q)

    @property
    def degree(self):
        return len(self.coefficients) - 1

    def evaluate(self, x):
        """Horner evaluation of f(x) mod q."""
        x = ModInteger(x, self.q)
        result = ModInteger(0, self.q)
        for a in reversed(self.coefficients):
            result = result.multiply(x).add(a)
        return result

    def __repr__(self):
        return "{}(coefficients={}, q={})".format(
            type(self).__name__, [int(a) for a in self.coefficients], self.q)

    @staticmethod
    def lagrange_coefficients(points, q):
        """Lagrange basis polynomials evaluated at 0.

        For distinct non-zero points x_i, returns lambda_i such that
        f(0) = sum(lambda_i * f(x_i)) for every f of degree < len(points).

        :param points: evaluation points (the authorities' indices)
        :param q: prime modulus
        :rtype: list of ModInteger
        """
        xs = [ModInteger(x, q) for x in points]
        if len(set(xs)) != len(xs):
            raise InvalidArgument("evaluation points must be distinct")
        if any(x == 0 for x in xs):
            raise InvalidArgument("0 cannot be an evaluation point")
        coefficients = []
        for i, xi in enumerate(xs):
            numerator = ModInteger(1, q)
            denominator = ModInteger(1, q)
            for j, xj in enumerate(xs):
                if i != j:
                    numerator = numerator.multiply(xj.negate())
                    denominator = denominator.multiply(xi.subtract(xj))
            coefficients.append(numerator.divide(denominator))
        return coefficients


def deal_shares(private_key, threshold, n, rng=None):
    """Split a private key into n shares, any threshold of which decrypt.

    A trusted dealer draws f of degree threshold-1 with f(0) = x and hands
    f(i) to authority i (i = 1..n).

    :returns: list of (i, PrivateKey) pairs
    """
    if not 1 <= threshold <= n:
        raise InvalidArgument("need 1 <= threshold <= n, got threshold={} n={}".format(threshold, n))
    if n >= private_key.q:
        raise InvalidArgument("too many shares for q={}".format(private_key.q))
    f = Polynomial.random(threshold - 1, private_key.q, rng, constant=private_key.x)
    return [
        (i, PrivateKey(private_key.p, private_key.q, private_key.g, f.evaluate(i)))
        for i in range(1, n + 1)
    ]
