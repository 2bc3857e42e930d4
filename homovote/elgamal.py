"""
Additive (exponential) El Gamal encryption.

A message m is encrypted as (g^r, h^r * g^m) so that multiplying two
ciphertexts componentwise encrypts the sum of their plaintexts. Decryption
recovers g^m and then searches m in a bounded range, which is only sound
because ballots and tallies are small.

Group and key generation are provided for tests and demonstrations; in a
deployment the key material comes from an external key-management service.
"""
import logging

from Crypto.Util.number import getPrime, isPrime

from . import config
from .errors import InvalidArgument, SearchSpaceExhausted
from .modint import ModInteger, default_rng

logger = logging.getLogger(__name__)


def _randfunc(rng):
    """Adapt a getrandbits() generator to pycryptodome's randfunc(n_bytes)."""
    def randfunc(n):
        return rng.getrandbits(8 * n).to_bytes(n, "big") if n else b""
    return randfunc


def validate_group(p, q, g):
    """Are (p, q, g) a safe prime, its Sophie Germain prime and a generator
    of the subgroup of quadratic residues (of order q)?"""
    return (
        p > 3 and
        q * 2 + 1 == p and
        isPrime(p) and
        isPrime(q) and
        1 < g < p and
        pow(g, q, p) == 1
    )


def random_generator(p, q, rng=None):
    """
    Take uniformly at random a generator of the group.
    Since the group is cyclic and of prime order,
    any (non-unitary) element is a generator.
    """
    rng = default_rng(rng)
    g = 1
    while g == 1:
        # squaring any element of Z*_p lands in the subgroup of order q
        g_prime = int(ModInteger.random(p - 3, rng)) + 2
        g = pow(g_prime, 2, p)
    assert pow(g, q, p) == 1
    return g


def gen_group(qnbits=None, rng=None):
    """Generate a safe-prime group.

    :param qnbits: size of q in bits, defaults to config.QNBITS
    :returns: (p, q, g)
    """
    qnbits = config.QNBITS if qnbits is None else qnbits
    rng = default_rng(rng)
    randfunc = _randfunc(rng)
    p = 4
    while not isPrime(p):
        q = getPrime(qnbits, randfunc=randfunc)
        p = 2 * q + 1
    g = random_generator(p, q, rng)
    logger.debug("generated group with p of %d bits", p.bit_length())
    return p, q, g


def gen_keypair(p, q, g, rng=None):
    """
    @returns (sk, pk) with sk a PrivateKey and pk the matching PublicKey.
    """
    x = int(ModInteger.random(q, rng))
    sk = PrivateKey(p, q, g, x)
    return sk, sk.public_key()


def combine_keys(public_keys):
    """
    Given the public keys of the trustees, combine them to obtain the key of
    the election. Decrypting under the combined key needs the decryption
    factor of every trustee.
    """
    if not public_keys:
        raise InvalidArgument("no public key to combine")
    first = public_keys[0]
    h = first.h
    for key in public_keys[1:]:
        if (key.p, key.q, key.g) != (first.p, first.q, first.g):
            raise InvalidArgument("public keys do not share the same group")
        h = h * key.h
    return PublicKey(first.p, first.q, first.g, h)


class PublicKey:
    """El Gamal public key {p, q, g, h} with h = g^x mod p."""

    __slots__ = ("p", "q", "_g", "_h")

    def __init__(self, p, q, g, h):
        self.p = int(p)
        self.q = int(q)
        self._g = int(g) % self.p
        self._h = int(h) % self.p

    @property
    def g(self):
        """The generator, as a ModInteger modulo p."""
        return ModInteger(self._g, self.p)

    @property
    def h(self):
        """The public value g^x, as a ModInteger modulo p."""
        return ModInteger(self._h, self.p)

    def _key(self):
        return (self.p, self.q, self._g, self._h)

    def __eq__(self, other):
        """Makes pk1 == pk2 work."""
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        """Needed to use public keys as keys of dict objects."""
        return hash(self._key())

    def __repr__(self):
        return "{}(p={}, q={}, g={}, h={})".format(type(self).__name__, self.p, self.q, self._g, self._h)

    def encrypt(self, m, rng=None):
        return encrypt(self, m, rng)


class PrivateKey:
    """El Gamal private key {p, q, g, x}."""

    __slots__ = ("p", "q", "_g", "x")

    def __init__(self, p, q, g, x):
        self.p = int(p)
        self.q = int(q)
        self._g = int(g) % self.p
        self.x = int(x) % self.q

    @property
    def g(self):
        return ModInteger(self._g, self.p)

    def _key(self):
        return (self.p, self.q, self._g, self.x)

    def __eq__(self, other):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        # x stays out of logs and tracebacks
        return "{}(p={}, q={}, g={})".format(type(self).__name__, self.p, self.q, self._g)

    def public_key(self):
        """Generate the corresponding public key.

        :rtype: PublicKey
        """
        return PublicKey(self.p, self.q, self._g, pow(self._g, self.x, self.p))

    def decrypt(self, c, bound=None):
        return decrypt(self, c, bound)


class CipherText:
    """Additive El Gamal ciphertext (G, H) = (g^r, h^r * g^m).

    r is the encryption randomness. Only the party who encrypted knows it;
    it is needed to prove the ciphertext's content but never to verify or
    combine ciphertexts, and it is never serialized. Ciphertexts compare
    equal on (G, H) alone.

    Thanks to group homomorphism, ca.operate(cb) (or ca + cb) encrypts the
    sum of the plaintexts of ca and cb.
    """

    __slots__ = ("big_g", "big_h", "r")

    def __init__(self, big_g, big_h, r=None):
        self.big_g = big_g
        self.big_h = big_h
        self.r = r

    def __eq__(self, other):
        if not isinstance(other, CipherText):
            return NotImplemented
        return self.big_g == other.big_g and self.big_h == other.big_h

    def __hash__(self):
        return hash((self.big_g, self.big_h))

    def __repr__(self):
        """Pretty-printing for debug."""
        return "{}(G={}, H={})".format(type(self).__name__, self.big_g, self.big_h)

    def operate(self, other):
        """Generate a new ciphertext that encrypts the sum of the plaintexts
        corresponding to self and other.

        The randomness of the result is the sum of both randomnesses, and is
        unknown as soon as one of them is.

        :param other: CipherText
        :rtype: CipherText
        """
        r = None
        if self.r is not None and other.r is not None:
            r = self.r.add(other.r)
        return CipherText(self.big_g.multiply(other.big_g), self.big_h.multiply(other.big_h), r)

    __add__ = operate

    def without_randomness(self):
        """The same ciphertext, as any third party sees it."""
        return CipherText(self.big_g, self.big_h)

    def rerandomize(self, pk, rng=None):
        """Encrypt the same plaintext again, by adding an encryption of 0."""
        return self.operate(encrypt(pk, 0, rng))


def encrypt(pk, m, rng=None):
    """Encrypt a message.

    :param pk: public key
    :type pk: PublicKey
    :param m: plaintext
    :type m: int or ModInteger
    :param rng: random generator handle
    :rtype: CipherText
    """
    r = ModInteger.random(pk.q, rng)
    big_g = pk.g.pow(r)
    big_h = pk.h.pow(r).multiply(pk.g.pow(m))
    return CipherText(big_g, big_h, r)


def decrypt(sk, c, bound=None):
    """Decrypt ciphertext c.

    g^m = H / G^x is computed, then m is searched among 0, 1, ..., bound.
    This is not a general decryption algorithm: it only terminates quickly
    because plaintexts (ballots, tallies) are small.

    :param sk: private key
    :type sk: PrivateKey
    :param c: cipertext
    :type c: CipherText
    :param bound: largest plaintext searched, defaults to
        config.DECRYPT_SEARCH_BOUND
    :returns: plaintext
    :rtype: int
    :raises SearchSpaceExhausted: if no m <= bound matches
    """
    bound = config.DECRYPT_SEARCH_BOUND if bound is None else bound
    g_to_m = c.big_h.with_modulus(sk.p).divide(c.big_g.with_modulus(sk.p).pow(sk.x))
    g = sk.g
    gg = ModInteger(1, sk.p)
    for i in range(bound + 1):
        if gg == g_to_m:
            return i
        gg = gg.multiply(g)
    logger.warning("no plaintext below %d matches the ciphertext", bound)
    raise SearchSpaceExhausted("no plaintext in [0, {}] decrypts {!r}".format(bound, c))
