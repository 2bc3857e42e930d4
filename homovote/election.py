"""
Ballots, homomorphic tally and threshold decryption of the result.

Voters cast encrypted 0/1 ballots with a membership proof. Anyone can
multiply the ballots together to obtain an encryption of the number of
1-votes. Each decryption authority (trustee) publishes a decryption factor
G^x_i of the tally together with a proof that it was computed with its key;
the factors are combined with Lagrange coefficients and the result is
recovered by a search bounded by the number of ballots cast.
"""
import collections
import functools
import logging

from . import config
from .elgamal import PublicKey, encrypt
from .errors import InvalidArgument, SearchSpaceExhausted
from .membership import MembershipProof, hash_transcript
from .modint import ModInteger

logger = logging.getLogger(__name__)


class Vote:
    """An encrypted ballot, with the proof that it encrypts an allowed value."""

    def __init__(self, ciphertext, proof=None):
        self.ciphertext = ciphertext
        self.proof = proof

    @classmethod
    def cast(cls, pk, m, domain=config.BINARY_DOMAIN, rng=None):
        """Encrypt m and prove it lies in domain.

        The returned vote still holds the encryption randomness, so that its
        owner can later combine its proof with another one.
        """
        ciphertext = encrypt(pk, m, rng)
        proof = MembershipProof.commit(pk, m, ciphertext, domain, rng)
        return cls(ciphertext, proof)

    def verify(self, pk, domain=config.BINARY_DOMAIN):
        if self.proof is None:
            return False
        return self.proof.verify(pk, self.ciphertext, domain)

    def operate(self, other):
        return Vote(self.ciphertext.operate(other.ciphertext))

    def __repr__(self):
        return "{}({!r}, proof={!r})".format(type(self).__name__, self.ciphertext, self.proof)


def _ciphertext(vote):
    return vote.ciphertext if isinstance(vote, Vote) else vote


def tally(pk, votes, rng=None):
    """
    Given the ballots of an election, return an encryption of their sum.

    The fold is seeded with a fresh encryption of 0, so the result is
    well defined (and re-randomized) even without any ballot.

    :param votes: Vote or CipherText instances
    :rtype: CipherText
    """
    seed = encrypt(pk, 0, rng).without_randomness()
    return functools.reduce(
        lambda acc, vote: acc.operate(_ciphertext(vote).without_randomness()),
        votes,
        seed
    )


def _check_share(index, share, tally_ciphertext, pk, trustee_keys):
    """The group element of a share, once its proof (if any) is checked."""
    if trustee_keys is not None:
        trustee_pk = trustee_keys[index]
    elif isinstance(share, DecryptionFactor):
        trustee_pk = PublicKey(pk.p, pk.q, pk.g, share.public_value)
    else:
        return share
    if not isinstance(share, DecryptionFactor):
        raise InvalidArgument("share {} comes without a proof".format(index + 1))
    if not share.verify(trustee_pk, tally_ciphertext):
        logger.warning("decryption factor %d rejected", index + 1)
        raise InvalidArgument("share {} is not a valid decryption factor of the tally".format(index + 1))
    return share.factor


def final_sum(shares, lagrange_coefficients, tally_ciphertext, pk, bound, trustee_keys=None):
    """Combine the decryption shares of the tally and recover the result.

    Computes G^x = prod(share_i ^ lambda_i), then g^m = H / G^x, and looks for
    m in 0..bound. Every DecryptionFactor share is verified against the tally
    first; bare group elements are trusted as they are, unless trustee_keys
    is given, in which case every share must carry a proof.

    :param shares: decryption factors (DecryptionFactor or group elements)
    :param lagrange_coefficients: one coefficient per share
    :param tally_ciphertext: encryption of the sum
    :type tally_ciphertext: elgamal.CipherText
    :param bound: largest possible result (the number of ballots)
    :param trustee_keys: public key of the trustee behind each share
    :rtype: int
    :raises InvalidArgument: if a decryption factor does not verify
    :raises SearchSpaceExhausted: if no value up to bound matches
    """
    if len(shares) != len(lagrange_coefficients):
        raise InvalidArgument("{} shares for {} Lagrange coefficients".format(
            len(shares), len(lagrange_coefficients)))
    if trustee_keys is not None and len(trustee_keys) != len(shares):
        raise InvalidArgument("{} shares for {} trustee keys".format(len(shares), len(trustee_keys)))
    p = pk.p
    pli = ModInteger(1, p)
    for i, (share, coefficient) in enumerate(zip(shares, lagrange_coefficients)):
        share = _check_share(i, share, tally_ciphertext, pk, trustee_keys)
        pli = pli.multiply(ModInteger(share, p).pow(ModInteger(coefficient, pk.q)))

    target = tally_ciphertext.big_h.with_modulus(p).divide(pli)
    logger.debug("looking for the result among %d values", bound + 1)
    g = pk.g
    gg = ModInteger(1, p)
    for j in range(bound + 1):
        if gg == target:
            return j
        gg = gg.multiply(g)
    logger.warning("tally search exhausted: no result in [0, %d]", bound)
    raise SearchSpaceExhausted("no result in [0, {}] matches the tally".format(bound))


class Election:
    """The public state of an election: its key and the ballots cast."""

    def __init__(self, public_key, domain=config.BINARY_DOMAIN):
        self.public_key = public_key
        self.domain = tuple(domain)
        self._votes = []

    @property
    def votes(self):
        return tuple(self._votes)

    def cast_vote(self, vote):
        """Record a ballot.

        A ballot carrying a proof is checked first and refused if the proof
        fails. The stored ballot never keeps its encryption randomness.
        """
        if vote.proof is not None and not vote.verify(self.public_key, self.domain):
            logger.warning("ballot %d rejected: invalid membership proof", len(self._votes) + 1)
            raise InvalidArgument("ballot carries an invalid membership proof")
        self._votes.append(Vote(vote.ciphertext.without_randomness(), vote.proof))

    def sum_votes(self, rng=None):
        """The encrypted tally, as a Vote."""
        return Vote(tally(self.public_key, self._votes, rng))

    def final_sum(self, shares, lagrange_coefficients, summed_votes, public_key=None, trustee_keys=None):
        """Recover the result, searching no further than the number of ballots."""
        public_key = self.public_key if public_key is None else public_key
        return final_sum(shares, lagrange_coefficients, _ciphertext(summed_votes),
                         public_key, len(self._votes), trustee_keys)


def compute_decryption_factor(tally_ciphertext, partial_key):
    """
    Given an encryption of the tally and the partial key of a trustee,
    compute the corresponding decryption factor G^x_i.
    """
    return tally_ciphertext.big_g.with_modulus(partial_key.p).pow(partial_key.x)


class DecryptionFactor(collections.namedtuple(
        "DecryptionFactor", ["public_value", "big_g", "factor", "commit", "response"])):
    """A trustee's decryption factor with a proof of correct computation.

    The proof shows log_g(public_value) == log_G(factor) without revealing
    the trustee's key.
    """

    __slots__ = ()

    def verify(self, pk, tally_ciphertext):
        """Given the trustee's public key and the encrypted tally, verify that
        the factor decrypts this tally and that the proof is correct."""
        p, q = pk.p, pk.q
        if self.public_value != pk.h:
            return False
        big_g = ModInteger(self.big_g, p)
        if big_g != tally_ciphertext.big_g.with_modulus(p):
            return False
        g = pk.g
        factor = ModInteger(self.factor, p)
        a, b = (ModInteger(v, p) for v in self.commit)
        challenge = hash_transcript(
            [g, self.public_value, big_g, factor, a, b], q)
        response = ModInteger(self.response, q)
        return (g.pow(response) == a.multiply(pk.h.pow(challenge)) and
                big_g.pow(response) == b.multiply(factor.pow(challenge)))


def prove_decryption_factor(tally_ciphertext, partial_key, rng=None):
    """
    Given an encryption of the tally and the partial key of a trustee,
    compute the corresponding decryption factor and the corresponding proof of
    correct computation.

    :rtype: DecryptionFactor
    """
    p, q = partial_key.p, partial_key.q
    pk = partial_key.public_key()
    big_g = tally_ciphertext.big_g.with_modulus(p)
    factor = compute_decryption_factor(tally_ciphertext, partial_key)
    s = ModInteger.random(q, rng)
    a, b = pk.g.pow(s), big_g.pow(s)
    challenge = hash_transcript([pk.g, pk.h, big_g, factor, a, b], q)
    response = s.add(challenge.multiply(partial_key.x))
    return DecryptionFactor(pk.h, big_g, factor, (a, b), response)


KeyProof = collections.namedtuple("KeyProof", ["public_value", "commit", "response"])


def prove_key_correctness(partial_key, rng=None):
    """
    Given a trustee's private key, return a proof of knowledge of it.

    :rtype: KeyProof
    """
    pk = partial_key.public_key()
    k = ModInteger.random(partial_key.q, rng)
    commit = pk.g.pow(k)
    challenge = hash_transcript([pk.g, pk.h, commit], partial_key.q)
    response = k.add(challenge.multiply(partial_key.x))
    return KeyProof(pk.h, commit, response)


def verify_key_correctness(proof, p, q, g):
    """
    Given a proof of knowledge of the secret key of a trustee,
    verify that the proof is correct.
    """
    g = ModInteger(g, p)
    h = ModInteger(proof.public_value, p)
    commit = ModInteger(proof.commit, p)
    challenge = hash_transcript([g, h, commit], q)
    return g.pow(ModInteger(proof.response, q)) == commit.multiply(h.pow(challenge))
