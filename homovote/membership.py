"""
Non-interactive proof that an additive El Gamal ciphertext encrypts a member
of a small domain D = (d_0, ..., d_{n-1}).

This is a 1-of-n OR composition of Chaum-Pedersen proofs made
non-interactive with the Fiat-Shamir heuristic. For every domain value the
prover publishes a commitment (y_i, z_i), a challenge c_i and a response s_i
such that

    y_i = g^s_i * G^-c_i    and    z_i = h^s_i * (H / g^d_i)^-c_i

and the challenges sum to the hash of (g, h, G, H, y_0, z_0, ..., y_{n-1},
z_{n-1}) modulo q. All branches but the true one are simulated; the hash
leaves the prover free to choose only one challenge.

The order of the transcript is part of the protocol: the prover and the
verifier must hash exactly the same sequence.
"""
import hashlib
import logging

import canonicaljson

from . import config
from .errors import InvalidArgument
from .modint import ModInteger

logger = logging.getLogger(__name__)


def hash_transcript(elements, q, hash_name=None):
    """Hash a sequence of integers to an integer modulo q.

    Procedure:
    * map the ordered list to json in binary canonical form (see
    <https://pypi.org/project/canonicaljson/>)
    * hash it (SHA256 unless configured otherwise)
    * interpret the byte string as a big-endian integer
    * reduce it mod q
    """
    hash_name = config.HASH_NAME if hash_name is None else hash_name
    payload = canonicaljson.encode_canonical_json([int(e) for e in elements])
    return ModInteger(
        int.from_bytes(hashlib.new(hash_name, payload).digest(), byteorder="big"),
        q
    )


def _domain(domain):
    if not domain:
        raise InvalidArgument("the domain must not be empty")
    values = [int(d) for d in domain]
    if len(set(values)) != len(values):
        raise InvalidArgument("the domain lists a value twice: {}".format(values))
    return values


def _simulated_commitment(g, h, big_g, big_h, d, s, c):
    """(g^s * G^-c, h^s * (H / g^d)^-c), the commitment a verifier recomputes."""
    neg_c = c.negate()
    y = g.pow(s).multiply(big_g.pow(neg_c))
    z = h.pow(s).multiply(big_h.divide(g.pow(d)).pow(neg_c))
    return y, z


class MembershipProof:
    """Proof that a ciphertext encrypts one of the values of a domain."""

    def __init__(self, p, q, y, z, s, c):
        self.p = int(p)
        self.q = int(q)
        self.y = tuple(ModInteger(v, self.p) for v in y)
        self.z = tuple(ModInteger(v, self.p) for v in z)
        self.s = tuple(ModInteger(v, self.q) for v in s)
        self.c = tuple(ModInteger(v, self.q) for v in c)

    def _key(self):
        return (self.p, self.q, self.y, self.z, self.s, self.c)

    def __eq__(self, other):
        if not isinstance(other, MembershipProof):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __len__(self):
        return len(self.c)

    def __repr__(self):
        return "{}(p={}, q={}, size={})".format(type(self).__name__, self.p, self.q, len(self.c))

    @classmethod
    def commit(cls, pk, message, ciphertext, domain, rng=None):
        """Prove that ciphertext encrypts message, a member of domain.

        Nothing is checked: proving a wrong message, or a message outside
        the domain, returns a proof that simply fails to verify.

        :param pk: public key the ciphertext was encrypted under
        :type pk: elgamal.PublicKey
        :param message: the plaintext of ciphertext
        :param ciphertext: ciphertext whose randomness r is known
        :type ciphertext: elgamal.CipherText
        :param domain: ordered sequence of distinct allowed plaintexts
        :param rng: random generator handle
        :rtype: MembershipProof
        """
        if ciphertext.r is None:
            raise InvalidArgument("proving a ciphertext needs its randomness")
        domain = _domain(domain)
        message = int(message)
        q = pk.q
        g, h = pk.g, pk.h
        big_g = ciphertext.big_g.with_modulus(pk.p)
        big_h = ciphertext.big_h.with_modulus(pk.p)

        t = ModInteger.random(q, rng)
        ys, zs, ss, cs = [], [], [], []
        index = 0
        for i, d in enumerate(domain):
            if d == message:
                # real commitment, challenge and response are filled in below
                s = c = ModInteger(0, q)
                y, z = g.pow(t), h.pow(t)
                index = i
            else:
                s = ModInteger.random(q, rng)
                c = ModInteger.random(q, rng)
                y, z = _simulated_commitment(g, h, big_g, big_h, d, s, c)
            ys.append(y)
            zs.append(z)
            ss.append(s)
            cs.append(c)

        return cls._finish(pk, big_g, big_h, ys, zs, ss, cs, index, ciphertext.r, t)

    @classmethod
    def commit_to_sum(cls, pk, ciphertext1, proof1, ciphertext2, proof2, domain,
                      domain1=config.BINARY_DOMAIN, domain2=config.BINARY_DOMAIN, rng=None):
        """Prove that ciphertext1 + ciphertext2 encrypts a member of domain,
        without decrypting either of them.

        The challenges and responses of both proofs are re-indexed on the
        combined domain (values missing from an operand's domain get random
        ones), then added branch by branch. The branch of the actual sum is
        found from the randomness of both ciphertexts and proven for real.

        :param domain1: domain proof1 was made for
        :param domain2: domain proof2 was made for
        :rtype: MembershipProof
        """
        if ciphertext1.r is None or ciphertext2.r is None:
            raise InvalidArgument("proving a sum needs the randomness of both ciphertexts")
        domain = _domain(domain)
        domain1 = _domain(domain1)
        domain2 = _domain(domain2)
        if len(proof1) != len(domain1) or len(proof2) != len(domain2):
            raise InvalidArgument("a proof does not match the size of its domain")
        q, p = pk.q, pk.p
        g, h = pk.g, pk.h
        r1 = ciphertext1.r.with_modulus(q)
        r2 = ciphertext2.r.with_modulus(q)
        g1, h1 = ciphertext1.big_g.with_modulus(p), ciphertext1.big_h.with_modulus(p)
        g2, h2 = ciphertext2.big_g.with_modulus(p), ciphertext2.big_h.with_modulus(p)
        big_g = g1.multiply(g2)
        big_h = h1.multiply(h2)
        h_to_r = h.pow(r1.add(r2))

        def reindex(proof, own_domain):
            cs, ss = [], []
            for d in domain:
                if d in own_domain:
                    k = own_domain.index(d)
                    cs.append(proof.c[k])
                    ss.append(proof.s[k])
                else:
                    cs.append(ModInteger.random(q, rng))
                    ss.append(ModInteger.random(q, rng))
            return cs, ss

        c1s, s1s = reindex(proof1, domain1)
        c2s, s2s = reindex(proof2, domain2)

        t = ModInteger.random(q, rng)
        ys, zs, ss, cs = [], [], [], []
        index = 0
        for i, d in enumerate(domain):
            c1, c2 = c1s[i], c2s[i]
            s1, s2 = s1s[i], s2s[i]
            if big_h.divide(g.pow(d)) == h_to_r:
                # this is the actual sum
                s = c = ModInteger(0, q)
                y, z = g.pow(t), h.pow(t)
                index = i
            else:
                s = s1.add(s2)
                c = c1.add(c2)
                y1, z1 = _simulated_commitment(g, h, g1, h1, d, s1, c1)
                y2, z2 = _simulated_commitment(g, h, g2, h2, d, s2, c2)
                # y1*y2 = g^(s1+s2) * G1^-c1 * G2^-c2, rebase on G = G1*G2
                y = y1.multiply(y2).divide(g.pow(r2.multiply(c1).add(r1.multiply(c2))))
                z = z1.multiply(z2).divide(h2.pow(c1).multiply(h1.pow(c2)))
            ys.append(y)
            zs.append(z)
            ss.append(s)
            cs.append(c)

        return cls._finish(pk, big_g, big_h, ys, zs, ss, cs, index, r1.add(r2), t)

    @classmethod
    def _finish(cls, pk, big_g, big_h, ys, zs, ss, cs, index, r, t):
        """Derive the real challenge and response of branch index."""
        q = pk.q
        transcript = [pk.g, pk.h, big_g, big_h]
        for y, z in zip(ys, zs):
            transcript.extend((y, z))
        real_c = hash_transcript(transcript, q)
        for i, fake_c in enumerate(cs):
            if i != index:
                real_c = real_c.subtract(fake_c)
        cs[index] = real_c
        ss[index] = real_c.multiply(r).add(t)
        return cls(pk.p, q, ys, zs, ss, cs)

    def verify(self, pk, ciphertext, domain):
        """Verify that ciphertext encrypts a member of domain.

        Never raises on a bad proof: a domain shorter than the proof, a
        proof made under another group or any inconsistency returns False.

        :type pk: elgamal.PublicKey
        :type ciphertext: elgamal.CipherText
        :param domain: ordered sequence of allowed plaintexts
        :return: Whether the proof is valid
        :rtype: bool
        """
        try:
            domain = [int(d) for d in domain]
        except (TypeError, ValueError):
            logger.debug("domain holds a value that is not an integer")
            return False
        if len(domain) < len(self.c) or len(domain) < len(self.s):
            logger.debug("domain of %d values is shorter than the proof", len(domain))
            return False
        if len(self.c) != len(self.s) or (self.p, self.q) != (pk.p, pk.q):
            return False

        g, h = pk.g, pk.h
        big_g = ciphertext.big_g.with_modulus(self.p)
        big_h = ciphertext.big_h.with_modulus(self.p)
        c_choices = ModInteger(0, self.q)
        transcript = [g, h, big_g, big_h]
        for d, s, c in zip(domain, self.s, self.c):
            c_choices = c_choices.add(c)
            transcript.extend(_simulated_commitment(g, h, big_g, big_h, d, s, c))

        new_c = hash_transcript(transcript, self.q)
        valid = c_choices == new_c
        logger.debug("membership proof over %d values valid: %s", len(self.c), valid)
        return valid


def commit(pk, message, ciphertext, domain, rng=None):
    return MembershipProof.commit(pk, message, ciphertext, domain, rng)


def verify(pk, ciphertext, domain, proof):
    return proof.verify(pk, ciphertext, domain)


def combine_proofs(pk, ciphertext1, proof1, ciphertext2, proof2, domain, rng=None):
    """Proof for ciphertext1 + ciphertext2 from two ballot ({0, 1}) proofs."""
    return MembershipProof.commit_to_sum(pk, ciphertext1, proof1, ciphertext2, proof2, domain, rng=rng)
