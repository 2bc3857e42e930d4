"""
JSON encodings of keys, ciphertexts, membership proofs and decryption factors.

Objects are mapped to plain dicts first (``*_to_dict`` / ``*_from_dict``), the
form a bulletin board stores, and ``dumps`` / ``loads`` turn those into
canonical JSON bytes. Group elements travel as [value, modulus] pairs. The
randomness of a ciphertext is never written.
"""
import json

import canonicaljson

from .election import DecryptionFactor
from .elgamal import CipherText, PrivateKey, PublicKey
from .errors import InvalidArgument
from .membership import MembershipProof
from .modint import ModInteger


def _pair(m):
    return [m.value, m.modulus]


def _from_pair(pair):
    if (not isinstance(pair, (list, tuple)) or len(pair) != 2 or
            not all(isinstance(v, int) and not isinstance(v, bool) for v in pair)):
        raise InvalidArgument("expected a [value, modulus] pair, got {!r}".format(pair))
    return ModInteger(pair[0], pair[1])


def _field(d, name, kind=dict):
    if not isinstance(d, dict):
        raise InvalidArgument("expected an object, got {!r}".format(type(d).__name__))
    try:
        value = d[name]
    except KeyError:
        raise InvalidArgument("missing field {!r}".format(name))
    if kind is int and (not isinstance(value, int) or isinstance(value, bool)):
        raise InvalidArgument("field {!r} must be an integer".format(name))
    if kind is list and not isinstance(value, list):
        raise InvalidArgument("field {!r} must be a list".format(name))
    return value


def public_key_to_dict(pk):
    return {"p": pk.p, "q": pk.q, "g": int(pk.g), "h": int(pk.h)}


def public_key_from_dict(d):
    return PublicKey(_field(d, "p", int), _field(d, "q", int), _field(d, "g", int), _field(d, "h", int))


def private_key_to_dict(sk):
    return {"p": sk.p, "q": sk.q, "g": int(sk.g), "x": sk.x}


def private_key_from_dict(d):
    return PrivateKey(_field(d, "p", int), _field(d, "q", int), _field(d, "g", int), _field(d, "x", int))


def ciphertext_to_dict(ct):
    return {"G": _pair(ct.big_g), "H": _pair(ct.big_h)}


def ciphertext_from_dict(d):
    return CipherText(_from_pair(_field(d, "G", list)), _from_pair(_field(d, "H", list)))


def proof_to_dict(proof):
    return {
        "p": proof.p,
        "q": proof.q,
        "y": [int(v) for v in proof.y],
        "z": [int(v) for v in proof.z],
        "s": [int(v) for v in proof.s],
        "c": [int(v) for v in proof.c],
    }


def proof_from_dict(d):
    p = _field(d, "p", int)
    q = _field(d, "q", int)
    if p <= 0 or q <= 0:
        raise InvalidArgument("proof moduli must be positive")
    lists = []
    for name in ("y", "z", "s", "c"):
        values = _field(d, name, list)
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            raise InvalidArgument("field {!r} must hold integers".format(name))
        lists.append(values)
    if len(set(len(values) for values in lists)) != 1:
        raise InvalidArgument("proof sequences differ in length")
    return MembershipProof(p, q, *lists)


def decryption_factor_to_dict(df):
    return {
        "pk": int(df.public_value),
        "G": int(df.big_g),
        "decryption_factor": int(df.factor),
        "commit": [int(v) for v in df.commit],
        "response": int(df.response),
    }


def decryption_factor_from_dict(d):
    commit = _field(d, "commit", list)
    if len(commit) != 2 or not all(isinstance(v, int) for v in commit):
        raise InvalidArgument("a decryption factor commitment is two integers")
    return DecryptionFactor(
        _field(d, "pk", int),
        _field(d, "G", int),
        _field(d, "decryption_factor", int),
        tuple(commit),
        _field(d, "response", int),
    )


def dumps(obj):
    """Canonical JSON bytes of a dict produced by one of the *_to_dict."""
    return canonicaljson.encode_canonical_json(obj)


def loads(data):
    try:
        return json.loads(data)
    except ValueError as e:
        raise InvalidArgument("malformed JSON: {}".format(e))
