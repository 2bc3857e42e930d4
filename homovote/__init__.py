"""
Verifiable additive El Gamal voting: encryption, ballot membership proofs
and threshold tally decryption.
"""
from .elgamal import CipherText, PrivateKey, PublicKey, decrypt, encrypt
from .election import Election, Vote, final_sum, tally
from .errors import HomovoteError, InvalidArgument, NotInvertible, SearchSpaceExhausted
from .membership import MembershipProof, combine_proofs, commit, verify
from .modint import ModInteger
from .polynomial import Polynomial

__version__ = "0.1.0"
