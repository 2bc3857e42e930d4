"""
Tunable parameters of homovote.

Each value can be overridden through the environment variable named next to
it; the environment is read once, at import.
"""
import os

# HOMOVOTE_QNBITS: size in bits of the subgroup order q produced by gen_group.
QNBITS = int(os.environ.get("HOMOVOTE_QNBITS", 20))

# HOMOVOTE_DECRYPT_SEARCH_BOUND: largest plaintext decrypt() looks for when
# the caller does not give a bound.
DECRYPT_SEARCH_BOUND = int(os.environ.get("HOMOVOTE_DECRYPT_SEARCH_BOUND", 2 ** 20))

# HOMOVOTE_HASH: hashlib algorithm of the Fiat-Shamir transcript.
HASH_NAME = os.environ.get("HOMOVOTE_HASH", "sha256")

# HOMOVOTE_LOG_LEVEL: only used by the analysis entry point.
LOG_LEVEL = os.environ.get("HOMOVOTE_LOG_LEVEL", "WARNING")

# A ballot is either 0 or 1.
BINARY_DOMAIN = (0, 1)
