import pytest

from homovote.elgamal import encrypt
from homovote.errors import InvalidArgument
from homovote.membership import (
    MembershipProof, combine_proofs, commit, hash_transcript, verify,
)
from homovote.modint import ModInteger

BINARY = (0, 1)


def test_hash_transcript_depends_on_order():
    q = 2 ** 61 - 1
    a = hash_transcript([1, 2, 3], q)
    assert a == hash_transcript([ModInteger(1), ModInteger(2), ModInteger(3)], q)
    assert a != hash_transcript([2, 1, 3], q)
    assert a.modulus == q
    assert hash_transcript([1, 2, 3], q, "sha512") != a


@pytest.mark.parametrize("m", [0, 1])
def test_valid_proof(pk, rng, m):
    ct = encrypt(pk, m, rng)
    proof = commit(pk, m, ct, BINARY, rng)
    assert len(proof) == 2
    assert verify(pk, ct, BINARY, proof)
    # verification does not need the randomness
    assert proof.verify(pk, ct.without_randomness(), BINARY)


@pytest.mark.parametrize("m,claimed", [(1, 0), (0, 1)])
def test_proof_of_wrong_plaintext_fails(pk, rng, m, claimed):
    ct = encrypt(pk, m, rng)
    proof = commit(pk, claimed, ct, BINARY, rng)
    assert not verify(pk, ct, BINARY, proof)


def test_out_of_domain_plaintext_fails(pk, rng):
    ct = encrypt(pk, 3, rng)
    proof = commit(pk, 3, ct, BINARY, rng)
    assert not verify(pk, ct, BINARY, proof)


def test_larger_domain(pk, rng):
    domain = (0, 1, 2, 3, 4)
    ct = encrypt(pk, 3, rng)
    proof = commit(pk, 3, ct, domain, rng)
    assert verify(pk, ct, domain, proof)
    assert not verify(pk, ct, (0, 1, 2, 4, 5), proof)


def test_proof_does_not_transfer_to_another_ciphertext(pk, rng):
    ct = encrypt(pk, 1, rng)
    proof = commit(pk, 1, ct, BINARY, rng)
    assert not verify(pk, encrypt(pk, 1, rng), BINARY, proof)


def test_tampered_proof_fails(pk, rng):
    ct = encrypt(pk, 0, rng)
    proof = commit(pk, 0, ct, BINARY, rng)
    forged = MembershipProof(proof.p, proof.q, proof.y, proof.z,
                             proof.s, (proof.c[0].add(1), proof.c[1].subtract(1)))
    assert not verify(pk, ct, BINARY, forged)


def test_short_domain_is_rejected_without_raising(pk, rng):
    ct = encrypt(pk, 0, rng)
    proof = commit(pk, 0, ct, (0, 1, 2), rng)
    assert verify(pk, ct, (0, 1, 2), proof)
    assert verify(pk, ct, (0, 1), proof) is False
    assert verify(pk, ct, (), proof) is False


def test_commit_needs_randomness(pk, rng):
    ct = encrypt(pk, 1, rng).without_randomness()
    with pytest.raises(InvalidArgument):
        commit(pk, 1, ct, BINARY, rng)
    with pytest.raises(InvalidArgument):
        commit(pk, 1, encrypt(pk, 1, rng), (), rng)


@pytest.mark.parametrize("m1,m2", [(1, 1), (0, 1), (1, 0), (0, 0)])
def test_combined_proof(pk, rng, m1, m2):
    ct1, ct2 = encrypt(pk, m1, rng), encrypt(pk, m2, rng)
    proof1 = commit(pk, m1, ct1, BINARY, rng)
    proof2 = commit(pk, m2, ct2, BINARY, rng)
    combined = combine_proofs(pk, ct1, proof1, ct2, proof2, (0, 1, 2), rng)
    assert verify(pk, ct1.operate(ct2), (0, 1, 2), combined)


def test_combined_proof_fails_when_domain_misses_the_sum(pk, rng):
    ct1, ct2 = encrypt(pk, 1, rng), encrypt(pk, 1, rng)
    proof1 = commit(pk, 1, ct1, BINARY, rng)
    proof2 = commit(pk, 1, ct2, BINARY, rng)
    combined = combine_proofs(pk, ct1, proof1, ct2, proof2, BINARY, rng)
    assert not verify(pk, ct1.operate(ct2), BINARY, combined)


def test_combined_proof_leaves_operands_untouched(pk, rng):
    ct1, ct2 = encrypt(pk, 1, rng), encrypt(pk, 0, rng)
    proof1 = commit(pk, 1, ct1, BINARY, rng)
    proof2 = commit(pk, 0, ct2, BINARY, rng)
    MembershipProof.commit_to_sum(pk, ct1, proof1, ct2, proof2, (0, 1, 2), rng=rng)
    assert len(proof1) == len(proof2) == 2
    assert verify(pk, ct1, BINARY, proof1)
    assert verify(pk, ct2, BINARY, proof2)


def test_running_sum_proof(pk, rng):
    # fold a third ballot into a proof over {0, 1, 2}
    cts = [encrypt(pk, m, rng) for m in (1, 0, 1)]
    proofs = [commit(pk, m, ct, BINARY, rng) for m, ct in zip((1, 0, 1), cts)]
    first = MembershipProof.commit_to_sum(pk, cts[0], proofs[0], cts[1], proofs[1], (0, 1, 2), rng=rng)
    partial = cts[0].operate(cts[1])
    second = MembershipProof.commit_to_sum(
        pk, partial, first, cts[2], proofs[2], (0, 1, 2, 3),
        domain1=(0, 1, 2), rng=rng)
    assert verify(pk, partial.operate(cts[2]), (0, 1, 2, 3), second)


def test_combined_proof_needs_randomness(pk, rng):
    ct1, ct2 = encrypt(pk, 1, rng), encrypt(pk, 1, rng)
    proof1 = commit(pk, 1, ct1, BINARY, rng)
    proof2 = commit(pk, 1, ct2, BINARY, rng)
    with pytest.raises(InvalidArgument):
        combine_proofs(pk, ct1.without_randomness(), proof1, ct2, proof2, (0, 1, 2), rng)


def test_proof_from_another_group_fails(pk, rng):
    ct = encrypt(pk, 1, rng)
    proof = commit(pk, 1, ct, BINARY, rng)
    moved = MembershipProof(proof.p + 2, proof.q + 1, proof.y, proof.z, proof.s, proof.c)
    assert not verify(pk, ct, BINARY, moved)


def test_domain_values_must_be_distinct(pk, rng):
    ct = encrypt(pk, 1, rng)
    with pytest.raises(InvalidArgument):
        commit(pk, 1, ct, (1, 0, 1), rng)
    proof1 = commit(pk, 1, ct, BINARY, rng)
    ct2 = encrypt(pk, 0, rng)
    proof2 = commit(pk, 0, ct2, BINARY, rng)
    with pytest.raises(InvalidArgument):
        combine_proofs(pk, ct, proof1, ct2, proof2, (0, 1, 1, 2), rng)


@pytest.mark.parametrize("domain", [("a", "b"), (0, None), (0, 1.5j)])
def test_verify_with_non_integer_domain_returns_false(pk, rng, domain):
    ct = encrypt(pk, 0, rng)
    proof = commit(pk, 0, ct, BINARY, rng)
    assert verify(pk, ct, domain, proof) is False
