"""
Timing analysis of complete elections.

An election run covers the key ceremony of the trustees, the casting of
ballots with their membership proofs, the homomorphic tally, the decryption
factors of every trustee with their proofs, and the final bounded search.
Run as a module to time a grid of voter and trustee counts:

    python -m homovote.analysis --voters 10 100 --trustees 1 3 --out timings
"""
import argparse
import csv
import logging
from timeit import default_timer as timer

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from . import config  # noqa: E402
from .election import Election, Vote, prove_decryption_factor  # noqa: E402
from .elgamal import combine_keys, gen_group, gen_keypair  # noqa: E402
from .errors import HomovoteError  # noqa: E402
from .modint import default_rng  # noqa: E402

logger = logging.getLogger(__name__)


def run_election(n_voters, n_trustees, qnbits=None, rng=None):
    """Simulate one election with random 0/1 ballots.

    :returns: (recovered result, expected result)
    """
    rng = default_rng(rng)
    p, q, g = gen_group(qnbits, rng)
    trustees = [gen_keypair(p, q, g, rng) for _ in range(n_trustees)]
    pk = combine_keys([trustee_pk for _, trustee_pk in trustees])

    election = Election(pk)
    ballots = [rng.getrandbits(1) for _ in range(n_voters)]
    for m in ballots:
        election.cast_vote(Vote.cast(pk, m, rng=rng))

    summed = election.sum_votes(rng)
    factors = [prove_decryption_factor(summed.ciphertext, sk, rng) for sk, _ in trustees]
    # additive key sharing: every trustee weighs 1
    result = election.final_sum(factors, [1] * n_trustees, summed,
                                trustee_keys=[trustee_pk for _, trustee_pk in trustees])
    return result, sum(ballots)


def time_elections(voters, trustees, repetitions=1, qnbits=None, rng=None):
    """Mean duration (in seconds) of an election run for every pair of counts.

    :returns: array of shape (len(trustees), len(voters))
    """
    timings = np.full((len(trustees), len(voters)), np.nan)
    for ti, n_trustees in enumerate(trustees):
        for vi, n_voters in enumerate(voters):
            runs = np.empty(repetitions)
            for k in range(repetitions):
                start = timer()
                result, expected = run_election(int(n_voters), int(n_trustees), qnbits, rng)
                runs[k] = timer() - start
                if result != expected:
                    raise HomovoteError("election returned {} instead of {}".format(result, expected))
            timings[ti, vi] = runs.mean()
            logger.info("%d voters, %d trustees: %.3fs", n_voters, n_trustees, timings[ti, vi])
    return timings


def write_csv(path, voters, trustees, timings):
    with open(path, "w", newline="") as fd:
        writer = csv.writer(fd)
        writer.writerow(["trustees", "voters", "seconds"])
        for ti, n_trustees in enumerate(trustees):
            for vi, n_voters in enumerate(voters):
                writer.writerow([int(n_trustees), int(n_voters), float(timings[ti, vi])])


def plot_timings(path, voters, trustees, timings):
    """One curve per trustee count; a surface as well when both axes vary."""
    fig = plt.figure()
    if len(voters) > 1 and len(trustees) > 1:
        ax = fig.add_subplot(projection="3d")
        X, Y = np.meshgrid(voters, trustees)
        ax.plot_surface(X, Y, timings, cmap="plasma")
        ax.set_xlabel("Nb. of voters")
        ax.set_ylabel("Nb. of trustees")
        ax.set_zlabel("Computation time (seconds)")
    else:
        ax = fig.add_subplot()
        for ti, n_trustees in enumerate(trustees):
            ax.plot(voters, timings[ti, :], marker="o", label="{} trustees".format(n_trustees))
        ax.set_xlabel("Nb. of voters")
        ax.set_ylabel("Computation time (seconds)")
        ax.legend()
    fig.savefig(path)
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--voters", type=int, nargs="+", default=[10, 50, 100])
    parser.add_argument("--trustees", type=int, nargs="+", default=[1, 3, 5])
    parser.add_argument("--repetitions", type=int, default=3)
    parser.add_argument("--qnbits", type=int, default=config.QNBITS)
    parser.add_argument("--out", default="timings")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
    voters = np.array(args.voters)
    trustees = np.array(args.trustees)
    timings = time_elections(voters, trustees, args.repetitions, args.qnbits)
    write_csv(args.out + ".csv", voters, trustees, timings)
    plot_timings(args.out + ".png", voters, trustees, timings)
    print(timings)


if __name__ == "__main__":
    main()
