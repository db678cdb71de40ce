import functools
from itertools import groupby

from joblib import Parallel, delayed
from loguru import logger

from hectx import errors

# Deterministic for every number below 3.3 * 10**24, far above the 61-bit modulus limit.
_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)


def MillerRabinPrimalityTest(number: int) -> bool:
    if number < 2:
        return False
    for p in _WITNESSES:
        if number == p:
            return True
        if number % p == 0:
            return False

    # First we want to express n as : 2^s * r ( were r is odd )
    oddPartOfNumber = number - 1
    timesTwoDividNumber = 0
    while oddPartOfNumber % 2 == 0:
        oddPartOfNumber //= 2
        timesTwoDividNumber += 1

    for witness in _WITNESSES:
        # witnessWithPower = witness^oddPartOfNumber mod number
        witnessWithPower = pow(witness, oddPartOfNumber, number)
        if witnessWithPower in (1, number - 1):
            continue

        for _ in range(timesTwoDividNumber - 1):
            witnessWithPower = pow(witnessWithPower, 2, number)
            if witnessWithPower == number - 1:
                break
        else:
            # x != -1 mod number, witness proves number composite.
            return False

    return True


def check_ntt_primality(q: int, M: int) -> bool:
    # Is this in the KM+1 form?
    if (q - 1) % M != 0:
        return False
    # Now, is q a prime?
    return MillerRabinPrimalityTest(q)


@functools.lru_cache(maxsize=None)
def find_ntt_primes(bit_size: int, N: int, count: int) -> tuple[int, ...]:
    """
    Largest `count` primes of exactly `bit_size` bits congruent to 1 mod 2N,
    in decreasing order.
    """
    M = 2 * N
    lower = 1 << (bit_size - 1)

    # Largest value of this bit length in the KM+1 form.
    current_query = ((1 << bit_size) - 2) // M * M + 1

    primes = []
    while current_query >= lower and len(primes) < count:
        if check_ntt_primality(current_query, M):
            primes.append(current_query)
        current_query -= M

    if len(primes) < count:
        raise errors.ModulusSearchExhausted(count=count, bit_size=bit_size, M=M)

    logger.debug(f"Found {count} NTT prime(s) of {bit_size} bits for N={N}.")
    return tuple(primes)


def generate_primes(N: int, bit_sizes: list[int], n_jobs: int = 1) -> list[int]:
    """
    One prime per entry of `bit_sizes`, each congruent to 1 mod 2N.

    Equal bit sizes receive distinct primes, handed out from the largest
    down in the order they appear. Bit-size groups are independent searches
    and run through joblib when `n_jobs` is not 1.
    """
    counts = {
        bit_size: len(list(group))
        for bit_size, group in groupby(sorted(bit_sizes))
    }

    if n_jobs == 1:
        found = [find_ntt_primes(bs, N, c) for bs, c in counts.items()]
    else:
        logger.info(f"Searching {len(counts)} prime group(s) with n_jobs={n_jobs}...")
        found = Parallel(n_jobs=n_jobs)(
            delayed(find_ntt_primes)(bs, N, c) for bs, c in counts.items()
        )

    pools = {bs: list(primes) for bs, primes in zip(counts, found)}
    return [pools[bs].pop(0) for bs in bit_sizes]
