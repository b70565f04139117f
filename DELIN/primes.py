
import numpy as np
from math import isqrt

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Prime numbers for factoring integer constants

PRIMES_CACHE = (
    2,   3,   5,   7,  11,  13,  17,  19,  23,  29,  31,  37,  41,  43,  47,
   53,  59,  61,  67,  71,  73,  79,  83,  89,  97, 101, 103, 107, 109, 113,
  127, 131, 137, 139, 149, 151, 157, 163, 167, 173, 179, 181, 191, 193, 197,
  199, 211, 223, 227, 229, 233, 239, 241, 251, 257, 263, 269, 271, 277, 281,
)

# factors above this bound are not searched for
SIEVE_LIMIT = 1 << 16

def _sieve(bound):
  is_prime        = np.ones(bound + 1, dtype=bool)
  is_prime[:2]    = False
  for p in range(2, isqrt(bound) + 1):
    if is_prime[p]:
      is_prime[p*p::p] = False
  return [ int(p) for p in np.flatnonzero(is_prime) ]

def primes_upto(bound):
  """ all primes `<= bound` in increasing order """
  if bound <= PRIMES_CACHE[-1]:
    return [ p for p in PRIMES_CACHE if p <= bound ]
  return _sieve(bound)

def prime_factors(value):
  """ Decomposition of `|value|` into factors, largest first.

  Primes are tried up to the square root of the value, but never past
  `SIEVE_LIMIT`.  Whatever is left of the value after that is kept as a
  single factor; it is prime unless the value has two prime factors
  above the limit.
  """
  assert value != 0, "cannot factor zero"
  value     = abs(value)
  factors   = []
  for p in primes_upto(min(isqrt(value), SIEVE_LIMIT)):
    if p * p > value:
      break
    while value % p == 0:
      factors.append(p)
      value //= p
  if value > 1:
    factors.append(value)
  factors.sort(reverse=True)
  return factors
