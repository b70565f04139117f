
import logging
import unittest
from DELIN import scev as S
from DELIN.gcd import gcd, constant_multipliers, extract_terms

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Tests

class Test_GCD(unittest.TestCase):

  def setUp(self):
    self.L    = S.loop("i")
    self.i    = S.iv(self.L)
    self.n    = S.unknown("n")

  def assertDividesAll(self, g, exprs):
    for e in exprs:
      q, r = S.divide(e, g)
      self.assertTrue(r.is_zero(), f"{g} does not divide {e}")

  def test_constant_multipliers(self):
    self.assertEqual(constant_multipliers(S.const(12)),
                     [ S.const(3), S.const(2), S.const(2) ])
    self.assertEqual(constant_multipliers(S.const(-6)),
                     [ S.const(-1), S.const(3), S.const(2) ])
    self.assertEqual(constant_multipliers(S.one()), [ S.one() ])

  def test_constants(self):
    self.assertIs(gcd([ S.const(12), S.const(18) ]),  S.const(6))
    self.assertIs(gcd([ S.const(7) ]),                S.const(7))
    self.assertIs(gcd([ S.const(9), S.const(4) ]),    S.one())
    self.assertIs(gcd([ S.one(), S.const(5) ]),       S.one())

  def test_zero(self):
    self.assertIs(gcd([ S.zero(), S.zero() ]),        S.zero())
    # zero terms are skipped
    self.assertIs(gcd([ S.zero(), S.const(8) ]),      S.const(8))

  def test_no_terms(self):
    e   = S.udiv(self.n, S.const(3))
    self.assertEqual(extract_terms([e]), [])
    self.assertIs(gcd([e]), S.one())

  def test_symbolic(self):
    n     = self.n
    exprs = [ n * 4, n * 6 ]
    g     = gcd(exprs)
    self.assertIs(g, S.mul([ S.const(2), n ]))
    self.assertDividesAll(g, exprs)

  def test_recurrences(self):
    i     = self.i
    exprs = [ i * 10, i * 40 ]
    g     = gcd(exprs)
    self.assertIs(g, S.const(10))
    self.assertDividesAll(g, exprs)

    exprs = [ i * self.n ]
    self.assertIs(gcd(exprs), self.n)

  def test_divisor_property(self):
    n, i  = self.n, self.i
    for exprs in [
      [ S.const(-6), S.const(4) ],
      [ S.const(36), S.const(24), S.const(60) ],
      [ n * 12, n * 18 ],
      [ i * 20, S.const(30) ],
    ]:
      self.assertDividesAll(gcd(exprs), exprs)

  def test_sign(self):
    c     = S.const
    self.assertIs(gcd([ c(-6), c(4) ]),  c(2))
    self.assertIs(gcd([ c(4), c(-6) ]),  c(2))
    self.assertIs(gcd([ c(-7) ]),        c(7))
    self.assertIs(gcd([ c(-1), c(5) ]),  S.one())
    i     = self.i
    self.assertIs(gcd([ (i - 1) * 10, i * 10 ]), c(10))

  def test_trace(self):
    with self.assertLogs("DELIN.gcd", level=logging.DEBUG) as cm:
      gcd([ S.const(12), S.const(18) ])
    self.assertTrue(any( "GCD terms: 12, 18" in m for m in cm.output ))
    self.assertTrue(any( "constant multipliers of 12: 3, 2, 2" in m
                         for m in cm.output ))

  def test_idempotent(self):
    exprs = [ self.i * 20, self.n * 30 ]
    self.assertIs(gcd(exprs), gcd(exprs))

  def test_candidates_consumed_once(self):
    # a candidate that is a whole sum only matches itself, so these
    # share nothing even though 2n+2 divides 4n+4
    n     = self.n
    a     = n * 2 + 2
    b     = n * 4 + 4
    self.assertIs(gcd([a, b]), S.one())

if __name__ == '__main__':
  unittest.main()
