
import unittest
from DELIN import scev as S
from DELIN.scev import SE
from DELIN.affine import binomial, compute_addrec, coefficients

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Tests

class Test_Affine(unittest.TestCase):

  def setUp(self):
    self.L    = S.loop("i")
    self.n    = S.unknown("n")

  def test_offsets_6_10_14(self):
    # offsets 6, 10, 14 over consecutive iterations
    e     = S.iv(self.L) * 4 + 6
    self.assertIs(e, S.addrec(S.const(6), S.const(4), self.L))
    b     = binomial(e)
    self.assertIs(b.coef,       S.const(4))
    self.assertIs(b.free_term,  S.const(6))
    self.assertIs(b.loop,       self.L)
    self.assertTrue(b.is_safe)

  def test_no_loop(self):
    b     = binomial(self.n * 3)
    self.assertIsNone(b.coef)
    self.assertIsNone(b.loop)
    self.assertIs(b.free_term, self.n * 3)
    self.assertEqual(compute_addrec(self.n), (self.n, True))
    z     = S.zext(S.unknown("m", 32), 64)
    self.assertEqual(binomial(z), (None, z, None, True))
    self.assertEqual(compute_addrec(z), (z, True))
    a, c, safe = coefficients(self.n)
    self.assertTrue(a.is_zero())
    self.assertIs(c, self.n)
    self.assertTrue(safe)

  def test_cast_is_unsafe(self):
    e     = S.sext(S.iv(self.L, 32) * 4, 64)
    self.assertIs(type(e), SE.SExt)
    rec, safe = compute_addrec(e)
    self.assertFalse(safe)
    self.assertIs(rec, S.addrec(S.zero(64), S.const(4, 64), self.L))

  def test_product_with_cast(self):
    n     = self.n
    e     = S.mul([ n, S.zext(S.iv(self.L, 32), 64) ])
    self.assertIs(type(e), SE.Mul)
    a, b, safe = coefficients(e)
    self.assertIs(a, n)
    self.assertTrue(b.is_zero())
    self.assertFalse(safe)

  def test_sum_with_udiv(self):
    n     = self.n
    d     = S.udiv(n, S.const(2))
    e     = S.add([ d, S.zext(S.iv(self.L, 32), 64) ])
    self.assertIs(type(e), SE.Add)
    a, b, safe = coefficients(e)
    self.assertIs(a, S.one())
    self.assertIs(b, d)
    self.assertFalse(safe)

if __name__ == '__main__':
  unittest.main()
