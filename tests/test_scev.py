
import unittest
from DELIN import scev as S
from DELIN.scev import SE, CNC

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Tests

class Test_SCEV(unittest.TestCase):

  def setUp(self):
    self.Li   = S.loop("i", 0)
    self.Lj   = S.loop("j", 1)
    self.i    = S.iv(self.Li)
    self.j    = S.iv(self.Lj)
    self.n    = S.unknown("n")

  def test_memo(self):
    n         = self.n
    self.assertIs(S.const(3),         S.const(3))
    self.assertIs(S.add([n, S.one()]), S.add([S.one(), n]))
    self.assertIs(self.i * 10,        self.i * 10)
    self.assertIsNot(S.const(3, 32),  S.const(3, 64))
    self.assertIs(SE.CouldNotCompute(), CNC)

  def test_constant_folding(self):
    self.assertIs(S.const(2) + 3,     S.const(5))
    self.assertIs(S.const(2) * 3,     S.const(6))
    self.assertIs(S.const(7) - 7,     S.zero())
    self.assertIs(S.const(255, 8) + 1, S.zero(8))
    self.assertIs(self.n - self.n,    S.zero())
    self.assertIs(self.n * 0,         S.zero())

  def test_width(self):
    self.assertEqual(S.const(1, 32).width(),  32)
    self.assertEqual((self.n * 4).width(),    64)
    self.assertEqual(S.iv(self.Li, 16).width(), 16)
    self.assertIsNone(CNC.width())

  def test_recurrences(self):
    i, j      = self.i, self.j
    r         = i * 10
    self.assertIs(type(r), SE.AddRec)
    self.assertIs(r.start, S.zero())
    self.assertIs(r.step,  S.const(10))
    self.assertIs(S.addrec(S.const(4), S.zero(), self.Li), S.const(4))

    # the innermost loop absorbs everything invariant in it
    e         = i * 10 + j
    self.assertIs(type(e), SE.AddRec)
    self.assertIs(e.loop,  self.Lj)
    self.assertIs(e.start, r)
    self.assertEqual(str(e), "{{0,+,10}<i>,+,1}<j>")
    self.assertEqual(e.loops(), frozenset([self.Li, self.Lj]))

    self.assertIs(j + 1, S.addrec(S.one(), S.one(), self.Lj))
    self.assertIs(i + i, S.addrec(S.zero(), S.const(2), self.Li))

  def test_distribute(self):
    n         = self.n
    self.assertIs(S.mul([ S.const(2), n + 1 ]), S.add([ n * 2, S.const(2) ]))

  def test_casts(self):
    self.assertIs(S.trunc(S.const(300), 8),        S.const(44, 8))
    self.assertIs(S.zext(S.const(-1, 8), 16),      S.const(255, 16))
    self.assertIs(S.sext(S.const(-1, 8), 16),      S.const(-1, 16))
    x         = S.unknown("x", 8)
    self.assertIs(S.zext(S.zext(x, 16), 32),       S.zext(x, 32))
    self.assertIs(S.trunc_or_zext(x, 8),           x)
    self.assertIs(S.trunc_or_zext(x, 64),          S.zext(x, 64))
    self.assertIs(S.trunc_or_zext(self.n, 32),     S.trunc(self.n, 32))
    self.assertEqual(str(S.sext(x, 64)), "(sext i8 %x to i64)")

  def test_could_not_compute(self):
    self.assertIs(S.add([ self.n, CNC ]),   CNC)
    self.assertIs(S.mul([ CNC, self.i ]),   CNC)
    self.assertEqual(str(CNC), "***COULDNOTCOMPUTE***")

  def test_subst(self):
    n, m      = self.n, S.unknown("m")
    e         = n * 4 + m
    self.assertIs(e.subst({ n : S.const(2) }), m + 8)

  def test_divide_constants(self):
    q, r      = S.divide(S.const(10), S.const(8))
    self.assertIs(q, S.one())
    self.assertIs(r, S.const(2))
    q, r      = S.divide(S.const(-7), S.const(2))
    self.assertIs(q, S.const(-3))
    self.assertIs(r, S.const(-1))

  def test_divide_symbolic(self):
    n, i      = self.n, self.i
    q, r      = S.divide(n * 4, n)
    self.assertIs(q, S.const(4))
    self.assertTrue(r.is_zero())

    q, r      = S.divide(i * 40, S.const(10))
    self.assertIs(q, i * 4)
    self.assertTrue(r.is_zero())

    q, r      = S.divide(n * 6, S.mul([ S.const(2), n ]))
    self.assertIs(q, S.const(3))
    self.assertTrue(r.is_zero())

    q, r      = S.divide(n * 4 + 2, S.const(4))
    self.assertIs(q, n)
    self.assertIs(r, S.const(2))

    # nothing divides
    q, r      = S.divide(n, S.unknown("m"))
    self.assertTrue(q.is_zero())
    self.assertIs(r, n)

  def test_bad_constructor_args(self):
    with self.assertRaises(TypeError):
      SE.Const("1", 64)
    with self.assertRaises(TypeError):
      SE.Add(S.const(1))
    with self.assertRaises(TypeError):
      SE.expr()

if __name__ == '__main__':
  unittest.main()
