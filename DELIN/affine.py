from .prelude import *

from .scev import SE
from . import scev as S

from collections import namedtuple

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Affine decomposition of an expression with respect to a single loop

# `coef * I + free_term`, where I counts the iterations of `loop`;
# `coef` and `loop` are None when no loop was found
Binomial = namedtuple('Binomial', ['coef', 'free_term', 'loop', 'is_safe'])

class BinomialSearch:
  """ Simplify an expression to `coef * I + free_term` if possible.

  The first induction expression found fixes the loop; the search does
  not descend into operands after it, so they end up in the free term.
  Casts around the induction expression are re-applied to both parts,
  which is only an approximation of the original value (`is_safe` is
  cleared in that case).
  """
  def __init__(self, e):
    self._coef    = None
    self._free    = None
    self._loop    = None
    self._safe    = True
    self.visit(e)

  def result(self):
    # casts only lose precision around an induction expression
    safe = self._safe if self._loop is not None else True
    return Binomial(self._coef, self._free, self._loop, safe)

  def visit(self, e):
    eclass  = type(e)

    if eclass is SE.Trunc or eclass is SE.SExt or eclass is SE.ZExt:
      self._safe    = False
      self.visit(e.op)
      if self._coef is not None:
        self._coef  = S.rebuild(e, [self._coef])
      if self._free is not None:
        self._free  = S.rebuild(e, [self._free])

    elif eclass is SE.AddRec:
      self._loop    = e.loop
      self._coef    = e.step
      self._free    = e.start

    elif eclass is SE.Mul:
      assert self._loop is None, "loop must not be set yet"
      factors       = []
      for k,op in enumerate(e.ops):
        self.visit(op)
        if self._loop is not None:
          factors.extend(e.ops[k+1:])
          self._free  = S.mul(factors + [self._free])
          self._coef  = S.mul(factors + [self._coef])
          return
        factors.append(op)
      self._free    = e

    elif eclass is SE.Add:
      assert self._loop is None, "loop must not be set yet"
      terms         = []
      for k,op in enumerate(e.ops):
        self.visit(op)
        if self._loop is not None:
          terms.extend(e.ops[k+1:])
          self._free  = S.add(terms + [self._free])
          return
        terms.append(op)
      self._free    = e

    else:
      # constants, opaque values, divisions, max and not-computable
      self._free    = e

def binomial(e):
  return BinomialSearch(e).result()

def compute_addrec(e):
  """ Rebuild `e` as the recurrence `{free_term,+,coef}<loop>`.

  Returns the pair `(expression, is_safe)`; `e` itself is returned
  (and is safe) when it does not depend on any loop.
  """
  b = binomial(e)
  if b.loop is None:
    return e, True
  return S.addrec(b.free_term, b.coef, b.loop), b.is_safe

def coefficients(e):
  """ `(a, b, is_safe)` such that `e` is `a * I + b` """
  rec, safe = compute_addrec(e)
  if type(rec) is SE.AddRec:
    return rec.step, rec.start, safe
  return S.zero(rec.width()), rec, safe
