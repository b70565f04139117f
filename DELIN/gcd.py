
import logging

from .scev import SE
from . import scev as S
from . import config
from .primes import prime_factors

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Common divisor of a set of expressions
#
#   This is not a GCD in the polynomial ring sense.  The result is built
#   from factors of the first non-zero term that divide all later terms,
#   so it always divides every input; when nothing common is found the
#   result degrades to 1.

_casts          = (SE.Trunc, SE.SExt, SE.ZExt)
_search_factors = (SE.Unknown, SE.Trunc, SE.SExt, SE.ZExt, SE.Add, SE.Const)

def constant_multipliers(c):
  """ divisor candidates of a non-zero integer constant """
  assert type(c) is SE.Const and c.val != 0, "expected non-zero constant"
  w       = c.width()
  mults   = []
  if c.val < 0:
    mults.append(S.const(-1, w))
  if abs(c.val) == 1:
    mults.append(S.one(w))
    return mults
  mults.extend( S.const(p, w) for p in prime_factors(c.val) )
  if logger.isEnabledFor(logging.DEBUG):
    logger.debug(f"constant multipliers of {c}: "
                 f"{', '.join(str(m) for m in mults)}")
  return mults

def _search_part(e):
  # drop factors which cannot be searched for divisors;
  # any sub-product of a product divides it
  if type(e) is not SE.Mul:
    return e
  keep = [ op for op in e.ops if type(op) in _search_factors ]
  return S.mul(keep) if len(keep) > 0 else S.one(e.width())

def _product_term(e):
  has_rec       = False
  step_mults    = []
  start_mults   = []
  for op in e.ops:
    opclass = type(op)
    if opclass in _casts:
      inner = op.op
      if type(inner) is SE.AddRec:
        has_rec = True
        step_mults.append(S.rebuild(op, [inner.step]))
        if not inner.start.is_zero():
          start_mults.append(S.rebuild(op, [inner.start]))
      elif type(inner) in (SE.Mul, SE.Unknown, SE.Add):
        step_mults.append(op)
        start_mults.append(op)
    elif opclass is SE.AddRec:
      has_rec = True
      step_mults.append(op.step)
      if not op.start.is_zero():
        start_mults.append(op.start)
    elif opclass in (SE.Unknown, SE.Add, SE.Const):
      step_mults.append(op)
      start_mults.append(op)

  if has_rec and len(start_mults) > 0:
    return gcd([ S.mul(start_mults), S.mul(step_mults) ])
  elif len(step_mults) > 0:
    return S.mul(step_mults)
  return None

def extract_terms(exprs):
  """ reduce every expression to the terms searched for common factors """
  terms = []
  for e in exprs:
    eclass = type(e)
    if eclass in _casts:
      inner = e.op
      if type(inner) is SE.AddRec:
        terms.append(S.rebuild(e, [inner.step]))
        terms.append(S.rebuild(e, [inner.start]))
      elif type(inner) in (SE.Unknown, SE.Add, SE.Mul):
        terms.append(e)

    elif eclass is SE.Const or eclass is SE.Unknown or eclass is SE.Add:
      terms.append(e)

    elif eclass is SE.Mul:
      t = _product_term(e)
      if t is not None:
        terms.append(t)

    elif eclass is SE.AddRec:
      # multipliers live in the start and step expressions
      terms.append(gcd([ _search_part(e.start), _search_part(e.step) ]))

    # divisions, max and not-computable expressions contribute nothing
  return terms

def _seed_divisors(term):
  factors = term.ops if type(term) is SE.Mul else [term]
  divs    = []
  for f in factors:
    if type(f) is SE.Const:
      divs.extend(constant_multipliers(f))
    else:
      divs.append(f)
  return divs

def gcd(exprs):
  """ A common divisor of all expressions in `exprs`.

  Returns the constant 0 if every term is zero and the constant 1 if
  there is nothing to search or no common factor survives.  Each
  candidate factor is consumed at most once per term.  A -1 factor
  never ends up in the result, so it does not depend on the sign of
  the first term.
  """
  assert len(exprs) > 0, "expected expressions to compute a GCD of"
  w       = exprs[0].width() or config.index_width()
  terms   = extract_terms(exprs)
  if logger.isEnabledFor(logging.DEBUG):
    logger.debug(f"GCD terms: {', '.join(str(t) for t in terms)}")
  if len(terms) == 0:
    return S.one(w)

  first   = next(( k for k,t in enumerate(terms) if not t.is_zero() ), None)
  if first is None:
    return S.zero(w)

  divisors  = _seed_divisors(terms[first])
  for term in terms[first+1:]:
    if term.is_zero():
      continue
    matched = []
    for d in divisors:
      q, r  = S.divide(term, d)
      if r.is_zero():
        matched.append(d)
        term = q
        if len(matched) == len(divisors):
          break
    divisors = matched
    if len(divisors) == 0:
      return S.one(w)

  # a sign only helps matching; the divisor itself is kept positive
  divisors  = [ d for d in divisors
                  if not (type(d) is SE.Const and d.val == -1) ]
  if len(divisors) == 0:
    return S.one(w)
  if len(divisors) == 1:
    return divisors[0]
  return S.mul(divisors)
