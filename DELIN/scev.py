from .adt import ADT
from .adt import memo as ADTmemo

from .prelude import *
from . import config

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Symbolic integer expressions over loop induction variables

SE = ADT("""
module SE {
  expr  = Const     ( int   val,    int  bits  )
        | Unknown   ( sym   name,   int  bits  )
        | Add       ( expr* ops     )
        | Mul       ( expr* ops     )
        | UDiv      ( expr  lhs,    expr rhs   )
        | Trunc     ( expr  op,     int  bits  )
        | SExt      ( expr  op,     int  bits  )
        | ZExt      ( expr  op,     int  bits  )
        | SMax      ( expr* ops     )
        | UMax      ( expr* ops     )
        -- start + step * (iteration count of loop)
        | AddRec    ( expr  start,  expr step,  loop loop )
        | CouldNotCompute ()

  -- depth orders nested loops; deeper loops are inner loops
  loop  = ( sym name, int depth )
}
""", {
  'sym':  lambda x: type(x) is Sym,
})
ADTmemo(SE,[
  'Const', 'Unknown', 'Add', 'Mul', 'UDiv', 'Trunc', 'SExt', 'ZExt',
  'SMax', 'UMax', 'AddRec', 'CouldNotCompute', 'loop',
],{
  'sym':  lambda x: x,
})

CNC = SE.CouldNotCompute()

_cast_classes = (SE.Trunc, SE.SExt, SE.ZExt)
_nary_classes = (SE.Add, SE.Mul, SE.SMax, SE.UMax)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Queries

@extclass(SE.expr)
def width(e):
  eclass = type(e)
  if eclass is SE.Const or eclass is SE.Unknown or eclass in _cast_classes:
    return e.bits
  elif eclass in _nary_classes:
    return e.ops[0].width()
  elif eclass is SE.UDiv:
    return e.lhs.width()
  elif eclass is SE.AddRec:
    return e.start.width()
  elif eclass is SE.CouldNotCompute:
    return None
  else: assert False, "unexpected expression case"
del width

@extclass(SE.expr)
def is_zero(e):
  return type(e) is SE.Const and e.val == 0
@extclass(SE.expr)
def is_one(e):
  return type(e) is SE.Const and e.val == 1
@extclass(SE.expr)
def is_constant(e):
  return type(e) is SE.Const
del is_zero, is_one, is_constant

@extclass(SE.expr)
def operands(e):
  eclass = type(e)
  if eclass in _nary_classes:     return e.ops
  elif eclass in _cast_classes:   return [e.op]
  elif eclass is SE.UDiv:         return [e.lhs, e.rhs]
  elif eclass is SE.AddRec:       return [e.start, e.step]
  else:                           return []
del operands

@extclass(SE.expr)
def loops(e):
  """ the set of loops whose induction variables `e` depends on """
  if not hasattr(e,'_loops_cached'):
    ls    = set()
    for op in e.operands():
      ls |= op.loops()
    if type(e) is SE.AddRec:
      ls.add(e.loop)
    e._loops_cached = frozenset(ls)
  return e._loops_cached

@extclass(SE.expr)
def uses_loop(e, L):
  return L in e.loops()
del loops, uses_loop

# --------------------------------------------------------------------------- #
# string representation of expressions

_nary_symbols = {
  SE.Add  : " + ",
  SE.Mul  : " * ",
  SE.SMax : " smax ",
  SE.UMax : " umax ",
}
_cast_names = {
  SE.Trunc  : "trunc",
  SE.SExt   : "sext",
  SE.ZExt   : "zext",
}

@extclass(SE.expr)
def __str__(e):
  if not hasattr(e,'_str_cached'):
    eclass = type(e)
    if   eclass is SE.Const:
      e._str_cached = str(e.val)
    elif eclass is SE.Unknown:
      e._str_cached = f"%{e.name}"
    elif eclass in _nary_classes:
      sep = _nary_symbols[eclass]
      e._str_cached = "(" + sep.join([ str(o) for o in e.ops ]) + ")"
    elif eclass is SE.UDiv:
      e._str_cached = f"({e.lhs} /u {e.rhs})"
    elif eclass in _cast_classes:
      e._str_cached = (f"({_cast_names[eclass]} i{e.op.width()} {e.op} "
                       f"to i{e.bits})")
    elif eclass is SE.AddRec:
      e._str_cached = f"{{{e.start},+,{e.step}}}<{e.loop.name}>"
    elif eclass is SE.CouldNotCompute:
      e._str_cached = "***COULDNOTCOMPUTE***"
    else: assert False, "impossible expression case"
  return e._str_cached
del __str__

@extclass(SE.loop)
def __str__(L):
  return str(L.name)
del __str__

# canonical operand order: constants first, then by kind and text
_kind_rank = {
  SE.Const  : 0,    SE.Unknown : 1,
  SE.Trunc  : 2,    SE.ZExt    : 3,    SE.SExt  : 4,
  SE.UDiv   : 5,    SE.Mul     : 6,    SE.Add   : 7,
  SE.SMax   : 8,    SE.UMax    : 9,    SE.AddRec : 10,
  SE.CouldNotCompute : 11,
}
def _order_key(e):
  if not hasattr(e,'_key_cached'):
    e._key_cached = (_kind_rank[type(e)], str(e), repr(e))
  return e._key_cached

def _loop_key(L):
  return (L.depth, L.name)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Canonicalizing constructors

def _wrap(val, width):
  """ reduce `val` to the signed range of a `width`-bit integer """
  mask  = (1 << width) - 1
  val  &= mask
  if val >> (width - 1):
    val -= (1 << width)
  return val

def _unsigned(val, width):
  return val & ((1 << width) - 1)

def const(val, width=None):
  width = config.index_width(width)
  return SE.Const(_wrap(val, width), width)

def zero(width=None):   return const(0, width)
def one(width=None):    return const(1, width)

def unknown(name, width=None):
  if type(name) is str:
    name = Sym(name)
  return SE.Unknown(name, config.index_width(width))

def loop(name, depth=0):
  if type(name) is str:
    name = Sym(name)
  return SE.loop(name, depth)

def could_not_compute():
  return CNC

def _width_of(ops):
  for o in ops:
    w = o.width()
    if w is not None: return w
  return config.index_width()

def addrec(start, step, L):
  if start is CNC or step is CNC:
    return CNC
  if step.is_zero():
    return start
  return SE.AddRec(start, step, L)

def iv(L, width=None):
  """ the canonical induction variable {0,+,1} of loop `L` """
  return addrec(zero(width), one(width), L)

def _split_coeff(e):
  """ split `e` as `c * base` with an integer coefficient `c` """
  if type(e) is SE.Mul and type(e.ops[0]) is SE.Const:
    rest = e.ops[1:]
    return e.ops[0].val, (rest[0] if len(rest) == 1 else SE.Mul(rest))
  return 1, e

def _sorted_node(cls, ops):
  ops = sorted(ops, key=_order_key)
  return ops[0] if len(ops) == 1 else cls(ops)

def add(ops):
  assert len(ops) > 0, "expected at least one operand to add"
  flat    = []
  for o in ops:
    if o is CNC:
      return CNC
    flat.extend(o.ops if type(o) is SE.Add else [o])
  w       = _width_of(flat)

  cval    = 0
  coeffs  = {}
  recs    = {}
  for o in flat:
    oclass = type(o)
    if oclass is SE.Const:
      cval += o.val
    elif oclass is SE.AddRec:
      recs.setdefault(o.loop, []).append(o)
    else:
      c, base       = _split_coeff(o)
      coeffs[base]  = coeffs.get(base, 0) + c
  cval    = _wrap(cval, w)

  rest    = [ const(cval, w) ] if cval != 0 else []
  for base,c in coeffs.items():
    c = _wrap(c, w)
    if   c == 1:  rest.append(base)
    elif c != 0:  rest.append(mul([ const(c, w), base ]))

  if len(recs) > 0:
    # recurrences of one loop add component-wise
    merged  = {}
    for L,rs in recs.items():
      if len(rs) == 1:
        merged[L] = rs[0]
      else:
        merged[L] = addrec(add([ r.start for r in rs ]),
                           add([ r.step  for r in rs ]), L)
    inner   = max(merged, key=_loop_key)
    rec     = merged.pop(inner)
    rest.extend( r for r in merged.values() )
    # everything invariant in the innermost loop joins its start value
    fold    = [ o for o in rest if not o.uses_loop(inner) ]
    stay    = [ o for o in rest if o.uses_loop(inner) ]
    if type(rec) is SE.AddRec:
      rec   = addrec(add([rec.start] + fold), rec.step, inner)
    elif len(fold) > 0:
      rec   = add([rec] + fold)
    if len(stay) == 0:
      return rec
    return _sorted_node(SE.Add, [rec] + stay)

  if len(rest) == 0:
    return const(0, w)
  return _sorted_node(SE.Add, rest)

def mul(ops):
  if len(ops) == 0:
    return one()
  flat    = []
  for o in ops:
    if o is CNC:
      return CNC
    flat.extend(o.ops if type(o) is SE.Mul else [o])
  w       = _width_of(flat)

  cval    = 1
  others  = []
  for o in flat:
    if type(o) is SE.Const:
      cval  = _wrap(cval * o.val, w)
    else:
      others.append(o)
  if cval == 0:
    return const(0, w)
  if len(others) == 0:
    return const(cval, w)
  factors = ([ const(cval, w) ] if cval != 1 else []) + others

  # scale a recurrence by loop invariant factors
  recs    = [ o for o in others if type(o) is SE.AddRec ]
  if len(recs) == 1 and len(factors) > 1:
    rec   = recs[0]
    scale = [ f for f in factors if f is not rec ]
    if not any( f.uses_loop(rec.loop) for f in scale ):
      return addrec(mul(scale + [rec.start]),
                    mul(scale + [rec.step]), rec.loop)

  # distribute a constant over a sum
  if cval != 1 and len(others) == 1 and type(others[0]) is SE.Add:
    return add([ mul([ const(cval, w), o ]) for o in others[0].ops ])

  return _sorted_node(SE.Mul, factors)

def neg(e):
  return mul([ const(-1, e.width()), e ])

def sub(lhs, rhs):
  return add([ lhs, neg(rhs) ])

def udiv(lhs, rhs):
  if lhs is CNC or rhs is CNC:
    return CNC
  if rhs.is_one():
    return lhs
  if type(lhs) is SE.Const and type(rhs) is SE.Const and rhs.val != 0:
    w = lhs.bits
    return const(_unsigned(lhs.val, w) // _unsigned(rhs.val, rhs.bits), w)
  return SE.UDiv(lhs, rhs)

def _minmax(cls, ops, pick):
  flat    = []
  for o in ops:
    if o is CNC:
      return CNC
    flat.extend(o.ops if type(o) is cls else [o])
  w       = _width_of(flat)
  consts  = [ o.val for o in flat if type(o) is SE.Const ]
  others  = []
  for o in flat:
    if type(o) is not SE.Const and o not in others:
      others.append(o)
  if len(consts) > 0:
    others.append(const(pick(consts, w), w))
  return _sorted_node(cls, others)

def smax(ops):
  return _minmax(SE.SMax, ops, lambda vs,w: max(vs))

def umax(ops):
  return _minmax(SE.UMax, ops,
                 lambda vs,w: max( _unsigned(v,w) for v in vs ))

def _cast(cls, op, width):
  if op is CNC:
    return CNC
  ow = op.width()
  if ow == width:
    return op
  if cls is SE.Trunc:
    assert width < ow, "truncation must narrow"
  else:
    assert width > ow, "extension must widen"

  if type(op) is SE.Const:
    if cls is SE.ZExt:
      return const(_unsigned(op.val, ow), width)
    return const(op.val, width)
  # collapse chains of the same cast
  if type(op) is cls:
    return _cast(cls, op.op, width)
  return cls(op, width)

def trunc(op, width):   return _cast(SE.Trunc, op, width)
def sext(op, width):    return _cast(SE.SExt, op, width)
def zext(op, width):    return _cast(SE.ZExt, op, width)

def trunc_or_zext(op, width):
  ow = op.width()
  if ow is None or ow == width:   return op
  elif ow > width:                return trunc(op, width)
  else:                           return zext(op, width)

# rebuild a node of the same kind as `e` over new operands
def rebuild(e, ops):
  eclass = type(e)
  if   eclass is SE.Add:    return add(ops)
  elif eclass is SE.Mul:    return mul(ops)
  elif eclass is SE.SMax:   return smax(ops)
  elif eclass is SE.UMax:   return umax(ops)
  elif eclass is SE.UDiv:   return udiv(ops[0], ops[1])
  elif eclass in _cast_classes:
    return _cast(eclass, ops[0], e.bits)
  elif eclass is SE.AddRec: return addrec(ops[0], ops[1], e.loop)
  else:
    assert len(ops) == 0
    return e

@extclass(SE.expr)
def subst(e, env):
  """ replace sub-expressions according to the dictionary `env` """
  if e in env:
    return env[e]
  ops = e.operands()
  if len(ops) == 0:
    return e
  return rebuild(e, [ o.subst(env) for o in ops ])
del subst

# --------------------------------------------------------------------------- #
# Operator Overloading to help construct expressions

def _lift_(obj, width):
  if isinstance(obj, SE.expr):
    return obj
  elif type(obj) is int:
    return const(obj, width)
  else: assert False, f"unsupported expression lifting for type {type(obj)}"

@extclass(SE.expr)
def __add__(lhs,rhs):   return add([ lhs, _lift_(rhs, lhs.width()) ])
@extclass(SE.expr)
def __radd__(rhs,lhs):  return add([ _lift_(lhs, rhs.width()), rhs ])
@extclass(SE.expr)
def __neg__(arg):       return neg(arg)
@extclass(SE.expr)
def __sub__(lhs,rhs):   return sub(lhs, _lift_(rhs, lhs.width()))
@extclass(SE.expr)
def __rsub__(rhs,lhs):  return sub(_lift_(lhs, rhs.width()), rhs)
@extclass(SE.expr)
def __mul__(lhs,rhs):   return mul([ lhs, _lift_(rhs, lhs.width()) ])
@extclass(SE.expr)
def __rmul__(rhs,lhs):  return mul([ _lift_(lhs, rhs.width()), rhs ])

del __add__, __radd__, __neg__, __sub__, __rsub__, __mul__, __rmul__

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Exact division with quotient and remainder

def _trunc_divmod(n, d):
  q = abs(n) // abs(d)
  if (n < 0) != (d < 0):
    q = -q
  return q, n - q*d

def divide(num, den):
  """ Compute `(quotient, remainder)` with num = quotient*den + remainder.

  Division only succeeds term by term: whenever a part of `num` cannot
  be divided by `den` it is moved into the remainder, and the whole of
  `num` is the remainder if nothing divides (quotient 0).
  """
  w     = _width_of([num, den])
  if num is den:
    return one(w), zero(w)
  if num.is_zero():
    return zero(w), zero(w)
  if den.is_one():
    return num, zero(w)

  # split a product denominator into its factors
  if type(den) is SE.Mul:
    q   = num
    for op in den.ops:
      q, r = divide(q, op)
      if not r.is_zero():
        return zero(w), num
    return q, zero(w)

  nclass = type(num)
  if nclass is SE.Const:
    if type(den) is SE.Const and den.val != 0:
      q, r = _trunc_divmod(num.val, den.val)
      return const(q, w), const(r, w)

  elif nclass is SE.AddRec:
    qs, rs  = divide(num.start, den)
    qt, rt  = divide(num.step, den)
    return addrec(qs, qt, num.loop), addrec(rs, rt, num.loop)

  elif nclass is SE.Add:
    qr      = [ divide(o, den) for o in num.ops ]
    return add([ q for q,r in qr ]), add([ r for q,r in qr ])

  elif nclass is SE.Mul:
    qs, found = [], False
    for op in num.ops:
      if found:
        qs.append(op)
        continue
      q, r  = divide(op, den)
      if r.is_zero():
        found = True
        qs.append(q)
      else:
        qs.append(op)
    if found:
      return mul(qs), zero(w)
    if type(den) is SE.Unknown:
      # the remainder is what is left when `den` vanishes
      r     = num.subst({ den : zero(den.bits) })
      if r.is_zero():
        return num.subst({ den : one(den.bits) }), zero(w)

  return zero(w), num
