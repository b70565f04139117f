from .adt import ADT
from .adt import memo as ADTmemo

from .prelude import *

from .scev import SE

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Memory accesses of a function, as seen by the delinearizer

access_kinds = {
  # accesses of a single element
  "load"      : True,
  "store"     : True,
  "atomicrmw" : True,
  "cmpxchg"   : True,
  # references to a whole object or a range of it, e.g. an array
  # passed as an argument
  "call"      : False,
  # lifetime and debug markers; not real accesses
  "marker"    : False,
}

MIR = ADT("""
module MIR {
  function  = ( name name, access* accesses )

  access    = ( access_kind kind, ptr ptr )

  ptr   = Object  ( sym  name,  decl? decl )
        | Load    ( ptr  src    )
        | Index   ( ptr  base,  expr* idx )
        | Cast    ( ptr  src    )

  -- declared type of an object, as recorded by debug information
  decl  = Scalar  ()
        | Pointer ( decl elem   )
        | ArrayOf ( extent* counts, decl elem )
}
""", {
  'name':         is_valid_name,
  'sym':          lambda x: type(x) is Sym,
  'access_kind':  lambda x: x in access_kinds,
  'expr':         lambda x: isinstance(x, SE.expr),
  'extent':       lambda x: type(x) is int or type(x) is Sym,
})
ADTmemo(MIR,[
  'Object', 'Load', 'Index', 'Cast', 'Scalar', 'Pointer', 'ArrayOf',
],{
  'sym':          lambda x: x,
  'expr':         id,
  'extent':       lambda x: x,
})

def is_element_access(kind):
  return access_kinds[kind]

def is_ignored_access(kind):
  return kind == "marker"

# --------------------------------------------------------------------------- #
# string representation of pointers

@extclass(MIR.ptr)
def __str__(p):
  pclass = type(p)
  if   pclass is MIR.Object:
    return f"@{p.name}"
  elif pclass is MIR.Load:
    return f"load({p.src})"
  elif pclass is MIR.Index:
    idx = ', '.join([ str(i) for i in p.idx ])
    return f"{p.base}[{idx}]"
  elif pclass is MIR.Cast:
    return f"cast({p.src})"
  else: assert False, "impossible pointer case"
del __str__

@extclass(MIR.ptr)
def display_name(p):
  """ the name of a memory object, or its textual form """
  if type(p) is MIR.Object:
    return str(p.name)
  return str(p)
del display_name

# --------------------------------------------------------------------------- #
# Base objects

@extclass(MIR.ptr)
def underlying_object(p):
  """ Strip addressing steps and casts down to the accessed object.

  A pointer loaded from memory is identified by the location it was
  loaded from, so an access through `p[i]` with `int **p` is based on
  `p` itself.
  """
  while type(p) is MIR.Index or type(p) is MIR.Cast:
    p = p.base if type(p) is MIR.Index else p.src
  if type(p) is MIR.Load:
    p = p.src
  return p
del underlying_object

# --------------------------------------------------------------------------- #
# Dimension hints from declarations

UNKNOWN_DIM = -1

def _extent(x):
  if type(x) is int and x >= 0:
    return x
  return UNKNOWN_DIM

def decl_dims(decl):
  """ Sizes of the dimensions of a declared type.

  An array declaration gives one size per dimension.  A pointer is an
  array of unknown length whose element may be an array itself, e.g.
  `int (*A)[10]` gives [-1, 10].  Variable length extents are unknown.
  """
  dclass = type(decl)
  if dclass is MIR.ArrayOf:
    return [ _extent(c) for c in decl.counts ]
  elif dclass is MIR.Pointer:
    dims  = [UNKNOWN_DIM]
    if type(decl.elem) is MIR.ArrayOf:
      dims.extend( _extent(c) for c in decl.elem.counts )
    return dims
  else:
    return []

def debug_hint(base):
  """ the default hint: read the declaration of a named object """
  if type(base) is not MIR.Object or base.decl is None:
    return None
  return decl_dims(base.decl)

# --------------------------------------------------------------------------- #
# Convenience constructors

def array_object(name, counts=None, elem=None):
  """ an object declared as an array; `counts` None gives a scalar """
  if type(name) is str:
    name  = Sym(name)
  elem    = elem or MIR.Scalar()
  decl    = elem if counts is None else MIR.ArrayOf(list(counts), elem)
  return MIR.Object(name, decl)

def pointer_object(name, counts=None):
  """ an object declared as a pointer, to an array if `counts` is given """
  if type(name) is str:
    name  = Sym(name)
  elem    = MIR.Scalar() if counts is None else \
            MIR.ArrayOf(list(counts), MIR.Scalar())
  return MIR.Object(name, MIR.Pointer(elem))

def index(base, *idx):
  return MIR.Index(base, list(idx))

def load_of(ptr):   return MIR.access("load", ptr)
def store_to(ptr):  return MIR.access("store", ptr)
def call_with(ptr): return MIR.access("call", ptr)
