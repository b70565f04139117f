
from re import compile as _re_compile

_valid_pattern = _re_compile(r"^[a-zA-Z_][\w.]*$")
def is_valid_name(obj):
  return (type(obj) is str) and (_valid_pattern.match(obj) != None)

class Sym:
  """ A uniquely identified name: opaque values, loops, memory objects """
  _unq_count   = 1

  def __init__(self,nm):
    if not is_valid_name(nm):
      raise TypeError(f"expected an alphanumeric name string, "
                      f"but got '{nm}'")
    self._nm    = nm
    self._id    = Sym._unq_count
    Sym._unq_count += 1

  def __str__(self):
    return self._nm

  def __repr__(self):
    return f"{self._nm}${self._id}"

  def __hash__(self): return id(self)

  def __lt__(lhs,rhs): return (lhs._nm,lhs._id) < (rhs._nm,rhs._id)

# from a github gist by victorlei
def extclass(cls):
  return lambda f: (setattr(cls,f.__name__,f) or f)
