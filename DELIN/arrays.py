
from .scev import SE, CNC

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Arrays reconstructed from accesses

class Element:
  """ One access of an array.

  `subscripts` hold one expression per dimension once the number of
  dimensions is fixed.  Until the array is normalized the subscript of
  dimension `k` is scaled by the sizes of the inner dimensions.
  """
  def __init__(self, ptr):
    self.ptr          = ptr
    self.subscripts   = []
    self.is_element   = False
    self.is_valid     = False

  def __repr__(self):
    subs = ', '.join([ str(s) for s in self.subscripts ])
    return (f"Element({self.ptr}, [{subs}], "
            f"is_element={self.is_element}, is_valid={self.is_valid})")

class Array:
  def __init__(self, base):
    self._base          = base
    self._dim_sizes     = []
    self._hinted        = []
    self._elements      = []
    self._delinearized  = False
    self._range_ref     = False

  def base(self):               return self._base

  def __iter__(self):           return iter(self._elements)
  def __len__(self):            return len(self._elements)
  def element(self, idx):       return self._elements[idx]

  def add_element(self, ptr):
    el = Element(ptr)
    self._elements.append(el)
    return el

  # dimensions

  def number_of_dims(self):     return len(self._dim_sizes)

  def set_number_of_dims(self, n):
    assert n >= 0
    self._dim_sizes     = [CNC] * n
    self._hinted        = [False] * n

  def dim_size(self, idx):      return self._dim_sizes[idx]
  def dim_sizes(self):          return list(self._dim_sizes)

  def set_dim_size(self, idx, size, hinted=False):
    assert isinstance(size, SE.expr), "expected a size expression"
    self._dim_sizes[idx]  = size
    self._hinted[idx]     = hinted

  def is_known_dim_size(self, idx):
    return self._dim_sizes[idx] is not CNC

  def is_hinted_dim(self, idx):
    return self._hinted[idx]

  # state

  def is_delinearized(self):    return self._delinearized
  def set_delinearized(self):   self._delinearized = True

  def has_range_ref(self):      return self._range_ref
  def set_range_ref(self):      self._range_ref = True

  def __str__(self):
    sizes = ', '.join([ str(s) for s in self._dim_sizes ])
    return f"{self._base.display_name()}[{sizes}]"


class DelinearizeInfo:
  """ Every array found in one function, and a lookup of accesses.

  Arrays are kept in the order their base objects were first seen.
  """
  def __init__(self):
    self._arrays    = {}
    self._elements  = {}

  def arrays(self):
    return list(self._arrays.values())

  def find_array(self, base):
    return self._arrays.get(base)

  def get_or_add_array(self, base):
    arr = self._arrays.get(base)
    if arr is not None:
      return arr, False
    arr = Array(base)
    self._arrays[base] = arr
    return arr, True

  def remove_array(self, base):
    del self._arrays[base]

  def fill_elements_map(self):
    self._elements  = {}
    for arr in self._arrays.values():
      for idx,el in enumerate(arr):
        self._elements.setdefault(el.ptr, (arr, idx))

  def find_element(self, ptr):
    """ `(array, element)` accessed through `ptr`, or `(None, None)` """
    hit = self._elements.get(ptr)
    if hit is None:
      return None, None
    arr, idx = hit
    return arr, arr.element(idx)
