
import logging

from .mem_ir import MIR, is_element_access, is_ignored_access
from .arrays import DelinearizeInfo
from . import scev as S

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Collection of the arrays accessed by a function

def subscripts_of_steps(steps):
  """ Subscripts of a chain of addressing steps, outermost step first.

  A step with a single index contributes it.  In a step with several
  indices the first one only moves over whole objects, so it is
  dropped when it is the constant zero.
  """
  subs = []
  for step in steps:
    if len(step.idx) == 1:
      subs.append(step.idx[0])
    else:
      if not step.idx[0].is_zero():
        subs.append(step.idx[0])
      subs.extend(step.idx[1:])
  return subs

class ArrayCollector:
  """ Group the accesses of a function by the object they access.

  Every array records, per access, the raw subscripts found in the
  addressing steps of the access.  Dimension hints are queried once
  per base object and kept in `dims_cache`.
  """
  def __init__(self, accesses, hint, index_width):
    self._info        = DelinearizeInfo()
    self._hint        = hint
    self._index_width = index_width
    self._dims_cache  = {}

    for acc in accesses:
      if not isinstance(acc, MIR.access):
        raise TypeError(f"expected a memory access, but got {acc!r}")
      if is_ignored_access(acc.kind):
        continue
      self.process(acc)

    self.remove_scalars()

  def info(self):         return self._info
  def dims_cache(self):   return self._dims_cache

  def _dims_hint(self, base):
    if base not in self._dims_cache:
      dims = self._hint(base)
      self._dims_cache[base] = list(dims) if dims is not None else []
      logger.debug(f"number of array dimensions for {base.display_name()} "
                   f"is {len(self._dims_cache[base])}")
    return self._dims_cache[base]

  def process(self, acc):
    logger.debug(f"process {acc.kind} of {acc.ptr}")
    base      = acc.ptr.underlying_object()
    logger.debug(f"strip to base {base}")
    n_dims    = len(self._dims_hint(base))

    steps     = []
    p         = acc.ptr
    while type(p) is MIR.Index and (n_dims == 0 or len(steps) < n_dims):
      steps.append(p)
      p = p.base
    subs      = subscripts_of_steps(reversed(steps))

    arr, new  = self._info.get_or_add_array(base)
    if new:
      arr.set_number_of_dims(n_dims)
    assert arr.number_of_dims() == n_dims, "inconsistent number of dimensions"

    el        = arr.add_element(acc.ptr)
    el.is_valid = True
    if is_element_access(acc.kind):
      el.is_element = True
      # leading zero subscripts may have been folded away
      if len(subs) < n_dims:
        arr.set_range_ref()
        pad = n_dims - len(subs)
        el.subscripts.extend([ S.zero(self._index_width) ] * pad)
        logger.debug(f"add {pad} extra zero subscript(s)")
    if len(subs) > 0:
      arr.set_range_ref()
      el.subscripts.extend(subs)
    if n_dims > 0 and el.is_element and len(el.subscripts) != n_dims:
      el.is_valid = False

    logger.debug(f"number of dimensions {n_dims}, "
                 f"number of subscripts {len(el.subscripts)}, element is "
                 f"{'valid' if el.is_valid else 'invalid'}")
    for s in el.subscripts:
      logger.debug(f"  subscript {s}")

  def remove_scalars(self):
    for arr in self._info.arrays():
      if arr.number_of_dims() == 0 and not arr.has_range_ref():
        logger.debug(f"not an array {arr.base().display_name()}")
        self._dims_cache.pop(arr.base(), None)
        self._info.remove_array(arr.base())

def collect_arrays(accesses, hint, index_width):
  c = ArrayCollector(accesses, hint, index_width)
  return c.info(), c.dims_cache()
