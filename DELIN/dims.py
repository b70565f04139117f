
import logging

from .scev import CNC
from . import scev as S
from .gcd import gcd

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Sizes of dimensions
#
#   For a row-major array the flat offset of A[i_0]...[i_{n-1}] is
#       i_0 * (d_1*...*d_{n-1}) + i_1 * (d_2*...*d_{n-1}) + ... + i_{n-1}
#   so the subscripts found for dimensions 0..k-1 are all multiples of
#   d_k*...*d_{n-1}.  Their GCD, divided by the sizes already found for
#   the inner dimensions, estimates d_k.  The size of dimension 0 is
#   never needed.

def _is_known(hint_size):
  return hint_size > 0

def _gcd_elements(arr):
  return [ el for el in arr if el.is_element and el.is_valid ]

def _count_dims(arr):
  els = _gcd_elements(arr)
  if len(els) == 0:
    logger.debug(f"no valid element found for {arr.base().display_name()}")
    return 0
  n   = len(els[0].subscripts)
  for el in els[1:]:
    if len(el.subscripts) != n:
      logger.debug(f"subscript counts disagree for "
                   f"{arr.base().display_name()}")
      return 0
  return n

def infer_dim_sizes(arr, hint_dims, index_width):
  """ Fill in the dimension sizes of `arr` and mark it delinearized.

  `hint_dims` are the sizes from the declaration of the array, -1 for
  an unknown size; empty if there is no declaration.
  """
  name    = arr.base().display_name()
  logger.debug(f"compute sizes of dimensions for {name}")
  n_dims  = arr.number_of_dims()

  if n_dims == 0:
    n_dims    = _count_dims(arr)
    if n_dims == 0:
      logger.debug(f"unable to determine number of dimensions for {name}")
      return
    hint_dims = [-1] * n_dims
    arr.set_number_of_dims(n_dims)
    last_unknown = n_dims - 1
    logger.debug(f"extract number of dimensions from subscripts: {n_dims}")
  else:
    assert len(hint_dims) == n_dims, "hint must describe every dimension"
    # sizes of trailing dimensions are taken from the declaration
    last_const = n_dims
    for d in reversed(range(n_dims)):
      if not _is_known(hint_dims[d]):
        break
      last_const = d
      arr.set_dim_size(d, S.const(hint_dims[d], index_width), hinted=True)
    if last_const == 0:
      logger.debug("all dimensions have constant sizes")
      arr.set_delinearized()
      return
    if _is_known(hint_dims[0]):
      arr.set_dim_size(0, S.const(hint_dims[0], index_width), hinted=True)
    last_unknown = last_const - 1

  logger.debug("compute non-constant dimension sizes")
  prev_sizes  = S.one(index_width)
  for d in range(last_unknown, 0, -1):
    logger.debug(f"process dimension {d}")
    hinted    = _is_known(hint_dims[d])
    if hinted:
      size    = S.const(hint_dims[d], index_width)
    else:
      exprs   = [ el.subscripts[j-1] for el in _gcd_elements(arr)
                                     for j in range(d, 0, -1) ]
      for e in exprs:
        logger.debug(f"use for GCD computation: {e}")
      if len(exprs) == 0:
        size  = S.zero(index_width)
      else:
        g     = gcd(exprs)
        size, rem = S.divide(g, prev_sizes)
        logger.debug(f"GCD: {g}, product of sizes of previous dimensions: "
                     f"{prev_sizes}, quotient {size}, remainder {rem}")

    if size.is_zero() or size is CNC:
      logger.debug(f"could not compute size of dimension {d}")
      arr.set_dim_size(d, CNC)
      for j in range(1, d):
        if _is_known(hint_dims[j]):
          arr.set_dim_size(j, S.const(hint_dims[j], index_width), hinted=True)
        else:
          arr.set_dim_size(j, CNC)
      return

    arr.set_dim_size(d, size, hinted=hinted)
    logger.debug(f"dimension size is {size}")
    prev_sizes = S.mul([ prev_sizes, S.trunc_or_zext(size, index_width) ])

  arr.set_delinearized()

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Per-dimension subscripts

def normalize_subscripts(arr, index_width):
  """ Divide the flat subscripts of `arr` by the sizes of inner dimensions.

  Subscripts of the trailing dimensions whose sizes come from the
  declaration are already per-dimension.  Going outward from there,
  only constant sizes are divided out; an element whose subscript is
  not a multiple of the product becomes invalid and keeps its remaining
  subscripts as they are.
  """
  assert arr.is_delinearized(), "array must be delinearized"
  logger.debug(f"simplify subscripts for {arr.base().display_name()}")
  n_dims  = arr.number_of_dims()
  assert all( arr.is_known_dim_size(d) for d in range(1, n_dims) ), \
         "sizes of inner dimensions must be known"
  start   = n_dims
  while start > 1 and arr.is_hinted_dim(start - 1):
    start -= 1

  prev_sizes  = S.one(index_width)
  for d in range(start - 1, 0, -1):
    size      = arr.dim_size(d)
    if not size.is_constant():
      logger.debug(f"size of dimension {d} is not a constant: {size}")
      break
    prev_sizes = S.mul([ prev_sizes, S.trunc_or_zext(size, index_width) ])
    for el in arr:
      if not el.is_valid or len(el.subscripts) != n_dims:
        continue
      sub     = el.subscripts[d-1]
      q, r    = S.divide(sub, prev_sizes)
      logger.debug(f"subscript {d-1} {sub}, product of sizes of previous "
                   f"dimensions {prev_sizes}, quotient {q}, remainder {r}")
      if not r.is_zero():
        el.is_valid = False
        continue
      el.subscripts[d-1] = q
