
import logging

from .mem_ir import MIR, debug_hint
from .collect import collect_arrays
from .dims import infer_dim_sizes, normalize_subscripts
from .report import delinearization_log
from . import config

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Delinearization of the memory accesses of a function

def _hint_fn(hint):
  if hint is None:
    return debug_hint
  elif isinstance(hint, dict):
    return hint.get
  elif callable(hint):
    return hint
  else:
    raise TypeError(f"expected a dimension hint function or dictionary, "
                    f"but got {hint!r}")

def analyze(accesses, hint=None, index_width=None):
  """ Reconstruct the arrays accessed by `accesses`.

  `hint(base)` gives the declared sizes of the dimensions of a base
  object (-1 for an unknown size) or None; a dictionary from base
  objects to sizes may be given instead.  By default the declarations
  attached to `MIR.Object` are read.
  """
  hint        = _hint_fn(hint)
  index_width = config.index_width(index_width)
  info, dims  = collect_arrays(accesses, hint, index_width)

  for arr in info.arrays():
    infer_dim_sizes(arr, dims[arr.base()], index_width)
    if arr.is_delinearized():
      normalize_subscripts(arr, index_width)
    else:
      logger.debug(f"unable to delinearize {arr.base().display_name()}")

  info.fill_elements_map()
  if logger.isEnabledFor(logging.DEBUG):
    logger.debug(delinearization_log(info))
  return info

def delinearize(fn, hint=None, index_width=None):
  if not isinstance(fn, MIR.function):
    raise TypeError(f"expected a MIR.function, but got {fn!r}")
  logger.debug(f"delinearize accesses of {fn.name}")
  return analyze(fn.accesses, hint, index_width)
