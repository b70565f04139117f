""" Package-wide defaults """

import logging
import sys

# bit width of the address/index integer type; used for padding zero
# subscripts and for the running products of dimension sizes
DEFAULT_INDEX_WIDTH = 64

def set_index_width(bits):
  global DEFAULT_INDEX_WIDTH
  if type(bits) is not int or bits <= 0:
    raise TypeError(f"expected a positive bit width, but got {bits!r}")
  DEFAULT_INDEX_WIDTH = bits

def index_width(override=None):
  return DEFAULT_INDEX_WIDTH if override is None else override


_trace_handler = None
def set_debug_trace(enabled=True):
  """ Echo the analysis trace of every DELIN pass on stderr """
  global _trace_handler
  root = logging.getLogger("DELIN")
  if enabled and _trace_handler is None:
    _trace_handler = logging.StreamHandler(sys.stderr)
    _trace_handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    root.addHandler(_trace_handler)
    root.setLevel(logging.DEBUG)
  elif not enabled and _trace_handler is not None:
    root.removeHandler(_trace_handler)
    root.setLevel(logging.NOTSET)
    _trace_handler = None
