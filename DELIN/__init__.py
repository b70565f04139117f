""" DELIN - Delinearization of array accesses """

from .scev import SE, CNC
from .mem_ir import (
  MIR,
  debug_hint,
  array_object,
  pointer_object,
  index,
  load_of,
  store_to,
  call_with,
)
from .prelude import Sym

from .arrays import Array, Element, DelinearizeInfo
from .affine import binomial, compute_addrec, coefficients
from .gcd import gcd

from .delinearize import delinearize, analyze
from .report import to_json, dump_json, delinearization_log

from .config import set_index_width, set_debug_trace

__all__ = [
  "SE",
  "CNC",
  "MIR",
  "Sym",
  #
  "debug_hint",
  "array_object",
  "pointer_object",
  "index",
  "load_of",
  "store_to",
  "call_with",
  #
  "Array",
  "Element",
  "DelinearizeInfo",
  #
  "binomial",
  "compute_addrec",
  "coefficients",
  "gcd",
  #
  "delinearize",
  "analyze",
  #
  "to_json",
  "dump_json",
  "delinearization_log",
  #
  "set_index_width",
  "set_debug_trace",
]
