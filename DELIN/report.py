
import json

from .affine import coefficients

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Results of delinearization as records and text

def _subscript_record(sub):
  a, b, safe  = coefficients(sub)
  rec         = { "a": str(a), "b": str(b) }
  if not safe:
    rec["unsafe"] = True
  return rec

def to_json(info):
  """ Sizes of dimensions and subscripts of accesses, per array.

  Every subscript is given as `a * I + b` for the iteration count `I`
  of a loop.  Arrays are named after their base objects; when two
  bases print the same only the first one is kept.
  """
  sizes     = {}
  accesses  = {}
  for arr in info.arrays():
    name    = arr.base().display_name()
    if name in sizes:
      continue
    sizes[name]     = [ str(s) for s in arr.dim_sizes() ]
    accesses[name]  = [ [ _subscript_record(s) for s in el.subscripts ]
                        for el in arr ]
  return { "Sizes": sizes, "Accesses": accesses }

def dump_json(info, **kwargs):
  return json.dumps(to_json(info), **kwargs)

def delinearization_log(info):
  lines = ["delinearization results:"]
  for arr in info.arrays():
    lines.append(f"base object {arr.base()}")
    lines.append(f"  number of dimensions {arr.number_of_dims()}")
    if not arr.is_delinearized():
      lines.append("  unable to delinearize")
    for d,size in enumerate(arr.dim_sizes()):
      lines.append(f"    {d}: {size}")
    lines.append("  accesses:")
    for el in arr:
      lines.append(f"    address: {el.ptr}"
                   f"{'' if el.is_valid else ' (invalid)'}")
      for sub in el.subscripts:
        a, b, safe = coefficients(sub)
        lines.append(f"      SCEV: {sub}")
        lines.append(f"      a: {a}")
        lines.append(f"      b: {b}")
        if not safe:
          lines.append("      with unsafe cast")
  return "\n".join(lines)
