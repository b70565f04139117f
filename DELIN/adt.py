""" Grammar-driven construction of the IR class hierarchies.

    An ASDL description is parsed into a Python module holding one class
    per declared type and one subclass per constructor.  Constructors
    type-check their arguments.  `memo` then turns the chosen
    constructors into hash-consing constructors: building the same
    node twice returns the very same object, so structural equality of
    two nodes is `is`-equality and nodes can key dictionaries cheaply.
"""

import asdl
from types import ModuleType
from weakref import WeakValueDictionary

def _parse(src):
    return asdl.ASDLParser().parse(src)

_builtin_checks = {
    'string'  : lambda x: type(x) is str,
    'int'     : lambda x: type(x) is int,
    'object'  : lambda x: x is not None,
    'bool'    : lambda x: type(x) is bool,
}

def _superclasses(asdl_mod):
    def no_init(nm):
        def invalid_init(self, *args, **kwargs):
            raise TypeError(f"'{nm}' is abstract; use one of its constructors")
        return invalid_init

    scs = {}
    for nm,t in asdl_mod.types.items():
        if isinstance(t,asdl.Sum):
            scs[nm] = type(nm,(),{ '__init__' : no_init(nm) })
        elif isinstance(t,asdl.Product):
            scs[nm] = type(nm,(),{})
        else: assert False, "unexpected kind of asdl type"
    return scs

def _checks(scs, ext_checks):
    chk = _builtin_checks.copy()
    chk.update(ext_checks)
    for nm,sc in scs.items():
        assert nm not in chk, f"type name '{nm}' shadows an external type"
        chk[nm] = (lambda cls: lambda x: isinstance(x,cls))(sc)
    return chk

def _check_src(i, f, modname, scs, indent="    "):
    typname = f"{modname}.{f.type}" if f.type in scs else f.type
    def basic(arg, indent):
        return (f"{indent}if not CHK['{f.type}']({arg}):\n"
                f"{indent}    raise TypeError('expected arg {i} "
                f"\"{f.name}\" to be type \"{typname}\"')")
    if f.seq:
        return (f"{indent}if type({f.name}) is not list:\n"
                f"{indent}    raise TypeError('expected arg {i} "
                f"\"{f.name}\" to be a list')\n"
                f"{indent}for _e in {f.name}:\n"
                f"{basic('_e', indent+'    ')}")
    elif f.opt:
        return (f"{indent}if {f.name} is not None:\n"
                f"{basic(f.name, indent+'    ')}")
    else:
        return basic(f.name, indent)

def _make_init(cname, fields, modname, scs, chk):
    params  = ', '.join([ f.name for f in fields ])
    checks  = '\n'.join([ _check_src(i, f, modname, scs)
                          for i,f in enumerate(fields) ])
    assigns = '\n'.join([ f"    self.{f.name} = {f.name}" for f in fields ])
    if len(fields) == 0:
        checks, assigns = "    pass", ""
    src     = (f"def {cname}_init(self{', ' if params else ''}{params}):\n"
               f"{checks}\n{assigns}\n")
    env     = { 'CHK': chk }
    exec(src, env)
    return env[cname + '_init']

def _make_repr(cname, fields):
    def __repr__(self):
        args = ','.join([ f"{f.name}={getattr(self,f.name)!r}"
                          for f in fields ])
        return f"{cname}({args})"
    return __repr__

def ADT(asdl_str, ext_checks={}):
    """ Convert an ASDL grammar into a Python module of node classes.

    Every type of the grammar becomes a class and every constructor of a
    sum type becomes a subclass of it, exposed both on the module and
    on its parent class (`mod.Add` is `mod.expr.Add`).  Constructors
    check their arguments against the grammar and raise `TypeError`.

    Parameters
    -------
    asdl_str : str
        The ASDL definition string
    ext_checks : dict of functions, optional
        Type predicates for every external type used by the grammar
        other than the built-in 'string', 'int', 'bool' and 'object'.

    Returns
    -------
    module
        The newly created module
    """
    asdl_mod  = _parse(asdl_str)
    scs       = _superclasses(asdl_mod)
    chk       = _checks(scs, ext_checks)
    mod       = ModuleType(asdl_mod.name)

    def build(cls, cname, fields):
        cls.__init__  = _make_init(cname, fields, asdl_mod.name, scs, chk)
        cls.__repr__  = _make_repr(cname, fields)
        return cls

    for nm,t in asdl_mod.types.items():
        if isinstance(t,asdl.Product):
            setattr(mod, nm, build(scs[nm], nm, t.fields))
        else:
            T = scs[nm]
            for c in t.types:
                assert not hasattr(mod,c.name), (
                    f"constructor name '{c.name}' used twice")
                C = build(type(c.name,(T,),{}), c.name,
                          c.fields + t.attributes)
                setattr(T, c.name, C)
                setattr(mod, c.name, C)
            setattr(mod, nm, T)

    mod._ast      = asdl_mod
    mod._defstr   = asdl_str
    mod.__doc__   = (f"ASDL Module Generated by ADT\n\n"
                     f"Original ASDL description:\n{asdl_str}")
    return mod


_builtin_keys = {
    'string'  : lambda x: x,
    'int'     : lambda x: x,
    'object'  : id,
    'bool'    : lambda x: x,
}

def _key_fn(fields, keys):
    def field_key(f, val):
        K = keys[f.type]
        if f.seq:
            return tuple( K(v) for v in val )
        elif f.opt and val is None:
            return None
        else:
            return K(val)
    def key(args):
        return tuple( field_key(f,a) for f,a in zip(fields,args) )
    return key

def _memoize(C, fields, keys):
    cache     = WeakValueDictionary()
    key       = _key_fn(fields, keys)
    names     = [ f.name for f in fields ]
    base_new  = super(C,C).__new__

    def __new__(cls, *args, **kwargs):
        if kwargs:
            args = args + tuple( kwargs[nm] for nm in names[len(args):] )
        k     = key(args)
        val   = cache.get(k)
        if val is None:
            val       = base_new(cls)
            cache[k]  = val
        return val

    C._memo_cache = cache
    C.__new__     = __new__

def memo(mod, whitelist, ext_keys={}):
    """ Wrap ADT constructors with hash-consing.

    Call right after `ADT`.  Sub-nodes are keyed by identity, which is
    sound because a memoized node is always built from memoized (or
    otherwise unique) children.

    Parameters
    -------
    mod : ADT module
        Created by `ADT`
    whitelist : list of strings
        Names of every constructor in `mod` that will be memoized.
    ext_keys : dict of functions, optional
        Functions turning values of external types into hashable keys.
    """
    asdl_mod  = mod._ast
    keys      = _builtin_keys.copy()
    keys.update(ext_keys)
    for nm in asdl_mod.types:
        keys[nm] = id

    for nm,t in asdl_mod.types.items():
        if isinstance(t,asdl.Product):
            if nm in whitelist:
                _memoize(getattr(mod,nm), t.fields, keys)
        else:
            for c in t.types:
                if c.name in whitelist:
                    _memoize(getattr(mod,c.name),
                             c.fields + t.attributes, keys)
