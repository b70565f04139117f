
import logging
import unittest
from DELIN import scev as S
from DELIN import config
from DELIN import set_index_width, set_debug_trace
from DELIN.mem_ir import array_object, index, load_of
from DELIN.delinearize import analyze

# --------------------------------------------------------------------------- #
# --------------------------------------------------------------------------- #
# Tests

class Test_Config(unittest.TestCase):

  def tearDown(self):
    set_index_width(64)
    set_debug_trace(False)

  def test_index_width(self):
    set_index_width(32)
    self.assertEqual(S.const(1).width(), 32)
    self.assertEqual(config.index_width(),   32)
    self.assertEqual(config.index_width(16), 16)
    with self.assertRaises(TypeError):
      set_index_width(0)
    with self.assertRaises(TypeError):
      set_index_width("64")

  def test_padding_width(self):
    A     = array_object("A", [4, 8])
    j     = S.iv(S.loop("j"), 32)
    info  = analyze([ load_of(index(A, j)) ], index_width=32)
    el    = info.find_array(A).element(0)
    self.assertIs(el.subscripts[0], S.zero(32))

  def test_trace(self):
    A     = array_object("A", [4, 8])
    with self.assertLogs("DELIN", level=logging.DEBUG) as cm:
      analyze([ load_of(A) ])
    self.assertTrue(any( "delinearization results" in m
                         for m in cm.output ))

  def test_debug_trace_handler(self):
    root  = logging.getLogger("DELIN")
    n     = len(root.handlers)
    set_debug_trace(True)
    set_debug_trace(True)
    self.assertEqual(len(root.handlers), n + 1)
    self.assertEqual(root.level, logging.DEBUG)
    set_debug_trace(False)
    self.assertEqual(len(root.handlers), n)

if __name__ == '__main__':
  unittest.main()
