import os
import tempfile
import unittest
from cache import WritePolicy, AccessOutcome
from errors import MalformedRecordError, ConfigurationError
from instruction import Instruction, Operation
from simulation import Simulation, parse_line

TRACE = """\
# small trace
0x804ae19: R 0x00000000
0x804ae1c: W 0x00000004

0x804ae1f: W 0x00004000
0x804ae22: R 0x00008000
0x804ae25: W 0x00004001
#eof
0x804ae28: R 0x0000c000
"""

class TestParseLine(unittest.TestCase):

    def test_read_record(self):
        instr = parse_line("0x804ae19: R 0x9cb3d40\n")
        self.assertEqual(instr, Instruction(Operation.READ, "0x9cb3d40"))

    def test_write_record(self):
        instr = parse_line("0x804ae19: W 0xbfd8b3d0\r\n")
        self.assertEqual(instr, Instruction(Operation.WRITE, "0xbfd8b3d0"))

    def test_unknown_operation(self):
        with self.assertRaises(MalformedRecordError) as ctx:
            parse_line("0x804ae19: X 0x9cb3d40", 7)
        self.assertEqual(ctx.exception.record_number, 7)
        self.assertIn("7: ERROR!!!!", str(ctx.exception))

    def test_missing_separator(self):
        with self.assertRaises(MalformedRecordError):
            parse_line("garbage")
        with self.assertRaises(MalformedRecordError):
            parse_line("0x804ae19: ")


class TestSimulation(unittest.TestCase):

    def setUp(self):
        # three 4 byte lines
        self.sim = Simulation(WritePolicy.WRITE_THROUGH, cache_size=12, block_size_bytes=4)

    def test_replay_stops_at_eof_marker(self):
        stats = self.sim.replay(TRACE.splitlines(keepends=True))
        self.assertEqual(self.sim.records, 5)
        self.assertEqual(stats.hits, 2)
        self.assertEqual(stats.misses, 3)
        self.assertEqual(stats.memory_reads, 3)
        self.assertEqual(stats.memory_writes, 2)
        self.assertFalse(self.sim.cache.is_in_cache(0xc000))

    def test_outcome_tally(self):
        lines = ["0x1: R 0x%08x\n" % (i << 14) for i in range(5)]
        self.sim.replay(lines)
        self.assertEqual(self.sim.outcomes[AccessOutcome.MISS_INSTALLED], 3)
        self.assertEqual(self.sim.outcomes[AccessOutcome.MISS_DROPPED], 2)
        self.assertEqual(self.sim.outcomes[AccessOutcome.HIT], 0)
        self.assertEqual(self.sim.stats.memory_reads, self.sim.outcomes[AccessOutcome.MISS_INSTALLED])

    def test_malformed_record_aborts(self):
        lines = ["0x1: R 0x0\n", "0x2: R 0x0\n", "0x3: Q 0x0\n", "0x4: R 0x0\n"]
        with self.assertRaises(MalformedRecordError) as ctx:
            self.sim.replay(lines)
        self.assertEqual(ctx.exception.record_number, 2)
        self.assertEqual(self.sim.records, 2)

    def test_step(self):
        self.assertEqual(self.sim.step(Instruction(Operation.READ, "0x10")), AccessOutcome.MISS_INSTALLED)
        self.assertEqual(self.sim.step(Instruction(Operation.READ, "0x10")), AccessOutcome.HIT)

    def test_invalid_cache(self):
        with self.assertRaises(ConfigurationError):
            Simulation(WritePolicy.WRITE_BACK, cache_size=12, block_size_bytes=8)

    def test_simulate_file(self):
        fd, path = tempfile.mkstemp(suffix=".trace")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(TRACE)
            sim = Simulation(WritePolicy.WRITE_BACK, path, cache_size=12, block_size_bytes=4)
            stats = sim.simulate()
        finally:
            os.remove(path)
        self.assertEqual(stats.report_lines(), [
            "CACHE HITS: 2",
            "CACHE MISSES: 3",
            "MEMORY READS: 3",
            "MEMORY WRITES: 0",
        ])

    def test_simulate_file_with_undecodable_bytes(self):
        fd, path = tempfile.mkstemp(suffix=".trace")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(b"0x1: R 0x00000000\xff\n0x2: R 0x00000000\n#eof\n")
            sim = Simulation(WritePolicy.WRITE_THROUGH, path, cache_size=8, block_size_bytes=4)
            stats = sim.simulate()
        finally:
            os.remove(path)
        # the stray byte is an unknown hex character and only shifts the address
        self.assertEqual(sim.records, 2)
        self.assertEqual(stats.report_lines(), [
            "CACHE HITS: 1",
            "CACHE MISSES: 1",
            "MEMORY READS: 1",
            "MEMORY WRITES: 0",
        ])

if __name__ == '__main__':
    unittest.main()
