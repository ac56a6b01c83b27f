from dataclasses import dataclass, field
from typing import Iterable, Optional
from cache import Cache, WritePolicy, AccessOutcome, CacheStatistics
from address import AddressDecoder
from constants import (
    CACHE_SIZE_BYTES,
    BLOCK_SIZE_BYTES,
    COMMENT_PREFIX,
    EOF_MARKER,
)
from errors import MalformedRecordError
from instruction import (
    Instruction,
    Operation,
)
import logging

LOGGER = logging.getLogger("cachesim")

def parse_line(line: str, record_number: int = 0) -> Instruction:
    """
    Parses a trace line of the form "0x804ae19: R 0x9cb3d40".
    The operation is the character after the first space and the address is
    everything after the separator that follows it.
    """
    line = line.rstrip("\r\n")
    space = line.find(" ")
    if space == -1 or space + 1 >= len(line):
        raise MalformedRecordError(record_number, line)
    mode = line[space + 1]
    address = line[space + 3:].strip()
    try:
        op = Operation(mode)
    except ValueError:
        raise MalformedRecordError(record_number, line) from None
    return Instruction(op, address)

@dataclass
class Simulation:
    write_policy: WritePolicy
    input_file: Optional[str] = None
    cache_size: int = CACHE_SIZE_BYTES
    block_size_bytes: int = BLOCK_SIZE_BYTES
    decoder: Optional[AddressDecoder] = None
    cache: Cache = field(init=False)
    records: int = 0
    outcomes: dict[AccessOutcome, int] = field(default_factory=dict)

    def __post_init__(self):
        self.cache = Cache(self.cache_size, self.block_size_bytes, self.write_policy, self.decoder)
        self.outcomes = {outcome: 0 for outcome in AccessOutcome}

    @property
    def stats(self) -> CacheStatistics:
        return self.cache.stats

    def step(self, instr: Instruction) -> AccessOutcome:
        if LOGGER.isEnabledFor(logging.DEBUG):
            LOGGER.debug(f"{self.records}: {instr.op.value} {instr.address}\n" + self.cache.decoder.describe(instr.address))
        outcome = self.cache.access(instr.op, instr.address)
        self.outcomes[outcome] += 1
        self.records += 1
        return outcome

    def replay(self, lines: Iterable[str]) -> CacheStatistics:
        """
        Feeds every trace record to the cache until the end marker or the end of input.
        Comment lines starting with '#' and blank lines are skipped.
        Raises MalformedRecordError on the first record with an unknown operation.
        """
        for line in lines:
            stripped = line.strip()
            if stripped == EOF_MARKER:
                LOGGER.debug("Reached end of trace marker")
                break
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue
            self.step(parse_line(line, self.records))
        LOGGER.debug(f"Num Lines: {self.records}")
        return self.stats

    def simulate(self) -> CacheStatistics:
        LOGGER.info(f"Simulating {self.write_policy.name} cache of {self.cache_size} bytes "
                    f"({self.cache.num_lines} lines of {self.block_size_bytes} bytes) on {self.input_file}")
        # every byte maps to one character so stray bytes reach the lenient hex parser
        with open(self.input_file, encoding="latin-1") as f:
            stats = self.replay(f)
        LOGGER.info(f"All {self.records} trace records executed.")
        return stats

    def print_cache(self):
        for line in self.cache.dump():
            LOGGER.debug(line)

    def print_final_outputs(self):
        for line in self.stats.report_lines():
            print(line)
