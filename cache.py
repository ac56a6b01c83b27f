from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from address import AddressDecoder
from errors import ConfigurationError, UnknownOperationError
from instruction import Operation
import logging

LOGGER = logging.getLogger("cachesim")

class WritePolicy(Enum):
    WRITE_THROUGH = "wt"
    WRITE_BACK = "wb"

class AccessOutcome(Enum):
    HIT = 1
    MISS_INSTALLED = 2
    MISS_DROPPED = 3

@dataclass
class CacheBlock:
    tag: int
    valid: bool = True
    dirty: bool = False

@dataclass
class CacheStatistics:
    hits: int = 0
    misses: int = 0
    memory_reads: int = 0
    memory_writes: int = 0

    @property
    def total_accesses(self) -> int:
        return self.hits + self.misses

    def report_lines(self) -> list[str]:
        return [
            f"CACHE HITS: {self.hits}",
            f"CACHE MISSES: {self.misses}",
            f"MEMORY READS: {self.memory_reads}",
            f"MEMORY WRITES: {self.memory_writes}",
        ]

@dataclass
class Cache:
    """
    Fully associative cache with a write through or write back policy.
    There is no replacement policy: a miss on a full cache is counted but the
    block is never brought in, so resident blocks are never evicted.
    """
    size: int
    block_size_bytes: int
    write_policy: WritePolicy
    num_lines: int
    lines: list[Optional[CacheBlock]]
    decoder: AddressDecoder
    stats: CacheStatistics = field(default_factory=CacheStatistics)

    def __init__(self, size, block_size_bytes, write_policy, decoder=None):
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ConfigurationError(f"Invalid cache size: {size}")
        if isinstance(block_size_bytes, bool) or not isinstance(block_size_bytes, int) or block_size_bytes <= 0:
            raise ConfigurationError(f"Invalid block size: {block_size_bytes}")
        if size % block_size_bytes != 0:
            raise ConfigurationError(f"Block size {block_size_bytes} does not divide cache size {size}")
        if not isinstance(write_policy, WritePolicy):
            raise ConfigurationError(f"Invalid write policy: {write_policy}")
        self.size = size
        self.block_size_bytes = block_size_bytes
        self.write_policy = write_policy
        self.num_lines = size // block_size_bytes
        self.lines = [None] * self.num_lines
        self.decoder = decoder if decoder is not None else AddressDecoder()
        self.stats = CacheStatistics()

    @property
    def hits(self) -> int:
        return self.stats.hits

    @property
    def misses(self) -> int:
        return self.stats.misses

    @property
    def memory_reads(self) -> int:
        return self.stats.memory_reads

    @property
    def memory_writes(self) -> int:
        return self.stats.memory_writes

    def find_block(self, tag: int) -> Optional[CacheBlock]:
        for block in self.lines:
            if block is not None and block.valid and block.tag == tag:
                return block
        return None

    def find_empty_slot(self) -> Optional[int]:
        for i, block in enumerate(self.lines):
            if block is None:
                return i
        return None

    def is_in_cache(self, address) -> bool:
        return self.find_block(self.decoder.tag_of(address)) is not None

    def resident_blocks(self) -> list[CacheBlock]:
        return [block for block in self.lines if block is not None]

    def access(self, op: Operation, address) -> AccessOutcome:
        if not isinstance(op, Operation):
            raise UnknownOperationError(f"Unknown cache operation: {op}")
        tag = self.decoder.tag_of(address)
        block = self.find_block(tag)
        debug = LOGGER.isEnabledFor(logging.DEBUG)

        if block is not None:
            self.stats.hits += 1
            if op == Operation.WRITE:
                if self.write_policy == WritePolicy.WRITE_THROUGH:
                    self.stats.memory_writes += 1
                # set on every write hit, only meaningful for write back
                block.dirty = True
            if debug:
                self.log(f"{op.name} {address}: hit on tag {tag}")
            return AccessOutcome.HIT

        self.stats.misses += 1
        slot = self.find_empty_slot()
        if slot is None:
            if debug:
                self.log(f"{op.name} {address}: miss on tag {tag}, cache full, block dropped")
            return AccessOutcome.MISS_DROPPED

        self.lines[slot] = CacheBlock(tag, dirty=(op == Operation.WRITE))
        self.stats.memory_reads += 1
        if debug:
            self.log(f"{op.name} {address}: miss on tag {tag}, installed in line {slot}")
        return AccessOutcome.MISS_INSTALLED

    def read(self, address) -> AccessOutcome:
        return self.access(Operation.READ, address)

    def write(self, address) -> AccessOutcome:
        return self.access(Operation.WRITE, address)

    def dump(self) -> list[str]:
        lines = []
        for i, block in enumerate(self.lines):
            if block is None:
                lines.append(f"[{i}]: {{ valid: 0, tag: NULL }}")
            else:
                lines.append(f"[{i}]: {{ valid: {int(block.valid)}, tag: {self.decoder.tag_to_bits(block.tag)} }}")
        lines.append("Cache:")
        lines.extend("\t" + line for line in self.stats.report_lines())
        return lines

    def log(self, message: str):
        LOGGER.debug(f"Cache ({self.write_policy.name}): " + message)
