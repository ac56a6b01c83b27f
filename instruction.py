from dataclasses import dataclass
from enum import Enum

class Operation(Enum):
    READ = "R"
    WRITE = "W"

@dataclass
class Instruction:
    op: Operation
    address: str # hex text, decoded leniently by the cache
