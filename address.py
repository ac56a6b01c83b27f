from dataclasses import dataclass
from constants import (
    ADDRESS_BITS,
    TAG_BITS,
    INDEX_BITS,
    OFFSET_BITS,
)
from errors import ConfigurationError

HEX_PREFIX = "0x"
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1

def hex_to_int(text: str) -> int:
    """
    Converts a hexadecimal memory address like "0x1A2B3C4D" to an unsigned integer.
    No real error checking is performed: every character after an optional "0x"
    takes up one hex digit, and characters that are not hex digits add nothing
    to it instead of being rejected. The result wraps around at 32 bits.
    """
    i = 0
    if text.startswith(HEX_PREFIX):
        i = len(HEX_PREFIX)
    result = 0
    for ch in text[i:]:
        result = (result * 16) & ADDRESS_MASK
        ch = ch.lower()
        if "0" <= ch <= "9":
            result += ord(ch) - ord("0")
        elif "a" <= ch <= "f":
            result += ord(ch) - ord("a") + 10
    return result

def to_binary(num: int, width: int = ADDRESS_BITS) -> str:
    # most significant bit first
    return "".join("1" if num >> i & 1 else "0" for i in range(width - 1, -1, -1))

def format_binary(bstring: str, tag_bits: int = TAG_BITS, index_bits: int = INDEX_BITS, offset_bits: int = OFFSET_BITS) -> str:
    """
    Splits a binary string into its tag, index and byte select parts for easier reading.

    Ex. Format:
     -----------------------------------------------------
    | Tag: 18 bits | Index: 12 bits | Byte Select: 2 bits |
     -----------------------------------------------------
    Ex. Result:
    000000000010001110 101111011111 00
    """
    tag = bstring[:tag_bits]
    index = bstring[tag_bits:tag_bits + index_bits]
    offset = bstring[tag_bits + index_bits:tag_bits + index_bits + offset_bits]
    return f"{tag} {index} {offset}"

def binary_to_int(bits: str) -> int:
    """
    Converts a binary string to an integer. Returns 0 if the string holds
    anything other than 0s and 1s.
    """
    if not bits or any(b not in "01" for b in bits):
        return 0
    return int(bits, 2)

@dataclass(frozen=True)
class BitField:
    bits: str
    value: int

@dataclass(frozen=True)
class AddressFields:
    address: int
    binary: str
    tag: BitField
    index: BitField
    offset: BitField

    @property
    def formatted(self) -> str:
        return format_binary(self.binary, len(self.tag.bits), len(self.index.bits), len(self.offset.bits))

class AddressDecoder:
    """
    Splits addresses into tag, index and offset fields.
    Field widths are fixed at construction; the address width is their sum.
    """

    def __init__(self, tag_bits: int = TAG_BITS, index_bits: int = INDEX_BITS, offset_bits: int = OFFSET_BITS):
        if tag_bits < 0 or index_bits < 0 or offset_bits < 0:
            raise ConfigurationError(f"Bit field widths must be non-negative, got {tag_bits}/{index_bits}/{offset_bits}")
        if tag_bits + index_bits + offset_bits <= 0:
            raise ConfigurationError("Address must be at least one bit wide")
        self.tag_bits = tag_bits
        self.index_bits = index_bits
        self.offset_bits = offset_bits
        self.address_bits = tag_bits + index_bits + offset_bits
        self.address_mask = (1 << self.address_bits) - 1

    def to_int(self, address) -> int:
        if isinstance(address, str):
            address = hex_to_int(address)
        return int(address) & self.address_mask

    def decode(self, address) -> AddressFields:
        addr = self.to_int(address)
        offset = addr & ((1 << self.offset_bits) - 1)
        index = (addr >> self.offset_bits) & ((1 << self.index_bits) - 1)
        tag = addr >> (self.offset_bits + self.index_bits)
        return AddressFields(
            address=addr,
            binary=to_binary(addr, self.address_bits),
            tag=BitField(to_binary(tag, self.tag_bits), tag),
            index=BitField(to_binary(index, self.index_bits), index),
            offset=BitField(to_binary(offset, self.offset_bits), offset),
        )

    def tag_of(self, address) -> int:
        return self.to_int(address) >> (self.offset_bits + self.index_bits)

    def tag_to_bits(self, tag: int) -> str:
        return to_binary(tag, self.tag_bits)

    def describe(self, address) -> str:
        fields = self.decode(address)
        hex_text = address if isinstance(address, str) else hex(fields.address)
        return "\n".join([
            f"Hex: {hex_text}",
            f"Decimal: {fields.address}",
            f"Binary: {fields.binary}",
            f"Formatted: {fields.formatted}",
            f"Tag: {fields.tag.bits} ({binary_to_int(fields.tag.bits)})",
            f"Index: {fields.index.bits} ({binary_to_int(fields.index.bits)})",
            f"Offset: {fields.offset.bits} ({binary_to_int(fields.offset.bits)})",
        ])
