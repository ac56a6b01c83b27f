"""
Cache geometry and trace format constants.
The default cache is 16KB with 4 byte blocks. Addresses are 32 bits wide and
split into an 18 bit tag, a 12 bit index and a 2 bit byte offset, e.g.
000000000010001110 101111011111 00
The index is computed but never used for matching since any line can hold any tag.
"""
CACHE_SIZE_BYTES = 16384
BLOCK_SIZE_BYTES = 4

ADDRESS_BITS = 32
TAG_BITS = 18
INDEX_BITS = 12
OFFSET_BITS = 2

COMMENT_PREFIX = "#"
EOF_MARKER = "#eof"
