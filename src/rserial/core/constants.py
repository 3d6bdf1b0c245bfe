"""
R serialization format constants: SEXP type codes, flag bits and struct formats.

Pinned to R serialization format version 2 ("B\\n" native binary), with
version 3 available for R >= 3.5.0 readers.
"""
import struct

# Format magic: "B\n" selects native binary (as opposed to "X\n" XDR / "A\n" ascii)
NATIVE_MAGIC = b"B\n"

# Serialization format versions
FORMAT_VERSION_2 = 2
FORMAT_VERSION_3 = 3
SUPPORTED_VERSIONS = (FORMAT_VERSION_2, FORMAT_VERSION_3)

# Packed R versions (major * 65536 + minor * 256 + patch)
DEFAULT_WRITER_R_VERSION = "3.5.0"
MIN_READER_VERSION_V2 = 0x00020300  # R 2.3.0
MIN_READER_VERSION_V3 = 0x00030500  # R 3.5.0

# SEXP type codes
SYMSXP = 1
LISTSXP = 2
CHARSXP = 9
INTSXP = 13
REALSXP = 14
STRSXP = 16
VECSXP = 19
NILVALUE_SXP = 254

# Flag word layout: type(8) | object(1) | attr(1) | tag(1) | unused(1) | levels(16)
HAS_ATTR_BIT = 1 << 9
HAS_TAG_BIT = 1 << 10
LEVELS_SHIFT = 12

# CHARSXP encoding levels (gp bits)
BYTES_MASK = 1 << 1
LATIN1_MASK = 1 << 2
UTF8_MASK = 1 << 3
ASCII_MASK = 1 << 6

STRING_ENCODING_LEVELS = {
    "native": 0,
    "utf8": UTF8_MASK,
    "latin1": LATIN1_MASK,
    "bytes": BYTES_MASK,
}

# Ready-made flag words
LIST_FLAGS = VECSXP | HAS_ATTR_BIT  # 0x213
REAL_FLAGS = REALSXP  # 0x0E
INT_FLAGS = INTSXP  # 0x0D
STR_FLAGS = STRSXP  # 0x10
ATTR_PAIRLIST_FLAGS = LISTSXP | HAS_TAG_BIT  # 0x402
SYMBOL_FLAGS = SYMSXP  # 0x01
NA_STRING_FLAGS = CHARSXP

NAMES_SYMBOL = b"names"

# Missing values
NA_INTEGER = -(2**31)
NA_REAL_BITS = 0x7FF00000000007A2
NA_STRING_LENGTH = -1

# Lengths above this are written as -1 followed by two 32-bit halves
MAX_SHORT_LENGTH = 2**31 - 1
LONG_LENGTH_MARKER = -1

# Struct formats: "=" is host byte order with standard sizes, never swapped
INT_STRUCT = struct.Struct("=i")
UINT_STRUCT = struct.Struct("=I")
DOUBLE_STRUCT = struct.Struct("=d")
NA_REAL_STRUCT = struct.Struct("=Q")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

