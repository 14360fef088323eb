import binascii
import functools

from Crypto.Hash import keccak


def keccak256(x: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=x).digest()


# Converts four bytes to an integer
def fourbytes_to_int(inp):
    return (inp[0] << 24) + (inp[1] << 16) + (inp[2] << 8) + inp[3]


# Converts an integer to four bytes
def int_to_fourbytes(n: int) -> bytes:
    assert 0 <= n < 2**32
    return n.to_bytes(4, byteorder="big")


# converts a signature like transfer(address,uint256) to its 4 byte method ID
@functools.lru_cache(maxsize=1024)
def method_id(method_str: str) -> bytes:
    return keccak256(bytes(method_str, "utf-8"))[:4]


def method_id_int(method_sig: str) -> int:
    method_id_bytes = method_id(method_sig)
    return fourbytes_to_int(method_id_bytes)


# 0x-prefixed, zero padded, lowercase: the form selectors take in Yul
def method_id_hex(method_id: int) -> str:
    return "0x" + int_to_fourbytes(method_id).hex()


# Converts bytes to an integer
def bytes_to_int(bytez):
    o = 0
    for b in bytez:
        o = o * 256 + b
    return o


def is_hex_address(addr) -> bool:
    if not isinstance(addr, str) or addr[:2] != "0x" or len(addr) != 42:
        return False
    try:
        binascii.unhexlify(addr[2:])
    except (binascii.Error, ValueError):
        return False
    return True


def is_checksum_encoded(addr):
    return addr == checksum_encode(addr)


# Encodes an address using ethereum's checksum scheme
def checksum_encode(addr):  # Expects an input of the form 0x<40 hex chars>
    assert addr[:2] == "0x" and len(addr) == 42, addr
    o = ""
    v = bytes_to_int(keccak256(addr[2:].lower().encode("utf-8")))
    for i, c in enumerate(addr[2:]):
        if c in "0123456789":
            o += c
        else:
            o += c.upper() if (v & (2 ** (255 - 4 * i))) else c.lower()
    return "0x" + o
