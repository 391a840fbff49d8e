"""Minimal ABI helpers for the uint values the reveal proof carries.

abi.encode(uint256, ...) packs each value as a 32-byte big-endian word.
"""

_WORD_BYTES = 32


def encode_uints(values: list[int]) -> str:
    """Encode non-negative ints as a 0x-prefixed ABI word sequence."""
    out = bytearray()
    for v in values:
        if v < 0 or v >= 1 << (_WORD_BYTES * 8):
            raise ValueError(f"uint256 out of range: {v}")
        out += v.to_bytes(_WORD_BYTES, "big")
    return "0x" + out.hex()


def decode_uints(encoded: str) -> list[int]:
    raw = bytes.fromhex(encoded.removeprefix("0x"))
    if len(raw) % _WORD_BYTES:
        raise ValueError(f"ABI payload length {len(raw)} is not a multiple of {_WORD_BYTES}")
    return [
        int.from_bytes(raw[i : i + _WORD_BYTES], "big")
        for i in range(0, len(raw), _WORD_BYTES)
    ]
