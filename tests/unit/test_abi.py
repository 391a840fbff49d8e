"""Tests for the uint ABI helpers used by reveal proofs."""
import pytest

from src.dp_ledger.domain.abi import decode_uints, encode_uints


class TestAbi:
    def test_single_word_layout(self) -> None:
        encoded = encode_uints([5])
        assert encoded == "0x" + "0" * 63 + "5"

    def test_multiple_values(self) -> None:
        assert decode_uints(encode_uints([1, 2**32 - 1, 0])) == [1, 2**32 - 1, 0]

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            encode_uints([-1])

    def test_truncated_payload_rejected(self) -> None:
        with pytest.raises(ValueError):
            decode_uints("0x" + "00" * 31)
