"""Tests for the vint codec and the minimal transducer."""

import pytest

from synonym_graph import BuildError, DictionaryLoadError, Transducer, TransducerBuilder
from synonym_graph.codec import decode_ids, encode_ids, read_vint, write_vint


class TestCodec:
    """Variable-length integer lists."""

    @pytest.mark.parametrize("value,encoded", [
        (0, b"\x00"),
        (127, b"\x7f"),
        (128, b"\x80\x01"),
        (300, b"\xac\x02"),
    ])
    def test_vint(self, value, encoded):
        out = bytearray()
        write_vint(value, out)
        assert bytes(out) == encoded
        assert read_vint(encoded) == (value, len(encoded))

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            write_vint(-1, bytearray())

    def test_id_list_layout(self):
        # header is count << 1, then one vint per id
        assert encode_ids([5, 300]) == b"\x04\x05\xac\x02"
        assert decode_ids(b"\x04\x05\xac\x02") == [5, 300]

    def test_empty_id_list(self):
        assert decode_ids(encode_ids([])) == []

    def test_truncated(self):
        with pytest.raises(ValueError):
            decode_ids(b"\x04\x05")
        with pytest.raises(ValueError):
            read_vint(b"\x80")

    def test_trailing_bytes(self):
        with pytest.raises(ValueError):
            decode_ids(b"\x02\x05\x06")


class TestBuilder:
    """Building the sorted-key transducer."""

    def test_empty_returns_none(self):
        assert TransducerBuilder().finish() is None

    def test_lookup(self):
        b = TransducerBuilder()
        b.add("a", b"1")
        b.add("ab", b"2")
        b.add("b", b"3")
        fst = b.finish()
        assert fst.get("a") == b"1"
        assert fst.get("ab") == b"2"
        assert fst.get("b") == b"3"
        assert fst.get("abc") is None
        assert fst.get("") is None
        assert "ab" in fst
        assert "c" not in fst
        assert len(fst) == 3

    def test_out_of_order_key(self):
        b = TransducerBuilder()
        b.add("b", b"1")
        with pytest.raises(BuildError):
            b.add("a", b"2")

    def test_duplicate_key(self):
        b = TransducerBuilder()
        b.add("a", b"1")
        with pytest.raises(BuildError):
            b.add("a", b"1")

    def test_empty_key(self):
        with pytest.raises(BuildError):
            TransducerBuilder().add("", b"1")

    def test_shared_suffixes_are_merged(self):
        b = TransducerBuilder()
        b.add("bat", b"x")
        b.add("cat", b"x")
        assert b.finish().num_states == 4

    def test_different_outputs_are_not_merged(self):
        b = TransducerBuilder()
        b.add("bat", b"x")
        b.add("cat", b"y")
        fst = b.finish()
        assert fst.num_states == 7
        assert fst.get("bat") == b"x"
        assert fst.get("cat") == b"y"

    def test_items_in_key_order(self):
        pairs = [("a", b"1"), ("ab", b"2"), ("b", b"3"), ("総理", b"4")]
        b = TransducerBuilder()
        for key, out in pairs:
            b.add(key, out)
        assert list(b.finish().items()) == pairs


class TestByteForm:
    """Serialized transducer bytes."""

    def _fst(self):
        b = TransducerBuilder()
        for key in ["a", "ab", "abc", "abcdefgh", "首相"]:
            b.add(key, encode_ids([len(key), 1]))
        return b.finish()

    def test_round_trip(self):
        fst = self._fst()
        restored = Transducer.from_bytes(fst.to_bytes())
        assert list(restored.items()) == list(fst.items())
        assert restored.num_states == fst.num_states
        assert len(restored) == len(fst)

    def test_truncated_data(self):
        data = self._fst().to_bytes()
        with pytest.raises(DictionaryLoadError):
            Transducer.from_bytes(data[:-3])

    def test_trailing_data(self):
        data = self._fst().to_bytes()
        with pytest.raises(DictionaryLoadError):
            Transducer.from_bytes(data + b"\x00")
