import pytest

from tex_sync.core.exceptions import EncodingError
from tex_sync.synctex import encoding


class TestDecode:
    def test_ascii_is_unchanged(self):
        assert encoding.decode(b"Input:1:./main.tex") == "Input:1:./main.tex"

    def test_high_bytes_map_to_private_use_area(self):
        assert encoding.decode(b"\x80") == "\uf780"
        assert encoding.decode(b"\xff") == "\uf7ff"
        assert encoding.decode(b"caf\xc3\xa9") == "caf\uf7c3\uf7a9"

    def test_length_is_preserved(self):
        data = bytes(range(256))
        assert len(encoding.decode(data)) == 256


class TestEncode:
    def test_round_trip_every_byte(self):
        data = bytes(range(256))
        assert encoding.encode(encoding.decode(data)) == data

    def test_round_trip_utf8_text(self):
        data = "/home/user/論文/résumé.tex".encode("utf-8")
        assert encoding.encode(encoding.decode(data)) == data

    def test_round_trip_empty(self):
        assert encoding.encode(encoding.decode(b"")) == b""

    def test_rejects_code_point_outside_ranges(self):
        with pytest.raises(EncodingError) as exc_info:
            encoding.encode("abcé")
        assert exc_info.value.code_point == 0xE9
        assert exc_info.value.index == 3

    def test_rejects_code_point_after_private_range(self):
        with pytest.raises(EncodingError):
            encoding.encode("\uf800")

    def test_encoding_error_is_value_error(self):
        with pytest.raises(ValueError):
            encoding.encode("論")
