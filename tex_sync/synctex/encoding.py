"""
x-user-defined pass-through text encoding.

SyncTeX files are decoded with this encoding so that every byte survives
string processing: ``0x00-0x7F`` map to themselves and ``0x80-0xFF`` map to
the private-use code points ``U+F780-U+F7FF``.
See https://encoding.spec.whatwg.org/#x-user-defined
"""

from tex_sync.core.exceptions import EncodingError

_HIGH_BASE = 0xF780

_DECODE_TABLE = {byte: _HIGH_BASE + byte - 0x80 for byte in range(0x80, 0x100)}
_ENCODE_TABLE = {code: byte for byte, code in _DECODE_TABLE.items()}


def decode(data: bytes) -> str:
    # latin-1 maps every byte to the code point of the same value.
    return data.decode("latin-1").translate(_DECODE_TABLE)


def encode(text: str) -> bytes:
    for index, char in enumerate(text):
        code = ord(char)
        if code >= 0x80 and not (_HIGH_BASE <= code <= 0xF7FF):
            raise EncodingError(code, index)
    return text.translate(_ENCODE_TABLE).encode("latin-1")
