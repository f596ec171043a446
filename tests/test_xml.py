import struct

from tdsvalues.xml import XmlData, XmlSchema

UNKNOWN = struct.pack("<Q", 0xFFFFFFFFFFFFFFFE)


def test_encode_empty():
    assert XmlData("").encode() == UNKNOWN + b"\x00" * 8


def test_encode_layout():
    text = "<root><child attr=\"attr-value\"/></root>"
    encoded = XmlData(text).encode()
    assert encoded[:8] == UNKNOWN
    (length,) = struct.unpack("<I", encoded[8:12])
    payload = encoded[12 : 12 + length]
    assert payload.decode("utf-16-le") == text
    assert encoded[12 + length :] == b"\x00\x00\x00\x00"
    assert len(encoded) == 16 + length


def test_encode_counts_surrogate_pairs():
    encoded = XmlData("😀").encode()
    assert struct.unpack("<I", encoded[8:12])[0] == 4


def test_str_and_equality():
    xml = XmlData("<foo>lol</foo>")
    assert str(xml) == "<foo>lol</foo>"
    assert xml == XmlData("<foo>lol</foo>")
    assert xml.schema is None


def test_with_schema_returns_copy():
    xml = XmlData("<foo>lol</foo>")
    schema = XmlSchema("db", "dbo", "things")
    bound = xml.with_schema(schema)
    assert bound.schema == schema
    assert bound.data == xml.data
    assert xml.schema is None
    assert bound != xml