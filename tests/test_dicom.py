import io
import struct

import pytest

from dicomscan.dicom import (
    Dicom,
    DicomError,
    TagInfo,
    decode_value,
    has_preamble,
    iter_tags,
    load_file,
    read_tag,
)
from dicomscan.value import ValueKind

LONG = {"OB", "OW", "OF", "SQ", "UT", "UN"}


def element(group, element_no, vr, value):
    head = struct.pack("<HH", group, element_no) + vr.encode("ascii")
    if vr in LONG:
        head += b"\0\0" + struct.pack("<I", len(value))
    else:
        head += struct.pack("<H", len(value))
    return head + value


def with_preamble(body):
    return b"\0" * 128 + b"DICM" + body


SAMPLE = with_preamble(
    element(0x0002, 0x0010, "UI", b"1.2.840.10008.1.2.1")
    + element(0x0008, 0x0060, "CS", b"CT")
    + element(0x0028, 0x0010, "US", struct.pack("<H", 512))
)


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.dcm"
    path.write_bytes(SAMPLE)
    return path


def test_has_preamble():
    assert has_preamble(SAMPLE) is True
    assert has_preamble(b"\0" * 132) is False
    assert has_preamble(b"DICM") is False


def test_read_tag_short_length():
    data = element(0x0008, 0x0060, "CS", b"MR")
    tag = read_tag(data, 0)
    assert tag == TagInfo(0x0008, 0x0060, "CS", 2, 8)
    assert tag.next_offset == len(data)


def test_read_tag_long_length():
    data = element(0x7FE0, 0x0010, "OW", b"\x01\x02\x03\x04")
    tag = read_tag(data, 0)
    assert tag.vr == "OW"
    assert tag.length == 4
    assert tag.value_offset == 12


def test_read_tag_unknown_vr_has_zero_length():
    data = struct.pack("<HH", 0x0009, 0x0001) + b"ZZ" + b"\x05\x00"
    tag = read_tag(data, 0)
    assert tag.length == 0
    assert tag.value_offset == 8


def test_read_tag_truncated():
    with pytest.raises(DicomError):
        read_tag(b"\x08\x00\x60\x00CS", 0)


def test_iter_tags_skips_preamble():
    tags = list(iter_tags(SAMPLE))
    assert [t.key for t in tags] == [(0x0002, 0x0010), (0x0008, 0x0060), (0x0028, 0x0010)]
    assert tags[0].value_offset == 132 + 8


def test_iter_tags_without_preamble():
    body = element(0x0008, 0x0060, "CS", b"CT")
    assert [t.key for t in iter_tags(body)] == [(0x0008, 0x0060)]


@pytest.mark.parametrize(
    "vr, raw, kind, expected",
    [
        ("US", struct.pack("<H", 512), ValueKind.UINT16, 512),
        ("SS", struct.pack("<h", -1), ValueKind.UINT16, 0xFFFF),
        ("UL", struct.pack("<I", 70000), ValueKind.UINT32, 70000),
        ("SL", struct.pack("<i", -42), ValueKind.INT32, -42),
        ("FL", struct.pack("<f", 1.5), ValueKind.FLOAT, 1.5),
        ("FD", struct.pack("<d", 2.25), ValueKind.DOUBLE, 2.25),
        ("PN", b"Doe^John", ValueKind.STRING, "Doe^John"),
        ("OB", b"\x00\x01", ValueKind.BINARY, b"\x00\x01"),
    ],
)
def test_decode_value(vr, raw, kind, expected):
    data = element(0x0011, 0x0001, vr, raw)
    value = decode_value(read_tag(data, 0), data)
    assert value.kind is kind
    assert value.value == expected


def test_decode_attribute_tag():
    data = element(0x0020, 0x5000, "AT", struct.pack("<HH", 0x0010, 0x0020))
    assert str(decode_value(read_tag(data, 0), data)) == "16, 32"


def test_decode_unhandled_vr_is_empty():
    data = element(0x0008, 0x1140, "SQ", b"")
    assert decode_value(read_tag(data, 0), data).is_empty()


def test_decode_past_end_raises():
    data = element(0x0010, 0x0010, "PN", b"Doe^John")[:-3]
    with pytest.raises(DicomError):
        decode_value(read_tag(data, 0), data)


def test_load_file_errors(tmp_path):
    with pytest.raises(DicomError):
        load_file(tmp_path / "missing.dcm")
    empty = tmp_path / "empty.dcm"
    empty.write_bytes(b"")
    with pytest.raises(DicomError):
        load_file(empty)


def test_load_file_reads_bytes(sample_file):
    assert load_file(sample_file) == SAMPLE


def test_tag_name():
    dcm = Dicom()
    assert dcm.tag_name(0x0002, 0x0010) == "TransferSyntaxUID"
    assert dcm.tag_name(0x1234, 0x5678) == "Unknown"


def test_dictionaries_are_consistent():
    dcm = Dicom()
    for name, entry in dcm.tag_dictionary.items():
        assert dcm.tag_lookup[(entry.group, entry.element)] == name
    syntax = dcm.transfer_syntax_dictionary["1.2.840.10008.1.2.2"]
    assert syntax.is_explicit_vr is True
    assert syntax.is_little_endian is False


def test_resolve():
    dcm = Dicom()
    assert dcm.resolve("TransferSyntaxUID") == (0x0002, 0x0010)
    assert dcm.resolve((0x0008, 0x0060)) == (0x0008, 0x0060)
    with pytest.raises(DicomError):
        dcm.resolve("NoSuchTag")
    with pytest.raises(ValueError):
        dcm.resolve((0x10000, 0))


def test_is_dicom(sample_file, tmp_path):
    dcm = Dicom()
    assert dcm.is_dicom(sample_file) is True
    assert dcm.preamble is True
    plain = tmp_path / "plain.dcm"
    plain.write_bytes(element(0x0008, 0x0060, "CS", b"CT"))
    assert dcm.is_dicom(plain) is False
    assert dcm.preamble is False


def test_find_tag(sample_file):
    dcm = Dicom()
    assert dcm.find_tag(sample_file, (0x0008, 0x0060)) is True
    assert dcm.find_tag(sample_file, "Rows") is True
    assert dcm.find_tag(sample_file, "PatientName") is False
    with pytest.raises(DicomError):
        dcm.find_tag(sample_file, "Bogus")


def test_get_value(sample_file):
    dcm = Dicom()
    assert dcm.get_value(sample_file, (0x0008, 0x0060)).value == "CT"
    assert dcm.get_value(sample_file, "TransferSyntaxUID").value == "1.2.840.10008.1.2.1"
    assert dcm.get_value(sample_file, "Rows").value == 512
    assert dcm.get_value(sample_file, "PatientID").is_empty()


def test_format_tags(sample_file):
    lines = Dicom().format_tags(sample_file)
    assert len(lines) == 3
    assert lines[1] == "(0x0008, 0x0060) CS Modality : CT"
    assert lines[2].endswith(": 512")


def test_print_writes_lines(sample_file):
    dcm = Dicom()
    out = io.StringIO()
    dcm.print(sample_file, out)
    assert out.getvalue().splitlines() == dcm.format_tags(sample_file)