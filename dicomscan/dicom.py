"""Reading data elements out of DICOM files."""

from __future__ import annotations

import struct
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO, Tuple, Union

from dicomscan.value import DicomValue, ValueKind

TagKey = Tuple[int, int]
TagRef = Union[str, TagKey]

PREAMBLE_LENGTH = 128
MAGIC = b"DICM"

# VRs whose explicit header has two reserved bytes and a four-byte length.
_LONG_LENGTH_VRS = frozenset({"OB", "OW", "OF", "SQ", "UT", "UN"})
_SHORT_LENGTH_VRS = frozenset(
    {
        "AE", "AS", "AT", "CS", "DA", "DS", "DT", "FL", "FD", "IS", "LO",
        "LT", "PN", "SH", "SL", "SS", "ST", "TM", "UI", "UL", "US",
    }
)
_STRING_VRS = frozenset({"ST", "LT", "UT", "PN", "LO", "CS", "UI", "DA", "TM"})
_BINARY_VRS = frozenset({"OB", "OW", "OF", "UN"})


class DicomError(Exception):
    """Raised when a file cannot be read or a tag cannot be resolved."""


@dataclass(frozen=True)
class TagDefinition:
    """A dictionary entry naming a (group, element) pair."""

    group: int
    element: int
    name: str
    vr: str


@dataclass(frozen=True)
class TransferSyntax:
    """Properties of a transfer syntax UID."""

    name: str
    is_explicit_vr: bool
    is_little_endian: bool
    is_compressed: bool
    compression_type: str


@dataclass(frozen=True)
class TagInfo:
    """The header of one data element and where its value starts."""

    group: int
    element: int
    vr: str
    length: int
    value_offset: int

    @property
    def key(self) -> TagKey:
        return (self.group, self.element)

    @property
    def next_offset(self) -> int:
        return self.value_offset + self.length


_TAG_DEFINITIONS = (
    TagDefinition(0x0002, 0x0000, "FileMetaInformationGroupLength", "UL"),
    TagDefinition(0x0002, 0x0001, "FileMetaInformationVersion", "OB"),
    TagDefinition(0x0002, 0x0002, "MediaStorageSOPClassUID", "UI"),
    TagDefinition(0x0002, 0x0003, "MediaStorageSOPInstanceUID", "UI"),
    TagDefinition(0x0002, 0x0010, "TransferSyntaxUID", "UI"),
    TagDefinition(0x0002, 0x0012, "ImplementationClassUID", "UI"),
    TagDefinition(0x0002, 0x0013, "ImplementationVersionName", "SH"),
    TagDefinition(0x0002, 0x0016, "SourceApplicationEntityTitle", "AE"),
    TagDefinition(0x0002, 0x0017, "SendingApplicationEntityTitle", "AE"),
    TagDefinition(0x0002, 0x0018, "ReceivingApplicationEntityTitle", "AE"),
    TagDefinition(0x0002, 0x0100, "PrivateInformationCreatorUID", "UI"),
    TagDefinition(0x0002, 0x0102, "PrivateInformation", "OB"),
    TagDefinition(0x0008, 0x0020, "StudyDate", "DA"),
    TagDefinition(0x0008, 0x0030, "StudyTime", "TM"),
    TagDefinition(0x0008, 0x0060, "Modality", "CS"),
    TagDefinition(0x0008, 0x0016, "SOPClassUID", "UI"),
    TagDefinition(0x0008, 0x0018, "SOPInstanceUID", "UI"),
    TagDefinition(0x0010, 0x0010, "PatientName", "PN"),
    TagDefinition(0x0010, 0x0020, "PatientID", "LO"),
    TagDefinition(0x0010, 0x0030, "PatientBirthDate", "DA"),
    TagDefinition(0x0010, 0x0040, "PatientSex", "CS"),
    TagDefinition(0x0020, 0x000D, "StudyInstanceUID", "UI"),
    TagDefinition(0x0020, 0x000E, "SeriesInstanceUID", "UI"),
    TagDefinition(0x0028, 0x0010, "Rows", "US"),
    TagDefinition(0x0028, 0x0011, "Columns", "US"),
    TagDefinition(0x0028, 0x0100, "BitsAllocated", "US"),
    TagDefinition(0x0028, 0x0101, "BitsStored", "US"),
    TagDefinition(0x0028, 0x0102, "HighBit", "US"),
    TagDefinition(0x0028, 0x0103, "PixelRepresentation", "US"),
    TagDefinition(0x7FE0, 0x0010, "PixelData", "OW"),
)

_TRANSFER_SYNTAXES = {
    "1.2.840.10008.1.2": TransferSyntax("Implicit VR Endian", False, True, False, ""),
    "1.2.840.10008.1.2.1": TransferSyntax("Explicit VR Little Endian", True, True, False, ""),
    "1.2.840.10008.1.2.2": TransferSyntax("Explicit VR Big Endian", True, False, False, ""),
    "1.2.840.10008.1.2.1.99": TransferSyntax(
        "Deflated Explicit VR Little Endian", True, True, False, ""
    ),
    "1.2.840.10008.1.2.4.50": TransferSyntax("JPEG Baseline (Process 1)", True, True, True, "JPEG"),
    "1.2.840.10008.1.2.4.51": TransferSyntax(
        "JPEG Baseline (Process 2 & 4))", True, True, True, "JPEG"
    ),
    "1.2.840.10008.1.2.4.57": TransferSyntax(
        "JPEG Lossless, Nonhierarchical (Processes 14)", True, True, True, "JPEG Loseless"
    ),
    "1.2.840.10008.1.2.4.70": TransferSyntax(
        "JPEG Lossless, Nonhierarchical, First- Order Prediction",
        True,
        True,
        True,
        "JPEG Loseless",
    ),
    "1.2.840.10008.1.2.4.80": TransferSyntax("JPEG-LS Lossless", True, True, True, "JPEG-LS"),
    "1.2.840.10008.1.2.4.81": TransferSyntax("JPEG-LS Lossy", True, True, True, "JPEG-LS"),
    "1.2.840.10008.1.2.4.90": TransferSyntax(
        "JPEG 2000 (Lossless Only)", True, True, True, "JPEG 2000"
    ),
    "1.2.840.10008.1.2.4.91": TransferSyntax("JPEG 2000", True, True, True, "JPEG 2000"),
    "1.2.840.10008.1.2.5": TransferSyntax("RLE Lossless", True, True, True, "RLE"),
}


def load_file(file_path) -> bytes:
    """Return the whole content of a file; an unreadable or empty file is an error."""
    try:
        with open(file_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise DicomError(f"Error opening file: {file_path}") from exc
    if not data:
        raise DicomError(f"Error loading file: {file_path}")
    return data


def has_preamble(data: bytes) -> bool:
    """True when the 128-byte preamble is followed by the DICM marker."""
    return data[PREAMBLE_LENGTH:PREAMBLE_LENGTH + len(MAGIC)] == MAGIC


def read_tag(data: bytes, offset: int) -> TagInfo:
    """Read the explicit-VR little-endian element header at ``offset``."""
    if offset < 0 or offset + 8 > len(data):
        raise DicomError(f"truncated element header at offset {offset}")
    group, element = struct.unpack_from("<HH", data, offset)
    vr = data[offset + 4:offset + 6].decode("latin-1")
    if vr in _LONG_LENGTH_VRS:
        if offset + 12 > len(data):
            raise DicomError(f"truncated element header at offset {offset}")
        (length,) = struct.unpack_from("<I", data, offset + 8)
        value_offset = offset + 12
    else:
        length = struct.unpack_from("<H", data, offset + 6)[0] if vr in _SHORT_LENGTH_VRS else 0
        value_offset = offset + 8
    return TagInfo(group, element, vr, length, value_offset)


def iter_tags(data: bytes) -> Iterator[TagInfo]:
    """Yield every element header in order, skipping the preamble if present."""
    offset = PREAMBLE_LENGTH + len(MAGIC) if has_preamble(data) else 0
    while offset < len(data):
        tag = read_tag(data, offset)
        yield tag
        offset = tag.next_offset


def _unpack(fmt: str, data: bytes, tag: TagInfo):
    try:
        return struct.unpack_from(fmt, data, tag.value_offset)
    except struct.error as exc:
        raise DicomError(
            f"value of ({tag.group:04x},{tag.element:04x}) runs past the end of the data"
        ) from exc


def _raw_value(tag: TagInfo, data: bytes) -> bytes:
    if tag.next_offset > len(data):
        raise DicomError(
            f"value of ({tag.group:04x},{tag.element:04x}) runs past the end of the data"
        )
    return data[tag.value_offset:tag.next_offset]


def decode_value(tag: TagInfo, data: bytes) -> DicomValue:
    """Decode the value of ``tag`` according to its VR; unhandled VRs give an empty value."""
    vr = tag.vr
    if vr in ("US", "SS"):
        # SS values are reported with their raw unsigned 16-bit pattern.
        (number,) = _unpack("<H", data, tag)
        return DicomValue(ValueKind.UINT16, number)
    if vr == "UL":
        (number,) = _unpack("<I", data, tag)
        return DicomValue(ValueKind.UINT32, number)
    if vr == "SL":
        (number,) = _unpack("<i", data, tag)
        return DicomValue(ValueKind.INT32, number)
    if vr == "FL":
        (number,) = _unpack("<f", data, tag)
        return DicomValue(ValueKind.FLOAT, number)
    if vr == "FD":
        (number,) = _unpack("<d", data, tag)
        return DicomValue(ValueKind.DOUBLE, number)
    if vr in _STRING_VRS:
        return DicomValue(ValueKind.STRING, _raw_value(tag, data).decode("latin-1"))
    if vr == "AT":
        group, element = _unpack("<HH", data, tag)
        return DicomValue(ValueKind.STRING, f"{group}, {element}")
    if vr in _BINARY_VRS:
        return DicomValue(ValueKind.BINARY, _raw_value(tag, data))
    return DicomValue.empty()


class Dicom:
    """Tag and transfer-syntax dictionaries plus file-level queries."""

    def __init__(self) -> None:
        self.preamble = False
        self.tag_dictionary = {entry.name: entry for entry in _TAG_DEFINITIONS}
        self.tag_lookup = {
            (entry.group, entry.element): name for name, entry in self.tag_dictionary.items()
        }
        self.transfer_syntax_dictionary = dict(_TRANSFER_SYNTAXES)

    def tag_name(self, group: int, element: int) -> str:
        """Dictionary name of a tag, or "Unknown"."""
        return self.tag_lookup.get((group, element), "Unknown")

    def resolve(self, tag: TagRef) -> TagKey:
        """Turn a tag name or a (group, element) pair into a (group, element) pair."""
        if isinstance(tag, str):
            entry = self.tag_dictionary.get(tag)
            if entry is None:
                raise DicomError(f"Invalid tag name: {tag}")
            return (entry.group, entry.element)
        try:
            group, element = tag
        except (TypeError, ValueError) as exc:
            raise TypeError("tag must be a name or a (group, element) pair") from exc
        for part in (group, element):
            if isinstance(part, bool) or not isinstance(part, int) or not 0 <= part <= 0xFFFF:
                raise ValueError(f"invalid tag component: {part!r}")
        return (group, element)

    def _load(self, file_path) -> bytes:
        data = load_file(file_path)
        self.preamble = has_preamble(data)
        return data

    def is_dicom(self, file_path) -> bool:
        """True when the file carries the DICM marker after its preamble."""
        return self._load(file_path) and self.preamble

    def _find(self, data: bytes, key: TagKey) -> TagInfo | None:
        return next((tag for tag in iter_tags(data) if tag.key == key), None)

    def find_tag(self, file_path, tag: TagRef) -> bool:
        """True when the file holds the given tag."""
        key = self.resolve(tag)
        data = self._load(file_path)
        return self._find(data, key) is not None

    def get_value(self, file_path, tag: TagRef) -> DicomValue:
        """Decoded value of the given tag, or an empty value when it is absent."""
        key = self.resolve(tag)
        data = self._load(file_path)
        found = self._find(data, key)
        return DicomValue.empty() if found is None else decode_value(found, data)

    def format_tags(self, file_path) -> list[str]:
        """One line per element: tag, VR, dictionary name and decoded value."""
        data = self._load(file_path)
        return [
            f"(0x{tag.group:04x}, 0x{tag.element:04x}) {tag.vr} "
            f"{self.tag_name(tag.group, tag.element)} : {decode_value(tag, data)}"
            for tag in iter_tags(data)
        ]

    def print(self, file_path, file: TextIO | None = None) -> None:
        """Write the lines of :meth:`format_tags` to ``file`` (stdout by default)."""
        out = sys.stdout if file is None else file
        for line in self.format_tags(file_path):
            print(line, file=out)