# dicomscan

A small reader for DICOM files with no dependencies. It walks the explicit-VR
little-endian data elements of a file and can:

- tell whether a file has the 128-byte preamble followed by the `DICM` marker,
- check whether a tag is present, looked up by `(group, element)` or by keyword,
- decode the value of a tag (integers, floats, text, tag references and binary data),
- list every element with its VR, keyword and decoded value.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Command line

```
dicomscan path/to/image.dcm
```

`python -m dicomscan.cli path/to/image.dcm` does the same.

The command prints whether the Modality `(0008,0060)` tag and the
TransferSyntaxUID tag are present (`1` or `0`) and shows their values. It then
lists every element in the file, one per line:

```
is exist tag: 1
value: CT
is exist tag: 1
value: 1.2.840.10008.1.2.1
(0x0002, 0x0010) UI TransferSyntaxUID : 1.2.840.10008.1.2.1
(0x0008, 0x0060) CS Modality : CT
```

If the file cannot be read or an element header is cut short, the command
prints the error to standard error and exits with status 1.

## Library use

```python
from dicomscan.dicom import Dicom

dcm = Dicom()

dcm.is_dicom("image.dcm")                       # True when the DICM marker is present
dcm.find_tag("image.dcm", (0x0028, 0x0010))     # look up by group and element
dcm.find_tag("image.dcm", "TransferSyntaxUID")  # or by keyword

value = dcm.get_value("image.dcm", "Rows")
print(value)                                    # e.g. "512"
print(dcm.tag_name(0x0010, 0x0010))             # "PatientName"; unknown tags give "Unknown"

lines = dcm.format_tags("image.dcm")            # the listing as a list of strings
dcm.print("image.dcm")                          # write the listing to stdout
```

`Dicom` also holds `tag_dictionary` (keyword to `TagDefinition`),
`tag_lookup` (`(group, element)` to keyword) and `transfer_syntax_dictionary`
(UID to `TransferSyntax`). `resolve` turns a keyword or a `(group, element)`
pair into a pair, raising `DicomError` for an unknown keyword and
`ValueError`/`TypeError` for a malformed pair.

`get_value` returns a `DicomValue` (from `dicomscan.value`), which has a
`kind` (a `ValueKind`) and a `value`. A tag that is absent, or whose VR is not
decoded, gives an empty value: `is_empty()` is true and it prints as `Empty`.
Floats print with six decimals, binary values print as
`Binary data, length: N`, and an `AT` value prints as its group and element in
decimal, e.g. `40, 16`. `SS` values are reported as their unsigned 16-bit
pattern. Unknown keywords, files that cannot be opened or are empty, and
values that run past the end of the data raise `DicomError`.

Lower-level helpers in `dicomscan.dicom` work on raw bytes: `load_file`,
`has_preamble`, `read_tag`, `iter_tags` and `decode_value`.

## Limits

- Only explicit-VR little-endian encoding is read. The transfer syntax table
  is available for lookup but is not used to choose how a file is decoded.
- Sequences are not descended into, and pixel data, compressed or not, is
  returned as raw bytes; no images are decoded.
- Files are only read, never written or changed.
- There is no network support: files cannot be sent to or fetched from other
  DICOM systems.