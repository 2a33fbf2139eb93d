"""Command-line entry point: report a few tags and dump a DICOM file."""

from __future__ import annotations

import argparse
import sys

from dicomscan.dicom import Dicom, DicomError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="dicomscan", description="Show tags and values of a DICOM file."
    )
    parser.add_argument("file", help="path of the DICOM file")
    args = parser.parse_args(argv)

    dcm = Dicom()
    try:
        print(f"is exist tag: {int(dcm.find_tag(args.file, (0x0008, 0x0060)))}")
        print(f"value: {dcm.get_value(args.file, (0x0008, 0x0060))}")
        print(f"is exist tag: {int(dcm.find_tag(args.file, 'TransferSyntaxUID'))}")
        print(f"value: {dcm.get_value(args.file, 'TransferSyntaxUID')}")
        dcm.print(args.file)
    except DicomError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())