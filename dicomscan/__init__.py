"""Read DICOM files: detect the preamble, find tags, decode their values and list elements."""

__version__ = "0.1.0"
__all__ = ["__version__"]