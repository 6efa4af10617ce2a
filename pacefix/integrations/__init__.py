"""FIT codec boundary: decoding with fitparse, encoding with fit-tool."""

from .fit_parser import FITParser
from .fit_writer import FITWriter

__all__ = ["FITParser", "FITWriter"]
