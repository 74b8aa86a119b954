from .assemble import assemble, format_output
from .models import Diagnostics, ExtractionResult, Row, TokenMatch
from .parser import extract_identifiers, extract_times, find_identifiers, find_times

__all__ = [
    "Diagnostics",
    "ExtractionResult",
    "Row",
    "TokenMatch",
    "assemble",
    "extract_identifiers",
    "extract_times",
    "find_identifiers",
    "find_times",
    "format_output",
]
