"""
Spectral fingerprinting of logical graphs.
"""

from protein_hash.spectral.analyzer import (
    FORMAT_VERSION,
    Fingerprint,
    SpectralAnalyzer,
    format_phash,
    parse_phash,
    spectral_distance,
)

__all__ = [
    "FORMAT_VERSION",
    "Fingerprint",
    "SpectralAnalyzer",
    "format_phash",
    "parse_phash",
    "spectral_distance",
]
