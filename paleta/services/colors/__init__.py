"""
Paleta Colors Module

Provides dominant color extraction, harmony ring generation, palette
assembly and export for decoded images. Includes strided sampling,
distinct-centroid k-means and a minimum separation pass.
"""

__version__ = "1.0.0"
