"""
Image Compressor: upload, compress and automatic retention of uploaded images.
"""

__version__ = "1.0.0"
