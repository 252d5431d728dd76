"""Top-level package for the PDF Compressor web tool.

This package contains:
- the preset catalog and the compression pipeline (pikepdf re-serialization);
- the per-browser session state machine and its in-memory registry;
- small utilities (settings, logging setup).

The HTTP surface lives in the separate ``web`` package.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
