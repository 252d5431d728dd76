"""FastAPI surface for the PDF compressor."""
