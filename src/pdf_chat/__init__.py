"""pdf_chat — retrieval-augmented chat over an uploaded PDF."""

__version__ = "0.1.0"
