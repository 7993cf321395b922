"""LawScanner document analysis pipeline.

Extracts text and entities from scanned legal documents through a
pluggable OCR provider (Google Document AI or AWS Textract) and turns
them into a validated semantic summary with Google Gemini.
"""

__version__ = "1.0.0"
