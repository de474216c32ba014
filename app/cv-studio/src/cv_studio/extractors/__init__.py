"""Document payload helpers."""

from .pdf_extractor import DataURI, extract_text_from_pdf, parse_data_uri, to_data_uri

__all__ = ["DataURI", "parse_data_uri", "to_data_uri", "extract_text_from_pdf"]
