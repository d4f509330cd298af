from .classification_parser import decode_classification, extract_json_object, parse_classification_text

__all__ = ["decode_classification", "extract_json_object", "parse_classification_text"]
