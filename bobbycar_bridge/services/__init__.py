from .decoder import RecordDecoder
from .line_protocol import encode_record
from .translator import BatchTranslator, TranslationResult
from .writer import LineProtocolWriter

__all__ = ["RecordDecoder", "encode_record", "BatchTranslator", "TranslationResult", "LineProtocolWriter"]
