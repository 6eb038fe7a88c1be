from .llm_service import LLMService
from .metadata_extractor import MetadataExtractor
from .sop_generator import SOPGenerator

__all__ = ["LLMService", "MetadataExtractor", "SOPGenerator"]
