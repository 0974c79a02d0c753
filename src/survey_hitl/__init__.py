from .config import Settings, load_settings
from .utils import configure_logging
from .vocabulary import Vocabulary, load_vocabulary
from .normalize import normalize_ocr_text
from .marks import has_mark_near
from .parser import parse_survey_text
from .postal import PostalAddress, PostalLookup, ZipcloudClient, complete_address
from .record import EngineResult, ExtractionOutcome, ExtractionRecord, MergedResult
from .merge import merge_engine_results
from .confidence import blended_confidence, completeness_score
from .hitl import build_warnings
from .pipeline import RecognitionEngine, RecognitionPass, extract_survey, recognize_and_extract

__all__ = [
    "Settings",
    "load_settings",
    "configure_logging",
    "Vocabulary",
    "load_vocabulary",
    "normalize_ocr_text",
    "has_mark_near",
    "parse_survey_text",
    "PostalAddress",
    "PostalLookup",
    "ZipcloudClient",
    "complete_address",
    "EngineResult",
    "ExtractionOutcome",
    "ExtractionRecord",
    "MergedResult",
    "merge_engine_results",
    "blended_confidence",
    "completeness_score",
    "build_warnings",
    "RecognitionEngine",
    "RecognitionPass",
    "extract_survey",
    "recognize_and_extract",
]
