from .client import (
    ScriptService,
    HttpScriptService,
    GenerationResult,
    DecisionResult,
    ScriptServiceError,
    TransportFailure,
    extract_script_text,
)

__all__ = [
    "ScriptService", "HttpScriptService",
    "GenerationResult", "DecisionResult",
    "ScriptServiceError", "TransportFailure",
    "extract_script_text",
]
