"""
vegancheck FastAPI application.

Endpoints:
    GET  /            Health check
    POST /validate    Local knowledge-base validation of an ingredient list or label text
    POST /reconcile   Reconcile an external classifier result with local validation
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load env vars
load_dotenv(Path(__file__).parent / ".env")

# Logger
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from vegancheck.config import log_config
from vegancheck.evaluation.validator import LocalValidator
from vegancheck.ingestion.classification_parser import decode_classification, parse_classification_text
from vegancheck.knowledge.knowledge_base import get_knowledge_base
from vegancheck.models.classification import ClassificationParseError, IncompleteClassificationError
from vegancheck.normalization.parser import split_ingredient_text
from vegancheck.reconciliation.engine import reconcile
from vegancheck.reconciliation.quality import get_reasoning_rules

# Initialize App
app = FastAPI(title="vegancheck API")

log_config()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Loaded once at startup; read-only afterwards
knowledge_base = get_knowledge_base()
reasoning_rules = get_reasoning_rules()
validator = LocalValidator(knowledge_base)


# --- Request Models ---
class ValidateRequest(BaseModel):
    ingredients: Optional[List[Optional[str]]] = None
    text: Optional[str] = None


class ReconcileRequest(BaseModel):
    classification: Optional[Dict[str, Any]] = None
    rawResponse: Optional[str] = None
    ingredients: Optional[List[Optional[str]]] = None
    isCropped: bool = False


# --- Helper Functions ---

def _request_ingredients(ingredients: Optional[List[Optional[str]]], text: Optional[str]) -> List[Optional[str]]:
    """Explicit list wins; otherwise split label text."""
    if ingredients is not None:
        return ingredients
    return split_ingredient_text(text or "")


def _classification_error(status_code: int, error: str, message: str, **details: Any) -> JSONResponse:
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


# --- Endpoints ---

@app.get("/")
def health_check():
    return {
        "status": "ok",
        "knowledgeBaseVersion": knowledge_base.get_version(),
        "terms": len(knowledge_base),
    }


@app.post("/validate")
def validate(request: ValidateRequest):
    """Text-only path: no external classifier involved."""
    try:
        ingredients = _request_ingredients(request.ingredients, request.text)
        logger.info("Validate request count=%d", len(ingredients))
        return validator.validate(ingredients).to_dict()
    except Exception as e:
        logger.error("Validate failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/reconcile")
def reconcile_classification(request: ReconcileRequest):
    """Decode the classifier's answer, validate its ingredients locally, and reconcile."""
    try:
        if request.classification is not None:
            external = decode_classification(request.classification)
        else:
            external = parse_classification_text(request.rawResponse or "")
    except IncompleteClassificationError as e:
        logger.warning("Reconcile rejected incomplete classification missing=%s", e.missing_fields)
        return _classification_error(422, "INCOMPLETE_CLASSIFICATION", str(e), missingFields=e.missing_fields)
    except ClassificationParseError as e:
        logger.warning("Reconcile rejected unparseable classifier response: %s", e)
        return _classification_error(422, "UNPARSEABLE_CLASSIFICATION", str(e))

    try:
        ingredients = request.ingredients if request.ingredients is not None else external.ingredient_list
        local = validator.validate(ingredients)
        result = reconcile(
            external,
            local,
            is_cropped=request.isCropped,
            raw_text=request.rawResponse,
            rules=reasoning_rules,
        )
        logger.info(
            "Reconcile done is_vegan=%s confidence=%.2f needs_better_input=%s",
            result.is_vegan, result.confidence, result.needs_better_input,
        )
        return result.to_dict()
    except Exception as e:
        logger.error("Reconcile failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True)
