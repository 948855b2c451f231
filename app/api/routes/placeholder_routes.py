# app/api/routes/placeholder_routes.py
from fastapi import APIRouter

from app.models.placeholder_models import PlaceholderAnalysis, PlaceholderAnalyzeRequest
from app.services.prompt_text_services import (
    extract_placeholders,
    generate_summary,
    placeholder_labels,
    placeholder_mapping,
    validate_prompt_text,
)

router = APIRouter(tags=["Placeholders"])


@router.post("/analyze")
async def analyze(request: PlaceholderAnalyzeRequest):
    """Placeholders, display labels and text problems for a draft prompt."""
    analysis = PlaceholderAnalysis(
        placeholders=extract_placeholders(request.text),
        labels=placeholder_labels(request.text),
        mapping=placeholder_mapping(request.text),
        errors=validate_prompt_text(request.text),
        summary=generate_summary(request.text, request.title),
    )
    return {"data": analysis}
