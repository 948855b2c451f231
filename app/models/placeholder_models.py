# app/models/placeholder_models.py
from typing import Dict, List

from app.models.common import CamelModel


class PlaceholderAnalyzeRequest(CamelModel):
    text: str
    title: str = ""


class PlaceholderAnalysis(CamelModel):
    placeholders: List[str] = []
    labels: List[str] = []
    mapping: Dict[str, str] = {}
    errors: List[str] = []
    summary: str = ""


class RenderedPrompt(CamelModel):
    prompt_id: str
    text: str
    missing: List[str] = []
