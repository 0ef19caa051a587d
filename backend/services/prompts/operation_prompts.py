"""Prompt templates for the eight AI operations.

Each operation has one fixed system role and one user instruction. Two optional
clauses are appended only when the caller supplied them:

  - keywordsMore: extra keywords/specifications, with a per-operation lead-in
  - additionalContext: free-form context, always led by "Additional context: "

Usage::

    from backend.services.prompts import build_prompts

    system_prompt, user_prompt = build_prompts(
        OperationKind.analyze_market,
        {"industry": "Fintech", "region": "Europe"},
    )
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Tuple

from application.models.operations import OperationKind


@dataclass(frozen=True)
class PromptTemplate:
    system: str
    instruction: Callable[[Mapping[str, Any]], str]
    keywords_lead: str
    closing: str


def _email_instruction(p: Mapping[str, Any]) -> str:
    if p.get("purpose"):
        return f"Write a professional email template for {p['purpose']}."
    return f"Write a professional email {p.get('sequence')} for {p.get('business')}."


_TEMPLATES: Dict[OperationKind, PromptTemplate] = {
    OperationKind.generate_business_names: PromptTemplate(
        system="You are a creative business naming expert.",
        instruction=lambda p: (
            f"Generate 5 creative and unique business names for a {p['industry']} startup. "
            f"Consider these keywords: {p['keywords']}."
        ),
        keywords_lead="Additional keywords/concepts to consider: ",
        closing="Format the response as a numbered list.",
    ),
    OperationKind.generate_email_templates: PromptTemplate(
        system="You are a professional email writing expert.",
        instruction=_email_instruction,
        keywords_lead="Additional specifications: ",
        closing="Include subject line and body.",
    ),
    OperationKind.generate_logo: PromptTemplate(
        system="You are a logo design expert.",
        instruction=lambda p: (
            f"Describe a professional logo design concept for a {p['industry']} company "
            f"with a {p['style']} style."
        ),
        keywords_lead="Additional design elements to consider: ",
        closing="Include colors, shapes, and typography recommendations.",
    ),
    OperationKind.generate_pitch_deck: PromptTemplate(
        system="You are a pitch deck creation expert.",
        instruction=lambda p: (
            f"Outline a compelling {p['type']} pitch deck structure for a "
            f"{p['industry']} startup."
        ),
        keywords_lead="Additional specifications: ",
        closing="Include key sections and content recommendations.",
    ),
    OperationKind.analyze_market: PromptTemplate(
        system="You are a market analysis expert.",
        instruction=lambda p: (
            f"Provide a brief market analysis for the {p['industry']} industry "
            f"in the {p['region']} region."
        ),
        keywords_lead="Additional factors to consider: ",
        closing="Include key trends, opportunities, and challenges.",
    ),
    OperationKind.generate_content_calendar: PromptTemplate(
        system="You are a content marketing expert.",
        instruction=lambda p: (
            f"Create a 30-day content calendar for {p['business']} targeting {p['audience']}."
        ),
        keywords_lead="Additional content ideas: ",
        closing="Include content types, topics, and posting frequency.",
    ),
    OperationKind.generate_legal_docs: PromptTemplate(
        system="You are a legal document expert.",
        instruction=lambda p: f"Provide a template for a {p['docType']} for {p['business']}.",
        keywords_lead="Additional clauses/sections to include: ",
        closing="Include key sections and standard language.",
    ),
    OperationKind.generate_financials: PromptTemplate(
        system="You are a financial forecasting expert.",
        instruction=lambda p: (
            f"Create a financial projection for {p['business']} over the next {p['timeframe']}."
        ),
        keywords_lead="Additional financial factors to consider: ",
        closing="Include revenue streams, expenses, and growth assumptions.",
    ),
}


def build_prompts(kind: OperationKind, params: Mapping[str, Any]) -> Tuple[str, str]:
    """Return (system_prompt, user_prompt) for an operation.

    Callers validate required parameters first; this only formats.
    """
    template = _TEMPLATES[kind]
    parts = [template.instruction(params)]

    keywords_more = params.get("keywordsMore")
    if keywords_more:
        parts.append(f"{template.keywords_lead}{keywords_more}")

    additional_context = params.get("additionalContext")
    if additional_context:
        parts.append(f"Additional context: {additional_context}")

    parts.append(template.closing)
    return template.system, " ".join(parts)
