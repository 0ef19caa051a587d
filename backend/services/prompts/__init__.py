"""Prompt builders for the AI operations."""

from .operation_prompts import build_prompts

__all__ = ["build_prompts"]
