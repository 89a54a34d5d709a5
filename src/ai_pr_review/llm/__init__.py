"""
LLM Integration Layer

Prompt composition and chat model invocation for reviews.
"""

from .prompts import AddonRule, PromptBuilder, select_addons
from .generator import ReviewGenerator

__all__ = ['AddonRule', 'PromptBuilder', 'select_addons', 'ReviewGenerator']
