"""
Storygrid LLM Module

Gemini integration layer used by the storyboard session.
"""

from .api_clients import GeminiClient, TextResponse

__all__ = [
    'GeminiClient',
    'TextResponse',
]
