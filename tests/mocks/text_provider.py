"""Scriptable text provider for testing"""

from typing import Dict, List, Optional

from core.models.script import AIModelRef
from core.providers.base import TextProvider


class ScriptedTextProvider(TextProvider):
    """
    TextProvider whose responses are controlled by the test.

    Responses are taken from the queue in call order; once the queue is
    empty, a fixed fallback text is returned. Prompts containing any of
    the fail_on markers raise instead.
    """

    def __init__(self, fallback: str = "Default narration for this section.", debug: bool = False):
        self.fallback = fallback
        self.debug = debug
        self.calls: List[Dict] = []  # Track calls for test assertions
        self.responses: List[str] = []
        self.response_index: int = 0
        self.fail_on: Dict[str, Exception] = {}

    def add_response(self, response: str):
        """Add a response to the queue"""
        self.responses.append(response)

    def fail_when(self, marker: str, error: Optional[Exception] = None):
        """Raise error for any prompt containing marker"""
        self.fail_on[marker] = error or RuntimeError(f"text generation failed for {marker}")

    async def generate_text(self, model: AIModelRef, prompt: str) -> str:
        self.calls.append({"model": model.id, "prompt": prompt})

        if self.debug:
            print(f"[ScriptedTextProvider] Received prompt ({len(prompt)} chars)")

        for marker, error in self.fail_on.items():
            if marker in prompt:
                raise error

        if self.response_index < len(self.responses):
            response = self.responses[self.response_index]
            self.response_index += 1
            return response
        return self.fallback

    def reset(self):
        """Clear call history and queued responses"""
        self.calls = []
        self.responses = []
        self.response_index = 0
        self.fail_on = {}
