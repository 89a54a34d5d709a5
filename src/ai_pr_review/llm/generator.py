"""
Review Generator

Sends the prompt bundle to an OpenAI chat model and returns the
review text.
"""

import logging
from typing import Optional

import openai
from openai import OpenAI

from ..config import Model, OpenAIConfig
from ..errors import ModelInvocationError
from ..models.review import NO_ISSUES_MESSAGE, PromptBundle


logger = logging.getLogger(__name__)


class ReviewGenerator:
    """
    Generates a pull request review with one chat completion.

    The call is not streamed or retried. SDK errors and responses
    without a usable message are raised as ModelInvocationError so the
    caller can fall back to a fixed message.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Model = Model.GPT_4_1_MINI,
        temperature: float = 0.2,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize review generator.

        Args:
            api_key: OpenAI API key
            model: Chat model to call
            temperature: Sampling temperature
            client: Preconfigured OpenAI client (built from api_key when omitted)
        """
        self.model = model
        self.temperature = temperature
        self.client = client or OpenAI(api_key=api_key)

    @classmethod
    def from_config(cls, config: OpenAIConfig) -> "ReviewGenerator":
        return cls(api_key=config.api_key, model=config.model, temperature=config.temperature)

    def generate(self, bundle: PromptBundle) -> str:
        """
        Request a review for the given prompts.

        Args:
            bundle: System and user messages

        Returns:
            Trimmed review text, or NO_ISSUES_MESSAGE when the model returns nothing

        Raises:
            ModelInvocationError: If the request fails or the response is malformed
        """
        logger.info(f"Requesting review from {self.model.value}")

        try:
            response = self.client.chat.completions.create(
                model=self.model.value,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": bundle.system_text},
                    {"role": "user", "content": bundle.user_text},
                ],
            )
        except openai.OpenAIError as e:
            raise ModelInvocationError(f"OpenAI request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ModelInvocationError(f"Malformed model response: {e}") from e

        text = (content or "").strip()
        if not text:
            logger.info("Model returned an empty review")
            return NO_ISSUES_MESSAGE

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(f"Token usage: {getattr(usage, 'total_tokens', '?')}")

        return text
