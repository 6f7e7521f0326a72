"""Interpretation generator backed by a multimodal model on AWS Bedrock."""

import base64
import logging

from botocore.config import Config
from langchain_aws import ChatBedrock
from langchain_core.messages import HumanMessage, SystemMessage

from src.errors import GenerationError
from src.generators.base import InterpretationGenerator
from src.models.quiz import GeneratedInterpretation
from src.validation.image_validator import sniff_content_type

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You write short interpretations of images for a guessing game.

A player uploaded an image together with their own interpretation of it. Other players
will see the image and two interpretations, and must guess which one the uploader wrote.

Requirements:
- Write ONE alternative interpretation of the same image
- It must be plausible for this image, but clearly different in meaning from the uploader's
- Match the uploader's length, tone and register so it is hard to tell apart
- Do not mention that you are an AI or refer to the other interpretation
- Use the same language as the uploader"""


class BedrockInterpretationGenerator(InterpretationGenerator):
    """Asks a Bedrock chat model for a distractor interpretation."""

    def __init__(
        self,
        model_name: str,
        temperature: float = 0.9,
        region_name: str | None = None,
        timeout_seconds: float = 60.0,
        llm=None,
    ):
        if llm is None:
            llm = ChatBedrock(
                model=model_name,
                temperature=temperature,
                region_name=region_name,
                config=Config(
                    read_timeout=timeout_seconds,
                    connect_timeout=timeout_seconds,
                    retries={"total_max_attempts": 1},
                ),
            )
        # Use structured output to automatically generate and validate the schema
        self.llm_with_structure = llm.with_structured_output(GeneratedInterpretation)

    def interpret(self, image_bytes: bytes, author_text: str) -> str:
        messages = build_messages(image_bytes, author_text)
        try:
            result = self.llm_with_structure.invoke(messages)
        except Exception as e:
            # Any SDK, transport or parsing failure is a generation failure
            raise GenerationError(f"Interpretation generation failed: {e}") from e

        if result is None:
            raise GenerationError("Model returned no interpretation")
        logger.debug("Bedrock produced %d characters", len(result.interpretation))
        return result.interpretation


def build_messages(image_bytes: bytes, author_text: str) -> list:
    """
    Build the chat messages for one generation request.

    Args:
        image_bytes: Image to interpret
        author_text: The uploader's interpretation

    Returns:
        System and human messages, the human one carrying the image inline
    """
    media_type = sniff_content_type(image_bytes) or "image/jpeg"
    encoded = base64.b64encode(image_bytes).decode("ascii")

    user_prompt = f"""The uploader's interpretation is:

"{author_text}"

Write a different interpretation of this image."""

    return [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(
            content=[
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media_type};base64,{encoded}"},
                },
                {"type": "text", "text": user_prompt},
            ]
        ),
    ]
