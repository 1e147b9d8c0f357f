"""
Request recipes for the Gemini model.

Each operation is a Recipe (how to read the reply and what to tell the user
when it fails) plus an instruction string built by plain formatting. The
runner attaches images after the instruction, style image first, subject
image last, and folds every failure into GenerationFailed.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from google.genai import types

from config import THINKING_MODELS
from errors import CountMismatch, GenerationFailed
from models import (
    ASPECT_RATIO_AUTO,
    ASPECT_RATIO_CUSTOM,
    NUMBER_OF_QUESTIONS,
    OPTIONS_PER_QUESTION,
)
from replies import parse_description, parse_prompt_result, parse_questions
from system_prompt import (
    COPY_IMAGE_PROMPT,
    DESCRIPTION_PROMPT,
    ENHANCE_PROMPT,
    MAGIC_PROMPT,
    QUESTIONS_PROMPT,
    REFINE_PROMPT,
    RESULT_JSON_SHAPE,
    STYLE_INFLUENCE_PROMPT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipe:
    name: str
    parse: Callable[[str], Any]
    failure_message: str
    json_reply: bool = True


QUESTIONS = Recipe(
    "generate_questions",
    parse_questions,
    f"Nie udało się wygenerować {NUMBER_OF_QUESTIONS} pytań. Spróbuj ponownie za chwilę.",
)
ENHANCED_PROMPT = Recipe(
    "generate_enhanced_prompt",
    parse_prompt_result,
    "Nie udało się wygenerować ulepszonego promptu. Spróbuj ponownie za chwilę.",
)
IMAGE_DESCRIPTION = Recipe(
    "generate_image_description",
    parse_description,
    "Nie udało się wygenerować opisu obrazu. Spróbuj ponownie.",
    json_reply=False,
)
MAGIC = Recipe(
    "generate_magic_prompt",
    parse_prompt_result,
    "Nie udało się wygenerować magicznego promptu. Spróbuj ponownie.",
)
COPY_IMAGE = Recipe(
    "generate_copy_image_prompt",
    parse_prompt_result,
    "Nie udało się wygenerować promptu do kopiowania obrazu. Spróbuj ponownie.",
)
STYLE_INFLUENCE = Recipe(
    "generate_style_influence_prompt",
    parse_prompt_result,
    "Nie udało się wygenerować promptu z wpływem stylu. Spróbuj ponownie.",
)
REFINEMENT = Recipe(
    "refine_edited_prompt",
    parse_prompt_result,
    "Nie udało się poprawić promptu. Spróbuj ponownie.",
)


def dimensions_text(aspect_ratio, width="", height="", require_both=False):
    """Describe the requested output size; empty for "auto".

    With ``require_both`` a custom ratio missing a dimension degrades to the
    plain ratio line instead of an incomplete pixel size.
    """
    if not aspect_ratio or aspect_ratio == ASPECT_RATIO_AUTO:
        return ""
    if aspect_ratio == ASPECT_RATIO_CUSTOM and (not require_both or (width and height)):
        return f"Dimensions: {width}x{height}px"
    return f"Aspect ratio: {aspect_ratio}"


def _with_result_shape(body, placeholder):
    return body + RESULT_JSON_SHAPE.format(placeholder=placeholder)


def questions_instruction(basic_prompt):
    return QUESTIONS_PROMPT.format(
        basic_prompt=basic_prompt, count=NUMBER_OF_QUESTIONS, options=OPTIONS_PER_QUESTION
    )


def enhance_instruction(basic_prompt, question_answers):
    blocks = []
    for qa in question_answers:
        selected = ", ".join(qa.selected_options) if qa.selected_options else "None selected"
        notes = f"Notes: {qa.answer}" if qa.answer else ""
        blocks.append(f"{qa.question_text}\nSelected: {selected}\n{notes}")
    body = ENHANCE_PROMPT.format(basic_prompt=basic_prompt, answers="\n\n".join(blocks))
    return _with_result_shape(body, "detailed prompt here")


def magic_instruction(basic_prompt, aspect_ratio, width, height):
    body = MAGIC_PROMPT.format(
        basic_prompt=basic_prompt, dimensions=dimensions_text(aspect_ratio, width, height)
    )
    return _with_result_shape(body, "magical detailed prompt here")


def copy_image_instruction():
    return _with_result_shape(COPY_IMAGE_PROMPT, "extremely detailed recreation prompt here")


def style_influence_instruction(basic_prompt, aspect_ratio=None, width="", height=""):
    body = STYLE_INFLUENCE_PROMPT.format(
        basic_prompt=basic_prompt,
        dimensions=dimensions_text(aspect_ratio, width, height, require_both=True),
    )
    return _with_result_shape(body, "style-influenced prompt here")


def refine_instruction(edited_prompt, basic_prompt, question_answers):
    lines = []
    for qa in question_answers:
        selected = ", ".join(qa.selected_options) if qa.selected_options else "None"
        notes = f"Notes: {qa.answer}" if qa.answer else ""
        lines.append(f"{qa.question_text}: {selected} {notes}")
    body = REFINE_PROMPT.format(
        edited_prompt=edited_prompt, basic_prompt=basic_prompt, answers="\n".join(lines)
    )
    return _with_result_shape(body, "refined prompt here")


def image_part(image):
    return types.Part.from_bytes(data=base64.b64decode(image.base64), mime_type=image.mime_type)


def build_contents(instruction, style_image=None, subject_image=None):
    contents = [instruction]
    if style_image is not None:
        contents.append(image_part(style_image))
    if subject_image is not None:
        contents.append(image_part(subject_image))
    return contents


def build_config(model, json_reply):
    kwargs = {}
    if json_reply:
        kwargs["response_mime_type"] = "application/json"
    if model in THINKING_MODELS:
        kwargs["thinking_config"] = types.ThinkingConfig(thinking_level="low")
    return types.GenerateContentConfig(**kwargs)


class PromptGenerator:
    """The seven generation operations against one Gemini client."""

    def __init__(self, client, model):
        self.client = client
        self.model = model

    def run(self, recipe: Recipe, instruction: str, style_image=None, subject_image=None):
        """Send one request and parse its reply, or raise GenerationFailed."""
        contents = build_contents(instruction, style_image, subject_image)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=build_config(self.model, recipe.json_reply),
            )
            return recipe.parse(response.text)
        except CountMismatch as e:
            logger.error("%s: %s", recipe.name, e.message)
            raise
        except Exception:
            logger.exception("%s failed", recipe.name)
            raise GenerationFailed(recipe.failure_message) from None

    def generate_questions(self, basic_prompt):
        return self.run(QUESTIONS, questions_instruction(basic_prompt))

    def generate_enhanced_prompt(self, basic_prompt, question_answers, subject_image=None):
        return self.run(
            ENHANCED_PROMPT,
            enhance_instruction(basic_prompt, question_answers),
            subject_image=subject_image,
        )

    def generate_image_description(self, image):
        return self.run(IMAGE_DESCRIPTION, DESCRIPTION_PROMPT, subject_image=image)

    def generate_magic_prompt(self, basic_prompt, aspect_ratio, width, height,
                              subject_image: Optional[Any] = None):
        return self.run(
            MAGIC,
            magic_instruction(basic_prompt, aspect_ratio, width, height),
            subject_image=subject_image,
        )

    def generate_copy_image_prompt(self, image):
        return self.run(COPY_IMAGE, copy_image_instruction(), subject_image=image)

    def generate_style_influence_prompt(self, basic_prompt, style_image, subject_image=None,
                                        aspect_ratio=None, width="", height=""):
        return self.run(
            STYLE_INFLUENCE,
            style_influence_instruction(basic_prompt, aspect_ratio, width, height),
            style_image=style_image,
            subject_image=subject_image,
        )

    def refine_edited_prompt(self, edited_prompt, basic_prompt, question_answers,
                             subject_image=None):
        return self.run(
            REFINEMENT,
            refine_instruction(edited_prompt, basic_prompt, question_answers),
            subject_image=subject_image,
        )
