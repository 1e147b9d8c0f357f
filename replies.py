"""
Parsing of model replies into session data.

Every function takes the raw reply text and either returns normalised data or
raises MalformedResponse. CountMismatch is raised for a question list of the
wrong length so the user sees both numbers.
"""

import json
import re
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as ShapeError, field_validator

from errors import CountMismatch, MalformedResponse
from models import NUMBER_OF_QUESTIONS, EnhancedPromptResult, OutputType, QuestionAnswer

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


class QuestionReply(BaseModel):
    id: Optional[str] = None
    questionText: str = Field(min_length=1)
    options: List[str] = Field(default_factory=list)

    @field_validator("questionText")
    @classmethod
    def _not_blank(cls, v):
        if not v.strip():
            raise ValueError("questionText is blank")
        return v.strip()

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        return None if v is None else str(v)

    @field_validator("options", mode="before")
    @classmethod
    def _null_options(cls, v):
        return [] if v is None else v


class PromptReply(BaseModel):
    enhancedPrompt: str
    negativePrompt: str
    suggestions: List[str] = Field(default_factory=list)

    @field_validator("suggestions", mode="before")
    @classmethod
    def _null_suggestions(cls, v):
        return [] if v is None else v


def load_json(text):
    """Decode a JSON reply, tolerating a Markdown code fence around it."""
    if text is None:
        raise MalformedResponse("empty reply")
    cleaned = _FENCE.sub("", text.strip()).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"reply is not JSON: {e}") from e


def parse_questions(text, expected=NUMBER_OF_QUESTIONS):
    data = load_json(text)
    if not isinstance(data, list):
        raise MalformedResponse(f"expected a JSON array, got {type(data).__name__}")
    if len(data) != expected:
        raise CountMismatch(len(data), expected)

    questions = []
    seen = set()
    for n, item in enumerate(data, 1):
        try:
            q = QuestionReply.model_validate(item)
        except ShapeError as e:
            raise MalformedResponse(f"question {n}: {e}") from e
        qid = q.id.strip() if q.id else ""
        if not qid or qid in seen:
            qid = f"q{n}"
        seen.add(qid)
        questions.append(
            QuestionAnswer(
                id=qid,
                question_text=q.questionText,
                options=q.options,
                full_question_prompt=json.dumps(item, ensure_ascii=False),
            )
        )
    return questions


def parse_prompt_result(text):
    data = load_json(text)
    try:
        reply = PromptReply.model_validate(data)
    except ShapeError as e:
        raise MalformedResponse(f"prompt reply: {e}") from e
    return EnhancedPromptResult(
        enhanced_prompt=reply.enhancedPrompt,
        negative_prompt=reply.negativePrompt,
        suggestions=reply.suggestions,
        output_type_used=OutputType.RASTER_PROMPT,
    )


def parse_description(text):
    description = (text or "").strip()
    if not description:
        raise MalformedResponse("empty description")
    return description
