"""
Data structures for the prompt enhancer.
Plain containers; the session owns their lifecycle.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class OutputType(str, Enum):
    RASTER_PROMPT = "RASTER_PROMPT"  # prompt for raster images (PNG, JPG)


class InteractionState(str, Enum):
    INITIAL = "INITIAL"
    GENERATING_DESCRIPTION = "GENERATING_DESCRIPTION"
    GENERATING_QUESTIONS = "GENERATING_QUESTIONS"
    ASKING_QUESTIONS = "ASKING_QUESTIONS"
    GENERATING_ENHANCEMENT = "GENERATING_ENHANCEMENT"
    SHOWING_RESULTS = "SHOWING_RESULTS"
    ERROR = "ERROR"
    GENERATING_MAGIC_PROMPT = "GENERATING_MAGIC_PROMPT"
    GENERATING_COPY_PROMPT = "GENERATING_COPY_PROMPT"
    GENERATING_STYLE_INFLUENCE_PROMPT = "GENERATING_STYLE_INFLUENCE_PROMPT"
    GENERATING_REFINEMENT = "GENERATING_REFINEMENT"

    @property
    def is_generating(self) -> bool:
        return self.value.startswith("GENERATING_")


NUMBER_OF_QUESTIONS = 11
OPTIONS_PER_QUESTION = 10

ASPECT_RATIO_AUTO = "auto"
ASPECT_RATIO_CUSTOM = "custom"
IPHONE_WALLPAPER = "iphone_14_14pro_wallpaper"
IPHONE_WALLPAPER_SIZE = ("1170", "2532")

ASPECT_RATIOS = {
    ASPECT_RATIO_AUTO: "Automatyczne / Z Promptu",
    "1:1": "Kwadrat (1:1)",
    "16:9": "Szeroki (16:9)",
    "9:16": "Wysoki (9:16)",
    "4:3": "Krajobraz (4:3)",
    "3:4": "Portret (3:4)",
    IPHONE_WALLPAPER: "Tapeta iPhone 14/Pro (1170x2532)",
    ASPECT_RATIO_CUSTOM: "Niestandardowe",
}


@dataclass(frozen=True)
class ReferenceImage:
    """An uploaded image ready to be attached to a model request."""
    base64: str
    mime_type: str


@dataclass
class QuestionAnswer:
    """One clarifying question and the user's response to it."""
    id: str
    question_text: str
    options: List[str] = field(default_factory=list)
    selected_options: List[str] = field(default_factory=list)
    answer: str = ""
    full_question_prompt: str = ""  # raw question JSON as returned by the model

    def select(self, option: str) -> None:
        if option not in self.selected_options:
            self.selected_options.append(option)

    def deselect(self, option: str) -> None:
        self.selected_options = [o for o in self.selected_options if o != option]

    def toggle(self, option: str, checked: bool) -> None:
        if checked:
            self.select(option)
        else:
            self.deselect(option)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "questionText": self.question_text,
            "options": list(self.options),
            "selectedOptions": list(self.selected_options),
            "answer": self.answer,
        }


@dataclass(frozen=True)
class EnhancedPromptResult:
    """Result of one generation or refinement call."""
    enhanced_prompt: str
    negative_prompt: str
    suggestions: List[str] = field(default_factory=list)
    output_type_used: OutputType = OutputType.RASTER_PROMPT

    def to_dict(self) -> dict:
        return {
            "enhancedPrompt": self.enhanced_prompt,
            "negativePrompt": self.negative_prompt,
            "suggestions": list(self.suggestions),
            "outputTypeUsed": self.output_type_used.value,
        }


@dataclass
class OutputSettings:
    """Aspect ratio selection for magic and style-influence prompts."""
    aspect_ratio: str = ASPECT_RATIO_AUTO
    custom_width: str = ""
    custom_height: str = ""

    def dimensions_valid(self) -> bool:
        """False only when "custom" is selected without two positive integers."""
        if self.aspect_ratio != ASPECT_RATIO_CUSTOM:
            return True
        return _positive_int(self.custom_width) and _positive_int(self.custom_height)

    def resolved(self):
        """(aspect_ratio, width, height) to embed; the wallpaper preset becomes pixels."""
        if self.aspect_ratio == IPHONE_WALLPAPER:
            return (ASPECT_RATIO_CUSTOM,) + IPHONE_WALLPAPER_SIZE
        if self.aspect_ratio == ASPECT_RATIO_CUSTOM and self.dimensions_valid():
            return self.aspect_ratio, str(int(self.custom_width)), str(int(self.custom_height))
        return self.aspect_ratio, self.custom_width.strip(), self.custom_height.strip()

    def to_dict(self) -> dict:
        return {
            "aspectRatio": self.aspect_ratio,
            "customWidth": self.custom_width,
            "customHeight": self.custom_height,
        }


def _positive_int(value: str) -> bool:
    value = (value or "").strip()
    return value.isascii() and value.isdigit() and int(value) > 0


@dataclass
class Feedback:
    """Ephemeral inline message scoped to the current state."""
    message: Optional[str] = None

    def clear(self) -> None:
        self.message = None
