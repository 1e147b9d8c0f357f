"""
Interaction state for the prompt enhancer.

One PromptSession per process is the single source of truth for which step
is shown. Actions check their preconditions under the lock, move into a
GENERATING_* state, call the model outside the lock and then apply the
outcome, unless the user started over in the meantime.
"""

import logging
import threading
from typing import Callable, List, Optional

from errors import GenerationFailed, InvalidTransition, ReadError, ValidationError
from image_codec import encode_reference_image
from models import (
    ASPECT_RATIOS,
    NUMBER_OF_QUESTIONS,
    EnhancedPromptResult,
    Feedback,
    InteractionState,
    OutputSettings,
    QuestionAnswer,
)
from uploads import SLOTS, STYLE, SUBJECT, UploadSlot

logger = logging.getLogger(__name__)

State = InteractionState

EMPTY_IDEA_MESSAGE = (
    "Proszę wpisać podstawowy pomysł na prompt lub wygenerować go z obrazu tematu."
)
EMPTY_MAGIC_IDEA_MESSAGE = (
    "Proszę wpisać podstawowy pomysł na prompt (może być po polsku lub angielsku) "
    "lub wygenerować go z obrazu tematu. Dla 'Magicznego Promptu', ten tekst (wraz z "
    "obrazem referencyjnym tematu, jeśli dodano) posłuży AI do kreatywnego rozwinięcia. "
    "Wynikowy prompt będzie po angielsku."
)
NO_SUBJECT_FOR_DESCRIPTION = "Najpierw prześlij obraz (Temat/Obiekt), aby wygenerować jego opis."
NO_SUBJECT_FOR_COPY = "Najpierw prześlij obraz (Temat/Obiekt), który chcesz skopiować."
NO_STYLE_IMAGE = "Aby zastosować wpływ stylu, prześlij 'Obraz Stylu Referencyjnego'."
NO_STYLE_SUBJECT = (
    "Podaj 'Podstawowy pomysł/prompt' (może być po polsku lub angielsku) opisujący temat "
    "LUB prześlij 'Obraz Referencyjny (Temat/Obiekt)'. Wynikowy prompt będzie po angielsku."
)
INVALID_DIMENSIONS = (
    "Dla niestandardowych wymiarów, proszę podać prawidłową szerokość i wysokość (większe od 0)."
)
EMPTY_DRAFT = "Edytowany prompt nie może być pusty."
SUBJECT_READ_FAILED = "Nie udało się przetworzyć obrazu referencyjnego tematu. Spróbuj ponownie."
SUBJECT_READ_FAILED_OPTIONAL = (
    "Nie udało się przetworzyć obrazu referencyjnego tematu. "
    "Spróbuj ponownie lub kontynuuj bez obrazu."
)
MAGIC_READ_FAILED = (
    "Nie udało się przetworzyć obrazu referencyjnego tematu dla magicznego promptu. "
    "Spróbuj ponownie lub kontynuuj bez obrazu."
)
STYLE_READ_FAILED = "Nie udało się przetworzyć obrazu stylu referencyjnego. Spróbuj ponownie."
REFINE_READ_FAILED = (
    "Nie udało się przetworzyć obrazu referencyjnego tematu dla poprawki. Spróbuj ponownie."
)


class PromptSession:
    """Holds everything the page shows and drives the transitions between steps."""

    def __init__(self, generator, config_error=None):
        self.generator = generator
        self.config_error = config_error
        self._lock = threading.Lock()
        self._generation = 0
        self.slots = {name: UploadSlot(name) for name in SLOTS}
        self._clear()

    # ── helpers ──

    def _clear(self):
        self.basic_prompt = ""
        self.question_answers: List[QuestionAnswer] = []
        self.result: Optional[EnhancedPromptResult] = None
        self.output = OutputSettings()
        self.editing = False
        self.draft = ""
        self.feedback = Feedback()
        for slot in self.slots.values():
            slot.clear()
        if self.config_error is not None:
            self.state = State.ERROR
            self.error = self.config_error.message
        else:
            self.state = State.INITIAL
            self.error = None

    def _require(self, *states):
        if self.state not in states:
            raise InvalidTransition(
                f"Ta akcja nie jest dostępna w stanie {self.state.value}."
            )

    def _reject(self, message):
        self.feedback.message = message
        raise ValidationError(message)

    def _enter(self, state):
        self.feedback.clear()
        self.error = None
        self._generation += 1
        logger.info("%s -> %s", self.state.value, state.value)
        self.state = state
        return self._generation

    def _subject(self):
        return self.slots[SUBJECT].image

    @staticmethod
    def _encode(upload, message):
        """Encode an optional upload, replacing a read failure's text with ``message``."""
        if upload is None:
            return None
        try:
            return encode_reference_image(upload)
        except ReadError as e:
            logger.warning("%s: %s", message, e.message)
            raise ReadError(message) from e

    def _run(self, token, call: Callable, apply: Callable, prior: State,
             failure_state: State = State.ERROR):
        """Run one model call for the generation identified by ``token``.

        A ReadError puts the session back into ``prior`` so the user can retry
        without losing what they entered.
        """
        try:
            outcome = call()
        except ReadError as e:
            with self._lock:
                if self._is_stale(token):
                    return self.snapshot()
                logger.info("%s -> %s", self.state.value, prior.value)
                self.state = prior
                self.feedback.message = e.message
                return self.snapshot()
        except GenerationFailed as e:
            with self._lock:
                if self._is_stale(token):
                    return self.snapshot()
                logger.info("%s -> %s", self.state.value, failure_state.value)
                self.state = failure_state
                if failure_state is State.ERROR:
                    self.error = e.message
                else:
                    self.feedback.message = e.message
                return self.snapshot()

        with self._lock:
            if self._is_stale(token):
                return self.snapshot()
            apply(outcome)
            return self.snapshot()

    def _is_stale(self, token):
        if token != self._generation:
            logger.info("Discarding result of abandoned generation %d", token)
            return True
        return False

    def _show_result(self, result):
        logger.info("%s -> %s", self.state.value, State.SHOWING_RESULTS.value)
        self.result = result
        self.state = State.SHOWING_RESULTS

    # ── form input ──

    def set_idea(self, text):
        with self._lock:
            self._require(State.INITIAL)
            self.basic_prompt = text or ""
            return self.snapshot()

    def set_output_settings(self, aspect_ratio=None, custom_width=None, custom_height=None):
        with self._lock:
            self._require(State.INITIAL)
            if aspect_ratio is not None:
                if aspect_ratio not in ASPECT_RATIOS:
                    self._reject(f"Nieznane proporcje obrazu: {aspect_ratio}")
                self.output.aspect_ratio = aspect_ratio
            if custom_width is not None:
                self.output.custom_width = str(custom_width)
            if custom_height is not None:
                self.output.custom_height = str(custom_height)
            return self.snapshot()

    def update_answer(self, question_id, answer=None, option=None, checked=None):
        with self._lock:
            self._require(State.ASKING_QUESTIONS)
            qa = next((q for q in self.question_answers if q.id == question_id), None)
            if qa is None:
                self._reject(f"Nieznane pytanie: {question_id}")
            if option is not None and checked is not None:
                if option not in qa.options:
                    self._reject(f"Nieznana opcja: {option}")
                qa.toggle(option, checked)
            if answer is not None:
                qa.answer = answer
            return self.snapshot()

    def upload_image(self, slot, filename, mime_type, data):
        with self._lock:
            self._require(State.INITIAL)
            target = self._slot(slot)
            try:
                target.accept(filename, mime_type, data)
            except ValidationError as e:
                self.feedback.message = e.message
                raise
            self.feedback.clear()
            return self.snapshot()

    def clear_image(self, slot):
        with self._lock:
            self._require(State.INITIAL)
            self._slot(slot).clear()
            self.feedback.clear()
            return self.snapshot()

    def _slot(self, name):
        if name not in self.slots:
            raise ValidationError(f"Nieznany rodzaj obrazu: {name}")
        return self.slots[name]

    # ── generation actions ──

    def describe_image(self):
        with self._lock:
            self._require(State.INITIAL)
            upload = self._subject()
            if upload is None:
                self._reject(NO_SUBJECT_FOR_DESCRIPTION)
            token = self._enter(State.GENERATING_DESCRIPTION)

        def call():
            return self.generator.generate_image_description(
                self._encode(upload, SUBJECT_READ_FAILED)
            )

        def apply(description):
            self.basic_prompt = description
            logger.info("%s -> %s", self.state.value, State.INITIAL.value)
            self.state = State.INITIAL

        # A failed description is retried from the form, not from the error panel.
        return self._run(token, call, apply, prior=State.INITIAL, failure_state=State.INITIAL)

    def submit_idea(self):
        with self._lock:
            self._require(State.INITIAL)
            idea = self.basic_prompt
            if not idea.strip():
                self._reject(EMPTY_IDEA_MESSAGE)
            self.question_answers = []
            token = self._enter(State.GENERATING_QUESTIONS)

        def apply(questions):
            logger.info("Received %d questions", len(questions))
            self.question_answers = questions
            self.state = State.ASKING_QUESTIONS

        return self._run(
            token, lambda: self.generator.generate_questions(idea), apply, prior=State.INITIAL
        )

    def submit_answers(self):
        with self._lock:
            self._require(State.ASKING_QUESTIONS)
            idea, answers, upload = self.basic_prompt, list(self.question_answers), self._subject()
            token = self._enter(State.GENERATING_ENHANCEMENT)

        def call():
            image = self._encode(upload, SUBJECT_READ_FAILED_OPTIONAL)
            return self.generator.generate_enhanced_prompt(idea, answers, image)

        return self._run(token, call, self._show_result, prior=State.ASKING_QUESTIONS)

    def magic_prompt(self):
        with self._lock:
            self._require(State.INITIAL)
            idea = self.basic_prompt
            if not idea.strip():
                self._reject(EMPTY_MAGIC_IDEA_MESSAGE)
            if not self.output.dimensions_valid():
                self._reject(INVALID_DIMENSIONS)
            aspect_ratio, width, height = self.output.resolved()
            upload = self._subject()
            token = self._enter(State.GENERATING_MAGIC_PROMPT)

        def call():
            image = self._encode(upload, MAGIC_READ_FAILED)
            return self.generator.generate_magic_prompt(idea, aspect_ratio, width, height, image)

        return self._run(token, call, self._show_result, prior=State.INITIAL)

    def copy_image(self):
        with self._lock:
            self._require(State.INITIAL, State.ASKING_QUESTIONS)
            upload = self._subject()
            if upload is None:
                self._reject(NO_SUBJECT_FOR_COPY)
            prior = self.state
            token = self._enter(State.GENERATING_COPY_PROMPT)

        def call():
            return self.generator.generate_copy_image_prompt(
                self._encode(upload, SUBJECT_READ_FAILED)
            )

        return self._run(token, call, self._show_result, prior=prior)

    def style_influence(self):
        with self._lock:
            self._require(State.INITIAL)
            style_upload, subject_upload = self.slots[STYLE].image, self._subject()
            idea = self.basic_prompt
            if style_upload is None:
                self._reject(NO_STYLE_IMAGE)
            if not idea.strip() and subject_upload is None:
                self._reject(NO_STYLE_SUBJECT)
            if not self.output.dimensions_valid():
                self._reject(INVALID_DIMENSIONS)
            aspect_ratio, width, height = self.output.resolved()
            token = self._enter(State.GENERATING_STYLE_INFLUENCE_PROMPT)

        def call():
            subject = self._encode(subject_upload, SUBJECT_READ_FAILED)
            style = self._encode(style_upload, STYLE_READ_FAILED)
            return self.generator.generate_style_influence_prompt(
                idea, style, subject, aspect_ratio, width, height
            )

        return self._run(token, call, self._show_result, prior=State.INITIAL)

    # ── editing ──

    def start_editing(self):
        with self._lock:
            self._require(State.SHOWING_RESULTS)
            if self.result is None:
                raise InvalidTransition("Brak wyników do edycji.")
            self.editing = True
            self.draft = self.result.enhanced_prompt
            self.feedback.clear()
            return self.snapshot()

    def cancel_editing(self):
        with self._lock:
            self._require(State.SHOWING_RESULTS)
            self.editing = False
            self.draft = ""
            return self.snapshot()

    def set_draft(self, text):
        with self._lock:
            self._require(State.SHOWING_RESULTS)
            if not self.editing:
                raise InvalidTransition("Edycja promptu nie jest włączona.")
            self.draft = text or ""
            return self.snapshot()

    def submit_refinement(self):
        with self._lock:
            self._require(State.SHOWING_RESULTS)
            if not self.editing:
                raise InvalidTransition("Edycja promptu nie jest włączona.")
            draft = self.draft
            if not draft.strip():
                self._reject(EMPTY_DRAFT)
            idea, answers, upload = self.basic_prompt, list(self.question_answers), self._subject()
            token = self._enter(State.GENERATING_REFINEMENT)

        def call():
            image = self._encode(upload, REFINE_READ_FAILED)
            return self.generator.refine_edited_prompt(draft, idea, answers, image)

        def apply(result):
            self._show_result(result)
            self.editing = False
            self.draft = ""

        # Editing stays on after a read failure so the draft can be resubmitted.
        return self._run(token, call, apply, prior=State.SHOWING_RESULTS)

    # ── reset ──

    def start_over(self):
        """Drop everything and return to the first step.

        A generation still in flight keeps running but its outcome is
        discarded when it arrives.
        """
        with self._lock:
            logger.info("%s -> start over", self.state.value)
            self._generation += 1
            self._clear()
            return self.snapshot()

    # ── view ──

    def view(self):
        with self._lock:
            return self.snapshot()

    def snapshot(self):
        """Plain dict of the page state; callers hold the lock."""
        return {
            "state": self.state.value,
            "isGenerating": self.state.is_generating,
            "configured": self.config_error is None,
            "numberOfQuestions": NUMBER_OF_QUESTIONS,
            "basicPrompt": self.basic_prompt,
            "questionAnswers": [qa.to_dict() for qa in self.question_answers],
            "result": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
            "message": self.feedback.message,
            "images": {name: slot.to_dict() for name, slot in self.slots.items()},
            "outputSettings": self.output.to_dict(),
            "customDimensionsInvalid": not self.output.dimensions_valid(),
            "editing": self.editing,
            "draft": self.draft,
        }
