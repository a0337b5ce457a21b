"""
Study Session Controller

Drives the user through a study session:
1. Select a module (or "all cards") from the modules the backend returned
2. Start a backend session and resume from reported progress
3. Present cards one at a time using the card's protocol:
   - Flip cards: question ⇄ answer, graded by self-report, auto-advance
   - Multiple-choice cards: pick an option, graded automatically, no advance
4. Record each answer's correctness and response time
5. End the session, push final tallies and show a summary

State machine:
    MODULE_SELECTION → LOADING → PRESENTING → ENDING → COMPLETED
    LOADING → MODULE_SELECTION on start failure
    any → MODULE_SELECTION on back_to_modules()

Only one session is active at a time. Every awaited backend call captures
a generation token; responses that arrive after the controller moved on
(new session, back to modules, completed) are ignored.

Usage:
    controller = StudySessionController(backend.study, backend.modules, notifier)
    await controller.load_modules()
    await controller.select_module("module-1")
    controller.flip()
    await controller.record_answer(correct=True)
    summary = await controller.end_session()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from smartflash.config import study_config, StudyConfig
from smartflash.enums.api import ToastType
from smartflash.enums.learning import CardFace, NavigationDirection, StudyPhase
from smartflash.middleware.error_handling import (
    InvalidStateError,
    NotFoundError,
    ServiceError,
    user_message,
    ValidationError,
)
from smartflash.models.learning import (
    accuracy_percent,
    EndSessionRequest,
    Flashcard,
    PerformanceRequest,
    SessionSummary,
    StudyModule,
)
from smartflash.services.api.modules import ModuleService
from smartflash.services.api.study import StudyService
from smartflash.services.learning.resume import resolve_resume_point, Resume
from smartflash.services.notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

ALL_CARDS_TITLE = "All Cards"


@dataclass(frozen=True)
class AnswerFeedback:
    """
    Outcome of a multiple-choice selection.

    Attributes:
        correct: Whether the selected option matches the answer
        selected: The option the user picked
        correct_answer: The card's stored answer
        recorded: Whether the backend accepted the performance record
    """

    correct: bool
    selected: str
    correct_answer: str
    recorded: bool


class StudySessionController:
    """
    Client-side state machine for one study session at a time.

    Backend failures never leave the controller stuck: a failed start
    returns to module selection, a failed answer recording is surfaced but
    does not block navigation, and a failed end still completes the session
    with the locally computed summary.
    """

    def __init__(
        self,
        study: StudyService,
        modules: ModuleService,
        notifier: Optional[Notifier] = None,
        config: Optional[StudyConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the controller.

        Args:
            study: Session lifecycle and performance recording
            modules: Module listing used for selection
            notifier: Where toasts go (default: the log)
            config: Toast durations and redirect delays
            clock: Seconds source for durations (injectable for tests)
        """
        self.study = study
        self.module_service = modules
        self.notifier = notifier or LoggingNotifier()
        self.config = config or study_config
        self.clock = clock

        self.phase: StudyPhase = StudyPhase.MODULE_SELECTION
        self.modules: list[StudyModule] = []
        self.last_error: Optional[ServiceError] = None
        self.summary: Optional[SessionSummary] = None
        self.evaluating: bool = False
        self._generation: int = 0
        self._reset_session()

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def current_card(self) -> Optional[Flashcard]:
        if 0 <= self.current_index < len(self.flashcards):
            return self.flashcards[self.current_index]
        return None

    @property
    def is_empty(self) -> bool:
        """A started session without cards; only back_to_modules() is offered."""
        return self.phase == StudyPhase.PRESENTING and not self.flashcards

    @property
    def is_last_card(self) -> bool:
        """Whether the cursor is on the final card of the session."""
        return bool(self.flashcards) and self.current_index == len(self.flashcards) - 1

    @property
    def progress_percent(self) -> int:
        if not self.flashcards:
            return 0
        return round((self.current_index + 1) / len(self.flashcards) * 100)

    @property
    def redirect_delay_ms(self) -> int:
        """Pause before leaving the study screen after the summary toast."""
        if self.summary and self.summary.module_completed:
            return self.config.completed_redirect_ms
        return self.config.session_end_redirect_ms

    # =========================================================================
    # Module selection
    # =========================================================================

    async def load_modules(self) -> list[StudyModule]:
        """
        Refresh the module list.

        Independent of any active session. On failure the previous list is
        kept and the error is surfaced.
        """
        try:
            self.modules = await self.module_service.list_modules()
        except ServiceError as e:
            logger.error(f"Failed to load study modules: {e}")
            self._surface(e, "Failed to load study modules")
        return self.modules

    async def select_module(self, module_id: Optional[str]) -> bool:
        """
        Select a module (None = all cards) and start a session for it.

        Args:
            module_id: Id of a module returned by the ModuleService

        Returns:
            True if the session started

        Raises:
            InvalidStateError: A session is already active
            NotFoundError: module_id is not a known module
        """
        self._require_phase(StudyPhase.MODULE_SELECTION, StudyPhase.COMPLETED)

        if module_id is not None and self._find_module(module_id) is None:
            await self.load_modules()
            if self._find_module(module_id) is None:
                raise NotFoundError(f"Unknown study module: {module_id}")

        return await self.start_session(module_id)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def start_session(self, module_id: Optional[str] = None) -> bool:
        """
        Start a backend session and position the cursor.

        The resume decision comes from resolve_resume_point(): a reported
        start index past the first card with reported progress resumes there
        with carried-over counters, anything else starts fresh.

        Returns:
            True if the session started; False if it failed (the controller
            is back in MODULE_SELECTION and the error was surfaced)
        """
        self._require_phase(StudyPhase.MODULE_SELECTION, StudyPhase.COMPLETED)

        self._reset_session()
        self.summary = None
        self.last_error = None
        self.evaluating = False
        self.phase = StudyPhase.LOADING
        generation = self._next_generation()

        try:
            result = await self.study.start_session(module_id=module_id)
        except ServiceError as e:
            if self._is_stale(generation):
                return False
            logger.error(f"Failed to start study session (module={module_id}): {e}")
            self.phase = StudyPhase.MODULE_SELECTION
            self._surface(e, "Failed to start study session. Please try again.")
            return False

        if self._is_stale(generation):
            logger.debug(f"Ignoring stale session start {result.session.id}")
            return False

        point = resolve_resume_point(
            result.start_index, result.progress, len(result.flashcards)
        )

        self.session_id = result.session.id
        self.module_id = module_id
        self.flashcards = list(result.flashcards)
        self.current_index = point.index
        self.correct_count = point.correct_count
        self.total_studied = point.total_studied
        # Cards before the resume point were tallied in earlier sessions
        self._tallied = set(range(point.index)) if isinstance(point, Resume) else set()
        self.module_title = self._module_title(module_id)
        self._started_at = self.clock()
        self._show_card(self.current_index)
        self.phase = StudyPhase.PRESENTING

        if not self.flashcards:
            logger.info(f"Session {self.session_id} has no cards")
        elif isinstance(point, Resume):
            logger.info(
                f"Resuming session {self.session_id} at card {point.index + 1}"
                f"/{len(self.flashcards)} ({point.correct_count}/{point.total_studied} correct)"
            )
        else:
            logger.info(
                f"Starting session {self.session_id} with {len(self.flashcards)} cards"
            )
        return True

    async def end_session(self) -> SessionSummary:
        """
        End the active session and show its summary.

        Submits the final tallies and the cursor position (for resume). The
        controller ends in COMPLETED whether or not the backend accepted the
        submission; the summary is computed locally either way.

        Returns:
            Locally computed session summary

        Raises:
            InvalidStateError: No session is being presented
        """
        self._require_phase(StudyPhase.PRESENTING)
        if self.session_id is None:
            raise InvalidStateError("No active study session")
        if self.evaluating:
            raise InvalidStateError("Wait for the current answer to be recorded")

        self.phase = StudyPhase.ENDING
        generation = self._generation

        # back_to_modules() may reset the session while the request is in flight
        session_id = self.session_id
        module_id = self.module_id
        final_index = self.current_index
        cards_studied = self.total_studied
        correct = self.correct_count
        duration = max(int(self.clock() - self._started_at), 0)
        module_completed = module_id is not None and self.is_last_card
        accuracy = accuracy_percent(correct, cards_studied)

        stats = EndSessionRequest(
            cards_studied=cards_studied,
            correct_answers=correct,
            session_duration=duration,
            module_id=module_id,
            current_card_index=final_index,
        )

        submitted = False
        try:
            await self.study.end_session(session_id, stats)
            submitted = True
        except ServiceError as e:
            logger.error(f"Failed to end session {session_id}: {e}")
            if not self._is_stale(generation):
                self.last_error = e

        summary = SessionSummary(
            session_id=session_id,
            module_id=module_id,
            cards_studied=cards_studied,
            correct_answers=correct,
            accuracy=accuracy,
            duration_seconds=duration,
            final_index=final_index,
            module_completed=module_completed,
            submitted=submitted,
        )

        if self._is_stale(generation):
            logger.debug(f"Ignoring stale end of session {session_id}")
            return summary

        if module_completed:
            self.notifier.show_toast(
                f"Module completed! {cards_studied} cards studied with {accuracy}% accuracy!",
                ToastType.SUCCESS,
                self.config.completed_toast_ms,
            )
        else:
            self.notifier.show_toast(
                f"Great work! {cards_studied} cards studied with {accuracy}% accuracy!",
                ToastType.SUCCESS,
                self.config.session_end_toast_ms,
            )
        if not submitted:
            self.notifier.show_toast(
                "Your results could not be saved to the server.", ToastType.WARNING
            )

        self.summary = summary
        self.phase = StudyPhase.COMPLETED
        self._next_generation()
        logger.info(
            f"Session {session_id} ended: {correct}/{cards_studied} correct "
            f"({accuracy}%), {duration}s, submitted={submitted}"
        )
        return summary

    async def back_to_modules(self) -> Optional[SessionSummary]:
        """
        Abandon the current session and return to module selection.

        A session with cards that is still being presented is ended first so
        its tallies and position are saved.
        """
        summary = None
        if self.evaluating:
            # The in-flight recording becomes stale
            self._next_generation()
            self.evaluating = False
        if self.phase == StudyPhase.PRESENTING and self.session_id and self.flashcards:
            summary = await self.end_session()

        self._next_generation()
        self._reset_session()
        self.evaluating = False
        self.phase = StudyPhase.MODULE_SELECTION
        return summary

    # =========================================================================
    # Card interaction
    # =========================================================================

    def flip(self) -> CardFace:
        """Toggle a flip card between its question and answer."""
        card = self._require_card()
        if card.is_multiple_choice:
            raise InvalidStateError("Multiple-choice cards cannot be flipped")

        if self.card_face == CardFace.QUESTION_SHOWN:
            self.card_face = CardFace.ANSWER_SHOWN
        else:
            self.card_face = CardFace.QUESTION_SHOWN
        return self.card_face

    async def record_answer(self, correct: bool) -> bool:
        """
        Grade the current flip card and move on.

        Advances to the next card, or ends the session when this was the
        last card. A failed recording is surfaced but still advances.

        Args:
            correct: The user's self-reported result

        Returns:
            True if the backend accepted the performance record
        """
        card = self._require_card()
        if card.is_multiple_choice:
            raise InvalidStateError("Multiple-choice cards are answered with select_option()")

        generation = self._generation
        recorded = await self._record(card, correct, generation)
        if self._is_stale(generation):
            return recorded

        if self.is_last_card:
            await self.end_session()
        else:
            self._show_card(self.current_index + 1)
        return recorded

    async def select_option(self, option: str) -> AnswerFeedback:
        """
        Answer the current multiple-choice card.

        Records correctness immediately and keeps the card on screen with
        feedback; the user moves on with navigate(NEXT).

        Raises:
            InvalidStateError: Not a multiple-choice card, or already answered
            ValidationError: option is not one of the card's options
        """
        card = self._require_card()
        if not card.is_multiple_choice:
            raise InvalidStateError("Flip cards are answered with record_answer()")
        if self.selected_option is not None:
            raise InvalidStateError("This card has already been answered")
        if option not in card.options:
            raise ValidationError(f"Not an option for this card: {option}")

        self.selected_option = option
        self.card_face = CardFace.ANSWERED
        correct = card.is_correct_option(option)
        recorded = await self._record(card, correct, self._generation)
        return AnswerFeedback(
            correct=correct,
            selected=option,
            correct_answer=card.answer,
            recorded=recorded,
        )

    def navigate(self, direction: NavigationDirection) -> bool:
        """
        Move to the previous or next card.

        Clamped at both ends of the sequence.

        Returns:
            True if the cursor moved

        Raises:
            InvalidStateError: Not presenting, or an answer is being recorded
        """
        self._require_phase(StudyPhase.PRESENTING)
        if self.evaluating:
            raise InvalidStateError("Wait for the current answer to be recorded")

        target = self.current_index + direction.step
        if not 0 <= target < len(self.flashcards):
            return False
        self._show_card(target)
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    async def _record(self, card: Flashcard, correct: bool, generation: int) -> bool:
        """Send one card's result and tally it once per card."""
        index = self.current_index
        response_time = max(int((self.clock() - self._card_started_at) * 1000), 0)

        self.evaluating = True
        try:
            await self.study.record_performance(
                card.id, PerformanceRequest(correct=correct, response_time=response_time)
            )
        except ServiceError as e:
            if self._is_stale(generation):
                return False
            logger.error(f"Failed to record answer for card {card.id}: {e}")
            self._surface(e, "Failed to record answer. Please try again.")
            return False
        finally:
            if not self._is_stale(generation):
                self.evaluating = False

        if self._is_stale(generation):
            logger.debug(f"Ignoring stale answer for card {card.id}")
            return True

        if index not in self._tallied and self.total_studied < len(self.flashcards):
            self._tallied.add(index)
            self.total_studied += 1
            if correct:
                self.correct_count += 1
        return True

    def _show_card(self, index: int) -> None:
        self.current_index = index
        card = self.current_card
        if card is not None and card.is_multiple_choice:
            self.card_face = CardFace.UNANSWERED
        else:
            self.card_face = CardFace.QUESTION_SHOWN
        self.selected_option = None
        self._card_started_at = self.clock()

    def _reset_session(self) -> None:
        self.session_id: Optional[str] = None
        self.module_id: Optional[str] = None
        self.module_title: str = ""
        self.flashcards: list[Flashcard] = []
        self.current_index: int = 0
        self.correct_count: int = 0
        self.total_studied: int = 0
        self.card_face: CardFace = CardFace.QUESTION_SHOWN
        self.selected_option: Optional[str] = None
        self._tallied: set[int] = set()
        self._started_at: float = 0.0
        self._card_started_at: float = 0.0

    def _require_phase(self, *phases: StudyPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidStateError(
                f"Not allowed while {self.phase.value} (expected {allowed})"
            )

    def _require_card(self) -> Flashcard:
        self._require_phase(StudyPhase.PRESENTING)
        if self.evaluating:
            raise InvalidStateError("Wait for the current answer to be recorded")
        card = self.current_card
        if card is None:
            raise InvalidStateError("This session has no cards")
        return card

    def _find_module(self, module_id: str) -> Optional[StudyModule]:
        return next((m for m in self.modules if m.id == module_id), None)

    def _module_title(self, module_id: Optional[str]) -> str:
        if module_id is None:
            return ALL_CARDS_TITLE
        module = self._find_module(module_id)
        return module.title if module else ""

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _surface(self, error: ServiceError, fallback: str) -> None:
        self.last_error = error
        self.notifier.show_toast(user_message(error, fallback), ToastType.ERROR)
