"""
Unit tests for StudySessionController.

Tests the client-side study session state machine, focusing on:
- Module selection and session start (fresh start vs resume)
- Flip-card answer recording with auto-advance
- Multiple-choice selection without auto-advance
- Navigation bounds and per-card state reset
- Session end summary, accuracy and submission failures
- Stale responses after the user moved on

Test Organization:
    - TestModuleSelection: Module list and selection validation
    - TestStartSession: Fresh start, resume and start failures
    - TestFlipCards: Flip protocol and answer recording
    - TestMultipleChoice: Option selection protocol
    - TestNavigation: Previous/next clamping and state reset
    - TestEndSession: Summary, accuracy, toasts, submission failure
    - TestBackToModules: Abandoning sessions and stale responses
    - TestCounterInvariants: correct_count <= total_studied <= card count
"""

import asyncio
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from smartflash.config import StudyConfig
from smartflash.enums.api import ToastType
from smartflash.enums.learning import (
    CardFace,
    NavigationDirection,
    QuestionType,
    StudyPhase,
)
from smartflash.middleware.error_handling import (
    InvalidStateError,
    NetworkError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from smartflash.models.learning import (
    EndSessionRequest,
    EndSessionResponse,
    Flashcard,
    ModuleProgress,
    PerformanceRequest,
    SessionRef,
    StartSessionResponse,
    StudyModule,
)
from smartflash.services.learning import ALL_CARDS_TITLE, StudySessionController


# =============================================================================
# Test Data Constants
# =============================================================================

DEFAULT_SESSION_ID: str = "session-1"
DEFAULT_MODULE_ID: str = "module-1"
DEFAULT_MODULE_TITLE: str = "Cell Biology"
MC_OPTIONS: list[str] = ["Mitochondria", "Nucleus", "Ribosome"]
MC_ANSWER: str = "Mitochondria"


# =============================================================================
# Helper Functions - Mock Object Factories
# =============================================================================


def create_flip_cards(count: int) -> list[Flashcard]:
    return [
        Flashcard(id=f"card-{i}", question=f"Question {i}", answer=f"Answer {i}")
        for i in range(count)
    ]


def create_mc_cards(count: int) -> list[Flashcard]:
    return [
        Flashcard(
            id=f"mc-{i}",
            question=f"Which organelle {i}?",
            answer=MC_ANSWER,
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=MC_OPTIONS,
        )
        for i in range(count)
    ]


def create_start_response(
    cards: list[Flashcard],
    start_index: Optional[int] = None,
    progress: Optional[ModuleProgress] = None,
    session_id: str = DEFAULT_SESSION_ID,
) -> StartSessionResponse:
    return StartSessionResponse(
        session=SessionRef(id=session_id),
        flashcards=cards,
        start_index=start_index,
        progress=progress,
    )


def create_study_service(response: StartSessionResponse) -> MagicMock:
    study = MagicMock()
    study.start_session = AsyncMock(return_value=response)
    study.record_performance = AsyncMock(return_value={"id": "perf-1"})
    study.end_session = AsyncMock(return_value=EndSessionResponse())
    return study


def create_module_service(modules: Optional[list[StudyModule]] = None) -> MagicMock:
    service = MagicMock()
    if modules is None:
        modules = [
            StudyModule(id=DEFAULT_MODULE_ID, title=DEFAULT_MODULE_TITLE, flashcard_count=3)
        ]
    service.list_modules = AsyncMock(return_value=modules)
    return service


def create_controller(
    notifier,
    clock,
    cards: Optional[list[Flashcard]] = None,
    start_index: Optional[int] = None,
    progress: Optional[ModuleProgress] = None,
) -> StudySessionController:
    response = create_start_response(
        create_flip_cards(3) if cards is None else cards, start_index, progress
    )
    return StudySessionController(
        study=create_study_service(response),
        modules=create_module_service(),
        notifier=notifier,
        config=StudyConfig(),
        clock=clock,
    )


async def start(controller: StudySessionController, module_id: Optional[str] = None) -> None:
    await controller.load_modules()
    assert await controller.select_module(module_id) is True


# =============================================================================
# Tests
# =============================================================================


class TestModuleSelection:
    """Tests for loading modules and validating the selection."""

    @pytest.mark.asyncio
    async def test_initial_state(self, notifier, clock):
        controller = create_controller(notifier, clock)

        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.session_id is None
        assert controller.current_card is None

    @pytest.mark.asyncio
    async def test_load_modules(self, notifier, clock):
        controller = create_controller(notifier, clock)

        modules = await controller.load_modules()

        assert [m.id for m in modules] == [DEFAULT_MODULE_ID]
        assert controller.modules == modules

    @pytest.mark.asyncio
    async def test_load_modules_failure_keeps_list(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await controller.load_modules()
        controller.module_service.list_modules.side_effect = NetworkError("offline")

        modules = await controller.load_modules()

        assert [m.id for m in modules] == [DEFAULT_MODULE_ID]
        assert notifier.last.type == ToastType.ERROR

    @pytest.mark.asyncio
    async def test_unknown_module_rejected_without_state_change(self, notifier, clock):
        controller = create_controller(notifier, clock)

        with pytest.raises(NotFoundError):
            await controller.select_module("no-such-module")

        assert controller.phase == StudyPhase.MODULE_SELECTION
        controller.study.start_session.assert_not_awaited()
        # The list is refreshed before rejecting
        controller.module_service.list_modules.assert_awaited()

    @pytest.mark.asyncio
    async def test_select_module_loads_list_on_demand(self, notifier, clock):
        controller = create_controller(notifier, clock)

        assert await controller.select_module(DEFAULT_MODULE_ID) is True

        assert controller.module_id == DEFAULT_MODULE_ID
        assert controller.module_title == DEFAULT_MODULE_TITLE
        controller.study.start_session.assert_awaited_once_with(module_id=DEFAULT_MODULE_ID)

    @pytest.mark.asyncio
    async def test_select_while_presenting_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        with pytest.raises(InvalidStateError):
            await controller.select_module(None)


class TestStartSession:
    """Tests for session start and the resume decision."""

    @pytest.mark.asyncio
    async def test_all_cards_fresh_start(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(5))

        await start(controller, None)

        assert controller.phase == StudyPhase.PRESENTING
        assert controller.session_id == DEFAULT_SESSION_ID
        assert controller.module_id is None
        assert controller.module_title == ALL_CARDS_TITLE
        assert controller.current_index == 0
        assert controller.correct_count == 0
        assert controller.total_studied == 0
        assert controller.card_face == CardFace.QUESTION_SHOWN
        controller.study.start_session.assert_awaited_once_with(module_id=None)

    @pytest.mark.asyncio
    async def test_resume_from_reported_progress(self, notifier, clock):
        controller = create_controller(
            notifier,
            clock,
            cards=create_flip_cards(10),
            start_index=4,
            progress=ModuleProgress(cards_studied=4, total_correct=3),
        )

        await start(controller, DEFAULT_MODULE_ID)

        assert controller.current_index == 4
        assert controller.total_studied == 4
        assert controller.correct_count == 3

    @pytest.mark.asyncio
    async def test_start_index_zero_with_progress_is_fresh_start(self, notifier, clock):
        controller = create_controller(
            notifier,
            clock,
            cards=create_flip_cards(10),
            start_index=0,
            progress=ModuleProgress(cards_studied=10, total_correct=7, is_completed=True),
        )

        await start(controller, DEFAULT_MODULE_ID)

        assert controller.current_index == 0
        assert controller.total_studied == 0
        assert controller.correct_count == 0

    @pytest.mark.asyncio
    async def test_start_index_without_progress_is_fresh_start(self, notifier, clock):
        controller = create_controller(
            notifier, clock, cards=create_flip_cards(10), start_index=3
        )

        await start(controller, DEFAULT_MODULE_ID)

        assert controller.current_index == 0
        assert controller.total_studied == 0

    @pytest.mark.asyncio
    async def test_start_failure_returns_to_module_selection(self, notifier, clock):
        controller = create_controller(notifier, clock)
        controller.study.start_session.side_effect = NetworkError("Cannot connect")

        started = await controller.select_module(None)

        assert started is False
        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.session_id is None
        assert isinstance(controller.last_error, NetworkError)
        assert controller.last_error.retryable is True
        assert notifier.last.type == ToastType.ERROR
        assert "Cannot connect" in notifier.last.message

    @pytest.mark.asyncio
    async def test_retry_after_start_failure(self, notifier, clock):
        controller = create_controller(notifier, clock)
        response = create_start_response(create_flip_cards(2))
        controller.study.start_session.side_effect = [ServiceError("boom"), response]

        assert await controller.select_module(None) is False
        assert await controller.select_module(None) is True

        assert controller.phase == StudyPhase.PRESENTING
        assert controller.last_error is None

    @pytest.mark.asyncio
    async def test_empty_session_offers_only_back(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=[])

        await start(controller)

        assert controller.is_empty is True
        assert controller.current_card is None
        with pytest.raises(InvalidStateError):
            await controller.record_answer(True)
        with pytest.raises(InvalidStateError):
            controller.flip()

        await controller.back_to_modules()

        assert controller.phase == StudyPhase.MODULE_SELECTION
        controller.study.end_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_start_response_ignored(self, notifier, clock):
        controller = create_controller(notifier, clock)
        response = create_start_response(create_flip_cards(3))

        async def leave_then_respond(**kwargs):
            await controller.back_to_modules()
            return response

        controller.study.start_session.side_effect = leave_then_respond

        started = await controller.select_module(None)

        assert started is False
        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.session_id is None
        assert controller.flashcards == []


class TestFlipCards:
    """Tests for the flip-card protocol."""

    @pytest.mark.asyncio
    async def test_flip_toggles_faces(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        assert controller.flip() == CardFace.ANSWER_SHOWN
        assert controller.flip() == CardFace.QUESTION_SHOWN

    @pytest.mark.asyncio
    async def test_record_answer_advances_and_reports_response_time(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        controller.flip()
        clock.advance(1.5)

        recorded = await controller.record_answer(True)

        assert recorded is True
        assert controller.current_index == 1
        assert controller.card_face == CardFace.QUESTION_SHOWN
        assert controller.total_studied == 1
        assert controller.correct_count == 1
        controller.study.record_performance.assert_awaited_once_with(
            "card-0", PerformanceRequest(correct=True, response_time=1500)
        )

    @pytest.mark.asyncio
    async def test_single_card_correct_ends_session(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(1))
        await start(controller)
        phases = []

        async def capture_phase(session_id, stats):
            phases.append(controller.phase)
            return EndSessionResponse()

        controller.study.end_session.side_effect = capture_phase

        controller.flip()
        await controller.record_answer(True)

        assert phases == [StudyPhase.ENDING]
        assert controller.phase == StudyPhase.COMPLETED
        assert controller.total_studied == 1
        assert controller.correct_count == 1
        assert controller.summary.cards_studied == 1
        assert controller.summary.correct_answers == 1
        assert controller.summary.accuracy == 100

    @pytest.mark.asyncio
    async def test_recording_failure_does_not_block_progress(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        controller.study.record_performance.side_effect = NetworkError("timeout")

        recorded = await controller.record_answer(True)

        assert recorded is False
        assert controller.current_index == 1
        assert controller.evaluating is False
        assert controller.total_studied == 0
        assert notifier.last.type == ToastType.ERROR

    @pytest.mark.asyncio
    async def test_record_answer_on_multiple_choice_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(2))
        await start(controller)

        with pytest.raises(InvalidStateError):
            await controller.record_answer(True)

    @pytest.mark.asyncio
    async def test_record_answer_before_start_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock)

        with pytest.raises(InvalidStateError):
            await controller.record_answer(True)

    @pytest.mark.asyncio
    async def test_reanswering_a_card_counts_once(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        await controller.record_answer(True)
        controller.navigate(NavigationDirection.PREVIOUS)
        await controller.record_answer(False)

        assert controller.current_index == 1
        assert controller.total_studied == 1
        assert controller.correct_count == 1
        assert controller.study.record_performance.await_count == 2


class TestMultipleChoice:
    """Tests for the multiple-choice protocol."""

    @pytest.mark.asyncio
    async def test_wrong_option_records_without_advancing(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(3))
        await start(controller)
        assert controller.card_face == CardFace.UNANSWERED

        feedback = await controller.select_option("Nucleus")

        assert feedback.correct is False
        assert feedback.correct_answer == MC_ANSWER
        assert feedback.recorded is True
        assert controller.total_studied == 1
        assert controller.correct_count == 0
        assert controller.current_index == 0
        assert controller.card_face == CardFace.ANSWERED

        assert controller.navigate(NavigationDirection.NEXT) is True

        assert controller.current_index == 1
        assert controller.card_face == CardFace.UNANSWERED
        assert controller.selected_option is None

    @pytest.mark.asyncio
    async def test_correct_option(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(3))
        await start(controller)

        feedback = await controller.select_option(MC_ANSWER)

        assert feedback.correct is True
        assert controller.correct_count == 1
        controller.study.record_performance.assert_awaited_once()
        card_id, performance = controller.study.record_performance.await_args.args
        assert card_id == "mc-0"
        assert performance.correct is True

    @pytest.mark.asyncio
    async def test_second_selection_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(3))
        await start(controller)
        await controller.select_option("Nucleus")

        with pytest.raises(InvalidStateError):
            await controller.select_option(MC_ANSWER)

        assert controller.correct_count == 0
        assert controller.study.record_performance.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_option_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(3))
        await start(controller)

        with pytest.raises(ValidationError):
            await controller.select_option("Golgi")

        assert controller.card_face == CardFace.UNANSWERED
        controller.study.record_performance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_flip_on_multiple_choice_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(1))
        await start(controller)

        with pytest.raises(InvalidStateError):
            controller.flip()

    @pytest.mark.asyncio
    async def test_multiple_choice_without_options_uses_flip(self, notifier, clock):
        card = Flashcard(
            id="mc-empty",
            question="Q",
            answer="A",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=[],
        )
        controller = create_controller(notifier, clock, cards=[card])
        await start(controller)

        assert controller.card_face == CardFace.QUESTION_SHOWN
        assert controller.flip() == CardFace.ANSWER_SHOWN

    @pytest.mark.asyncio
    async def test_last_card_answer_does_not_end_session(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(1))
        await start(controller, DEFAULT_MODULE_ID)

        await controller.select_option(MC_ANSWER)

        assert controller.phase == StudyPhase.PRESENTING
        assert controller.navigate(NavigationDirection.NEXT) is False
        controller.study.end_session.assert_not_awaited()

        summary = await controller.end_session()

        assert summary.module_completed is True
        assert summary.accuracy == 100

    @pytest.mark.asyncio
    async def test_recording_failure_still_marks_answered(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_mc_cards(2))
        await start(controller)
        controller.study.record_performance.side_effect = ServiceError("oops")

        feedback = await controller.select_option("Nucleus")

        assert feedback.recorded is False
        assert controller.card_face == CardFace.ANSWERED
        assert controller.total_studied == 0
        assert controller.navigate(NavigationDirection.NEXT) is True


class TestNavigation:
    """Tests for manual navigation."""

    @pytest.mark.asyncio
    async def test_previous_at_first_card_is_noop(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        assert controller.navigate(NavigationDirection.PREVIOUS) is False
        assert controller.current_index == 0

    @pytest.mark.asyncio
    async def test_next_at_last_card_is_noop(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        assert controller.navigate(NavigationDirection.NEXT) is True
        assert controller.navigate(NavigationDirection.NEXT) is True
        assert controller.is_last_card is True
        assert controller.navigate(NavigationDirection.NEXT) is False
        assert controller.current_index == 2
        assert controller.phase == StudyPhase.PRESENTING

    @pytest.mark.asyncio
    async def test_navigation_resets_flip_and_timer(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        controller.flip()
        clock.advance(5)

        controller.navigate(NavigationDirection.NEXT)
        clock.advance(2)
        await controller.record_answer(False)

        assert controller.card_face == CardFace.QUESTION_SHOWN
        _, performance = controller.study.record_performance.await_args.args
        assert performance.response_time == 2000

    @pytest.mark.asyncio
    async def test_navigation_blocked_while_recording(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        async def try_navigate(card_id, performance):
            assert controller.evaluating is True
            with pytest.raises(InvalidStateError):
                controller.navigate(NavigationDirection.NEXT)
            return {}

        controller.study.record_performance.side_effect = try_navigate

        await controller.record_answer(True)

        assert controller.evaluating is False
        assert controller.current_index == 1

    @pytest.mark.asyncio
    async def test_navigation_before_start_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock)

        with pytest.raises(InvalidStateError):
            controller.navigate(NavigationDirection.NEXT)


class TestEndSession:
    """Tests for ending a session."""

    @pytest.mark.asyncio
    async def test_zero_cards_studied_reports_zero_accuracy(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        clock.advance(65.7)

        summary = await controller.end_session()

        assert summary.cards_studied == 0
        assert summary.accuracy == 0
        assert summary.duration_seconds == 65
        controller.study.end_session.assert_awaited_once_with(
            DEFAULT_SESSION_ID,
            EndSessionRequest(
                cards_studied=0,
                correct_answers=0,
                session_duration=65,
                module_id=None,
                current_card_index=0,
            ),
        )

    @pytest.mark.asyncio
    async def test_resumed_session_submits_carried_over_totals(self, notifier, clock):
        controller = create_controller(
            notifier,
            clock,
            cards=create_flip_cards(10),
            start_index=4,
            progress=ModuleProgress(cards_studied=4, total_correct=3),
        )
        await start(controller, DEFAULT_MODULE_ID)

        await controller.record_answer(True)
        summary = await controller.end_session()

        assert summary.cards_studied == 5
        assert summary.correct_answers == 4
        assert summary.accuracy == 80
        assert summary.final_index == 5
        assert summary.module_completed is False
        _, stats = controller.study.end_session.await_args.args
        assert stats.module_id == DEFAULT_MODULE_ID
        assert stats.current_card_index == 5

    @pytest.mark.asyncio
    async def test_accuracy_is_rounded_percentage(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(8))
        await start(controller)

        await controller.record_answer(True)
        for _ in range(6):
            await controller.record_answer(False)
        summary = await controller.end_session()

        # 1 / 7 = 14.28...
        assert summary.accuracy == 14

    @pytest.mark.asyncio
    async def test_generic_end_toast(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(2))
        await start(controller)

        await controller.record_answer(True)
        await controller.record_answer(False)

        toast = notifier.last
        assert toast.type == ToastType.SUCCESS
        assert toast.message == "Great work! 2 cards studied with 50% accuracy!"
        assert toast.duration_ms == 3000
        assert controller.redirect_delay_ms == 1000

    @pytest.mark.asyncio
    async def test_module_completed_toast(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(1))
        await start(controller, DEFAULT_MODULE_ID)

        await controller.record_answer(True)

        assert controller.summary.module_completed is True
        toast = notifier.last
        assert toast.message.startswith("Module completed!")
        assert toast.duration_ms == 4000
        assert controller.redirect_delay_ms == 1500

    @pytest.mark.asyncio
    async def test_submission_failure_still_completes(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(1))
        await start(controller)
        controller.study.end_session.side_effect = NetworkError("offline")

        await controller.record_answer(True)

        assert controller.phase == StudyPhase.COMPLETED
        assert controller.summary.submitted is False
        assert controller.summary.accuracy == 100
        assert isinstance(controller.last_error, NetworkError)
        assert [t.type for t in notifier.toasts] == [ToastType.SUCCESS, ToastType.WARNING]

    @pytest.mark.asyncio
    async def test_end_session_twice_rejected(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        await controller.end_session()

        with pytest.raises(InvalidStateError):
            await controller.end_session()

    @pytest.mark.asyncio
    async def test_new_session_after_completion(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        await controller.end_session()

        assert await controller.select_module(None) is True

        assert controller.phase == StudyPhase.PRESENTING
        assert controller.summary is None
        assert controller.study.start_session.await_count == 2


class TestBackToModules:
    """Tests for abandoning a session."""

    @pytest.mark.asyncio
    async def test_back_ends_and_resets(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)
        await controller.record_answer(True)

        summary = await controller.back_to_modules()

        assert summary is not None
        assert summary.cards_studied == 1
        controller.study.end_session.assert_awaited_once()
        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.session_id is None
        assert controller.flashcards == []
        assert controller.current_index == 0
        assert controller.correct_count == 0
        assert controller.total_studied == 0

    @pytest.mark.asyncio
    async def test_back_after_completion_does_not_end_again(self, notifier, clock):
        controller = create_controller(notifier, clock, cards=create_flip_cards(1))
        await start(controller)
        await controller.record_answer(True)

        summary = await controller.back_to_modules()

        assert summary is None
        controller.study.end_session.assert_awaited_once()
        assert controller.phase == StudyPhase.MODULE_SELECTION

    @pytest.mark.asyncio
    async def test_stale_answer_response_ignored(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller)

        async def leave_mid_recording(card_id, performance):
            await controller.back_to_modules()
            return {}

        controller.study.record_performance.side_effect = leave_mid_recording

        await controller.record_answer(True)

        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.total_studied == 0
        assert controller.current_index == 0
        assert controller.evaluating is False
        _, stats = controller.study.end_session.await_args.args
        assert stats.cards_studied == 0

    @pytest.mark.asyncio
    async def test_back_while_ending_ignores_late_end_response(self, notifier, clock):
        controller = create_controller(notifier, clock)
        await start(controller, DEFAULT_MODULE_ID)
        await controller.record_answer(True)
        gate = asyncio.Event()

        async def slow_end(session_id, stats):
            await gate.wait()
            return EndSessionResponse()

        controller.study.end_session.side_effect = slow_end
        ending = asyncio.create_task(controller.end_session())
        await asyncio.sleep(0)
        assert controller.phase == StudyPhase.ENDING

        assert await controller.back_to_modules() is None
        gate.set()
        summary = await ending

        assert summary.session_id == DEFAULT_SESSION_ID
        assert summary.module_id == DEFAULT_MODULE_ID
        assert summary.cards_studied == 1
        assert summary.final_index == 1
        assert summary.submitted is True
        assert controller.phase == StudyPhase.MODULE_SELECTION
        assert controller.summary is None
        assert notifier.toasts == []
        controller.study.end_session.assert_awaited_once_with(
            DEFAULT_SESSION_ID,
            EndSessionRequest(
                cards_studied=1,
                correct_answers=1,
                session_duration=0,
                module_id=DEFAULT_MODULE_ID,
                current_card_index=1,
            ),
        )


class TestCounterInvariants:
    """correct_count <= total_studied <= number of cards, after every answer."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "answers",
        [
            [True, True, True, True, True],
            [False, False, False, False, False],
            [True, False, True, False, True],
        ],
    )
    async def test_flip_answers(self, notifier, clock, answers):
        cards = create_flip_cards(len(answers))
        controller = create_controller(notifier, clock, cards=cards)
        await start(controller)

        for correct in answers:
            await controller.record_answer(correct)
            assert controller.correct_count <= controller.total_studied <= len(cards)

        assert controller.total_studied == len(answers)
        assert controller.correct_count == sum(answers)

    @pytest.mark.asyncio
    async def test_revisiting_cards(self, notifier, clock):
        cards = create_flip_cards(3)
        controller = create_controller(notifier, clock, cards=cards)
        await start(controller)

        for _ in range(4):
            await controller.record_answer(True)
            controller.navigate(NavigationDirection.PREVIOUS)
            assert controller.correct_count <= controller.total_studied <= len(cards)

    @pytest.mark.asyncio
    async def test_inflated_progress_is_clamped(self, notifier, clock):
        cards = create_flip_cards(4)
        controller = create_controller(
            notifier,
            clock,
            cards=cards,
            start_index=2,
            progress=ModuleProgress(cards_studied=9, total_correct=12),
        )
        await start(controller, DEFAULT_MODULE_ID)

        assert controller.total_studied == 4
        assert controller.correct_count == 4

        await controller.record_answer(True)

        assert controller.correct_count <= controller.total_studied <= len(cards)
