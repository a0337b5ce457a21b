"""
SmartFlash Command Line Client

Study flashcards against a running SmartFlash backend.

Setup:
    1. Start the backend (default http://localhost:5000)
    2. Optionally set SMARTFLASH_API_BASE_URL in .env or the environment
    3. Log in once; the token is kept in ~/.smartflash/credentials.json

Usage:
    smartflash login --email me@example.com
    smartflash signup --name Ada --email ada@example.com --age 20
    smartflash logout
    smartflash profile
    smartflash dashboard

    # Flashcards
    smartflash cards
    smartflash create-card "What is 2+2?" "4" --subject math --difficulty basic

    # Study modules
    smartflash modules
    smartflash module <module_id>
    smartflash generate-module "Photosynthesis" --cards 15 --preview
    smartflash generate-module "Photosynthesis" --cards 15
    smartflash delete-module <module_id>

    # Interactive study session
    smartflash study
    smartflash study --module <module_id>

Environment Variables (set in .env or environment):
    - SMARTFLASH_API_BASE_URL: Backend URL
    - SMARTFLASH_STORAGE_BACKEND: secure | local | memory
    - SMARTFLASH_DEBUG: Enable verbose logging
"""

import argparse
import asyncio
import getpass
import logging
import sys
from pathlib import Path
from typing import Awaitable, Callable, Optional, TextIO

from dotenv import load_dotenv

# Load environment variables before settings are read
if Path(".env").exists():
    load_dotenv(".env")

from smartflash.config import configure_logging, settings
from smartflash.enums.learning import (
    CardFace,
    DifficultyLevel,
    EducationLevel,
    NavigationDirection,
    StudyPhase,
)
from smartflash.middleware.auth import SessionContext
from smartflash.middleware.error_handling import (
    InvalidStateError,
    NotFoundError,
    ServiceError,
    user_message,
    ValidationError,
)
from smartflash.models.learning import SessionSummary
from smartflash.screens import (
    create_flashcard,
    dashboard,
    delete_module,
    generate_module,
    login,
    logout,
    module_detail,
    preview_module,
    signup,
    validate_card_count,
)
from smartflash.services.api import ApiClient, Backend
from smartflash.services.learning import StudySessionController
from smartflash.services.notifications import ConsoleNotifier, Notifier
from smartflash.services.storage import get_token_store

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], Awaitable[str]]


async def read_stdin(prompt: str) -> str:
    """Read one line without blocking the event loop."""
    return await asyncio.to_thread(input, prompt)


# =============================================================================
# Output helpers
# =============================================================================


def print_summary(summary: SessionSummary, out: TextIO) -> None:
    print("\n" + "=" * 50, file=out)
    print("📊 SESSION SUMMARY", file=out)
    print("=" * 50, file=out)
    print(f"Cards studied: {summary.cards_studied}", file=out)
    print(f"Correct:       {summary.correct_answers}", file=out)
    print(f"Accuracy:      {summary.accuracy}%", file=out)
    print(f"Duration:      {summary.duration_seconds}s", file=out)
    if summary.module_completed:
        print("🎉 Module completed!", file=out)
    if not summary.submitted:
        print("⚠️  Results were not saved to the server", file=out)


def render_card(controller: StudySessionController, out: TextIO) -> None:
    card = controller.current_card
    if card is None:
        return

    print(f"\n{'─' * 50}", file=out)
    print(
        f"{controller.module_title}  Card {controller.current_index + 1} of "
        f"{len(controller.flashcards)} ({controller.progress_percent}%)",
        file=out,
    )
    if card.subject:
        print(f"[{card.subject}]", file=out)
    print(f"\nQ: {card.question}", file=out)

    if card.is_multiple_choice:
        for i, option in enumerate(card.options):
            marker = "→" if option == controller.selected_option else " "
            print(f" {marker} {i + 1}. {option}", file=out)
        if controller.card_face == CardFace.ANSWERED:
            print("   (n) next  (p) previous  (e) end  (q) quit", file=out)
        else:
            print("   Pick a number, or (n) next  (p) previous  (e) end  (q) quit", file=out)
    elif controller.card_face == CardFace.ANSWER_SHOWN:
        print(f"A: {card.answer}", file=out)
        print("   (c) correct  (w) wrong  (f) flip back  (q) quit", file=out)
    else:
        print("   (f) flip  (n) next  (p) previous  (e) end  (q) quit", file=out)


# =============================================================================
# Interactive study
# =============================================================================


async def choose_module(
    controller: StudySessionController, read_line: ReadLine, out: TextIO
) -> Optional[str]:
    """Ask which module to study; returns "" for all cards, None to cancel."""
    modules = await controller.load_modules()
    print("\n📚 Select Study Module", file=out)
    print("  0. All Cards", file=out)
    for i, module in enumerate(modules, 1):
        print(f"  {i}. {module.title} ({module.flashcard_count} cards)", file=out)

    while True:
        choice = (await read_line("Module number (q to cancel): ")).strip().lower()
        if choice == "q":
            return None
        if choice.isdigit() and int(choice) <= len(modules):
            index = int(choice)
            return "" if index == 0 else modules[index - 1].id
        print("❌ Invalid choice", file=out)


async def handle_study_command(
    controller: StudySessionController, command: str, out: TextIO
) -> bool:
    """
    Apply one study command.

    Returns:
        False when the user left the session
    """
    card = controller.current_card

    if command == "q":
        summary = await controller.back_to_modules()
        if summary:
            print_summary(summary, out)
        return False
    if command == "e":
        print_summary(await controller.end_session(), out)
        return False
    if command in ("n", "p"):
        direction = NavigationDirection.NEXT if command == "n" else NavigationDirection.PREVIOUS
        if not controller.navigate(direction):
            edge = "last" if command == "n" else "first"
            print(f"ℹ️  Already at the {edge} card", file=out)
            if controller.is_last_card and controller.card_face == CardFace.ANSWERED:
                print("   Press (e) to finish the session", file=out)
        return True
    if command == "f":
        controller.flip()
        return True
    if command in ("c", "w"):
        await controller.record_answer(correct=command == "c")
        if controller.phase == StudyPhase.COMPLETED and controller.summary:
            print_summary(controller.summary, out)
            return False
        return True
    if card is not None and card.is_multiple_choice and command.isdigit():
        index = int(command) - 1
        if not 0 <= index < len(card.options):
            print("❌ No such option", file=out)
            return True
        feedback = await controller.select_option(card.options[index])
        if feedback.correct:
            print("✓ Correct!", file=out)
        else:
            print("✗ Incorrect", file=out)
            print(f"   Correct Answer: {feedback.correct_answer}", file=out)
        return True

    print("❌ Unknown command", file=out)
    return True


async def run_study(
    controller: StudySessionController,
    module_id: Optional[str] = None,
    read_line: ReadLine = read_stdin,
    out: TextIO = sys.stdout,
) -> Optional[SessionSummary]:
    """
    Run one interactive study session.

    Args:
        controller: Session controller bound to a backend
        module_id: Module to study; None asks interactively
        read_line: Async line reader (stdin by default)
        out: Output stream

    Returns:
        The session summary, or None if no session ran to an end
    """
    if module_id is None:
        choice = await choose_module(controller, read_line, out)
        if choice is None:
            return None
        module_id = choice or None

    try:
        started = await controller.select_module(module_id)
    except NotFoundError as e:
        print(f"❌ {e.message}", file=out)
        return None
    if not started:
        return None

    if controller.is_empty:
        print("📭 No flashcards available. Create some flashcards first!", file=out)
        await controller.back_to_modules()
        return None

    while controller.phase == StudyPhase.PRESENTING:
        render_card(controller, out)
        try:
            command = (await read_line("> ")).strip().lower()
        except EOFError:
            command = "q"
        try:
            if not await handle_study_command(controller, command, out):
                break
        except (InvalidStateError, ValidationError) as e:
            print(f"⚠️  {e.message}", file=out)

    return controller.summary


# =============================================================================
# Commands
# =============================================================================


async def cmd_login(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    return 0 if await login(backend, notifier, args.email, password) else 1


async def cmd_signup(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Confirm password: ")
    result = await signup(
        backend,
        notifier,
        name=args.name,
        email=args.email,
        password=password,
        confirm_password=confirm,
        age=args.age,
        education_level=EducationLevel(args.education_level),
    )
    return 0 if result else 1


async def cmd_logout(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    await logout(backend, notifier)
    return 0


async def cmd_profile(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    profile = await backend.auth.get_profile()
    print(f"👤 {profile.name or '-'} <{profile.email or '-'}>")
    if profile.education_level:
        print(f"   Education: {profile.education_level}")
    print(f"   ID: {profile.id}")
    return 0


async def cmd_dashboard(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    view = await dashboard(backend)
    stats = view.stats
    print("\n📈 YOUR PROGRESS")
    print(f"  Total Cards: {stats.total_cards}")
    print(f"  Accuracy:    {stats.accuracy:.0f}%")
    print(f"  Day Streak:  {stats.streak}")
    print(f"  Today:       {stats.studied_today}")

    print("\n🕑 Recent Activity")
    if not view.recent_sessions:
        print("  No study sessions yet")
    for session in view.recent_sessions:
        when = session.started_at.strftime("%Y-%m-%d %H:%M") if session.started_at else "-"
        print(f"  {when}  {session.cards_studied} cards, {session.accuracy}% accuracy")

    print("\n📚 Study Modules")
    if not view.modules:
        print("  No study modules yet")
    for module in view.modules:
        print(f"  {module.title} ({module.flashcard_count} cards)  ID: {module.id}")
    return 0


async def cmd_cards(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    cards = await backend.flashcards.list_flashcards()
    if not cards:
        print("📭 No flashcards yet")
        return 0
    for card in cards:
        level = card.difficulty_level.value if card.difficulty_level else "-"
        print(f"• {card.question}")
        print(f"   {card.answer}  [{card.subject or '-'} / {level}]  ID: {card.id}")
    return 0


async def cmd_create_card(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    card = await create_flashcard(
        backend,
        notifier,
        question=args.question,
        answer=args.answer,
        subject=args.subject,
        difficulty=DifficultyLevel(args.difficulty),
    )
    return 0 if card else 1


async def cmd_modules(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    modules = await backend.modules.list_modules()
    if not modules:
        print("📭 No study modules yet")
        return 0
    for module in modules:
        ai = " 🤖" if module.is_ai_generated else ""
        done = ""
        if module.progress and module.progress.cards_studied:
            done = f"  {module.progress.progress_percent:.0f}% done"
        print(f"• {module.title}{ai} ({module.flashcard_count} cards){done}")
        print(f"   ID: {module.id}")
    return 0


async def cmd_module(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    view = await module_detail(backend, notifier, args.module_id)
    if view is None:
        return 1
    module = view.module
    print(f"\n📘 {module.title}")
    if module.description:
        print(f"   {module.description}")
    print(f"   Cards: {view.card_count}  Difficulty: {view.difficulty}")
    if module.estimated_hours:
        print(f"   Estimated: {module.estimated_hours:g}h")
    if module.topics:
        print(f"   Topics: {', '.join(module.topics)}")
    print(f"   Progress: {view.progress_label}")
    if view.sample_cards:
        print("\n   Sample cards:")
        for card in view.sample_cards:
            print(f"   • {card.question}")
    return 0


async def cmd_generate_module(
    backend: Backend, notifier: Notifier, args: argparse.Namespace
) -> int:
    error = validate_card_count(str(args.cards))
    if error:
        print(f"❌ {error}")
        return 1

    options = dict(
        subject=args.subject,
        education_level=EducationLevel(args.education_level) if args.education_level else None,
        difficulty=DifficultyLevel(args.difficulty),
        number_of_cards=args.cards,
        estimated_hours=args.hours,
    )
    print(f"🤖 Generating '{args.topic}', this can take a minute...")
    if args.preview:
        result = await preview_module(backend, notifier, args.topic, **options)
    else:
        result = await generate_module(backend, notifier, args.topic, **options)
    if result is None:
        return 1

    print(f"\n📘 {result.module.title} ({len(result.flashcards)} cards)")
    for card in result.flashcards:
        print(f"   • {card.question}")
    if not args.preview:
        print(f"\n   ID: {result.module.id}")
    return 0


async def cmd_delete_module(
    backend: Backend, notifier: Notifier, args: argparse.Namespace
) -> int:
    return 0 if await delete_module(backend, notifier, args.module_id) else 1


async def cmd_study(backend: Backend, notifier: Notifier, args: argparse.Namespace) -> int:
    controller = StudySessionController(backend.study, backend.modules, notifier)
    await run_study(controller, module_id=args.module)
    return 0


COMMANDS = {
    "login": cmd_login,
    "signup": cmd_signup,
    "logout": cmd_logout,
    "profile": cmd_profile,
    "dashboard": cmd_dashboard,
    "cards": cmd_cards,
    "create-card": cmd_create_card,
    "modules": cmd_modules,
    "module": cmd_module,
    "generate-module": cmd_generate_module,
    "delete-module": cmd_delete_module,
    "study": cmd_study,
}


# =============================================================================
# CLI Setup
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="smartflash",
        description="Study flashcards with a SmartFlash backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--api-url",
        default=None,
        help=f"Backend base URL (default: {settings.API_BASE_URL})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Auth
    login_parser = subparsers.add_parser("login", help="Log in and store the token")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", help="Prompted when omitted")

    signup_parser = subparsers.add_parser("signup", help="Create an account")
    signup_parser.add_argument("--name", required=True)
    signup_parser.add_argument("--email", required=True)
    signup_parser.add_argument("--password", help="Prompted (twice) when omitted")
    signup_parser.add_argument("--age", type=int, default=None)
    signup_parser.add_argument(
        "--education-level",
        choices=[level.value for level in EducationLevel],
        default=EducationLevel.HIGH_SCHOOL.value,
    )

    subparsers.add_parser("logout", help="Forget the stored token")
    subparsers.add_parser("profile", help="Show the logged-in user")
    subparsers.add_parser("dashboard", help="Show stats, recent sessions and modules")

    # Flashcards
    subparsers.add_parser("cards", help="List flashcards")
    create_parser_ = subparsers.add_parser("create-card", help="Create a flashcard")
    create_parser_.add_argument("question")
    create_parser_.add_argument("answer")
    create_parser_.add_argument("--subject", default=None)
    create_parser_.add_argument(
        "--difficulty",
        choices=[level.value for level in DifficultyLevel],
        default=DifficultyLevel.INTERMEDIATE.value,
    )

    # Modules
    subparsers.add_parser("modules", help="List study modules")
    module_parser = subparsers.add_parser("module", help="Show a study module")
    module_parser.add_argument("module_id")

    generate_parser = subparsers.add_parser(
        "generate-module", help="Generate a study module with AI"
    )
    generate_parser.add_argument("topic")
    generate_parser.add_argument("--subject", default=None)
    generate_parser.add_argument(
        "--education-level",
        choices=[level.value for level in EducationLevel],
        default=None,
    )
    generate_parser.add_argument(
        "--difficulty",
        choices=[level.value for level in DifficultyLevel],
        default=DifficultyLevel.INTERMEDIATE.value,
    )
    generate_parser.add_argument(
        "--cards", type=int, default=20, help="Number of cards, 5-100 (default: 20)"
    )
    generate_parser.add_argument("--hours", type=int, default=None, help="Estimated hours")
    generate_parser.add_argument(
        "--preview", action="store_true", help="Show the module without saving it"
    )

    delete_parser = subparsers.add_parser("delete-module", help="Delete a study module")
    delete_parser.add_argument("module_id")

    # Study
    study_parser = subparsers.add_parser("study", help="Run an interactive study session")
    study_parser.add_argument(
        "--module", default=None, help="Module ID (default: choose interactively)"
    )

    return parser


async def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(logging.DEBUG if args.debug else None)

    context = await SessionContext(store=get_token_store()).load()
    notifier = ConsoleNotifier()

    async with ApiClient(context=context, base_url=args.api_url) as client:
        backend = Backend(client)
        try:
            return await COMMANDS[args.command](backend, notifier, args)
        except ServiceError as e:
            print(f"❌ {user_message(e, 'Request failed')}")
            return 1


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n👋 Bye")
        sys.exit(130)


if __name__ == "__main__":
    run()
