"""
Screens

Form-submit flows outside the study session. Each screen validates its
inputs, calls the backend through a Backend, and reports the outcome with
toasts; failures return None (or False) instead of raising.
"""

from smartflash.screens.auth import login, logout, signup
from smartflash.screens.dashboard import dashboard, DashboardView
from smartflash.screens.flashcards import create_flashcard
from smartflash.screens.modules import (
    delete_module,
    generate_module,
    module_detail,
    ModuleDetailView,
    preview_module,
    validate_card_count,
)

__all__ = [
    "DashboardView",
    "ModuleDetailView",
    "create_flashcard",
    "dashboard",
    "delete_module",
    "generate_module",
    "login",
    "logout",
    "module_detail",
    "preview_module",
    "signup",
    "validate_card_count",
]
