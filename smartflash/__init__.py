"""SmartFlash flashcard study client."""

__version__ = "1.0.0"
