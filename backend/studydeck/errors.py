"""
Exception hierarchy for StudyDeck.

Every failure is scoped to the single operation that raised it; routers map
these onto HTTP status codes (see studydeck.routers.review._raise_http).
"""


class StudyDeckError(Exception):
    """Base class for all StudyDeck errors."""


# --- Content source ---


class GenerationError(StudyDeckError):
    """The card generator failed or returned malformed data."""


class LLMUnavailableError(GenerationError):
    """Raised when the configured Ollama model cannot be reached."""


# --- Persistence store ---


class StoreError(StudyDeckError):
    """A read or write against the card store failed."""


class CardNotFoundError(StoreError):
    def __init__(self, card_id: str) -> None:
        super().__init__(f"Flashcard not found: {card_id}")
        self.card_id = card_id


class MaterialNotFoundError(StoreError):
    def __init__(self, material_id: str) -> None:
        super().__init__(f"Study material not found: {material_id}")
        self.material_id = material_id


# --- Review session ---


class SessionError(StudyDeckError):
    """Base class for review-session state errors."""


class InvalidTransitionError(SessionError):
    def __init__(self, action: str, status: str) -> None:
        super().__init__(f"Cannot {action} while session is {status}")
        self.action = action
        self.status = status


class AnswerInProgressError(SessionError):
    """A previous answer for this session is still being persisted."""


class SessionBusyError(SessionError):
    """The session is loading its deck and cannot accept this call."""


class SessionNotFoundError(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Review session not found: {session_id}")
        self.session_id = session_id
