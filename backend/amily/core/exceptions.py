"""Exceptions raised by handlers and external collaborators."""


class CompanionError(Exception):
    """Base error. user_message is safe to show to the user."""

    status_code = 500
    user_message = "Something went wrong... let's try again in a moment."

    def __init__(self, message: str = "", user_message: str = None):
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


class InvalidRequestError(CompanionError):
    """Required input is missing or malformed."""

    status_code = 400

    def __init__(self, user_message: str):
        super().__init__(user_message, user_message=user_message)


class SpeechSynthesisError(CompanionError):
    """Text-to-speech call failed."""


class NotificationError(CompanionError):
    """Care circle webhook could not be reached."""
