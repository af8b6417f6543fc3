"""Rich + prompt_toolkit terminal front-end."""

from actkit.ui.feedback import RichFeedback
from actkit.ui.responder import InteractiveResponder

__all__ = ["InteractiveResponder", "RichFeedback"]
