"""External service adapters: object labeling and speech output."""

from .speech import LoggingSpeaker, SpeechOutput
from .vision_client import GoogleVisionClient, VisionLabeler

__all__ = [
    "GoogleVisionClient",
    "VisionLabeler",
    "LoggingSpeaker",
    "SpeechOutput",
]
