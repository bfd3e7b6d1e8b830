"""Audio package."""

from .sounds import SoundManager, generate_complete_chime, COMPLETE_SOUND

__all__ = ["SoundManager", "generate_complete_chime", "COMPLETE_SOUND"]
