"""
Storefront voice assistant runtime.

Continuous voice-command interpretation for the fitness storefront:
- Listening loop with automatic recovery from recognizer and classifier failures
- In-memory storefront state (filters, user profile, navigation, cart)
- HTTP surface for feeding utterances and inspecting assistant state
"""

from storefront.core.config import VoiceConfig, get_config, set_config

__all__ = [
    'VoiceConfig',
    'get_config',
    'set_config',
]

__version__ = '0.1.0'
