"""Fixed widget text shown around the conversation."""
from __future__ import annotations

from typing import Any, Dict

from .config import typing_delay

DISCLAIMER = (
    "This bot provides educational information only. "
    "Always consult your healthcare team for medical advice."
)
PLACEHOLDER = "Ask me about dialysis, diet, or lifestyle..."
FOOTER_HINT = "Press Enter to send • Remember: This is educational support, not medical advice"


def widget_info(cfg: Dict[str, Any]) -> Dict[str, Any]:
    bot = cfg.get("bot", {})
    return {
        "name": bot.get("name", "DialysisCareBot"),
        "tagline": bot.get("tagline", "Your dialysis education companion"),
        "disclaimer": DISCLAIMER,
        "placeholder": PLACEHOLDER,
        "hint": FOOTER_HINT,
        "typing_delay": typing_delay(cfg),
    }
