"""Keyword responder: maps one free-text input to one canned reply.

Rules are checked top to bottom against the lowercased input and the first
rule with any keyword present wins. Keywords are plain substrings, so
``"pain"`` also fires inside ``"painting"``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


# -----------------------------
# Canned replies
# -----------------------------
EMERGENCY_REPLY = (
    "If this is a medical emergency, please call 911 or go to the nearest emergency room "
    "immediately. I cannot provide emergency medical guidance."
)

MEDICAL_ADVICE_REPLY = (
    "I can help explain things generally, but I can't provide medical advice, diagnosis, "
    "or treatment decisions. Please contact your dialysis nurse, nephrologist, or care team "
    "for anything specific to your health.\n\n"
    "Is there something general about dialysis I can explain instead?"
)

DIALYSIS_REPLY = (
    "Dialysis is a treatment that does the work your kidneys can no longer do effectively. "
    "There are two main types:\n\n"
    "**Hemodialysis:** Uses a machine to filter your blood outside your body, typically done "
    "3 times per week at a dialysis center.\n\n"
    "**Peritoneal Dialysis:** Uses the lining of your abdomen to filter blood inside your body, "
    "often done at home daily.\n\n"
    "Both types remove waste, extra fluid, and balance minerals in your blood. Your care team "
    "will help determine which type is best for you."
)

DIET_REPLY = (
    "Diet is important on dialysis. General principles include:\n\n"
    "• **Protein:** Usually encouraged (lean meats, fish, eggs)\n"
    "• **Potassium:** Often needs limiting (bananas, oranges, potatoes)\n"
    "• **Phosphorus:** Usually restricted (dairy, nuts, beans)\n"
    "• **Sodium:** Limited to control fluid and blood pressure\n"
    "• **Fluids:** Often restricted based on urine output\n\n"
    "Every person's needs are different. Please work with your renal dietitian for "
    "personalized guidance. Would you like to know more about any specific nutrient?"
)

SUPPORT_REPLY = (
    "It's completely understandable to feel this way. Living with dialysis can be "
    "challenging, both physically and emotionally. Here are some things that might help:\n\n"
    "• **Connect with others:** Support groups can help you feel less alone\n"
    "• **Take it one day at a time:** Break challenges into smaller steps\n"
    "• **Celebrate small wins:** Every treatment completed is an achievement\n"
    "• **Talk to your team:** They can provide resources for mental health support\n"
    "• **Be kind to yourself:** You're doing something difficult and important\n\n"
    "You're stronger than you know. Is there anything specific I can help explain or "
    "support you with?"
)

ACCESS_REPLY = (
    "Vascular access is how blood is removed and returned during hemodialysis:\n\n"
    "**AV Fistula:** A connection between an artery and vein, usually in the arm. This is "
    "the preferred long-term access.\n\n"
    "**AV Graft:** A tube connecting an artery and vein. Used when fistulas aren't possible.\n\n"
    "**Catheter:** A tube inserted into a large vein. Usually temporary.\n\n"
    "Keeping your access clean and monitoring it daily is very important. Your care team "
    "will teach you how to care for yours properly."
)

DEFAULT_REPLY = (
    "That's a great question! I can help with general information about:\n\n"
    "• Dialysis types and procedures\n"
    "• Diet and lifestyle basics\n"
    "• Understanding medical terms\n"
    "• Emotional support\n"
    "• What to expect during treatment\n\n"
    "Could you tell me more about what you'd like to know? And remember, for anything "
    "specific to your personal health, always check with your care team."
)

WELCOME_MESSAGE = (
    "Hello! I'm DialysisCareBot, your friendly dialysis education assistant. I'm here to help "
    "you understand dialysis treatments, lifestyle guidance, and answer general questions "
    "about kidney health.\n\n"
    "**What I can help with:**\n"
    "• Explaining dialysis procedures and types\n"
    "• Diet and lifestyle basics\n"
    "• Understanding common terms\n"
    "• Emotional support and encouragement\n\n"
    "**Important:** I cannot provide medical advice, diagnoses, or treatment decisions. "
    "Always consult your care team for personal medical questions.\n\n"
    "How can I help you today?"
)

DEFAULT_CATEGORY = "default"


# -----------------------------
# Rules
# -----------------------------
@dataclass(frozen=True)
class Rule:
    category: str
    keywords: Tuple[str, ...]
    reply: str

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


# Order is priority: an earlier rule always beats a later one.
RULES: Tuple[Rule, ...] = (
    Rule("emergency", ("emergency", "urgent", "911"), EMERGENCY_REPLY),
    Rule(
        "medical",
        ("should i", "can i skip", "medication", "pain", "symptom"),
        MEDICAL_ADVICE_REPLY,
    ),
    Rule("dialysis", ("what is dialysis", "how does dialysis work"), DIALYSIS_REPLY),
    Rule("diet", ("diet", "eat", "food"), DIET_REPLY),
    Rule("support", ("tired", "overwhelmed", "scared", "anxious"), SUPPORT_REPLY),
    Rule("access", ("fistula", "catheter", "access"), ACCESS_REPLY),
)

_REPLIES: Dict[str, str] = {r.category: r.reply for r in RULES}
_REPLIES[DEFAULT_CATEGORY] = DEFAULT_REPLY


def classify(text: str) -> str:
    """Return the category of the first matching rule, or ``"default"``."""
    lowered = (text or "").lower()
    for rule in RULES:
        if rule.matches(lowered):
            return rule.category
    return DEFAULT_CATEGORY


def reply_for(category: str) -> str:
    """Canned reply for a category name; unknown names get the default reply."""
    return _REPLIES.get(category, DEFAULT_REPLY)


def respond(text: str) -> str:
    """Pick the canned reply for ``text``. Never raises."""
    category = classify(text)
    logger.debug("responder matched category=%s", category)
    return reply_for(category)


def categories() -> Tuple[str, ...]:
    return tuple(r.category for r in RULES) + (DEFAULT_CATEGORY,)
