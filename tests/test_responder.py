from __future__ import annotations

import pytest

from carebot import responder
from carebot.responder import classify, respond


@pytest.mark.parametrize(
    "text, category",
    [
        ("This is URGENT", "emergency"),
        ("Should I take more water pills?", "medical"),
        ("I have pain in my arm", "medical"),
        ("What is dialysis?", "dialysis"),
        ("how does dialysis work exactly", "dialysis"),
        ("What food is good for me", "diet"),
        ("I feel so scared and overwhelmed", "support"),
        ("Tell me about my fistula", "access"),
        ("hello there", "default"),
    ],
)
def test_classify_categories(text, category):
    assert classify(text) == category


def test_emergency_beats_diet():
    assert respond("I have a food emergency") == responder.EMERGENCY_REPLY


def test_medical_beats_dialysis_definition():
    # "should i" sits above the dialysis definition rule
    assert classify("what is dialysis and should i start it") == "medical"


def test_default_reply_for_unmatched_input():
    assert respond("hello there") == responder.DEFAULT_REPLY


def test_case_insensitive():
    assert respond("EMERGENCY") == respond("emergency") == responder.EMERGENCY_REPLY


def test_deterministic():
    text = "Can I skip a session?"
    assert respond(text) == respond(text) == responder.MEDICAL_ADVICE_REPLY


def test_substring_matching_is_not_word_bounded():
    # "pain" inside "painting", "eat" inside "great"
    assert classify("I love painting") == "medical"
    assert classify("that sounds great") == "diet"


def test_empty_and_none_fall_to_default():
    assert respond("") == responder.DEFAULT_REPLY
    assert respond(None) == responder.DEFAULT_REPLY  # type: ignore[arg-type]


def test_reply_texts():
    assert "Hemodialysis" in responder.DIALYSIS_REPLY
    assert "Peritoneal Dialysis" in responder.DIALYSIS_REPLY
    for nutrient in ("Protein", "Potassium", "Phosphorus", "Sodium", "Fluids"):
        assert nutrient in responder.DIET_REPLY
    for access in ("AV Fistula", "AV Graft", "Catheter"):
        assert access in responder.ACCESS_REPLY
    assert "call 911" in responder.EMERGENCY_REPLY


def test_categories_order():
    assert responder.categories() == (
        "emergency", "medical", "dialysis", "diet", "support", "access", "default",
    )


def test_reply_for_category():
    assert responder.reply_for("diet") == responder.DIET_REPLY
    assert responder.reply_for("default") == responder.DEFAULT_REPLY
    assert responder.reply_for("unknown") == responder.DEFAULT_REPLY
    for rule in responder.RULES:
        assert responder.reply_for(rule.category) == rule.reply
