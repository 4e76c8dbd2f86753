"""Shared fixtures for lesson generation tests."""

import json
from unittest.mock import MagicMock

import pytest

from lessongen.config import GenerationConfig, GenerationSettings, ValidationThresholds
from lessongen.generators.lesson_generator import LessonGenerator


@pytest.fixture
def daily_payload():
    """Complete daily lesson in wire format."""
    return {
        "t": "Im Supermarkt",
        "l": "A1",
        "voc": [
            {"de": "kaufen", "en": "to buy something", "hi": "khareedna", "ex": "Ich kaufe Brot."},
            {"de": "das Brot", "en": "bread", "hi": "roti", "ex": "Das Brot ist frisch."},
            {"de": "teuer", "en": "expensive", "hi": "mehenga", "ex": "Der Käse ist teuer."},
            {"de": "die Kasse", "en": "checkout counter", "hi": "counter", "ex": "Ich bezahle an der Kasse."},
        ],
        "txt": "Anna geht heute in den Supermarkt. Sie kauft Brot, Milch und Äpfel. "
        "Der Käse ist sehr teuer, deshalb nimmt sie ihn nicht. An der Kasse wartet sie kurz.",
        "txt_tr": "Anna goes to the supermarket today.",
        "q": [
            {
                "qu": "Was kauft Anna?",
                "ops": ["Brot", "Käse", "Fisch", "Wein"],
                "ans": 0,
                "exp": "Sie kauft Brot, Milch und Äpfel.",
            },
            {
                "qu": "Warum nimmt sie den Käse nicht?",
                "ops": ["Er ist alt", "Er ist teuer", "Er ist groß", "Er ist weg"],
                "ans": 1,
                "exp": "Der Käse ist sehr teuer.",
            },
        ],
        "wr": "Write a short message to a friend about your shopping.",
        "pts": ["What you bought", "What was expensive", "When you go again"],
    }


@pytest.fixture
def daily_payload_json(daily_payload):
    return json.dumps(daily_payload, ensure_ascii=False)


@pytest.fixture
def repetitive_payload(daily_payload):
    """Structurally valid payload whose reading text repeats one word 9 times."""
    payload = dict(daily_payload)
    payload["txt"] = " ".join(["Supermarkt"] * 9)
    return payload


@pytest.fixture
def mock_llm_client():
    """LLM client double; set generate_text.return_value / side_effect per test."""
    return MagicMock()


@pytest.fixture
def generator(mock_llm_client):
    """Generator with default settings that does not read the environment."""
    return LessonGenerator(
        llm_client=mock_llm_client,
        settings=GenerationSettings(),
        thresholds=ValidationThresholds(),
        generation_config=GenerationConfig(),
    )
