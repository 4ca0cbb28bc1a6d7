QUESTION_PROMPTS = {
    "morning": [
        "What am I grateful for today?",
        "What inspires me or brings me joy?",
        "Whom can I help today, and how?",
    ],
    "evening": [
        "What good things happened today?",
        "What did I learn?",
        "How can I make tomorrow better?",
    ],
}

# Each step is (phase, seconds); a practice cycles through its steps.
BREATHING_PATTERNS = {
    "breathing_478": {
        "title": "4-7-8 breathing",
        "description": "Calming technique: inhale for 4, hold for 7, exhale for 8 counts.",
        "steps": [("inhale", 4), ("hold", 7), ("exhale", 8)],
    },
    "square_breathing": {
        "title": "Square breathing",
        "description": "Even breathing: inhale, hold, exhale and pause for 4 counts each.",
        "steps": [("inhale", 4), ("hold", 4), ("exhale", 4), ("hold", 4)],
    },
    "calm_breathing": {
        "title": "Calm breathing",
        "description": "Simple relaxation: inhale for 4, exhale for 6 counts.",
        "steps": [("inhale", 4), ("exhale", 6)],
    },
}


def question_prompts(answer_type=None):
    if answer_type is None:
        return {key: list(prompts) for key, prompts in QUESTION_PROMPTS.items()}
    return {answer_type: list(QUESTION_PROMPTS[answer_type])}


def practice_catalog():
    catalog = []
    for practice_type, pattern in BREATHING_PATTERNS.items():
        steps = [{"phase": phase, "seconds": seconds} for phase, seconds in pattern["steps"]]
        catalog.append(
            {
                "type": practice_type,
                "title": pattern["title"],
                "description": pattern["description"],
                "steps": steps,
                "cycle_seconds": sum(step["seconds"] for step in steps),
            }
        )
    return catalog
