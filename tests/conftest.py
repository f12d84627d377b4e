import copy
import json

import pytest

# The object from the happy-path scenario: one section, every script field.
HAPPY_RESULT = {
    "analysis": {
        "technicalTerms": ["API"],
        "readabilityScore": 8,
        "suggestions": ["clarify X"],
        "overallScore": 8,
        "prioritizedImprovements": ["add examples"],
        "sections": {
            "introduction": {
                "score": 8,
                "suggestions": [],
                "readabilityMetrics": {"fleschKincaid": 10, "wordsPerSentence": 12, "technicalTerms": []},
            }
        },
    },
    "rewrittenScript": {
        "learningObjectives": ["understand API"],
        "introduction": "Hi",
        "mainContent": "Body",
        "conclusion": "End",
        "callToAction": "Go",
    },
}

SECTION = {
    "score": 7.5,
    "suggestions": ["Use a diagram [IMPLEMENTED]"],
    "readabilityMetrics": {"fleschKincaid": 9.1, "wordsPerSentence": 14.2, "technicalTerms": ["REST"]},
    "aiEnhancements": "Show the request flow [VISUAL CUE: sequence diagram]",
}


@pytest.fixture
def happy():
    return copy.deepcopy(HAPPY_RESULT)


@pytest.fixture
def happy_text():
    return json.dumps(HAPPY_RESULT)


@pytest.fixture
def full_result():
    result = copy.deepcopy(HAPPY_RESULT)
    result["analysis"]["sections"]["mainContent"] = copy.deepcopy(SECTION)
    result["analysis"]["sections"]["conclusion"] = copy.deepcopy(SECTION)
    result["analysis"]["suggestions"] = ["Add a hook [IMPLEMENTED]", "Define REST"]
    result["rewrittenScript"]["title"] = "Intro to APIs"
    result["rewrittenScript"]["mainContent"] = "An API is a contract. [VISUAL CUE] Here is how it works."
    return result
