"""Test result vocabulary shared by workbooks and every aggregate."""

from __future__ import annotations

from typing import Any, Literal

TestResult = Literal[
    "",
    "Pass",
    "Pass w/Observation",
    "Fail 1 - Regulatory",
    "Fail 2 - Procedure",
    "Question to LOB",
    "N/A",
]

PENDING: TestResult = ""
PASS: TestResult = "Pass"
PASS_WITH_OBSERVATION: TestResult = "Pass w/Observation"
FAIL_REGULATORY: TestResult = "Fail 1 - Regulatory"
FAIL_PROCEDURE: TestResult = "Fail 2 - Procedure"
QUESTION_TO_LOB: TestResult = "Question to LOB"
NOT_APPLICABLE: TestResult = "N/A"

# Order offered to auditors in the grid dropdown.
RESULT_OPTIONS: tuple[TestResult, ...] = (
    PENDING,
    PASS,
    PASS_WITH_OBSERVATION,
    FAIL_REGULATORY,
    FAIL_PROCEDURE,
    QUESTION_TO_LOB,
    NOT_APPLICABLE,
)

PASS_RESULTS = frozenset({PASS, PASS_WITH_OBSERVATION})
FAIL_RESULTS = frozenset({FAIL_REGULATORY, FAIL_PROCEDURE})
EXCEPTION_RESULTS = frozenset({FAIL_REGULATORY, FAIL_PROCEDURE, QUESTION_TO_LOB})
TERMINAL_RESULTS = frozenset(RESULT_OPTIONS) - {PENDING}

FailureType = Literal["Regulatory", "Procedure"]

FAILURE_TYPES: dict[str, FailureType] = {
    FAIL_REGULATORY: "Regulatory",
    FAIL_PROCEDURE: "Procedure",
}

_ALIASES: dict[str, TestResult] = {
    "pass": PASS,
    "passed": PASS,
    "pass w/observation": PASS_WITH_OBSERVATION,
    "pass w/ observation": PASS_WITH_OBSERVATION,
    "pass with observation": PASS_WITH_OBSERVATION,
    "pass w/obs": PASS_WITH_OBSERVATION,
    "fail 1 - regulatory": FAIL_REGULATORY,
    "fail 1": FAIL_REGULATORY,
    "fail - regulatory": FAIL_REGULATORY,
    "regulatory": FAIL_REGULATORY,
    "fail 2 - procedure": FAIL_PROCEDURE,
    "fail 2": FAIL_PROCEDURE,
    "fail - procedure": FAIL_PROCEDURE,
    "procedure": FAIL_PROCEDURE,
    "question to lob": QUESTION_TO_LOB,
    "question": QUESTION_TO_LOB,
    "q to lob": QUESTION_TO_LOB,
    "n/a": NOT_APPLICABLE,
    "na": NOT_APPLICABLE,
    "not applicable": NOT_APPLICABLE,
}


def parse_result(value: Any) -> TestResult | None:
    """Map spreadsheet text to a canonical result.

    Blank cells are ``PENDING``; text that matches no known spelling returns None
    so the caller can decide how loudly to complain.
    """
    if value is None:
        return PENDING
    text = " ".join(str(value).split()).lower()
    if not text or text == "nan":
        return PENDING
    return _ALIASES.get(text)


def is_exception(result: str) -> bool:
    """True for results that need follow-up (either fail kind or a question)."""
    return result in EXCEPTION_RESULTS
