from auto_eda.utils.eda_types import APPROVED, REJECTED
from auto_eda.utils.review_status import NO_CODE_REASON, classify_review, review_gate


class StubReviewer:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def review_code(self, code, task):
        self.calls.append((code, task))
        return self.reply


def test_approved_anywhere_in_reply_approves():
    assert classify_review("Looks fine. APPROVED").status == APPROVED
    assert classify_review("approved").approved


def test_not_approved_still_approves():
    assert classify_review("NOT APPROVED: this deletes files").approved


def test_rejection_reason_is_full_reply():
    verdict = classify_review("NEEDS_REVISION: syntax error on line 3")
    assert verdict.status == REJECTED
    assert verdict.reason == "NEEDS_REVISION: syntax error on line 3"


def test_missing_reply_is_rejected():
    verdict = classify_review(None)
    assert verdict.status == REJECTED
    assert verdict.reason == ""


def test_missing_code_skips_reviewer():
    reviewer = StubReviewer("APPROVED")
    for code in (None, "", "  \n"):
        verdict = review_gate(code, "task", reviewer)
        assert verdict.status == REJECTED
        assert verdict.reason == NO_CODE_REASON
    assert reviewer.calls == []


def test_reviewer_sees_code_and_task():
    reviewer = StubReviewer("APPROVED")
    verdict = review_gate("print(1)", "count rows", reviewer)
    assert verdict.approved
    assert reviewer.calls == [("print(1)", "count rows")]
