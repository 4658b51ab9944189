import pytest

from cago.services.journey import JourneySession, JourneyStep, TRANSITIONS, JourneyEvent
from cago.utils.errors import InvalidTransitionError


@pytest.fixture
def session():
    s = JourneySession()
    s.submit_direction(
        direction="data-insights",
        direction_label="Working with data & insights",
        background="  Retail operations, Excel reports  ",
        confidence="drawn",
    )
    return s


def test_full_forward_flow(session):
    assert session.step == JourneyStep.ASSESSMENT
    assert session.user.background == "Retail operations, Excel reports"

    assert session.complete_assessment({"stage": {}}) == JourneyStep.CONFIRMATION
    assert session.confirm("  Also ran a small online store  ") == JourneyStep.MENTOR_MATCH
    assert session.complete_mentor({"mentor": {}}) == JourneyStep.PLAN
    assert session.complete_plan({"hardSkills": []}) == JourneyStep.PLAN

    assert session.results.plan == {"hardSkills": []}
    assert session.request_payload()["adjustments"] == "Also ran a small online store"


def test_forward_moves_are_gated_on_results(session):
    with pytest.raises(InvalidTransitionError):
        session.complete_assessment(None)
    assert session.step == JourneyStep.ASSESSMENT


def test_direction_requires_label_and_background():
    s = JourneySession()
    with pytest.raises(InvalidTransitionError):
        s.submit_direction(direction="other", direction_label="Game design", background=" ")
    assert s.step == JourneyStep.DIRECTION_INPUT


def test_back_keeps_fetched_results(session):
    session.complete_assessment({"stage": {"label": "Early Exploration"}})
    session.confirm()
    session.complete_mentor({"mentor": {"name": "Sam"}})

    # Plan step has no back move
    with pytest.raises(InvalidTransitionError):
        session.back()

    s = JourneySession(step=JourneyStep.MENTOR_MATCH, user=session.user, results=session.results)
    assert s.back() == JourneyStep.CONFIRMATION
    assert s.back() == JourneyStep.ASSESSMENT
    assert s.results.assessment == {"stage": {"label": "Early Exploration"}}
    assert s.results.mentor == {"mentor": {"name": "Sam"}}


def test_out_of_order_events_are_rejected(session):
    with pytest.raises(InvalidTransitionError):
        session.complete_mentor({"mentor": {}})
    with pytest.raises(InvalidTransitionError):
        session.back()
    with pytest.raises(InvalidTransitionError):
        JourneySession().confirm()


def test_start_over_resets_everything(session):
    session.complete_assessment({"stage": {}})

    assert session.start_over() == JourneyStep.DIRECTION_INPUT
    assert session.results.assessment is None
    assert session.user.direction_label == ""
    assert session.user.confidence == "curious"


def test_request_payload_without_adjustments(session):
    assert session.request_payload() == {
        "direction": "data-insights",
        "directionLabel": "Working with data & insights",
        "background": "Retail operations, Excel reports",
        "confidence": "drawn",
    }


def test_progress_marks_completed_and_active(session):
    session.complete_assessment({"stage": {}})

    progress = session.progress()

    assert [p["completed"] for p in progress] == [True, True, False, False, False]
    assert [p["active"] for p in progress] == [False, False, True, False, False]


def test_every_transition_stays_within_steps():
    for (step, event), target in TRANSITIONS.items():
        assert isinstance(step, JourneyStep)
        assert isinstance(event, JourneyEvent)
        assert isinstance(target, JourneyStep)
