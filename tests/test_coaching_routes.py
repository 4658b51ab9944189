import json

from cago.services.prompts import PLAN_MAX_TOKENS, SYSTEM_PROMPT


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_assessment_stamps_direction_label(client, canned_client, direction_payload):
    resp = client.post("/api/assessment", json=direction_payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["directionLabel"] == direction_payload["directionLabel"]
    assert data["stage"]["label"] == "Building Foundation"
    assert len(data["readiness"]) == 3

    call = canned_client.calls[-1]
    assert call["operation"] == "assessment"
    assert call["system"] == SYSTEM_PROMPT
    assert direction_payload["background"] in call["prompt"]


def test_assessment_defaults_missing_lists(client, canned_client, direction_payload):
    canned_client.responses["assessment"] = '{"stage": {"label": "Early Exploration"}}'

    data = client.post("/api/assessment", json=direction_payload).json()

    assert data["assets"] == []
    assert data["gaps"] == []
    assert data["readiness"] == []
    assert "transition" not in data


def test_assessment_requires_background(client, canned_client, direction_payload):
    direction_payload["background"] = "   "

    resp = client.post("/api/assessment", json=direction_payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": "background is required"}
    assert canned_client.calls == []


def test_assessment_parse_failure_is_500(client, canned_client, direction_payload):
    canned_client.responses["assessment"] = "I'd be glad to help with that."

    resp = client.post("/api/assessment", json=direction_payload)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate assessment"}


def test_assessment_has_no_repair_path(client, canned_client, direction_payload):
    canned_client.responses["assessment"] = '{"stage": {"label": "Early"}, "assets": [{"text": "SQL'

    resp = client.post("/api/assessment", json=direction_payload)

    assert resp.status_code == 500


def test_mentor_includes_adjustments_in_prompt(client, canned_client, direction_payload):
    direction_payload["adjustments"] = "I also ran a small Shopify store for two years."

    resp = client.post("/api/mentor", json=direction_payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["mentor"]["initials"] == "PR"
    assert data["directionLabel"] == direction_payload["directionLabel"]
    assert "Shopify store" in canned_client.calls[-1]["prompt"]


def test_mentor_upstream_failure_is_500(client, canned_client, direction_payload):
    canned_client.responses = {}

    resp = client.post("/api/mentor", json=direction_payload)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate mentor recommendation"}


def test_mentor_accepts_fenced_response(client, canned_client, direction_payload):
    canned_client.responses["mentor"] = '```json\n{"mentor": {"name": "Sam Lee"}}\n```'

    data = client.post("/api/mentor", json=direction_payload).json()

    assert data["mentor"] == {"name": "Sam Lee"}
    assert data["questionsToAsk"] == []


def test_plan_uses_largest_token_budget(client, canned_client, direction_payload):
    resp = client.post("/api/plan", json=direction_payload)

    assert resp.status_code == 200
    assert set(resp.json()["phasedPath"]) == {"day30", "day60", "day90"}
    assert canned_client.calls[-1]["max_tokens"] == PLAN_MAX_TOKENS


def test_plan_repairs_truncated_response(client, canned_client, direction_payload):
    canned_client.responses["plan"] = (
        '```json\n{"directionConfirmation": "x", "hardSkills": [{"skill": "SQL", "why": "queries"}, '
        '{"skill": "Python", "why": "autom'
    )

    resp = client.post("/api/plan", json=direction_payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["directionLabel"] == direction_payload["directionLabel"]
    assert data["hardSkills"][0] == {"skill": "SQL", "why": "queries"}
    assert data["softSkills"] == []
    assert data["successMetrics"] == []


def test_plan_unrecoverable_response_is_500(client, canned_client, direction_payload):
    canned_client.responses["plan"] = "not json at all"

    resp = client.post("/api/plan", json=direction_payload)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate execution plan"}


def test_plan_top_level_array_is_rejected(client, canned_client, direction_payload):
    canned_client.responses["plan"] = json.dumps([{"skill": "SQL"}])

    resp = client.post("/api/plan", json=direction_payload)

    assert resp.status_code == 500


def test_malformed_body_is_400(client):
    resp = client.post(
        "/api/plan",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_correlation_id_is_echoed(client):
    resp = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"


def test_metrics_snapshot(client):
    client.get("/api/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert set(resp.json()) == {"counters", "histograms"}


def test_direction_id_is_optional_and_not_prompted(client, canned_client, direction_payload):
    resp = client.post("/api/assessment", json=direction_payload)
    assert resp.status_code == 200
    prompt = canned_client.calls[-1]["prompt"]
    assert "Working with data & insights" in prompt
    assert "data-insights" not in prompt

    del direction_payload["direction"]
    resp = client.post("/api/assessment", json=direction_payload)
    assert resp.status_code == 200
    assert resp.json()["directionLabel"] == "Working with data & insights"
