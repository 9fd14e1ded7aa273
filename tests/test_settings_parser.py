import json
from types import SimpleNamespace

import pytest

from app.core.defaults import DEFAULT_DIAGNOSIS_DOMAINS, default_categories, default_points
from app.domain.settings.service import domains_to_questions, migrate, parse_settings, InvalidSettings

def row(value):
    return SimpleNamespace(school_name="Oak Elementary", settings_json=value)

def domains(n=6):
    return [{"name": f"영역{i}", "items": [f"문항{i}-{j}" for j in range(5)]} for i in range(n)]

def assert_defaults(s):
    assert s.points == default_points()
    assert [c.model_dump() for c in s.categories] == default_categories()
    assert [d.model_dump() for d in s.diagnosis_domains] == list(DEFAULT_DIAGNOSIS_DOMAINS)
    assert s.diagnosis_title == ""

@pytest.mark.parametrize("value", [
    None,
    "",
    "   ",
    "{not json",
    "[1, 2, 3]",
    '"text"',
    json.dumps({"version": 7, "points": {"training": 3}}),
    json.dumps({"version": "1"}),
    json.dumps({"diagnosisDomains": domains(5)}),
    json.dumps({"diagnosisDomains": {"name": "x"}}),
])
def test_unusable_rows_fall_back_to_defaults(value):
    assert_defaults(parse_settings(row(value)))

def test_missing_row_is_defaults():
    assert_defaults(parse_settings(None))

def test_v1_blob_is_normalized():
    stored = {
        "version": 1,
        "points": {"training": 3, "health": -1, "login_points": 5, "unknown": 9, "community": True},
        "categories": [
            {"key": "training", "label": " 직무연수 ", "unit": "분"},
            {"key": "health", "label": "", "unit": "lightyears"},
        ],
        "diagnosisDomains": domains(),
        "diagnosisTitle": "  2026 사전검사 ",
    }
    s = parse_settings(row(json.dumps(stored)))

    assert s.points["training"] == 3
    assert s.points["health"] == 1
    assert s.points["community"] == 1
    assert s.points["login_points"] == 5
    assert "unknown" not in s.points

    cats = {c.key: c for c in s.categories}
    assert [c.key for c in s.categories] == [c["key"] for c in default_categories()]
    assert cats["training"].label == "직무연수"
    assert cats["training"].unit == "분"
    assert cats["health"].label == "건강/체력"
    assert cats["health"].unit == "시간"

    assert s.diagnosis_domains[0].name == "영역0"
    assert s.diagnosis_title == "2026 사전검사"

def test_domain_entries_are_filled_individually():
    stored = domains()
    stored[1] = "broken"
    stored[2] = {"name": "  ", "items": ["하나", "", 3]}
    s = parse_settings(row(json.dumps({"version": 1, "diagnosisDomains": stored})))

    assert s.diagnosis_domains[1].model_dump() == DEFAULT_DIAGNOSIS_DOMAINS[1]
    third = s.diagnosis_domains[2]
    assert third.name == DEFAULT_DIAGNOSIS_DOMAINS[2]["name"]
    assert third.items[0] == "하나"
    assert third.items[1:] == DEFAULT_DIAGNOSIS_DOMAINS[2]["items"][1:]

def test_title_without_domains():
    s = parse_settings(row(json.dumps({"diagnosisTitle": "교원 역량 진단"})))
    assert s.diagnosis_title == "교원 역량 진단"
    assert [d.model_dump() for d in s.diagnosis_domains] == list(DEFAULT_DIAGNOSIS_DOMAINS)

def test_legacy_points_map_is_migrated():
    s = parse_settings(row(json.dumps({"training": 4, "login_points": 10})))
    assert s.version == 1
    assert s.points["training"] == 4
    assert s.points["login_points"] == 10

def test_migrate_rejects_future_versions():
    assert migrate({"training": 1}) == {"points": {"training": 1}, "version": 1}
    with pytest.raises(InvalidSettings):
        migrate({"version": 2})

def test_defaults_are_not_shared_between_calls():
    first = parse_settings(None)
    first.diagnosis_domains[0].items[0] = "changed"
    first.points["training"] = 99
    assert_defaults(parse_settings(None))

def test_questions_are_numbered_in_order():
    questions = domains_to_questions(domains())
    assert len(questions) == 30
    assert [q.id for q in questions[:3]] == ["1", "2", "3"]
    assert questions[0].domain == "domain1"
    assert questions[5].text == "문항1-0"
    assert questions[29].id == "30"
    assert questions[29].domain == "domain6"

@pytest.mark.parametrize("value", [
    '{"points": {"login_points": 1e400, "training": Infinity}}',
    '{"points": {"login_points": -Infinity, "training": NaN}}',
    '{"points": {"login_points": 100000000000000000000, "training": 10001}}',
    '{"points": {"login_points": 1.5, "training": "3"}}',
])
def test_out_of_range_amounts_keep_defaults(value):
    s = parse_settings(row(value))
    assert s.points == default_points()
    json.dumps(s.points, allow_nan=False)

def test_amount_bounds():
    stored = {"points": {"training": 10000, "health": 0.5, "login_points": 3.0}}
    s = parse_settings(row(json.dumps(stored)))
    assert s.points["training"] == 10000
    assert s.points["health"] == 0.5
    assert s.points["login_points"] == 3
    assert isinstance(s.points["login_points"], int)
