import json
import os

import pytest
from fastapi.testclient import TestClient

import app as app_module
from csds.config.platforms import FACEBOOK_POST_OWNER, FACEBOOK_TEXT, TIKTOK_DESCRIPTION
from csds.exceptions import AnalysisServiceError

TIKTOK_CSV = (
    "video_id,author_name,region_code,create_time,video_description\n"
    "v1,alice,US,1620000000,hello world\n"
    "v2,bob,,2021-05-01T00:00:00Z,\n"
)

FACEBOOK_CSV = (
    "id,post_owner.id,post_owner.name,surface.id,surface.name,text,creation_time\n"
    "fb1,1,Owner,2,Group,shared,1620000000\n"
)

GENERIC_CSV = "who,post,when\nalice,p1,1620000000\nbob,p2,\n"


@pytest.fixture
def client():
    return TestClient(app_module.app)


def upload(content, name="data.csv"):
    return {"file": (name, content.encode("utf-8"), "text/csv")}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_platforms_lists_every_tag(client):
    body = client.get("/platforms").json()
    assert [p["platform"] for p in body] == [
        "Preprocessed", "YouTube", "TikTok", "Facebook", "Instagram", "Telegram", "BlueSky", "Other",
    ]
    tiktok = body[2]
    assert len(tiktok["object_id_source_options"]) == 6
    assert tiktok["default_account_source"] is not None


def test_detect(client):
    response = client.post("/detect", files=upload(FACEBOOK_CSV))
    assert response.status_code == 200
    body = response.json()
    assert body["platform"] == "Facebook"
    assert body["headers"][0] == "id"
    assert body["message"] == "We detected that your data is imported from Facebook."
    assert [o["value"] for o in body["account_source_options"]][0] == FACEBOOK_POST_OWNER


def test_detect_rejects_non_csv(client):
    response = client.post("/detect", files={"file": ("data.xlsx", b"xx", "application/octet-stream")})
    assert response.status_code == 400


def test_process_tiktok(client):
    response = client.post("/process", files=upload(TIKTOK_CSV), data={"object_id_source": TIKTOK_DESCRIPTION})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["x-platform"] == "TikTok"
    assert response.headers["x-rows-seen"] == "2"
    assert response.headers["x-rows-kept"] == "1"
    assert response.headers["x-size-limit-exceeded"] == "false"
    assert response.text == (
        "account_id,content_id,object_id,timestamp_share\n"
        "alice (US),v1,hello world,1620000000\n"
    )


def test_process_with_explicit_platform(client):
    response = client.post(
        "/process",
        files=upload(FACEBOOK_CSV),
        data={"platform": "Facebook", "account_source": FACEBOOK_POST_OWNER, "object_id_source": FACEBOOK_TEXT},
    )
    assert response.status_code == 200
    assert "Owner (1),fb1,shared,1620000000" in response.text


def test_process_unknown_platform(client):
    response = client.post("/process", files=upload(FACEBOOK_CSV), data={"platform": "MySpace"})
    assert response.status_code == 422


def test_process_missing_source_selection(client):
    response = client.post("/process", files=upload(FACEBOOK_CSV))
    assert response.status_code == 422


def test_process_other_requires_manual_mapping(client):
    response = client.post("/process", files=upload(GENERIC_CSV))
    assert response.status_code == 400
    assert "manual" in response.json()["detail"]


def test_process_no_valid_rows(client):
    csv = "account_id,content_id,object_id,timestamp_share\n,c1,o,1\n"
    response = client.post("/process", files=upload(csv))
    assert response.status_code == 422
    assert "No valid data rows" in response.json()["detail"]


def test_process_manual(client):
    mappings = json.dumps([{"column_index": 0, "field": "account_id"}, {"column_index": 1, "field": "content_id"},
                           {"column_index": 2, "field": "timestamp_share"}])
    response = client.post("/process/manual", files=upload(GENERIC_CSV), data={"mappings": mappings})
    assert response.status_code == 200
    assert response.text == (
        "account_id,content_id,object_id,timestamp_share\n"
        "alice,p1,,1620000000\n"
        "bob,p2,,\n"
    )


def test_process_manual_require_all(client):
    mappings = json.dumps([{"column_index": 0, "field": "account_id"}, {"column_index": 1, "field": "content_id"}])
    response = client.post(
        "/process/manual", files=upload(GENERIC_CSV), data={"mappings": mappings, "require_all": "true"}
    )
    assert response.status_code == 422


def test_process_manual_bad_json(client):
    response = client.post("/process/manual", files=upload(GENERIC_CSV), data={"mappings": "{not json"})
    assert response.status_code == 422


def test_uploads_are_cleaned_up(client, tmp_path):
    client.post("/process", files=upload(TIKTOK_CSV), data={"object_id_source": TIKTOK_DESCRIPTION})
    tmp_root = tmp_path / "uploads"
    assert os.listdir(tmp_root) == []


def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setenv("CSDS_API_KEY", "secret")
    assert client.post("/detect", files=upload(FACEBOOK_CSV)).status_code == 401
    response = client.post("/detect", files=upload(FACEBOOK_CSV), headers={"X-API-Key": "secret"})
    assert response.status_code == 200


def test_analyze(client, monkeypatch):
    captured = {}

    def fake_submit(csv_bytes, params):
        captured["csv"] = csv_bytes
        captured["params"] = params
        return {"status": "success", "nodes": [1], "edges": []}

    monkeypatch.setattr(app_module, "submit_for_analysis", fake_submit)
    response = client.post(
        "/analyze",
        files=upload(TIKTOK_CSV),
        data={"object_id_source": TIKTOK_DESCRIPTION, "time_window": "30"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["platform"] == "TikTok"
    assert body["summary"]["rows_kept"] == 1
    assert body["result"]["nodes"] == [1]
    assert captured["params"].time_window == 30
    assert captured["csv"].startswith(b"account_id,content_id,object_id,timestamp_share\n")


def test_analyze_service_error(client, monkeypatch):
    def failing_submit(csv_bytes, params):
        raise AnalysisServiceError("not enough accounts", stage="graph", status_code=500)

    monkeypatch.setattr(app_module, "submit_for_analysis", failing_submit)
    response = client.post("/analyze", files=upload(TIKTOK_CSV), data={"object_id_source": TIKTOK_DESCRIPTION})
    assert response.status_code == 502
    assert response.json()["detail"] == {"stage": "graph", "message": "not enough accounts"}


def test_analyze_rejects_bad_parameters(client):
    response = client.post(
        "/analyze", files=upload(TIKTOK_CSV), data={"object_id_source": TIKTOK_DESCRIPTION, "edge_weight": "2"}
    )
    assert response.status_code == 422
