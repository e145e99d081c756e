from __future__ import annotations


def _seed(client):
    leader = client.post(
        "/api/v1/leaders",
        json={"name": "Sarah Johnson", "email": "sarah@example.com", "industry_groups": ["HSME", "TLCE"]},
    ).json()
    for name, value, stage, group in (
        ("Won", 100, "Closed Won", "HSME"),
        ("Open", 300, "Proposal", "TLCE"),
        ("Lost", 50, "Closed Lost", "HSME"),
    ):
        client.post(
            "/api/v1/deals",
            json={
                "name": name,
                "value": value,
                "stage": stage,
                "industry_group": group,
                "client_leader_id": leader["id"],
            },
        )
    return leader


def test_metrics_for_empty_dashboard_are_zero(api_client):
    response = api_client.get("/api/v1/analytics/metrics")
    assert response.status_code == 200
    assert response.json() == {
        "total_revenue": 0.0,
        "avg_deal_size": 0.0,
        "win_rate": 0.0,
        "pipeline_value": 0.0,
        "deal_count": 0,
    }


def test_metrics_respect_query_filters(api_client):
    _seed(api_client)

    everything = api_client.get("/api/v1/analytics/metrics").json()
    assert everything["deal_count"] == 3
    assert everything["total_revenue"] == 450

    hsme = api_client.get("/api/v1/analytics/metrics", params={"industry_groups": ["HSME"]}).json()
    assert hsme["deal_count"] == 2
    assert hsme["win_rate"] == 50

    staged = api_client.get("/api/v1/analytics/metrics", params={"stages": ["Proposal"]}).json()
    assert staged["deal_count"] == 1


def test_charts_cover_every_stage(api_client):
    _seed(api_client)
    charts = api_client.get("/api/v1/analytics/charts").json()
    funnel = {entry["name"]: entry["value"] for entry in charts["funnel_data"]}
    assert funnel["Proposal"] == 1
    assert funnel["Closed Won"] == 1
    assert {entry["name"] for entry in charts["revenue_by_group"]} == {"HSME", "TLCE"}


def test_leader_summaries(api_client):
    leader = _seed(api_client)
    summaries = api_client.get("/api/v1/analytics/leaders").json()
    assert summaries[0]["client_leader_id"] == leader["id"]
    assert summaries[0]["deal_count"] == 3
    assert api_client.get("/api/v1/analytics/leaders", params={"client_leader_ids": [999]}).json() == []


def test_job_metrics_start_empty(api_client):
    assert api_client.get("/api/v1/analytics/jobs").json()["total_jobs"] == 0


def test_malformed_date_filter_is_rejected(api_client):
    response = api_client.get("/api/v1/analytics/metrics", params={"start": "last tuesday"})
    assert response.status_code == 422
