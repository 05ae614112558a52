def test_live(client):
    r = client.get("/health/live")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_not_ready_without_cnc_file(client):
    r = client.get("/health/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "not_ready"
    assert body["problems"][0].startswith("missing_file:")


def test_ready_once_driver_publishes_cnc_file(client, write_cnc):
    path = write_cnc()
    r = client.get("/health/ready")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "cnc_file": str(path)}
