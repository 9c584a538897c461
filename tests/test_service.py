import pytest

from conftest import decode_png
from qrpaint.service import create_app


@pytest.fixture
def client(solid_assets):
    app = create_app(assets=solid_assets, image_size=256)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.mark.parametrize("path", ["/qrcode", "/qrcode/query"])
def test_qrcode_returns_png(client, path):
    resp = client.post(path, json={"input": "HELLO", "options": {"add_logo": True, "add_gradient": True}})
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert decode_png(resp.data).shape == (256, 256, 4)


def test_options_may_be_omitted(client):
    resp = client.post("/qrcode", json={"input": "HELLO"})
    assert resp.status_code == 200


def test_missing_input_is_bad_request(client):
    resp = client.post("/qrcode", json={"options": {}})
    assert resp.status_code == 400
    assert "input" in resp.get_json()["error"]["message"]


def test_bad_options_are_bad_request(client):
    resp = client.post("/qrcode", json={"input": "HELLO", "options": {"add_logo": "yes"}})
    assert resp.status_code == 400


def test_non_json_body_is_bad_request(client):
    resp = client.post("/qrcode", data="HELLO", content_type="text/plain")
    assert resp.status_code == 400


def test_render_failure_is_reported(client):
    resp = client.post("/qrcode/query", json={"input": "x" * 5000})
    assert resp.status_code == 422
    assert resp.get_json()["error"]["message"]


def test_health(client):
    resp = client.get("/health")
    assert resp.get_json() == {"status": "ok", "image_size": 256}
