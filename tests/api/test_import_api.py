import io
import json


def test_import_raw_body(client, payload):
    response = client.post(
        "/api/v1/import/mob",
        data=payload([1, 2.5], [2, 3.0]),
        content_type="application/json",
        headers={"X-Caller-Identity": "admin"},
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["ok"] is True
    assert body["inserted"] == 2


def test_import_failure_returns_400_with_location(client, payload):
    response = client.post(
        "/api/v1/import/player",
        data=payload(["deadbeef", 7, "Alice", "x"]),
        content_type="application/json",
    )
    assert response.status_code == 400
    error = response.get_json()["error"]
    assert error["kind"] == "cell_decode"
    assert error["row"] == 0
    assert error["column"] == "entity_id"


def test_import_unknown_table(client, payload):
    response = client.post("/api/v1/import/bogus", data=payload(), content_type="application/json")
    assert response.status_code == 400
    assert "bogus" in response.get_json()["error"]["message"]


def test_import_empty_body(client):
    response = client.post("/api/v1/import/mob", data=b"")
    assert response.status_code == 400


def test_import_csv_upload(client):
    data = {"file": (io.BytesIO(b"entity_id,speed\n4,1.25\n"), "mob.csv")}
    response = client.post("/api/v1/import/mob", data=data, content_type="multipart/form-data")
    assert response.status_code == 200
    assert response.get_json()["inserted"] == 1


def test_import_argument_array(client, payload):
    args = ["entity", payload([5, {"x": 0, "y": 0, "z": 1}])]
    response = client.post("/api/v1/import", data=json.dumps(args), content_type="application/json")
    assert response.status_code == 200
    assert response.get_json()["table"] == "entity"


def test_import_argument_array_shape(client):
    response = client.post("/api/v1/import", data=json.dumps(["entity"]),
                           content_type="application/json")
    assert response.status_code == 400


def test_tables_and_export(client, payload):
    client.post("/api/v1/import/entity", data=payload([1, [1, 2, 3]]),
                content_type="application/json")

    tables = {t["name"]: t for t in client.get("/api/v1/tables").get_json()["tables"]}
    assert tables["entity"]["rows"] == 1

    export = client.get("/api/v1/tables/entity/export").get_json()
    assert export[0]["rows"] == [[1, [1.0, 2.0, 3.0]]]

    assert client.get("/api/v1/tables/bogus/export").status_code == 404
