from trip_planner.trip.itinerary_generator import ACTIVITY_NAMES


def _trip(client, headers, payload):
    resp = client.post("/api/trips/", json=payload, headers=headers)
    assert resp.status_code == 201
    return resp.json()


def _itinerary(client, headers, trip_id):
    return client.get(f"/api/trips/{trip_id}", headers=headers).json()["itinerary"]


def test_add_activity_at_position(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)

    resp = client.post("/api/itinerary-items/", headers=auth_headers, json={
        "trip_id": trip["trip_id"],
        "type": "ACTIVITY",
        "order": 1,
        "activity_name": "Museum Visit",
        "start_time": "2025-01-02T10:00:00Z",
        "duration": 120,
        "cost": 25.5,
    })
    assert resp.status_code == 201, resp.text
    item = resp.json()
    assert item["order"] == 1
    assert item["type"] == "ACTIVITY"
    assert item["start_time"] == "2025-01-02T10:00:00"

    items = _itinerary(client, auth_headers, trip["trip_id"])
    assert [i["order"] for i in items] == [0, 1, 2, 3, 4]
    assert items[1]["item_id"] == item["item_id"]
    assert items[1]["cost"] == 25.5
    assert items[2]["type"] == "LODGING"


def test_add_item_appends_without_order(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)
    resp = client.post("/api/itinerary-items/", headers=auth_headers, json={
        "trip_id": trip["trip_id"],
        "type": "LODGING",
        "lodging_name": "Ryokan",
        "checkin_time": "2025-01-04T15:00:00",
        "checkout_time": "2025-01-10T10:00:00",
    })
    assert resp.status_code == 201
    assert resp.json()["order"] == 4


def test_add_item_invalid(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)
    base = {"trip_id": trip["trip_id"], "type": "ACTIVITY"}

    assert client.post("/api/itinerary-items/", headers=auth_headers,
                       json=dict(base, order=-1)).status_code == 422
    assert client.post("/api/itinerary-items/", headers=auth_headers,
                       json=dict(base, type="CRUISE")).status_code == 422
    assert client.post("/api/itinerary-items/", headers=auth_headers,
                       json=dict(base, duration=0)).status_code == 400
    assert client.post("/api/itinerary-items/", headers=auth_headers,
                       json=dict(base, trip_id="missing")).status_code == 404


def test_update_item(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)
    lodging = trip["itinerary"][1]
    url = f"/api/itinerary-items/{lodging['item_id']}"

    resp = client.patch(url, headers=auth_headers, json={"lodging_name": "Park Hyatt", "cost": 300})
    assert resp.status_code == 200
    assert resp.json()["lodging_name"] == "Park Hyatt"
    assert resp.json()["order"] == 1

    # transportation fields do not apply to lodging
    assert client.patch(url, headers=auth_headers, json={"depart_city": "Osaka"}).status_code == 400
    assert _itinerary(client, auth_headers, trip["trip_id"])[1]["lodging_name"] == "Park Hyatt"


def test_move_item(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)
    back_home = trip["itinerary"][3]

    resp = client.post(f"/api/itinerary-items/{back_home['item_id']}/move",
                       headers=auth_headers, json={"position": 0})
    assert resp.status_code == 200
    assert resp.json()["order"] == 0

    items = _itinerary(client, auth_headers, trip["trip_id"])
    assert items[0]["item_id"] == back_home["item_id"]
    assert [i["order"] for i in items] == [0, 1, 2, 3]


def test_delete_item_renumbers(client, auth_headers, trip_payload):
    trip = _trip(client, auth_headers, trip_payload)
    lodging = trip["itinerary"][1]
    url = f"/api/itinerary-items/{lodging['item_id']}"

    assert client.delete(url, headers=auth_headers).status_code == 200
    items = _itinerary(client, auth_headers, trip["trip_id"])
    assert [i["order"] for i in items] == [0, 1, 2]
    assert all(i["type"] == "TRANSPORTATION" for i in items)
    assert client.delete(url, headers=auth_headers).status_code == 404


def test_items_of_other_users_are_forbidden(client, make_auth_headers, trip_payload):
    alice = make_auth_headers("alice")
    bob = make_auth_headers("bob")
    trip = _trip(client, alice, trip_payload)
    item_id = trip["itinerary"][0]["item_id"]

    assert client.patch(f"/api/itinerary-items/{item_id}", headers=bob,
                        json={"description": "mine now"}).status_code == 403
    assert client.delete(f"/api/itinerary-items/{item_id}", headers=bob).status_code == 403
    assert client.post("/api/itinerary-items/", headers=bob,
                       json={"trip_id": trip["trip_id"], "type": "ACTIVITY"}).status_code == 403


def test_suggestions(client, auth_headers):
    resp = client.get("/api/itinerary-items/suggestions", params={"city": "Lisbon"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert "Lisbon" in body["lodging_name"]
    assert body["activity_name"] in ACTIVITY_NAMES

    resp = client.get("/api/itinerary-items/suggestions", headers=auth_headers)
    assert resp.json()["lodging_name"] is None
    assert client.get("/api/itinerary-items/suggestions").status_code == 401
