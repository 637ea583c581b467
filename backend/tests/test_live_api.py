def make(client, path, payload):
    r = client.post(path, json=payload)
    assert r.status_code == 201, r.text
    return r.json()


def session_with_sets(client, rest=None, n_clients=1):
    clients = [make(client, "/clients", {"name": f"Client {i}"}) for i in range(n_clients)]
    body = {"name": "Deadlift", "muscle_group": "back"}
    if rest is not None:
        body["default_rest_seconds"] = rest
    deadlift = make(client, "/exercises", body)
    sess = make(client, "/sessions", {"client_ids": [c["id"] for c in clients]})
    added = make(client, f"/sessions/{sess['id']}/exercises", {"exercise_id": deadlift["id"]})
    return sess, deadlift, clients, added


def test_open_and_close(client):
    sess, _, _, _ = session_with_sets(client)
    r = client.post(f"/live/{sess['id']}", json={"rest_seconds": 90})
    assert r.status_code == 201
    assert r.json()["rest_seconds"] == 90
    assert r.json()["rest_presets"] == [30, 45, 60, 90, 120]
    # opening again returns the same view
    assert client.post(f"/live/{sess['id']}").json()["rest_seconds"] == 90
    assert client.get(f"/live/{sess['id']}").status_code == 200

    assert client.delete(f"/live/{sess['id']}").status_code == 204
    assert client.get(f"/live/{sess['id']}").status_code == 404
    assert client.delete(f"/live/{sess['id']}").status_code == 404


def test_open_unknown_or_ended_session(client):
    assert client.post("/live/nope").status_code == 404
    sess, _, _, _ = session_with_sets(client)
    client.post(f"/sessions/{sess['id']}/end", json={})
    assert client.post(f"/live/{sess['id']}").status_code == 409


def test_rest_duration_presets(client):
    sess, _, _, _ = session_with_sets(client)
    client.post(f"/live/{sess['id']}")
    r = client.put(f"/live/{sess['id']}/rest-duration", json={"seconds": 45})
    assert r.status_code == 200 and r.json()["rest_seconds"] == 45
    r = client.put(f"/live/{sess['id']}/rest-duration", json={"seconds": 50})
    assert r.status_code == 422
    assert r.json()["allowed"] == [30, 45, 60, 90, 120]
    assert client.get(f"/live/{sess['id']}").json()["rest_seconds"] == 45
    assert client.post(f"/live/{sess['id']}x", json={"rest_seconds": 50}).status_code == 404


def test_completing_sets_drives_timer(client):
    sess, deadlift, (alex,), (we,) = session_with_sets(client, rest=120)
    client.post(f"/live/{sess['id']}")
    body = {"exercise_id": deadlift["id"], "client_id": alex["id"]}
    first, second, third = we["sets"]

    r = client.post(f"/live/{sess['id']}/sets/{first['id']}/complete", json=body)
    assert r.status_code == 200
    done = r.json()
    assert done["set"]["is_completed"] is True
    assert done["remaining_sets"] == 2
    assert done["timer"]["state"] == "resting"
    assert done["timer"]["duration"] == 120
    assert done["timer"]["text"] in {"2:00", "1:59"}

    r = client.get(f"/live/{sess['id']}/timers")
    timers = r.json()
    assert [t["client_id"] for t in timers["timers"]] == [alex["id"]]
    assert timers["alerts"] == []
    r = client.get(f"/live/{sess['id']}/timers/{alex['id']}")
    assert r.json()["state"] == "resting"

    client.post(f"/live/{sess['id']}/sets/{second['id']}/complete", json=body)
    r = client.post(f"/live/{sess['id']}/sets/{third['id']}/complete", json=body)
    assert r.json()["remaining_sets"] == 0
    assert r.json()["timer"] == {
        "client_id": alex["id"], "state": "idle", "seconds": 0, "text": "",
        "exercise_id": None, "duration": None,
    }
    assert client.get(f"/live/{sess['id']}/timers").json()["timers"] == []


def test_complete_unknown_set_or_closed_view(client):
    sess, deadlift, (alex,), _ = session_with_sets(client)
    body = {"exercise_id": deadlift["id"], "client_id": alex["id"]}
    assert client.post(f"/live/{sess['id']}/sets/nope/complete", json=body).status_code == 404
    client.post(f"/live/{sess['id']}")
    assert client.post(f"/live/{sess['id']}/sets/nope/complete", json=body).status_code == 404


def test_select_client_and_view(client):
    sess, deadlift, (alex, sam), added = session_with_sets(client, n_clients=2)
    client.post(f"/live/{sess['id']}")
    r = client.post(f"/live/{sess['id']}/select/{sam['id']}")
    assert r.status_code == 200 and r.json()["state"] == "idle"
    assert client.get(f"/live/{sess['id']}").json()["selected_client_id"] == sam["id"]

    view = client.get(f"/live/{sess['id']}/view").json()
    assert view["client_id"] == sam["id"]
    assert [we["exercise_id"] for we in view["exercises"]] == [deadlift["id"]]
    assert view["last_workout"] == [] and view["max_weights"] == {}


def test_ending_session_closes_live_view(client):
    sess, _, _, _ = session_with_sets(client)
    client.post(f"/live/{sess['id']}")
    client.post(f"/sessions/{sess['id']}/end", json={})
    assert client.get(f"/live/{sess['id']}").status_code == 404


def test_complete_with_wrong_client_is_conflict(client):
    sess, deadlift, (alex, sam), added = session_with_sets(client, n_clients=2)
    client.post(f"/live/{sess['id']}")
    alex_set = next(we for we in added if we["client_id"] == alex["id"])["sets"][0]
    body = {"exercise_id": deadlift["id"], "client_id": sam["id"]}
    r = client.post(f"/live/{sess['id']}/sets/{alex_set['id']}/complete", json=body)
    assert r.status_code == 409
    assert client.get(f"/live/{sess['id']}/timers").json()["timers"] == []
