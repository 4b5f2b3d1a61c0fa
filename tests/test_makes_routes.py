import json


def _state(client, key="vehicleMakeListState"):
    with client.session_transaction() as sess:
        return json.loads(sess[key])


def test_landing_page_links_both_lists(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert b"/vehicle-makes/" in resp.data
    assert b"/vehicle-models/" in resp.data


def test_list_uses_default_state(client):
    resp = client.get("/vehicle-makes/")

    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Audi" in html and "Kia" in html
    assert "Mazda" not in html  # page size 5, sorted by name


def test_next_only_while_pages_are_full(client):
    html = client.get("/vehicle-makes/").get_data(as_text=True)
    assert 'href="?page=2"' in html

    html = client.get("/vehicle-makes/?page=2").get_data(as_text=True)
    assert "Mazda" in html and "Toyota" in html
    assert 'href="?page=3"' not in html
    assert _state(client)["page"] == 2


def test_filter_change_resets_page_and_persists(client):
    client.get("/vehicle-makes/?page=2")

    html = client.get("/vehicle-makes/?filter_field=name&filter_value=o").get_data(as_text=True)

    state = _state(client)
    assert state["page"] == 1
    assert state["filter_value"] == "o"
    assert "Toyota" in html and "Ford" in html
    assert "BMW" not in html


def test_sort_change_resets_page(client):
    client.get("/vehicle-makes/?page=2")

    client.get("/vehicle-makes/?sort_field=abrv&sort_direction=desc")

    state = _state(client)
    assert state["page"] == 1
    assert (state["sort_field"], state["sort_direction"]) == ("abrv", "desc")


def test_fetch_error_shows_message_and_empty_table(client, fake_backend):
    fake_backend.fail = True

    html = client.get("/vehicle-makes/").get_data(as_text=True)

    assert "Error loading manufacturers." in html
    assert "No manufacturers found." in html


def test_create_with_empty_name_is_rejected(client, fake_backend):
    resp = client.post("/vehicle-makes/create", data={"name": "", "abrv": "X"})

    assert resp.status_code == 200
    assert "Name is required" in resp.get_data(as_text=True)
    assert fake_backend.writes() == []


def test_create_then_list_reflects_change(client, fake_backend):
    client.get("/vehicle-makes/?filter_field=name&filter_value=lada")

    resp = client.post("/vehicle-makes/create", data={"name": "Lada", "abrv": "LAD"})

    assert resp.status_code == 302
    assert fake_backend.writes() == [("insert", "VehicleMake", {"name": "Lada", "abrv": "LAD"})]
    assert "Lada" in client.get("/vehicle-makes/").get_data(as_text=True)


def test_create_backend_failure_keeps_form(client, fake_backend):
    fake_backend.fail = True

    resp = client.post("/vehicle-makes/create", data={"name": "Lada", "abrv": "LAD"})

    assert resp.status_code == 200
    assert "Error saving data." in resp.get_data(as_text=True)


def test_edit_prefills_and_updates(client, fake_backend):
    html = client.get("/vehicle-makes/edit/2").get_data(as_text=True)
    assert 'value="BMW"' in html

    resp = client.post("/vehicle-makes/edit/2", data={"name": "BMW Group", "abrv": "BMW"})

    assert resp.status_code == 302
    assert fake_backend.writes() == [("update", "VehicleMake", 2, {"name": "BMW Group", "abrv": "BMW"})]


def test_edit_missing_make_is_not_found(client):
    resp = client.get("/vehicle-makes/edit/404")

    assert resp.status_code == 404
    assert "Manufacturer not found" in resp.get_data(as_text=True)


def test_delete_asks_for_confirmation(client, fake_backend):
    html = client.get("/vehicle-makes/delete/3").get_data(as_text=True)

    assert "Are you sure you want to delete this manufacturer?" in html
    assert fake_backend.writes() == []


def test_declined_delete_leaves_list_unchanged(client, fake_backend):
    before = client.get("/vehicle-makes/").get_data(as_text=True)

    resp = client.post("/vehicle-makes/delete/3", data={"confirmed": "no"})
    after = client.get("/vehicle-makes/").get_data(as_text=True)

    assert resp.status_code == 302
    assert fake_backend.writes() == []
    assert "Audi" in after
    assert before.count("<tr>") == after.count("<tr>")


def test_confirmed_delete_removes_row(client, fake_backend):
    client.get("/vehicle-makes/")

    client.post("/vehicle-makes/delete/3", data={"confirmed": "yes"})

    assert fake_backend.writes() == [("delete", "VehicleMake", 3)]
    assert "Audi" not in client.get("/vehicle-makes/").get_data(as_text=True)


def test_backend_error_outside_list_redirects_with_message(client, fake_backend):
    fake_backend.fail = True

    resp = client.get("/vehicle-makes/edit/2")

    assert resp.status_code == 303
    assert resp.headers["Location"].endswith("/")


def test_backend_side_insert_shows_on_next_list(client, fake_backend):
    client.get("/vehicle-makes/?sort_field=id&sort_direction=desc")

    fake_backend.tables["VehicleMake"].append({"id": 8, "name": "Alfa", "abrv": "ALF"})

    assert "Alfa" in client.get("/vehicle-makes/").get_data(as_text=True)


def test_row_deleted_elsewhere_is_not_found_on_edit(client, fake_backend):
    assert client.get("/vehicle-makes/edit/2").status_code == 200

    fake_backend.tables["VehicleMake"] = [r for r in fake_backend.tables["VehicleMake"] if r["id"] != 2]

    resp = client.get("/vehicle-makes/edit/2")
    assert resp.status_code == 404
    assert "Manufacturer not found" in resp.get_data(as_text=True)


def test_each_request_selects_again(client, fake_backend):
    client.get("/vehicle-makes/")
    client.get("/vehicle-makes/")

    selects = [c for c in fake_backend.calls if c[0] == "select"]
    assert len(selects) == 2
    assert selects[0] == selects[1]


def test_update_of_vanished_row_is_reported(client, fake_backend):
    original_update = fake_backend.update

    def update_after_concurrent_delete(table, record_id, record):
        fake_backend.tables[table] = [r for r in fake_backend.tables[table] if r["id"] != record_id]
        return original_update(table, record_id, record)

    fake_backend.update = update_after_concurrent_delete

    resp = client.post("/vehicle-makes/edit/2", data={"name": "BMW Group", "abrv": "BMW"})

    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "Manufacturer not found" in html
    assert "Manufacturer updated" not in html
