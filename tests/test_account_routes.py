from conftest import bearer, login


PHONE = "919812345678"
ADDRESS = {"street": "1 MG Road", "city": "Pune", "state": "MH", "pincode": "411001"}


def add(client, **overrides):
    return client.post(f"/api/auth/addresses/{PHONE}", json={**ADDRESS, **overrides})


def test_address_flow_keeps_single_default(client):
    login(client, PHONE, "Asha")

    resp = add(client, street="A")
    assert resp.status_code == 201
    a = resp.json()["addresses"][0]
    assert a["is_default"] is True
    assert a["country"] == "India"

    b = add(client, street="B").json()["addresses"][1]
    assert b["is_default"] is False

    resp = client.patch(f"/api/auth/addresses/{PHONE}/{b['id']}/default")
    assert [x["is_default"] for x in resp.json()["addresses"]] == [False, True]

    resp = client.delete(f"/api/auth/addresses/{PHONE}/{b['id']}")
    assert resp.json()["addresses"] == [{**a, "is_default": True}]


def test_update_address_partial(client):
    login(client, PHONE, "Asha")
    a = add(client).json()["addresses"][0]

    resp = client.put(f"/api/auth/addresses/{PHONE}/{a['id']}", json={"pincode": "411002"})

    updated = resp.json()["addresses"][0]
    assert updated["pincode"] == "411002"
    assert updated["street"] == a["street"]


def test_missing_address_fields_are_rejected(client):
    login(client, PHONE, "Asha")
    resp = client.post(f"/api/auth/addresses/{PHONE}", json={"street": "A", "city": "Pune"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_unknown_address_is_not_found(client):
    login(client, PHONE, "Asha")
    resp = client.delete(f"/api/auth/addresses/{PHONE}/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Address not found"}


def test_addresses_of_another_user_are_forbidden(make_client):
    login(make_client(), PHONE, "Asha")
    intruder = make_client()
    login(intruder, "919800000002", "Ravi")

    assert intruder.get(f"/api/auth/addresses/{PHONE}").status_code == 403
    assert add(intruder).status_code == 403


def test_addresses_require_authentication(make_client):
    assert make_client().get(f"/api/auth/addresses/{PHONE}").status_code == 401


def test_admin_can_manage_other_addresses(make_client, admin_token):
    login(make_client(), PHONE, "Asha")
    resp = make_client().post(
        f"/api/auth/addresses/{PHONE}", json=ADDRESS, headers=bearer(admin_token)
    )
    assert resp.status_code == 201


def test_cart_and_wishlist(client):
    login(client, PHONE, "Asha")

    client.post(f"/api/auth/cart/{PHONE}", json={"product_id": "p1", "quantity": 2})
    resp = client.post(f"/api/auth/cart/{PHONE}", json={"product_id": "p1", "quantity": 3})
    assert resp.json()["cart"] == {"p1": 3}

    resp = client.delete(f"/api/auth/cart/{PHONE}/p1")
    assert resp.json()["cart"] == {}

    client.post(f"/api/auth/wishlist/{PHONE}", json={"product_id": "p1"})
    resp = client.post(f"/api/auth/wishlist/{PHONE}", json={"product_id": "p1"})
    assert resp.json()["wishlist"] == ["p1"]

    resp = client.delete(f"/api/auth/wishlist/{PHONE}/p1")
    assert resp.json()["wishlist"] == []


def test_cart_rejects_zero_quantity(client):
    login(client, PHONE, "Asha")
    resp = client.post(f"/api/auth/cart/{PHONE}", json={"product_id": "p1", "quantity": 0})
    assert resp.status_code == 400
