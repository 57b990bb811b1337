from datetime import datetime, timezone

from app.config.mock_firestore import DESCENDING, MockFirestore


def test_documents_are_copied_on_read_and_write():
    db = MockFirestore()
    ref = db.collection("users").document("u1")
    data = {"phone": "1", "addresses": []}
    ref.set(data)

    data["addresses"].append("mutated")
    snapshot = ref.get().to_dict()
    assert snapshot["addresses"] == []

    snapshot["addresses"].append("mutated")
    assert ref.get().to_dict()["addresses"] == []


def test_where_order_and_limit():
    db = MockFirestore()
    users = db.collection("users")
    for i, phone in enumerate(["a", "b", "c"]):
        users.document(f"u{i}").set({"phone": phone, "rank": i})

    assert [d.id for d in users.where("phone", "==", "b").stream()] == ["u1"]
    assert [d.id for d in users.order_by("rank", direction=DESCENDING).limit(2).stream()] == ["u2", "u1"]
    assert not users.document("missing").get().exists


def test_snapshot_round_trips_datetimes(tmp_path):
    path = str(tmp_path / "db.json")
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    MockFirestore(path).collection("users").document("u1").set({"last_login": stamp})

    reloaded = MockFirestore(path).collection("users").document("u1").get().to_dict()
    assert reloaded["last_login"] == stamp


def test_snapshot_keeps_dicts_that_look_like_tags(tmp_path):
    path = str(tmp_path / "db.json")
    cart = {"__datetime__": 1}
    lookalike = {"__mock_firestore_type__": 3, "value": 2}

    MockFirestore(path).collection("users").document("u1").set({"cart": cart, "other": lookalike})

    reloaded = MockFirestore(path).collection("users").document("u1").get().to_dict()
    assert reloaded["cart"] == cart
    assert reloaded["other"] == lookalike
