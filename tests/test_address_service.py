import random

import pytest

from app.core.errors import AddressNotFound, IdentityNotFound
from app.models.user import AddressCreate, AddressUpdate, Identity
from app.services.address_service import (
    AddressService,
    add_address,
    delete_address,
    has_single_default,
    set_default,
    update_address,
)


def new_identity():
    return Identity(id="user-1", phone="919812345678")


def address_data(street="1 MG Road", **kwargs):
    data = {"street": street, "city": "Pune", "state": "MH", "pincode": "411001"}
    data.update(kwargs)
    return AddressCreate(**data)


def defaults(identity):
    return [a.is_default for a in identity.addresses]


def test_first_address_becomes_default_even_when_unset():
    identity = new_identity()
    c = add_address(identity, address_data("C"))
    assert c.is_default is True
    assert c.country == "India"


def test_added_default_takes_over():
    identity = new_identity()
    add_address(identity, address_data("A"))
    add_address(identity, address_data("B"))
    assert defaults(identity) == [True, False]

    add_address(identity, address_data("C", is_default=True))
    assert defaults(identity) == [False, False, True]


def test_deleting_default_promotes_first_remaining():
    identity = new_identity()
    a = add_address(identity, address_data("A"))
    add_address(identity, address_data("B"))

    delete_address(identity, a.id)

    assert [x.street for x in identity.addresses] == ["B"]
    assert defaults(identity) == [True]


def test_deleting_non_default_keeps_default():
    identity = new_identity()
    add_address(identity, address_data("A"))
    b = add_address(identity, address_data("B"))
    add_address(identity, address_data("C"))

    delete_address(identity, b.id)
    assert defaults(identity) == [True, False]


def test_deleting_last_address_leaves_no_default():
    identity = new_identity()
    a = add_address(identity, address_data("A"))
    delete_address(identity, a.id)
    assert identity.addresses == []
    assert has_single_default(identity.addresses)


def test_set_default_moves_flag():
    identity = new_identity()
    add_address(identity, address_data("A"))
    b = add_address(identity, address_data("B"))

    set_default(identity, b.id)
    assert defaults(identity) == [False, True]


def test_update_is_partial():
    identity = new_identity()
    a = add_address(identity, address_data("A", country="Nepal"))

    update_address(identity, a.id, AddressUpdate(city="Mumbai"))

    assert a.street == "A"
    assert a.city == "Mumbai"
    assert a.state == "MH"
    assert a.country == "Nepal"


def test_update_with_default_moves_flag_and_false_is_ignored():
    identity = new_identity()
    a = add_address(identity, address_data("A"))
    b = add_address(identity, address_data("B"))

    update_address(identity, b.id, AddressUpdate(is_default=True))
    assert defaults(identity) == [False, True]

    update_address(identity, b.id, AddressUpdate(is_default=False))
    assert defaults(identity) == [False, True]
    assert has_single_default(identity.addresses)
    assert a.is_default is False


@pytest.mark.parametrize("operation", [delete_address, set_default])
def test_missing_address_raises(operation):
    identity = new_identity()
    add_address(identity, address_data("A"))
    with pytest.raises(AddressNotFound):
        operation(identity, "missing")


def test_update_missing_address_raises():
    identity = new_identity()
    with pytest.raises(AddressNotFound):
        update_address(identity, "missing", AddressUpdate(city="X"))


@pytest.mark.parametrize("seed", range(20))
def test_single_default_holds_after_every_operation(seed):
    rng = random.Random(seed)
    identity = new_identity()

    for step in range(60):
        ids = [a.id for a in identity.addresses]
        choice = rng.choice(["add", "add", "update", "delete", "default"])

        if choice == "add" or not ids:
            add_address(identity, address_data(f"S{step}", is_default=rng.random() < 0.3))
        elif choice == "update":
            flag = rng.choice([None, True, False])
            update_address(identity, rng.choice(ids), AddressUpdate(city=f"City{step}", is_default=flag))
        elif choice == "delete":
            delete_address(identity, rng.choice(ids))
        else:
            set_default(identity, rng.choice(ids))

        assert has_single_default(identity.addresses), (seed, step, choice)


def test_service_persists_each_mutation(users):
    identity = users.create_user("919812345678", name="Asha")
    service = AddressService(users=users)

    addresses = service.add(identity.phone, address_data("A"))
    service.add(identity.phone, address_data("B"))
    service.set_default(identity.phone, addresses[0].id)
    service.delete(identity.phone, addresses[0].id)

    stored = users.get_user_by_id(identity.id).addresses
    assert [a.street for a in stored] == ["B"]
    assert stored[0].is_default is True


def test_service_unknown_owner(users):
    with pytest.raises(IdentityNotFound):
        AddressService(users=users).list_addresses("910000000000")
