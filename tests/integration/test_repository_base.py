"""
Integration tests for the generic repository against SQLite.
"""

import pytest
from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from infrastructure_base.exceptions import IdentifierAccessError
from infrastructure_base.repositories.base import RepositoryBase
from tests.fixtures.models import Customer, Membership

class CustomerName(BaseModel):
    id: int
    name: str

def test_add_persists_entity(customer_repository, db_session):
    customer = Customer(name="Ann", age=34)

    customer_repository.add(customer)

    assert customer.id is not None
    assert db_session.get(Customer, customer.id).name == "Ann"

def test_add_return_id_uses_primary_key(customer_repository):
    """Without an explicit accessor the single-column primary key is returned."""
    first = customer_repository.add_return_id(Customer(name="Ann"))
    second = customer_repository.add_return_id(Customer(name="Bob"))

    assert isinstance(first, int)
    assert second == first + 1

def test_add_return_id_uses_explicit_accessor(db_session):
    repository = RepositoryBase(db_session, Customer, id_getter=lambda customer: customer.name)

    assert repository.add_return_id(Customer(name="Ann")) == "Ann"

def test_add_return_id_requires_accessor_for_composite_key(db_session, sample_customers):
    repository = RepositoryBase(db_session, Membership)

    with pytest.raises(IdentifierAccessError):
        repository.add_return_id(Membership(customer_id=sample_customers[0].id, group_name="vip"))

    assert repository.get_all() == []

def test_composite_key_with_accessor(db_session, sample_customers):
    repository = RepositoryBase(
        db_session,
        Membership,
        id_getter=lambda m: (m.customer_id, m.group_name),
    )

    identifier = repository.add_return_id(Membership(customer_id=sample_customers[0].id, group_name="vip"))

    assert identifier == (sample_customers[0].id, "vip")
    assert repository.get_by_id(identifier).group_name == "vip"

def test_add_range_commits_all(customer_repository):
    customer_repository.add_range(Customer(name=name) for name in ("Ann", "Bob", "Cid"))

    assert sorted(c.name for c in customer_repository.get_all()) == ["Ann", "Bob", "Cid"]

def test_update_detached_entity(customer_repository, session_factory, sample_customers):
    """A detached instance carrying new state is written back."""
    detached = Customer(id=sample_customers[1].id, name="Robert", email="bob@example.com", age=20)

    updated = customer_repository.update(detached)

    assert updated.name == "Robert"
    with session_factory() as other_session:
        stored = other_session.get(Customer, sample_customers[1].id)
        assert (stored.name, stored.email, stored.age) == ("Robert", "bob@example.com", 20)

def test_remove_deletes_entity(customer_repository, db_session):
    customer = Customer(name="Temp")
    customer_repository.add(customer)

    customer_repository.remove(customer)

    assert customer_repository.get_by_id(customer.id) is None

def test_get_by_id_missing_returns_none(customer_repository):
    assert customer_repository.get_by_id(9999) is None

def test_find_with_expression_and_filters(customer_repository, sample_customers):
    adults = customer_repository.find(Customer.age >= 30)
    named = customer_repository.find(name="Bob")
    both = customer_repository.get_by(Customer.age >= 30, email="cid@example.com")

    assert sorted(c.name for c in adults) == ["Ann", "Cid"]
    assert [c.name for c in named] == ["Bob"]
    assert [c.name for c in both] == ["Cid"]

def test_get_all(customer_repository, sample_customers):
    assert len(customer_repository.get_all()) == 3

def test_get_cols_all_maps_back_to_entity(customer_repository, sample_customers):
    """Projected rows become transient entities carrying only those fields."""
    customers = customer_repository.get_cols_all(Customer.id, Customer.name)

    assert sorted(c.name for c in customers) == ["Ann", "Bob", "Cid"]
    for customer in customers:
        assert isinstance(customer, Customer)
        assert customer.email is None
        assert sa_inspect(customer).transient

def test_get_cols_all_accepts_attribute_names(customer_repository, sample_customers):
    customers = customer_repository.get_cols_all("name", "age")

    assert sorted((c.name, c.age) for c in customers) == [("Ann", 34), ("Bob", 19), ("Cid", 52)]

def test_get_cols_by_maps_to_projection_type(customer_repository, sample_customers):
    results = customer_repository.get_cols_by(
        Customer.age < 40,
        Customer.id,
        Customer.name,
        as_type=CustomerName,
    )

    assert sorted(r.name for r in results) == ["Ann", "Bob"]
    assert all(isinstance(r, CustomerName) for r in results)

def test_get_cols_by_with_filter_dict(customer_repository, sample_customers):
    results = customer_repository.get_cols_by({"name": "Cid"}, Customer.email)

    assert [r.email for r in results] == ["cid@example.com"]

def test_get_top_cols_by_limits_rows(customer_repository, sample_customers):
    results = customer_repository.get_top_cols_by(
        [Customer.age > 18, Customer.name != "Nobody"],
        [Customer.name],
        2,
    )

    assert len(results) == 2
    assert {r.name for r in results} <= {"Ann", "Bob", "Cid"}

def test_context_manager_closes_session(session_factory):
    session = session_factory()

    with RepositoryBase(session, Customer) as repository:
        repository.add(Customer(name="Ann"))
        assert session.in_transaction() is False

    assert list(session.identity_map.values()) == []

def test_database_errors_propagate(customer_repository):
    """Constraint violations reach the caller unchanged."""
    from sqlalchemy.exc import IntegrityError

    with pytest.raises(IntegrityError):
        customer_repository.add(Customer(name=None))
