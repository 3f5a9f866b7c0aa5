"""Unit tests for chain-field stamping on rows outside a session."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import make_transient_to_detached

from asof.application.interfaces import IdentityProvider
from asof.domain.exceptions import IdentityResolutionError, InvalidIntervalError
from asof.domain.temporal import INFINITY
from asof.infrastructure.database.models import ProductModel
from asof.infrastructure.identity import ContextVarIdentityProvider, acting_as
from asof.infrastructure.versioning.writer import (
    has_changes,
    immutable_field_errors,
    interval_errors,
    resolve_actor,
    stamp,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class BrokenIdentityProvider(IdentityProvider):
    def current_actor_id(self) -> str | None:
        raise IdentityResolutionError("no session")


def test_stamp_fills_a_new_version():
    product = ProductModel(sku="X-1", name="Widget")

    assert stamp(product, changed=True, actor_id="alice", now=NOW)

    assert product.id is not None
    assert product.group_id == product.id
    assert product.created_dt == NOW
    assert product.obsoleted_dt is INFINITY
    assert product.user_id == "alice"
    assert product.o_user_id is None


def test_stamp_keeps_supplied_chain_fields():
    created = NOW - timedelta(days=1)
    product = ProductModel(sku="X-1", name="Widget", group_id="g-1", created_dt=created)

    stamp(product, changed=True, actor_id=None, now=NOW)

    assert product.group_id == "g-1"
    assert product.created_dt == created
    assert product.user_id is None


def test_stamp_normalizes_infinity_spellings():
    product = ProductModel(sku="X-1", name="Widget", obsoleted_dt="Infinity")
    stamp(product, changed=True, actor_id=None, now=NOW)
    assert product.obsoleted_dt is INFINITY


def test_stamp_credits_the_creator_of_a_row_written_closed():
    product = ProductModel(
        sku="X-1",
        name="Widget",
        created_dt=NOW - timedelta(hours=1),
        obsoleted_dt=NOW,
    )

    with acting_as("alice"):
        actor_id = resolve_actor(ContextVarIdentityProvider())
    stamp(product, changed=True, actor_id=actor_id, now=NOW)

    assert product.user_id == "alice"
    assert product.o_user_id is None


def test_stamp_records_closing_actor_on_stored_rows():
    product = ProductModel(
        id="p-1",
        group_id="p-1",
        sku="X-1",
        name="Widget",
        created_dt=NOW - timedelta(hours=1),
        obsoleted_dt=INFINITY,
        user_id="alice",
        o_user_id=None,
    )
    make_transient_to_detached(product)
    product.obsoleted_dt = NOW

    stamp(product, changed=True, actor_id="bob", now=NOW)

    assert product.user_id == "alice"
    assert product.o_user_id == "bob"


def test_stamp_reads_naive_timestamps_as_utc():
    product = ProductModel(
        sku="X-1",
        name="Widget",
        created_dt=datetime(2026, 1, 1),
        obsoleted_dt=datetime(2026, 6, 1),
    )

    stamp(product, changed=True, actor_id=None, now=NOW)

    assert product.created_dt == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert product.obsoleted_dt.tzinfo is timezone.utc
    assert interval_errors(product) == []


def test_stamp_without_changes_is_a_no_op():
    product = ProductModel(sku="X-1", name="Widget")
    assert not stamp(product, changed=False, actor_id="alice", now=NOW)
    assert product.id is None
    assert product.user_id is None


def test_new_rows_count_as_changed_and_have_no_immutable_fields():
    product = ProductModel(sku="X-1", name="Widget")
    assert has_changes(product)
    assert immutable_field_errors(product) == []


def test_interval_errors_reject_empty_intervals():
    product = ProductModel(sku="X-1", name="Widget", created_dt=NOW, obsoleted_dt=NOW)
    errors = interval_errors(product)
    assert len(errors) == 1
    assert isinstance(errors[0], InvalidIntervalError)
    assert errors[0].field == "obsoleted_dt"


def test_interval_errors_ignore_open_rows():
    product = ProductModel(sku="X-1", name="Widget", created_dt=NOW, obsoleted_dt=INFINITY)
    assert interval_errors(product) == []


def test_resolve_actor_swallows_identity_failures():
    assert resolve_actor(BrokenIdentityProvider()) is None
    assert resolve_actor(None) is None


def test_resolve_actor_reads_the_context():
    provider = ContextVarIdentityProvider()
    assert resolve_actor(provider) is None
    with acting_as("carol"):
        assert resolve_actor(provider) == "carol"
    assert resolve_actor(provider) is None
