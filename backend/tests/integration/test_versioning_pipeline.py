"""Versioned writes and removals against an in-memory SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from asof.application.interfaces import IdentityProvider
from asof.domain.exceptions import (
    DanglingReferenceError,
    IdentityResolutionError,
    ImmutableFieldError,
    InvalidIntervalError,
    RecordInvalidError,
    ReferentialBlockError,
    UniquenessViolationError,
)
from asof.domain.temporal import INFINITY
from asof.infrastructure.database import CategoryModel, ProductModel, versioning_registry
from asof.infrastructure.identity import acting_as
from asof.infrastructure.versioning import VersioningPipeline


class UnreachableIdentityProvider(IdentityProvider):
    def current_actor_id(self) -> str | None:
        raise IdentityResolutionError("identity service unavailable")


async def _open_count(session, group_id: str) -> int:
    return await session.scalar(
        select(func.count())
        .select_from(ProductModel)
        .where(ProductModel.group_id == group_id, ProductModel.obsoleted_dt == INFINITY)
    )


@pytest.mark.asyncio
async def test_save_stamps_and_persists(session, pipeline, clock):
    with acting_as("alice"):
        product = await pipeline.save(session, ProductModel(sku="X-1", name="Widget"))
    product_id = product.id
    await session.commit()

    stored = await session.get(ProductModel, product_id, populate_existing=True)
    assert stored.group_id == product_id
    assert stored.created_dt == clock.now
    assert stored.obsoleted_dt is INFINITY
    assert stored.user_id == "alice"
    assert stored.o_user_id is None


@pytest.mark.asyncio
async def test_unchanged_rows_are_not_restamped(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X-1", name="Widget"))
    created = product.created_dt

    with acting_as("bob"):
        await pipeline.save(session, product)

    assert product.created_dt == created
    assert product.user_id is None


@pytest.mark.asyncio
async def test_two_open_versions_with_the_same_sku_fail(session, pipeline):
    await pipeline.save(session, ProductModel(sku="X", name="First"))

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(session, ProductModel(sku="X", name="Second"))

    errors = exc_info.value.errors_for("sku")
    assert len(errors) == 1
    assert isinstance(errors[0], UniquenessViolationError)
    assert errors[0].message == "record must be unique"


@pytest.mark.asyncio
async def test_open_and_closed_versions_may_share_a_sku(session, pipeline):
    first = await pipeline.save(session, ProductModel(sku="X", name="First"))
    await pipeline.obsolete(session, first)

    second = await pipeline.save(session, ProductModel(sku="X", name="Second"))

    assert second.obsoleted_dt is INFINITY


@pytest.mark.asyncio
async def test_closed_versions_collide_only_at_the_same_instant(session, pipeline, clock):
    at = clock.now + timedelta(days=1)
    first = await pipeline.save(session, ProductModel(sku="X", name="First"))
    await pipeline.obsolete(session, first, at)
    second = await pipeline.save(session, ProductModel(sku="X", name="Second"))
    await pipeline.obsolete(session, second, at + timedelta(hours=1))

    third = await pipeline.save(session, ProductModel(sku="X", name="Third"))
    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.obsolete(session, third, at)
    assert exc_info.value.has(UniquenessViolationError)


@pytest.mark.asyncio
async def test_only_one_open_version_per_group(session, pipeline):
    first = await pipeline.save(session, ProductModel(sku="X", name="First"))

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(
            session, ProductModel(sku="Y", name="Sibling", group_id=first.group_id)
        )

    assert [e.field for e in exc_info.value.errors] == ["group_id"]
    assert await _open_count(session, first.group_id) == 1


@pytest.mark.asyncio
async def test_storage_constraint_backs_up_the_pre_check(session, pipeline):
    first = await pipeline.save(session, ProductModel(sku="X", name="First"))
    await session.commit()

    # bypass the pipeline's own checks
    session.add(
        ProductModel(
            id="manual",
            group_id="manual",
            sku="X",
            name="Raw",
            created_dt=first.created_dt,
            obsoleted_dt=INFINITY,
        )
    )
    with pytest.raises(IntegrityError):
        await session.flush()
    await session.rollback()


@pytest.mark.asyncio
async def test_obsolete_records_the_closing_actor(session, pipeline, clock):
    with acting_as("alice"):
        product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))
    with acting_as("bob"):
        await pipeline.obsolete(session, product)

    assert product.created_dt < product.obsoleted_dt <= clock.now
    assert product.user_id == "alice"
    assert product.o_user_id == "bob"


@pytest.mark.asyncio
async def test_closed_versions_cannot_be_closed_again(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))
    await pipeline.obsolete(session, product)

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.obsolete(session, product)
    assert exc_info.value.has(ImmutableFieldError)


@pytest.mark.asyncio
async def test_group_id_is_immutable(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))
    product.group_id = "other"

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(session, product)
    assert exc_info.value.errors_for("group_id")


@pytest.mark.asyncio
async def test_closing_before_creation_is_rejected(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.obsolete(session, product, product.created_dt - timedelta(seconds=1))
    assert exc_info.value.has(InvalidIntervalError)


@pytest.mark.asyncio
async def test_naive_close_instant_is_read_as_utc(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))

    await pipeline.obsolete(session, product, datetime(2027, 1, 1))

    assert product.obsoleted_dt == datetime(2027, 1, 1, tzinfo=timezone.utc)
    assert product.obsoleted_dt.tzinfo is not None


@pytest.mark.asyncio
async def test_identity_failure_leaves_user_id_unset(session, clock):
    pipeline = VersioningPipeline(
        versioning_registry, identity=UnreachableIdentityProvider(), clock=clock
    )
    with acting_as("alice"):
        product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))

    assert product.user_id is None
    assert product.obsoleted_dt is INFINITY


# ── References ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_referencing_an_obsoleted_parent_fails(session, pipeline):
    category = await pipeline.save(session, CategoryModel(code="P", name="Parent"))
    await pipeline.obsolete(session, category)

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(
            session, ProductModel(sku="D", name="Dependent", category_id=category.id)
        )

    errors = exc_info.value.errors_for("category")
    assert len(errors) == 1
    assert isinstance(errors[0], DanglingReferenceError)
    assert errors[0].message == "Obsoleted association value!"


@pytest.mark.asyncio
async def test_loaded_parent_is_checked_without_a_query(session, pipeline):
    category = await pipeline.save(session, CategoryModel(code="P", name="Parent"))
    await pipeline.obsolete(session, category)

    product = ProductModel(sku="D", name="Dependent", category=category)
    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(session, product)
    assert exc_info.value.has(DanglingReferenceError)


@pytest.mark.asyncio
async def test_repointing_a_loaded_row_at_an_obsoleted_parent_fails(session, pipeline):
    current = await pipeline.save(session, CategoryModel(code="A", name="Current"))
    retired = await pipeline.save(session, CategoryModel(code="B", name="Retired"))
    await pipeline.obsolete(session, retired)
    product = await pipeline.save(
        session, ProductModel(sku="D", name="Dependent", category_id=current.id)
    )
    product_id, retired_id = product.id, retired.id
    await session.commit()
    session.expunge_all()

    loaded = await session.scalar(
        select(ProductModel)
        .options(selectinload(ProductModel.category))
        .where(ProductModel.id == product_id)
    )
    assert loaded.category.code == "A"
    loaded.category_id = retired_id

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.save(session, loaded)
    assert isinstance(exc_info.value.errors_for("category")[0], DanglingReferenceError)


@pytest.mark.asyncio
async def test_closing_a_dependent_of_a_closed_parent_is_allowed(session, pipeline):
    category = await pipeline.save(session, CategoryModel(code="P", name="Parent"))
    product = await pipeline.save(
        session, ProductModel(sku="D", name="Dependent", category_id=category.id)
    )
    await pipeline.obsolete(session, category)

    await pipeline.obsolete(session, product)

    assert product.obsoleted_dt is not INFINITY


@pytest.mark.asyncio
async def test_parent_with_open_dependents_cannot_be_removed(session, pipeline):
    category = await pipeline.save(session, CategoryModel(code="P", name="Parent"))
    product = await pipeline.save(
        session, ProductModel(sku="D", name="Dependent", category_id=category.id)
    )

    with pytest.raises(RecordInvalidError) as exc_info:
        await pipeline.destroy(session, category)

    (error,) = exc_info.value.errors
    assert isinstance(error, ReferentialBlockError)
    assert error.field == "base"
    assert error.message == "Category can't be deleted because Product records exist"

    await pipeline.obsolete(session, product)
    await pipeline.destroy(session, category)

    assert await session.get(CategoryModel, category.id) is None
    assert await session.get(ProductModel, product.id) is not None


@pytest.mark.asyncio
async def test_non_append_only_rows_are_removed_without_a_guard(session, pipeline):
    product = await pipeline.save(session, ProductModel(sku="X", name="Widget"))

    await pipeline.destroy(session, product)

    assert await session.get(ProductModel, product.id) is None
