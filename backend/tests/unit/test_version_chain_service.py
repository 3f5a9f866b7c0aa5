"""Unit tests for version-chain use cases, against an in-memory repository."""

import dataclasses
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from asof.application.interfaces import ProductRepository
from asof.application.schemas import ProductCreate, ProductUpdate
from asof.application.services import ProductService
from asof.domain.entities import Product
from asof.domain.exceptions import EntityNotFoundError
from asof.domain.temporal import INFINITY, contains, is_open, require_timestamp


class FakeProductRepository(ProductRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self._versions: dict[str, Product] = {}
        self._now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.list_calls: list[Any] = []

    def _tick(self) -> datetime:
        self._now += timedelta(minutes=1)
        return self._now

    async def get_by_id(self, version_id: str) -> Product | None:
        return self._versions.get(version_id)

    async def get_current(self, group_id: str) -> Product | None:
        for product in self._versions.values():
            if product.group_id == group_id and is_open(product.obsoleted_dt):
                return product
        return None

    async def get_history(self, group_id: str) -> list[Product]:
        history = [p for p in self._versions.values() if p.group_id == group_id]
        return sorted(history, key=lambda p: p.created_dt)

    async def list_as_of(self, ts, *, category_id=None, skip=0, limit=100) -> list[Product]:
        ts = require_timestamp(ts)
        self.list_calls.append(ts)
        visible = [
            p
            for p in self._versions.values()
            if contains(p.created_dt, p.obsoleted_dt, ts)
            and (category_id is None or p.category_id == category_id)
        ]
        return visible[skip : skip + limit]

    async def create(self, product: Product) -> Product:
        product = dataclasses.replace(product, id=str(uuid.uuid4()))
        product.group_id = product.group_id or product.id
        product.created_dt = product.created_dt or self._tick()
        product.obsoleted_dt = product.obsoleted_dt or INFINITY
        self._versions[product.id] = product
        return product

    async def obsolete(self, version_id: str, at: datetime | None = None) -> Product | None:
        product = self._versions.get(version_id)
        if product is None:
            return None
        product.obsoleted_dt = at or self._tick()
        return product

    async def delete(self, version_id: str) -> bool:
        return self._versions.pop(version_id, None) is not None


@pytest.fixture
def repository() -> FakeProductRepository:
    return FakeProductRepository()


@pytest.fixture
def service(repository) -> ProductService:
    return ProductService(repository)


@pytest.mark.asyncio
async def test_create_product_starts_a_chain(service: ProductService):
    product = await service.create_product(ProductCreate(sku="X-1", name="Widget"))
    assert product.group_id == product.id
    assert product.is_current


@pytest.mark.asyncio
async def test_update_supersedes_the_current_version(service: ProductService):
    first = await service.create_product(ProductCreate(sku="X-1", name="Widget", price_cents=100))

    second = await service.update_product(first.group_id, ProductUpdate(price_cents=150))

    assert second.id != first.id
    assert second.group_id == first.group_id
    assert second.price_cents == 150
    assert second.sku == "X-1"

    history = await service.get_history(first.group_id)
    assert [p.price_cents for p in history] == [100, 150]
    old, new = history
    assert not old.is_current
    assert new.is_current
    assert new.created_dt == old.obsoleted_dt
    assert not old.interval.overlaps(new.interval)


@pytest.mark.asyncio
async def test_update_without_changes_keeps_the_version(service: ProductService):
    first = await service.create_product(ProductCreate(sku="X-1", name="Widget"))

    result = await service.update_product(first.group_id, ProductUpdate(name="Widget"))

    assert result.id == first.id
    assert len(await service.get_history(first.group_id)) == 1


@pytest.mark.asyncio
async def test_update_unknown_group(service: ProductService):
    with pytest.raises(EntityNotFoundError):
        await service.update_product("missing", ProductUpdate(name="Other"))


@pytest.mark.asyncio
async def test_obsolete_closes_the_chain(service: ProductService):
    first = await service.create_product(ProductCreate(sku="X-1", name="Widget"))

    closed = await service.obsolete(first.group_id)

    assert not closed.is_current
    with pytest.raises(EntityNotFoundError):
        await service.get_current(first.group_id)
    with pytest.raises(EntityNotFoundError):
        await service.obsolete(first.group_id)


@pytest.mark.asyncio
async def test_list_defaults_to_current_versions(service, repository):
    first = await service.create_product(ProductCreate(sku="X-1", name="Widget"))
    await service.update_product(first.group_id, ProductUpdate(name="Gadget"))

    current = await service.list_products()
    assert [p.name for p in current] == ["Gadget"]
    assert repository.list_calls[-1] is INFINITY

    history = await service.get_history(first.group_id)
    then = await service.list_products(as_of=history[0].obsoleted_dt)
    assert [p.name for p in then] == ["Widget"]


@pytest.mark.asyncio
async def test_list_filters_by_category(service: ProductService):
    await service.create_product(ProductCreate(sku="X-1", name="Widget", category_id="c-1"))
    await service.create_product(ProductCreate(sku="X-2", name="Gadget", category_id="c-2"))

    products = await service.list_products(category_id="c-2")
    assert [p.sku for p in products] == ["X-2"]


@pytest.mark.asyncio
async def test_delete_version(service: ProductService):
    first = await service.create_product(ProductCreate(sku="X-1", name="Widget"))

    assert await service.delete_version(first.id)
    with pytest.raises(EntityNotFoundError):
        await service.delete_version(first.id)
