"""Tests for the ProductStore: single-flight fetches, seller cache, mutations.

Uses the in-memory fake gateway, no network.
"""

import asyncio

import pytest

from shopsync.application.product_store import FetchStatus, ProductStore
from shopsync.domain.exceptions import EntityNotFoundError, NetworkError
from shopsync.domain.model.product import ProductChanges, ProductDraft
from shopsync.domain.model.value_objects import Money
from tests.fakes import FakeCatalogGateway, make_product


def _setup(products=None) -> tuple[ProductStore, FakeCatalogGateway]:
    if products is None:
        products = [
            make_product(id=1, name="Running shoe", seller_id=7),
            make_product(id=2, name="Tennis shoe", seller_id=7),
            make_product(id=3, name="Backpack", seller_id=9, available=False),
        ]
    gateway = FakeCatalogGateway(products)
    return ProductStore(gateway), gateway


class TestFetchAll:

    @pytest.mark.asyncio
    async def test_replaces_collection(self):
        store, _ = _setup()
        await store.fetch_all()
        assert [p.id for p in store.products] == [1, 2, 3]
        assert store.status == FetchStatus.FETCHED
        assert store.is_fetching is False
        assert store.error is None

    @pytest.mark.asyncio
    async def test_available_only(self):
        store, _ = _setup()
        await store.fetch_available()
        assert [p.id for p in store.products] == [1, 2]

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_collection(self):
        store, gateway = _setup()
        await store.fetch_all()
        gateway.fail_with = NetworkError("Network error. Please check your connection.")

        await store.fetch_all()

        assert [p.id for p in store.products] == [1, 2, 3]
        assert store.error == "Network error. Please check your connection."
        assert store.status == FetchStatus.ERROR
        assert store.is_fetching is False

    @pytest.mark.asyncio
    async def test_unclassified_failure_gets_fallback_message(self):
        store, gateway = _setup()
        gateway.fail_with = RuntimeError("socket exploded")
        await store.fetch_all()
        assert store.error == "Failed to fetch products"

    @pytest.mark.asyncio
    async def test_next_fetch_clears_error(self):
        store, gateway = _setup()
        gateway.fail_with = NetworkError("down")
        await store.fetch_all()
        gateway.fail_with = None
        await store.fetch_all()
        assert store.error is None


class TestSingleFlight:

    @pytest.mark.asyncio
    async def test_overlapping_fetches_call_gateway_once(self):
        store, gateway = _setup()
        gateway.gate = asyncio.Event()

        first = asyncio.create_task(store.fetch_all())
        await asyncio.sleep(0)
        assert store.is_fetching is True
        assert store.status == FetchStatus.FETCHING

        await store.fetch_all()  # dropped, returns at once
        gateway.gate.set()
        await first

        assert gateway.count("list_all") == 1
        assert len(store.products) == 3

    @pytest.mark.asyncio
    async def test_guard_spans_different_fetch_kinds(self):
        store, gateway = _setup()
        gateway.gate = asyncio.Event()

        first = asyncio.create_task(store.fetch_all())
        await asyncio.sleep(0)
        await store.fetch_by_id(1)
        await store.search("shoe")
        gateway.gate.set()
        await first

        assert gateway.count("get_by_id") == 0
        assert gateway.count("search") == 0
        assert store.current_product is None

    @pytest.mark.asyncio
    async def test_mutations_are_not_blocked_by_fetch(self):
        store, gateway = _setup()
        gateway.gate = asyncio.Event()

        fetch = asyncio.create_task(store.fetch_all())
        await asyncio.sleep(0)
        create = asyncio.create_task(
            store.create(
                ProductDraft(
                    name="Cap", description="", price=Money.of("5"), stock=1, seller_id=7
                )
            )
        )
        await asyncio.sleep(0)
        assert gateway.count("create") == 1

        gateway.gate.set()
        await asyncio.gather(fetch, create)

    @pytest.mark.asyncio
    async def test_flag_released_after_failure(self):
        store, gateway = _setup()
        gateway.fail_with = NetworkError("down")
        await store.fetch_all()
        gateway.fail_with = None
        await store.fetch_all()
        assert gateway.count("list_all") == 2

    @pytest.mark.asyncio
    async def test_clear_products_keeps_in_flight_guard(self):
        store, gateway = _setup()
        gateway.gate = asyncio.Event()

        first = asyncio.create_task(store.fetch_all())
        await asyncio.sleep(0)
        store.clear_products()
        assert store.is_fetching is True

        await store.fetch_available()
        gateway.gate.set()
        await first

        assert gateway.count("list_available") == 0
        assert gateway.count("list_all") == 1
        assert store.is_fetching is False


class TestFetchBySeller:

    @pytest.mark.asyncio
    async def test_same_seller_twice_hits_gateway_once(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        await store.fetch_by_seller(7)
        assert gateway.count("list_by_seller") == 1
        assert store.last_fetched_seller_id == 7
        assert [p.id for p in store.products] == [1, 2]

    @pytest.mark.asyncio
    async def test_different_seller_fetches_again(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        await store.fetch_by_seller(9)
        assert gateway.count("list_by_seller") == 2
        assert store.last_fetched_seller_id == 9
        assert [p.id for p in store.products] == [3]

    @pytest.mark.asyncio
    async def test_empty_collection_forces_fetch(self):
        store, gateway = _setup()
        await store.fetch_by_seller(42)  # no products for this seller
        await store.fetch_by_seller(42)
        assert gateway.count("list_by_seller") == 2

    @pytest.mark.asyncio
    async def test_failure_does_not_move_marker(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        gateway.fail_with = NetworkError("down")
        await store.fetch_by_seller(9)
        assert store.last_fetched_seller_id == 7

    @pytest.mark.asyncio
    async def test_clear_products_drops_cache(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        store.clear_products()
        assert store.products == []
        assert store.last_fetched_seller_id is None
        await store.fetch_by_seller(7)
        assert gateway.count("list_by_seller") == 2

    @pytest.mark.asyncio
    async def test_fetch_all_invalidates_seller_cache(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        await store.fetch_all()
        assert store.last_fetched_seller_id is None

        await store.fetch_by_seller(7)

        assert gateway.count("list_by_seller") == 2
        assert [p.id for p in store.products] == [1, 2]

    @pytest.mark.asyncio
    async def test_search_invalidates_seller_cache(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        await store.search("Backpack")

        await store.fetch_by_seller(7)

        assert gateway.count("list_by_seller") == 2
        assert [p.id for p in store.products] == [1, 2]

    @pytest.mark.asyncio
    async def test_blank_search_invalidates_seller_cache(self):
        store, gateway = _setup()
        await store.fetch_by_seller(7)
        await store.search("")
        assert store.last_fetched_seller_id is None


class TestSearch:

    @pytest.mark.asyncio
    async def test_blank_query_clears_without_network(self):
        store, gateway = _setup()
        await store.fetch_all()
        await store.search("")
        await store.search("   ")
        assert store.products == []
        assert gateway.count("search") == 0
        assert store.error is None

    @pytest.mark.asyncio
    async def test_query_always_hits_gateway(self):
        store, gateway = _setup()
        await store.search("shoe")
        await store.search("shoe")
        assert gateway.count("search") == 2
        assert [p.id for p in store.products] == [1, 2]


class TestFetchById:

    @pytest.mark.asyncio
    async def test_sets_current_product(self):
        store, _ = _setup()
        await store.fetch_by_id(2)
        assert store.current_product.id == 2

    @pytest.mark.asyncio
    async def test_not_found_is_stored(self):
        store, _ = _setup()
        await store.fetch_by_id(99)
        assert store.current_product is None
        assert store.error == "Product 99 not found"


class TestMutations:

    @pytest.mark.asyncio
    async def test_create_appends(self):
        store, _ = _setup()
        await store.fetch_all()
        product = await store.create(
            ProductDraft(name="Cap", description="", price=Money.of("5"), stock=1, seller_id=7)
        )
        assert store.products[-1] == product
        assert len(store.products) == 4

    @pytest.mark.asyncio
    async def test_update_replaces_in_place_and_current(self):
        store, _ = _setup()
        await store.fetch_all()
        await store.fetch_by_id(2)

        updated = await store.update(2, ProductChanges(price=Money.of("99.00")))

        assert [p.id for p in store.products] == [1, 2, 3]
        assert store.products[1].price == Money.of("99.00")
        assert store.current_product == updated

    @pytest.mark.asyncio
    async def test_update_leaves_unrelated_current_product(self):
        store, _ = _setup()
        await store.fetch_all()
        await store.fetch_by_id(1)
        await store.update(2, ProductChanges(stock=0))
        assert store.current_product.id == 1

    @pytest.mark.asyncio
    async def test_delete_removes_and_clears_current(self):
        store, _ = _setup()
        await store.fetch_all()
        await store.fetch_by_id(3)
        await store.delete(3)
        assert [p.id for p in store.products] == [1, 2]
        assert store.current_product is None

    @pytest.mark.asyncio
    async def test_failed_mutation_reraises_and_keeps_collection(self):
        store, _ = _setup()
        await store.fetch_all()
        with pytest.raises(EntityNotFoundError):
            await store.delete(99)
        assert len(store.products) == 3
        assert store.error == "Product 99 not found"
        assert store.is_loading is False

    @pytest.mark.asyncio
    async def test_failed_create_uses_fallback_message(self):
        store, gateway = _setup()
        gateway.fail_with = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            await store.create(
                ProductDraft(name="Cap", description="", price=Money.of("5"), stock=1, seller_id=7)
            )
        assert store.error == "Failed to create product"


class TestRelatedAndLocalState:

    @pytest.mark.asyncio
    async def test_related_products(self):
        store, gateway = _setup()
        gateway.related[1] = [make_product(id=2), make_product(id=3)]
        related = await store.fetch_related(1, limit=1)
        assert [p.id for p in related] == [2]

    @pytest.mark.asyncio
    async def test_related_failure_degrades_to_empty(self):
        store, gateway = _setup()
        gateway.fail_with = NetworkError("down")
        assert await store.fetch_related(1) == []
        assert store.error is None

    def test_set_current_and_clear_error(self):
        store, _ = _setup()
        product = make_product(id=5)
        store.set_current_product(product)
        assert store.current_product == product
        store.error = "oops"
        store.clear_error()
        assert store.error is None

    @pytest.mark.asyncio
    async def test_listeners_see_loading_transitions(self):
        store, _ = _setup()
        seen: list[tuple[bool, FetchStatus]] = []
        store.subscribe(lambda s: seen.append((s.is_fetching, s.status)))
        await store.fetch_all()
        assert seen[0] == (True, FetchStatus.FETCHING)
        assert seen[-1] == (False, FetchStatus.FETCHED)
