"""Tests for AddressBook."""

import asyncio

import pytest

from shopcache import (
    AddressBook,
    FetchError,
    MemoryBackend,
    NotAuthenticatedError,
    NotFoundError,
)


@pytest.fixture
def book(backend, clock, toast) -> AddressBook:
    store = AddressBook(backend, clock=clock, toast=toast)
    store.set_user("u1")
    return store


class TestLoad:
    """Reading the address list."""

    async def test_no_user_returns_empty(self, backend, clock) -> None:
        store = AddressBook(backend, clock=clock)
        assert await store.load() == []
        assert backend.calls["list_addresses"] == 0

    async def test_load_is_cached(self, book, backend) -> None:
        backend.add_address("u1", city="Lisbon")

        await book.load()
        await book.load()

        assert backend.calls["list_addresses"] == 1
        assert book.count == 1

    async def test_default_address_first(self, book, backend) -> None:
        backend.add_address("u1", city="Home", is_default=True)
        backend.add_address("u1", city="Office")

        addresses = await book.load()
        assert [a["city"] for a in addresses] == ["Home", "Office"]

    async def test_other_users_addresses_hidden(self, book, backend) -> None:
        backend.add_address("u2", city="Elsewhere")
        assert await book.load() == []

    async def test_refresh_falls_back_to_cache(self, book, backend, clock) -> None:
        backend.add_address("u1", city="Lisbon")
        await book.load()
        backend.fail_next("list_addresses", FetchError("offline"))

        addresses = await book.refresh()

        assert [a["city"] for a in addresses] == ["Lisbon"]
        assert backend.calls["list_addresses"] == 2

    async def test_sign_out_during_load(self, clock, toast) -> None:
        backend = MemoryBackend(delay=0.02)
        backend.add_address("u1", city="Lisbon")
        store = AddressBook(backend, clock=clock, toast=toast)
        store.set_user("u1")

        task = asyncio.create_task(store.load())
        await asyncio.sleep(0)
        store.set_user(None)

        assert await task == []
        assert store.addresses == []
        assert store.is_loading is False
        assert toast.toasts == []

    async def test_set_user_clears(self, book, backend) -> None:
        backend.add_address("u1", city="Lisbon")
        await book.load()

        book.set_user("u2")

        assert book.addresses == []
        assert len(book.resource.cache) == 0


class TestMutations:
    """Every write reloads the list from the backend."""

    async def test_create_reloads(self, book, backend) -> None:
        await book.load()

        created = await book.create({"city": "Porto"})

        assert created["city"] == "Porto"
        assert created["user_id"] == "u1"
        assert [a["city"] for a in book.addresses] == ["Porto"]
        assert backend.calls["list_addresses"] == 2

    async def test_update_reloads(self, book, backend) -> None:
        address = backend.add_address("u1", city="Porto")
        await book.load()

        await book.update(address["id"], {"city": "Braga"})

        assert [a["city"] for a in book.addresses] == ["Braga"]

    async def test_delete_reloads(self, book, backend, toast) -> None:
        address = backend.add_address("u1", city="Porto")
        await book.load()

        await book.delete(address["id"])

        assert book.addresses == []
        assert toast.errors == []

    async def test_foreign_address_is_rejected(self, book, backend, toast) -> None:
        foreign = backend.add_address("u2", city="Elsewhere")

        with pytest.raises(NotFoundError):
            await book.update(foreign["id"], {"city": "Mine"})
        assert toast.errors == ["Address not found"]
        assert backend.calls["list_addresses"] == 0

    async def test_mutation_requires_user(self, backend, clock) -> None:
        store = AddressBook(backend, clock=clock)
        with pytest.raises(NotAuthenticatedError):
            await store.create({"city": "Porto"})
        assert backend.calls["create_address"] == 0
