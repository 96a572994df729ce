"""Remote store and remote-first fallback tests."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from doortrack.core.config import Settings
from doortrack.schemas.order import CustomerInfo, Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole
from doortrack.services.order_repository import OrderRepository
from doortrack.services.order_service import accept_order
from doortrack.services.pickup_service import PickupLedger
from doortrack.storage.errors import StorageUnavailableError
from doortrack.storage.factory import build_remote_client, build_store
from doortrack.storage.fallback_store import FallbackStore
from doortrack.storage.kv_store import KeyValueStore
from doortrack.storage.local_store import LocalStore
from doortrack.storage.mapping import order_to_storage
from doortrack.storage.remote_client import RemoteStoreClient
from doortrack.storage.remote_store import RemoteStore

NOW = datetime(2024, 12, 1, 9, 0, tzinfo=timezone.utc)


def _order(order_id: str, status: str = "pending", minutes: int = 0) -> Order:
    stamp = NOW + timedelta(minutes=minutes)
    return Order(
        id=order_id,
        order_number=order_id.split("-")[-1],
        status=status,
        customer_id="customer-1",
        created_at=stamp,
        updated_at=stamp,
    )


def test_remote_listing_is_newest_first(remote_client: RemoteStoreClient) -> None:
    store = RemoteStore(remote_client)
    store.insert_order(_order("order-1", minutes=0))
    store.insert_order(_order("order-2", minutes=5))
    store.insert_order(_order("order-3", minutes=2))

    assert [order.id for order in store.list_orders()] == ["order-2", "order-3", "order-1"]


def test_remote_update_writes_partial_row(remote_client: RemoteStoreClient, fake_supabase) -> None:
    store = RemoteStore(remote_client)
    store.insert_order(_order("order-1"))
    stamp = NOW + timedelta(days=1)

    updated = store.update_order("order-1", {"status": "accepted", "expected_delivery_date": date(2025, 1, 1)}, stamp)

    row = fake_supabase.tables["orders"][0]
    assert row["status"] == "accepted"
    assert row["expected_delivery_date"] == "2025-01-01"
    assert row["updated_at"] == stamp.isoformat()
    assert updated.expected_delivery_date == date(2025, 1, 1)
    assert store.update_order("ghost", {"status": "accepted"}, stamp) is None


def test_remote_delete_and_roles(remote_client: RemoteStoreClient) -> None:
    store = RemoteStore(remote_client)
    for order_id in ("order-1", "order-2", "order-3"):
        store.insert_order(_order(order_id))

    assert store.delete_orders(["order-1", "order-3"]) == 2
    assert store.delete_orders([]) == 0
    assert [order.id for order in store.list_orders()] == ["order-2"]

    store.set_role(UserRole(user_id="u1", role="admin", created_at=NOW))
    store.set_role(UserRole(user_id="u1", role="customer", created_at=NOW))
    assert store.get_role("u1").role == "customer"
    assert store.get_role("u2") is None


def test_remote_pickup_writes_orders_and_ledger(remote_client: RemoteStoreClient, fake_supabase) -> None:
    store = RemoteStore(remote_client)
    store.insert_order(_order("order-1", "prepared"))
    ledger = PickupLedger(store)

    request = ledger.create("customer-1", ["order-1"], now=NOW)

    assert fake_supabase.tables["orders"][0]["status"] == "pickup_requested"
    assert fake_supabase.tables["pickup_requests"][0]["order_ids"] == ["order-1"]
    assert store.list_pickup_requests() == [request]


def test_remote_pickup_restores_orders_when_ledger_insert_fails(remote_client: RemoteStoreClient, fake_supabase) -> None:
    store = RemoteStore(remote_client)
    store.insert_order(_order("order-1", "prepared"))
    original_row = dict(fake_supabase.tables["orders"][0])
    fake_supabase.failing.add(("pickup_requests", "insert"))
    moved = _order("order-1", "pickup_requested")
    request = PickupRequest(id="p1", customer_id="customer-1", order_ids=["order-1"], requested_at=NOW)

    with pytest.raises(RuntimeError):
        store.save_pickup(request, [moved])

    assert fake_supabase.tables["orders"][0] == original_row
    assert fake_supabase.tables.get("pickup_requests", []) == []


def test_fallback_uses_local_store_when_remote_fails(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)
    fake_supabase.offline = True

    store.insert_order(_order("order-1"))

    assert local_store.get_order("order-1") is not None
    assert store.get_order("order-1").id == "order-1"
    assert fake_supabase.tables.get("orders", []) == []


def test_fallback_prefers_remote_when_available(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)

    store.insert_order(_order("order-1"))

    assert len(fake_supabase.tables["orders"]) == 1
    assert local_store.list_orders() == []


def test_remote_listing_refreshes_local_mirror(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)
    fake_supabase.tables["orders"] = [order_to_storage(_order("order-1")), order_to_storage(_order("order-2"))]

    listed = store.list_orders()
    fake_supabase.offline = True
    degraded = store.list_orders()

    assert {order.id for order in degraded} == {order.id for order in listed} == {"order-1", "order-2"}


def test_local_writes_are_not_pushed_back_to_remote(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)
    fake_supabase.offline = True
    store.insert_order(_order("order-1"))
    fake_supabase.offline = False

    assert store.list_orders() == []
    assert fake_supabase.tables.get("orders", []) == []


def test_both_stores_failing_raises_generic_error(remote_client: RemoteStoreClient, fake_supabase, tmp_path: Path) -> None:
    # No tables on this engine: every local statement fails.
    broken_engine = create_engine(f"sqlite:///{tmp_path / 'broken.db'}")
    broken_local = LocalStore(KeyValueStore(sessionmaker(bind=broken_engine)))
    store = FallbackStore(RemoteStore(remote_client), broken_local)
    fake_supabase.offline = True

    with pytest.raises(StorageUnavailableError, match="try again"):
        store.insert_order(_order("order-1"))
    with pytest.raises(StorageUnavailableError):
        store.list_orders()


def test_workflow_runs_unchanged_over_fallback_store(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    repository = OrderRepository(FallbackStore(RemoteStore(remote_client), local_store))
    repository.create(_order("order-1"), now=NOW)

    accepted = accept_order(repository, "order-1", date(2025, 1, 1), now=NOW)

    assert accepted.status == "accepted"
    assert fake_supabase.tables["orders"][0]["status"] == "accepted"


def test_factory_uses_local_store_when_remote_not_configured(tmp_path: Path) -> None:
    config = Settings(local_store_url=f"sqlite:///{tmp_path / 'factory.db'}", supabase_url="", supabase_anon_key="")

    remote = build_remote_client(config)
    store = build_store(config, remote)

    assert remote is None
    assert isinstance(store, LocalStore)


def test_factory_wraps_remote_with_fallback(tmp_path: Path, remote_client: RemoteStoreClient) -> None:
    config = Settings(local_store_url=f"sqlite:///{tmp_path / 'factory.db'}")

    store = build_store(config, remote_client)

    assert isinstance(store, FallbackStore)
    assert isinstance(store.fallback, LocalStore)


def test_factory_without_local_url_has_empty_local_store() -> None:
    store = build_store(Settings(local_store_url=""), None)

    assert isinstance(store, LocalStore)
    assert store.kv.available is False
    assert store.list_orders() == []


def test_rejected_update_is_not_retried_on_local_store(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)
    store.insert_order(_order("order-1"))
    local_store.replace_orders([_order("order-1")])

    with pytest.raises(ValueError, match="cannot be updated"):
        store.update_order("order-1", {"id": "order-2", "status": "accepted"}, NOW)

    assert fake_supabase.tables["orders"][0]["id"] == "order-1"
    assert fake_supabase.tables["orders"][0]["status"] == "pending"
    assert [(order.id, order.status) for order in local_store.list_orders()] == [("order-1", "pending")]


def test_repository_rejects_id_change_before_touching_either_store(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    repository = OrderRepository(FallbackStore(RemoteStore(remote_client), local_store))
    repository.create(_order("order-1"), now=NOW)
    calls_before = list(fake_supabase.calls)

    with pytest.raises(ValueError):
        repository.apply_update("order-1", {"id": "order-2"}, now=NOW)

    assert fake_supabase.calls == calls_before
    assert repository.get_by_id("order-1").id == "order-1"
    assert local_store.list_orders() == []


def test_pickup_for_order_unknown_locally_reports_generic_failure(remote_client: RemoteStoreClient, fake_supabase, local_store: LocalStore) -> None:
    store = FallbackStore(RemoteStore(remote_client), local_store)
    store.insert_order(_order("order-1", "prepared"))
    fake_supabase.failing.add(("orders", "upsert"))

    with pytest.raises(StorageUnavailableError, match="try again"):
        PickupLedger(store).create("customer-1", ["order-1"], now=NOW)

    assert fake_supabase.tables["orders"][0]["status"] == "prepared"
    assert fake_supabase.tables.get("pickup_requests", []) == []
    assert local_store.list_pickup_requests() == []


def test_partial_customer_info_update_matches_on_both_backends(remote_client: RemoteStoreClient, local_store: LocalStore) -> None:
    info = CustomerInfo(name="Anna", email="anna@example.com", phone="111", address="Main St 1")
    seeded = _order("order-1").model_copy(update={"customer_info": info})
    remote = RemoteStore(remote_client)
    remote.insert_order(seeded)
    local_store.insert_order(seeded)
    change = {"customer_info": CustomerInfo(phone="222")}

    from_remote = remote.update_order("order-1", change, NOW)
    from_local = local_store.update_order("order-1", change, NOW)

    assert from_remote.customer_info == from_local.customer_info
    assert from_local.customer_info == CustomerInfo(name="Anna", email="anna@example.com", phone="222", address="Main St 1")
