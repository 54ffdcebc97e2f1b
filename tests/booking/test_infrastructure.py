"""
Тесты файлового хранилища реестра и восстановления состояния.
"""
import json
from datetime import time

import pytest

from room_booking.booking.application import BookingLedger
from room_booking.booking.domain import SCHEMA_VERSION, LedgerSnapshot
from room_booking.booking.infrastructure import FileLedgerStore, default_room_catalog
from room_booking.shared_kernel import CorruptStoreError, StorageReadError, StorageWriteError


def test_catalog_is_seeded_with_ten_rooms():
    catalog = default_room_catalog()

    assert len(catalog) == 10
    assert len({room.room_number for room in catalog}) == 10


def test_missing_file_loads_as_none(file_store):
    assert not file_store.exists()
    assert file_store.load() is None


def test_ledger_creates_file_on_first_start(ledger, store_path):
    assert store_path.exists()
    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert list(data) == [
        "schema_version",
        "bookings",
        "clients",
        "client_id_counter",
        "ref_num_counter",
        "institution_name",
    ]
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["institution_name"] == "Stirling"


def test_round_trip_restores_state(ledger, store_path, catalog, make_requirements):
    """Сохранение и повторная загрузка дают то же состояние."""
    jane = ledger.add_client("Jane Doe", "07123 456 789", "jane@mail.com")
    john = ledger.add_client("John Smith", "07123 456 780")
    ledger.create_booking(jane, make_requirements(computer_capacity=10))
    ref_num = ledger.create_booking(john, make_requirements(booking_time=time(14, 0))).ref_num
    ledger.create_booking(jane, make_requirements(booking_time=time(16, 0)))
    ledger.cancel_booking(ref_num)

    restored = BookingLedger("Stirling", FileLedgerStore(store_path), catalog)

    assert restored.clients == ledger.clients
    assert restored.bookings == ledger.bookings
    assert restored.client_id_counter == ledger.client_id_counter == 2
    assert restored.ref_num_counter == ledger.ref_num_counter == 3
    assert restored.get_booking_summary(1) == ledger.get_booking_summary(1)


def test_counters_continue_after_reload(ledger, store_path, catalog, make_requirements):
    client_id = ledger.add_client("Jane Doe", "07123 456 789")
    ref_num = ledger.create_booking(client_id, make_requirements()).ref_num
    ledger.cancel_booking(ref_num)

    restored = BookingLedger("Stirling", FileLedgerStore(store_path), catalog)

    assert restored.add_client("Ann Lee", "07123 456 781") == 2
    assert restored.create_booking(client_id, make_requirements()).ref_num == 2


def test_reloaded_bookings_share_client_objects(ledger, store_path, catalog, make_requirements):
    client_id = ledger.add_client("Jane Doe", "07123 456 789")
    ref_num = ledger.create_booking(client_id, make_requirements()).ref_num

    restored = BookingLedger("Stirling", FileLedgerStore(store_path), catalog)
    restored.update_client_contact(client_id, email="jane@college.uk")

    assert restored.bookings[ref_num].client is restored.find_client(client_id)
    assert "Email Address: jane@college.uk" in restored.get_booking_summary(ref_num)


def test_reloaded_bookings_still_block_rooms(ledger, store_path, catalog, make_requirements):
    client_id = ledger.add_client("Jane Doe", "07123 456 789")
    ledger.create_booking(client_id, make_requirements(computer_capacity=19))

    restored = BookingLedger("Stirling", FileLedgerStore(store_path), catalog)
    result = restored.create_booking(client_id, make_requirements(computer_capacity=19))

    assert not result.created


def test_corrupt_json_is_reported(store_path, catalog):
    store_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CorruptStoreError):
        BookingLedger("Stirling", FileLedgerStore(store_path), catalog)


def test_schema_mismatch_is_reported(store_path, catalog):
    store_path.write_text(json.dumps({"bookings": [], "clients": 3}), encoding="utf-8")

    with pytest.raises(CorruptStoreError):
        FileLedgerStore(store_path).load()


def test_unsupported_version_is_reported(ledger, store_path):
    data = json.loads(store_path.read_text(encoding="utf-8"))
    data["schema_version"] = SCHEMA_VERSION + 1
    store_path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(CorruptStoreError):
        FileLedgerStore(store_path).load()


def test_unreadable_file_is_reported(tmp_path):
    # Каталог вместо файла: существует, но прочитать нельзя
    path = tmp_path / "stirling_bookings.dat"
    path.mkdir()

    with pytest.raises(StorageReadError):
        FileLedgerStore(path).load()


def test_unwritable_location_is_reported(tmp_path, catalog):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(StorageWriteError):
        BookingLedger("Stirling", FileLedgerStore(blocker / "stirling_bookings.dat"), catalog)


def test_save_replaces_whole_file(ledger, store_path):
    ledger.add_client("Jane Doe", "07123 456 789")
    ledger.add_client("John Smith", "07123 456 780")

    data = json.loads(store_path.read_text(encoding="utf-8"))

    assert [c["name"] for c in data["clients"]] == ["Jane Doe", "John Smith"]
    assert data["client_id_counter"] == 2
    assert not store_path.with_name(store_path.name + ".tmp").exists()


def test_failed_replace_removes_temp_file(store_path, monkeypatch):
    store = FileLedgerStore(store_path)

    def failing_replace(src, dst):
        raise OSError("Диск переполнен")

    monkeypatch.setattr("room_booking.booking.infrastructure.os.replace", failing_replace)

    with pytest.raises(StorageWriteError):
        store.save(LedgerSnapshot(institution_name="Stirling"))

    assert not store_path.exists()
    assert not store_path.with_name(store_path.name + ".tmp").exists()
