# tests/test_signature.py
import hashlib
import uuid

from app.core.midtrans_client import (
    compute_signature,
    gateway_order_id,
    parse_gateway_order_id,
    verify_signature,
)

ORDER_ID = "order_3f1c2a9e-0000-4000-8000-000000000001"
KEY = "SB-Mid-server-abc"


def test_signature_is_sha512_of_concatenation():
    expected = hashlib.sha512(f"{ORDER_ID}200150000.00{KEY}".encode()).hexdigest()
    assert compute_signature(ORDER_ID, "200", "150000.00", KEY) == expected


def test_valid_signature_verifies():
    signature = compute_signature(ORDER_ID, "200", "150000.00", KEY)
    assert verify_signature(ORDER_ID, "200", "150000.00", KEY, signature)


def test_any_single_character_mutation_fails():
    signature = compute_signature(ORDER_ID, "200", "150000.00", KEY)
    for i in range(0, len(signature), 16):
        replacement = "0" if signature[i] != "0" else "1"
        mutated = signature[:i] + replacement + signature[i + 1:]
        assert not verify_signature(ORDER_ID, "200", "150000.00", KEY, mutated)


def test_other_amount_fails():
    signature = compute_signature(ORDER_ID, "200", "150000.00", KEY)
    assert not verify_signature(ORDER_ID, "200", "150001.00", KEY, signature)


def test_missing_parts_fail():
    signature = compute_signature(ORDER_ID, "200", "150000.00", KEY)
    assert not verify_signature(None, "200", "150000.00", KEY, signature)
    assert not verify_signature(ORDER_ID, "200", "150000.00", KEY, None)
    assert not verify_signature(ORDER_ID, "200", "150000.00", "", signature)


def test_gateway_order_id_round_trip():
    order_id = uuid.uuid4()
    assert parse_gateway_order_id(gateway_order_id(order_id)) == order_id


def test_foreign_gateway_order_ids_are_rejected():
    assert parse_gateway_order_id("INV-2024-001") is None
    assert parse_gateway_order_id("order_not-a-uuid") is None
    assert parse_gateway_order_id("") is None
