import json
from datetime import datetime, timedelta, timezone

import pytest

from posagent.receipt import (
    Cashier,
    Discount,
    Line,
    Payment,
    Receipt,
    Store,
    Terminal,
    Totals,
)


def hamoud_wire():
    return {
        "store": {
            "name": "Hamoud Boualem - Centre Oran",
            "address_line_1": "12 Rue Larbi Ben M'hidi",
            "address_line_2": "Oran 31000",
            "phone": "+213 41 ...",
            "tax_id": "NIF/RC line if applicable",
        },
        "terminal": {"id": "trm_...", "label": "Caisse 1"},
        "cashier": {"name": "Amine Benali"},
        "receipt_number": "2026-0428-0001",
        "issued_at": "2026-04-28T14:32:11+01:00",
        "currency": "DZD",
        "lines": [
            {
                "sku": "HB-COLA-33",
                "name": "Hamoud Cola 33cl",
                "qty": 6,
                "unit_price": 45,
                "line_total": 270,
                "discount_label": None,
            }
        ],
        "discounts": [{"label": "Remise -5%", "amount": -13.50}],
        "totals": {
            "subtotal": 270,
            "discount_total": -13.50,
            "tax_total": 0,
            "grand_total": 256.50,
        },
        "payment": {"method": "cash", "tendered": 300, "change": 43.50},
        "footer_lines": ["Merci de votre visite", "Conservez ce ticket"],
    }


def test_from_dict_reads_every_block():
    r = Receipt.from_dict(hamoud_wire())
    assert r.store == Store(
        name="Hamoud Boualem - Centre Oran",
        address_line_1="12 Rue Larbi Ben M'hidi",
        address_line_2="Oran 31000",
        phone="+213 41 ...",
        tax_id="NIF/RC line if applicable",
    )
    assert r.terminal == Terminal(id="trm_...", label="Caisse 1")
    assert r.cashier == Cashier(name="Amine Benali")
    assert r.receipt_number == "2026-0428-0001"
    assert r.currency == "DZD"
    assert r.lines == [
        Line(
            sku="HB-COLA-33",
            name="Hamoud Cola 33cl",
            qty=6,
            unit_price=45,
            line_total=270,
        )
    ]
    assert r.discounts == [Discount(label="Remise -5%", amount=-13.50)]
    assert r.totals == Totals(
        subtotal=270, discount_total=-13.50, tax_total=0, grand_total=256.50
    )
    assert r.payment == Payment(method="cash", tendered=300, change=43.50)
    assert r.footer_lines == ["Merci de votre visite", "Conservez ce ticket"]


def test_issued_at_keeps_offset():
    r = Receipt.from_dict(hamoud_wire())
    assert r.issued_at == datetime(
        2026, 4, 28, 14, 32, 11, tzinfo=timezone(timedelta(hours=1))
    )
    assert r.issued_at.utcoffset() == timedelta(hours=1)


def test_round_trip_through_dict():
    r = Receipt.from_dict(hamoud_wire())
    assert Receipt.from_dict(r.to_dict()) == r


def test_round_trip_through_json_text():
    r = Receipt.from_dict(hamoud_wire())
    text = json.dumps(r.to_dict())
    assert Receipt.from_dict(json.loads(text)) == r


def test_to_dict_time_matches_wire_form():
    wire = hamoud_wire()
    assert Receipt.from_dict(wire).to_dict()["issued_at"] == wire["issued_at"]


@pytest.mark.parametrize(
    "stamp",
    ["2026-04-28T13:32:11Z", "2026-04-28T14:32:11.5+01:00", "2026-04-28T10:02:11-03:30"],
)
def test_time_strings_round_trip(stamp):
    wire = hamoud_wire()
    wire["issued_at"] = stamp
    assert Receipt.from_dict(wire).to_dict()["issued_at"] == stamp


def test_nanosecond_fraction_is_truncated_to_microseconds():
    wire = hamoud_wire()
    wire["issued_at"] = "2026-04-28T13:32:11.123456789Z"
    r = Receipt.from_dict(wire)
    assert r.issued_at.microsecond == 123456
    assert r.to_dict()["issued_at"] == "2026-04-28T13:32:11.123456Z"


def test_discount_label_is_kept_when_present():
    wire = hamoud_wire()
    wire["lines"][0]["discount_label"] = "Promo"
    r = Receipt.from_dict(wire)
    assert r.lines[0].discount_label == "Promo"
    assert r.to_dict()["lines"][0]["discount_label"] == "Promo"


def test_empty_document_gives_defaults():
    assert Receipt.from_dict({}) == Receipt()


def test_nulls_give_defaults():
    wire = {key: None for key in hamoud_wire()}
    assert Receipt.from_dict(wire) == Receipt()


def test_unknown_keys_are_ignored():
    wire = hamoud_wire()
    wire["extra"] = {"anything": 1}
    assert Receipt.from_dict(wire) == Receipt.from_dict(hamoud_wire())


def test_default_receipt_round_trips():
    empty = Receipt()
    assert Receipt.from_dict(empty.to_dict()) == empty


def test_default_lists_are_independent():
    a = Receipt()
    b = Receipt()
    a.lines.append(Line(name="x"))
    assert b.lines == []


@pytest.mark.parametrize(
    "mutate",
    [
        lambda w: w["lines"][0].update(qty="6"),
        lambda w: w["lines"][0].update(qty=True),
        lambda w: w["lines"][0].update(qty=6.0),
        lambda w: w["totals"].update(grand_total="256,50"),
        lambda w: w.update(lines={"sku": "x"}),
        lambda w: w.update(store="Hamoud"),
        lambda w: w.update(footer_lines=["ok", 3]),
        lambda w: w.update(issued_at="not a time"),
        lambda w: w.update(issued_at="2026-04-28T14:32:11"),
    ],
    ids=[
        "qty string",
        "qty bool",
        "qty float",
        "total string",
        "lines object",
        "store string",
        "footer non-string",
        "bad time",
        "time without offset",
    ],
)
def test_wrong_types_raise(mutate):
    wire = hamoud_wire()
    mutate(wire)
    with pytest.raises(ValueError):
        Receipt.from_dict(wire)


def test_non_mapping_document_raises():
    with pytest.raises(ValueError):
        Receipt.from_dict(["not", "a", "receipt"])


def test_error_names_the_field():
    wire = hamoud_wire()
    wire["currency"] = 12
    with pytest.raises(ValueError, match="currency"):
        Receipt.from_dict(wire)