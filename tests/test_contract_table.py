"""Tests for contract normalisation and the dual-indexed reference table."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

pytest.importorskip("pydantic")

from common.errors import (
    ContractNormalizationError,
    DuplicateContractError,
    MessageParsingError,
    UnimplementedContractTypeError,
)
from contracts import (
    ContractSpecTable,
    FutureContractSpec,
    OptionContractSpec,
    RawContractSpecTable,
    SwapSpec,
    as_option,
    normalize,
    parse_venue_datetime,
)
from contracts.normalize import SECONDS_PER_JULIAN_YEAR

NOW = datetime(2024, 1, 1, 21, 0, 0, tzinfo=timezone.utc)
VENUE_FORMAT = "%Y-%m-%d %H:%M:%S%z"


def make_record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": 22252392,
        "label": "BTC-Mini-29DEC2024-50000-Call",
        "is_call": True,
        "active": True,
        "strike_price": 5000000,
        "min_increment": 10,
        "date_live": "2024-01-01 21:00:00+0000",
        "date_expires": "2024-12-29 21:00:00+0000",
        "date_exercise": "2024-12-29 21:00:00+0000",
        "underlying_asset": "CBTC",
        "collateral_asset": "CBTC",
        "derivative_type": "options_contract",
        "open_interest": 14,
        "is_next_day": False,
        "multiplier": 100,
        "is_ecp_only": False,
    }
    record.update(overrides)
    return record


def make_raw_table(*records: dict[str, Any]) -> RawContractSpecTable:
    return RawContractSpecTable.from_data({"data": list(records)})


def test_option_record_one_year_out_normalises() -> None:
    expires = NOW + timedelta(seconds=SECONDS_PER_JULIAN_YEAR)
    raw = make_raw_table(
        make_record(strike_price=500000, is_call=True, date_expires=expires.strftime(VENUE_FORMAT))
    )

    table = normalize(raw, now=NOW)
    option = as_option(table.lookup_by_id(22252392))

    assert isinstance(option, OptionContractSpec)
    assert option.strike_price == 5000.0
    assert option.is_call is True
    assert option.time_to_expiry == pytest.approx(1.0, abs=1e-6)


def test_time_to_expiry_defaults_to_current_time() -> None:
    expires = datetime.now(tz=timezone.utc) + timedelta(days=365.25)
    raw = make_raw_table(make_record(date_expires=expires.strftime(VENUE_FORMAT)))

    option = as_option(normalize(raw).lookup_by_id(22252392))

    assert option is not None
    assert option.time_to_expiry == pytest.approx(1.0, abs=1e-3)


@pytest.mark.parametrize("strike,increment", [(500000, 10), (123456, 25), (1, 1)])
def test_price_fields_are_divided_by_100(strike: int, increment: int) -> None:
    raw = make_raw_table(make_record(strike_price=strike, min_increment=increment))

    option = as_option(normalize(raw, now=NOW).lookup_by_id(22252392))

    assert option is not None
    assert option.strike_price == strike / 100
    assert option.min_increment == increment / 100
    assert option.multiplier == 100.0


def test_option_fields_are_carried_over() -> None:
    option = as_option(normalize(make_raw_table(make_record()), now=NOW).lookup_by_id(22252392))

    assert option is not None
    assert option.label == "BTC-Mini-29DEC2024-50000-Call"
    assert option.underlying == "CBTC"
    assert option.collateral_asset == "CBTC"
    assert option.open_interest == 14
    assert option.active is True
    assert option.is_ecp_only is False
    assert option.date_live == NOW
    assert option.date_expires == datetime(2024, 12, 29, 21, 0, 0, tzinfo=timezone.utc)


def test_missing_open_interest_defaults_to_zero() -> None:
    record = make_record()
    del record["open_interest"]

    option = as_option(normalize(make_raw_table(record), now=NOW).lookup_by_id(22252392))

    assert option is not None
    assert option.open_interest == 0


def test_id_and_label_lookups_return_the_same_object() -> None:
    raw = make_raw_table(
        make_record(),
        make_record(id=2, label="BTC-Mini-29DEC2024-Future", derivative_type="future_contract",
                    strike_price=None, is_call=None),
        make_record(id=3, label="BTC-Mini-02JAN2024-NextDay", derivative_type="day_ahead_swap",
                    strike_price=None, is_call=None, is_next_day=True),
    )

    table = normalize(raw, now=NOW)

    assert len(table) == 3
    for spec in table:
        assert table.lookup_by_id(spec.id) is table.lookup_by_label(spec.label)
        assert table.id_table[spec.id] is table.label_table[spec.label]


def test_future_and_swap_wrap_the_raw_record() -> None:
    future_record = make_record(id=2, label="F", derivative_type="future_contract",
                                strike_price=None, is_call=None)
    swap_record = make_record(id=3, label="S", derivative_type="day_ahead_swap",
                              strike_price=None, is_call=None)
    raw = make_raw_table(future_record, swap_record)

    table = normalize(raw, now=NOW)
    future = table.lookup_by_label("F")
    swap = table.lookup_by_id(3)

    assert isinstance(future, FutureContractSpec)
    assert future.raw == raw.data[0]
    assert isinstance(swap, SwapSpec)
    assert swap.raw.is_next_day is False
    assert as_option(future) is None


def test_unknown_lookups_return_none() -> None:
    table = normalize(make_raw_table(make_record()), now=NOW)

    assert table.lookup_by_id(1) is None
    assert table.lookup_by_label("missing") is None
    assert 1 not in table


def test_unknown_derivative_type_is_fatal_by_default() -> None:
    raw = make_raw_table(make_record(derivative_type="binary_option"))

    with pytest.raises(UnimplementedContractTypeError) as excinfo:
        normalize(raw, now=NOW)

    assert isinstance(excinfo.value, NotImplementedError)
    assert excinfo.value.derivative_type == "binary_option"


def test_unknown_derivative_type_can_be_skipped(caplog: pytest.LogCaptureFixture) -> None:
    raw = make_raw_table(make_record(), make_record(id=9, label="X", derivative_type="binary_option"))

    with caplog.at_level(logging.WARNING):
        table = normalize(raw, now=NOW, unknown_contract_policy="skip")

    assert len(table) == 1
    assert table.lookup_by_id(9) is None
    assert "Skipping contract 9" in caplog.text


def test_invalid_policy_is_rejected() -> None:
    with pytest.raises(ValueError):
        normalize(make_raw_table(make_record()), unknown_contract_policy="ignore")


def test_naive_reference_time_is_rejected() -> None:
    with pytest.raises(ValueError):
        normalize(make_raw_table(make_record()), now=datetime(2024, 1, 1))


@pytest.mark.parametrize("missing", ["strike_price", "is_call"])
def test_option_without_strike_or_flag_aborts_build(missing: str) -> None:
    record = make_record()
    del record[missing]

    with pytest.raises(ContractNormalizationError):
        normalize(make_raw_table(record), now=NOW)


def test_bad_venue_datetime_aborts_build() -> None:
    with pytest.raises(ContractNormalizationError):
        normalize(make_raw_table(make_record(date_expires="29/12/2024")), now=NOW)


def test_duplicate_ids_are_rejected() -> None:
    raw = make_raw_table(make_record(), make_record(label="other"))

    with pytest.raises(DuplicateContractError):
        normalize(raw, now=NOW)


def test_duplicate_labels_are_rejected() -> None:
    raw = make_raw_table(make_record(), make_record(id=5))

    with pytest.raises(DuplicateContractError):
        normalize(raw, now=NOW)


def test_table_indices_are_read_only() -> None:
    table = normalize(make_raw_table(make_record()), now=NOW)

    with pytest.raises(TypeError):
        table.id_table[1] = table.lookup_by_id(22252392)  # type: ignore[index]


def test_empty_snapshot_builds_empty_table() -> None:
    table = ContractSpecTable.from_specs([])

    assert len(table) == 0
    assert list(table) == []


def test_raw_table_schema_mismatch_is_a_parse_error() -> None:
    with pytest.raises(MessageParsingError):
        RawContractSpecTable.parse('{"data": [{"id": "not-a-number"}]}')


def test_parse_venue_datetime_keeps_offset() -> None:
    parsed = parse_venue_datetime("2024-06-28 16:00:00-0500")

    assert parsed == datetime(2024, 6, 28, 21, 0, 0, tzinfo=timezone.utc)
