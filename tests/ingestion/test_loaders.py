from datetime import date, datetime

import pandas as pd
import pytest

from collections_etl.ingestion.loaders import (
    MissingColumnError,
    UnsupportedFileTypeError,
    load_assignments,
    load_contact_events,
    parse_amount,
)


@pytest.fixture()
def activity_dataframe():
    return pd.DataFrame(
        [
            {
                "Debtor Name": "ACME Corporation Ltd",
                "Account ID": "12345678",
                "Activity Date": "15/02/2026",
                "Collection Type": "PHONE",
                "Contact Type": "PRIMARY",
                "Contact Response": "PAYMENT_PROMISE",
                "Non Payment Reason": "CASH_FLOW",
                "Collector Name": "John Smith",
            },
            {
                "Debtor Name": "ACME Corporation Ltd",
                "Account ID": "12345678",
                "Activity Date": "2026-02-10",
                "Collection Type": "PHONE",
                "Contact Type": "PRIMARY",
                "Contact Response": "WILL_EVALUATE",
                "Non Payment Reason": "",
                "Collector Name": "John Smith",
            },
            {
                "Debtor Name": "",
                "Account ID": "",
                "Activity Date": "",
                "Collection Type": "",
                "Contact Type": "",
                "Contact Response": "",
                "Non Payment Reason": "",
                "Collector Name": "",
            },
            {
                "Debtor Name": "Global Services Inc",
                "Account ID": "",
                "Activity Date": "18/02/2026",
                "Collection Type": "PHONE",
                "Contact Type": "THIRD_PARTY",
                "Contact Response": "WILL_INFORM",
                "Non Payment Reason": "",
                "Collector Name": "Maria Garcia",
            },
            {
                "Debtor Name": "Global Services Inc",
                "Account ID": "23456789",
                "Activity Date": "12/02/2026",
                "Collection Type": "PHONE",
                "Contact Type": "NO_CONTACT",
                "Contact Response": "NO_ANSWER",
                "Non Payment Reason": "",
                "Collector Name": "AUTO_DIALER",
            },
        ]
    )


def test_load_contact_events_from_csv_resolves_synonyms(activity_dataframe, tmp_path):
    csv_path = tmp_path / "activity.csv"
    activity_dataframe.to_csv(csv_path, index=False)

    loaded = load_contact_events(csv_path)

    assert len(loaded.events) == 2
    first, second = loaded.events
    assert first.account_id == "12345678"
    assert first.event_date == date(2026, 2, 15)
    assert first.channel == "PHONE"
    assert first.contact_type == "PRIMARY"
    assert first.outcome == "PAYMENT_PROMISE"
    assert first.non_payment_reason == "CASH_FLOW"
    assert first.actor == "John Smith"
    assert second.account_id == "23456789"
    assert second.actor == "AUTO_DIALER"
    assert second.non_payment_reason is None


def test_load_contact_events_reports_rejected_rows(activity_dataframe, tmp_path):
    csv_path = tmp_path / "activity.csv"
    activity_dataframe.to_csv(csv_path, index=False)

    loaded = load_contact_events(csv_path)

    assert [record.row_number for record in loaded.rejected] == [3, 5]
    bad_date, no_account = loaded.rejected
    assert bad_date.reason.startswith("malformed event_date")
    assert bad_date.values["Activity Date"] == "2026-02-10"
    assert no_account.reason == "missing account_id"
    assert no_account.values["Debtor Name"] == "Global Services Inc"


def test_load_contact_events_from_excel_with_explicit_mapping(tmp_path):
    excel_path = tmp_path / "activity.xlsx"
    pd.DataFrame(
        [
            {"Cuenta": "34567890", "Fecha": "19/02/2026", "Canal": "SMS", "Tipo": "RELATIVE", "Gestor": "Carlos Ruiz"},
        ]
    ).to_excel(excel_path, index=False)

    loaded = load_contact_events(
        excel_path,
        column_mapping={
            "account_id": "Cuenta",
            "event_date": "Fecha",
            "channel": "Canal",
            "contact_type": "Tipo",
            "actor": "Gestor",
        },
    )

    assert loaded.rejected == []
    assert len(loaded.events) == 1
    event = loaded.events[0]
    assert event.account_id == "34567890"
    assert event.event_date == date(2026, 2, 19)
    assert event.channel == "SMS"
    assert event.contact_type == "RELATIVE"
    assert event.actor == "Carlos Ruiz"
    assert event.outcome is None


def test_load_contact_events_accepts_excel_date_cells(tmp_path):
    excel_path = tmp_path / "activity.xlsx"
    pd.DataFrame(
        [
            {"account_id": "12345678", "event_date": datetime(2026, 2, 15), "channel": "PHONE", "actor": "John Smith"},
            {"account_id": "23456789", "event_date": "18/02/2026", "channel": "SMS", "actor": "Maria Garcia"},
        ]
    ).to_excel(excel_path, index=False)

    loaded = load_contact_events(excel_path)

    assert loaded.rejected == []
    assert [event.event_date for event in loaded.events] == [date(2026, 2, 15), date(2026, 2, 18)]


def test_load_contact_events_rejects_mapping_to_absent_column(tmp_path):
    csv_path = tmp_path / "activity.csv"
    csv_path.write_text("account_id,event_date,actor\n1,15/02/2026,John Smith\n", encoding="utf-8")

    with pytest.raises(MissingColumnError, match="Gestor"):
        load_contact_events(csv_path, column_mapping={"actor": "Gestor"})


def test_rejected_row_numbers_count_blank_lines(tmp_path):
    csv_path = tmp_path / "activity.csv"
    csv_path.write_text(
        "account_id,event_date,channel\n"
        "1,15/02/2026,PHONE\n"
        "\n"
        "2,31/02/2026,PHONE\n",
        encoding="utf-8",
    )

    loaded = load_contact_events(csv_path)

    assert len(loaded.events) == 1
    assert [record.row_number for record in loaded.rejected] == [4]


def test_load_contact_events_requires_date_column(tmp_path):
    csv_path = tmp_path / "activity.csv"
    csv_path.write_text("account_id,channel\n1,PHONE\n", encoding="utf-8")

    with pytest.raises(MissingColumnError):
        load_contact_events(csv_path)


def test_load_assignments_deduplicates_and_parses_debt(tmp_path):
    csv_path = tmp_path / "assignments.csv"
    pd.DataFrame(
        [
            {
                "account_id": "12345678",
                "check_digit": "9",
                "debtor_name": "ACME Corporation Ltd",
                "total_debt": "5.250.000",
                "debt_tier": "T3: 3M-5M",
                "assignment_tier": "T3: 3M-5M",
                "branch": "Central Branch",
                "agent_name": "John Smith",
            },
            {
                "account_id": "67890123",
                "check_digit": "4",
                "debtor_name": "Logistics Express",
                "total_debt": "pending",
                "debt_tier": "T1: <1M",
                "assignment_tier": "T1: <1M",
                "branch": "West Branch",
                "agent_name": "",
            },
            {
                "account_id": "12345678",
                "check_digit": "9",
                "debtor_name": "Duplicate Row",
                "total_debt": "1",
                "debt_tier": "",
                "assignment_tier": "",
                "branch": "",
                "agent_name": "",
            },
        ]
    ).to_csv(csv_path, index=False)

    assignments = load_assignments(csv_path)

    assert [assignment.account_id for assignment in assignments] == ["12345678", "67890123"]
    acme, logistics = assignments
    assert acme.debtor_name == "ACME Corporation Ltd"
    assert acme.check_digit == "9"
    assert acme.total_debt == 5250000
    assert acme.total_debt_text == "5.250.000"
    assert acme.branch == "Central Branch"
    assert acme.agent_name == "John Smith"
    assert logistics.total_debt is None
    assert logistics.total_debt_text == "pending"
    assert logistics.agent_name is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [("5.250.000", 5250000), ("750.000", 750000), ("1,500,000", 1500000), ("-1.000", -1000), ("abc", None), (None, None)],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_unsupported_file_extension(tmp_path):
    bad_path = tmp_path / "activity.json"
    bad_path.write_text("{}", encoding="utf-8")

    with pytest.raises(UnsupportedFileTypeError):
        load_contact_events(bad_path)
