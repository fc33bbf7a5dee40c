"""Tests for the SplitLedger state container."""

import json
from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from split_ledger.ledger import NotFoundError, SplitLedger, ValidationError
from split_ledger.models import FixedDollar, FixedPercentage, Flexible


class TestParticipantCrud:
    """Tests for adding, updating and removing participants."""

    def test_add_participant_modes(self, ledger):
        """Test the mode follows which share was given."""
        alice = ledger.add_participant("Alice", percentage=30)
        bob = ledger.add_participant("Bob", dollar_amount=20)
        carol = ledger.add_participant("Carol")

        assert alice.allocation_mode == FixedPercentage(value=30)
        assert bob.allocation_mode == FixedDollar(value=20)
        assert carol.allocation_mode == Flexible()
        assert [p.name for p in ledger.participants] == ["Alice", "Bob", "Carol"]

    def test_add_participant_assigns_unique_ids(self, ledger):
        ids = {ledger.add_participant(f"P{i}").id for i in range(5)}
        assert len(ids) == 5

    def test_zero_share_is_flexible(self, ledger):
        participant = ledger.add_participant("Dan", percentage=0, dollar_amount=0)
        assert participant.is_flexible

    def test_add_participant_rejects_empty_name(self, ledger):
        """Test that an empty name raises ValidationError and adds nothing."""
        with pytest.raises(ValidationError) as exc_info:
            ledger.add_participant("  ")
        assert exc_info.value.issues[0].field == "name"
        assert ledger.participants == []

    def test_add_participant_rejects_both_shares(self, ledger):
        with pytest.raises(ValidationError, match="not both"):
            ledger.add_participant("Eve", percentage=10, dollar_amount=10)

    def test_over_allocation_does_not_raise(self, ledger):
        """Test that fixed percentages above 100% are allowed."""
        ledger.add_participant("A", percentage=70)
        ledger.add_participant("B", percentage=50)
        assert ledger.get_total_fixed_percentage() == 120

    def test_over_allocation_warning_is_logged(self, store):
        """Test the projected-total warning reaches the audit log."""
        with capture_logs() as logs:
            ledger = SplitLedger(store=store)
            ledger.add_participant("A", percentage=80)
            bob = ledger.add_participant("B", percentage=50)
            ledger.update_participant(bob.id, "B", percentage=30)

        warnings = [log for log in logs if log.get("event_type") == "validation_warning"]
        assert [log["description"] for log in warnings] == [
            "Fixed percentages would add up to 130%",
            "Fixed percentages would add up to 110%",
        ]
        assert all(log["entity_id"] == bob.id for log in warnings)
        assert all(log["log_level"] == "warning" for log in warnings)

    def test_no_warning_logged_within_100(self, store):
        with capture_logs() as logs:
            ledger = SplitLedger(store=store)
            ledger.add_participant("A", percentage=60)
            ledger.add_participant("B", percentage=40)

        assert not any(log.get("event_type") == "validation_warning" for log in logs)

    def test_update_participant_preserves_id_and_position(self, ledger):
        """Test update replaces name and mode in place."""
        first = ledger.add_participant("Alice", percentage=30)
        ledger.add_participant("Bob")

        updated = ledger.update_participant(first.id, "Alicia", dollar_amount=15)

        assert updated.id == first.id
        assert updated.name == "Alicia"
        assert updated.allocation_mode == FixedDollar(value=15)
        assert updated.percentage is None
        assert ledger.participants[0] == updated

    def test_update_participant_to_flexible(self, ledger):
        """Test clearing both shares makes the participant flexible."""
        participant = ledger.add_participant("Alice", percentage=30)
        updated = ledger.update_participant(participant.id, "Alice")
        assert updated.is_flexible
        assert ledger.get_total_fixed_percentage() == 0

    def test_update_unknown_participant(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.update_participant(str(uuid4()), "Nobody")

    def test_update_participant_validates(self, ledger):
        participant = ledger.add_participant("Alice")
        with pytest.raises(ValidationError):
            ledger.update_participant(participant.id, "")
        assert ledger.get_participant(participant.id).name == "Alice"

    def test_remove_participant(self, ledger):
        participant = ledger.add_participant("Alice")
        assert ledger.remove_participant(participant.id) is True
        assert ledger.participants == []

    def test_remove_unknown_participant_is_noop(self, ledger):
        ledger.add_participant("Alice")
        assert ledger.remove_participant(str(uuid4())) is False
        assert len(ledger.participants) == 1

    def test_get_unknown_participant(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get_participant(str(uuid4()))

    def test_participants_returns_copy(self, ledger):
        ledger.add_participant("Alice")
        ledger.participants.clear()
        assert len(ledger.participants) == 1


class TestBillCrud:
    """Tests for adding and removing bills."""

    def test_add_bill(self, ledger):
        bill = ledger.add_bill(100, "Dinner")
        assert bill.total_amount == 100
        assert bill.description == "Dinner"
        assert ledger.bills == [bill]

    def test_add_bill_without_description(self, ledger):
        assert ledger.add_bill(12.5).description == ""

    @pytest.mark.parametrize("amount", [0, -10, float("nan"), float("inf")])
    def test_add_bill_rejects_bad_amount(self, ledger, amount):
        with pytest.raises(ValidationError):
            ledger.add_bill(amount)
        assert ledger.bills == []

    def test_remove_bill(self, ledger):
        bill = ledger.add_bill(10)
        assert ledger.remove_bill(bill.id) is True
        assert ledger.bills == []

    def test_remove_unknown_bill_is_noop(self, ledger):
        ledger.add_bill(10)
        assert ledger.remove_bill(str(uuid4())) is False
        assert len(ledger.bills) == 1

    def test_total_bill_amount(self, ledger):
        ledger.add_bill(10)
        ledger.add_bill(32.5)
        assert ledger.total_bill_amount() == pytest.approx(42.5)


class TestQueries:
    """Tests for the split queries."""

    def test_fixed_totals(self, ledger):
        ledger.add_participant("A", percentage=30)
        ledger.add_participant("B", dollar_amount=12)
        ledger.add_participant("C", dollar_amount=8)
        ledger.add_participant("D")
        assert ledger.get_total_fixed_percentage() == 30
        assert ledger.get_total_fixed_dollar() == 20

    def test_bill_split_percentage_scenario(self, ledger):
        """Test 30% fixed plus two flexible participants on one 100 bill."""
        a = ledger.add_participant("A", percentage=30)
        b = ledger.add_participant("B")
        c = ledger.add_participant("C")
        bill = ledger.add_bill(100)

        result = ledger.calculate_bill_split(bill.id)
        by_id = {line.participant_id: line for line in result.lines}

        assert by_id[a.id].amount == pytest.approx(30)
        assert by_id[a.id].effective_percentage == pytest.approx(30)
        assert by_id[b.id].amount == pytest.approx(35)
        assert by_id[c.id].amount == pytest.approx(35)
        assert by_id[c.id].effective_percentage == pytest.approx(35)

    def test_bill_split_dollar_scenario(self, ledger):
        """Test a fixed 40 and one flexible participant on one 100 bill."""
        ledger.add_participant("A", dollar_amount=40)
        ledger.add_participant("B")
        bill = ledger.add_bill(100)

        a, b = ledger.calculate_bill_split(bill.id).lines
        assert a.amount == pytest.approx(40)
        assert b.amount == pytest.approx(60)
        assert b.effective_percentage == pytest.approx(60)

    def test_over_allocated_warning(self, ledger):
        """Test 120% fixed clamps flexible shares to zero and raises a warning flag."""
        ledger.add_participant("A", percentage=70)
        ledger.add_participant("B", percentage=50)
        ledger.add_participant("C")
        bill = ledger.add_bill(100)

        result = ledger.calculate_bill_split(bill.id)
        assert result.lines[2].amount == 0
        assert result.is_percentage_over_allocated is True
        assert ledger.get_allocation_warnings(bill.id)
        assert ledger.get_allocation_warnings()

    def test_bill_split_unknown_bill(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.calculate_bill_split(str(uuid4()))

    def test_aggregate_split_sums_bills(self, ledger):
        """Test the aggregate split uses the sum of all bills."""
        ledger.add_participant("A", dollar_amount=40)
        ledger.add_participant("B")
        ledger.add_bill(60)
        ledger.add_bill(40)

        result = ledger.calculate_aggregate_split()
        assert result.total_amount == pytest.approx(100)
        assert [line.amount for line in result.lines] == pytest.approx([40, 60])

    def test_aggregate_split_matches_single_bill(self, ledger):
        ledger.add_participant("A", percentage=25)
        ledger.add_participant("B")
        bill = ledger.add_bill(80)
        assert ledger.calculate_aggregate_split() == ledger.calculate_bill_split(bill.id)

    def test_aggregate_split_without_bills_is_empty(self, ledger):
        """Test no bills short-circuits to an empty split."""
        ledger.add_participant("A")
        result = ledger.calculate_aggregate_split()
        assert result.lines == []
        assert result.total_amount == 0

    def test_aggregate_warning_without_bills(self, ledger):
        ledger.add_participant("A", percentage=80)
        ledger.add_participant("B", percentage=30)
        warnings = ledger.get_allocation_warnings()
        assert len(warnings) == 1
        assert "110%" in warnings[0]

    def test_split_without_participants_is_empty(self, ledger):
        bill = ledger.add_bill(100)
        assert ledger.calculate_bill_split(bill.id).lines == []
        assert ledger.calculate_aggregate_split().lines == []

    def test_roster_is_shared_by_all_bills(self, ledger):
        """Test every bill is split across the same participants."""
        ledger.add_participant("A")
        ledger.add_participant("B")
        first = ledger.add_bill(10)
        second = ledger.add_bill(50)

        first_ids = [line.participant_id for line in ledger.calculate_bill_split(first.id).lines]
        second_ids = [line.participant_id for line in ledger.calculate_bill_split(second.id).lines]
        assert first_ids == second_ids == [p.id for p in ledger.participants]


class TestPersistenceOnMutation:
    """Tests that mutations reach storage."""

    @pytest.fixture(autouse=True)
    def keys(self, store):
        self.participants_key = store.participants_key
        self.bills_key = store.bills_key

    def test_add_participant_persists(self, ledger, storage):
        ledger.add_participant("Alice", percentage=30)
        records = json.loads(storage.get_item(self.participants_key))
        assert records[0]["name"] == "Alice"
        assert records[0]["percentage"] == 30
        assert records[0]["hasFixedPercentage"] is True
        assert records[0]["hasFixedDollarAmount"] is False

    def test_add_bill_persists(self, ledger, storage):
        ledger.add_bill(99.5, "Taxi")
        records = json.loads(storage.get_item(self.bills_key))
        assert records[0]["totalAmount"] == 99.5
        assert records[0]["description"] == "Taxi"

    def test_remove_persists(self, ledger, storage):
        participant = ledger.add_participant("Alice")
        bill = ledger.add_bill(10)
        ledger.remove_participant(participant.id)
        ledger.remove_bill(bill.id)
        assert json.loads(storage.get_item(self.participants_key)) == []
        assert json.loads(storage.get_item(self.bills_key)) == []

    def test_failed_validation_does_not_persist(self, ledger, storage):
        with pytest.raises(ValidationError):
            ledger.add_bill(0)
        assert storage.get_item(self.bills_key) is None

    def test_ledger_reloads_state(self, ledger, store):
        """Test a new ledger on the same storage sees the same rosters."""
        ledger.add_participant("Alice", percentage=30)
        ledger.add_participant("Bob", dollar_amount=10)
        ledger.add_participant("Carol")
        ledger.add_bill(100, "Dinner")

        reloaded = SplitLedger(store=store)
        assert reloaded.participants == ledger.participants
        assert reloaded.bills == ledger.bills

    def test_clear_all(self, ledger, store, storage):
        """Test clear_all empties both rosters and deletes both keys."""
        ledger.add_participant("Alice")
        ledger.add_bill(10)

        ledger.clear_all()

        assert ledger.participants == []
        assert ledger.bills == []
        assert storage.get_item(self.participants_key) is None
        assert storage.get_item(self.bills_key) is None

        reloaded = SplitLedger(store=store)
        assert reloaded.participants == []
        assert reloaded.bills == []


class TestSubscriptions:
    """Tests for change notification."""

    def test_subscriber_called_after_each_mutation(self, ledger):
        calls = []
        ledger.subscribe(lambda changed: calls.append(len(changed.participants)))

        participant = ledger.add_participant("Alice")
        ledger.update_participant(participant.id, "Alicia")
        bill = ledger.add_bill(5)
        ledger.remove_bill(bill.id)
        ledger.remove_participant(participant.id)
        ledger.clear_all()

        assert calls == [1, 1, 1, 1, 0, 0]

    def test_no_notification_for_noop_or_failure(self, ledger):
        calls = []
        ledger.subscribe(lambda changed: calls.append(changed))

        ledger.remove_participant(str(uuid4()))
        ledger.remove_bill(str(uuid4()))
        with pytest.raises(ValidationError):
            ledger.add_participant("")

        assert calls == []

    def test_unsubscribe(self, ledger):
        calls = []
        unsubscribe = ledger.subscribe(lambda changed: calls.append(changed))
        unsubscribe()
        ledger.add_participant("Alice")
        assert calls == []

    def test_failing_subscriber_does_not_break_mutation(self, ledger):
        """Test a raising subscriber is isolated from the ledger and other subscribers."""
        calls = []

        def broken(changed):
            raise RuntimeError("view crashed")

        ledger.subscribe(broken)
        ledger.subscribe(lambda changed: calls.append(changed))

        participant = ledger.add_participant("Alice")

        assert ledger.participants == [participant]
        assert calls == [ledger]
