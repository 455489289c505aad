"""Tests for call records."""

from __future__ import annotations

from understudy.domain.invocations import CallRecord
from understudy.domain.operations import OperationDescriptor
from tests.fakes import User

SAVE = OperationDescriptor.declare("save", [User], None, contract_name="UserRepository")
DELETE = OperationDescriptor.declare("delete", [int], None, contract_name="UserRepository")


class TestCallRecord:
    """Tests for CallRecord."""

    def test_capture_takes_deep_copy(self):
        """Mutating an argument after the call does not rewrite history."""
        user = User(user_id=1, email="a@example.com", name="Alice", roles=["admin"])
        record = CallRecord.capture(SAVE, [user])

        user.roles.append("owner")
        user.name = "Mallory"

        captured = record.arguments[0]
        assert captured is not user
        assert captured.name == "Alice"
        assert captured.roles == ["admin"]

    def test_capture_normalises_missing_arguments(self):
        assert CallRecord.capture(DELETE, None).arguments == ()

    def test_equality_is_structural(self):
        """Records match on operation and deep-equal arguments."""
        first = CallRecord.capture(SAVE, [User(user_id=1, email="a", name="A")])
        second = CallRecord.capture(SAVE, [User(user_id=1, email="a", name="A")])
        different_args = CallRecord.capture(SAVE, [User(user_id=2, email="a", name="A")])
        different_operation = CallRecord.capture(DELETE, [1])

        assert first == second
        assert first != different_args
        assert different_operation != CallRecord.capture(SAVE, [1])

    def test_operation_name_and_repr(self):
        record = CallRecord.capture(DELETE, [7])

        assert record.operation_name == "delete"
        assert repr(record) == "delete(7)"

    def test_records_are_not_hashable(self):
        """Structural equality over mutable arguments rules out hashing."""
        record = CallRecord.capture(DELETE, [7])

        assert CallRecord.__hash__ is None
        assert record in [CallRecord.capture(DELETE, [7])]
