"""Tests for the employee and pay services."""

from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio

from employee_api.domain import (
    AmountPolicy,
    BankAccount,
    DisbursementState,
    EntryType,
    InvalidTransitionError,
    PayType,
)
from employee_api.exceptions import (
    AlreadyExistsError,
    EmployeeNotFoundError,
    NotFoundError,
    ValidationError,
)
from employee_api.services import BusinessEmployeeService, EmployeeService, ParentType, PayService


@pytest.fixture
def pay_service(session) -> PayService:
    return PayService(session)


@pytest_asyncio.fixture
async def pay_group(pay_service):
    return await pay_service.create_pay_group("Biweekly", PayType.PAYROLL, ["alice", "bob"])


@pytest_asyncio.fixture
async def disbursement(pay_service, pay_group, scheduled_at, actor_id):
    return await pay_service.create_disbursement(pay_group.id, scheduled_at, actor_id)


class TestPayGroups:
    async def test_create_pay_group(self, pay_service):
        pay_group = await pay_service.create_pay_group("HSA", "hsa", ["carol"])

        loaded = await pay_service.get_pay_group(pay_group.id)
        assert loaded.pay_type is PayType.HSA
        assert loaded.approvers == frozenset({"carol"})

    async def test_create_pay_group_collects_errors(self, pay_service):
        with pytest.raises(ValidationError) as exc_info:
            await pay_service.create_pay_group("x" * 101, PayType.PAYROLL, ["", "bob"])

        assert set(exc_info.value.as_dict()) == {"name", "approvers"}

    async def test_get_missing_pay_group(self, pay_service):
        with pytest.raises(NotFoundError):
            await pay_service.get_pay_group(uuid4())

    async def test_delete_reports_removed_rows(self, pay_service, pay_group, disbursement):
        await pay_service.add_pay_entry("pay_group", pay_group.id, "e1", "a1", "123456789", 1)
        await pay_service.add_pay_entry("pay_group", pay_group.id, "e2", "a2", "123456789", 2)
        await pay_service.add_pay_entry("disbursement", disbursement.id, "e3", "a3", "123456789", 3)

        result = await pay_service.delete_pay_group(pay_group.id)

        assert (result.pay_entries, result.disbursements) == (3, 1)
        with pytest.raises(NotFoundError):
            await pay_service.get_disbursement(disbursement.id)

    async def test_delete_missing_pay_group(self, pay_service):
        with pytest.raises(NotFoundError):
            await pay_service.delete_pay_group(uuid4())


class TestDisbursements:
    async def test_created_pending(self, disbursement, pay_group, actor_id):
        assert disbursement.state is DisbursementState.PENDING
        assert disbursement.pay_group_id == pay_group.id
        assert disbursement.updated_by == actor_id

    async def test_requires_existing_pay_group(self, pay_service, scheduled_at, actor_id):
        with pytest.raises(NotFoundError):
            await pay_service.create_disbursement(uuid4(), scheduled_at, actor_id)

    async def test_approve_then_schedule(self, pay_service, disbursement):
        approver = uuid4()
        approved = await pay_service.transition_disbursement(
            disbursement.id, DisbursementState.APPROVED, approver
        )
        assert approved.state is DisbursementState.APPROVED
        assert approved.updated_by == approver

        scheduled = await pay_service.transition_disbursement(
            disbursement.id, "scheduled", approver
        )
        assert scheduled.state is DisbursementState.SCHEDULED

    async def test_invalid_transition(self, pay_service, disbursement, actor_id):
        with pytest.raises(InvalidTransitionError):
            await pay_service.transition_disbursement(
                disbursement.id, DisbursementState.SCHEDULED, actor_id
            )

        loaded = await pay_service.get_disbursement(disbursement.id)
        assert loaded.state is DisbursementState.PENDING


class TestAddPayEntry:
    async def test_pay_group_parent(self, pay_service, pay_group):
        entry = await pay_service.add_pay_entry(
            ParentType.PAY_GROUP, pay_group.id, "emp1", "acct1", "123456789", Decimal("500.00")
        )

        assert entry.discriminator is EntryType.PAY_GROUP
        assert entry.pay_group_id == pay_group.id
        assert entry.disbursement_id is None

    async def test_disbursement_parent(self, pay_service, disbursement):
        entry = await pay_service.add_pay_entry(
            "disbursement", disbursement.id, "emp1", "acct1", "123456789", Decimal("12.34")
        )

        assert entry.discriminator is EntryType.DISBURSEMENT
        assert entry.disbursement_id == disbursement.id
        assert entry.pay_group_id is None

    async def test_unknown_parent_type(self, pay_service, pay_group):
        with pytest.raises(ValidationError) as exc_info:
            await pay_service.add_pay_entry(
                "employee", pay_group.id, "emp1", "acct1", "123456789", 1
            )

        assert "parent_type" in exc_info.value.as_dict()

    async def test_missing_parent(self, pay_service):
        with pytest.raises(NotFoundError) as exc_info:
            await pay_service.add_pay_entry(
                "disbursement", uuid4(), "emp1", "acct1", "123456789", 1
            )

        assert exc_info.value.entity == "Disbursement"

    async def test_field_errors_before_lookup(self, pay_service):
        # Validation fails first even though the parent does not exist either
        with pytest.raises(ValidationError) as exc_info:
            await pay_service.add_pay_entry("pay_group", uuid4(), "", "", "", 1)

        assert set(exc_info.value.as_dict()) == {
            "employee_id",
            "account_number",
            "routing_number",
        }

    async def test_amount_policy(self, session, pay_group):
        strict = PayService(session, amount_policy=AmountPolicy.POSITIVE)

        with pytest.raises(ValidationError):
            await strict.add_pay_entry("pay_group", pay_group.id, "emp1", "acct1", "123456789", 0)

        lenient = PayService(session)
        entry = await lenient.add_pay_entry(
            "pay_group", pay_group.id, "emp1", "acct1", "123456789", -5
        )
        assert entry.amount == Decimal("-5")

    async def test_get_with_parent(self, pay_service, disbursement):
        entry = await pay_service.add_pay_entry(
            "disbursement", disbursement.id, "emp1", "acct1", "123456789", 10
        )

        loaded, parent = await pay_service.get_pay_entry_with_parent(entry.id)

        assert loaded.id == entry.id
        assert parent.id == disbursement.id

    async def test_list_pay_entries(self, pay_service, pay_group, disbursement):
        await pay_service.add_pay_entry("pay_group", pay_group.id, "e1", "a1", "123456789", 1)
        await pay_service.add_pay_entry("disbursement", disbursement.id, "e2", "a2", "123456789", 2)

        group_entries = await pay_service.list_pay_entries("pay_group", pay_group.id)
        assert [e.employee_id for e in group_entries] == ["e1"]

        with pytest.raises(NotFoundError):
            await pay_service.list_pay_entries("disbursement", uuid4())


class TestEmployeeService:
    async def test_crud(self, session):
        service = EmployeeService(session)

        employee = await service.add_employee("Grace Hopper", "Engineering", Decimal("120000"))
        assert (await service.get_employee(employee.employee_id)).name == "Grace Hopper"

        updated = await service.update_employee(employee.employee_id, salary=Decimal("130000"))
        assert updated.salary == Decimal("130000")
        assert updated.name == "Grace Hopper"
        assert updated.department == "Engineering"

        assert await service.delete_employee(employee.employee_id) is True
        with pytest.raises(EmployeeNotFoundError):
            await service.get_employee(employee.employee_id)

    async def test_add_invalid(self, session):
        with pytest.raises(ValidationError) as exc_info:
            await EmployeeService(session).add_employee("G", "", Decimal("0"))

        assert set(exc_info.value.as_dict()) == {"name", "department", "salary"}

    async def test_update_missing(self, session):
        with pytest.raises(EmployeeNotFoundError):
            await EmployeeService(session).update_employee("nope", name="Someone")

    async def test_delete_missing(self, session):
        with pytest.raises(EmployeeNotFoundError):
            await EmployeeService(session).delete_employee("nope")

    async def test_list_sorted_by_name(self, session):
        service = EmployeeService(session)
        await service.add_employee("Zed", "Sales", Decimal("1000"))
        await service.add_employee("Amy", "Sales", Decimal("1000"))

        assert [e.name for e in await service.list_employees()] == ["Amy", "Zed"]


class TestBusinessEmployeeService:
    async def test_create_and_get(self, session, split_accounts):
        service = BusinessEmployeeService(session)
        employee = await service.create("Ada", "ada@example.com", split_accounts)

        loaded = await service.get(employee.id)
        assert loaded.email == "ada@example.com"
        assert loaded.is_valid

    async def test_invalid_not_stored(self, session):
        service = BusinessEmployeeService(session)
        accounts = [BankAccount("chk", "123456789", Decimal("0.5"))]

        with pytest.raises(ValidationError) as exc_info:
            await service.create("Ada", "ada@example.com", accounts)

        assert exc_info.value.as_dict() == {
            "bank_accounts": ["Bank account percentages must total exactly 100%"]
        }
        assert await service.repository.email_taken("ada@example.com") is False

    async def test_duplicate_email(self, session, split_accounts):
        service = BusinessEmployeeService(session)
        await service.create("Ada", "ada@example.com", split_accounts)

        with pytest.raises(AlreadyExistsError):
            await service.create("Ada Two", "Ada@Example.com", split_accounts)

    async def test_replace_keeps_own_email(self, session, split_accounts):
        service = BusinessEmployeeService(session)
        employee = await service.create("Ada", "ada@example.com", split_accounts)

        replaced = await service.replace(
            employee.id, "Ada Lovelace", "ada@example.com", split_accounts
        )

        assert replaced.name == "Ada Lovelace"
        assert (await service.get(employee.id)).name == "Ada Lovelace"

    async def test_delete_missing(self, session):
        with pytest.raises(NotFoundError):
            await BusinessEmployeeService(session).delete(uuid4())
