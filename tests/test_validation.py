"""Tests for business employee and employee validation rules."""

from decimal import Decimal

import pytest

from employee_api.domain import (
    BankAccount,
    BusinessEmployee,
    validate_business_employee,
    validate_employee_create,
    validate_employee_update,
)

PERCENTAGE_SUM_MESSAGE = "Bank account percentages must total exactly 100%"


def make_employee(*percentages: str, routing: str = "123456789") -> BusinessEmployee:
    return BusinessEmployee(
        name="Dana Smith",
        email="dana@example.com",
        bank_accounts=[
            BankAccount(
                account_id=f"acct-{i}",
                routing_number=routing,
                pay_percentage=Decimal(p),
            )
            for i, p in enumerate(percentages)
        ],
    )


class TestPercentageTotal:
    """Bank account percentages must sum to 1 within 0.002 (inclusive)."""

    @pytest.mark.parametrize(
        "percentages",
        [("1",), ("0.5", "0.5"), ("0.6", "0.4"), ("0.999",), ("0.5", "0.502")],
    )
    def test_sums_within_tolerance_pass(self, percentages):
        result = validate_business_employee(make_employee(*percentages))
        assert result.is_valid, result.errors

    @pytest.mark.parametrize(
        "percentages",
        [("0.98",), ("0.6", "0.3"), ("0.55", "0.5")],
    )
    def test_sums_outside_tolerance_fail(self, percentages):
        result = validate_business_employee(make_employee(*percentages))
        assert not result.is_valid
        assert result.messages_for("bank_accounts") == [PERCENTAGE_SUM_MESSAGE]

    def test_sixty_thirty_split_names_percentage_rule(self):
        result = validate_business_employee(make_employee("0.6", "0.3"))
        assert PERCENTAGE_SUM_MESSAGE in result.as_dict()["bank_accounts"]

    def test_is_valid_property_matches_rule(self):
        assert make_employee("0.6", "0.4").is_valid
        assert not make_employee("0.6", "0.3").is_valid

    def test_float_percentages_accepted(self):
        employee = BusinessEmployee(
            name="Dana",
            email="dana@example.com",
            bank_accounts=[
                BankAccount("a", "123456789", 0.1),  # type: ignore[arg-type]
                BankAccount("b", "123456789", 0.2),  # type: ignore[arg-type]
                BankAccount("c", "123456789", 0.7),  # type: ignore[arg-type]
            ],
        )
        assert validate_business_employee(employee).is_valid

    @pytest.mark.parametrize("pct", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_percentage_is_reported(self, pct):
        employee = make_employee("0.6", pct)

        result = validate_business_employee(employee)

        assert result.messages_for("bank_accounts[1].pay_percentage") == [
            "Pay percentage must be between 0 and 100%"
        ]
        assert result.messages_for("bank_accounts") == [PERCENTAGE_SUM_MESSAGE]
        assert employee.is_valid is False

    def test_non_finite_percentage_excluded_from_total(self):
        result = validate_business_employee(make_employee("1", "NaN"))

        assert result.messages_for("bank_accounts") == []
        assert not result.is_valid


class TestBankAccounts:
    """Per-account rules."""

    def test_routing_number_nine_digits_passes(self):
        assert validate_business_employee(make_employee("1", routing="123456789")).is_valid

    @pytest.mark.parametrize("routing", ["12345678", "12345678a", "1234567890", ""])
    def test_bad_routing_numbers_fail(self, routing):
        result = validate_business_employee(make_employee("1", routing=routing))
        assert result.messages_for("bank_accounts[0].routing_number") == [
            "Routing number must be exactly 9 digits"
        ]

    @pytest.mark.parametrize("pct", ["0", "-0.1", "1.5"])
    def test_percentage_out_of_range(self, pct):
        result = validate_business_employee(make_employee(pct))
        assert result.messages_for("bank_accounts[0].pay_percentage") == [
            "Pay percentage must be between 0 and 100%"
        ]

    def test_missing_account_id(self):
        employee = make_employee("1")
        employee.bank_accounts = [BankAccount("", "123456789", Decimal("1"))]
        result = validate_business_employee(employee)
        assert result.messages_for("bank_accounts[0].account_id") == ["Account ID is required"]

    def test_no_accounts(self):
        employee = make_employee()
        result = validate_business_employee(employee)
        assert result.as_dict() == {"bank_accounts": ["At least one bank account is required"]}


class TestCollectsAllErrors:
    """Validation never stops at the first failure."""

    def test_every_violation_is_reported(self):
        employee = BusinessEmployee(
            name="",
            email="not-an-email",
            bank_accounts=[
                BankAccount("", "123", Decimal("0.2")),
                BankAccount("b", "12345678a", Decimal("0.2")),
            ],
        )

        errors = validate_business_employee(employee).as_dict()

        assert errors["name"] == ["Name is required"]
        assert errors["email"] == ["Email is not a valid email address"]
        assert "bank_accounts[0].account_id" in errors
        assert "bank_accounts[0].routing_number" in errors
        assert "bank_accounts[1].routing_number" in errors
        assert errors["bank_accounts"] == [PERCENTAGE_SUM_MESSAGE]

    def test_length_limits(self):
        employee = make_employee("1")
        employee.name = "x" * 201
        employee.email = "a@" + "b" * 319
        errors = validate_business_employee(employee).as_dict()
        assert errors["name"] == ["Name cannot exceed 200 characters"]
        assert errors["email"] == ["Email cannot exceed 320 characters"]


class TestEmployeeRules:
    """Employee add/update input rules."""

    def test_valid_create(self):
        assert validate_employee_create("Ana", "Finance", Decimal("50000")).is_valid

    def test_invalid_create_reports_each_field(self):
        errors = validate_employee_create("A", "", Decimal("0")).as_dict()
        assert errors == {
            "name": ["Employee name must be at least 2 characters long"],
            "department": ["Department is required"],
            "salary": ["Salary must be greater than 0"],
        }

    def test_salary_ceiling(self):
        errors = validate_employee_create("Ana", "Finance", Decimal("1000000.01")).as_dict()
        assert errors == {"salary": ["Salary cannot exceed 1,000,000"]}

    def test_update_checks_only_provided_fields(self):
        assert validate_employee_update("emp-1").is_valid
        assert validate_employee_update("emp-1", salary=Decimal("10")).is_valid

        errors = validate_employee_update("", department="D" * 51).as_dict()
        assert errors == {
            "employee_id": ["Employee ID is required"],
            "department": ["Department cannot exceed 50 characters"],
        }
