"""Pay domain: entities, pay entry ownership and validation rules."""

from employee_api.domain.pay_entry import (
    AmountPolicy,
    OwnedByDisbursement,
    OwnedByPayGroup,
    PayEntry,
    PayEntryOwner,
    PayEntryParent,
    create_for_disbursement,
    create_for_pay_group,
    resolve_parent,
)
from employee_api.domain.state_machine import DisbursementStateMachine, InvalidTransitionError
from employee_api.domain.types import (
    BankAccount,
    BusinessEmployee,
    Disbursement,
    DisbursementState,
    Employee,
    EntryType,
    PayGroup,
    PayType,
)
from employee_api.domain.validation import (
    FieldError,
    ValidationResult,
    validate_business_employee,
    validate_employee_create,
    validate_employee_update,
)

__all__ = [
    "AmountPolicy",
    "BankAccount",
    "BusinessEmployee",
    "Disbursement",
    "DisbursementState",
    "DisbursementStateMachine",
    "Employee",
    "EntryType",
    "FieldError",
    "InvalidTransitionError",
    "OwnedByDisbursement",
    "OwnedByPayGroup",
    "PayEntry",
    "PayEntryOwner",
    "PayEntryParent",
    "PayGroup",
    "PayType",
    "ValidationResult",
    "create_for_disbursement",
    "create_for_pay_group",
    "resolve_parent",
    "validate_business_employee",
    "validate_employee_create",
    "validate_employee_update",
]
