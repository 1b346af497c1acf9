from datetime import date, datetime
from typing import Annotated, Any, Generic, Optional, TypeVar
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, ValidatorFunctionWrapHandler, WrapValidator
from pydantic.alias_generators import to_camel


T = TypeVar("T")


def _as_timestamp(value: Any) -> Any:
    # some endpoints send plain dates where others send full timestamps
    if isinstance(value, str) and len(value.strip()) == 10:
        return f"{value.strip()}T00:00:00"
    return value


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    # optional workflow fields must not reject the whole record
    try:
        return handler(value)
    except ValidationError:
        return None


def _as_text(value: Any) -> Any:
    return value if isinstance(value, str) else str(value)


Timestamp = Annotated[datetime, BeforeValidator(_as_timestamp), WrapValidator(_or_none)]
Day = Annotated[date, WrapValidator(_or_none)]
Int = Annotated[int, WrapValidator(_or_none)]
Float = Annotated[float, WrapValidator(_or_none)]
Text = Annotated[str, BeforeValidator(_as_text)]


class BackendModel(BaseModel):
    # ERP payloads are camelCase and carry many fields we never read
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LeaveDetailsResponse(BackendModel):
    leave_id: int
    employee_no: Optional[Int] = None
    employee_name: Optional[Text] = None
    leave_from_date: Optional[Day] = None
    leave_to_date: Optional[Day] = None
    leave_days: Optional[Float] = None
    leave_reason: Optional[Text] = None
    request_date: Optional[Timestamp] = None
    trans_status: Optional[Text] = None
    next_approval: Optional[Int] = None
    next_approver_name: Optional[Text] = None
    next_app_level: Optional[Int] = None
    next_app_level_name: Optional[Text] = None
    approved_by: Optional[Int] = None
    approved_by_name: Optional[Text] = None
    approved_date: Optional[Timestamp] = None
    rejection_reason: Optional[Text] = None


class LoanDetailsResponse(BackendModel):
    loan_id: int
    employee_no: Optional[Int] = None
    employee_name: Optional[Text] = None
    loan_amount: Optional[Float] = None
    no_of_installments: Optional[Int] = None
    first_installment_date: Optional[Day] = None
    remaining_balance: Optional[Float] = None
    request_date: Optional[Timestamp] = None
    trans_status: Optional[Text] = None
    next_approval: Optional[Int] = None
    next_approver_name: Optional[Text] = None
    next_app_level: Optional[Int] = None
    next_app_level_name: Optional[Text] = None
    approved_by: Optional[Int] = None
    approved_by_name: Optional[Text] = None
    approved_date: Optional[Timestamp] = None
    rejection_reason: Optional[Text] = None


class LaborRequestDetailResponse(BackendModel):
    sequence_no: Optional[Int] = None
    job_title_ar: Optional[Text] = None
    job_title_en: Optional[Text] = None
    quantity: Optional[Int] = None
    daily_rate: Optional[Float] = None
    assigned_count: Optional[Int] = None
    remaining_count: Optional[Int] = None
    notes: Optional[Text] = None


class LaborRequestResponse(BackendModel):
    request_no: int
    project_code: Optional[Int] = None
    project_name: Optional[Text] = None
    request_date: Optional[Timestamp] = None
    start_date: Optional[Day] = None
    end_date: Optional[Day] = None
    request_status: Optional[Text] = None
    notes: Optional[Text] = None
    requested_by: Optional[Int] = None
    requested_by_name: Optional[Text] = None
    approved_by: Optional[Int] = None
    approved_by_name: Optional[Text] = None
    approval_date: Optional[Timestamp] = None
    next_approval: Optional[Int] = None
    next_approver_name: Optional[Text] = None
    next_app_level: Optional[Int] = None
    details: Optional[Annotated[list[LaborRequestDetailResponse], WrapValidator(_or_none)]] = None


class ApprovalStepResponse(BackendModel):
    level_no: Optional[Int] = None
    level_name: Optional[Text] = None
    approver_no: Optional[Int] = None
    approver_name: Optional[Text] = None
    status: Optional[Text] = None


class PageResponse(BackendModel, Generic[T]):
    content: list[T] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 0
    number: int = 0
