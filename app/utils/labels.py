from typing import Any

DEFAULT_LOCALE = "en"

LABELS: dict[str, dict[str, str]] = {
    "en": {
        "submitted": "Request submitted",
        "submitted_desc": "The request was submitted successfully.",
        "approval": "Approval process",
        "approval_current_level": "Current level: {level}",
        "approval_waiting_for": "Waiting for: {approver}",
        "approval_reviewed": "Reviewed.",
        "approval_under_review": "Under review.",
        "final": "Final decision",
        "final_rejected": "Request rejected",
        "final_desc": "Final status of the request.",
        "final_approved_desc": "The request was fully approved.",
        "final_rejected_desc": "The request was rejected.",
        "final_rejected_reason": "Rejected: {reason}",
        "final_waiting_desc": "Waiting for the final approval.",
        "level": "Level {number}",
        "user": "user #{number}",
        "step_approved_by": "Approved by: {approver}",
        "step_approver": "Approver: {approver}",
        "advisory_summary": "Detailed history unavailable, showing summary.",
    },
    "ar": {
        "submitted": "تم إرسال الطلب",
        "submitted_desc": "تم إرسال الطلب بنجاح.",
        "approval": "عملية الموافقة",
        "approval_current_level": "المرحلة الحالية: {level}",
        "approval_waiting_for": "في انتظار: {approver}",
        "approval_reviewed": "تمت المراجعة.",
        "approval_under_review": "قيد المراجعة.",
        "final": "القرار النهائي",
        "final_rejected": "تم رفض الطلب",
        "final_desc": "حالة الطلب النهائية.",
        "final_approved_desc": "تمت الموافقة على الطلب بالكامل.",
        "final_rejected_desc": "تم رفض الطلب.",
        "final_rejected_reason": "مرفوض: {reason}",
        "final_waiting_desc": "في انتظار الموافقة النهائية.",
        "level": "المستوى {number}",
        "user": "المستخدم #{number}",
        "step_approved_by": "تمت الموافقة من قبل: {approver}",
        "step_approver": "الموافق: {approver}",
        "advisory_summary": "تعذر تحميل السجل التفصيلي. يتم عرض المعلومات الأساسية.",
    },
}


def label(key: str, locale: str | None = None, **params: Any) -> str:
    table = LABELS.get((locale or DEFAULT_LOCALE).lower(), LABELS[DEFAULT_LOCALE])
    text = table.get(key) or LABELS[DEFAULT_LOCALE][key]
    return text.format(**params) if params else text
