
# app/withdrawals/state_machine.py
from app.errors import InvalidStatus, InvalidTransition

STATUSES = ("PENDING", "APPROVED", "PROCESSING", "COMPLETED", "REJECTED")
TERMINAL_STATUSES = ("COMPLETED", "REJECTED")

ALLOWED = {
    "PENDING": {"APPROVED", "REJECTED"},
    "APPROVED": {"PROCESSING", "COMPLETED", "REJECTED"},
    "PROCESSING": {"COMPLETED"},
    "COMPLETED": set(),
    "REJECTED": set(),
}


def normalize_status(value: str | None) -> str:
    status = (value or "").strip().upper()
    if status not in ALLOWED:
        raise InvalidStatus(f"Unknown withdrawal status: {value!r}")
    return status


def assert_transition(old: str, new: str) -> None:
    if new not in ALLOWED.get(old, set()):
        raise InvalidTransition(f"Cannot move a withdrawal from {old} to {new}")


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES
