"""Urgency of a scheduled maintenance, from its next-due date and mileage."""

from enum import Enum


class Status(Enum):
    """Lower value = more urgent, so alerts sort by value."""

    OVERDUE = 1
    DUE_SOON = 2
    OK = 3
    UNKNOWN = 4  # Neither next date nor next mileage set

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").capitalize()
