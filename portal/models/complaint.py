"""Complaint model definitions."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PENDING = "pending"
RESOLVED = "resolved"

COMPLAINT_TYPES = (
    "Academic Issues",
    "Facility Problems",
    "Administrative Issues",
    "Health & Safety",
    "Technology Issues",
    "Other",
)


class Complaint(BaseModel):
    """A complaint submitted by a student.

    ``student_id`` is a weak reference: deleting the student leaves the
    complaint in place. ``student_name`` is a snapshot taken at submission.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    student_id: str = Field(alias="studentId")
    student_name: str = Field(alias="studentName")
    type: str
    message: str
    status: Literal["pending", "resolved"] = PENDING
    created_at: str = Field(alias="createdAt")

    def toggled(self) -> "Complaint":
        next_status = RESOLVED if self.status == PENDING else PENDING
        return self.model_copy(update={"status": next_status})
