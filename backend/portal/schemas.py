"""Pydantic request/response schemas used by the API.

Request fields are all optional so that handlers can run their own
presence checks and answer with the portal's 400 messages instead of a
generic validation error. Numbers sent for text fields are accepted and
stored as strings.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class LoginIn(BaseModel):
    """Payload for the login endpoint."""
    email: Optional[str] = None
    password: Optional[str] = None


class FacultyIn(BaseModel):
    """Payload for creating a faculty under an institution."""
    name: Optional[str] = None
    institution_id: Optional[int] = None


class CourseIn(BaseModel):
    """Payload for creating a course; `faculty` and `institution` are ids."""
    name: Optional[str] = None
    faculty: Optional[int] = None
    institution: Optional[int] = None


class GradeIn(BaseModel):
    """A single subject/grade pair on an application."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    subject: Optional[str] = None
    grade: Optional[str] = None


class ApplicationIn(BaseModel):
    """Application form as posted by the frontend (camelCase where it uses it)."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    student_name: Optional[str] = Field(default=None, alias="studentName")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    student_id: Optional[str] = None
    university: Optional[str] = None
    course_id: Optional[int] = None
    faculty: Optional[str] = None
    major_subject: Optional[str] = Field(default=None, alias="majorSubject")
    grades: Optional[List[Optional[GradeIn]]] = None


class UserOut(BaseModel):
    """Public view of a user row; the password hash is never returned."""
    id: int
    name: str
    email: str
    user_type: str
    profile_picture: Optional[str] = None


class InstitutionOut(BaseModel):
    id: int
    name: str
    number_of_students: int
    number_of_departments: int
    number_of_courses: int
    logo: Optional[str] = None


class FacultyOut(BaseModel):
    id: int
    name: str
    institution_id: int


class CourseListingOut(BaseModel):
    """Course joined with its institution name for the course browser."""
    id: int
    name: str
    university: str
    requirements: str
