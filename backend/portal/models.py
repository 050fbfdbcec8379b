"""SQLModel data models.

This module defines the portal's database tables using SQLModel. Table
names match the relational schema the frontend was built against
(`users`, `institutions`, `faculties`, `courses`, `applications`).
"""

from typing import Optional
from sqlmodel import SQLModel, Field

MAX_GRADE_PAIRS = 8


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `email`: unique login name
    - `password`: hashed password string (never store plaintext)
    - `profile_picture`: path of the uploaded image
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, nullable=False, unique=True)
    password: str
    user_type: str
    profile_picture: Optional[str] = None


class Institution(SQLModel, table=True):
    """A school or university with its headline numbers and logo."""
    __tablename__ = "institutions"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    number_of_students: int
    number_of_departments: int
    number_of_courses: int
    logo: Optional[str] = None


class Faculty(SQLModel, table=True):
    """An academic subdivision of an `Institution`."""
    __tablename__ = "faculties"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    institution_id: int = Field(foreign_key="institutions.id")


class Course(SQLModel, table=True):
    """A course offered by a faculty of an institution."""
    __tablename__ = "courses"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    faculty_id: int = Field(foreign_key="faculties.id")
    institution_id: int = Field(foreign_key="institutions.id")


class Application(SQLModel, table=True):
    """A student's admission request.

    Grades are stored as eight fixed (subject, grade) column pairs; unused
    pairs hold empty strings.
    """
    __tablename__ = "applications"

    id: Optional[int] = Field(default=None, primary_key=True)
    student_name: str
    phone_number: str
    student_id: str
    university: str
    course_id: int
    faculty: str
    major_subject: str
    subject1: str = ""
    grade1: str = ""
    subject2: str = ""
    grade2: str = ""
    subject3: str = ""
    grade3: str = ""
    subject4: str = ""
    grade4: str = ""
    subject5: str = ""
    grade5: str = ""
    subject6: str = ""
    grade6: str = ""
    subject7: str = ""
    grade7: str = ""
    subject8: str = ""
    grade8: str = ""
