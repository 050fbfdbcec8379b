"""Business logic services used by HTTP controllers.

Services are intentionally thin: they hash and verify passwords, shape
request payloads into table rows and persist them via repositories.
Nothing here spans more than one statement.
"""

from passlib.context import CryptContext
from typing import Iterable, List, Optional, Tuple
from sqlmodel import Session
from . import models, repositories
from .schemas import ApplicationIn, GradeIn

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def is_missing(value) -> bool:
    """Presence check shared by every create route.

    `None` and empty strings count as missing; any other value, including
    an empty list, is present.
    """
    return value is None or (isinstance(value, str) and value == "")


def any_missing(*values) -> bool:
    return any(is_missing(v) for v in values)


def pad_grades(grades: Optional[Iterable[Optional[GradeIn]]]) -> List[Tuple[str, str]]:
    """Return exactly `MAX_GRADE_PAIRS` (subject, grade) tuples.

    Missing entries and missing keys become empty strings; entries past
    the eighth are dropped.
    """
    items = list(grades or [])[:models.MAX_GRADE_PAIRS]
    pairs = []
    for i in range(models.MAX_GRADE_PAIRS):
        entry = items[i] if i < len(items) else None
        if entry is None:
            pairs.append(("", ""))
        else:
            pairs.append((entry.subject or "", entry.grade or ""))
    return pairs


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, name: str, email: str, password: str, user_type: str, profile_picture: str) -> models.User:
        """Create a new user with a hashed password.

        Returns the persisted `User` instance. A duplicate email surfaces
        as the database's integrity error.
        """
        hashed = PWD_CTX.hash(password)
        u = models.User(
            name=name,
            email=email,
            password=hashed,
            user_type=user_type,
            profile_picture=profile_picture,
        )
        return self.user_repo.create(u)

    def authenticate(self, email: str, password: str) -> Optional[models.User]:
        """Verify credentials and return the matching user.

        Returns `None` both for an unknown email and for a wrong password
        so callers cannot tell the two apart.
        """
        user = self.user_repo.get_by_email(email)
        if not user:
            return None
        try:
            verified = PWD_CTX.verify(password, user.password)
        except ValueError:
            # stored value is not a hash this context understands
            return None
        if not verified:
            return None
        return user


class ApplicationService:
    """Turn a submitted application form into an `applications` row."""
    def __init__(self, session: Session):
        self.session = session
        self.app_repo = repositories.ApplicationRepository(session)

    @staticmethod
    def build(payload: ApplicationIn) -> models.Application:
        """Map the form onto the fixed-column row without persisting it."""
        row = models.Application(
            student_name=payload.student_name,
            phone_number=payload.phone_number,
            student_id=payload.student_id,
            university=payload.university,
            course_id=payload.course_id,
            faculty=payload.faculty,
            major_subject=payload.major_subject,
        )
        for idx, (subject, grade) in enumerate(pad_grades(payload.grades), start=1):
            setattr(row, f"subject{idx}", subject)
            setattr(row, f"grade{idx}", grade)
        return row

    def submit(self, payload: ApplicationIn) -> models.Application:
        return self.app_repo.create(self.build(payload))
