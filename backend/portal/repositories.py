"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table (users,
institutions, faculties, courses, applications). Every method issues a
single statement; writes commit immediately and refresh the instance so
generated ids are available to the caller.
"""

from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import delete, literal
from . import models

COURSE_REQUIREMENTS = "High School Diploma, Pass in relevant subjects"


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.User]:
        return self.session.exec(select(models.User)).all()


class InstitutionRepository:
    """Create, list and delete `Institution` rows."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, institution: models.Institution) -> models.Institution:
        self.session.add(institution)
        self.session.commit()
        self.session.refresh(institution)
        return institution

    def list_all(self) -> List[models.Institution]:
        return self.session.exec(select(models.Institution)).all()

    def delete(self, institution_id: int) -> bool:
        """Delete an institution by id.

        Returns False when no row matched so the caller can answer 404.
        """
        stmt = delete(models.Institution).where(models.Institution.id == institution_id)
        result = self.session.exec(stmt)
        self.session.commit()
        return result.rowcount > 0


class FacultyRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, faculty: models.Faculty) -> models.Faculty:
        self.session.add(faculty)
        self.session.commit()
        self.session.refresh(faculty)
        return faculty

    def list_all(self) -> List[models.Faculty]:
        return self.session.exec(select(models.Faculty)).all()


class CourseRepository:
    """Course inserts and the joined course listing."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, course: models.Course) -> models.Course:
        self.session.add(course)
        self.session.commit()
        self.session.refresh(course)
        return course

    def list_with_university(self) -> List[dict]:
        """Return courses joined to their institution name.

        Each item carries `id`, `name`, `university` and the fixed
        entry `requirements` text shown by the course browser.
        """
        stmt = (
            select(
                models.Course.id,
                models.Course.name,
                models.Institution.name.label("university"),
                literal(COURSE_REQUIREMENTS).label("requirements"),
            )
            .join(models.Institution, models.Course.institution_id == models.Institution.id)
        )
        return [dict(row._mapping) for row in self.session.exec(stmt).all()]


class ApplicationRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, application: models.Application) -> models.Application:
        """Store a submitted application and return it with its new id."""
        self.session.add(application)
        self.session.commit()
        self.session.refresh(application)
        return application
