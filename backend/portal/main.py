"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the course application portal.
Controllers are intentionally thin: they check that required fields are
present, delegate to a repository or service for one statement, and
return JSON responses. Errors are rendered as `{"error": "<message>"}`.

Endpoints implemented:
- GET /
- GET /health
- GET /users
- POST /register
- POST /login
- GET /institutions
- POST /institutions
- DELETE /institutions/{institution_id}
- GET /university
- GET /faculties
- POST /faculties
- GET /courses
- POST /courses
- POST /applications
"""

from fastapi import FastAPI, Depends, UploadFile, File, HTTPException, Form, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.datastructures import UploadFile as StarletteUploadFile
from typing import List, Optional, Union
import json
import logging
import time
import uuid
import uvicorn
from .database import create_db_and_tables, get_session
from . import services, repositories, models
from .schemas import (
    ApplicationIn,
    CourseIn,
    CourseListingOut,
    FacultyIn,
    FacultyOut,
    InstitutionOut,
    LoginIn,
    UserOut,
)
from .utils.uploads import InvalidUploadError, get_upload_root, store_image
from .config import settings

app = FastAPI(title="Course Application Portal API")
logger = logging.getLogger("portal.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Browser frontends are served from another origin during development.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Stored picture/logo paths are relative to this mount.
app.mount("/uploads", StaticFiles(directory=get_upload_root()), name="uploads")

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


def _db_failure(db: Session, message: str) -> HTTPException:
    """Roll back, log the active exception and build the generic 500."""
    db.rollback()
    logger.exception(message)
    return HTTPException(status_code=500, detail=message)


def _file_missing(file) -> bool:
    """A file counts as sent only when a named file part arrived."""
    return not isinstance(file, StarletteUploadFile) or not file.filename


def _store_upload(file: UploadFile) -> str:
    payload = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    try:
        return store_image(payload, file.filename, file.content_type)
    except InvalidUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/")
def index():
    """Server status probe used by the frontend."""
    return "Server is running."


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


@app.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_session)):
    """List registered users without their password hashes."""
    try:
        return repositories.UserRepository(db).list_all()
    except SQLAlchemyError:
        raise _db_failure(db, "Database error while fetching users.")


@app.post("/register", status_code=201)
def register(
    name: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    user_type: Optional[str] = Form(default=None),
    profilePicture: Union[UploadFile, str, None] = File(default=None),
    db: Session = Depends(get_session),
):
    """Register a user from a multipart form with a profile picture.

    The password is stored hashed; the picture is written to the upload
    directory and its path saved on the user row.
    """
    if services.any_missing(name, email, password, user_type) or _file_missing(profilePicture):
        raise HTTPException(
            status_code=400,
            detail="Please provide name, email, password, user_type, and a profile picture.",
        )
    picture_path = _store_upload(profilePicture)
    try:
        services.AuthService(db).register(name, email, password, user_type, picture_path)
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during registration.")
    return {"message": "User registered successfully."}


@app.post("/login")
def login(payload: Optional[LoginIn] = None, db: Session = Depends(get_session)):
    """Check an email/password pair and return the user's public fields.

    Unknown emails and wrong passwords produce the same 401 response.
    """
    payload = payload or LoginIn()
    if services.any_missing(payload.email, payload.password):
        raise HTTPException(status_code=400, detail="Please provide both email and password.")
    try:
        user = services.AuthService(db).authenticate(payload.email, payload.password)
    except SQLAlchemyError:
        raise _db_failure(db, "Database query error.")
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    return {
        "message": "Login successful",
        "user": {
            "id": user.id,
            "user_type": user.user_type,
            "name": user.name,
            "email": user.email,
            "profile_picture": user.profile_picture,
        },
    }


@app.get("/institutions", response_model=List[InstitutionOut])
def list_institutions(db: Session = Depends(get_session)):
    try:
        return repositories.InstitutionRepository(db).list_all()
    except SQLAlchemyError:
        raise _db_failure(db, "Database error while fetching institutions.")


@app.post("/institutions", status_code=201)
def add_institution(
    name: Optional[str] = Form(default=None),
    number_of_students: Optional[int] = Form(default=None),
    number_of_departments: Optional[int] = Form(default=None),
    number_of_courses: Optional[int] = Form(default=None),
    logo: Union[UploadFile, str, None] = File(default=None),
    db: Session = Depends(get_session),
):
    """Create an institution from a multipart form with a logo image."""
    if services.any_missing(name, number_of_students, number_of_departments, number_of_courses) or _file_missing(logo):
        raise HTTPException(status_code=400, detail="Please provide all required fields and a logo.")
    logo_path = _store_upload(logo)
    try:
        inst = repositories.InstitutionRepository(db).create(models.Institution(
            name=name,
            number_of_students=number_of_students,
            number_of_departments=number_of_departments,
            number_of_courses=number_of_courses,
            logo=logo_path,
        ))
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during adding institution.")
    return {
        "message": "Institution added successfully.",
        "institution": {
            "id": inst.id,
            "name": inst.name,
            "number_of_students": inst.number_of_students,
            "number_of_departments": inst.number_of_departments,
            "number_of_courses": inst.number_of_courses,
            "logo": inst.logo,
        },
    }


@app.delete("/institutions/{institution_id}")
def delete_institution(institution_id: int, db: Session = Depends(get_session)):
    try:
        deleted = repositories.InstitutionRepository(db).delete(institution_id)
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during deleting institution.")
    if not deleted:
        raise HTTPException(status_code=404, detail="Institution not found.")
    return {"message": "Institution deleted successfully."}


@app.get("/university", response_model=List[InstitutionOut])
def list_universities(db: Session = Depends(get_session)):
    """Institution listing used by the university picker."""
    try:
        return repositories.InstitutionRepository(db).list_all()
    except SQLAlchemyError:
        raise _db_failure(db, "Database error while fetching universities.")


@app.get("/faculties", response_model=List[FacultyOut])
def list_faculties(db: Session = Depends(get_session)):
    try:
        return repositories.FacultyRepository(db).list_all()
    except SQLAlchemyError:
        raise _db_failure(db, "Database error while fetching faculties.")


@app.post("/faculties", status_code=201)
def add_faculty(payload: Optional[FacultyIn] = None, db: Session = Depends(get_session)):
    payload = payload or FacultyIn()
    if services.any_missing(payload.name, payload.institution_id):
        raise HTTPException(status_code=400, detail="Please provide both name and institution.")
    try:
        repositories.FacultyRepository(db).create(
            models.Faculty(name=payload.name, institution_id=payload.institution_id)
        )
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during adding faculty.")
    return {"message": "Faculty added successfully."}


@app.get("/courses", response_model=List[CourseListingOut])
def list_courses(db: Session = Depends(get_session)):
    """List courses with their institution name and entry requirements."""
    try:
        return repositories.CourseRepository(db).list_with_university()
    except SQLAlchemyError:
        raise _db_failure(db, "Database error while fetching courses.")


@app.post("/courses", status_code=201)
def add_course(payload: Optional[CourseIn] = None, db: Session = Depends(get_session)):
    payload = payload or CourseIn()
    if services.any_missing(payload.name, payload.faculty, payload.institution):
        raise HTTPException(status_code=400, detail="Please provide name, faculty, and institution.")
    try:
        repositories.CourseRepository(db).create(models.Course(
            name=payload.name,
            faculty_id=payload.faculty,
            institution_id=payload.institution,
        ))
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during adding course.")
    return {"message": "Course added successfully."}


@app.post("/applications", status_code=201)
def submit_application(payload: Optional[ApplicationIn] = None, db: Session = Depends(get_session)):
    """Record a student's application.

    Up to eight `grades` entries are stored as subject/grade column
    pairs; absent pairs are stored as empty strings.
    """
    payload = payload or ApplicationIn()
    if services.any_missing(
        payload.student_name,
        payload.phone_number,
        payload.student_id,
        payload.university,
        payload.course_id,
        payload.faculty,
        payload.major_subject,
        payload.grades,
    ):
        raise HTTPException(status_code=400, detail="All fields are required.")
    try:
        created = services.ApplicationService(db).submit(payload)
    except SQLAlchemyError:
        raise _db_failure(db, "Database error during application submission.")
    return {"message": "Application submitted successfully", "applicationId": created.id}


def run():
    """Serve the API with uvicorn on the configured host and port."""
    logger.info("Listening on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
