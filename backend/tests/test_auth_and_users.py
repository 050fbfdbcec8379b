import io
import uuid

from fastapi.testclient import TestClient
from PIL import Image
from sqlmodel import Session

from portal import models, repositories
from portal.database import engine
from portal.main import app
from portal.services import PWD_CTX

client = TestClient(app)


def _make_png() -> bytes:
    img = Image.new("RGB", (60, 40), "white")
    bio = io.BytesIO()
    img.save(bio, format="PNG")
    return bio.getvalue()


def _register(email, password="s3cret", files=None, **overrides):
    data = {"name": "Ada", "email": email, "password": password, "user_type": "student"}
    data.update(overrides)
    if files is None:
        files = {"profilePicture": ("me.png", _make_png(), "image/png")}
    return client.post("/register", data=data, files=files)


def _email():
    return f"user-{uuid.uuid4().hex[:8]}@example.com"


def test_register_stores_hashed_password():
    email = _email()
    r = _register(email, password="plain-pass")
    assert r.status_code == 201
    assert r.json() == {"message": "User registered successfully."}
    with Session(engine) as session:
        user = repositories.UserRepository(session).get_by_email(email)
    assert user is not None
    assert user.password != "plain-pass"
    assert PWD_CTX.verify("plain-pass", user.password)
    assert user.profile_picture.endswith("_me.png")


def test_register_requires_all_fields_and_picture():
    r = _register(_email(), files={})
    assert r.status_code == 400
    assert r.json()["error"] == "Please provide name, email, password, user_type, and a profile picture."
    r2 = _register(_email(), user_type="")
    assert r2.status_code == 400


def test_register_treats_unnamed_file_part_as_missing():
    files = {"profilePicture": ("", b"x", "image/png")}
    r = _register(_email(), files=files)
    assert r.status_code == 400
    assert r.json()["error"] == "Please provide name, email, password, user_type, and a profile picture."


def test_register_rejects_non_image_upload():
    files = {"profilePicture": ("notes.txt", b"hello", "text/plain")}
    r = _register(_email(), files=files)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid file type. Only JPEG, PNG, and GIF are allowed."


def test_duplicate_email_is_a_database_error():
    email = _email()
    assert _register(email).status_code == 201
    r = _register(email)
    assert r.status_code == 500
    assert r.json() == {"error": "Database error during registration."}


def test_login_returns_public_user_fields():
    email = _email()
    _register(email, password="pw-123")
    r = client.post("/login", json={"email": email, "password": "pw-123"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert set(body["user"]) == {"id", "user_type", "name", "email", "profile_picture"}
    assert body["user"]["email"] == email
    assert body["user"]["user_type"] == "student"


def test_login_failures_are_indistinguishable():
    email = _email()
    _register(email, password="right")
    wrong_pw = client.post("/login", json={"email": email, "password": "wrong"})
    unknown = client.post("/login", json={"email": _email(), "password": "right"})
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"error": "Invalid email or password."}


def test_login_requires_email_and_password():
    r = client.post("/login", json={"email": "someone@example.com"})
    assert r.status_code == 400
    assert r.json()["error"] == "Please provide both email and password."
    r2 = client.post("/login", json={"email": "", "password": "x"})
    assert r2.status_code == 400
    r3 = client.post("/login")
    assert r3.status_code == 400
    assert r3.json()["error"] == "Please provide both email and password."


def test_login_against_unrecognised_hash_is_rejected():
    email = _email()
    with Session(engine) as session:
        repositories.UserRepository(session).create(models.User(
            name="Legacy",
            email=email,
            password="$2b$10$abcdefghijklmnopqrstuuJ0sP0m9m3QJ1bXo8XJYQd5c0p2Jw7kG",
            user_type="student",
        ))
    r = client.post("/login", json={"email": email, "password": "anything"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid email or password."}


def test_users_listing_hides_password_hash():
    _register(_email())
    r = client.get("/users")
    assert r.status_code == 200
    users = r.json()
    assert users
    assert all("password" not in u for u in users)
