"""
HTML routes: register, login, dashboard, advisor, logout
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from ..accounts.schemas import LoginForm, RegistrationForm, UserProfile
from ..accounts.service import AccountService
from ..advisor.agent import AdvisorAgent
from ..errors import AuthFailure, PersistenceFailure, ValidationFailure

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

SESSION_KEY = "session_token"

router = APIRouter()


def _accounts(request: Request) -> AccountService:
    return request.app.state.accounts


def _advisor(request: Request) -> AdvisorAgent:
    return request.app.state.advisor


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def _signed_in_user(request: Request) -> Optional[UserProfile]:
    """Re-read the session's user from the store; clears a dead session cookie."""
    token = request.session.get(SESSION_KEY)
    if not token:
        return None
    user = _accounts(request).current_user(token)
    if user is None:
        request.session.clear()
    return user


def _first_error_message(e: ValidationError) -> str:
    error = e.errors()[0]
    field = error["loc"][0] if error.get("loc") else ""
    if field == "email":
        return "Please enter a valid email address."
    # Messages from our own validators read "Value error, <text>".
    return str(error.get("msg", "Invalid input.")).removeprefix("Value error, ")


def _render(request: Request, name: str, context: dict, status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


@router.get("/")
def index(request: Request):
    if _signed_in_user(request):
        return _redirect("/dashboard")
    return _redirect("/login")


@router.get("/register", response_class=HTMLResponse)
def register_page(request: Request):
    return _render(request, "register.html", {"error": "", "form": {}})


@router.post("/register", response_class=HTMLResponse)
def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    grade: str = Form(""),
    interests: str = Form(""),
    goals: str = Form(""),
):
    submitted = {"name": name, "email": email, "grade": grade, "interests": interests, "goals": goals}
    accounts = _accounts(request)
    try:
        form = RegistrationForm(**submitted, password=password)
        user = accounts.register(form)
    except ValidationError as e:
        return _render(
            request, "register.html",
            {"error": _first_error_message(e), "form": submitted},
            status.HTTP_400_BAD_REQUEST,
        )
    except ValidationFailure as e:
        return _render(request, "register.html", {"error": str(e), "form": submitted}, status.HTTP_400_BAD_REQUEST)
    except PersistenceFailure:
        logger.error("Registration failed: store unavailable", exc_info=True)
        return _render(
            request, "register.html",
            {"error": "Could not create account. Please try again.", "form": submitted},
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    try:
        request.session[SESSION_KEY] = accounts.start_session(user)
    except PersistenceFailure:
        # The account exists; retrying registration would only hit the duplicate check.
        logger.error(f"Registered user {user.id} but could not start a session", exc_info=True)
        return _render(
            request, "login.html",
            {"error": "", "notice": "Your account was created. Please log in.", "email": user.email},
        )
    return _redirect("/dashboard")


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return _render(request, "login.html", {"error": "", "email": ""})


@router.post("/login", response_class=HTMLResponse)
def login(request: Request, email: str = Form(""), password: str = Form("")):
    try:
        token = _accounts(request).login(LoginForm(email=email, password=password))
    except AuthFailure as e:
        return _render(request, "login.html", {"error": str(e), "email": email}, status.HTTP_401_UNAUTHORIZED)
    except PersistenceFailure:
        logger.error("Login failed: store unavailable", exc_info=True)
        return _render(
            request, "login.html",
            {"error": "Login failed. Please try again.", "email": email},
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    request.session[SESSION_KEY] = token
    return _redirect("/dashboard")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request):
    user = _signed_in_user(request)
    if user is None:
        return _redirect("/login")
    return _render(request, "dashboard.html", {"user": user, "advice": "", "prompt": ""})


@router.post("/advisor", response_class=HTMLResponse)
def advisor(request: Request, prompt: str = Form("")):
    user = _signed_in_user(request)
    if user is None:
        return _redirect("/login")
    advice = _advisor(request).resolve_advice(user, prompt)
    return _render(request, "dashboard.html", {"user": user, "advice": advice, "prompt": prompt})


@router.post("/logout")
def logout(request: Request):
    _accounts(request).logout(request.session.get(SESSION_KEY))
    request.session.clear()
    return _redirect("/login")
