"""Authentication routes for registering, signing in, and signing out."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starsessions import load_session
from starsessions.session import regenerate_session_id

from biocatalog.config import CatalogConfig
from biocatalog.profiles.models import Profile
from biocatalog.utils.auth import (
    SESSION_DISPLAY_NAME,
    SESSION_USER_ID,
    AuthService,
    RegistrationError,
)
from biocatalog.web.core.container import Container
from biocatalog.web.core.rendering import get_notifier, render_page
from biocatalog.web.forms import LoginForm, RegisterForm
from biocatalog.web.models.species import AuthStatusResponse

router = APIRouter()

AFTER_SIGN_IN = "/species"


def _safe_next(request: Request) -> str:
    """Post-login destination; only relative paths are honoured."""
    next_url = request.query_params.get("next", AFTER_SIGN_IN)
    if not next_url.startswith("/") or next_url.startswith("//"):
        return AFTER_SIGN_IN
    return next_url


def _sign_in(request: Request, profile: Profile) -> None:
    # Regenerate session ID to prevent session fixation attacks
    regenerate_session_id(request)
    request.session[SESSION_USER_ID] = profile.id
    request.session[SESSION_DISPLAY_NAME] = profile.display_name


@router.get("/login", response_class=HTMLResponse, name="login")
@inject
async def login_page(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
) -> HTMLResponse:
    """Show login page."""
    return render_page(
        request,
        templates,
        config,
        "auth/login.html.j2",
        page_name="Sign in",
        active_page="login",
        form=LoginForm(),
        error=None,
    )


@router.post("/login", response_model=None)
@inject
async def login(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    auth_service: Annotated[AuthService, Depends(Provide[Container.auth_service])],
) -> HTMLResponse | RedirectResponse:
    """Handle login form submission.

    Verifies credentials and creates session on success. Returns to login
    page with error on failure.
    """
    form = LoginForm(await request.form())
    profile = None
    if form.validate():
        profile = await auth_service.authenticate(form.email.data, form.password.data)

    if profile is None:
        return render_page(
            request,
            templates,
            config,
            "auth/login.html.j2",
            page_name="Sign in",
            active_page="login",
            status_code=401,
            form=form,
            error="Invalid email or password.",
        )

    _sign_in(request, profile)
    return RedirectResponse(url=_safe_next(request), status_code=303)


@router.get("/register", response_class=HTMLResponse, name="register")
@inject
async def register_page(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
) -> HTMLResponse:
    """Show the sign-up page."""
    return render_page(
        request,
        templates,
        config,
        "auth/register.html.j2",
        page_name="Create account",
        active_page="register",
        form=RegisterForm(),
        error=None,
    )


@router.post("/register", response_model=None)
@inject
async def register(
    request: Request,
    templates: Annotated[Jinja2Templates, Depends(Provide[Container.templates])],
    config: Annotated[CatalogConfig, Depends(Provide[Container.config])],
    auth_service: Annotated[AuthService, Depends(Provide[Container.auth_service])],
) -> HTMLResponse | RedirectResponse:
    """Create a profile and sign it in."""
    form = RegisterForm(await request.form())
    error = None
    if form.validate():
        try:
            profile = await auth_service.register(
                form.email.data,
                form.password.data,
                form.display_name.data,
                form.biography.data,
            )
        except RegistrationError as e:
            error = str(e)
        else:
            _sign_in(request, profile)
            get_notifier(request).notify("Welcome!", f"Signed in as {profile.get_display_name()}.")
            return RedirectResponse(url=AFTER_SIGN_IN, status_code=303)

    return render_page(
        request,
        templates,
        config,
        "auth/register.html.j2",
        page_name="Create account",
        active_page="register",
        status_code=422,
        form=form,
        error=error,
    )


@router.get("/logout")
async def logout(request: Request) -> RedirectResponse:
    """Handle logout.

    Clears session and redirects to the home page.
    """
    await load_session(request)
    request.session.clear()
    return RedirectResponse(url="/", status_code=303)


@router.get("/api/auth/status", response_model=AuthStatusResponse)
async def auth_status(request: Request) -> AuthStatusResponse:
    """Report whether the caller is signed in."""
    if not request.user.is_authenticated:
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(
        authenticated=True,
        user_id=request.user.identity,
        display_name=request.user.display_name,
    )
