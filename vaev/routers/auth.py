"""
Login, logout and user-card endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from sqlalchemy.orm import Session

from vaev.config import Settings
from vaev.db.database import get_db
from vaev.dependencies import get_app_settings, get_current_user, get_identity_provider
from vaev.domain.entities import UserRecord
from vaev.domain.errors import InvalidCredentialsError
from vaev.navigation import bounce_back, bounce_back_sse, destroy_cookie, next_target, redirect_to_sse
from vaev.security.session import CSRF_TOKEN_FIELD, DAY_SECONDS, get_csrf_token
from vaev.services.identity_provider import IdentityProvider
from vaev.sse import ServerSentEventGenerator
from vaev.templating import render_fragment, render_page, send_error_message

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_LOGIN_FORM = 'document.getElementById("login-form").reset();'


@router.get("/login")
def login_page(
    request: Request,
    user: Optional[UserRecord] = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
):
    """
    Render the login form, or bounce a signed-in user back to ``next``.
    """
    if user is not None:
        return bounce_back(request)

    response = render_page(request, "login.html", next=next_target(request))
    if request.cookies.get(settings.AUTH_COOKIE_NAME):
        logger.info("Removing stale auth cookie")
        destroy_cookie(response, settings.AUTH_COOKIE_NAME)
    return response


@router.post("/auth/validate")
def validate_credentials(
    request: Request,
    email: str = Form(""),
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
    settings: Settings = Depends(get_app_settings),
):
    """
    Check the submitted credentials. On success set the auth cookie and send
    the browser back to ``next``; otherwise toast an error and reset the form.
    """
    sse = ServerSentEventGenerator()
    try:
        user = provider.verify(db, email or username, password)
    except InvalidCredentialsError:
        logger.info("Rejected login attempt for %s", email or username)
        send_error_message(sse, "Invalid credentials")
        sse.execute_script(RESET_LOGIN_FORM)
        return sse.response()

    logger.info("User %s signed in", user.id)
    bounce_back_sse(request, sse)
    response = sse.response()
    max_age = settings.AUTH_MAX_AGE_DAYS * DAY_SECONDS
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=provider.mint_token(user),
        max_age=max_age,
        expires=max_age,
        path="/",
        secure=True,
        httponly=True,
        samesite="strict",
    )
    return response


@router.post("/auth/logout")
def logout(settings: Settings = Depends(get_app_settings)):
    """
    Clear the auth cookie and send the browser to the login page.
    """
    sse = ServerSentEventGenerator()
    redirect_to_sse(sse, settings.LOGIN_ROUTE)
    response = sse.response()
    destroy_cookie(response, settings.AUTH_COOKIE_NAME)
    return response


@router.get("/auth/user")
def user_card(request: Request, user: Optional[UserRecord] = Depends(get_current_user)):
    """
    Render the header card for the current visitor into ``#user-card``.
    """
    sse = ServerSentEventGenerator()
    if user is None:
        fragment = render_fragment("guest_card.html")
    else:
        fragment = render_fragment(
            "user_card.html", user=user, csrf_token=get_csrf_token(request), csrf_field=CSRF_TOKEN_FIELD,
        )
    sse.merge_fragments(fragment, selector="#user-card")
    return sse.response()
