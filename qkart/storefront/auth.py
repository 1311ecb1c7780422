"""
Login, register and header (logout) controllers.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from qkart.integrations.contracts.interfaces import LoginResult, StorefrontBackend
from qkart.integrations.response_wrappers import IntegrationResponseError, normalize_login_response
from qkart.storefront.session import SessionContext
from qkart.storefront.ui import Navigator, Notifier, PageState
from qkart.storefront.validation import SOMETHING_WENT_WRONG, call_backend, validate_success_response

logger = logging.getLogger(__name__)

MIN_CREDENTIAL_LENGTH = 6
MAX_CREDENTIAL_LENGTH = 32


def validate_login_input(username: str, password: str) -> Optional[str]:
    """Return the first input error, or None when the form can be submitted."""
    if not username:
        return "Username is a required field"
    if not password:
        return "Password is a required field"
    return None


def validate_register_input(username: str, password: str, confirm_password: str) -> Optional[str]:
    if not username:
        return "Username is a required field"
    if len(username) < MIN_CREDENTIAL_LENGTH:
        return f"Username must be at least {MIN_CREDENTIAL_LENGTH} characters"
    if len(username) > MAX_CREDENTIAL_LENGTH:
        return f"Username must be at most {MAX_CREDENTIAL_LENGTH} characters"
    if not password:
        return "Password is a required field"
    if len(password) < MIN_CREDENTIAL_LENGTH:
        return f"Password must be at least {MIN_CREDENTIAL_LENGTH} characters"
    if len(password) > MAX_CREDENTIAL_LENGTH:
        return f"Password must be at most {MAX_CREDENTIAL_LENGTH} characters"
    if password != confirm_password:
        return "Passwords do not match"
    return None


class LoginPage:
    def __init__(self, backend: StorefrontBackend, session: SessionContext, notifier: Notifier, navigator: Navigator) -> None:
        self.backend = backend
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.state = PageState.IDLE
        self.username = ""
        self.password = ""

    async def login(self, username: Optional[str] = None, password: Optional[str] = None) -> Optional[LoginResult]:
        if username is not None:
            self.username = username
        if password is not None:
            self.password = password

        error = validate_login_input(self.username, self.password)
        if error:
            self.notifier.error(error)
            return None

        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.login(self.username, self.password))
        self.state = PageState.IDLE

        if not validate_success_response(errored, response, self.notifier):
            return None

        try:
            result = normalize_login_response(response)
        except IntegrationResponseError as exc:
            logger.error("Login payload failed validation: %s", exc)
            self.notifier.error(SOMETHING_WENT_WRONG)
            return None

        self.session.persist_login(result.token, result.username, result.balance)
        self.username = ""
        self.password = ""
        self.notifier.success("Logged in successfully")
        self.navigator.push("/products")
        return result


class RegisterPage:
    def __init__(self, backend: StorefrontBackend, notifier: Notifier, navigator: Navigator) -> None:
        self.backend = backend
        self.notifier = notifier
        self.navigator = navigator
        self.state = PageState.IDLE
        self.form: Dict[str, str] = {"username": "", "password": "", "confirm_password": ""}

    async def register(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        confirm_password: Optional[str] = None,
    ) -> bool:
        for key, value in (("username", username), ("password", password), ("confirm_password", confirm_password)):
            if value is not None:
                self.form[key] = value

        error = validate_register_input(self.form["username"], self.form["password"], self.form["confirm_password"])
        if error:
            self.notifier.error(error)
            return False

        self.state = PageState.LOADING
        errored, response = await call_backend(self.backend.register(self.form["username"], self.form["password"]))
        self.state = PageState.IDLE

        if not validate_success_response(errored, response, self.notifier):
            return False

        self.form = {"username": "", "password": "", "confirm_password": ""}
        self.notifier.success("Registered successfully")
        self.navigator.push("/login")
        return True


class Header:
    def __init__(self, session: SessionContext, navigator: Navigator) -> None:
        self.session = session
        self.navigator = navigator

    @property
    def username(self) -> Optional[str]:
        return self.session.username

    def logout(self) -> None:
        logger.info("Logging out %s", self.session.username)
        self.session.logout()
        self.navigator.push("/")
