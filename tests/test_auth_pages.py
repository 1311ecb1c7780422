import pytest

from qkart.storefront.auth import Header, LoginPage, RegisterPage, validate_register_input
from qkart.storefront.validation import SOMETHING_WENT_WRONG


@pytest.mark.parametrize(
    "username,password,confirm,expected",
    [
        ("", "secret1", "secret1", "Username is a required field"),
        ("abc", "secret1", "secret1", "Username must be at least 6 characters"),
        ("u" * 33, "secret1", "secret1", "Username must be at most 32 characters"),
        ("crio.user", "", "", "Password is a required field"),
        ("crio.user", "abc", "abc", "Password must be at least 6 characters"),
        ("crio.user", "p" * 33, "p" * 33, "Password must be at most 32 characters"),
        ("crio.user", "secret1", "secret2", "Passwords do not match"),
        ("crio.user", "secret1", "secret1", None),
    ],
)
def test_register_input_rules(username, password, confirm, expected):
    assert validate_register_input(username, password, confirm) == expected


@pytest.mark.asyncio
async def test_register_then_login_persists_session(backend, session, notifier, navigator):
    register = RegisterPage(backend, notifier, navigator)
    assert await register.register("crio.user", "secret1", "secret1") is True
    assert navigator.current == "/login"
    assert register.form["username"] == ""

    login = LoginPage(backend, session, notifier, navigator)
    result = await login.login("crio.user", "secret1")

    assert result is not None
    assert session.is_authenticated() is True
    assert session.username == "crio.user"
    assert session.balance == 5000
    assert login.username == "" and login.password == ""
    assert notifier.successes == ["Registered successfully", "Logged in successfully"]
    assert navigator.current == "/products"


@pytest.mark.asyncio
async def test_register_duplicate_username_shows_backend_message(backend, notifier, navigator):
    page = RegisterPage(backend, notifier, navigator)
    await page.register("crio.user", "secret1", "secret1")

    assert await page.register("crio.user", "secret1", "secret1") is False
    assert notifier.errors == ["Username is already taken"]


@pytest.mark.asyncio
async def test_login_requires_input_before_calling_backend(backend, session, notifier, navigator):
    page = LoginPage(backend, session, notifier, navigator)

    assert await page.login("", "") is None
    assert notifier.errors == ["Username is a required field"]
    assert backend.requests == []


@pytest.mark.asyncio
async def test_login_wrong_password(backend, logged_in_session, notifier, navigator):
    logged_in_session.logout()
    page = LoginPage(backend, logged_in_session, notifier, navigator)

    assert await page.login("crio.user", "wrong-password") is None
    assert notifier.errors == ["Password is incorrect"]
    assert logged_in_session.is_authenticated() is False


@pytest.mark.asyncio
async def test_login_with_malformed_success_payload(backend, session, notifier, navigator):
    async def half_login(username, password):
        return {"success": True, "username": username}

    backend.login = half_login
    page = LoginPage(backend, session, notifier, navigator)

    assert await page.login("crio.user", "secret1") is None
    assert notifier.errors == [SOMETHING_WENT_WRONG]
    assert session.is_authenticated() is False


def test_header_logout(logged_in_session, navigator):
    navigator.push("/products")
    header = Header(logged_in_session, navigator)
    assert header.username == "crio.user"

    header.logout()

    assert header.username is None
    assert logged_in_session.is_authenticated() is False
    assert navigator.current == "/"
