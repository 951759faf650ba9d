"""HTML pages: the login link and the guarded home page."""

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse

from oidcgate.api.deps import CurrentUser

router = APIRouter()

LOGIN_PATH = "/login"
STYLESHEET = "/static/css/style.css"


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{escape(title)}</title>"
        f'<link rel="stylesheet" href="{STYLESHEET}">'
        f"</head><body>{body}</body></html>"
    )


@router.get(LOGIN_PATH, response_class=HTMLResponse)
async def login_page() -> str:
    """GET /login -- link that starts the provider login."""
    return _page(
        "Login | oidcgate",
        '<a class="login" href="/auth0">Login with Auth0</a>',
    )


@router.get("/", response_model=None)
async def home(user: CurrentUser) -> HTMLResponse | RedirectResponse:
    """GET / -- guarded page; anonymous visitors are sent to /login."""
    if user is None:
        return RedirectResponse(url=LOGIN_PATH, status_code=302)
    body = (
        "<h1>Guarded Route</h1>"
        "<div><p>You logged in successfully.</p></div>"
        f"<div><p>Email: {escape(user.email)}</p></div>"
    )
    return HTMLResponse(_page("Welcome | oidcgate", body))
