from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from pactweb.api.errors import page_errors
from pactweb.core.deps import get_backend
from pactweb.core.identity import LOGIN_PATH, Identity, Viewer, forget_identity, get_viewer, remember_user
from pactweb.schemas.common import RedirectOut
from pactweb.schemas.user import LoginPageOut, LoginResponse, SignupFieldOut, UserCreate
from pactweb.services.backend_client import PactBackendClient

router = APIRouter(tags=["user"])

SIGNUP_FIELDS = (
    SignupFieldOut(
        name="name",
        label="Full Name",
        type="text",
        placeholder="John Doe",
        autocomplete="name",
        min_length=2,
    ),
    SignupFieldOut(
        name="email",
        label="Email Address",
        type="email",
        placeholder="john@example.com",
        autocomplete="email",
        min_length=5,
    ),
    SignupFieldOut(
        name="phone",
        label="Phone Number",
        type="tel",
        placeholder="+1234567890",
        autocomplete="tel",
        min_length=10,
    ),
)


@router.get("/", include_in_schema=False)
async def home(viewer: Viewer = Depends(get_viewer)) -> RedirectResponse:
    signed_in = isinstance(viewer, Identity) and viewer.user is not None
    return RedirectResponse("/pacts" if signed_in else LOGIN_PATH)


@router.get(LOGIN_PATH, response_model=LoginPageOut)
async def login_page() -> LoginPageOut:
    return LoginPageOut(fields=list(SIGNUP_FIELDS))


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: UserCreate,
    response: Response,
    backend: PactBackendClient = Depends(get_backend),
) -> LoginResponse:
    # Request Example:
    # POST /login
    # {"name":"John Doe","email":"john@example.com","phone":"+1234567890"}
    with page_errors("Failed to create account"):
        user = await backend.create_user(payload)
    remember_user(response, user)
    return LoginResponse(user=user)


@router.post("/logout", response_model=RedirectOut)
async def logout(response: Response) -> RedirectOut:
    forget_identity(response)
    return RedirectOut(redirect_to=LOGIN_PATH)
