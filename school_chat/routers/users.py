from fastapi import APIRouter, Depends, status

from school_chat.core.security import Credentials, get_credentials, parse_object_id, unwrap
from school_chat.models.user import User
from school_chat.schemas.user import (
    FormInfo,
    IdResponse,
    PasswordChange,
    SuccessResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from school_chat.services import UserService, get_user_service

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def user_to_response(user: User) -> UserResponse:
    """Convert a User document to its public UserResponse."""
    return UserResponse(
        id=str(user.id),
        username=user.username,
        real_name=user.real_name,
        email=user.email,
        teacher=user.teacher,
        form=FormInfo(year=user.form.year, class_letter=user.form.class_letter),
        classes=[str(c) for c in user.classes],
        rooms=[str(r) for r in user.rooms],
    )


@router.post(
    "",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(
    user_data: UserCreate,
    users: UserService = Depends(get_user_service),
) -> IdResponse:
    """
    Register a new user with the following information:

    - **username**: Unique user name
    - **email**: Valid email address (must be unique)
    - **password**: Password
    - **year** / **class_letter**: The user's form
    - **teacher**: Whether the account belongs to a teacher
    """
    result = users.create_user(
        username=user_data.username,
        real_name=user_data.real_name,
        email=user_data.email,
        password=user_data.password,
        year=user_data.year,
        class_letter=user_data.class_letter,
        teacher=user_data.teacher,
    )
    user_id = unwrap(result, CONFLICT="A user with this username or email already exists")
    return IdResponse(id=str(user_id))


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Login user",
    description="Authenticate with a username or an email and return a login token.",
)
def login(
    credentials: UserLogin,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    result = users.login(
        password=credentials.password,
        username=credentials.username,
        email=credentials.email,
    )
    token = unwrap(
        result,
        UNAUTHORIZED="Incorrect username, email or password",
        NOT_ACCEPTABLE="Either username or email is required",
    )
    return TokenResponse(token=str(token.id), user_id=str(token.user))


@router.post("/logout", response_model=SuccessResponse, summary="Logout user")
def logout(
    credentials: Credentials = Depends(get_credentials),
    users: UserService = Depends(get_user_service),
) -> SuccessResponse:
    unwrap(users.logout(credentials.token, credentials.user_id))
    return SuccessResponse()


@router.delete("/me", response_model=SuccessResponse, summary="Delete own account")
def delete_me(
    credentials: Credentials = Depends(get_credentials),
    users: UserService = Depends(get_user_service),
) -> SuccessResponse:
    unwrap(users.delete_user(credentials.token, credentials.user_id), NOT_FOUND="User not found")
    return SuccessResponse()


@router.put("/me/password", response_model=SuccessResponse, summary="Change own password")
def change_password(
    data: PasswordChange,
    credentials: Credentials = Depends(get_credentials),
    users: UserService = Depends(get_user_service),
) -> SuccessResponse:
    result = users.change_password(
        credentials.token,
        credentials.user_id,
        data.old_password,
        data.new_password,
    )
    unwrap(result, NOT_FOUND="User not found")
    return SuccessResponse()


@router.get("/{target_id}", response_model=UserResponse, summary="Get user information")
def get_user(
    target_id: str,
    credentials: Credentials = Depends(get_credentials),
    users: UserService = Depends(get_user_service),
) -> UserResponse:
    result = users.get_user_info(
        credentials.token,
        credentials.user_id,
        parse_object_id(target_id, "user id"),
    )
    return user_to_response(unwrap(result, NOT_FOUND="User not found"))
