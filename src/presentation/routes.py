"""
FastAPI routes for registration, activation and authentication.

Each route is thin: it handles HTTP concerns and delegates to the
application layer, translating domain errors into stable responses.
"""

import logging
from datetime import UTC, datetime
from typing import Annotated

from config.settings import settings
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.application.activation_workflow import ActivationWorkflow
from src.application.authenticate_account import CredentialAuthenticator
from src.application.register_account import RegisterAccountUseCase
from src.domain.exceptions import (
    AccountAlreadyActivatedError,
    AccountAlreadyExistsError,
    AccountNotFoundError,
    ActivationCodeExpiredError,
    ActivationCodeNotFoundError,
    ActivationCodeUnavailableError,
    DomainError,
    EmailDeliveryError,
    InvalidCredentialsError,
    InvalidEmailError,
    RoleNotConfiguredError,
    WeakPasswordError,
)
from src.domain.security_context import SecurityContext
from src.presentation.dependencies import (
    get_activation_workflow,
    get_credential_authenticator,
    get_register_account_use_case,
    require_security_context,
)
from src.presentation.schemas import (
    AccountProfileResponse,
    AuthenticationRequest,
    AuthenticationResponse,
    ErrorResponse,
    HealthCheckResponse,
    RegistrationRequest,
    ResendActivationRequest,
)

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["authentication"])
users_router = APIRouter(prefix="/users", tags=["users"])
health_router = APIRouter(tags=["health"])


def _email_delivery_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "error": "EmailDeliveryFailed",
            "message": "The activation email could not be sent",
            "hint": "Your activation code was saved; request a new email later",
        },
    )


def _activation_code_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={
            "error": "ActivationCodeUnavailable",
            "message": "No activation code could be issued right now",
            "hint": "Request a new activation code later",
        },
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "InternalError", "message": "An unexpected error occurred"},
    )


@auth_router.post(
    "/register",
    status_code=status.HTTP_202_ACCEPTED,
    response_class=Response,
    responses={
        202: {"description": "Account registered, activation code sent"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Account already exists"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        503: {"model": ErrorResponse, "description": "Activation code or email unavailable"},
    },
    summary="Register a new account",
    description="""
    Register a new account. The account stays disabled until the activation
    code sent by email is submitted to /auth/activate-account.
    """,
)
async def register(
    request: RegistrationRequest,
    use_case: Annotated[RegisterAccountUseCase, Depends(get_register_account_use_case)],
) -> Response:
    try:
        await use_case.execute(
            first_name=request.first_name,
            last_name=request.last_name,
            email=str(request.email),
            password=request.password,
        )
        return Response(status_code=status.HTTP_202_ACCEPTED)

    except AccountAlreadyExistsError as e:
        logger.warning(f"Registration failed: {e!s}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "AccountAlreadyExists", "message": str(e)},
        ) from e

    except InvalidEmailError as e:
        logger.warning(f"Registration failed: {e!s}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "InvalidEmail", "message": str(e)},
        ) from e

    except WeakPasswordError as e:
        logger.warning(f"Registration failed: {e!s}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "WeakPassword", "message": str(e)},
        ) from e

    except RoleNotConfiguredError as e:
        logger.error(f"Registration failed, role catalog not seeded: {e!s}")
        raise _internal_error() from e

    except ActivationCodeUnavailableError as e:
        logger.error(f"Registration stored but no activation code issued: {e!s}")
        raise _activation_code_unavailable() from e

    except EmailDeliveryError as e:
        logger.error(f"Registration stored but activation email not dispatched: {e!s}")
        raise _email_delivery_failed() from e

    except DomainError as e:
        logger.error(f"Domain error during registration: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "DomainError", "message": str(e)},
        ) from e

    except Exception as e:
        logger.error(f"Unexpected error during registration: {e}", exc_info=True)
        raise _internal_error() from e


@auth_router.post(
    "/authenticate",
    response_model=AuthenticationResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Log in with email and password",
)
async def authenticate(
    request: AuthenticationRequest,
    authenticator: Annotated[CredentialAuthenticator, Depends(get_credential_authenticator)],
) -> AuthenticationResponse:
    try:
        token = await authenticator.authenticate(str(request.email), request.password)
        return AuthenticationResponse(token=token)

    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "InvalidCredentials", "message": str(e)},
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    except Exception as e:
        logger.error(f"Unexpected error during authentication: {e}", exc_info=True)
        raise _internal_error() from e


@auth_router.get(
    "/activate-account",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={
        200: {"description": "Account activated"},
        400: {"model": ErrorResponse, "description": "Malformed activation code"},
        404: {"model": ErrorResponse, "description": "Activation code not found"},
        410: {"model": ErrorResponse, "description": "Code expired, a new one was sent"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        503: {"model": ErrorResponse, "description": "Replacement code or email unavailable"},
    },
    summary="Activate an account",
)
async def activate_account(
    workflow: Annotated[ActivationWorkflow, Depends(get_activation_workflow)],
    token: Annotated[
        str,
        Query(
            min_length=settings.activation_code_length,
            max_length=settings.activation_code_length,
            pattern=r"^\d+$",
            description="Activation code received by email",
        ),
    ],
) -> Response:
    try:
        await workflow.validate(token)
        return Response(status_code=status.HTTP_200_OK)

    except ActivationCodeNotFoundError as e:
        logger.warning("Activation failed: unknown code")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "ActivationCodeNotFound", "message": str(e)},
        ) from e

    except ActivationCodeExpiredError as e:
        logger.warning(f"Activation failed: code expired for {e.email}")
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail={
                "error": "ActivationCodeExpired",
                "message": str(e),
                "hint": "Check your email for the new activation code",
            },
        ) from e

    except AccountNotFoundError as e:
        logger.error(f"Activation code refers to a missing account: {e!s}")
        raise _internal_error() from e

    except ActivationCodeUnavailableError as e:
        logger.error(f"No replacement activation code issued: {e!s}")
        raise _activation_code_unavailable() from e

    except EmailDeliveryError as e:
        logger.error(f"Replacement activation email not dispatched: {e!s}")
        raise _email_delivery_failed() from e

    except Exception as e:
        logger.error(f"Unexpected error during activation: {e}", exc_info=True)
        raise _internal_error() from e


@auth_router.post(
    "/resend-activation",
    status_code=status.HTTP_202_ACCEPTED,
    response_class=Response,
    responses={
        202: {"description": "A new activation code was sent"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        409: {"model": ErrorResponse, "description": "Account already activated"},
        503: {"model": ErrorResponse, "description": "Activation code or email unavailable"},
    },
    summary="Send a new activation code",
)
async def resend_activation(
    request: ResendActivationRequest,
    workflow: Annotated[ActivationWorkflow, Depends(get_activation_workflow)],
) -> Response:
    try:
        await workflow.resend(str(request.email))
        return Response(status_code=status.HTTP_202_ACCEPTED)

    except AccountNotFoundError as e:
        logger.warning(f"Resend failed: {e!s}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "AccountNotFound", "message": "Account not found"},
        ) from e

    except AccountAlreadyActivatedError as e:
        logger.warning(f"Resend failed: {e!s}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "AccountAlreadyActivated", "message": str(e)},
        ) from e

    except ActivationCodeUnavailableError as e:
        logger.error(f"Resend could not issue an activation code: {e!s}")
        raise _activation_code_unavailable() from e

    except EmailDeliveryError as e:
        logger.error(f"Resend stored a code but email not dispatched: {e!s}")
        raise _email_delivery_failed() from e

    except Exception as e:
        logger.error(f"Unexpected error during resend: {e}", exc_info=True)
        raise _internal_error() from e


@users_router.get(
    "/me",
    response_model=AccountProfileResponse,
    responses={401: {"model": ErrorResponse, "description": "Authentication required"}},
    summary="Current account",
)
async def current_account(
    context: Annotated[SecurityContext, Depends(require_security_context)],
) -> AccountProfileResponse:
    account = context.principal
    return AccountProfileResponse(
        id=account.id,
        email=account.email,
        full_name=account.full_name,
        roles=sorted(context.authorities),
        created_at=account.created_at,
    )


@health_router.get(
    "/health",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check() -> HealthCheckResponse:
    return HealthCheckResponse(
        status="healthy",
        service=settings.app_name,
        version=settings.app_version,
        timestamp=datetime.now(UTC),
    )
