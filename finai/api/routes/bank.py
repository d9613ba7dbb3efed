from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from finai.api.error import ClientError, ServerError
from finai.api.utils.session import SessionPrincipal
from finai.app.services.bank_link import BankLinkError, IBankLinkClient
from finai.app.services.rate_limiter import RateLimitBucket
from finai.app.services.secret_cipher import ISecretCipher
from finai.app.services.unit_of_work import UnitOfWork
from finai.app.use_cases.bank import (
    BankItemsResponse,
    CreateLinkTokenUseCase,
    ExchangeCommand,
    ExchangePublicTokenUseCase,
    ExchangeResponse,
    ItemStatusResponse,
    LinkTokenResponse,
    ListBankItemsUseCase,
    RefreshItemStatusUseCase,
    RemoveBankItemUseCase,
    RemoveItemResponse,
    UpdateItemStatusCommand,
    UpdateItemStatusResponse,
    UpdateItemStatusUseCase,
)
from finai.depends import (
    get_bank_client,
    get_secret_cipher,
    get_unit_of_work,
    limit_by_ip,
    require_session,
)
from finai.libs.result import Error

router = APIRouter(
    prefix="/bank",
    tags=["Bank"],
    dependencies=[Depends(limit_by_ip(RateLimitBucket.api_ip))],
)


def _raise_bank_error(e: BankLinkError):
    error = Error("BANK_LINK_ERROR", e.message)
    if 400 <= e.status_code < 500:
        raise ClientError(error, status_code=e.status_code) from e
    raise ServerError(error) from e


def _raise_item_error(error: Error):
    if error.code == "VALIDATION_ERROR":
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code == "BANK_ITEM_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    raise ServerError(error)


class LinkTokenRequest(BaseModel):
    item_id: Optional[str] = Field(None, description="Existing item to re-authenticate")


@router.post("/link-token", status_code=status.HTTP_200_OK, response_model=LinkTokenResponse)
async def create_link_token(
    request: Optional[LinkTokenRequest] = None,
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    bank_client: IBankLinkClient = Depends(get_bank_client),
    cipher: ISecretCipher = Depends(get_secret_cipher),
):
    """
    Create Link Token

    Without item_id a new institution is linked; with item_id the link flow
    opens in update mode for that item.

    Raises:
        - 401 Unauthorized: No valid session
        - 404 Not Found: item_id not owned by the user
        - 4xx/500: Aggregator error with its display message
    """
    use_case = CreateLinkTokenUseCase(uow, bank_client, cipher)
    try:
        result = await use_case.execute(principal.user.id, request.item_id if request else None)
    except BankLinkError as e:
        _raise_bank_error(e)

    if result.is_err():
        error = result.error
        if error.code == "BANK_ITEM_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post("/exchange", status_code=status.HTTP_200_OK, response_model=ExchangeResponse)
async def exchange_public_token(
    request: ExchangeCommand,
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    bank_client: IBankLinkClient = Depends(get_bank_client),
    cipher: ISecretCipher = Depends(get_secret_cipher),
):
    """
    Exchange Public Token

    Stores the linked item (access token encrypted at rest) and its accounts.

    Raises:
        - 400 Bad Request: Missing public_token
        - 401 Unauthorized: No valid session
        - 4xx/500: Aggregator error with its display message
    """
    use_case = ExchangePublicTokenUseCase(uow, bank_client, cipher)
    try:
        result = await use_case.execute(principal.user.id, request)
    except BankLinkError as e:
        _raise_bank_error(e)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get("/items", status_code=status.HTTP_200_OK, response_model=BankItemsResponse)
async def list_bank_items(
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Linked Bank Items

    Raises:
        - 401 Unauthorized: No valid session
    """
    use_case = ListBankItemsUseCase(uow)
    result = await use_case.execute(principal.user.id)
    return result.value


@router.delete("/items/{item_id}", status_code=status.HTTP_200_OK, response_model=RemoveItemResponse)
async def remove_bank_item(
    item_id: str,
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    bank_client: IBankLinkClient = Depends(get_bank_client),
    cipher: ISecretCipher = Depends(get_secret_cipher),
):
    """
    Remove Bank Item

    Revokes the item at the aggregator, then deletes it with its accounts.

    Raises:
        - 401 Unauthorized: No valid session
        - 404 Not Found: item_id not owned by the user
        - 4xx/500: Aggregator error other than an already invalid token
    """
    use_case = RemoveBankItemUseCase(uow, bank_client, cipher)
    try:
        result = await use_case.execute(principal.user.id, item_id)
    except BankLinkError as e:
        _raise_bank_error(e)

    if result.is_err():
        _raise_item_error(result.error)

    return result.value


@router.get(
    "/items/{item_id}/status", status_code=status.HTTP_200_OK, response_model=ItemStatusResponse
)
async def refresh_item_status(
    item_id: str,
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    bank_client: IBankLinkClient = Depends(get_bank_client),
    cipher: ISecretCipher = Depends(get_secret_cipher),
):
    """
    Item Status

    Re-reads the item at the aggregator and stores healthy or degraded.
    """
    use_case = RefreshItemStatusUseCase(uow, bank_client, cipher)
    try:
        result = await use_case.execute(principal.user.id, item_id)
    except BankLinkError as e:
        _raise_bank_error(e)

    if result.is_err():
        _raise_item_error(result.error)

    return result.value


@router.patch(
    "/items/{item_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=UpdateItemStatusResponse,
)
async def update_item_status(
    item_id: str,
    request: UpdateItemStatusCommand,
    principal: SessionPrincipal = Depends(require_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Item Status

    Raises:
        - 400 Bad Request: status is not "healthy" or "degraded"
        - 401 Unauthorized: No valid session
        - 404 Not Found: item_id not owned by the user
    """
    use_case = UpdateItemStatusUseCase(uow)
    result = await use_case.execute(principal.user.id, item_id, request.status)

    if result.is_err():
        _raise_item_error(result.error)

    return result.value
