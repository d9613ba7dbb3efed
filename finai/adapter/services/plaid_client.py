"""
Plaid bank aggregator client over its HTTP API.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from finai.app.services.bank_link import (
    GENERIC_BANK_ERROR_MESSAGE,
    BankLinkError,
    ExchangedItem,
    IBankLinkClient,
    ItemHealth,
    LinkedAccount,
)

logger = logging.getLogger(__name__)

PLAID_ENVIRONMENTS = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
}
PLAID_VERSION = "2020-09-14"
CLIENT_NAME = "finai"


def extract_bank_error(response: httpx.Response) -> BankLinkError:
    """
    Map an aggregator error response to (status, message).

    Prefers the user-facing display_message, then error_message, then a
    generic message.
    """
    message = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("display_message") or data.get("error_message")
    return BankLinkError(
        status_code=response.status_code or 500,
        message=message or GENERIC_BANK_ERROR_MESSAGE,
    )


class PlaidClient(IBankLinkClient):
    def __init__(
        self,
        client_id: str,
        secret: str,
        environment: str = "sandbox",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if environment not in PLAID_ENVIRONMENTS:
            raise ValueError(f"Unknown Plaid environment: {environment}")
        self.base_url = PLAID_ENVIRONMENTS[environment]
        self.client_id = client_id
        self.secret = secret
        self.timeout = timeout
        self._transport = transport

    async def create_link_token(self, client_user_id: str, access_token: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {
            "user": {"client_user_id": client_user_id},
            "client_name": CLIENT_NAME,
            "country_codes": ["US"],
            "language": "en",
        }
        if access_token:
            # Update mode (re-authentication) takes the item's token instead of products
            payload["access_token"] = access_token
        else:
            payload["products"] = ["transactions"]

        data = await self._post("/link/token/create", payload)
        return data["link_token"]

    async def exchange_public_token(self, public_token: str) -> ExchangedItem:
        data = await self._post("/item/public_token/exchange", {"public_token": public_token})
        return ExchangedItem(access_token=data["access_token"], item_id=data["item_id"])

    async def get_accounts(self, access_token: str) -> List[LinkedAccount]:
        data = await self._post("/accounts/get", {"access_token": access_token})
        accounts = []
        for account in data.get("accounts", []):
            balances = account.get("balances") or {}
            accounts.append(
                LinkedAccount(
                    account_id=account["account_id"],
                    name=account["name"],
                    official_name=account.get("official_name"),
                    mask=account.get("mask"),
                    type=account["type"],
                    subtype=account.get("subtype"),
                    current_balance=balances.get("current"),
                    available_balance=balances.get("available"),
                    iso_currency_code=balances.get("iso_currency_code"),
                )
            )
        return accounts

    async def get_item_error(self, access_token: str) -> Optional[ItemHealth]:
        data = await self._post("/item/get", {"access_token": access_token})
        error = (data.get("item") or {}).get("error")
        if not error:
            return None
        return ItemHealth(
            error_code=error.get("error_code"),
            display_message=error.get("display_message"),
        )

    async def remove_item(self, access_token: str) -> None:
        await self._post("/item/remove", {"access_token": access_token})

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    path,
                    json=payload,
                    headers={
                        "PLAID-CLIENT-ID": self.client_id,
                        "PLAID-SECRET": self.secret,
                        "Plaid-Version": PLAID_VERSION,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Plaid request {path} failed: {e}")
            raise BankLinkError() from e

        if response.is_error:
            error = extract_bank_error(response)
            logger.error(f"Plaid request {path} returned {response.status_code}")
            raise error

        return response.json()
