from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from finai.adapter.services.secret_cipher import AesGcmSecretCipher
from finai.app.services.bank_link import BankLinkError, ExchangedItem, ItemHealth, LinkedAccount
from finai.app.use_cases.bank import (
    CreateLinkTokenUseCase,
    ExchangeCommand,
    ExchangePublicTokenUseCase,
    ListBankItemsUseCase,
    RefreshItemStatusUseCase,
    RemoveBankItemUseCase,
    UpdateItemStatusUseCase,
)
from finai.domain.entities import BankItem, BankItemStatus

TEST_KEY = "0123456789abcdef" * 4


@pytest.fixture
def cipher():
    return AesGcmSecretCipher.from_hex(TEST_KEY)


@pytest.fixture
def bank_client():
    client = MagicMock()
    client.create_link_token = AsyncMock(return_value="link-sandbox-123")
    client.exchange_public_token = AsyncMock(
        return_value=ExchangedItem(access_token="access-sandbox-abc", item_id="item-1")
    )
    client.get_accounts = AsyncMock(
        return_value=[
            LinkedAccount(
                account_id="acc-1",
                name="Checking",
                type="depository",
                subtype="checking",
                current_balance=110.5,
                available_balance=100,
                iso_currency_code="USD",
            )
        ]
    )
    client.get_item_error = AsyncMock(return_value=None)
    client.remove_item = AsyncMock()
    return client


@pytest.fixture
def stored_item(mock_uow, cipher):
    item = BankItem(
        id=1,
        user_id=5,
        item_id="item-1",
        encrypted_access_token=cipher.encrypt("access-sandbox-abc"),
    )
    mock_uow.bank_items.get_by_item_id.return_value = item
    return item


@pytest.mark.asyncio
async def test_exchange_stores_encrypted_token_and_accounts(mock_uow, bank_client, cipher):
    use_case = ExchangePublicTokenUseCase(mock_uow, bank_client, cipher)
    command = ExchangeCommand(
        public_token="public-sandbox-1",
        metadata={"institution": {"institution_id": "ins_1", "name": "First Bank"}},
    )

    result = await use_case.execute(5, command)

    assert result.is_ok()
    assert result.value.success is True
    assert result.value.item_id == "item-1"

    stored = mock_uow.bank_items.create.call_args.args[0]
    assert stored.user_id == 5
    assert stored.institution_name == "First Bank"
    assert "access-sandbox-abc" not in stored.encrypted_access_token
    assert cipher.decrypt(stored.encrypted_access_token) == "access-sandbox-abc"

    bank_client.get_accounts.assert_awaited_once_with("access-sandbox-abc")
    account = mock_uow.bank_items.upsert_account.call_args.args[0]
    assert account.bank_item_id == 1
    assert account.current_balance == Decimal("110.50")
    assert account.available_balance == Decimal("100.00")
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_exchange_requires_public_token(mock_uow, bank_client, cipher):
    use_case = ExchangePublicTokenUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, ExchangeCommand(public_token="   "))

    assert result.is_err()
    assert result.error.message == "public_token is required"
    bank_client.exchange_public_token.assert_not_called()


@pytest.mark.asyncio
async def test_exchange_propagates_aggregator_error(mock_uow, bank_client, cipher):
    bank_client.exchange_public_token.side_effect = BankLinkError(400, "Invalid public token")
    use_case = ExchangePublicTokenUseCase(mock_uow, bank_client, cipher)

    with pytest.raises(BankLinkError) as exc_info:
        await use_case.execute(5, ExchangeCommand(public_token="bad"))

    assert exc_info.value.status_code == 400
    mock_uow.bank_items.create.assert_not_called()


@pytest.mark.asyncio
async def test_link_token_normal_mode(mock_uow, bank_client, cipher):
    use_case = CreateLinkTokenUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5)

    assert result.value.link_token == "link-sandbox-123"
    bank_client.create_link_token.assert_awaited_once_with("5", None)


@pytest.mark.asyncio
async def test_link_token_update_mode_decrypts_stored_token(mock_uow, bank_client, cipher):
    mock_uow.bank_items.get_by_item_id.return_value = BankItem(
        id=1,
        user_id=5,
        item_id="item-1",
        encrypted_access_token=cipher.encrypt("access-sandbox-abc"),
    )
    use_case = CreateLinkTokenUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "item-1")

    assert result.is_ok()
    mock_uow.bank_items.get_by_item_id.assert_awaited_once_with("item-1", 5)
    bank_client.create_link_token.assert_awaited_once_with("5", "access-sandbox-abc")


@pytest.mark.asyncio
async def test_link_token_update_mode_unknown_item(mock_uow, bank_client, cipher):
    use_case = CreateLinkTokenUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "someone-elses-item")

    assert result.is_err()
    assert result.error.code == "BANK_ITEM_NOT_FOUND"
    bank_client.create_link_token.assert_not_called()


@pytest.mark.asyncio
async def test_list_items_never_exposes_token(mock_uow):
    mock_uow.bank_items.list_by_user_id.return_value = [
        BankItem(
            id=1,
            user_id=5,
            item_id="item-1",
            encrypted_access_token="secret",
            institution_name="First Bank",
            status=BankItemStatus.healthy,
        )
    ]
    use_case = ListBankItemsUseCase(mock_uow)

    result = await use_case.execute(5)

    items = result.value.model_dump()["items"]
    assert len(items) == 1
    assert items[0]["item_id"] == "item-1"
    assert "encrypted_access_token" not in items[0]


# ============================================================================
# Item removal and status
# ============================================================================


@pytest.mark.asyncio
async def test_remove_item_revokes_then_deletes(mock_uow, bank_client, cipher, stored_item):
    use_case = RemoveBankItemUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "item-1")

    assert result.is_ok()
    assert result.value.success is True
    bank_client.remove_item.assert_awaited_once_with("access-sandbox-abc")
    mock_uow.bank_items.delete.assert_awaited_once_with(stored_item)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_remove_item_with_already_invalid_token_still_deletes(
    mock_uow, bank_client, cipher, stored_item
):
    bank_client.remove_item.side_effect = BankLinkError(400, "invalid access token")
    use_case = RemoveBankItemUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "item-1")

    assert result.is_ok()
    mock_uow.bank_items.delete.assert_awaited_once_with(stored_item)


@pytest.mark.asyncio
async def test_remove_item_aggregator_outage_keeps_item(mock_uow, bank_client, cipher, stored_item):
    bank_client.remove_item.side_effect = BankLinkError()
    use_case = RemoveBankItemUseCase(mock_uow, bank_client, cipher)

    with pytest.raises(BankLinkError):
        await use_case.execute(5, "item-1")

    mock_uow.bank_items.delete.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_remove_item_not_owned(mock_uow, bank_client, cipher):
    use_case = RemoveBankItemUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "someone-elses-item")

    assert result.is_err()
    assert result.error.code == "BANK_ITEM_NOT_FOUND"
    bank_client.remove_item.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_status_marks_item_error_degraded(mock_uow, bank_client, cipher, stored_item):
    bank_client.get_item_error.return_value = ItemHealth(
        error_code="ITEM_LOGIN_REQUIRED", display_message="Sign in again"
    )
    use_case = RefreshItemStatusUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "item-1")

    assert result.value.status == BankItemStatus.degraded
    assert result.value.error.error_code == "ITEM_LOGIN_REQUIRED"
    bank_client.get_item_error.assert_awaited_once_with("access-sandbox-abc")
    assert stored_item.status == BankItemStatus.degraded
    mock_uow.bank_items.update.assert_awaited_once_with(stored_item)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_refresh_status_healthy(mock_uow, bank_client, cipher, stored_item):
    stored_item.status = BankItemStatus.degraded
    use_case = RefreshItemStatusUseCase(mock_uow, bank_client, cipher)

    result = await use_case.execute(5, "item-1")

    assert result.value.status == BankItemStatus.healthy
    assert result.value.error is None
    assert stored_item.status == BankItemStatus.healthy


@pytest.mark.asyncio
async def test_update_status_rejects_unknown_value(mock_uow):
    use_case = UpdateItemStatusUseCase(mock_uow)

    result = await use_case.execute(5, "item-1", "active")

    assert result.is_err()
    assert result.error.message == 'Status must be either "healthy" or "degraded"'
    assert result.error.field == "status"
    mock_uow.bank_items.get_by_item_id.assert_not_called()


@pytest.mark.asyncio
async def test_update_status_sets_owned_item(mock_uow, stored_item):
    use_case = UpdateItemStatusUseCase(mock_uow)

    result = await use_case.execute(5, "item-1", "degraded")

    assert result.is_ok()
    assert result.value.status == BankItemStatus.degraded
    assert stored_item.status == BankItemStatus.degraded
    mock_uow.bank_items.get_by_item_id.assert_awaited_once_with("item-1", 5)
    mock_uow.commit.assert_awaited_once()
