import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_provider = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: _with_id(user, 1))
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.verification_tokens = MagicMock()
    uow.verification_tokens.create = AsyncMock(side_effect=lambda token: _with_id(token, 1))
    uow.verification_tokens.get_by_token = AsyncMock(return_value=None)
    uow.verification_tokens.mark_used_if_valid = AsyncMock(return_value=False)

    uow.bank_items = MagicMock()
    uow.bank_items.create = AsyncMock(side_effect=lambda item: _with_id(item, 1))
    uow.bank_items.get_by_item_id = AsyncMock(return_value=None)
    uow.bank_items.list_by_user_id = AsyncMock(return_value=[])
    uow.bank_items.upsert_account = AsyncMock(side_effect=lambda account: account)
    uow.bank_items.update = AsyncMock(side_effect=lambda item: item)
    uow.bank_items.delete = AsyncMock()
    return uow


@pytest.fixture
def mock_email_sender():
    sender = MagicMock()
    sender.send_verification_email = AsyncMock()
    sender.send_password_reset_email = AsyncMock()
    return sender


def _with_id(entity, entity_id):
    entity.id = entity_id
    return entity
