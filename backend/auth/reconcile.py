from __future__ import annotations

import logging

from backend.auth.errors import DuplicateAccount, Result
from backend.auth.models import NO_PASSWORD, Account, ProviderIdentity
from backend.store.base import AccountStore

logger = logging.getLogger(__name__)


def resolve_account(store: AccountStore, identity: ProviderIdentity) -> Result[Account]:
    """
    Find the local account for a provider identity, creating it on first login.

    An existing account keeps its stored name (first write wins). New accounts have no
    local password.
    """
    account = store.get_by_email(identity.email)
    if account is not None:
        return Result.success(account)
    try:
        account = store.create(identity.name, identity.email, NO_PASSWORD)
        logger.info("Created account %s from Google sign-in", account.id)
        return Result.success(account)
    except DuplicateAccount:
        # Lost a race with a concurrent first login for the same email.
        account = store.get_by_email(identity.email)
        if account is None:
            raise
        return Result.success(account)
