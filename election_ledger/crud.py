import logging
from typing import Optional, Tuple

from election_ledger.security import hash_password, verify_password

logger = logging.getLogger(__name__)


# Register a new account with a hashed password
def register_account(store, identity: str, password: str) -> Tuple[Optional[str], Optional[str]]:
    identity = identity.strip()
    if not identity:
        return None, "Identity must not be empty."
    if not store.save_account(identity, hash_password(password)):
        return None, f"Account {identity} already exists."
    logger.info(f"Account {identity} registered")
    return identity, None


# Login
def authenticate(store, identity: str, password: str) -> Tuple[Optional[str], Optional[str]]:
    password_hash = store.load_accounts().get(identity)
    if password_hash is None or not verify_password(password, password_hash):
        logger.warning(f"Failed login for {identity}")
        return None, "Invalid identity or password"
    return identity, None
