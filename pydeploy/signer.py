"""Local transaction signing with eth-account."""

from eth_account import Account

from .models import Session, SignedTransaction, TransactionParams


def sign_transaction(params: TransactionParams, session: Session) -> SignedTransaction:
    """
    Sign ``params`` with the session's private key.

    The node never sees the key; it only receives the raw signed bytes.

    Raises:
        ValueError: If the transaction fails validation or its nonce is not
            the session's current nonce
    """
    session.validate()
    if params.nonce != session.nonce:
        raise ValueError(f"transaction nonce {params.nonce} != session nonce {session.nonce}")
    signed = Account.sign_transaction(params.as_dict(), session.private_key)
    return SignedTransaction(
        raw_transaction=bytes(signed.raw_transaction),
        tx_hash=bytes(signed.hash),
        nonce=params.nonce,
        gas_price=params.gas_price,
    )
