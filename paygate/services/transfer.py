import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from paygate import models
from paygate.core.context import GatewayContext
from paygate.errors import ErrorKind, GatewayError
from paygate.models import TransactionStatus
from paygate.schemas import TransferReceipt
from paygate.services import accounts, ledger
from paygate.services.tokens import resolve_gateway_token
from paygate.utils import parse_amount, to_decimal

logger = logging.getLogger(__name__)


def execute_transfer(
    context: GatewayContext,
    token: Optional[str],
    to_phone_number: Optional[str],
    amount: Optional[str],
    comment: Optional[str] = None,
    reference: Optional[str] = None,
) -> TransferReceipt:
    """
    MOTEUR DE TRANSFERT : une tentative, une issue.

    Jeton -> comptes -> contrôle du solde -> mise à jour atomique -> journal.
    Toute tentative qui atteint le contrôle du solde laisse exactement une
    ligne dans `transactions`, quelle que soit l'issue.
    Lève GatewayError (voir ErrorKind) pour chaque échec.
    """
    # --- 0. PARAMÈTRES ---
    if not token or not to_phone_number or not amount:
        raise GatewayError(ErrorKind.MISSING_PARAMS)
    amount_atomic = parse_amount(amount)

    # --- 1 & 2. JETON + COMPTES ---
    try:
        with context.session_factory() as db:
            gateway_token = resolve_gateway_token(db, token)

            sender = accounts.get_account_by_id(db, gateway_token.owner_account_id)
            if sender is None:
                logger.warning("Token owner %s has no account", gateway_token.owner_account_id)
                raise GatewayError(ErrorKind.SENDER_NOT_FOUND)

            receiver = accounts.get_account_by_phone(db, to_phone_number)
            if receiver is None:
                logger.warning("Transfer from account %s rejected: no account for %s", sender.id, to_phone_number)
                raise GatewayError(ErrorKind.RECEIVER_NOT_FOUND)

            if reference:
                prior = ledger.find_completed(db, sender.id, reference)
                if prior is not None:
                    return _replay(prior, sender, sender.balance_atomic)

            sender_id, sender_balance = sender.id, sender.balance_atomic
            receiver_id = receiver.id
    except SQLAlchemyError:
        logger.exception("Store unreachable while resolving gateway call")
        raise GatewayError(ErrorKind.INTERNAL_ERROR)

    attempt = dict(
        from_account_id=sender_id,
        to_account_id=receiver_id,
        to_phone_number=to_phone_number,
        amount_atomic=amount_atomic,
        comment=comment,
        reference=reference,
    )

    # --- 3. CONTRÔLE DU SOLDE ---
    if sender_balance < amount_atomic:
        logger.warning(
            "Insufficient funds on account %s: balance %s < amount %s",
            sender_id, to_decimal(sender_balance), to_decimal(amount_atomic),
        )
        raise _record_failure(context, attempt, TransactionStatus.INSUFFICIENT_FUNDS)

    # --- 4 & 5. MISE À JOUR ATOMIQUE + TRACE DE SUCCÈS (même transaction) ---
    try:
        with context.write_session_factory.begin() as db:
            locked = accounts.lock_accounts(db, sender_id, receiver_id)
            sender, receiver = locked[sender_id], locked[receiver_id]

            if reference:
                prior = ledger.find_completed(db, sender_id, reference)
                if prior is not None:
                    return _replay(prior, sender, sender.balance_atomic)

            new_balance = accounts.apply_transfer(db, sender, receiver, amount_atomic)
            record = ledger.record_transaction(db, status=TransactionStatus.SUCCESS, **attempt)

            receipt = TransferReceipt(
                id=record.transaction_uuid,
                sender=sender.phone_number,
                to=to_phone_number,
                amount=to_decimal(amount_atomic),
                comment=comment,
                new_balance=to_decimal(new_balance),
            )
    except GatewayError as exc:
        # Course perdue : un autre transfert a vidé le compte entre-temps
        logger.warning("Insufficient funds on account %s after lock: %s", sender_id, exc.detail)
        raise _record_failure(context, attempt, TransactionStatus.INSUFFICIENT_FUNDS)
    except SQLAlchemyError:
        logger.exception(
            "Atomic update failed: account %s -> %s, amount %s",
            sender_id, receiver_id, to_decimal(amount_atomic),
        )
        raise _record_failure(context, attempt, TransactionStatus.FAILED_UPDATE)

    logger.info(
        "💸 Transfer %s: account %s -> %s, amount %s, new balance %s",
        receipt.id, sender_id, receiver_id, receipt.amount, receipt.new_balance,
    )
    return receipt


_FAILURE_KINDS = {
    TransactionStatus.INSUFFICIENT_FUNDS: ErrorKind.INSUFFICIENT_FUNDS,
    TransactionStatus.FAILED_UPDATE: ErrorKind.UPDATE_FAILED,
}


def _record_failure(context: GatewayContext, attempt: dict, status: TransactionStatus) -> GatewayError:
    """Inscrit l'échec dans sa propre transaction et retourne l'erreur à lever."""
    try:
        with context.write_session_factory.begin() as db:
            record = ledger.record_transaction(db, status=status, **attempt)
            transaction_id = record.transaction_uuid
    except SQLAlchemyError:
        logger.exception("Could not record %s attempt %s", status.value, attempt)
        return GatewayError(ErrorKind.INTERNAL_ERROR)

    return GatewayError(_FAILURE_KINDS[status], transaction_id=transaction_id)


def _replay(prior: models.Transaction, sender: models.Account, balance_atomic: int) -> TransferReceipt:
    logger.info("Reference %r already paid by account %s, replaying receipt %s", prior.reference, sender.id, prior.transaction_uuid)
    return TransferReceipt(
        id=prior.transaction_uuid,
        sender=sender.phone_number,
        to=prior.to_phone_number,
        amount=to_decimal(prior.amount_atomic),
        comment=prior.comment,
        new_balance=to_decimal(balance_atomic),
        replayed=True,
    )
