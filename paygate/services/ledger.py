import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from paygate import models
from paygate.models import TransactionStatus


def record_transaction(
    db: Session,
    *,
    from_account_id: int,
    to_account_id: Optional[int],
    to_phone_number: str,
    amount_atomic: int,
    comment: Optional[str],
    status: TransactionStatus,
    reference: Optional[str] = None,
) -> models.Transaction:
    """Ajout seul : le journal n'est jamais modifié ni purgé. Le commit reste à l'appelant."""
    new_tx = models.Transaction(
        transaction_uuid=str(uuid.uuid4()),
        from_account_id=from_account_id,
        to_account_id=to_account_id,
        to_phone_number=to_phone_number,
        amount_atomic=amount_atomic,
        comment=comment,
        reference=reference,
        status=status.value,
    )
    db.add(new_tx)
    db.flush()
    return new_tx


def find_completed(db: Session, from_account_id: int, reference: str) -> Optional[models.Transaction]:
    # Anti-doublon : un transfert réussi avec la même référence pour le même émetteur
    return db.execute(
        select(models.Transaction)
        .where(
            models.Transaction.from_account_id == from_account_id,
            models.Transaction.reference == reference,
            models.Transaction.status == TransactionStatus.SUCCESS.value,
        )
        .order_by(models.Transaction.id)
    ).scalars().first()

