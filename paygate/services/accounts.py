from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from paygate import models
from paygate.errors import ErrorKind, GatewayError


def get_account_by_id(db: Session, account_id: int) -> Optional[models.Account]:
    return db.get(models.Account, account_id)


def get_account_by_phone(db: Session, phone_number: str) -> Optional[models.Account]:
    # phone_number est unique : au plus une ligne
    return db.execute(
        select(models.Account).where(models.Account.phone_number == phone_number)
    ).scalars().first()


def lock_accounts(db: Session, *account_ids: int) -> dict:
    """
    SELECT ... FOR UPDATE sur les comptes, toujours dans l'ordre des ids
    pour que deux transferts croisés (A->B et B->A) ne se bloquent pas.
    Sur SQLite la clause est ignorée, le BEGIN IMMEDIATE fait le travail.
    """
    locked = {}
    for account_id in sorted(set(account_ids)):
        row = db.execute(
            select(models.Account).where(models.Account.id == account_id).with_for_update()
        ).scalars().first()
        if row is None:
            raise StaleDataError(f"account {account_id} disappeared during transfer")
        locked[account_id] = row
    return locked


def _debit(db: Session, account_id: int, amount_atomic: int) -> None:
    # Compare-and-set : le débit ne passe que si le solde couvre encore le montant
    result = db.execute(
        update(models.Account)
        .where(models.Account.id == account_id, models.Account.balance_atomic >= amount_atomic)
        .values(balance_atomic=models.Account.balance_atomic - amount_atomic)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise GatewayError(ErrorKind.INSUFFICIENT_FUNDS, "balance changed before debit")


def _credit(db: Session, account_id: int, amount_atomic: int) -> None:
    result = db.execute(
        update(models.Account)
        .where(models.Account.id == account_id)
        .values(balance_atomic=models.Account.balance_atomic + amount_atomic)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise StaleDataError(f"credit of account {account_id} matched {result.rowcount} rows")


def current_balance(db: Session, account_id: int) -> int:
    return db.execute(
        select(models.Account.balance_atomic).where(models.Account.id == account_id)
    ).scalar_one()


def apply_transfer(db: Session, sender: models.Account, receiver: models.Account, amount_atomic: int) -> int:
    """
    TRANSFERT COMPTABLE ATOMIQUE : débit + crédit dans la transaction en cours.
    `sender` et `receiver` viennent de lock_accounts() dans la même transaction :
    soit les deux soldes changent au commit, soit aucun (rollback).

    Lève GatewayError(INSUFFICIENT_FUNDS) si la course est perdue
    (solde relu sous verrou trop bas), SQLAlchemyError pour tout le reste.
    Retourne le nouveau solde de l'émetteur en centimes.
    """
    # On revérifie sous verrou : le solde lu avant a pu changer
    if sender.balance_atomic < amount_atomic:
        raise GatewayError(ErrorKind.INSUFFICIENT_FUNDS, "balance changed before lock")

    _debit(db, sender.id, amount_atomic)
    _credit(db, receiver.id, amount_atomic)

    return current_balance(db, sender.id)
