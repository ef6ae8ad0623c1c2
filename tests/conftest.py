"""
Fixtures partagées : base SQLite jetable par test, contexte de passerelle,
comptes et jetons de départ, client HTTP FastAPI.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from paygate import models
from paygate.app import create_app
from paygate.core.config import Settings
from paygate.core.context import build_context

SENDER_PHONE = "5550001111"
RECEIVER_PHONE = "5551234567"
GATEWAY_TOKEN = "gw_3f9c2a7be1d04c56a8e2"


@pytest.fixture
def context(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'paygate_test.db'}", LOG_LEVEL="DEBUG")
    ctx = build_context(settings)
    ctx.create_tables()
    yield ctx
    ctx.dispose()


@pytest.fixture
def make_account(context):
    def _make(phone_number, balance="0.00"):
        with context.write_session_factory.begin() as db:
            account = models.Account(
                phone_number=phone_number,
                balance_atomic=int(Decimal(balance) * 100),
            )
            db.add(account)
            db.flush()
            return account.id

    return _make


@pytest.fixture
def make_token(context):
    def _make(owner_account_id, token=GATEWAY_TOKEN, is_active=True, gateway_enabled=True):
        with context.write_session_factory.begin() as db:
            db.add(
                models.GatewayToken(
                    token=token,
                    owner_account_id=owner_account_id,
                    is_active=is_active,
                    gateway_enabled=gateway_enabled,
                )
            )
        return token

    return _make


@pytest.fixture
def wallet(make_account, make_token):
    """Émetteur à 50.00 avec passerelle active, destinataire à 0.00."""
    sender_id = make_account(SENDER_PHONE, "50.00")
    receiver_id = make_account(RECEIVER_PHONE, "0.00")
    token = make_token(sender_id)
    return SimpleNamespace(
        sender_id=sender_id,
        receiver_id=receiver_id,
        token=token,
        sender_phone=SENDER_PHONE,
        receiver_phone=RECEIVER_PHONE,
    )


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as test_client:
        yield test_client


def balance_of(context, account_id) -> Decimal:
    with context.session_factory() as db:
        atomic = db.execute(
            select(models.Account.balance_atomic).where(models.Account.id == account_id)
        ).scalar_one()
    return Decimal(atomic) / 100


def total_balance(context) -> int:
    with context.session_factory() as db:
        return db.execute(select(func.sum(models.Account.balance_atomic))).scalar_one()


def ledger_rows(context):
    with context.session_factory() as db:
        rows = db.execute(select(models.Transaction).order_by(models.Transaction.id)).scalars().all()
        return [
            SimpleNamespace(
                transaction_uuid=row.transaction_uuid,
                from_account_id=row.from_account_id,
                to_account_id=row.to_account_id,
                to_phone_number=row.to_phone_number,
                amount_atomic=row.amount_atomic,
                comment=row.comment,
                reference=row.reference,
                status=row.status,
                created_at=row.created_at,
            )
            for row in rows
        ]
