from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from paygate.core.database import Base


class Account(Base):
    __tablename__ = "accounts"
    # Dernier garde-fou : la base refuse physiquement un solde négatif
    __table_args__ = (CheckConstraint("balance_atomic >= 0", name="ck_accounts_balance_non_negative"),)

    # --- IDENTITÉ ---
    id = Column(Integer, primary_key=True, index=True)

    # Numéro unique : c'est la clé de recherche du destinataire
    phone_number = Column(String, unique=True, index=True, nullable=False)

    # --- FINANCE (ATOMICITÉ) ---
    # INT OBLIGATOIRE (BigInteger) en centimes. 50.00 est stocké comme 5000.
    # JAMAIS DE FLOAT.
    balance_atomic = Column(BigInteger, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
