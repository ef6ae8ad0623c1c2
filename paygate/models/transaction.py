import enum

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from paygate.core.database import Base


class TransactionStatus(str, enum.Enum):
    SUCCESS = "success"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    FAILED_UPDATE = "failed_update"


class Transaction(Base):
    __tablename__ = "transactions"

    # 1. IDENTIFIANTS TECHNIQUES
    id = Column(Integer, primary_key=True, index=True)  # ID interne de la base (1, 2, 3...)

    # 2. LE REÇU
    # UUID généré par le serveur, renvoyé à l'appelant comme référence de reçu.
    transaction_uuid = Column(String(36), unique=True, index=True, nullable=False)

    # 3. LES ACTEURS
    from_account_id = Column(Integer, ForeignKey("accounts.id"), index=True, nullable=False)
    # Peut rester vide si le destinataire n'a pas été résolu
    to_account_id = Column(Integer, ForeignKey("accounts.id"), index=True, nullable=True)
    # Toujours enregistré, même en cas d'échec
    to_phone_number = Column(String, nullable=False)

    # 4. L'ARGENT
    # Toujours en centimes (BigInteger). Montant déjà arrondi à 2 décimales.
    amount_atomic = Column(BigInteger, nullable=False)
    comment = Column(String, nullable=True)

    # 5. ANTI-DOUBLON
    # Clé d'idempotence optionnelle fournie par l'appelant (paramètre REFERENCE)
    reference = Column(String, index=True, nullable=True)

    # 6. ÉTAT : "success", "insufficient_funds", "failed_update"
    status = Column(String, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
