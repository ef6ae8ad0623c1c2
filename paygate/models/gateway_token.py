from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from paygate.core.database import Base


class GatewayToken(Base):
    """Jeton public de la passerelle. Écrit uniquement par le service de gestion des jetons."""

    __tablename__ = "gateway_tokens"

    id = Column(Integer, primary_key=True, index=True)

    # Le jeton lui-même (credential "bearer" passé en clair dans l'URL)
    token = Column(String, unique=True, index=True, nullable=False)
    owner_account_id = Column(Integer, ForeignKey("accounts.id"), index=True, nullable=False)

    # False = révoqué, définitif
    is_active = Column(Boolean, default=True, nullable=False)
    # Interrupteur ON/OFF réversible
    gateway_enabled = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_usable(self) -> bool:
        return bool(self.is_active and self.gateway_enabled)
