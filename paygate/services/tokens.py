import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from paygate import models
from paygate.errors import ErrorKind, GatewayError

logger = logging.getLogger(__name__)


def resolve_gateway_token(db: Session, token: str) -> models.GatewayToken:
    """Lecture seule : le registre des jetons appartient au service de gestion des jetons."""
    row = db.execute(select(models.GatewayToken).where(models.GatewayToken.token == token)).scalars().first()

    if row is None:
        logger.warning("Gateway call rejected: unknown token %s...", token[:6])
        raise GatewayError(ErrorKind.INVALID_TOKEN)

    if not row.is_usable:
        logger.warning(
            "Gateway call rejected: token of account %s is disabled (is_active=%s, gateway_enabled=%s)",
            row.owner_account_id,
            row.is_active,
            row.gateway_enabled,
        )
        raise GatewayError(ErrorKind.GATEWAY_DISABLED)

    return row
