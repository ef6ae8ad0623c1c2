import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """Liste fermée des issues d'échec de la passerelle : (code machine, statut HTTP)."""

    # --- Paramètres (avant toute lecture en base) ---
    MISSING_PARAMS = ("missing_required_params", 400)
    INVALID_AMOUNT = ("invalid_amount", 400)

    # --- Jeton ---
    INVALID_TOKEN = ("invalid_token", 401)
    GATEWAY_DISABLED = ("gateway_disabled", 403)

    # --- Comptes ---
    SENDER_NOT_FOUND = ("sender_not_found", 404)
    RECEIVER_NOT_FOUND = ("receiver_not_found", 404)

    # --- Après le contrôle du solde (toujours une trace en base) ---
    INSUFFICIENT_FUNDS = ("insufficient_funds", 402)
    UPDATE_FAILED = ("transaction_failed", 500)

    # Infrastructure (base injoignable, bug...)
    INTERNAL_ERROR = ("internal_error", 500)

    def __init__(self, code: str, http_status: int):
        self.code = code
        self.http_status = http_status


class GatewayError(Exception):
    def __init__(self, kind: ErrorKind, detail: Optional[str] = None, transaction_id: Optional[str] = None):
        super().__init__(detail or kind.code)
        self.kind = kind
        self.detail = detail
        self.transaction_id = transaction_id

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.kind.code}
        if self.transaction_id:
            body["transaction_id"] = self.transaction_id
        return body
