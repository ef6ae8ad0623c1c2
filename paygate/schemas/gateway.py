from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- 1. LE REÇU (ce que l'appelant garde comme preuve) ---
class TransferReceipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str                               # transaction_uuid du journal
    sender: str = Field(alias="from")     # numéro de l'émetteur
    to: str                               # numéro du destinataire
    # Montants sérialisés en chaînes JSON à 2 décimales ("10.01"), pas en float
    amount: Decimal = Field(description="Montant arrondi, chaîne décimale ex. \"10.01\"")
    comment: Optional[str] = None
    new_balance: Decimal = Field(description="Solde restant de l'émetteur, chaîne décimale ex. \"40.00\"")

    # True quand la REFERENCE a déjà été payée : rien n'a bougé cette fois
    replayed: bool = Field(default=False, exclude=True)


# --- 2. LES RÉPONSES API ---
class GatewaySuccess(BaseModel):
    success: bool = True
    message: str = "payment_successful"
    replayed: bool = False
    transaction: TransferReceipt


class GatewayFailure(BaseModel):
    success: bool = False
    error: str
    transaction_id: Optional[str] = None
