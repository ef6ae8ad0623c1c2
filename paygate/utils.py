from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from paygate.errors import ErrorKind, GatewayError

CENT = Decimal("0.01")

# Plafond d'une colonne BigInteger (centimes)
MAX_ATOMIC = 2**63 - 1


def parse_amount(raw: Union[str, Decimal, int]) -> int:
    """
    Convertit le paramètre AMOUNT en centimes.
    L'arrondi (ROUND_HALF_UP, 2 décimales) est fait UNE SEULE FOIS ici :
    c'est ce montant qui est comparé au solde, débité et inscrit au journal.
    """
    try:
        value = Decimal(raw.strip() if isinstance(raw, str) else raw)
    except (InvalidOperation, TypeError, ValueError):
        raise GatewayError(ErrorKind.INVALID_AMOUNT, f"not a number: {raw!r}")

    if not value.is_finite():
        raise GatewayError(ErrorKind.INVALID_AMOUNT, f"not a finite number: {raw!r}")

    # Au-delà de 10^19 ça ne tient pas en BigInteger : on refuse avant tout calcul
    if value.adjusted() >= 19:
        raise GatewayError(ErrorKind.INVALID_AMOUNT, f"out of range: {raw!r}")

    atomic = int(value.quantize(CENT, rounding=ROUND_HALF_UP) * 100)
    if atomic <= 0 or atomic > MAX_ATOMIC:
        raise GatewayError(ErrorKind.INVALID_AMOUNT, f"out of range: {raw!r}")
    return atomic


def to_decimal(atomic: int) -> Decimal:
    # 4000 -> Decimal("40.00")
    return (Decimal(atomic) / 100).quantize(CENT)
