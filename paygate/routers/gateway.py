from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from paygate import schemas
from paygate.core.context import GatewayContext, get_context
from paygate.errors import ErrorKind
from paygate.services.transfer import execute_transfer

router = APIRouter(tags=["Gateway"])

_ERROR_RESPONSES = {
    kind.http_status: {"model": schemas.GatewayFailure} for kind in ErrorKind
}


# --- 1. LA PASSERELLE DE PAIEMENT ---
# URL publique : /gateway?TOKEN=...&NUMBER=5551234567&AMOUNT=10.00&COMMENT=Hello
# Les paramètres sont tous optionnels côté FastAPI : c'est le moteur qui
# renvoie "missing_required_params" (400) et pas un 422 générique.
@router.get("/gateway", response_model=schemas.GatewaySuccess, responses=_ERROR_RESPONSES)
def gateway_transfer(
    token: Optional[str] = Query(None, alias="TOKEN"),
    number: Optional[str] = Query(None, alias="NUMBER"),
    amount: Optional[str] = Query(None, alias="AMOUNT"),
    comment: Optional[str] = Query(None, alias="COMMENT"),
    reference: Optional[str] = Query(None, alias="REFERENCE"),
    context: GatewayContext = Depends(get_context),
):
    receipt = execute_transfer(context, token, number, amount, comment, reference or None)
    return schemas.GatewaySuccess(replayed=receipt.replayed, transaction=receipt)


# --- 2. OPTIONS SANS CORPS ---
# Les preflight CORS (Origin + Access-Control-Request-Method) sont servis,
# eux aussi sans corps, par GatewayCORSMiddleware.
@router.options("/gateway")
def gateway_options():
    return Response(status_code=200)
