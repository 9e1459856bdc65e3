from fastapi import APIRouter

from ..mercadopago import is_mercadopago_configured

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
def health():
    return {"status": "healthy", "paymentConfigLoaded": is_mercadopago_configured()}
