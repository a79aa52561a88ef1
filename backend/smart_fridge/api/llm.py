"""Text-generation proxy: the same {prompt} -> {text} | {error} contract the browser client used."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from smart_fridge.api.deps import get_text_gateway
from smart_fridge.logging import get_logger
from smart_fridge.schemas.llm import GatewayRequest, GatewayResponse
from smart_fridge.services.exceptions import EmptyInputError, GatewayError
from smart_fridge.services.llm.gateway import TextGateway

router = APIRouter(prefix="/llm", tags=["llm"])
logger = get_logger(__name__)


@router.post("/generate", response_model=GatewayResponse)
def generate_text(request: GatewayRequest, gateway: TextGateway = Depends(get_text_gateway)):
    try:
        text = gateway.generate(request)
    except EmptyInputError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except GatewayError as e:
        logger.warning("llm.proxy.failed recipe_mode=%s error=%s", request.recipe_mode, e)
        return JSONResponse(status_code=502, content={"error": str(e)})
    return GatewayResponse(
        text=text,
        was_recipe_mode=request.recipe_mode,
        was_multiple_recipes=request.generate_multiple_recipes,
    )
