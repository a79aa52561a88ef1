"""Turn a recipe's missing ingredients into cart lines.

Each ingredient is resolved to a catalog product (reusing a name match, or
creating one) and one unit is added to the user's cart. Ingredients are
processed one after another; a failure is recorded and the rest carry on.
Nothing already added is rolled back.
"""

from typing import Sequence

from sqlmodel import Session

from smart_fridge.config import settings
from smart_fridge.logging import get_logger
from smart_fridge.schemas.recipe import FulfillmentFailure, FulfillmentResult, IngredientMention
from smart_fridge.schemas.user import UserContext
from smart_fridge.services.exceptions import FulfillmentItemError
from smart_fridge.storage.repositories import add_to_cart, find_product_by_name, get_or_create_product

logger = get_logger(__name__)


def _resolve_product(
    session: Session, user: UserContext, mention: IngredientMention, match_mode: str
) -> tuple[int, bool]:
    display_name = mention.name.strip()
    if not display_name:
        raise FulfillmentItemError(mention.name, "ingredient has no name")
    existing = find_product_by_name(session, display_name, mode=match_mode)
    if existing is not None:
        logger.info("fulfillment.product_reused name=%s product_id=%s", display_name, existing.id)
        return existing.id, False
    product, created = get_or_create_product(
        session,
        display_name,
        owner_id=user.user_id,
        unit=mention.unit.strip() or settings.default_product_unit,
    )
    return product.id, created


def fulfill_missing_ingredients(
    session: Session,
    user: UserContext,
    mentions: Sequence[IngredientMention],
    match_mode: str | None = None,
) -> FulfillmentResult:
    mode = match_mode or settings.product_match_mode
    result = FulfillmentResult(attempted=len(mentions))
    if not mentions:
        logger.info("fulfillment.empty user=%s", user.user_id)
        return result

    for mention in mentions:
        try:
            product_id, created = _resolve_product(session, user, mention, mode)
            add_to_cart(session, user.user_id, product_id, 1)
        except Exception as e:  # noqa: BLE001 - per-ingredient failures are aggregated, not raised
            session.rollback()
            err = e if isinstance(e, FulfillmentItemError) else FulfillmentItemError(mention.name, str(e))
            logger.warning("fulfillment.item_failed user=%s error=%s", user.user_id, err)
            result.failures.append(FulfillmentFailure(name=mention.name, error=err.message))
            continue
        result.added += 1
        result.product_ids.append(product_id)
        if created:
            result.created_product_ids.append(product_id)

    logger.info(
        "fulfillment.end user=%s attempted=%s added=%s created=%s failed=%s outcome=%s",
        user.user_id,
        result.attempted,
        result.added,
        len(result.created_product_ids),
        len(result.failures),
        result.outcome,
    )
    return result
