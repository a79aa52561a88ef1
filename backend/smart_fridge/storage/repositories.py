from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from smart_fridge.logging import get_logger
from smart_fridge.services.exceptions import ConflictError, EmptyCartError, NotFoundError
from smart_fridge.storage.models import (
    CartItem,
    Ingredient,
    LLMCallLog,
    Notification,
    Order,
    OrderItem,
    Product,
    SavedRecipe,
    SavedRecipeIngredient,
    Store,
)

logger = get_logger(__name__)

MATCH_MODES = ("substring", "exact")


def normalize_name(name: str) -> str:
    return name.strip().lower()


# ---- Pantry ----------------------------------------------------------------


def get_ingredients(session: Session, user_id: str) -> list[Ingredient]:
    return list(
        session.exec(select(Ingredient).where(Ingredient.user_id == user_id).order_by(Ingredient.id))
    )


def create_ingredient(session: Session, ingredient: Ingredient) -> Ingredient:
    if ingredient.quantity < 0:
        raise ValueError(f"ingredient quantity must be >= 0, got {ingredient.quantity}")
    session.add(ingredient)
    session.commit()
    session.refresh(ingredient)
    logger.info(
        "ingredient.created id=%s user=%s name=%s qty=%s unit=%s",
        ingredient.id,
        ingredient.user_id,
        ingredient.name,
        ingredient.quantity,
        ingredient.unit,
    )
    return ingredient


def delete_ingredient(session: Session, user_id: str, ingredient_id: int) -> None:
    ingredient = session.get(Ingredient, ingredient_id)
    if ingredient is None or ingredient.user_id != user_id:
        raise NotFoundError(f"ingredient {ingredient_id} not found")
    session.delete(ingredient)
    session.commit()
    logger.info("ingredient.deleted id=%s user=%s", ingredient_id, user_id)


def get_expiring_ingredients(
    session: Session, user_id: str, today: date, days: int, limit: int
) -> list[Ingredient]:
    """Ingredients expiring between today and today+days inclusive, soonest first."""
    horizon = today + timedelta(days=days)
    stmt = (
        select(Ingredient)
        .where(
            Ingredient.user_id == user_id,
            col(Ingredient.expiry_date).is_not(None),
            col(Ingredient.expiry_date) >= today,
            col(Ingredient.expiry_date) <= horizon,
        )
        .order_by(col(Ingredient.expiry_date))
        .limit(limit)
    )
    return list(session.exec(stmt))


# ---- Catalog ---------------------------------------------------------------


def find_product_by_name(session: Session, name: str, mode: str = "substring") -> Product | None:
    """First catalog product whose name matches `name` case-insensitively.

    substring: normalized name contains the lookup key (first by id wins).
    exact: normalized name equals the lookup key.
    """
    if mode not in MATCH_MODES:
        raise ValueError(f"unknown product match mode: {mode}")
    key = normalize_name(name)
    if not key:
        return None
    if mode == "exact":
        stmt = select(Product).where(Product.normalized_name == key)
    else:
        stmt = (
            select(Product)
            .where(col(Product.normalized_name).contains(key, autoescape=True))
            .order_by(Product.id)
        )
    return session.exec(stmt).first()


def _product_by_key(session: Session, key: str) -> Product | None:
    return session.exec(select(Product).where(Product.normalized_name == key)).first()


def get_or_create_product(
    session: Session, name: str, owner_id: str | None, unit: str
) -> tuple[Product, bool]:
    """Upsert by normalized name. Returns (product, created)."""
    display = name.strip()
    key = normalize_name(display)
    existing = _product_by_key(session, key)
    if existing:
        return existing, False
    product = Product(name=display, normalized_name=key, unit=unit, user_id=owner_id)
    session.add(product)
    try:
        session.commit()
    except IntegrityError:
        # Another request created the same product between our read and write
        session.rollback()
        existing = _product_by_key(session, key)
        if existing is None:
            raise
        logger.info("product.create_conflict name=%s reused id=%s", key, existing.id)
        return existing, False
    session.refresh(product)
    logger.info("product.created id=%s name=%s unit=%s owner=%s", product.id, product.name, unit, owner_id)
    return product, True


def get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f"product {product_id} not found")
    return product


def list_products(
    session: Session,
    store_id: int | None = None,
    category: str | None = None,
    query: str | None = None,
) -> list[Product]:
    """Catalog browse: exact store and category filters, `query` matched in name or description."""
    stmt = select(Product)
    if store_id is not None:
        stmt = stmt.where(Product.store_id == store_id)
    if category:
        stmt = stmt.where(Product.category == category)
    term = (query or "").strip()
    if term:
        stmt = stmt.where(
            or_(
                col(Product.normalized_name).contains(term.lower(), autoescape=True),
                col(Product.description).icontains(term, autoescape=True),
            )
        )
    return list(session.exec(stmt.order_by(col(Product.name), col(Product.id))))


def list_product_categories(session: Session) -> list[str]:
    rows = session.exec(
        select(Product.category).where(col(Product.category).is_not(None)).distinct()
    ).all()
    return sorted(rows)


def _check_store(session: Session, store_id: int | None) -> None:
    if store_id is not None and session.get(Store, store_id) is None:
        raise NotFoundError(f"store {store_id} not found")


def create_product(session: Session, product: Product) -> Product:
    """Insert a catalog product; a name already in the catalog raises ConflictError."""
    if product.price < 0:
        raise ValueError(f"product price must be >= 0, got {product.price}")
    _check_store(session, product.store_id)
    product.name = product.name.strip()
    product.normalized_name = normalize_name(product.name)
    if _product_by_key(session, product.normalized_name) is not None:
        raise ConflictError(f"product '{product.name}' already exists")
    session.add(product)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(f"product '{product.name}' already exists") from e
    session.refresh(product)
    logger.info(
        "product.created id=%s name=%s price=%s store_id=%s owner=%s",
        product.id,
        product.name,
        product.price,
        product.store_id,
        product.user_id,
    )
    return product


def update_product(session: Session, user_id: str, product_id: int, changes: dict) -> Product:
    """Apply `changes` to a product the user owns."""
    product = session.get(Product, product_id)
    if product is None or product.user_id != user_id:
        raise NotFoundError(f"product {product_id} not found")
    if "store_id" in changes:
        _check_store(session, changes["store_id"])
    if "name" in changes:
        key = normalize_name(changes["name"])
        other = _product_by_key(session, key)
        if other is not None and other.id != product.id:
            raise ConflictError(f"product '{changes['name'].strip()}' already exists")
        product.normalized_name = key
        changes = {**changes, "name": changes["name"].strip()}
    for field, value in changes.items():
        setattr(product, field, value)
    session.add(product)
    session.commit()
    session.refresh(product)
    logger.info("product.updated id=%s fields=%s", product.id, sorted(changes))
    return product


def create_store(session: Session, name: str, address: str | None, user_id: str | None) -> Store:
    store = Store(name=name.strip(), address=address, user_id=user_id)
    session.add(store)
    session.commit()
    session.refresh(store)
    logger.info("store.created id=%s name=%s owner=%s", store.id, store.name, user_id)
    return store


def list_stores(session: Session, user_id: str) -> list[Store]:
    stmt = select(Store).where(Store.user_id == user_id).order_by(col(Store.name), col(Store.id))
    return list(session.exec(stmt))


# ---- Cart ------------------------------------------------------------------


def add_to_cart(session: Session, user_id: str, product_id: int, quantity: int = 1) -> CartItem:
    if quantity < 1:
        raise ValueError(f"cart quantity must be >= 1, got {quantity}")
    if session.get(Product, product_id) is None:
        raise NotFoundError(f"product {product_id} not found")
    line = session.exec(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    ).first()
    if line:
        line.quantity += quantity
    else:
        line = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
    session.add(line)
    session.commit()
    session.refresh(line)
    logger.info(
        "cart.added user=%s product_id=%s qty=%s line_qty=%s", user_id, product_id, quantity, line.quantity
    )
    return line


def get_cart(session: Session, user_id: str) -> list[tuple[CartItem, Product, Optional[Store]]]:
    stmt = (
        select(CartItem, Product, Store)
        .join(Product, col(CartItem.product_id) == col(Product.id))
        .join(Store, col(Product.store_id) == col(Store.id), isouter=True)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.id)
    )
    return [(item, product, store) for item, product, store in session.exec(stmt)]


def _user_cart_item(session: Session, user_id: str, cart_item_id: int) -> CartItem:
    line = session.get(CartItem, cart_item_id)
    if line is None or line.user_id != user_id:
        raise NotFoundError(f"cart item {cart_item_id} not found")
    return line


def update_cart_quantity(session: Session, user_id: str, cart_item_id: int, quantity: int) -> CartItem:
    if quantity < 1:
        raise ValueError(f"cart quantity must be >= 1, got {quantity}")
    line = _user_cart_item(session, user_id, cart_item_id)
    line.quantity = quantity
    session.add(line)
    session.commit()
    session.refresh(line)
    return line


def remove_cart_item(session: Session, user_id: str, cart_item_id: int) -> None:
    line = _user_cart_item(session, user_id, cart_item_id)
    session.delete(line)
    session.commit()
    logger.info("cart.removed user=%s cart_item_id=%s", user_id, cart_item_id)


# ---- Orders & notifications -----------------------------------------------


def place_order(session: Session, user_id: str) -> Order:
    """Snapshot the cart into an order, empty the cart and notify the user."""
    lines = get_cart(session, user_id)
    if not lines:
        raise EmptyCartError("cart is empty")
    total = round(sum(product.price * item.quantity for item, product, _ in lines), 2)
    order = Order(user_id=user_id, total_amount=total)
    session.add(order)
    session.flush()
    for item, product, _ in lines:
        session.add(
            OrderItem(order_id=order.id, product_id=product.id, quantity=item.quantity, price=product.price)
        )
        session.delete(item)
    session.add(
        Notification(
            user_id=user_id,
            title="Order placed",
            message=f"Your order #{order.id} with {len(lines)} item(s) totalling {total:.2f} was placed.",
            related_type="order",
            related_id=order.id,
        )
    )
    session.commit()
    session.refresh(order)
    logger.info("order.placed id=%s user=%s lines=%s total=%s", order.id, user_id, len(lines), total)
    return order


def list_orders(session: Session, user_id: str) -> list[tuple[Order, list[tuple[OrderItem, Product]]]]:
    orders = session.exec(
        select(Order).where(Order.user_id == user_id).order_by(col(Order.created_at).desc(), col(Order.id).desc())
    ).all()
    out = []
    for order in orders:
        items = session.exec(
            select(OrderItem, Product)
            .join(Product, col(OrderItem.product_id) == col(Product.id))
            .where(OrderItem.order_id == order.id)
            .order_by(OrderItem.id)
        ).all()
        out.append((order, [(oi, p) for oi, p in items]))
    return out


def list_notifications(session: Session, user_id: str, unread_only: bool = False) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read == False)  # noqa: E712
    stmt = stmt.order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
    return list(session.exec(stmt))


def mark_notification_read(session: Session, user_id: str, notification_id: int) -> Notification:
    note = session.get(Notification, notification_id)
    if note is None or note.user_id != user_id:
        raise NotFoundError(f"notification {notification_id} not found")
    note.is_read = True
    session.add(note)
    session.commit()
    session.refresh(note)
    return note


def mark_all_notifications_read(session: Session, user_id: str) -> int:
    unread = list_notifications(session, user_id, unread_only=True)
    for note in unread:
        note.is_read = True
        session.add(note)
    session.commit()
    return len(unread)


# ---- Saved recipes ---------------------------------------------------------


def create_saved_recipe(
    session: Session, recipe: SavedRecipe, ingredients: Iterable[SavedRecipeIngredient]
) -> SavedRecipe:
    session.add(recipe)
    session.flush()
    items = list(ingredients)
    for item in items:
        item.recipe_id = recipe.id
        session.add(item)
    session.commit()
    session.refresh(recipe)
    logger.info("saved_recipe.created id=%s name=%s ingredients=%s", recipe.id, recipe.name, len(items))
    return recipe


def get_saved_recipes(session: Session) -> list[tuple[SavedRecipe, list[SavedRecipeIngredient]]]:
    recipes = session.exec(select(SavedRecipe).order_by(SavedRecipe.id)).all()
    out = []
    for recipe in recipes:
        items = session.exec(
            select(SavedRecipeIngredient)
            .where(SavedRecipeIngredient.recipe_id == recipe.id)
            .order_by(SavedRecipeIngredient.id)
        ).all()
        out.append((recipe, list(items)))
    return out


# ---- LLM audit -------------------------------------------------------------


def log_llm_call(
    session: Session,
    prompt_name: str,
    prompt_version: str,
    model: str,
    input_payload: str,
    output_payload: str,
    latency_ms: int,
) -> None:
    session.add(
        LLMCallLog(
            prompt_name=prompt_name,
            prompt_version=prompt_version,
            model=model,
            input_payload=input_payload,
            output_payload=output_payload,
            latency_ms=latency_ms,
        )
    )
    session.commit()
