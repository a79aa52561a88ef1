from datetime import date, timedelta, timezone

import pytest

from smart_fridge.services.exceptions import ConflictError, EmptyCartError, NotFoundError
from smart_fridge.storage import repositories
from smart_fridge.storage.models import Ingredient, Product, SavedRecipe, SavedRecipeIngredient
from smart_fridge.storage.repositories import (
    add_to_cart,
    create_ingredient,
    create_product,
    create_saved_recipe,
    create_store,
    delete_ingredient,
    find_product_by_name,
    get_cart,
    get_expiring_ingredients,
    get_or_create_product,
    get_saved_recipes,
    list_notifications,
    list_orders,
    list_product_categories,
    list_products,
    list_stores,
    mark_all_notifications_read,
    place_order,
    remove_cart_item,
    update_cart_quantity,
    update_product,
)


def _product(session, name, price=1.0, store_id=None):
    product = Product(name=name, normalized_name=name.lower(), price=price, store_id=store_id)
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def test_get_or_create_product_is_idempotent(session):
    first, created = get_or_create_product(session, " Fish Sauce ", owner_id="u", unit="ml")
    again, created_again = get_or_create_product(session, "fish sauce", owner_id="v", unit="pcs")
    assert created is True
    assert created_again is False
    assert again.id == first.id
    assert first.name == "Fish Sauce"


def test_find_product_by_name_modes(session):
    _product(session, "Eggplant")
    _product(session, "Egg")
    assert find_product_by_name(session, "egg").name == "Eggplant"
    assert find_product_by_name(session, "EGG", mode="exact").name == "Egg"
    assert find_product_by_name(session, "100%") is None
    assert find_product_by_name(session, "  ") is None
    with pytest.raises(ValueError):
        find_product_by_name(session, "egg", mode="fuzzy")


def test_ingredient_crud_and_expiring(session):
    today = date.today()
    soon = create_ingredient(
        session, Ingredient(user_id="u", name="Milk", quantity=1, expiry_date=today + timedelta(days=1))
    )
    create_ingredient(session, Ingredient(user_id="u", name="Rice", quantity=1, expiry_date=today + timedelta(days=30)))
    create_ingredient(session, Ingredient(user_id="u", name="Old", quantity=1, expiry_date=today - timedelta(days=1)))
    create_ingredient(session, Ingredient(user_id="other", name="Cream", quantity=1, expiry_date=today))

    expiring = get_expiring_ingredients(session, "u", today, days=5, limit=5)
    assert [i.name for i in expiring] == ["Milk"]

    with pytest.raises(ValueError):
        create_ingredient(session, Ingredient(user_id="u", name="Bad", quantity=-1))
    with pytest.raises(NotFoundError):
        delete_ingredient(session, "other", soon.id)
    delete_ingredient(session, "u", soon.id)
    assert get_expiring_ingredients(session, "u", today, days=5, limit=5) == []


def test_cart_lines_merge_and_update(session):
    product = _product(session, "Tofu", price=2.5)
    add_to_cart(session, "u", product.id)
    line = add_to_cart(session, "u", product.id, 2)
    assert line.quantity == 3

    update_cart_quantity(session, "u", line.id, 5)
    assert get_cart(session, "u")[0][0].quantity == 5

    with pytest.raises(ValueError):
        update_cart_quantity(session, "u", line.id, 0)
    with pytest.raises(NotFoundError):
        add_to_cart(session, "u", 9999)
    with pytest.raises(NotFoundError):
        remove_cart_item(session, "someone-else", line.id)

    remove_cart_item(session, "u", line.id)
    assert get_cart(session, "u") == []


def test_get_cart_includes_store(session):
    store = create_store(session, "Corner Market", address=None, user_id=None)
    with_store = _product(session, "Noodles", store_id=store.id)
    without_store = _product(session, "Chili")
    add_to_cart(session, "u", with_store.id)
    add_to_cart(session, "u", without_store.id)
    stores = [s.name if s else None for _, _, s in get_cart(session, "u")]
    assert stores == ["Corner Market", None]


def test_place_order_snapshots_cart_and_notifies(session):
    rice = _product(session, "Jasmine Rice", price=3.2)
    basil = _product(session, "Basil", price=1.15)
    add_to_cart(session, "u", rice.id, 2)
    add_to_cart(session, "u", basil.id)

    order = place_order(session, "u")
    assert order.total_amount == 7.55
    assert order.status == "pending"
    assert get_cart(session, "u") == []

    ((stored, items),) = list_orders(session, "u")
    assert stored.id == order.id
    assert [(p.name, oi.quantity, oi.price) for oi, p in items] == [("Jasmine Rice", 2, 3.2), ("Basil", 1, 1.15)]

    (note,) = list_notifications(session, "u")
    assert note.related_type == "order"
    assert note.related_id == order.id
    assert mark_all_notifications_read(session, "u") == 1
    assert list_notifications(session, "u", unread_only=True) == []

    with pytest.raises(EmptyCartError):
        place_order(session, "u")


def test_saved_recipes_keep_ingredient_order(session):
    create_saved_recipe(
        session,
        SavedRecipe(name="Green Curry"),
        [
            SavedRecipeIngredient(recipe_id=0, ingredient_name="chicken", quantity=300, unit="g"),
            SavedRecipeIngredient(recipe_id=0, ingredient_name="coconut milk", quantity=400, unit="ml"),
        ],
    )
    ((recipe, items),) = get_saved_recipes(session)
    assert recipe.name == "Green Curry"
    assert [i.ingredient_name for i in items] == ["chicken", "coconut milk"]


def test_rows_get_timezone_aware_timestamps(session):
    ingredient = Ingredient(user_id="u", name="Milk", quantity=1)
    assert ingredient.created_at.tzinfo is timezone.utc
    create_ingredient(session, ingredient)
    product, _ = get_or_create_product(session, "Lime", owner_id="u", unit="pcs")
    add_to_cart(session, "u", product.id)
    order = place_order(session, "u")
    assert order.id is not None
    assert len(list_notifications(session, "u")) == 1


def test_get_or_create_product_recovers_from_concurrent_insert(session, monkeypatch):
    existing = _product(session, "Galangal")
    real_lookup = repositories._product_by_key
    lookups = []

    def stale_first_read(session, key):
        lookups.append(key)
        # the first read misses a row another request has just committed
        if len(lookups) == 1:
            return None
        return real_lookup(session, key)

    monkeypatch.setattr(repositories, "_product_by_key", stale_first_read)
    product, created = get_or_create_product(session, "galangal", owner_id="u", unit="pcs")
    assert created is False
    assert product.id == existing.id
    assert lookups == ["galangal", "galangal"]
    assert len(list_products(session)) == 1


def test_catalog_create_filter_and_update(session):
    store = create_store(session, " Corner Market ", address=None, user_id="u")
    assert store.name == "Corner Market"
    assert [s.id for s in list_stores(session, "u")] == [store.id]

    chili = create_product(
        session,
        Product(
            name=" Bird's Eye Chili ",
            normalized_name="",
            price=0.8,
            category="Vegetables",
            store_id=store.id,
            user_id="u",
        ),
    )
    assert chili.normalized_name == "bird's eye chili"
    create_product(session, Product(name="Tofu", normalized_name="", price=1.5, description="firm, for stir fry", user_id="u"))

    assert [p.name for p in list_products(session, store_id=store.id)] == ["Bird's Eye Chili"]
    assert [p.name for p in list_products(session, query="STIR")] == ["Tofu"]
    assert [p.name for p in list_products(session, query="chili")] == ["Bird's Eye Chili"]
    assert list_product_categories(session) == ["Vegetables"]

    with pytest.raises(ConflictError):
        create_product(session, Product(name="tofu", normalized_name="", price=1.0))
    with pytest.raises(NotFoundError):
        create_product(session, Product(name="Lime", normalized_name="", price=1.0, store_id=9999))
    with pytest.raises(ConflictError):
        update_product(session, "u", chili.id, {"name": "TOFU"})
    with pytest.raises(NotFoundError):
        update_product(session, "other", chili.id, {"price": 1.0})

    renamed = update_product(session, "u", chili.id, {"name": "Thai Chili ", "price": 0.9})
    assert (renamed.name, renamed.normalized_name, renamed.price) == ("Thai Chili", "thai chili", 0.9)
