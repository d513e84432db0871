from familyvault.catalog import (
    VAULT_CATEGORIES,
    catalog_position,
    get_category_template,
    is_default_category,
    is_default_subcategory,
    iter_subcategory_templates,
)


def test_catalog_shape() -> None:
    assert [c.id for c in VAULT_CATEGORIES] == [
        "real-estate",
        "medical",
        "education",
        "insurance",
        "personal",
    ]
    assert sum(len(c.subcategories) for c in VAULT_CATEGORIES) == 28


def test_subcategory_ids_unique_within_category() -> None:
    for category in VAULT_CATEGORIES:
        ids = [sub.id for sub in category.subcategories]
        assert len(ids) == len(set(ids)), category.id


def test_iter_subcategory_templates_keeps_order() -> None:
    pairs = list(iter_subcategory_templates())
    assert len(pairs) == 28
    assert pairs[0][0].id == "real-estate"
    assert pairs[0][1].id == "residential"
    assert pairs[-1][0].id == "personal"
    assert pairs[-1][1].id == "certificates"


def test_get_category_template() -> None:
    medical = get_category_template("medical")
    assert medical is not None
    assert medical.icon_bg_color == "#DBEAFE"
    assert get_category_template("nope") is None


def test_default_entity_lookup() -> None:
    assert is_default_category("medical")
    assert not is_default_category("3f2a9c")
    assert is_default_subcategory("personal", "certificates")
    assert not is_default_subcategory("medical", "certificates")
    assert not is_default_subcategory("3f2a9c", "certificates")

    assert catalog_position("personal") == 4
    assert catalog_position("education", "transcripts") == 1
    assert catalog_position("3f2a9c") > catalog_position("personal")
