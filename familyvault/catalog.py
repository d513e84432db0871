"""Default vault taxonomy seeded for every new user.

Ids are stable literals: they are the primary keys of template-derived rows,
so changing one would make re-seeding create a second copy.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class SubcategoryTemplate:
    id: str
    name: str
    icon: str


@dataclass(frozen=True)
class CategoryTemplate:
    id: str
    name: str
    icon: str
    icon_bg_color: str
    subcategories: tuple[SubcategoryTemplate, ...]


def _sub(id: str, name: str, icon: str) -> SubcategoryTemplate:
    return SubcategoryTemplate(id=id, name=name, icon=icon)


VAULT_CATEGORIES: tuple[CategoryTemplate, ...] = (
    CategoryTemplate(
        id="real-estate",
        name="Real Estate",
        icon="Home",
        icon_bg_color="#FEE2E2",
        subcategories=(
            _sub("residential", "Residential Property", "Home"),
            _sub("commercial", "Commercial Property", "Building2"),
            _sub("land", "Land", "Mountain"),
            _sub("industrial", "Industrial", "Factory"),
            _sub("rental", "Rental Properties", "Key"),
            _sub("property-tax", "Property Tax", "FileText"),
            _sub("sale-deeds", "Sale/Purchase Deeds", "ScrollText"),
            _sub("property-documents", "Property Documents", "ClipboardList"),
        ),
    ),
    CategoryTemplate(
        id="medical",
        name="Medical",
        icon="Briefcase",
        icon_bg_color="#DBEAFE",
        subcategories=(
            _sub("prescription", "Prescription", "Pill"),
            _sub("test-reports", "Test Reports", "TestTube"),
            _sub("hospital-records", "Hospital Records", "Hospital"),
            _sub("vaccination", "Vaccination Records", "Syringe"),
            _sub("insurance-claims", "Insurance Claims", "FileText"),
        ),
    ),
    CategoryTemplate(
        id="education",
        name="Education",
        icon="GraduationCap",
        icon_bg_color="#DBEAFE",
        subcategories=(
            _sub("certificates", "Certificates", "Award"),
            _sub("transcripts", "Transcripts", "ScrollText"),
            _sub("degrees", "Degrees", "GraduationCap"),
            _sub("id-cards", "ID Cards", "IdCard"),
            _sub("scholarships", "Scholarships", "FileCheck"),
        ),
    ),
    CategoryTemplate(
        id="insurance",
        name="Insurance",
        icon="Shield",
        icon_bg_color="#D1FAE5",
        subcategories=(
            _sub("health", "Health", "Hospital"),
            _sub("life", "Life", "User"),
            _sub("vehicle", "Vehicle", "Car"),
            _sub("property", "Property", "Building"),
            _sub("travel", "Travel", "Plane"),
        ),
    ),
    CategoryTemplate(
        id="personal",
        name="Personal",
        icon="User",
        icon_bg_color="#FCE7F3",
        subcategories=(
            _sub("identity", "Identity", "IdCard"),
            _sub("bank", "Bank", "Landmark"),
            _sub("tax", "Tax", "FileText"),
            _sub("legal", "Legal", "ScrollText"),
            _sub("certificates", "Certificates", "Award"),
        ),
    ),
)

DEFAULT_ICON = "Folder"

_UNLISTED = 10_000


def iter_subcategory_templates() -> Iterator[tuple[CategoryTemplate, SubcategoryTemplate]]:
    """Yield ``(category, subcategory)`` pairs in catalog order."""
    for category in VAULT_CATEGORIES:
        for subcategory in category.subcategories:
            yield category, subcategory


def get_category_template(category_id: str) -> CategoryTemplate | None:
    """Return the template with the given id, if any."""
    for category in VAULT_CATEGORIES:
        if category.id == category_id:
            return category
    return None


def is_default_category(category_id: str) -> bool:
    return get_category_template(category_id) is not None


def is_default_subcategory(category_id: str, subcategory_id: str) -> bool:
    template = get_category_template(category_id)
    if template is None:
        return False
    return any(sub.id == subcategory_id for sub in template.subcategories)


def catalog_position(category_id: str, subcategory_id: str | None = None) -> int:
    """Index of a template entry in catalog order; unknown ids sort last."""
    for index, category in enumerate(VAULT_CATEGORIES):
        if category.id != category_id:
            continue
        if subcategory_id is None:
            return index
        for sub_index, sub in enumerate(category.subcategories):
            if sub.id == subcategory_id:
                return sub_index
    return _UNLISTED
