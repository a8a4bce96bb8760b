"""Static category registry.

Expense and income categories are two disjoint lists. Both contain an
``other`` entry used when a stored category id is not found for its type.
"""

from typing import Optional

from fintrack.domain.entities import Category, TransactionType

FALLBACK_CATEGORY_ID = "other"

EXPENSE_CATEGORIES: tuple[Category, ...] = (
    Category(id="food", name="Food & Dining", color="#EF4444", icon="🍽️"),
    Category(id="transportation", name="Transportation", color="#3B82F6", icon="🚗"),
    Category(id="shopping", name="Shopping", color="#8B5CF6", icon="🛍️"),
    Category(id="entertainment", name="Entertainment", color="#F59E0B", icon="🎬"),
    Category(id="bills", name="Bills & Utilities", color="#EF4444", icon="💡"),
    Category(id="healthcare", name="Healthcare", color="#10B981", icon="🏥"),
    Category(id="education", name="Education", color="#6366F1", icon="📚"),
    Category(id="travel", name="Travel", color="#EC4899", icon="✈️"),
    Category(id="fitness", name="Fitness & Sports", color="#14B8A6", icon="💪"),
    Category(id="other", name="Other", color="#6B7280", icon="📦"),
)

INCOME_CATEGORIES: tuple[Category, ...] = (
    Category(id="salary", name="Salary", color="#10B981", icon="💼"),
    Category(id="freelance", name="Freelance", color="#3B82F6", icon="💻"),
    Category(id="business", name="Business", color="#8B5CF6", icon="🏢"),
    Category(id="investment", name="Investment", color="#F59E0B", icon="📈"),
    Category(id="rental", name="Rental Income", color="#EC4899", icon="🏠"),
    Category(id="gift", name="Gift/Bonus", color="#14B8A6", icon="🎁"),
    Category(id="other", name="Other", color="#6B7280", icon="💰"),
)

# Assigned at read time to legacy records stored without a category
LEGACY_DEFAULT_CATEGORIES = {
    TransactionType.EXPENSE: "other",
    TransactionType.INCOME: "salary",
}


def get_categories(transaction_type: TransactionType) -> tuple[Category, ...]:
    """Return the category list for a transaction type."""
    if TransactionType(transaction_type) == TransactionType.EXPENSE:
        return EXPENSE_CATEGORIES
    return INCOME_CATEGORIES


def category_ids(transaction_type: TransactionType) -> tuple[str, ...]:
    """Return the category ids for a transaction type, in registry order."""
    return tuple(category.id for category in get_categories(transaction_type))


def get_category(
    transaction_type: TransactionType, category_id: str
) -> Optional[Category]:
    """Get a category by id.

    Args:
        transaction_type: Type whose list is searched
        category_id: Category id

    Returns:
        Category or None if the id is not in the list for this type
    """
    for category in get_categories(transaction_type):
        if category.id == category_id:
            return category
    return None


def resolve_category(transaction_type: TransactionType, category_id: str) -> Category:
    """Get a category by id, falling back to the ``other`` entry."""
    category = get_category(transaction_type, category_id)
    if category is None:
        category = get_category(transaction_type, FALLBACK_CATEGORY_ID)
    return category


def default_category(transaction_type: TransactionType) -> str:
    """Return the category id assigned to legacy records of this type."""
    return LEGACY_DEFAULT_CATEGORIES[TransactionType(transaction_type)]
