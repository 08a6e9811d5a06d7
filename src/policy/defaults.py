"""Built-in categories registered when a PolicyRegistry is created."""

from typing import List, Optional

from constants import Constants, DefaultCategories

from .models import Category, Placement, Reselection, Severity


def builtin_categories(namespace: Optional[str] = None) -> List[Category]:
    """One category per known generator concern, in scope order.

    The ORM is chosen at most once and a missing adapter is fatal; the test
    adapter can be swapped and a missing one only warns; templates layer.
    """
    ns = Constants.PLUGIN_NAMESPACE if namespace is None else namespace
    return [
        Category(
            name=DefaultCategories.ORM.value,
            allowed_candidates=tuple(Constants.ORM_CANDIDATES),
            reselection=Reselection.FORBIDDEN,
            severity=Severity.HARD,
            namespace=ns,
            placement=Placement.PREPEND,
        ),
        Category(
            name=DefaultCategories.TEMPLATE.value,
            allowed_candidates=tuple(Constants.TEMPLATE_CANDIDATES),
            default=Constants.TEMPLATE_DEFAULT,
            reselection=Reselection.ALLOWED,
            severity=Severity.SOFT,
            namespace=ns,
            multi_select=True,
        ),
        Category(
            name=DefaultCategories.TEST.value,
            allowed_candidates=tuple(Constants.TEST_CANDIDATES),
            default=Constants.TEST_DEFAULT,
            reselection=Reselection.ALLOWED,
            severity=Severity.SOFT,
            namespace=ns,
        ),
    ]
