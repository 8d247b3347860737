from typing import Any, Dict, List, Optional

MODE_ALL = "all"
MODE_BY_CATEGORY = "byCategory"
ALL_CATEGORIES = "All"

FILTER_MODES = (MODE_ALL, MODE_BY_CATEGORY)


def filter_expenses(
    expenses: List[Dict[str, Any]],
    search_text: Optional[str] = "",
    mode: str = MODE_ALL,
    category: Optional[str] = ALL_CATEGORIES,
) -> List[Dict[str, Any]]:
    """
    Title search plus optional category filter.

    Matching is a case-insensitive substring test against the title only.
    In ``all`` mode the category argument is ignored even if one is still
    selected. Input order is kept and the input list is not modified.
    """
    if mode not in FILTER_MODES:
        raise ValueError(f"Unknown filter mode: {mode!r}")

    needle = (search_text or "").lower()
    by_category = mode == MODE_BY_CATEGORY and category not in (None, ALL_CATEGORIES)

    result = []
    for exp in expenses:
        if needle and needle not in str(exp.get("title", "")).lower():
            continue
        if by_category and exp.get("category") != category:
            continue
        result.append(exp)
    return result


def sort_newest_first(expenses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(expenses, key=lambda exp: str(exp.get("date", "")), reverse=True)
