"""Normalisation of class labels into an ordered categorical."""

from __future__ import annotations

import keyword
import re

import pandas as pd

from pcspace.core.exceptions import ConfigurationError, DataError
from pcspace.types import LabelNormalization
from pcspace.utils import get_logger

logger = get_logger()

__all__ = ["is_valid_name", "make_valid_names", "normalize_labels"]

_INVALID_CHARS = re.compile(r"[^0-9A-Za-z_]")


def is_valid_name(name: str) -> bool:
    """Whether ``name`` can be used as a bare identifier (and column name)."""
    return name.isidentifier() and name.isascii() and not keyword.iskeyword(name)


def make_valid_names(names) -> list[str]:
    """Turn names into valid identifiers, deterministically.

    Characters outside ``[A-Za-z0-9_]`` become ``_``; names that are empty
    or start with a digit get an ``X`` prefix; keywords get a ``_`` suffix.
    Valid names are returned unchanged.

    Examples:
        >>> make_valid_names(["B cell", "CD4+ T", "1st", "class", "NK"])
        ['B_cell', 'CD4__T', 'X1st', 'class_', 'NK']
    """
    valid = []
    for name in names:
        name = str(name)
        if is_valid_name(name):
            valid.append(name)
            continue
        new = _INVALID_CHARS.sub("_", name)
        if not new or new[0].isdigit():
            new = "X" + new
        if keyword.iskeyword(new):
            new = new + "_"
        valid.append(new)
    return valid


def normalize_labels(labels, key: str = "label") -> LabelNormalization:
    """Coerce labels into a categorical with a stable level order.

    Non-categorical input gets pandas' default categories, i.e. the sorted
    unique values. Categorical input keeps its category order with unused
    categories dropped. Levels are compared as strings.

    If any level is not a valid identifier, all levels are rewritten with
    :func:`make_valid_names` (level order preserved) and the working key
    becomes ``f"{key}.valid"``. The rename is logged; it is not an error.
    Nothing is written back to the caller's metadata.

    Args:
        labels: One discrete value per observation. A Series keeps its index.
        key: Name of the label field, used to derive the working key.

    Returns:
        LabelNormalization with the working labels and key.

    Raises:
        DataError: If any label is missing.
        ConfigurationError: If distinct levels collide after sanitisation.

    Examples:
        >>> norm = normalize_labels(["T cell", "B cell", "T cell"], key="cell_type")
        >>> norm.key
        'cell_type.valid'
        >>> norm.levels
        ['B_cell', 'T_cell']
    """
    series = labels.copy() if isinstance(labels, pd.Series) else pd.Series(labels)

    if series.isna().any():
        n_missing = int(series.isna().sum())
        raise DataError(f"{n_missing} observations have no label in '{key}'")

    if isinstance(series.dtype, pd.CategoricalDtype):
        observed = set(series.cat.codes.tolist())
        unused = [c for i, c in enumerate(series.cat.categories) if i not in observed]
        if unused:
            logger.debug(f"Dropping unused categories of '{key}': {unused}")
            series = series.cat.remove_unused_categories()
    else:
        logger.info(f"Transforming prediction variable '{key}' to categorical...")
        series = series.astype("category")

    # Levels are class names from here on
    categories = [str(c) for c in series.cat.categories]
    if len(set(categories)) != len(categories):
        raise ConfigurationError(
            f"Levels of '{key}' are not distinct once converted to text: {categories}"
        )
    series = series.cat.rename_categories(categories)

    if all(is_valid_name(c) for c in categories):
        return LabelNormalization(labels=series, key=key, original_key=key)

    sanitised = make_valid_names(categories)
    if len(set(sanitised)) != len(sanitised):
        collisions = {}
        for old, new in zip(categories, sanitised):
            collisions.setdefault(new, []).append(old)
        collisions = {new: olds for new, olds in collisions.items() if len(olds) > 1}
        raise ConfigurationError(
            f"Class names of '{key}' collide after renaming to valid names: {collisions}"
        )

    renamed = {old: new for old, new in zip(categories, sanitised) if old != new}
    series = series.cat.rename_categories(dict(zip(categories, sanitised)))
    new_key = f"{key}.valid"

    invalid = "\n".join(f"  {old} -> {new}" for old, new in renamed.items())
    logger.warning(
        f"Not all the classes of '{key}' are valid names. The following classes are renamed:\n"
        f"{invalid}\nSee new classes in '{new_key}'"
    )

    return LabelNormalization(labels=series, key=new_key, original_key=key, renamed=renamed)
