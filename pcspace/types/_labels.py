"""Result type of label normalisation."""

from dataclasses import dataclass, field

import pandas as pd

__all__ = ["LabelNormalization"]


@dataclass(frozen=True)
class LabelNormalization:
    """A categorical labeling ready for one-vs-rest testing.

    Nothing is written back to the metadata the labels came from. When
    ``was_renamed`` is set, callers that keep a metadata table may store
    ``labels`` under ``key`` next to the original column.

    Args:
        labels: Categorical Series with the working level order. The first
            level is the positive class of a binary labeling.
        key: Field name of the working labeling. Equals ``original_key``
            unless levels were sanitised, in which case it is
            ``f"{original_key}.valid"``.
        original_key: Field name the labels were read from.
        renamed: Mapping original level -> sanitised level, for the levels
            that changed. Empty when no rename happened.
    """

    labels: pd.Series
    key: str
    original_key: str
    renamed: dict[str, str] = field(default_factory=dict)

    @property
    def was_renamed(self) -> bool:
        return self.key != self.original_key

    @property
    def levels(self) -> list[str]:
        return list(self.labels.cat.categories)

    def __len__(self) -> int:
        return len(self.labels)
