"""Feature space: per-class tables of informative principal components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from pcspace.core.config import FeatureSpaceConfig

__all__ = ["FEATURE_COLUMNS", "FeatureSpace", "empty_feature_table"]

# Column order of every per-class result table
FEATURE_COLUMNS = ["component", "pValue", "pValueAdj", "expVar", "cumExpVar"]


def empty_feature_table() -> pd.DataFrame:
    """Zero-row result table with the standard columns and dtypes."""
    return pd.DataFrame(
        {
            "component": pd.Categorical([], ordered=True),
            "pValue": pd.Series([], dtype="float64"),
            "pValueAdj": pd.Series([], dtype="float64"),
            "expVar": pd.Series([], dtype="float64"),
            "cumExpVar": pd.Series([], dtype="float64"),
        }
    )


@dataclass
class FeatureSpace:
    """Informative principal components per class, with their provenance.

    ``features``, ``explained_variance`` and ``label_key`` together are what a
    downstream classifier is trained from. The remaining fields record how
    the feature space was obtained.

    Attributes:
        features: Class name -> result table (columns :data:`FEATURE_COLUMNS`),
            in label level order. Classes without any significant component
            are not present.
        explained_variance: Explained-variance fraction of every component of
            the embedding, before filtering.
        label_key: Name of the label field the classes come from. Ends in
            ``.valid`` when class names were sanitised.
        components: Components that passed the variance filter and were
            tested, in embedding column order.
        labels: Working labeling (sanitised when ``renamed`` is not empty).
        dropped: Classes removed because no component was significant.
        renamed: Original class name -> sanitised class name.
        config: Parameters of the run.

    Examples:
        >>> space = feature_space(source, labels, label_key="cell_type")
        >>> space.classes
        ['B_cell', 'T_cell', 'monocyte']
        >>> space.features["B_cell"].head()
        >>> space.feature_union()
        ['PC1', 'PC3', 'PC2']
    """

    features: dict[str, pd.DataFrame]
    explained_variance: pd.Series
    label_key: str
    components: list[str] = field(default_factory=list)
    labels: Optional[pd.Series] = None
    dropped: list[str] = field(default_factory=list)
    renamed: dict[str, str] = field(default_factory=dict)
    config: FeatureSpaceConfig = field(default_factory=FeatureSpaceConfig)

    @property
    def classes(self) -> list[str]:
        return list(self.features)

    @property
    def n_features(self) -> dict[str, int]:
        return {name: len(table) for name, table in self.features.items()}

    def __len__(self) -> int:
        return len(self.features)

    def __contains__(self, name: object) -> bool:
        return name in self.features

    def __getitem__(self, name: str) -> pd.DataFrame:
        return self.features[name]

    def feature_union(self) -> list[str]:
        """Components selected for any class, in first-seen order."""
        seen: dict[str, None] = {}
        for table in self.features.values():
            for name in table["component"].astype(str):
                seen.setdefault(name, None)
        return list(seen)

    def to_frame(self) -> pd.DataFrame:
        """Long-form table of all classes with a leading ``class`` column."""
        if not self.features:
            frame = empty_feature_table()
            frame.insert(0, "class", pd.Series([], dtype="object"))
            return frame

        frames = []
        for name, table in self.features.items():
            part = table.copy()
            part["component"] = part["component"].astype(str)
            part.insert(0, "class", name)
            frames.append(part)
        return pd.concat(frames, ignore_index=True)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form suitable for ``AnnData.uns``."""
        return {
            "features": {name: table.copy() for name, table in self.features.items()},
            "explained_variance": {
                str(name): float(value) for name, value in self.explained_variance.items()
            },
            "pvar": self.label_key,
            "components": list(self.components),
            "dropped": list(self.dropped),
            "params": self.config.to_dict(),
        }
