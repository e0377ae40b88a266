"""Configuration classes for pcspace.

Provides a serialisable configuration base and the explicit parameter set
of a feature-space run.
"""

import inspect
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from typing_extensions import Self

from .exceptions import ConfigurationError

__all__ = ["Config", "FeatureSpaceConfig"]

# Allowed basic types for config values
BASIC_TYPES = (int, float, str, bool, type(None))


@dataclass
class Config:
    """Base class for configurations.

    Rules:
    - Non-private attributes (not starting with '_') must be basic types
    - Basic types: int, float, str, bool, None, or nested dict/list of these
    - Provides to_dict(), save(), and load() methods
    """

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_"):
            self._validate_value(value, name)

        super().__setattr__(name, value)

    @staticmethod
    def _validate_value(value: Any, name: str = "value") -> None:
        """Recursively validate that value is JSON serialisable.

        Raises
        ------
        TypeError
            If value contains non-serializable types.
        """
        if isinstance(value, BASIC_TYPES):
            return

        if isinstance(value, list):
            for i, item in enumerate(value):
                Config._validate_value(item, f"{name}[{i}]")
            return

        if isinstance(value, dict):
            for key, val in value.items():
                if not isinstance(key, str):
                    raise TypeError(
                        f"Dict keys must be strings, got {type(key).__name__} for key in {name}"
                    )
                Config._validate_value(val, f"{name}['{key}']")
            return

        raise TypeError(
            f"Attribute '{name}' has invalid type {type(value).__name__}. "
            f"Only basic types (int, float, str, bool, None) and nested "
            f"dict/list are allowed."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary of its public attributes."""
        return {
            key: self._deep_copy(value)
            for key, value in self.__dict__.items()
            if not key.startswith("_") and not callable(value)
        }

    @staticmethod
    def _deep_copy(value: Any) -> Any:
        if isinstance(value, dict):
            return {k: Config._deep_copy(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [Config._deep_copy(item) for item in value]
        return value

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any], strict: bool = True) -> Self:
        """Create config from dictionary, filling missing keys with defaults.

        Parameters
        ----------
        config_dict : dict[str, Any]
            Configuration dictionary.
        strict : bool, default=True
            If True, unknown keys raise ``ConfigurationError``. If False,
            they are ignored.

        Raises
        ------
        ConfigurationError
            If a required parameter is missing, or an unknown key is given
            while ``strict`` is set.
        """
        sig = inspect.signature(cls.__init__)
        accepted = [p for p in sig.parameters if p not in ("self", "args", "kwargs")]

        unknown = sorted(set(config_dict) - set(accepted))
        if strict and unknown:
            raise ConfigurationError(f"Unknown parameters for {cls.__name__}: {unknown}")

        init_kwargs = {}
        missing_required = []
        for param_name in accepted:
            param = sig.parameters[param_name]
            if param_name in config_dict:
                init_kwargs[param_name] = config_dict[param_name]
            elif param.default is inspect.Parameter.empty:
                missing_required.append(param_name)

        if missing_required:
            raise ConfigurationError(
                f"Missing required parameters for {cls.__name__}: {missing_required}"
            )

        return cls(**init_kwargs)

    @classmethod
    def load(cls, path: str | Path, strict: bool = True) -> Self:
        """Load config from a JSON file.

        Raises
        ------
        FileNotFoundError
            If config file doesn't exist.
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict, strict=strict)

    def update(self, **kwargs) -> None:
        """Update config attributes."""
        for key, value in kwargs.items():
            setattr(self, key, value)


@dataclass
class FeatureSpaceConfig(Config):
    """Parameters of a feature-space run.

    Args:
        var_lim (float, optional):
            Components whose explained-variance fraction is not strictly
            above this value are not tested. Defaults to 0.01.
        correction (str, optional):
            Multiple-testing correction method, one of
            :data:`pcspace.kernels.statistics.P_ADJUST_METHODS`.
            Defaults to "fdr" (Benjamini-Hochberg).
        sig (float, optional):
            Significance level applied to the adjusted p-values.
            Defaults to 0.05.
        num_workers (int, optional):
            Number of worker processes for the per-class runs. Defaults to 1.
        show_progress (bool, optional):
            Whether to show a progress bar over classes. Defaults to False.

    Raises:
        ConfigurationError: If any value is out of range.

    Examples:
        >>> config = FeatureSpaceConfig(correction="bonferroni", sig=0.01)
        >>> config.save("feature_space.json")
        >>> FeatureSpaceConfig.load("feature_space.json") == config
        True
    """

    var_lim: float = 0.01
    correction: str = "fdr"
    sig: float = 0.05
    num_workers: int = 1
    show_progress: bool = False

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges and the correction method."""
        from pcspace.kernels.statistics import resolve_p_adjust_method

        if not 0.0 <= self.var_lim < 1.0:
            raise ConfigurationError(f"var_lim must be in [0, 1), got {self.var_lim}")
        if not 0.0 < self.sig < 1.0:
            raise ConfigurationError(f"sig must be in (0, 1), got {self.sig}")
        if not isinstance(self.num_workers, int) or self.num_workers < 1:
            raise ConfigurationError(f"num_workers must be a positive integer, got {self.num_workers}")

        resolve_p_adjust_method(self.correction)

    def update(self, **kwargs) -> None:
        """Update config attributes; nothing changes if the new values are invalid."""
        candidate = self.from_dict({**self.to_dict(), **kwargs})
        super().update(**candidate.to_dict())
