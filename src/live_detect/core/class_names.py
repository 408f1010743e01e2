"""
Class name registry - loaded once at startup.

Sources, in order of preference:
- metadata.yaml exported alongside the model (``names:`` section)
- the ``names`` mapping of a loaded model
- the built-in COCO table
"""

import logging
from pathlib import Path

import yaml

from ..utils.coco_classes import COCO_CLASSES

logger = logging.getLogger(__name__)


class ClassNameRegistry:
    """Maps class ids to labels; unknown ids get a placeholder."""

    def __init__(self, names: dict[int, str]):
        self._names = dict(names)

    @classmethod
    def coco(cls) -> "ClassNameRegistry":
        return cls(COCO_CLASSES)

    @classmethod
    def from_names(cls, names) -> "ClassNameRegistry":
        """
        Build from a ``names`` value as found in YOLO metadata.

        Args:
            names: Dict of id -> name (keys may be strings) or a list of names
        """
        if isinstance(names, dict):
            return cls({int(k): str(v) for k, v in names.items()})
        if isinstance(names, (list, tuple)):
            return cls({i: str(n) for i, n in enumerate(names)})
        raise ValueError(f"Unsupported names format: {type(names).__name__}")

    @classmethod
    def from_metadata(cls, path: str | Path) -> "ClassNameRegistry":
        """
        Load class names from a model metadata.yaml file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file has no usable ``names`` section
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        names = data.get("names") if isinstance(data, dict) else None
        if not names:
            raise ValueError(f"No 'names' section in {path}")

        registry = cls.from_names(names)
        logger.info(f"Class names loaded: {len(registry)} from {path}")
        return registry

    def lookup(self, class_id: int) -> str:
        return self._names.get(int(class_id), f"Unknown ({class_id})")

    def as_dict(self) -> dict[int, str]:
        return dict(self._names)

    def __len__(self) -> int:
        return len(self._names)
