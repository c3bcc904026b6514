"""Ownership and persistence of the active pricing model.

A :class:`ModelStore` holds the one model every query reads. New models are
built completely before :meth:`ModelStore.replace` swaps them in, so a query
sees either the old model or the new one, never a mix. The persisted form is a
JSON key-value file with the model stored under ``MODEL_KEY``.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from tpo_pricing.extractor import extract
from tpo_pricing.models import PricingModel, TabularSheet
from tpo_pricing.presets import MODEL_KEY

logger = logging.getLogger(__name__)


def serialize(model: PricingModel) -> dict:
    """Nested records of strings and numbers, suitable for ``json.dump``."""
    return model.model_dump(mode="json")


def deserialize(record: Any) -> Optional[PricingModel]:
    """Rebuild a model from a stored record.

    Absent, unparsable or shape-invalid records mean "no model" and return
    ``None``; a record is never partially applied.
    """
    if record is None:
        return None
    try:
        if isinstance(record, (str, bytes)):
            return PricingModel.model_validate_json(record)
        return PricingModel.model_validate(record)
    except ValidationError as exc:
        logger.warning("Discarding stored pricing model that failed validation: %s", exc)
        return None


class ModelStore:
    def __init__(self, path: Union[str, Path, None] = None, key: str = MODEL_KEY) -> None:
        self.path = Path(path) if path else None
        self.key = key
        self._lock = threading.Lock()
        self._model: Optional[PricingModel] = None

    @property
    def current(self) -> Optional[PricingModel]:
        """Snapshot of the active model; callers never see a partial replace."""
        return self._model

    def replace(self, model: PricingModel) -> None:
        """Persist (when backed by a file) and then swap in a copy of ``model``."""
        snapshot = model.model_copy(deep=True)
        with self._lock:
            if self.path is not None:
                self._write(snapshot)
            self._model = snapshot

    def ingest(self, sheets: Mapping[str, TabularSheet], fmt=None) -> PricingModel:
        """Extract ``sheets`` and make the result current.

        An :class:`~tpo_pricing.extractor.ExtractionError` propagates and
        leaves the current model untouched.
        """
        model = extract(sheets, fmt=fmt)
        self.replace(model)
        return model

    def load(self) -> Optional[PricingModel]:
        """Restore the model from the backing file, if one is stored there."""
        if self.path is None:
            return self._model
        model = deserialize(self._read_all().get(self.key))
        if model is not None:
            with self._lock:
                self._model = model
        return model

    def clear(self) -> None:
        with self._lock:
            self._model = None
            if self.path is not None:
                data = self._read_all()
                if data.pop(self.key, None) is not None:
                    self._dump(data)

    def _read_all(self) -> dict:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read pricing store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring pricing store %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, model: PricingModel) -> None:
        data = self._read_all()
        data[self.key] = serialize(model)
        self._dump(data)

    def _dump(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp, self.path)
