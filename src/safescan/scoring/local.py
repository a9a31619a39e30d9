"""Local in-process scorer.

A softmax linear classifier over multi-hot ingredient/allergy/medication
features, paired with direct pattern matching against the user's own
allergy and medication lists. The pattern matches decide the risk level;
the classifier supplies how confident it is in that level.

Model artifacts are produced by an external training service and loaded
read-only; nothing here mutates a loaded model.
"""

from __future__ import annotations

import time
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from pydantic import BaseModel, Field, ValidationError, model_validator

from safescan.observability.logging import get_logger
from safescan.schemas.analysis import (
    AllergenAlert,
    AnalysisResult,
    DrugInteraction,
    implied_risk_level,
)
from safescan.schemas.enums import AnalysisMethod, RiskLevel, Severity
from safescan.scoring.constants import (
    ALLERGEN_PATTERNS,
    ALLERGY_OFFSET_RATIO,
    DEFAULT_INPUT_SIZE,
    KNOWN_DRUG_INTERACTIONS,
    MEDICATION_OFFSET_RATIO,
    OUTPUT_CLASSES,
)
from safescan.scoring.exceptions import ScorerResponseError, ScorerUnavailableError


logger = get_logger(__name__)


class LocalModelArtifact(BaseModel):
    """Serialized local model as written by the training service."""

    input_size: int = Field(default=DEFAULT_INPUT_SIZE, gt=0)
    ingredient_vocabulary: dict[str, int] = Field(default_factory=dict)
    allergen_vocabulary: dict[str, int] = Field(default_factory=dict)
    medication_vocabulary: dict[str, int] = Field(default_factory=dict)
    weights: list[list[float]] = Field(
        ..., description="One row per output class, input_size columns each"
    )
    bias: list[float] = Field(..., description="One entry per output class")

    @model_validator(mode="after")
    def _check_shapes(self) -> LocalModelArtifact:
        classes = len(OUTPUT_CLASSES)
        if len(self.weights) != classes or len(self.bias) != classes:
            msg = f"Model must have exactly {classes} output classes"
            raise ValueError(msg)
        if any(len(row) != self.input_size for row in self.weights):
            msg = f"Every weight row must have {self.input_size} columns"
            raise ValueError(msg)
        return self


class LocalModelStatus(BaseModel):
    """Load state of the local model."""

    is_loaded: bool
    vocabulary_size: int = 0
    allergen_vocabulary_size: int = 0
    medication_vocabulary_size: int = 0


@dataclass(frozen=True, slots=True)
class _LoadedModel:
    artifact: LocalModelArtifact
    weights: np.ndarray
    bias: np.ndarray


class LocalScorer:
    """Fast local scorer, available once a model artifact has been loaded."""

    def __init__(self) -> None:
        self._model: _LoadedModel | None = None

    def is_available(self) -> bool:
        """Whether a model is loaded."""
        return self._model is not None

    def load(self, path: Path | str) -> bool:
        """Load a model artifact from a JSON file.

        A missing or malformed file leaves the scorer unavailable; the
        router then sends every request to the remote scorer.

        Returns:
            True if the model was loaded.
        """
        model_path = Path(path)
        try:
            artifact = LocalModelArtifact.model_validate_json(model_path.read_bytes())
        except FileNotFoundError:
            logger.warning("No local model found, local scoring disabled", path=str(model_path))
            return False
        except (OSError, ValidationError) as e:
            logger.error("Failed to load local model", path=str(model_path), error=str(e))
            return False

        self.load_artifact(artifact)
        return True

    def load_artifact(self, artifact: LocalModelArtifact) -> None:
        """Install an already-parsed model artifact."""
        self._model = _LoadedModel(
            artifact=artifact,
            weights=np.asarray(artifact.weights, dtype=np.float64),
            bias=np.asarray(artifact.bias, dtype=np.float64),
        )
        logger.info(
            "Local model loaded",
            vocabulary_size=len(artifact.ingredient_vocabulary),
            input_size=artifact.input_size,
        )

    def status(self) -> LocalModelStatus:
        """Report load state and vocabulary sizes."""
        model = self._model
        if model is None:
            return LocalModelStatus(is_loaded=False)
        return LocalModelStatus(
            is_loaded=True,
            vocabulary_size=len(model.artifact.ingredient_vocabulary),
            allergen_vocabulary_size=len(model.artifact.allergen_vocabulary),
            medication_vocabulary_size=len(model.artifact.medication_vocabulary),
        )

    def score(
        self,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> AnalysisResult:
        """Score a request with the loaded model.

        Raises:
            ScorerUnavailableError: If no model is loaded.
            ScorerResponseError: If there are no ingredients to score.
        """
        model = self._model
        if model is None:
            msg = "Local model not loaded"
            raise ScorerUnavailableError(msg)
        if not ingredients:
            msg = "No ingredients available for analysis"
            raise ScorerResponseError(msg)

        start = time.perf_counter()

        probabilities = self._predict(model, ingredients, allergies, medications)
        alerts = find_allergen_alerts(ingredients, allergies)
        interactions = find_drug_interactions(ingredients, medications)
        risk_level = implied_risk_level(alerts, interactions)
        confidence = float(probabilities[OUTPUT_CLASSES.index(risk_level)])

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "Local prediction",
            risk_level=risk_level.value,
            confidence=round(confidence, 4),
            elapsed_ms=elapsed_ms,
        )

        return AnalysisResult(
            safe=risk_level is RiskLevel.SAFE,
            risk_level=risk_level,
            allergen_alerts=tuple(alerts),
            drug_interactions=tuple(interactions),
            confidence=confidence,
            analysis_method=AnalysisMethod.ML,
            analysis_time_ms=elapsed_ms,
        )

    def _predict(
        self,
        model: _LoadedModel,
        ingredients: Sequence[str],
        allergies: Collection[str],
        medications: Collection[str],
    ) -> np.ndarray:
        features = encode_features(model.artifact, ingredients, allergies, medications)
        logits = model.weights @ features + model.bias
        shifted = np.exp(logits - logits.max())
        return np.clip(shifted / shifted.sum(), 0.0, 1.0)


def encode_features(
    artifact: LocalModelArtifact,
    ingredients: Sequence[str],
    allergies: Collection[str],
    medications: Collection[str],
) -> np.ndarray:
    """Multi-hot encode a request into the model's input vector.

    Unknown terms and indices that would overflow the input width are
    ignored.
    """
    size = artifact.input_size
    features = np.zeros(size, dtype=np.float64)

    sections = (
        (0, artifact.ingredient_vocabulary, ingredients),
        (int(size * ALLERGY_OFFSET_RATIO), artifact.allergen_vocabulary, allergies),
        (int(size * MEDICATION_OFFSET_RATIO), artifact.medication_vocabulary, medications),
    )
    for offset, vocabulary, terms in sections:
        for term in terms:
            index = vocabulary.get(term.lower())
            if index is not None and offset + index < size:
                features[offset + index] = 1.0

    return features


def find_allergen_alerts(
    ingredients: Sequence[str],
    allergies: Collection[str],
) -> list[AllergenAlert]:
    """Match the user's allergies against the ingredient list.

    A direct substring match is HIGH severity; a match through a known
    allergen family (e.g. "nuts" -> "almond") is MEDIUM.
    """
    alerts: list[AllergenAlert] = []
    for allergen in sorted(allergies):
        allergen_lower = allergen.lower()
        family = ALLERGEN_PATTERNS.get(allergen_lower, ())
        for ingredient in ingredients:
            ingredient_lower = ingredient.lower()
            if allergen_lower in ingredient_lower:
                alerts.append(
                    AllergenAlert(
                        allergen=allergen,
                        severity=Severity.HIGH,
                        message=f"Direct allergen match: {ingredient} contains {allergen}",
                    )
                )
            elif any(pattern in ingredient_lower for pattern in family):
                alerts.append(
                    AllergenAlert(
                        allergen=allergen,
                        severity=Severity.MEDIUM,
                        message=(
                            f"Possible allergen: {ingredient} may contain traces "
                            f"of {allergen}"
                        ),
                    )
                )
    return alerts


def find_drug_interactions(
    ingredients: Sequence[str],
    medications: Collection[str],
) -> list[DrugInteraction]:
    """Match the user's medications against known food-drug interactions."""
    interactions: list[DrugInteraction] = []
    for medication in sorted(medications):
        medication_lower = medication.lower()
        for drug, conflicting in KNOWN_DRUG_INTERACTIONS.items():
            if drug not in medication_lower:
                continue
            for conflict in conflicting:
                for ingredient in ingredients:
                    if conflict in ingredient.lower():
                        interactions.append(
                            DrugInteraction(
                                medication=medication,
                                ingredient=ingredient,
                                severity=Severity.HIGH,
                                message=(
                                    f"Drug interaction: {ingredient} may interact "
                                    f"with {medication}"
                                ),
                            )
                        )
    return interactions
