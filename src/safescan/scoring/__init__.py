"""Risk scorers: the fast local classifier and the remote LLM scorer."""

from safescan.scoring.exceptions import (
    ScorerConfigurationError,
    ScorerError,
    ScorerResponseError,
    ScorerTimeoutError,
    ScorerUnavailableError,
)
from safescan.scoring.local import LocalModelArtifact, LocalModelStatus, LocalScorer
from safescan.scoring.outcome import ScoreOutcome
from safescan.scoring.protocol import LocalScorerProtocol, RemoteScorerProtocol
from safescan.scoring.remote import RemoteScorer, UnconfiguredRemoteScorer


__all__ = [
    "LocalModelArtifact",
    "LocalModelStatus",
    "LocalScorer",
    "LocalScorerProtocol",
    "RemoteScorer",
    "RemoteScorerProtocol",
    "ScoreOutcome",
    "ScorerConfigurationError",
    "ScorerError",
    "ScorerResponseError",
    "ScorerTimeoutError",
    "ScorerUnavailableError",
    "UnconfiguredRemoteScorer",
]
