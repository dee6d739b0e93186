from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..routing.decision import Decision


class RouteRequest(BaseModel):
    """
    The request model for routing one spoken utterance.
    """
    utterance: str = Field(min_length=1, max_length=1000)
    language: Optional[str] = Field(default=None, description="Language hint, e.g. 'ml-IN'")


class DecisionResponse(BaseModel):
    """
    A routing decision as returned to the app.
    """
    model_config = ConfigDict(populate_by_name=True)

    action_kind: str = Field(alias="actionKind")
    target_id: Optional[str] = Field(default=None, alias="targetId")
    sub_action: Optional[str] = Field(default=None, alias="subAction")
    confidence: float
    reason: str = ""
    detected_language: str = Field(default="", alias="detectedLanguage")
    normalized_query: str = Field(default="", alias="normalizedQuery")
    tier: Optional[str] = None

    @classmethod
    def from_decision(cls, decision: Decision) -> "DecisionResponse":
        return cls.model_validate(decision.to_dict())


class ConnectivityRequest(BaseModel):
    """
    The host app's current network state.
    """
    online: bool


class ConnectivityResponse(BaseModel):
    online: bool


class RouterStatusResponse(BaseModel):
    catalogue_version: str
    routes: int
    connectivity: dict[str, Any]
    tiers: dict[str, Any]
