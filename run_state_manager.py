"""
State models supporting the TriPrompt workflow.

Each model serialises to the camelCase layout used by the persisted history and
toolbox files, so records written by older clients load unchanged.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4


def now_ms() -> int:
    """Current time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(slots=True)
class Perspective:
    """A simulated viewpoint used to bias one draft generation call."""

    role: str
    context: str = ""
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def is_active(self) -> bool:
        return bool(self.role.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "role": self.role, "context": self.context}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Perspective":
        return cls(
            id=str(data.get("id", "")),
            role=data.get("role", ""),
            context=data.get("context", ""),
        )


@dataclass(slots=True)
class Draft:
    """One perspective's contribution to a run."""

    perspective_id: str
    perspective_role: str
    content: str
    key_point: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "perspectiveId": self.perspective_id,
            "perspectiveRole": self.perspective_role,
            "content": self.content,
            "keyPoint": self.key_point,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Draft":
        return cls(
            perspective_id=str(data.get("perspectiveId", "")),
            perspective_role=data.get("perspectiveRole", ""),
            content=data.get("content", ""),
            key_point=data.get("keyPoint", ""),
        )


@dataclass(slots=True)
class PromptUpgradeResult:
    """Terminal artifact of a run: the final draft plus the reusable prompt."""

    final_draft: str
    improved_prompt: str
    why_it_is_better: List[str] = field(default_factory=list)
    generalizable_insight: str = ""
    trade_offs_resolved: List[str] = field(default_factory=list)
    drafts: List[Draft] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalDraft": self.final_draft,
            "improvedPrompt": self.improved_prompt,
            "whyItIsBetter": list(self.why_it_is_better),
            "generalizableInsight": self.generalizable_insight,
            "tradeOffsResolved": list(self.trade_offs_resolved),
            "drafts": [draft.to_dict() for draft in self.drafts],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PromptUpgradeResult":
        # tradeOffsResolved is absent from records written before it existed.
        return cls(
            final_draft=data.get("finalDraft", ""),
            improved_prompt=data.get("improvedPrompt", ""),
            why_it_is_better=list(data.get("whyItIsBetter") or []),
            generalizable_insight=data.get("generalizableInsight", ""),
            trade_offs_resolved=list(data.get("tradeOffsResolved") or []),
            drafts=[Draft.from_dict(item) for item in data.get("drafts") or []],
        )


@dataclass(slots=True)
class RunHistoryItem:
    """Persisted record of one completed run."""

    original_goal: str
    perspectives: List[Perspective]
    result: PromptUpgradeResult
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "originalGoal": self.original_goal,
            "perspectives": [p.to_dict() for p in self.perspectives],
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunHistoryItem":
        return cls(
            id=str(data.get("id", "")),
            timestamp=int(data.get("timestamp", 0)),
            original_goal=data.get("originalGoal", ""),
            perspectives=[Perspective.from_dict(p) for p in data.get("perspectives") or []],
            result=PromptUpgradeResult.from_dict(data.get("result") or {}),
        )


@dataclass(slots=True)
class SavedPrompt:
    """Reusable prompt kept in the toolbox."""

    label: str
    content: str
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedPrompt":
        return cls(
            id=str(data.get("id", "")),
            label=data.get("label", ""),
            content=data.get("content", ""),
            timestamp=int(data.get("timestamp", 0)),
        )


def blank_perspectives(count: int = 3, *, stamp: Optional[int] = None) -> List[Perspective]:
    """Empty form slots shown before the user fills in or suggests roles."""
    stamp = now_ms() if stamp is None else stamp
    return [Perspective(id=f"p{idx}-{stamp}", role="", context="") for idx in range(1, count + 1)]
