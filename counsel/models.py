# SPDX-License-Identifier: AGPL-3.0-only

"""
Pydantic models for the legal assistant.

``StructuredAnswer`` is the contract returned to callers. Attribute names are
snake_case; the wire format uses the camelCase aliases.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field


FLOWCHART_MARKERS = ("flowchart TD", "graph TD")


class StructuredAnswer(BaseModel):
    """Validated answer to one legal question."""
    matter_summary: str = Field(alias="matterSummary", min_length=1, description="Neutral restatement of the user's situation")
    incident_type: str = Field(alias="incidentType", min_length=1, description="Short category label")
    clarifying_questions: List[str] = Field(default_factory=list, alias="clarifyingQuestions", max_length=4, description="Questions for missing facts")
    conditional_guidance: str = Field(alias="conditionalGuidance", min_length=1, description="Guidance conditional on the facts so far")
    legal_pathways: List[str] = Field(alias="legalPathways", min_length=1, description="Possible next steps")
    flowchart: str = Field(min_length=1, description="Mermaid decision-flow diagram")
    disclaimer: str = Field(min_length=1, description="Legal disclaimer text")

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dictionary sent to clients."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StructuredAnswer':
        """Create from a validated reply dictionary; unknown keys are ignored."""
        return cls.model_validate(data)

