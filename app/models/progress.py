"""
Descripteur de progression d'une tentative de soumission.
Lu par le frontend (polling) pour afficher la barre de progression.
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional
from enum import Enum


class Stage(str, Enum):
    """Étapes du pipeline, dans l'ordre"""
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING_PRIMARY = "uploading_primary"
    UPLOADING_SECONDARY = "uploading_secondary"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Étapes pendant lesquelles le formulaire est verrouillé
BUSY_STAGES = {
    Stage.VALIDATING,
    Stage.UPLOADING_PRIMARY,
    Stage.UPLOADING_SECONDARY,
    Stage.PERSISTING,
    Stage.NOTIFYING,
}


class ProgressDescriptor(BaseModel):
    stage: Stage = Stage.IDLE
    label: str = ""
    percent: float = 0.0
    error: bool = False
    error_message: Optional[str] = Field(None, alias="errorMessage")
    failed_stage: Optional[Stage] = Field(None, alias="failedStage")
    field_errors: Dict[str, str] = Field(default_factory=dict, alias="fieldErrors")
    record_id: Optional[str] = Field(None, alias="recordId")

    class Config:
        populate_by_name = True

    @property
    def busy(self) -> bool:
        return self.stage in BUSY_STAGES

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
