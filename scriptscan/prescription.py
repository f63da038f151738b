"""Domain records: the analysis result and the history entry that wraps it."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PrescriptionInfo(BaseModel):
    """Fields extracted from one prescription image.

    Wire names are camelCase (that is the JSON shape the model is asked for);
    attributes are snake_case. Only ``raw_text`` is guaranteed to be set.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    medications: Optional[list[str]] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    special_instructions: Optional[str] = Field(None, alias="specialInstructions")
    doctor_name: Optional[str] = Field(None, alias="doctorName")
    patient_name: Optional[str] = Field(None, alias="patientName")
    patient_age: Optional[str] = Field(None, alias="patientAge")
    patient_gender: Optional[str] = Field(None, alias="patientGender")
    patient_disease: Optional[str] = Field(None, alias="patientDisease")
    diagnosis_explanation: Optional[str] = Field(None, alias="diagnosisExplanation")
    medication_instructions: Optional[str] = Field(None, alias="medicationInstructions")
    date: Optional[str] = None
    raw_text: Optional[str] = Field(None, alias="rawText")

    @classmethod
    def raw(cls, text: str) -> "PrescriptionInfo":
        """The degraded result: nothing but the model's unprocessed reply."""
        return cls(raw_text=text)

    @property
    def is_structured(self) -> bool:
        return any(
            value is not None
            for name, value in self
            if name != "raw_text"
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class HistoryItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: datetime
    image: str
    prescription_info: PrescriptionInfo = Field(alias="prescriptionInfo")

    @property
    def title(self) -> Optional[str]:
        meds = self.prescription_info.medications or []
        return meds[0] if meds else None
