from datetime import datetime, timezone

from scriptscan.constants import MSG_NOT_IMAGE
from scriptscan.prescription import HistoryItem, PrescriptionInfo
from scriptscan.render import localized, render_history_line, render_prescription


def full_info() -> PrescriptionInfo:
    return PrescriptionInfo(
        medications=["Amoxicillin 500mg", "Ibuprofen"],
        dosage="1 tablet",
        frequency="3 times a day",
        duration="7 days",
        special_instructions="After food",
        doctor_name="Dr. Rao",
        patient_name="A. Kumar",
        patient_age="42",
        patient_disease="Sinusitis",
        diagnosis_explanation="Inflamed sinuses.",
        medication_instructions="Finish the course.",
        date="2024-03-01",
        raw_text="Rx Amoxicillin...",
    )


def test_localized_falls_back_to_english():
    assert localized(MSG_NOT_IMAGE, None) == MSG_NOT_IMAGE["english"]
    assert localized(MSG_NOT_IMAGE, "HINDI") == MSG_NOT_IMAGE["hindi"]


def test_structured_english_rendering():
    text = render_prescription(full_info(), "english")

    assert text.startswith("Prescription Analysis")
    assert "Patient Information\nName: A. Kumar\nAge: 42\nDiagnosis: Sinusitis" in text
    assert "About this diagnosis:\nInflamed sinuses." in text
    assert "Medications\n• Amoxicillin 500mg\n• Ibuprofen" in text
    assert "Dosage\n1 tablet" in text
    assert "How to Take Your Medicine\nFinish the course." in text
    assert "Special Instructions\nAfter food" in text
    assert "Doctor: Dr. Rao" in text
    assert "Date: 2024-03-01" in text
    assert text.endswith("Raw Text\nRx Amoxicillin...")


def test_missing_gender_row_is_omitted():
    assert "Gender:" not in render_prescription(full_info(), "english")


def test_structured_hindi_rendering():
    text = render_prescription(full_info(), "hindi")

    assert text.startswith("प्रिस्क्रिप्शन विश्लेषण")
    assert "दवाइयाँ\n• Amoxicillin 500mg" in text
    assert "डॉक्टर: Dr. Rao" in text
    assert "Prescription Analysis" not in text


def test_degraded_result_shows_only_raw_text():
    text = render_prescription(PrescriptionInfo.raw("Sorry, I cannot read this image."), "english")
    assert text == "Prescription Analysis\n\nRaw Text\nSorry, I cannot read this image."


def test_empty_raw_text_renders_title_only():
    assert render_prescription(PrescriptionInfo.raw(""), "english") == "Prescription Analysis"


def test_patient_section_needs_patient_fields():
    info = PrescriptionInfo(medications=["Paracetamol"], raw_text="x")
    text = render_prescription(info, "english")
    assert "Patient Information" not in text
    assert "Medications\n• Paracetamol" in text


def test_diagnosis_explanation_alone_opens_patient_section():
    info = PrescriptionInfo(diagnosis_explanation="Mild fever.", raw_text="x")
    text = render_prescription(info, "english")
    assert "Patient Information\nAbout this diagnosis:\nMild fever." in text


def history_item(info: PrescriptionInfo) -> HistoryItem:
    return HistoryItem(
        id="abc",
        timestamp=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
        image="/tmp/abc.jpg",
        prescription_info=info,
    )


def test_history_line_uses_first_medication():
    item = history_item(PrescriptionInfo(medications=["Paracetamol", "Cetirizine"], raw_text="x"))
    stamp = item.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")

    assert render_history_line(1, item, "english") == f"1. Paracetamol — {stamp}"


def test_history_line_default_title():
    item = history_item(PrescriptionInfo.raw("unreadable"))
    assert render_history_line(3, item, "english").startswith("3. Prescription — ")
    assert render_history_line(3, item, "hindi").startswith("3. प्रिस्क्रिप्शन — ")
