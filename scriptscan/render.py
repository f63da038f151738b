"""Plain-text, bilingual rendering of analysis results for chat replies."""
from scriptscan.analysis.request import resolve_language
from scriptscan.constants import LABELS, MSG_HISTORY_DEFAULT_TITLE, MSG_HISTORY_LINE
from scriptscan.prescription import HistoryItem, PrescriptionInfo


def localized(messages: dict[str, str], language: str | None) -> str:
    return messages[resolve_language(language)]


def _section(title: str, body: str | None) -> list[str]:
    match body:
        case None | "":
            return []
        case text:
            return [f"{title}\n{text}", ""]


def _patient_section(info: PrescriptionInfo, labels: dict[str, str]) -> list[str]:
    rows = [
        (labels["name"], info.patient_name),
        (labels["age"], info.patient_age),
        (labels["gender"], info.patient_gender),
        (labels["diagnosis"], info.patient_disease),
    ]
    lines = [f"{label} {value}" for label, value in rows if value]
    match info.diagnosis_explanation:
        case str() as explanation if explanation:
            lines.append(f"{labels['about_diagnosis']}\n{explanation}")
        case _:
            pass
    match lines:
        case []:
            return []
        case _:
            return [labels["patient_section"], *lines, ""]


def _footer(info: PrescriptionInfo, labels: dict[str, str]) -> list[str]:
    rows = [
        (labels["doctor"], info.doctor_name),
        (labels["patient"], info.patient_name),
        (labels["date"], info.date),
    ]
    return [f"{label}: {value}" for label, value in rows if value]


def render_prescription(info: PrescriptionInfo, language: str | None) -> str:
    labels = LABELS[resolve_language(language)]
    lines = [labels["title"], ""]

    match info.is_structured:
        case True:
            lines += _patient_section(info, labels)
            lines += _section(
                labels["medications"],
                "\n".join(f"• {med}" for med in info.medications or []),
            )
            lines += _section(labels["dosage"], info.dosage)
            lines += _section(labels["frequency"], info.frequency)
            lines += _section(labels["duration"], info.duration)
            lines += _section(labels["medication_instructions"], info.medication_instructions)
            lines += _section(labels["special_instructions"], info.special_instructions)
            footer = _footer(info, labels)
            lines += footer + ([""] if footer else [])
        case False:
            pass

    lines += _section(labels["raw_text"], info.raw_text)
    return "\n".join(lines).strip()


def render_history_line(index: int, item: HistoryItem, language: str | None) -> str:
    title = item.title or localized(MSG_HISTORY_DEFAULT_TITLE, language)
    stamp = item.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
    return MSG_HISTORY_LINE % (index, title, stamp)
