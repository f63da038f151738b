"""All magic values live here — no inline literals anywhere else."""

# Model endpoint
OPENAI_API_BASE = "https://api.openai.com/v1"
OPENAI_VISION_MODEL = "gpt-4o"
ANALYSIS_MAX_TOKENS = 1500

# Languages
LANG_ENGLISH = "english"
LANG_HINDI = "hindi"

# Image source limits
IMAGE_MIME_PREFIX = "image/"
MAX_IMAGE_BYTES = 5 * 1024 * 1024
PHOTO_MIME_TYPE = "image/jpeg"

# Telegram typing indicator re-send interval (seconds).
# The TYPING action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_TYPING_INTERVAL: float = 4.0
TELEGRAM_MAX_MESSAGE = 4096

# Local storage
DEFAULT_DATA_DIR = ".scriptscan"
SETTINGS_FILENAME = "settings.json"
HISTORY_FILENAME = "history.json"
IMAGES_DIRNAME = "images"
DEFAULT_HISTORY_MAX_ENTRIES = 20

# ── prompts ───────────────────────────────────────────────────────────────────

SYSTEM_PROMPT = (
    "You are a precise medical prescription analyzer. Extract detailed information "
    "from images of prescriptions. Include medications, dosage, frequency, duration, "
    "special instructions, doctor's name, patient's name, patient's age, patient's "
    "gender, patient's disease or diagnosis when visible, and date when visible. Also "
    "provide a brief explanation of what the diagnosis means in layman's terms and "
    "clear instructions on how to take the prescribed medications properly. Format "
    "the response as structured JSON that can be parsed by a program. %s Focus on "
    "accuracy and completeness."
)
SYSTEM_LANGUAGE_CLAUSE = {
    LANG_ENGLISH: "Provide all text output in English language.",
    LANG_HINDI: "Provide all text output in Hindi language.",
}

USER_PROMPT = (
    "Analyze this prescription image and extract all relevant information. Return "
    "the results in JSON format with the following structure: { medications: "
    "string[], dosage: string, frequency: string, duration: string, "
    "specialInstructions: string, doctorName: string, patientName: string, "
    "patientAge: string, patientGender: string, patientDisease: string, "
    "diagnosisExplanation: string, medicationInstructions: string, date: string, "
    "rawText: string }. For diagnosisExplanation, provide a brief, easy-to-understand "
    "explanation of what the diagnosis means. For medicationInstructions, provide "
    "clear instructions on how to take the medications properly, including any "
    "relevant precautions. %s"
)
USER_LANGUAGE_CLAUSE = {
    LANG_ENGLISH: "Provide all text fields in English language.",
    LANG_HINDI: "Provide all text fields in Hindi language.",
}

# ── log messages ──────────────────────────────────────────────────────────────

MSG_BOT_STARTING = "Starting ScriptScan bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_ANALYZING = "Analyzing prescription (%s, %d bytes, %s)"
MSG_MODEL_REPLY = "Model replied with %d characters"
MSG_DEGRADED = "Model reply is not structured JSON (%s); keeping raw text only"
MSG_SUPERSEDED = "Discarding superseded analysis #%d for chat %s"
MSG_SEND_OK = "✓ Sent (%.1fs)"
MSG_SEND_FAIL = "✗ Send failed (%.1fs)"
MSG_API_FAILED = "API request failed with status %d"
MSG_UNEXPECTED_REPLY = "Unexpected response from the API"

# ── commands ──────────────────────────────────────────────────────────────────

CMD_START = "start"
CMD_HELP = "help"
CMD_KEY = "key"
CMD_LANG = "lang"
CMD_HISTORY = "history"
CMD_SHOW = "show"
CMD_CLEAR = "clear"
CMD_STATUS = "status"

# ── user-facing text (english / hindi) ────────────────────────────────────────

MSG_NO_API_KEY = {
    LANG_ENGLISH: "Please set your OpenAI API key first: /key sk-...",
    LANG_HINDI: "कृपया पहले अपनी OpenAI API कुंजी सेट करें: /key sk-...",
}
MSG_KEY_SAVED = {
    LANG_ENGLISH: "API key saved.",
    LANG_HINDI: "API कुंजी सहेजी गई।",
}
MSG_KEY_USAGE = {
    LANG_ENGLISH: "Usage: /key <your OpenAI API key>",
    LANG_HINDI: "उपयोग: /key <आपकी OpenAI API कुंजी>",
}
MSG_NOT_IMAGE = {
    LANG_ENGLISH: "Please upload an image file.",
    LANG_HINDI: "कृपया एक छवि फ़ाइल अपलोड करें।",
}
MSG_IMAGE_TOO_LARGE = {
    LANG_ENGLISH: "File size should be less than 5MB.",
    LANG_HINDI: "फ़ाइल का आकार 5MB से कम होना चाहिए।",
}
MSG_ANALYSIS_FAILED = {
    LANG_ENGLISH: "Failed to analyze prescription. Please try again.\n(%s)",
    LANG_HINDI: "प्रिस्क्रिप्शन का विश्लेषण नहीं हो सका। कृपया पुनः प्रयास करें।\n(%s)",
}
MSG_LANGUAGE_SET = {
    LANG_ENGLISH: "Language set to English.",
    LANG_HINDI: "भाषा हिंदी पर सेट की गई।",
}
MSG_HISTORY_EMPTY = {
    LANG_ENGLISH: "No scans yet — send a photo of a prescription.",
    LANG_HINDI: "अभी तक कोई स्कैन नहीं — प्रिस्क्रिप्शन की फ़ोटो भेजें।",
}
MSG_HISTORY_HEADER = {
    LANG_ENGLISH: "Recent Scans:",
    LANG_HINDI: "हाल के स्कैन:",
}
MSG_HISTORY_LINE = "%d. %s — %s"
MSG_HISTORY_FOOTER = {
    LANG_ENGLISH: "Use /show <number> to open a scan.",
    LANG_HINDI: "किसी स्कैन को खोलने के लिए /show <संख्या> का उपयोग करें।",
}
MSG_HISTORY_DEFAULT_TITLE = {
    LANG_ENGLISH: "Prescription",
    LANG_HINDI: "प्रिस्क्रिप्शन",
}
MSG_SHOW_USAGE = {
    LANG_ENGLISH: "Usage: /show <number from /history>",
    LANG_HINDI: "उपयोग: /show </history से संख्या>",
}
MSG_HISTORY_CLEARED = {
    LANG_ENGLISH: "History cleared.",
    LANG_HINDI: "इतिहास साफ़ किया गया।",
}
MSG_STATUS = {
    LANG_ENGLISH: "Status\n  Language : English\n  API key  : %s\n  History  : %d scans",
    LANG_HINDI: "स्थिति\n  भाषा     : हिंदी\n  API कुंजी : %s\n  इतिहास   : %d स्कैन",
}
MSG_KEY_SET = {
    LANG_ENGLISH: "set",
    LANG_HINDI: "सेट है",
}
MSG_KEY_MISSING = {
    LANG_ENGLISH: "not set",
    LANG_HINDI: "सेट नहीं है",
}
MSG_HELP = {
    LANG_ENGLISH: (
        "ScriptScan — analyze your prescriptions securely\n"
        "\n"
        "Send a photo (or an image file up to 5MB) of a prescription.\n"
        "\n"
        "Commands:\n"
        "  /key <api key>       — save your OpenAI API key\n"
        "  /lang [english|hindi] — switch language (re-analyzes the last scan)\n"
        "  /history             — recent scans\n"
        "  /show <n>            — open a scan from history\n"
        "  /clear               — clear history\n"
        "  /status              — current settings\n"
        "  /help                — show this message\n"
    ),
    LANG_HINDI: (
        "ScriptScan — अपने प्रिस्क्रिप्शन को सुरक्षित रूप से विश्लेषण करें\n"
        "\n"
        "प्रिस्क्रिप्शन की फ़ोटो (या 5MB तक की छवि फ़ाइल) भेजें।\n"
        "\n"
        "कमांड:\n"
        "  /key <api कुंजी>      — अपनी OpenAI API कुंजी सहेजें\n"
        "  /lang [english|hindi] — भाषा बदलें (अंतिम स्कैन का पुनः विश्लेषण)\n"
        "  /history             — हाल के स्कैन\n"
        "  /show <n>            — इतिहास से स्कैन खोलें\n"
        "  /clear               — इतिहास साफ़ करें\n"
        "  /status              — वर्तमान सेटिंग्स\n"
        "  /help                — यह संदेश दिखाएँ\n"
    ),
}

# ── result labels ─────────────────────────────────────────────────────────────

LABELS = {
    LANG_ENGLISH: {
        "title": "Prescription Analysis",
        "patient_section": "Patient Information",
        "name": "Name:",
        "age": "Age:",
        "gender": "Gender:",
        "diagnosis": "Diagnosis:",
        "about_diagnosis": "About this diagnosis:",
        "medications": "Medications",
        "dosage": "Dosage",
        "frequency": "Frequency",
        "duration": "Duration",
        "medication_instructions": "How to Take Your Medicine",
        "special_instructions": "Special Instructions",
        "doctor": "Doctor",
        "patient": "Patient",
        "date": "Date",
        "raw_text": "Raw Text",
    },
    LANG_HINDI: {
        "title": "प्रिस्क्रिप्शन विश्लेषण",
        "patient_section": "रोगी की जानकारी",
        "name": "नाम:",
        "age": "उम्र:",
        "gender": "लिंग:",
        "diagnosis": "निदान:",
        "about_diagnosis": "इस निदान के बारे में:",
        "medications": "दवाइयाँ",
        "dosage": "खुराक",
        "frequency": "आवृत्ति",
        "duration": "अवधि",
        "medication_instructions": "दवा कैसे लें",
        "special_instructions": "विशेष निर्देश",
        "doctor": "डॉक्टर",
        "patient": "रोगी",
        "date": "तारीख",
        "raw_text": "मूल टेक्स्ट",
    },
}
