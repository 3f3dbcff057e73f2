# messages.py
# The two fixed response-language tables used for chat / voice replies.

from typing import Dict

DEFAULT_LANGUAGE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "navigating": "Navigating to {name}. Please follow the route on the map.",
        "did_you_mean": "Did you mean {name}? Say \"yes\" to confirm.",
        "not_found": "Sorry, I could not find that location. Please try again.",
        "help": "Please say where you want to go, for example: Navigate to CSE Block",
        "declined": "Okay, please tell me where you want to go.",
        "cancelled": "Navigation cancelled.",
        "nothing_to_cancel": "There is no active navigation to cancel.",
        "arrived": "You have reached {name}.",
    },
    "ta": {
        "navigating": "{name} க்கு செல்கிறோம். வரைபடத்தில் உள்ள வழியை பின்பற்றவும்.",
        "did_you_mean": "நீங்கள் சொன்னது {name}? உறுதிப்படுத்த \"ஆம்\" என்று சொல்லுங்கள்.",
        "not_found": "மன்னிக்கவும், அந்த இடத்தை கண்டுபிடிக்க முடியவில்லை. மீண்டும் முயற்சிக்கவும்.",
        "help": "எங்கு செல்ல வேண்டும் என்று சொல்லுங்கள், உதாரணம்: சிஎஸ்இ பிளாக்கிற்கு செல்லுங்கள்",
        "declined": "சரி, எங்கு செல்ல வேண்டும் என்று சொல்லுங்கள்.",
        "cancelled": "வழிசெலுத்தல் ரத்து செய்யப்பட்டது.",
        "nothing_to_cancel": "ரத்து செய்ய எந்த வழிசெலுத்தலும் இல்லை.",
        "arrived": "நீங்கள் {name} ஐ அடைந்துவிட்டீர்கள்.",
    },
}


def message(key: str, language: str = DEFAULT_LANGUAGE, **kwargs: str) -> str:
    """Look up and format a reply; unknown languages fall back to English."""
    table = MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
    return table[key].format(**kwargs)
