"""Language-specific configurations."""

LANG_CONFIG = {
    "en": {
        "code": "EN",
        "voice": "en-US-AriaNeural",
        "available_voices": ["en-US-AriaNeural", "en-US-GuyNeural", "en-GB-SoniaNeural"],
    },
    "es": {
        "code": "ES",
        "voice": "es-ES-ElviraNeural",
        "available_voices": ["es-ES-ElviraNeural", "es-ES-AlvaroNeural"],
    },
    "fr": {
        "code": "FR",
        "voice": "fr-FR-DeniseNeural",
        "available_voices": ["fr-FR-DeniseNeural", "fr-FR-HenriNeural"],
    },
    "de": {
        "code": "DE",
        "voice": "de-DE-ConradNeural",
        "available_voices": ["de-DE-ConradNeural", "de-DE-KatjaNeural", "de-DE-KillianNeural"],
    },
    "it": {
        "code": "IT",
        "voice": "it-IT-ElsaNeural",
        "available_voices": ["it-IT-ElsaNeural", "it-IT-DiegoNeural"],
    },
    "pt": {
        "code": "PT",
        "voice": "pt-BR-FranciscaNeural",
        "available_voices": ["pt-BR-FranciscaNeural", "pt-BR-AntonioNeural"],
    },
    "ja": {
        "code": "JA",
        "voice": "ja-JP-NanamiNeural",
        "available_voices": ["ja-JP-NanamiNeural", "ja-JP-KeitaNeural"],
    },
    "ko": {
        "code": "KO",
        "voice": "ko-KR-SunHiNeural",
        "available_voices": ["ko-KR-SunHiNeural", "ko-KR-InJoonNeural"],
    },
    "zh": {
        "code": "ZH",
        "voice": "zh-CN-XiaoxiaoNeural",
        "available_voices": ["zh-CN-XiaoxiaoNeural", "zh-CN-YunxiNeural"],
    },
    "ru": {
        "code": "RU",
        "voice": "ru-RU-SvetlanaNeural",
        "available_voices": ["ru-RU-SvetlanaNeural", "ru-RU-DmitryNeural"],
    },
    "ar": {
        "code": "AR",
        "voice": "ar-SA-ZariyahNeural",
        "available_voices": ["ar-SA-ZariyahNeural", "ar-SA-HamedNeural"],
    },
    "tr": {
        "code": "TR",
        "voice": "tr-TR-EmelNeural",
        "available_voices": ["tr-TR-EmelNeural", "tr-TR-AhmetNeural"],
    },
    "nl": {
        "code": "NL",
        "voice": "nl-NL-ColetteNeural",
        "available_voices": ["nl-NL-ColetteNeural", "nl-NL-MaartenNeural"],
    },
    "vi": {
        "code": "VI",
        "voice": "vi-VN-HoaiMyNeural",
        "available_voices": ["vi-VN-HoaiMyNeural", "vi-VN-NamMinhNeural"],
    },
}


def get_language_code(language: str) -> str:
    """Return the short upper-case label for a language ('vi' -> 'VI')."""
    settings = LANG_CONFIG.get(str(language).lower())
    if settings:
        return settings["code"]
    return str(language).upper()
