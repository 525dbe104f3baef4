"""All magic numbers and configuration constants."""

import os

GOOGLE_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"
GOOGLE_TTS_TIMEOUT = 30.0                    # seconds per synthesis request
AUDIO_ENCODING = "MP3"
SPEAKING_RATE = 1.0
PITCH = 0.0
DEFAULT_LANGUAGE_CODE = "en-US"              # when the voice id carries no region
EDGE_TTS_RATE = "+0%"                        # edge-tts relative speech rate
API_KEY_ENV = "GOOGLE_TTS_API_KEY"
API_KEY_MIN_LENGTH = 21                      # keys of 20 chars or fewer are rejected
CONFIG_ENV = "SCRIPTCAST_CONFIG"
CONFIG_PATH = os.path.join(os.path.expanduser("~"), ".scriptcast", "config.json")
NARRATOR_VOICE = "ko-KR-Standard-A"
SPEAKER_VOICE = "en-US-Standard-A"
PLAYER_ARGS = ("-nodisp", "-autoexit", "-hide_banner", "-loglevel", "error")
OUTPUT_BITRATE = "192k"                      # MP3 export bitrate
RECORDING_PAUSE_MS = 0                       # silence inserted between recorded segments
PREVIEW_TEXT_KO = "안녕하세요, 음성 미리듣기입니다."
PREVIEW_TEXT_EN = "Hello, this is a voice preview."
OUTPUT_DIR = "recordings"
VERSION = "0.1.0"
