import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///sequence_memory.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Key holding the JSON-encoded run history
    STATS_STORAGE_KEY = os.environ.get('STATS_STORAGE_KEY', 'stats')
    # Round defaults (what a fresh player sees)
    DEFAULT_SEQUENCE_LENGTH = int(os.environ.get('DEFAULT_SEQUENCE_LENGTH', '6'))
    DEFAULT_MEMORIZE_SEC = int(os.environ.get('DEFAULT_MEMORIZE_SEC', '5'))
    DEFAULT_NUMBER_RANGE = int(os.environ.get('DEFAULT_NUMBER_RANGE', '9'))
    DEFAULT_SPEECH_RATE = float(os.environ.get('DEFAULT_SPEECH_RATE', '1.0'))
    # Control bounds enforced by the HTTP layer
    SEQUENCE_LENGTH_MIN = 1
    SEQUENCE_LENGTH_MAX = 14
    MEMORIZE_SEC_MIN = 5
    MEMORIZE_SEC_MAX = 60
    MEMORIZE_SEC_STEP = 5
    SPEECH_RATE_MIN = 0.1
    SPEECH_RATE_MAX = 3.0
    SPEECH_RATE_STEP = 0.1
    # Countdown tick length (seconds). Only tests should change this.
    TIMER_INTERVAL_SEC = float(os.environ.get('TIMER_INTERVAL_SEC', '1'))
    # Preferred voice language passed to the browser's speech synthesis
    SPEECH_VOICE_LANG = os.environ.get('SPEECH_VOICE_LANG', 'en-US')
