import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list of origins allowed to open sockets / call the API
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://localhost:8080,http://localhost:8081',
        ).split(',') if o.strip()
    ]
    # Room capacity and lobby rules
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '8'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    INITIAL_LIVES = int(os.environ.get('INITIAL_LIVES', '3'))
    # Turn deadline (seconds): shrinks by one every TIMER_STEP_WORDS accepted words
    INITIAL_TIMER_SEC = int(os.environ.get('INITIAL_TIMER_SEC', '10'))
    MIN_TIMER_SEC = int(os.environ.get('MIN_TIMER_SEC', '5'))
    TIMER_STEP_WORDS = int(os.environ.get('TIMER_STEP_WORDS', '5'))
    # Optional minimum word length. 0 disables the rule.
    MIN_WORD_LENGTH = int(os.environ.get('MIN_WORD_LENGTH', '0'))
    # Countdown tick interval (seconds)
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    # Optional: newline separated word list replacing the bundled lexicon
    LEXICON_PATH = os.environ.get('LEXICON_PATH')
