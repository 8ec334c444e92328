import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list of allowed browser origins
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:8081,http://127.0.0.1:8081,http://localhost:19006',
    ).split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    GAME_CODE_LENGTH = int(os.environ.get('GAME_CODE_LENGTH', '4'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
