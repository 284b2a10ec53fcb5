import os

from wordbomb import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', '3001'))
    socketio.run(app, host=host, port=port, debug=bool(os.environ.get('FLASK_DEBUG')),
                 allow_unsafe_werkzeug=True)
